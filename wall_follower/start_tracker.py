#!/usr/bin/env python3
"""
Lap completion detection from odometry.

The tracker records where the robot started, waits until it has moved
more than a threshold away, and reports a single "near start" pulse when
it comes back inside that threshold. Requiring the departure first stops
the robot from claiming a finished lap before it has left the start.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .geometry_utils import chebyshev_distance


class ProximityPhase(Enum):
    """Phases of one lap, always visited in this order."""
    AWAITING_DEPARTURE = auto()  # Still close to the recorded start
    DEPARTED = auto()            # Left the start area, watching for the return
    ARRIVED = auto()             # Back near the start, pulse fires


@dataclass
class StartProximityState:
    """Where the current lap started and how far through it the robot is."""
    phase: ProximityPhase
    start_x: float
    start_y: float


class StartProximityTracker:
    """Raises a one-shot pulse when the robot returns to its start point."""

    START_RANGE = 0.2  # meters, per axis

    def __init__(self, threshold: float = START_RANGE, rearm_at_arrival: bool = True):
        """
        Args:
            threshold: Per-axis distance that counts as leaving or reaching the start
            rearm_at_arrival: If True the arrival point becomes the next lap's
                start; if False the original start point is kept
        """
        if threshold <= 0.0:
            raise ValueError(f'threshold must be positive, got {threshold}')
        self.threshold = float(threshold)
        self.rearm_at_arrival = rearm_at_arrival
        self.state: Optional[StartProximityState] = None
        self.laps = 0

    def update(self, x: float, y: float) -> bool:
        """
        Feed one pose sample.

        Args:
            x: Robot x position
            y: Robot y position

        Returns:
            bool: True only for the sample at which the robot arrives back
        """
        if self.state is None:
            self.state = StartProximityState(ProximityPhase.AWAITING_DEPARTURE, x, y)
            return False

        distance = chebyshev_distance(x, y, self.state.start_x, self.state.start_y)

        if self.state.phase is ProximityPhase.AWAITING_DEPARTURE:
            if distance > self.threshold:
                self.state.phase = ProximityPhase.DEPARTED
            return False

        if distance < self.threshold:
            self.state.phase = ProximityPhase.ARRIVED
            self.laps += 1
            self._rearm(x, y)
            return True

        return False

    def _rearm(self, x: float, y: float):
        if self.rearm_at_arrival:
            self.state = StartProximityState(ProximityPhase.AWAITING_DEPARTURE, x, y)
        else:
            self.state.phase = ProximityPhase.AWAITING_DEPARTURE
