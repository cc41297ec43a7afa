#!/usr/bin/env python3
"""
Control loop glue for the wall follower.

ControlLoopDriver owns the cached perception state shared between the
sensor callbacks and the periodic update:

    on_scan  -> SectorAggregator -> clearances, StalenessModulator reset
    on_pose  -> StartProximityTracker -> near-start pulse
    tick     -> StalenessModulator factor x DecisionPolicy -> emit_velocity

Callbacks may arrive on a different thread than the tick, so every read
and write of the cached state happens under one lock. emit_velocity is
called outside the lock.
"""

import threading
from collections import namedtuple
from typing import Callable, Optional, Sequence

import numpy as np

from .geometry_utils import Pose2D, pose_from_odometry
from .policy import DecisionPolicy
from .sectors import Sector, SectorAggregator
from .staleness import StalenessModulator
from .start_tracker import StartProximityTracker

# One completed control cycle: the matched rule, the decay factor and the
# command actually emitted.
TickResult = namedtuple('TickResult', ['rule', 'factor', 'command'])


class ControlLoopDriver:
    """Runs one decision per tick from the latest scan and pose."""

    def __init__(
        self,
        emit_velocity: Callable[[float, float], None],
        aggregator: Optional[SectorAggregator] = None,
        tracker: Optional[StartProximityTracker] = None,
        modulator: Optional[StalenessModulator] = None,
        policy: Optional[DecisionPolicy] = None,
    ):
        self.emit_velocity = emit_velocity
        self.aggregator = aggregator or SectorAggregator()
        self.tracker = tracker or StartProximityTracker()
        self.modulator = modulator or StalenessModulator()
        self.policy = policy or DecisionPolicy()

        # The rule ladder reads clearances by Sector index, i.e. 30 degree bearings
        if self.aggregator.num_sectors != len(Sector):
            raise ValueError(
                f'Policy needs exactly {len(Sector)} sectors, '
                f'aggregator has {self.aggregator.num_sectors}'
            )

        self._lock = threading.Lock()
        self._clearances = np.zeros(self.aggregator.num_sectors)
        self._initial_scan = False
        self._near_start = False
        self._pose = Pose2D()

    # ========================================================================
    # INPUTS
    # ========================================================================

    def on_scan(self, ranges: Sequence[float], range_max: float) -> np.ndarray:
        """
        Reduce a new scan and mark the clearances fresh.

        Raises:
            InputError: The scan was rejected; cached clearances and the
                staleness counter are left untouched
        """
        clearances = self.aggregator.aggregate(ranges, range_max)

        with self._lock:
            self._clearances = clearances
            self._initial_scan = True
            self.modulator.notify_fresh_scan()

        return clearances

    def on_pose(self, x: float, y: float, orientation: Sequence[float]):
        """
        Update the pose and the start-proximity tracker.

        Args:
            x, y: Position in the odometry frame
            orientation: Quaternion as (x, y, z, w)

        Returns:
            (Pose2D, bool): The planar pose and whether the robot just
            arrived back at its start
        """
        pose = pose_from_odometry(x, y, orientation)

        with self._lock:
            self._pose = pose
            arrived = self.tracker.update(x, y)
            if arrived:
                self._near_start = True

        return pose, arrived

    # ========================================================================
    # PERIODIC UPDATE
    # ========================================================================

    def tick(self) -> Optional[TickResult]:
        """
        Run one control cycle.

        Returns:
            TickResult, or None if no scan has been received yet (nothing
            is emitted in that case)
        """
        with self._lock:
            if not self._initial_scan:
                return None

            factor = self.modulator.tick()
            clearances = self._clearances
            # The pulse is seen by exactly one decision
            near_start = self._near_start
            self._near_start = False

        decision = self.policy.decide(clearances, near_start)
        command = decision.command.scaled(factor)
        self.emit_velocity(command.linear, command.angular)

        return TickResult(decision.rule, factor, command)

    def stop(self):
        """Emit a zero command regardless of state."""
        self.emit_velocity(0.0, 0.0)

    # ========================================================================
    # SNAPSHOTS
    # ========================================================================

    @property
    def clearances(self) -> np.ndarray:
        with self._lock:
            return self._clearances

    @property
    def pose(self) -> Pose2D:
        with self._lock:
            return self._pose

    @property
    def has_scan(self) -> bool:
        with self._lock:
            return self._initial_scan

    @property
    def since_new_scan(self) -> int:
        with self._lock:
            return self.modulator.since_new_scan

    @property
    def near_start_pending(self) -> bool:
        with self._lock:
            return self._near_start

    @property
    def laps(self) -> int:
        with self._lock:
            return self.tracker.laps
