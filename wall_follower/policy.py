#!/usr/bin/env python3
"""
Rule ladder for left-hand wall following.

The policy is an ordered list of rules. Each rule pairs a predicate over
the sector clearances and the near-start pulse with a velocity command;
the first rule whose predicate holds decides the command. Several
predicates overlap (for example "left front open" appears twice with
different thresholds), so the order is part of the policy.
"""

from collections import namedtuple
from typing import List, Sequence

from .sectors import Sector


class VelocityCommand(namedtuple('VelocityCommand', ['linear', 'angular'])):
    """Planar velocity command (m/s, rad/s, positive angular turns left)."""

    __slots__ = ()

    def scaled(self, factor: float) -> 'VelocityCommand':
        return VelocityCommand(self.linear * factor, self.angular * factor)


# predicate(clearances, near_start) -> bool
Rule = namedtuple('Rule', ['name', 'predicate', 'command', 'description'])

Decision = namedtuple('Decision', ['rule', 'command'])


class DecisionPolicy:
    """Maps sector clearances and the near-start pulse to a velocity command."""

    # Clearance thresholds (meters)
    LEFT_FRONT_OPEN = 0.9     # Wall has receded on the left, turn back towards it
    FRONT_BLOCKED = 0.7       # Obstacle ahead, rotate away in place
    FRONT_LEFT_NEAR = 0.6     # Drifting into the left wall
    FRONT_RIGHT_NEAR = 0.6    # Drifting into the right wall
    LEFT_FRONT_DRIFT = 0.6    # Wall slightly too far, correct left

    # Velocities
    LINEAR_VELOCITY = 0.3
    TURN_LINEAR_VELOCITY = 0.2
    ANGULAR_VELOCITY = 1.5

    def __init__(
        self,
        left_front_open: float = LEFT_FRONT_OPEN,
        front_blocked: float = FRONT_BLOCKED,
        front_left_near: float = FRONT_LEFT_NEAR,
        front_right_near: float = FRONT_RIGHT_NEAR,
        left_front_drift: float = LEFT_FRONT_DRIFT,
        linear_velocity: float = LINEAR_VELOCITY,
        turn_linear_velocity: float = TURN_LINEAR_VELOCITY,
        angular_velocity: float = ANGULAR_VELOCITY,
    ):
        self.left_front_open = left_front_open
        self.front_blocked = front_blocked
        self.front_left_near = front_left_near
        self.front_right_near = front_right_near
        self.left_front_drift = left_front_drift
        self.linear_velocity = linear_velocity
        self.turn_linear_velocity = turn_linear_velocity
        self.angular_velocity = angular_velocity

        self.rules: List[Rule] = self.build_rules()

    def build_rules(self) -> List[Rule]:
        """Build the ladder from the configured thresholds, highest priority first."""
        v = self.linear_velocity
        w = self.angular_velocity

        def always(clearances, near_start):
            return True

        return [
            Rule(
                'near_start',
                lambda c, near_start: near_start,
                VelocityCommand(0.0, 0.0),
                'Near start detected, stopping the robot',
            ),
            Rule(
                'left_front_open',
                lambda c, near_start: c[Sector.LEFT_FRONT] > self.left_front_open,
                VelocityCommand(self.turn_linear_velocity, w),
                'Left front clear, turning left',
            ),
            Rule(
                'front_blocked',
                lambda c, near_start: c[Sector.FRONT] < self.front_blocked,
                VelocityCommand(0.0, -w),
                'Obstacle ahead, turning right',
            ),
            Rule(
                'front_left_near',
                lambda c, near_start: c[Sector.FRONT_LEFT] < self.front_left_near,
                VelocityCommand(v, -w),
                'Front left obstacle, turning right',
            ),
            Rule(
                'front_right_near',
                lambda c, near_start: c[Sector.FRONT_RIGHT] < self.front_right_near,
                VelocityCommand(v, w),
                'Front right obstacle, turning left',
            ),
            Rule(
                'left_front_drift',
                lambda c, near_start: c[Sector.LEFT_FRONT] > self.left_front_drift,
                VelocityCommand(v, w),
                'Left front clear, moving forward with slight left turn',
            ),
            Rule(
                'path_clear',
                always,
                VelocityCommand(v, 0.0),
                'Path clear, moving forward',
            ),
        ]

    def decide(self, clearances: Sequence[float], near_start: bool = False) -> Decision:
        """
        Evaluate the ladder top to bottom and return the first match.

        Args:
            clearances: Sector clearances indexed by Sector
            near_start: True if the near-start pulse is active this cycle

        Returns:
            Decision: (rule, command) for the matching rule
        """
        if len(clearances) < len(Sector):
            raise ValueError(f'Expected {len(Sector)} clearances, got {len(clearances)}')

        for rule in self.rules:
            if rule.predicate(clearances, near_start):
                return Decision(rule, rule.command)

        # The last rule always matches
        raise RuntimeError('Rule ladder has no default rule')
