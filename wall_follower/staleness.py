#!/usr/bin/env python3
"""
Velocity decay for stale scan data.

Every control tick without a new scan multiplies the commanded velocity
by another factor of base_factor, so the robot slows smoothly to a stop
when the LiDAR goes quiet instead of driving on old clearances.
"""


class StalenessModulator:
    """Counts ticks since the last fresh scan and turns that into a speed factor."""

    BASE_FACTOR = 0.8

    def __init__(self, base_factor: float = BASE_FACTOR):
        if not 0.0 < base_factor <= 1.0:
            raise ValueError(f'base_factor must be in (0, 1], got {base_factor}')
        self.base_factor = float(base_factor)
        self.since_new_scan = 0
        self.new_scan_data = False

    def notify_fresh_scan(self):
        """Record that new sector clearances are available."""
        self.new_scan_data = True
        self.since_new_scan = 0

    def tick(self) -> float:
        """
        Advance one control period.

        Returns:
            float: base_factor ** (ticks since the last fresh scan)
        """
        if self.new_scan_data:
            self.new_scan_data = False
            self.since_new_scan = 0
        else:
            self.since_new_scan += 1
        return self.factor

    @property
    def factor(self) -> float:
        return self.base_factor ** self.since_new_scan
