#!/usr/bin/env python3
"""
LiDAR sector reduction for the wall follower.

A full 360 degree laser sweep is reduced to one clearance per bearing:
the closest return inside a beam centred on that bearing. Bearings are
spaced evenly starting at the robot's forward axis and increase
counter-clockwise, so index 1 is front-left and the last index is
front-right.
"""

from enum import IntEnum
from typing import Sequence

import numpy as np


class InputError(ValueError):
    """Raised when a scan cannot be reduced to sector clearances."""


class Sector(IntEnum):
    """Named bearings, 30 degrees apart, counter-clockwise from the front."""
    FRONT = 0
    FRONT_LEFT = 1
    LEFT_FRONT = 2
    LEFT = 3
    LEFT_BACK = 4
    BACK_LEFT = 5
    BACK = 6
    BACK_RIGHT = 7
    RIGHT_BACK = 8
    RIGHT = 9
    RIGHT_FRONT = 10
    FRONT_RIGHT = 11


class SectorAggregator:
    """Reduces a dense range array to a small set of directional clearances."""

    BEAM_WIDTH_DEG = 10          # Half-width of the window around each bearing
    NUM_SECTORS = len(Sector)    # 12 bearings, 30 degrees apart
    MIN_SAMPLES = 360            # At least one sample per degree

    def __init__(self, beam_width_deg: int = BEAM_WIDTH_DEG, num_sectors: int = NUM_SECTORS):
        if num_sectors <= 0 or 360 % num_sectors != 0:
            raise ValueError(f'num_sectors must evenly divide 360, got {num_sectors}')
        spacing = 360 // num_sectors
        if beam_width_deg <= 0 or 2 * beam_width_deg > 360:
            raise ValueError(f'beam_width_deg out of range: {beam_width_deg}')

        self.beam_width_deg = int(beam_width_deg)
        self.num_sectors = int(num_sectors)
        self.bearings_deg = [i * spacing for i in range(self.num_sectors)]

    def sector_windows(self, num_samples: int):
        """
        Sample indices covered by each bearing's beam.

        Each window is the half-open interval [bearing - W, bearing + W)
        scaled to the scan resolution and taken modulo the scan length, so
        the forward window is the last W and first W degrees of the sweep.

        Args:
            num_samples: Length of the scan

        Returns:
            list of np.ndarray, one index array per bearing
        """
        per_degree = num_samples / 360.0
        half = max(1, int(round(self.beam_width_deg * per_degree)))
        windows = []
        for bearing in self.bearings_deg:
            centre = int(round(bearing * per_degree))
            windows.append(np.arange(centre - half, centre + half) % num_samples)
        return windows

    def aggregate(self, ranges: Sequence[float], range_max: float) -> np.ndarray:
        """
        Reduce one scan to sector clearances.

        NaN and negative samples are ignored; anything at or beyond
        range_max (including inf) counts as clear.

        Args:
            ranges: N range samples covering 360 degrees, index 0 forward
            range_max: Sensor maximum range, used when a beam has no return

        Returns:
            np.ndarray: Read-only array of num_sectors clearances in [0, range_max]

        Raises:
            InputError: If the scan is too short or range_max is invalid
        """
        if range_max is None or not np.isfinite(range_max) or range_max <= 0.0:
            raise InputError(f'Invalid range_max: {range_max}')

        scan = np.asarray(ranges, dtype=float)
        if scan.ndim != 1:
            raise InputError(f'Expected a flat range array, got shape {scan.shape}')
        if scan.size < self.MIN_SAMPLES:
            raise InputError(
                f'Scan has {scan.size} samples, at least {self.MIN_SAMPLES} are required'
            )

        # Invalid samples become range_max so they never win the minimum
        valid = np.isfinite(scan) & (scan >= 0.0)
        cleaned = np.where(valid, np.minimum(scan, range_max), range_max)

        clearances = np.array(
            [cleaned[window].min() for window in self.sector_windows(scan.size)]
        )
        clearances.flags.writeable = False
        return clearances
