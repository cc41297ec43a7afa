#!/usr/bin/env python3
"""
Geometry utility functions for pose handling.

Quaternion to Euler conversion and the planar distance measure used by
the start-proximity tracker.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass
class Pose2D:
    """Pose in the odometry frame (meters, radians)."""
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0


def quaternion_to_euler(qx: float, qy: float, qz: float, qw: float) -> Tuple[float, float, float]:
    """
    Convert a quaternion to roll, pitch and yaw.

    Args:
        qx, qy, qz, qw: Quaternion components

    Returns:
        (roll, pitch, yaw) in radians
    """
    # Roll (rotation about x)
    sinr_cosp = 2.0 * (qw * qx + qy * qz)
    cosr_cosp = 1.0 - 2.0 * (qx * qx + qy * qy)
    roll = math.atan2(sinr_cosp, cosr_cosp)

    # Pitch (rotation about y), clamped at the gimbal lock singularity
    sinp = 2.0 * (qw * qy - qz * qx)
    sinp = max(-1.0, min(1.0, sinp))
    pitch = math.asin(sinp)

    # Yaw (rotation about z)
    yaw = math.atan2(
        2.0 * (qw * qz + qx * qy),
        1.0 - 2.0 * (qy * qy + qz * qz)
    )

    return roll, pitch, yaw


def pose_from_odometry(x: float, y: float, orientation: Sequence[float]) -> Pose2D:
    """Build a planar pose from a position and an (x, y, z, w) quaternion."""
    _, _, yaw = quaternion_to_euler(*orientation)
    return Pose2D(x=x, y=y, yaw=yaw)


def chebyshev_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Largest per-axis offset between two points."""
    return max(abs(x1 - x2), abs(y1 - y2))
