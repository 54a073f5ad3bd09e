from ftmsim.config import DEFAULT_ACCEL_OVERSHOOT
from ftmsim.types import TrajectoryKind, coerce_trajectory

from .base import TrajectoryGenerator
from .sextic import SexticSegment, SexticTrajectory, sextic_profile
from .trapezoidal import TrapezoidalTrajectory, trapezoidal_profile


def get_generator(
    kind: TrajectoryKind | str,
    dt: float,
    acceleration_overshoot: float = DEFAULT_ACCEL_OVERSHOOT,
) -> TrajectoryGenerator:
    """Generator instance for the given trajectory kind."""
    kind = coerce_trajectory(kind)
    if kind is TrajectoryKind.SEXTIC:
        return SexticTrajectory(dt, acceleration_overshoot)
    return TrapezoidalTrajectory(dt)


__all__ = [
    "TrajectoryGenerator",
    "TrapezoidalTrajectory",
    "SexticTrajectory",
    "SexticSegment",
    "get_generator",
    "trapezoidal_profile",
    "sextic_profile",
]
