"""
ftmsim Python Package

Offline simulator for a printer firmware's fixed-time motion planner:
trapezoidal and sextic ("6-poly") move generation, axis smoothing and
linear advance compositing of the resulting extruder motion.

Key components:
- MotionParameters: One move plus its post-processing settings
- assemble: Build the extruder Profile (position, velocity, acceleration)
- composite / extruder_traces: Linear advance variants of a Profile
- smooth_axis: Cascaded low-pass axis smoothing filter
- get_generator: Trapezoidal or sextic trajectory generator by kind
"""

from ._version import __version__
from .filters.advance import apply_advance, composite, extruder_traces, simulate_nozzle_lag
from .filters.smoothing import FilterState, smooth_axis
from .profile import assemble, calculate_motion_profile, filament_per_travel, move_timings
from .smooth_motion import get_generator, sextic_profile, trapezoidal_profile
from .types import (
    AdvanceMode,
    ExtruderTraces,
    MotionParameters,
    PhaseTimings,
    Profile,
    SexticCoefficients,
    TrajectoryKind,
)
from .utils.errors import InvalidParameter, ProfileTooLarge
from .utils.trajectory import derivative, phase_timings

__all__ = [
    "__version__",
    "MotionParameters",
    "TrajectoryKind",
    "AdvanceMode",
    "PhaseTimings",
    "SexticCoefficients",
    "Profile",
    "ExtruderTraces",
    "InvalidParameter",
    "ProfileTooLarge",
    "assemble",
    "calculate_motion_profile",
    "filament_per_travel",
    "move_timings",
    "get_generator",
    "trapezoidal_profile",
    "sextic_profile",
    "phase_timings",
    "derivative",
    "FilterState",
    "smooth_axis",
    "apply_advance",
    "simulate_nozzle_lag",
    "composite",
    "extruder_traces",
]
