"""
Type definitions for ftmsim.

Defines enums, TypedDicts, and dataclasses shared by the generators,
filters and the profile assembler.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TypedDict

import numpy as np

from ftmsim.config import (
    DEFAULT_ACCEL_OVERSHOOT,
    DEFAULT_LAYER_HEIGHT_MM,
    DEFAULT_LINE_WIDTH_MM,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_SMOOTHING_ORDER,
)
from ftmsim.utils.errors import InvalidParameter


class TrajectoryKind(Enum):
    """Trajectory law used to plan a move."""
    TRAPEZOIDAL = "trapezoidal"
    SEXTIC = "6poly"


class AdvanceMode(Enum):
    """Linear advance compositing strategy."""
    DIRECT = "direct"  # position + k * velocity, re-differentiated
    LAG = "lag"        # exponential lag with tau = k


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidParameter(f"{field_name} must be one of: {choices} (got {value!r})") from None


def coerce_trajectory(value) -> TrajectoryKind:
    return _coerce_enum(TrajectoryKind, value, "trajectory")


def coerce_advance_mode(value) -> AdvanceMode:
    return _coerce_enum(AdvanceMode, value, "advance mode")


def require_positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float, np.floating, np.integer)) or not math.isfinite(value):
        raise InvalidParameter(f"{name} must be a finite number, got {value!r}")
    if value <= 0:
        raise InvalidParameter(f"{name} must be > 0, got {value}")


def require_non_negative(name: str, value: float) -> None:
    if not isinstance(value, (int, float, np.floating, np.integer)) or not math.isfinite(value):
        raise InvalidParameter(f"{name} must be a finite number, got {value!r}")
    if value < 0:
        raise InvalidParameter(f"{name} must be >= 0, got {value}")


def require_order(order) -> None:
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)) or order <= 0:
        raise InvalidParameter(f"smoothing order must be a positive integer, got {order!r}")


@dataclass(frozen=True)
class MotionParameters:
    """
    One single-axis move plus the post-processing settings applied to it.

    Units: distance/line_width/layer_height in mm, rate in mm/s,
    acceleration in mm/s², advance_k and smoothing_time in s, sample_rate in Hz.
    """
    distance: float
    rate: float
    acceleration: float
    trajectory: TrajectoryKind = TrajectoryKind.TRAPEZOIDAL
    acceleration_overshoot: float = DEFAULT_ACCEL_OVERSHOOT
    advance_k: float = 0.0
    line_width: float = DEFAULT_LINE_WIDTH_MM
    layer_height: float = DEFAULT_LAYER_HEIGHT_MM
    sample_rate: float = DEFAULT_SAMPLE_RATE_HZ
    smoothing_time: float = 0.0
    smoothing_order: int = DEFAULT_SMOOTHING_ORDER

    def __post_init__(self):
        object.__setattr__(self, "trajectory", coerce_trajectory(self.trajectory))

    @property
    def dt(self) -> float:
        return 1.0 / self.sample_rate

    def validate(self) -> "MotionParameters":
        """Raise InvalidParameter for any out-of-range field; return self otherwise."""
        require_non_negative("distance", self.distance)
        require_positive("rate", self.rate)
        require_positive("acceleration", self.acceleration)
        require_positive("sample_rate", self.sample_rate)
        require_order(self.smoothing_order)
        require_non_negative("smoothing_time", self.smoothing_time)
        require_non_negative("advance_k", self.advance_k)
        require_positive("line_width", self.line_width)
        require_positive("layer_height", self.layer_height)
        if self.trajectory is TrajectoryKind.SEXTIC:
            require_positive("acceleration_overshoot", self.acceleration_overshoot)
        return self


@dataclass(frozen=True)
class PhaseTimings:
    """Accel/cruise/decel durations (s) and the speeds (mm/s) at the phase boundaries."""
    t1: float
    t2: float
    t3: float
    nominal_speed: float
    initial_speed: float = 0.0
    final_speed: float = 0.0

    @property
    def total(self) -> float:
        return self.t1 + self.t2 + self.t3

    @property
    def triangular(self) -> bool:
        return self.t2 == 0.0

    @property
    def pos_before_coast(self) -> float:
        return 0.5 * (self.initial_speed + self.nominal_speed) * self.t1

    @property
    def pos_after_coast(self) -> float:
        return self.pos_before_coast + self.nominal_speed * self.t2

    @property
    def end_position(self) -> float:
        return self.pos_after_coast + 0.5 * (self.nominal_speed + self.final_speed) * self.t3


@dataclass(frozen=True)
class SexticCoefficients:
    """Normalized-time coefficients of s(u) = s0 + v0*Ts*u + c3u³ + c4u⁴ + c5u⁵ + c6*K(u)."""
    c3: float = 0.0
    c4: float = 0.0
    c5: float = 0.0
    c6: float = 0.0


@dataclass(frozen=True, eq=False)
class Profile:
    """
    Position/velocity/acceleration traces sampled at a uniform timestep.

    Arrays are stored read-only; derive a new Profile instead of editing one.
    """
    position: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    dt: float

    def __post_init__(self):
        arrays = []
        for name in ("position", "velocity", "acceleration"):
            arr = np.array(getattr(self, name), dtype=float)
            if arr.ndim != 1:
                raise ValueError(f"{name} must be one-dimensional")
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
            arrays.append(arr)
        if not (len(arrays[0]) == len(arrays[1]) == len(arrays[2])):
            raise ValueError(
                "position, velocity and acceleration must have equal length "
                f"(got {len(arrays[0])}, {len(arrays[1])}, {len(arrays[2])})"
            )

    def __eq__(self, other):
        if not isinstance(other, Profile):
            return NotImplemented
        return (
            self.dt == other.dt
            and np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
            and np.array_equal(self.acceleration, other.acceleration)
        )

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.position)

    @property
    def time(self) -> np.ndarray:
        return np.arange(len(self.position)) * self.dt


@dataclass(frozen=True)
class ExtruderTraces:
    """Planned extruder motion alongside its linear-advance variants."""
    planned: Profile
    with_advance: Profile
    effective: Profile

    # Profiles hold arrays and are unhashable
    __hash__ = None  # type: ignore[assignment]

    def as_dict(self) -> dict[str, Profile]:
        return {
            "planned": self.planned,
            "with_advance": self.with_advance,
            "effective": self.effective,
        }


class TraceExtents(TypedDict):
    """Min/max of one trace (position, velocity or acceleration)."""
    min: float
    max: float
