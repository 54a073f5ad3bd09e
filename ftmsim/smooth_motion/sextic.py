"""
Sextic ("6-poly") polynomial segments and the sextic trajectory generator.
"""

import logging

import numpy as np

from ftmsim.config import DEFAULT_ACCEL_OVERSHOOT
from ftmsim.types import PhaseTimings, SexticCoefficients, TrajectoryKind, require_positive

from .base import TrajectoryGenerator

logger = logging.getLogger(__name__)


def bump(u):
    """K(u) = u³(1-u)³; zero with its first two derivatives at u=0 and u=1."""
    um1 = 1.0 - u
    return u * u * u * (um1 * um1 * um1)


def bump_pp(u):
    """K''(u) = 6u - 36u² + 60u³ - 30u⁴."""
    return 6.0 * u - 36.0 * u**2 + 60.0 * u**3 - 30.0 * u**4


# K''(0.5) evaluates to -0.375
BUMP_PP_MID: float = bump_pp(0.5)


class SexticSegment:
    """
    Single accel or decel phase following a sextic position law.

    In normalized time u = t/Ts the position is a quintic that matches
    position and velocity at both phase boundaries, plus a c6*K(u) term that
    leaves those boundary conditions untouched. c6 is chosen so the
    acceleration at u = 0.5 equals ``mid_acceleration``.
    """

    def __init__(
        self,
        s0: float,
        v0: float,
        s1: float,
        v1: float,
        duration: float,
        mid_acceleration: float,
    ):
        """
        Args:
            s0, v0: Position and velocity at the start of the phase
            s1, v1: Position and velocity at the end of the phase
            duration: Phase length Ts in seconds (0 gives an empty segment)
            mid_acceleration: Target acceleration at the phase midpoint (mm/s²)
        """
        self.s0 = float(s0)
        self.v0 = float(v0)
        self.s1 = float(s1)
        self.v1 = float(v1)
        self.duration = float(duration)
        self.mid_acceleration = float(mid_acceleration)
        self.coeffs = self._solve_coefficients()

    def _solve_coefficients(self) -> SexticCoefficients:
        ts = self.duration
        if ts <= 0.0:
            return SexticCoefficients()

        delta_p = self.s1 - self.s0 - self.v0 * ts
        delta_v = (self.v1 - self.v0) * ts
        c3 = 10.0 * delta_p - 4.0 * delta_v
        c4 = -15.0 * delta_p + 7.0 * delta_v
        c5 = 6.0 * delta_p - 3.0 * delta_v

        a5_mid = self._quintic_pp(c3, c4, c5, 0.5) / (ts * ts)
        c6 = ts * ts * (self.mid_acceleration - a5_mid) / BUMP_PP_MID
        return SexticCoefficients(c3=c3, c4=c4, c5=c5, c6=c6)

    @staticmethod
    def _quintic_pp(c3: float, c4: float, c5: float, u):
        # d²/du² (c3 u³ + c4 u⁴ + c5 u⁵)
        return 6.0 * c3 * u + 12.0 * c4 * u * u + 20.0 * c5 * u * u * u

    def position_u(self, u):
        """Position at normalized time u in [0, 1]."""
        c = self.coeffs
        u2 = u * u
        u3 = u2 * u
        return (
            self.s0
            + self.v0 * self.duration * u
            + c.c3 * u3
            + c.c4 * u3 * u
            + c.c5 * u3 * u2
            + c.c6 * bump(u)
        )

    def position(self, t):
        """Position at time t (s) measured from the start of the phase."""
        if self.duration <= 0.0:
            return np.full_like(np.asarray(t, dtype=float), self.s0)
        return self.position_u(np.asarray(t, dtype=float) / self.duration)

    def acceleration_u(self, u):
        """Physical acceleration (mm/s²) at normalized time u."""
        if self.duration <= 0.0:
            return np.zeros_like(np.asarray(u, dtype=float))
        c = self.coeffs
        pp = self._quintic_pp(c.c3, c.c4, c.c5, u) + c.c6 * bump_pp(u)
        return pp / (self.duration * self.duration)


class SexticTrajectory(TrajectoryGenerator):
    """
    Accel and decel phases as sextic polynomials, cruise as a straight line.

    Phase timing is identical to the trapezoidal law; only the shape inside
    each ramp changes, giving continuous acceleration peaking at
    ``acceleration_overshoot`` times the nominal acceleration.
    """

    kind = TrajectoryKind.SEXTIC

    def __init__(self, dt: float, acceleration_overshoot: float = DEFAULT_ACCEL_OVERSHOOT):
        super().__init__(dt)
        require_positive("acceleration_overshoot", acceleration_overshoot)
        self.acceleration_overshoot = float(acceleration_overshoot)

    def segments(self, timings: PhaseTimings, acceleration: float) -> tuple[SexticSegment, SexticSegment]:
        """Build the accel and decel segments for the given phase timing."""
        target = self.acceleration_overshoot * acceleration
        accel = SexticSegment(
            s0=0.0,
            v0=timings.initial_speed,
            s1=timings.pos_before_coast,
            v1=timings.nominal_speed,
            duration=timings.t1,
            mid_acceleration=target,
        )
        decel = SexticSegment(
            s0=timings.pos_after_coast,
            v0=timings.nominal_speed,
            s1=timings.end_position,
            v1=timings.final_speed,
            duration=timings.t3,
            mid_acceleration=-target,
        )
        logger.debug("Sextic accel %s, decel %s", accel.coeffs, decel.coeffs)
        return accel, decel

    def _evaluate(
        self, times: np.ndarray, timings: PhaseTimings, acceleration: float
    ) -> np.ndarray:
        accel_seg, decel_seg = self.segments(timings, acceleration)
        accel, cruise, decel = self._phase_masks(times, timings)

        pos = np.empty_like(times)
        pos[accel] = accel_seg.position(times[accel])
        pos[cruise] = timings.pos_before_coast + timings.nominal_speed * (times[cruise] - timings.t1)
        pos[decel] = decel_seg.position(times[decel] - (timings.t1 + timings.t2))
        return pos


def sextic_profile(
    distance: float,
    rate: float,
    acceleration: float,
    acceleration_overshoot: float,
    dt: float,
) -> np.ndarray:
    """Sextic position samples for a rest-to-rest move."""
    return SexticTrajectory(dt, acceleration_overshoot).generate(distance, rate, acceleration)
