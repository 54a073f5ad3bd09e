"""
Trapezoidal (constant acceleration) trajectory generator.
"""

import numpy as np

from ftmsim.types import PhaseTimings, TrajectoryKind

from .base import TrajectoryGenerator


class TrapezoidalTrajectory(TrajectoryGenerator):
    """
    Classic accelerate / cruise / decelerate position law.

    Falls back to a triangular profile (no cruise, reduced peak speed)
    when the move is too short to reach the requested rate.
    """

    kind = TrajectoryKind.TRAPEZOIDAL

    def _evaluate(
        self, times: np.ndarray, timings: PhaseTimings, acceleration: float
    ) -> np.ndarray:
        a = acceleration
        v0 = timings.initial_speed
        v = timings.nominal_speed
        accel, cruise, decel = self._phase_masks(times, timings)

        pos = np.empty_like(times)
        t = times[accel]
        pos[accel] = v0 * t + 0.5 * a * t * t

        pos[cruise] = timings.pos_before_coast + v * (times[cruise] - timings.t1)

        td = times[decel] - (timings.t1 + timings.t2)
        pos[decel] = timings.pos_after_coast + v * td - 0.5 * a * td * td
        return pos


def trapezoidal_profile(distance: float, rate: float, acceleration: float, dt: float) -> np.ndarray:
    """Trapezoidal position samples for a rest-to-rest move."""
    return TrapezoidalTrajectory(dt).generate(distance, rate, acceleration)
