"""
Base trajectory generator.

Provides common timing, sampling and padding utilities for derived generators.
"""

import logging

import numpy as np

from ftmsim.config import TRACE_ENABLED, TRAILING_PAD_SAMPLES
from ftmsim.types import PhaseTimings, TrajectoryKind, require_positive
from ftmsim.utils.trajectory import check_sample_budget, phase_timings, sample_count

logger = logging.getLogger(__name__)


class TrajectoryGenerator:
    """Base class for single-axis position generators sampled at a fixed timestep"""

    kind: TrajectoryKind

    def __init__(self, dt: float):
        """
        Initialize trajectory generator

        Args:
            dt: Sample period in seconds (1 / sample rate)
        """
        require_positive("dt", dt)
        self.dt = float(dt)

    @property
    def sample_rate(self) -> float:
        return 1.0 / self.dt

    def timings(self, distance: float, rate: float, acceleration: float) -> PhaseTimings:
        """Phase durations for a move that starts and ends at rest."""
        return phase_timings(distance, rate, acceleration)

    def generate_timestamps(self, duration: float) -> np.ndarray:
        """
        Sample times 0, dt, 2dt, ... up to the first sample at or past ``duration``.
        """
        n = sample_count(duration, self.dt)
        check_sample_budget(n + TRAILING_PAD_SAMPLES, "trajectory")
        return np.arange(n) * self.dt

    def generate(self, distance: float, rate: float, acceleration: float) -> np.ndarray:
        """
        Generate position samples for a move of ``distance`` mm.

        Returns the sampled positions followed by TRAILING_PAD_SAMPLES copies
        of the final position. A zero-length move yields a single sample at rest.
        """
        timings = self.timings(distance, rate, acceleration)
        if distance == 0:
            logger.debug("Zero-length move; returning a single sample at rest")
            return np.zeros(1)

        logger.debug(
            "%s timings: T1=%.6f T2=%.6f T3=%.6f v=%.6g",
            self.kind.value,
            timings.t1,
            timings.t2,
            timings.t3,
            timings.nominal_speed,
        )

        times = self.generate_timestamps(timings.total)
        # Overrun samples are evaluated at the end of the move
        positions = self._evaluate(np.minimum(times, timings.total), timings, float(acceleration))
        if TRACE_ENABLED:
            logger.trace("%s produced %d samples", self.kind.value, positions.size)  # type: ignore[attr-defined]
        return np.concatenate([positions, np.full(TRAILING_PAD_SAMPLES, positions[-1])])

    def _evaluate(
        self, times: np.ndarray, timings: PhaseTimings, acceleration: float
    ) -> np.ndarray:
        """Position at each (clamped) sample time; implemented by each trajectory law."""
        raise NotImplementedError

    @staticmethod
    def _phase_masks(times: np.ndarray, timings: PhaseTimings):
        """Boolean masks selecting accel, cruise and decel samples."""
        accel = times < timings.t1
        cruise = ~accel & (times <= timings.t1 + timings.t2)
        decel = ~(accel | cruise)
        return accel, cruise, decel
