"""
Shared trajectory planning utilities.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from ftmsim.config import MAX_PROFILE_SAMPLES
from ftmsim.types import PhaseTimings, require_non_negative, require_positive
from ftmsim.utils.errors import ProfileTooLarge

logger = logging.getLogger(__name__)

# Tolerance (in samples) so a duration that is an exact multiple of dt
# does not gain an extra step from floating-point noise.
_SAMPLE_EPS = 1e-9


def derivative(samples: Sequence[float] | np.ndarray, dt: float) -> np.ndarray:
    """
    Backward finite difference at fixed timestep.

    out[0] = 0, out[i] = (x[i] - x[i-1]) / dt
    """
    x = np.asarray(samples, dtype=float)
    out = np.zeros_like(x)
    if x.size > 1:
        out[1:] = np.diff(x) / dt
    return out


def sample_count(duration: float, dt: float) -> int:
    """
    Number of samples covering [0, duration] at step dt.

    The last sample time (n-1)*dt is at or past ``duration`` by at most one step.
    """
    if duration <= 0:
        return 1
    return bounded_ceil(duration / dt - _SAMPLE_EPS, "trajectory") + 1


def bounded_ceil(raw: float, what: str = "profile") -> int:
    """
    ceil(raw) as a sample count, raising ProfileTooLarge if ``raw`` is not
    finite or already exceeds MAX_PROFILE_SAMPLES.
    """
    if not math.isfinite(raw) or raw > MAX_PROFILE_SAMPLES:
        raise ProfileTooLarge(
            f"{what} needs {raw:.6g} samples (limit {MAX_PROFILE_SAMPLES}); "
            "raise the timestep or shorten the move"
        )
    return int(math.ceil(raw))


def check_sample_budget(samples: int, what: str = "profile") -> None:
    """Raise ProfileTooLarge when ``samples`` exceeds MAX_PROFILE_SAMPLES."""
    if samples > MAX_PROFILE_SAMPLES:
        raise ProfileTooLarge(
            f"{what} needs {samples} samples (limit {MAX_PROFILE_SAMPLES}); "
            "raise the timestep or shorten the move",
            samples=samples,
        )


def phase_timings(
    distance: float,
    rate: float,
    acceleration: float,
    initial_speed: float = 0.0,
    final_speed: float = 0.0,
) -> PhaseTimings:
    """
    Compute trapezoid or triangular phase timing.

    The cruise time is solved from the boundary-speed corrected length
    ldiff = distance + (v0² + vf²) / (2a). When there is not enough distance
    to reach ``rate`` the cruise phase collapses to zero and the nominal
    speed is lowered to sqrt(ldiff * a).
    """
    require_non_negative("distance", distance)
    require_positive("rate", rate)
    require_positive("acceleration", acceleration)
    require_non_negative("initial_speed", initial_speed)
    require_non_negative("final_speed", final_speed)

    nominal_speed = float(rate)
    inv_a = 1.0 / acceleration
    ldiff = distance + 0.5 * inv_a * (initial_speed * initial_speed + final_speed * final_speed)

    t2 = ldiff / nominal_speed - inv_a * nominal_speed
    if t2 < 0.0:
        t2 = 0.0
        nominal_speed = math.sqrt(ldiff * acceleration)
        logger.debug(
            "Distance %.6g too short to reach %.6g mm/s; triangular profile at %.6g mm/s",
            distance,
            rate,
            nominal_speed,
        )

    t1 = (nominal_speed - initial_speed) * inv_a
    t3 = (nominal_speed - final_speed) * inv_a
    return PhaseTimings(
        t1=t1,
        t2=t2,
        t3=t3,
        nominal_speed=nominal_speed,
        initial_speed=float(initial_speed),
        final_speed=float(final_speed),
    )
