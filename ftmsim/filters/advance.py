"""
Linear advance (pressure advance) compositing of extruder motion.

Two formulations are provided:

- AdvanceMode.DIRECT: effective position = position + k * velocity, with
  velocity and acceleration re-derived from it. k acts as a gain in seconds.
- AdvanceMode.LAG: every trace is passed through a single-pole exponential
  smoother with tau = k, modelling melt-zone lag at the nozzle.

extruder_traces() chains both: the "with advance" trace is DIRECT and the
"effective" trace is LAG applied to it.
"""

import logging
import math

import numpy as np
from scipy.signal import lfilter

from ftmsim.types import (
    AdvanceMode,
    ExtruderTraces,
    Profile,
    coerce_advance_mode,
    require_non_negative,
)
from ftmsim.utils.trajectory import derivative

logger = logging.getLogger(__name__)


def apply_advance(profile: Profile, k: float) -> Profile:
    """Mode A: shift position by k * velocity and differentiate twice."""
    require_non_negative("advance_k", k)
    position = profile.position + k * profile.velocity
    velocity = derivative(position, profile.dt)
    acceleration = derivative(velocity, profile.dt)
    return Profile(position, velocity, acceleration, profile.dt)


def lag_alpha(tau: float, dt: float) -> float:
    """Smoother gain 1 - exp(-dt / tau); 1.0 (pass-through) for tau <= 0."""
    if tau <= 0:
        return 1.0
    return 1.0 - math.exp(-dt / tau)


def exponential_lag(values, alpha: float) -> np.ndarray:
    """
    y[0] = x[0], y[i] = alpha * x[i] + (1 - alpha) * y[i-1]
    """
    x = np.array(values, dtype=float)
    if x.size == 0 or alpha >= 1.0:
        return x
    out = np.empty_like(x)
    out[0] = x[0]
    if x.size > 1:
        out[1:], _ = lfilter([alpha], [1.0, alpha - 1.0], x[1:], zi=[(1.0 - alpha) * x[0]])
    return out


def simulate_nozzle_lag(profile: Profile, tau: float) -> Profile:
    """Mode B: exponentially lag position, velocity and acceleration independently."""
    require_non_negative("advance_k", tau)
    alpha = lag_alpha(tau, profile.dt)
    return Profile(
        exponential_lag(profile.position, alpha),
        exponential_lag(profile.velocity, alpha),
        exponential_lag(profile.acceleration, alpha),
        profile.dt,
    )


def composite(profile: Profile, k: float, mode: AdvanceMode | str = AdvanceMode.DIRECT) -> Profile:
    """Effective extruder profile for the selected compositing mode."""
    mode = coerce_advance_mode(mode)
    logger.debug("Linear advance compositing: mode=%s k=%.6g", mode.value, k)
    if mode is AdvanceMode.LAG:
        return simulate_nozzle_lag(profile, k)
    return apply_advance(profile, k)


def extruder_traces(profile: Profile, k: float) -> ExtruderTraces:
    """Planned, with-advance (DIRECT) and effective (LAG of with-advance) traces."""
    with_advance = apply_advance(profile, k)
    return ExtruderTraces(
        planned=profile,
        with_advance=with_advance,
        effective=simulate_nozzle_lag(with_advance, k),
    )
