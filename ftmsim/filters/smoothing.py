"""
Axis smoothing: a cascade of identical single-pole low-pass stages.

Padding policy: the last input value is repeated ceil(2 * smoothing_time *
sample_rate) times before filtering and nothing is trimmed afterwards, so the
output is longer than the input and keeps the filter's phase delay. The
leading-delay trim (with round() instead of ceil()) seen in some firmware
simulators is not supported.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.signal import lfilter

from ftmsim.config import SMOOTHING_DISABLE_S
from ftmsim.types import require_non_negative, require_order, require_positive
from ftmsim.utils.errors import InvalidParameter
from ftmsim.utils.trajectory import bounded_ceil, check_sample_budget

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FilterState:
    """Per-stage accumulators of the smoothing cascade (first stage first)."""
    accumulators: np.ndarray

    def __eq__(self, other):
        if not isinstance(other, FilterState):
            return NotImplemented
        return np.array_equal(self.accumulators, other.accumulators)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def zeros(cls, order: int) -> "FilterState":
        require_order(order)
        return cls(np.zeros(int(order)))

    @property
    def order(self) -> int:
        return len(self.accumulators)


def smoothing_alpha(smoothing_time: float, dt: float, order: int) -> float:
    """Per-stage gain 1 - exp(-dt * order / smoothing_time)."""
    return 1.0 - math.exp(-dt * order / smoothing_time)


def smoothing_pad(smoothing_time: float, sample_rate: float) -> int:
    """Number of tail samples appended so the cascade can settle."""
    return bounded_ceil(2.0 * smoothing_time * sample_rate, "smoothing pad")


def run_cascade(
    samples: np.ndarray, alpha: float, state: FilterState
) -> tuple[np.ndarray, FilterState]:
    """
    Run ``samples`` through every stage of the cascade.

    Each stage moves its accumulator toward its input by ``alpha``:
    acc += (x - acc) * alpha. ``state`` is not modified; the state after the
    last sample is returned alongside the output.
    """
    b = [alpha]
    a = [1.0, alpha - 1.0]
    out = np.asarray(samples, dtype=float)
    final = np.empty_like(state.accumulators, dtype=float)
    for i, acc in enumerate(state.accumulators):
        if out.size == 0:
            final[i] = acc
            continue
        out, _ = lfilter(b, a, out, zi=[(1.0 - alpha) * acc])
        final[i] = out[-1]
    return out, FilterState(final)


def smooth_axis(
    samples,
    smoothing_time: float,
    dt: float,
    sample_rate: float,
    order: int,
    state: FilterState | None = None,
) -> np.ndarray:
    """
    Low-pass filter a position trace the way the firmware's axis smoothing does.

    Args:
        samples: Position samples at timestep ``dt``
        smoothing_time: Smoothing time constant (s); at or below 1 ms the filter is bypassed
        dt: Sample period (s)
        sample_rate: Sample rate (Hz), used to size the tail pad
        order: Number of cascaded first-order stages
        state: Initial accumulators; a fresh zero state when omitted

    Returns:
        Filtered samples, len(samples) + smoothing_pad(...) long, or an
        unchanged copy of ``samples`` when smoothing is disabled.
    """
    require_non_negative("smoothing_time", smoothing_time)
    require_positive("dt", dt)
    require_positive("sample_rate", sample_rate)
    require_order(order)

    x = np.array(samples, dtype=float)
    if smoothing_time <= SMOOTHING_DISABLE_S or x.size == 0:
        logger.debug("Axis smoothing bypassed (smoothing_time=%.6g)", smoothing_time)
        return x

    if state is None:
        state = FilterState.zeros(order)
    elif state.order != order:
        raise InvalidParameter(f"filter state has {state.order} stages, expected {order}")

    alpha = smoothing_alpha(smoothing_time, dt, order)
    pad = smoothing_pad(smoothing_time, sample_rate)
    check_sample_budget(x.size + pad, "smoothed profile")
    logger.debug("Axis smoothing: order=%d alpha=%.6g pad=%d", order, alpha, pad)

    padded = np.concatenate([x, np.full(pad, x[-1])])
    smoothed, _ = run_cascade(padded, alpha, state)
    return smoothed
