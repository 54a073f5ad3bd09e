from .advance import (
    apply_advance,
    composite,
    exponential_lag,
    extruder_traces,
    simulate_nozzle_lag,
)
from .smoothing import FilterState, run_cascade, smooth_axis, smoothing_alpha, smoothing_pad

__all__ = [
    "FilterState",
    "run_cascade",
    "smooth_axis",
    "smoothing_alpha",
    "smoothing_pad",
    "apply_advance",
    "simulate_nozzle_lag",
    "exponential_lag",
    "composite",
    "extruder_traces",
]
