"""
Per-trace min/max summaries used to scale plots and print numeric readouts.
"""

import numpy as np

from ftmsim.types import Profile, TraceExtents

TRACE_NAMES = ("position", "velocity", "acceleration")


def trace_extents(*profiles: Profile) -> dict[str, TraceExtents]:
    """
    Min and max of each trace across all given profiles.

    Traces that are empty in every profile report 0.0 for both bounds.
    """
    extents: dict[str, TraceExtents] = {}
    for name in TRACE_NAMES:
        values = [getattr(p, name) for p in profiles if len(p)]
        if not values:
            extents[name] = {"min": 0.0, "max": 0.0}
            continue
        joined = np.concatenate(values)
        extents[name] = {"min": float(np.min(joined)), "max": float(np.max(joined))}
    return extents
