"""
Central configuration for ftmsim tunables and shared constants.
"""

import logging
import math
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("FTMSIM_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


# Filament geometry (mm). Fixed 1.75mm assumption.
FILAMENT_DIAMETER_MM: float = 1.75
FILAMENT_AREA_MM2: float = math.pi * (FILAMENT_DIAMETER_MM / 2.0) ** 2

# Motion sample rate (Hz), i.e. the fixed-time motion frequency
DEFAULT_SAMPLE_RATE_HZ: float = _env_float("FTMSIM_SAMPLE_RATE_HZ", 1000.0)

# Axis smoothing
DEFAULT_SMOOTHING_ORDER: int = _env_int("FTMSIM_SMOOTHING_ORDER", 5)
SMOOTHING_DISABLE_S: float = 0.001  # smoothing times at or below this bypass the filter

# Sextic (6-poly) trajectory
DEFAULT_ACCEL_OVERSHOOT: float = 1.0

# Print geometry defaults (mm)
DEFAULT_LINE_WIDTH_MM: float = 0.4
DEFAULT_LAYER_HEIGHT_MM: float = 0.2

# Samples repeated after the final generator sample so differencing and
# smoothing always see settled neighbours.
TRAILING_PAD_SAMPLES: int = 3

# Upper bound on samples allocated for a single profile
MAX_PROFILE_SAMPLES: int = _env_int("FTMSIM_MAX_PROFILE_SAMPLES", 5_000_000)

LOG_LEVEL_DEFAULT: str = "WARNING"
