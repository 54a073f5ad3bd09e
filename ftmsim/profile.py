"""
Motion profile assembly.

Turns a MotionParameters record into the extruder Profile: generate the
travel position trace, convert it to filament length, apply axis smoothing,
then derive velocity and acceleration by backward differences.
"""

import logging

import numpy as np

from ftmsim.config import FILAMENT_AREA_MM2
from ftmsim.filters.smoothing import FilterState, smooth_axis
from ftmsim.smooth_motion import get_generator
from ftmsim.types import MotionParameters, PhaseTimings, Profile, require_positive
from ftmsim.utils.trajectory import derivative, phase_timings

logger = logging.getLogger(__name__)


def filament_per_travel(line_width: float, layer_height: float) -> float:
    """Millimetres of 1.75mm filament extruded per millimetre of travel."""
    require_positive("line_width", line_width)
    require_positive("layer_height", layer_height)
    return line_width * layer_height / FILAMENT_AREA_MM2


def move_timings(params: MotionParameters) -> PhaseTimings:
    """Phase timing of the travel move described by ``params``."""
    params.validate()
    return phase_timings(params.distance, params.rate, params.acceleration)


def assemble(params: MotionParameters) -> Profile:
    """
    Compute the extruder motion profile for one move.

    Raises:
        InvalidParameter: if any field of ``params`` is out of range
        ProfileTooLarge: if the sampled profile would exceed MAX_PROFILE_SAMPLES
    """
    params.validate()
    dt = params.dt

    if params.distance == 0:
        logger.debug("Zero-length move; profile is a single sample at rest")
        return Profile(np.zeros(1), np.zeros(1), np.zeros(1), dt)

    generator = get_generator(params.trajectory, dt, params.acceleration_overshoot)
    travel = generator.generate(params.distance, params.rate, params.acceleration)

    filament = travel * filament_per_travel(params.line_width, params.layer_height)

    position = smooth_axis(
        filament,
        params.smoothing_time,
        dt,
        params.sample_rate,
        params.smoothing_order,
        state=FilterState.zeros(params.smoothing_order),
    )
    velocity = derivative(position, dt)
    acceleration = derivative(velocity, dt)
    logger.debug(
        "Assembled %s profile: %d samples (%d before smoothing)",
        params.trajectory.value,
        position.size,
        travel.size,
    )
    return Profile(position, velocity, acceleration, dt)


calculate_motion_profile = assemble
