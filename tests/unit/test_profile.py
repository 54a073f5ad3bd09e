import math

import numpy as np
import pytest

from ftmsim.config import FILAMENT_AREA_MM2, TRAILING_PAD_SAMPLES
from ftmsim.filters.smoothing import smoothing_pad
from ftmsim.profile import assemble, calculate_motion_profile, filament_per_travel, move_timings
from ftmsim.types import MotionParameters, Profile, TrajectoryKind
from ftmsim.utils.errors import InvalidParameter, ProfileTooLarge
from ftmsim.utils.trajectory import derivative, sample_count


def _params(**overrides):
    base = dict(
        trajectory="trapezoidal",
        distance=10.0,
        rate=50.0,
        acceleration=500.0,
        acceleration_overshoot=1.0,
        advance_k=0.05,
        line_width=0.4,
        layer_height=0.2,
        sample_rate=1000.0,
        smoothing_time=0.0,
        smoothing_order=5,
    )
    base.update(overrides)
    return MotionParameters(**base)


def test_filament_area_constant():
    assert FILAMENT_AREA_MM2 == pytest.approx(math.pi * 0.875**2)


def test_filament_per_travel():
    assert filament_per_travel(0.4, 0.2) == pytest.approx(0.08 / (math.pi * 0.875**2))


def test_profile_traces_equal_length_and_derived():
    profile = assemble(_params(smoothing_time=0.02))
    assert len(profile.position) == len(profile.velocity) == len(profile.acceleration)
    assert np.array_equal(profile.velocity, derivative(profile.position, profile.dt))
    assert np.array_equal(profile.acceleration, derivative(profile.velocity, profile.dt))
    assert profile.velocity[0] == 0.0 and profile.acceleration[0] == 0.0


def test_unsmoothed_profile_scales_travel_to_filament():
    params = _params()
    profile = assemble(params)
    ratio = filament_per_travel(params.line_width, params.layer_height)
    assert profile.position[-1] == pytest.approx(params.distance * ratio, rel=1e-9)
    assert np.max(profile.velocity) == pytest.approx(params.rate * ratio, rel=1e-6)
    n = sample_count(move_timings(params).total, params.dt) + TRAILING_PAD_SAMPLES
    assert len(profile) == n


@pytest.mark.parametrize("trajectory", ["trapezoidal", "6poly"])
def test_smoothed_profile_settles(trajectory):
    params = _params(trajectory=trajectory, smoothing_time=0.02)
    ratio = filament_per_travel(params.line_width, params.layer_height)
    profile = assemble(params)
    unsmoothed = assemble(_params(trajectory=trajectory))
    assert len(profile) == len(unsmoothed) + smoothing_pad(0.02, 1000.0)
    assert profile.position[-1] == pytest.approx(params.distance * ratio, rel=1e-3)
    # Smoothing lowers the velocity peak
    assert np.max(profile.velocity) <= np.max(unsmoothed.velocity) + 1e-9


@pytest.mark.parametrize("trajectory", ["trapezoidal", "6poly"])
def test_assemble_is_idempotent(trajectory):
    params = _params(trajectory=trajectory, smoothing_time=0.03, acceleration_overshoot=1.4)
    a = assemble(params)
    b = assemble(params)
    assert np.array_equal(a.position, b.position)
    assert np.array_equal(a.velocity, b.velocity)
    assert np.array_equal(a.acceleration, b.acceleration)


@pytest.mark.parametrize("smoothing_time", [0.0, 0.05])
def test_zero_distance_single_sample(smoothing_time):
    profile = assemble(_params(distance=0.0, smoothing_time=smoothing_time))
    assert len(profile) == 1
    assert profile.position[0] == profile.velocity[0] == profile.acceleration[0] == 0.0


def test_reference_move_timings():
    t = move_timings(_params())
    assert t.t1 == pytest.approx(0.1)
    assert t.t3 == pytest.approx(0.1)
    assert t.t2 == pytest.approx(0.1)


def test_profile_arrays_are_read_only():
    profile = assemble(_params())
    with pytest.raises(ValueError):
        profile.position[0] = 1.0


def test_profile_length_mismatch_rejected():
    with pytest.raises(ValueError):
        Profile(np.zeros(3), np.zeros(3), np.zeros(2), 0.001)


def test_profile_time_axis():
    profile = assemble(_params())
    assert profile.time[0] == 0.0
    assert profile.time[-1] == pytest.approx((len(profile) - 1) * 0.001)


def test_trajectory_string_coerced():
    assert _params(trajectory="6poly").trajectory is TrajectoryKind.SEXTIC


@pytest.mark.parametrize(
    "field,value",
    [
        ("distance", -1.0),
        ("rate", 0.0),
        ("rate", -10.0),
        ("acceleration", 0.0),
        ("sample_rate", 0.0),
        ("smoothing_order", 0),
        ("smoothing_order", 2.0),
        ("smoothing_time", -0.01),
        ("line_width", 0.0),
        ("layer_height", -0.2),
        ("advance_k", -0.1),
        ("acceleration", float("inf")),
    ],
)
def test_invalid_parameters_rejected(field, value):
    with pytest.raises(InvalidParameter):
        assemble(_params(**{field: value}))


def test_invalid_overshoot_only_checked_for_sextic():
    assemble(_params(acceleration_overshoot=0.0))
    with pytest.raises(InvalidParameter):
        assemble(_params(trajectory="6poly", acceleration_overshoot=0.0))


def test_unknown_trajectory_rejected():
    with pytest.raises(InvalidParameter):
        _params(trajectory="scurve")


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError) as exc:
        assemble(_params(rate=0.0))
    assert str(exc.value).startswith("Invalid Parameter:")


def test_profile_too_large(monkeypatch):
    monkeypatch.setattr("ftmsim.utils.trajectory.MAX_PROFILE_SAMPLES", 1000)
    with pytest.raises(ProfileTooLarge):
        assemble(_params(distance=1000.0))


@pytest.mark.parametrize("trajectory", ["trapezoidal", "6poly"])
def test_huge_move_raises_profile_too_large(trajectory):
    # Duration / dt overflows to inf before it is turned into a count
    with pytest.raises(ProfileTooLarge):
        assemble(MotionParameters(distance=1e307, rate=1e-3, acceleration=500.0, trajectory=trajectory))


def test_huge_smoothing_time_raises_profile_too_large():
    with pytest.raises(ProfileTooLarge):
        assemble(_params(smoothing_time=1e307))


@pytest.mark.parametrize("trajectory", ["trapezoidal", "6poly"])
def test_profiles_compare_by_value(trajectory):
    params = _params(trajectory=trajectory, smoothing_time=0.03, acceleration_overshoot=1.4)
    assert assemble(params) == assemble(params)
    assert assemble(params) != assemble(_params(trajectory=trajectory, distance=12.0))


def test_profile_equality_includes_dt():
    a = Profile([0.0, 1.0], [0.0, 1.0], [0.0, 0.0], 0.001)
    assert a == Profile([0.0, 1.0], [0.0, 1.0], [0.0, 0.0], 0.001)
    assert a != Profile([0.0, 1.0], [0.0, 1.0], [0.0, 0.0], 0.002)
    assert a != Profile([0.0, 1.0, 1.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0], 0.001)
    assert a != "not a profile"


def test_profile_is_unhashable():
    with pytest.raises(TypeError):
        hash(assemble(_params()))


def test_calculate_motion_profile_alias():
    assert calculate_motion_profile is assemble
