import numpy as np
import pytest

from ftmsim.filters.advance import (
    apply_advance,
    composite,
    exponential_lag,
    extruder_traces,
    lag_alpha,
    simulate_nozzle_lag,
)
from ftmsim.profile import assemble
from ftmsim.types import AdvanceMode, MotionParameters, Profile
from ftmsim.utils.errors import InvalidParameter


@pytest.fixture
def profile() -> Profile:
    return assemble(
        MotionParameters(distance=10.0, rate=50.0, acceleration=500.0, smoothing_time=0.02)
    )


def test_direct_zero_k_is_identity(profile):
    out = apply_advance(profile, 0.0)
    assert np.array_equal(out.position, profile.position)
    assert np.array_equal(out.velocity, profile.velocity)
    assert np.array_equal(out.acceleration, profile.acceleration)


def test_direct_adds_velocity_term(profile):
    k = 0.05
    out = apply_advance(profile, k)
    assert np.allclose(out.position, profile.position + k * profile.velocity)
    assert len(out) == len(profile)
    # Extra extrusion is retracted once the move is at rest again
    assert out.position[-1] == pytest.approx(profile.position[-1], abs=1e-4)
    assert np.max(out.velocity) > np.max(profile.velocity)
    assert out.velocity[0] == 0.0 and out.acceleration[0] == 0.0


def test_lag_zero_tau_is_identity(profile):
    out = simulate_nozzle_lag(profile, 0.0)
    assert np.array_equal(out.position, profile.position)
    assert np.array_equal(out.velocity, profile.velocity)


def test_exponential_lag_matches_recursion():
    rng = np.random.default_rng(0)
    x = rng.normal(size=200)
    alpha = lag_alpha(0.02, 0.001)
    expected = [x[0]]
    for v in x[1:]:
        expected.append(alpha * v + (1 - alpha) * expected[-1])
    assert np.allclose(exponential_lag(x, alpha), expected, atol=1e-12)


def test_exponential_lag_seeded_with_first_value():
    out = exponential_lag(np.full(20, 2.5), 0.3)
    assert out[0] == 2.5
    assert np.allclose(out, 2.5)
    assert exponential_lag([], 0.3).size == 0


def test_lag_delays_but_keeps_length(profile):
    out = simulate_nozzle_lag(profile, 0.05)
    assert len(out) == len(profile)
    assert out.position[0] == profile.position[0]
    # Lagged position trails the planned one while moving
    mid = len(profile) // 2
    assert out.position[mid] < profile.position[mid]
    assert np.max(out.velocity) < np.max(profile.velocity)


def test_lag_alpha():
    assert lag_alpha(0.0, 0.001) == 1.0
    assert lag_alpha(0.01, 0.001) == pytest.approx(1 - np.exp(-0.1))


@pytest.mark.parametrize("mode", [AdvanceMode.DIRECT, "direct"])
def test_composite_direct(profile, mode):
    out = composite(profile, 0.04, mode)
    assert np.array_equal(out.position, apply_advance(profile, 0.04).position)


@pytest.mark.parametrize("mode", [AdvanceMode.LAG, "lag"])
def test_composite_lag(profile, mode):
    out = composite(profile, 0.04, mode)
    assert np.array_equal(out.position, simulate_nozzle_lag(profile, 0.04).position)


def test_composite_rejects_unknown_mode(profile):
    with pytest.raises(InvalidParameter):
        composite(profile, 0.04, "spring")


def test_negative_k_rejected(profile):
    with pytest.raises(InvalidParameter):
        apply_advance(profile, -0.1)
    with pytest.raises(InvalidParameter):
        simulate_nozzle_lag(profile, -0.1)


def test_extruder_traces(profile):
    traces = extruder_traces(profile, 0.05)
    assert traces.planned is profile
    assert np.array_equal(traces.with_advance.position, apply_advance(profile, 0.05).position)
    expected = simulate_nozzle_lag(apply_advance(profile, 0.05), 0.05)
    assert np.array_equal(traces.effective.velocity, expected.velocity)
    assert list(traces.as_dict()) == ["planned", "with_advance", "effective"]


def test_extruder_traces_compare_by_value(profile):
    assert extruder_traces(profile, 0.05) == extruder_traces(profile, 0.05)
    assert extruder_traces(profile, 0.05) != extruder_traces(profile, 0.02)
    with pytest.raises(TypeError):
        hash(extruder_traces(profile, 0.05))


def test_compositing_leaves_profile_untouched(profile):
    before = profile.position.copy()
    apply_advance(profile, 0.1)
    simulate_nozzle_lag(profile, 0.1)
    assert np.array_equal(profile.position, before)
