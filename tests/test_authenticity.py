import pytest
import numpy as np
import itertools
from unittest.mock import Mock
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rover_sim.geo import Location, great_circle_distance
from rover_sim.options import VehicleOptions
from rover_sim.sensors import (
    AuthenticityLevel,
    PhysicalOptions,
    biased_random,
    box_muller,
    create_physical_options,
    gaussian_noise,
    ideal,
    uniform_noise,
)

LOCATION = Location(52.4770, 13.3952)


class TestIdealLevel:
    """Test the error-free authenticity level"""

    def test_all_channels_are_identity(self):
        """Test every error function returns its input unchanged"""
        options = ideal(VehicleOptions(engine_count=6))

        assert len(options.error_engine) == 6
        for error_function in options.error_engine:
            assert error_function(0.42) == 0.42
        assert options.error_heading(123.0) == 123.0
        assert options.error_location(LOCATION) == LOCATION
        assert options.error_proximity(3.5) == 3.5

    def test_default_engine_count(self):
        """Test ideal options default to two engines"""
        assert len(ideal().error_engine) == 2

    def test_missing_engine_error_falls_back_to_identity(self):
        """Test engine indices beyond the configured count use the identity"""
        options = PhysicalOptions()
        assert options.engine_error(5)(0.3) == 0.3


class TestUniformNoiseLevel:
    """Test uniformly distributed error injection"""

    def test_heading_error_bounds(self):
        """Test heading stays within ±5° and wrapped into [0, 360)"""
        options = uniform_noise(rng=np.random.default_rng(1))
        for _ in range(500):
            heading = options.error_heading(0.0)
            assert 0.0 <= heading < 360.0
            deviation = min(heading, 360.0 - heading)
            assert deviation <= 5.0

    def test_engine_bias_is_static(self):
        """Test each engine keeps one bias for the options' lifetime"""
        options = uniform_noise(VehicleOptions(engine_count=2), rng=np.random.default_rng(2))
        bias = options.error_engine[0](0.5) - 0.5

        assert abs(bias) <= 0.01
        for value in (-1.0, 0.0, 0.3, 1.0):
            assert options.error_engine[0](value) - value == pytest.approx(bias)

    def test_engine_biases_differ_per_engine(self):
        """Test engines draw independent biases"""
        options = uniform_noise(VehicleOptions(engine_count=6), rng=np.random.default_rng(3))
        biases = {round(f(0.0), 12) for f in options.error_engine}
        assert len(biases) == 6

    def test_location_displacement_bounds(self):
        """Test location is displaced by at most 5 m and resampled every call"""
        options = uniform_noise(rng=np.random.default_rng(4))
        displaced = [options.error_location(LOCATION) for _ in range(200)]

        distances = [great_circle_distance(LOCATION, loc) for loc in displaced]
        assert max(distances) <= 5.0 + 1e-6
        assert len({(loc.latitude, loc.longitude) for loc in displaced}) > 190

    def test_proximity_noise_within_range(self):
        """Test in-range readings deviate by at most 0.1 m except for faults"""
        options = uniform_noise(VehicleOptions(proximity_range=8.0), rng=np.random.default_rng(5))
        readings = [options.error_proximity(4.0) for _ in range(2000)]

        normal = [r for r in readings if r != 80.0]
        assert len(normal) >= 1980
        assert all(abs(r - 4.0) <= 0.1 + 1e-12 for r in normal)

    def test_proximity_noise_at_max_range(self):
        """Test readings at the sensing limit use the scaled-down error"""
        options = uniform_noise(VehicleOptions(proximity_range=8.0), rng=np.random.default_rng(6))
        readings = [options.error_proximity(8.0) for _ in range(2000)]

        normal = [r for r in readings if r != 80.0]
        # (B(0.25) - 0.25) * 0.8 lies within [-0.2, 0.6]
        assert all(7.8 - 1e-12 <= r <= 8.6 + 1e-12 for r in normal)

    def test_proximity_fault_injection(self):
        """Test a fault replaces the reading with ten times the range"""
        rng = Mock()
        # One draw for the engine bias, two for biased_random, then the fault check
        rng.random.side_effect = [0.5, 0.5, 0.0, 0.0005]
        options = uniform_noise(VehicleOptions(engine_count=1, proximity_range=8.0), rng=rng)

        assert options.error_proximity(3.0) == pytest.approx(80.0)

    def test_proximity_never_negative(self):
        """Test noisy readings of touching obstacles are clamped at zero"""
        rng = Mock()
        # Engine bias, then u = 0 and no mixing: error = -0.1
        rng.random.side_effect = [0.5, 0.0, 0.0, 0.5]
        options = uniform_noise(VehicleOptions(engine_count=1, proximity_range=8.0), rng=rng)

        assert options.error_proximity(0.05) == 0.0

    def test_seeded_levels_are_deterministic(self):
        """Test identical seeds yield identical error sequences"""
        first = uniform_noise(VehicleOptions(engine_count=2), rng=np.random.default_rng(42))
        second = uniform_noise(VehicleOptions(engine_count=2), rng=np.random.default_rng(42))

        assert first.error_engine[1](0.0) == second.error_engine[1](0.0)
        assert [first.error_heading(90.0) for _ in range(10)] == \
               [second.error_heading(90.0) for _ in range(10)]
        assert first.error_location(LOCATION) == second.error_location(LOCATION)
        assert first.error_proximity(2.0) == second.error_proximity(2.0)


class TestGaussianNoiseLevel:
    """Test normally distributed error injection"""

    def test_errors_within_bounds(self):
        """Test gaussian errors respect the uniform level's ranges"""
        options = gaussian_noise(VehicleOptions(engine_count=2), rng=np.random.default_rng(8))

        for _ in range(500):
            heading = options.error_heading(180.0)
            assert 175.0 <= heading <= 185.0
            assert great_circle_distance(LOCATION, options.error_location(LOCATION)) <= 5.0 + 1e-6
        for error_function in options.error_engine:
            assert abs(error_function(0.0)) <= 0.01

    def test_heading_errors_concentrate_near_zero(self):
        """Test the error distribution is centred with σ ≈ range/10"""
        options = gaussian_noise(rng=np.random.default_rng(9))
        errors = np.array([options.error_heading(180.0) - 180.0 for _ in range(4000)])

        assert abs(np.mean(errors)) < 0.1
        assert np.std(errors) == pytest.approx(1.0, abs=0.15)

    def test_proximity_is_not_modelled(self):
        """Test proximity readings pass through unchanged"""
        options = gaussian_noise(rng=np.random.default_rng(10))
        assert options.error_proximity(6.5) == 6.5


class TestRandomHelpers:
    """Test random sampling helpers"""

    def test_biased_random_mix(self):
        """Test biased_random combines a uniform draw and the bias"""
        rng = Mock()
        rng.random.side_effect = [0.8, 0.5]
        # rnd = 0.8, mix = 0.5
        assert biased_random(rng, bias=0.2) == pytest.approx(0.8 * 0.5 + 0.2 * 0.5)

    def test_biased_random_range(self):
        """Test results stay within the draw range for a bias inside it"""
        rng = np.random.default_rng(11)
        values = [biased_random(rng, 0.5) for _ in range(1000)]
        assert min(values) >= 0.0 and max(values) <= 1.0

    def test_box_muller_bounded(self):
        """Test box_muller samples stay in range"""
        rng = np.random.default_rng(12)
        samples = [box_muller(rng, -2.0, 4.0) for _ in range(1000)]
        assert min(samples) >= -2.0 and max(samples) <= 4.0

    def test_box_muller_rejection_is_bounded(self):
        """Test pathological draws end in the range centre instead of recursing"""
        rng = Mock()
        # u close to 0 and cos(2πv) = 1 always produce out-of-range candidates
        rng.random.side_effect = itertools.cycle([0.9999999999999999, 0.0])

        assert box_muller(rng, 0.0, 10.0, max_attempts=50) == pytest.approx(5.0)
        assert rng.random.call_count == 100


class TestPhysicalOptionsFactory:
    """Test resolution of physical constraint settings"""

    @pytest.mark.parametrize("setting", [None, AuthenticityLevel.IDEAL, "ideal"])
    def test_ideal_settings(self, setting):
        """Test None, the enum and its name all select the ideal level"""
        options = create_physical_options(setting, VehicleOptions(engine_count=6))
        assert len(options.error_engine) == 6
        assert options.error_heading(10.0) == 10.0

    @pytest.mark.parametrize("level", list(AuthenticityLevel))
    def test_levels_share_interface(self, level):
        """Test every level exposes all four channels"""
        options = level.create(VehicleOptions(engine_count=2), np.random.default_rng(0))
        assert len(options.error_engine) == 2
        assert callable(options.error_heading)
        assert callable(options.error_location)
        assert callable(options.error_proximity)

    def test_custom_factory(self):
        """Test caller-supplied factories are invoked with the vehicle options"""
        calls = []

        def factory(vehicle_options):
            calls.append(vehicle_options)
            return PhysicalOptions(error_heading=lambda h: h + 1.0)

        vehicle_options = VehicleOptions(engine_count=2)
        options = create_physical_options(factory, vehicle_options)

        assert calls == [vehicle_options]
        assert options.error_heading(1.0) == 2.0
        assert options.error_proximity(3.0) == 3.0

    def test_factory_with_wrong_result(self):
        """Test factories must return PhysicalOptions"""
        with pytest.raises(ValueError):
            create_physical_options(lambda vehicle_options: {}, VehicleOptions())

    def test_unknown_setting(self):
        """Test unresolvable settings raise ValueError"""
        with pytest.raises(ValueError):
            create_physical_options("perfect", VehicleOptions())
        with pytest.raises(ValueError):
            create_physical_options(42, VehicleOptions())
