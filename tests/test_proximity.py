import pytest
import math
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rover_sim.physics import PhysicsWorld
from rover_sim.sensors import ProximitySensor


class EmptyWorld:
    """World stub without any obstacles, recording every cast ray"""

    def __init__(self):
        self.rays = []

    def raycast(self, start, end):
        self.rays.append((start, end))
        return None


class WallWorld:
    """World stub with a hit at a fixed distance on every ray"""

    def __init__(self, distance):
        self.distance = distance

    def raycast(self, start, end):
        return self.distance


class TestProximitySensor:
    """Test the ray-casting proximity sensor"""

    def test_initialization(self):
        """Test sensor defaults"""
        sensor = ProximitySensor()
        assert sensor.resolution == 180
        assert sensor.max_range == 8.0
        assert sensor.values == [8.0] * 180

    def test_invalid_parameters(self):
        """Test non-positive range or resolution is rejected"""
        with pytest.raises(ValueError):
            ProximitySensor(max_range=0.0)
        with pytest.raises(ValueError):
            ProximitySensor(resolution=0)

    @pytest.mark.parametrize("heading", [0.0, 45.0, 179.0, 359.9])
    def test_sweep_length(self, heading):
        """Test every sweep yields one value per sample"""
        sensor = ProximitySensor()
        values = sensor.sweep(EmptyWorld(), (12.0, -4.0), heading)
        assert len(values) == 180
        assert sensor.values == values

    def test_no_hits_report_max_range(self):
        """Test open space reports the sensing range everywhere"""
        values = ProximitySensor().sweep(EmptyWorld(), (0.0, 0.0), 0.0)
        assert all(value == 8.0 for value in values)

    def test_range_override(self):
        """Test the sweep honours a per-call range"""
        values = ProximitySensor().sweep(EmptyWorld(), (0.0, 0.0), 0.0, max_range=3.0)
        assert all(value == 3.0 for value in values)

    def test_error_function_applied(self):
        """Test every raw distance passes through the error function"""
        sensor = ProximitySensor(error_proximity=lambda distance: distance + 1.0)
        values = sensor.sweep(WallWorld(2.5), (0.0, 0.0), 0.0)
        assert all(value == pytest.approx(3.5) for value in values)

    def test_rays_are_rover_relative(self):
        """Test sample 0 looks along the heading and indices turn clockwise"""
        world = EmptyWorld()
        ProximitySensor().sweep(world, (1.0, 2.0), 90.0)

        start, end = world.rays[0]
        assert start == (1.0, 2.0)
        assert end[0] == pytest.approx(9.0)
        assert end[1] == pytest.approx(2.0)

        # 45 samples later the ray points 90° further clockwise: south
        _, end = world.rays[45]
        assert end[0] == pytest.approx(1.0, abs=1e-9)
        assert end[1] == pytest.approx(-6.0)

    def test_sample_bearing(self):
        """Test bearings advance by 2° per sample and wrap"""
        sensor = ProximitySensor()
        assert sensor.sample_bearing(0, 350.0) == pytest.approx(350.0)
        assert sensor.sample_bearing(10, 350.0) == pytest.approx(10.0)
        assert sensor.sample_bearing(90, 0.0) == pytest.approx(180.0)


class TestProximityWithPhysics:
    """Test the sensor against a Box2D world"""

    @pytest.fixture
    def world(self):
        physics = PhysicsWorld()
        physics.create_rover(0.5, 1.0, 10.0)
        physics.add_obstacle((0.0, 5.0), 1.0)
        return physics

    def test_obstacle_ahead(self, world):
        """Test the obstacle surface is found straight ahead"""
        values = ProximitySensor().sweep(world, (0.0, 0.0), 0.0)

        assert values[0] == pytest.approx(4.0, abs=1e-3)
        assert values[90] == pytest.approx(8.0)
        assert values[45] == pytest.approx(8.0)

    def test_obstacle_relative_to_heading(self, world):
        """Test turning the rover moves the obstacle to another sample"""
        values = ProximitySensor().sweep(world, (0.0, 0.0), 90.0)

        # Facing east, north lies 270° clockwise: sample 135
        assert values[135] == pytest.approx(4.0, abs=1e-3)
        assert values[0] == pytest.approx(8.0)

    def test_rover_body_does_not_occlude(self, world):
        """Test rays ignore the rover's own chassis"""
        values = ProximitySensor().sweep(world, (0.0, 0.0), 180.0)
        assert values[90] == pytest.approx(4.0, abs=1e-3)
        assert min(values) >= 4.0 - 1e-3

    def test_sensor_discs_are_transparent(self, world):
        """Test targets and landmines do not block rays"""
        world.add_sensor_disc((0.0, -3.0), 0.5, kind="target")
        world.add_sensor_disc((3.0, 0.0), 0.15, kind="landmine")

        values = ProximitySensor().sweep(world, (0.0, 0.0), 0.0)
        assert values[90] == pytest.approx(8.0)
        assert values[45] == pytest.approx(8.0)

    def test_closest_hit_wins(self, world):
        """Test the nearer of two obstacles on one ray is reported"""
        world.add_obstacle((0.0, 2.5), 0.5)
        values = ProximitySensor().sweep(world, (0.0, 0.0), 0.0)
        assert values[0] == pytest.approx(2.0, abs=1e-3)

    def test_raycast_distance(self, world):
        """Test the world reports hit distances in meters"""
        assert world.raycast((0.0, 0.0), (0.0, 8.0)) == pytest.approx(4.0, abs=1e-3)
        assert world.raycast((0.0, 0.0), (0.0, -8.0)) is None
        assert world.raycast((1.0, 1.0), (1.0, 1.0)) is None

    def test_diagonal_hit(self, world):
        """Test a diagonal ray hits a circle at the expected distance"""
        world.add_obstacle((4.0, 4.0), 1.0)
        values = ProximitySensor().sweep(world, (0.0, 0.0), 0.0)
        # Sample 22 looks along 44°, close to the obstacle centre direction
        assert values[22] < 8.0
        assert values[22] == pytest.approx(math.hypot(4.0, 4.0) - 1.0, abs=0.05)
