import pytest
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rover_sim.geo import CoordinateFrame, Location
from rover_sim.sensors import TargetSignalEstimator
from rover_sim.simulation import TraceHistory


ORIGIN = Location(52.477050353132384, 13.395281227289209)


class TestTargetSignal:
    """Test the inverse-distance target finder"""

    @pytest.fixture
    def estimator(self):
        return TargetSignalEstimator(CoordinateFrame(ORIGIN))

    def test_no_targets(self, estimator):
        """Test an empty world produces no signal"""
        assert estimator.signal((0.0, 0.0), []) == 0.0

    def test_distant_target(self, estimator):
        """Test a target 1 km away contributes 0.02 / 1000"""
        signal = estimator.signal((0.0, 0.0), [(0.0, 1000.0)])
        assert signal == pytest.approx(2e-5, rel=1e-4)

    def test_contributions_add_up(self, estimator):
        """Test several targets sum their contributions"""
        signal = estimator.signal((0.0, 0.0), [(0.0, 10.0), (0.0, -10.0), (10.0, 0.0)])
        assert signal == pytest.approx(3 * 0.002, rel=1e-4)

    def test_close_target_saturates(self, estimator):
        """Test the signal never exceeds 1"""
        assert estimator.signal((0.0, 0.0), [(0.0, 0.01)]) == 1.0

    def test_rover_on_target(self, estimator):
        """Test zero distance saturates instead of dividing by zero"""
        assert estimator.signal((5.0, 5.0), [(5.0, 5.0), (0.0, 100.0)]) == 1.0

    def test_custom_gain(self):
        """Test the gain scales the contribution"""
        estimator = TargetSignalEstimator(CoordinateFrame(ORIGIN), gain=1.0)
        assert estimator.signal((0.0, 0.0), [(0.0, 4.0)]) == pytest.approx(0.25, rel=1e-4)


class TestTraceHistory:
    """Test the decimated driven path"""

    def test_first_point_recorded(self):
        """Test an empty history records any position"""
        trace = TraceHistory()
        assert trace.record((0.0, 0.0))
        assert len(trace) == 1

    def test_decimation(self):
        """Test points within 1 m of the last recorded one are skipped"""
        trace = TraceHistory()
        recorded = [trace.record((0.0, y * 0.5)) for y in range(7)]

        assert recorded == [True, False, False, True, False, False, True]
        assert trace.points == [(0.0, 3.0), (0.0, 1.5), (0.0, 0.0)]

    def test_exact_threshold_skipped(self):
        """Test a point exactly at the minimum distance is not recorded"""
        trace = TraceHistory()
        trace.record((0.0, 0.0))
        assert not trace.record((1.0, 0.0))

    def test_newest_first(self):
        """Test iteration yields the most recent position first"""
        trace = TraceHistory(min_distance=0.0)
        for x in range(3):
            trace.record((float(x), 0.0))
        assert list(trace)[0] == (2.0, 0.0)

    def test_points_are_copied(self):
        """Test callers cannot alter the history through points"""
        trace = TraceHistory()
        trace.record((0.0, 0.0))
        trace.points.append((9.0, 9.0))
        assert len(trace) == 1

    def test_negative_distance_rejected(self):
        """Test a negative minimum distance is rejected"""
        with pytest.raises(ValueError):
            TraceHistory(min_distance=-1.0)
