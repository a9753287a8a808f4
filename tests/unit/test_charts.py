import pytest

from terrain_profile.charts import chart_distances, nearest_index, render_profile_png
from terrain_profile.errors import EmptyInput
from terrain_profile.models import GeoPoint, ProfileSample

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _profile(elevations):
    return [ProfileSample(point=GeoPoint(0.0, i * 0.001), elevation=e) for i, e in enumerate(elevations)]


class TestChartDistances:
    def test_evenly_spaced(self):
        assert chart_distances(5, 1000.0) == [0.0, 250.0, 500.0, 750.0, 1000.0]

    def test_scenario_sample_count(self):
        distances = chart_distances(51, 10_950.0)
        assert len(distances) == 51
        assert distances[0] == 0.0
        assert distances[-1] == pytest.approx(10_950.0)

    def test_single_sample(self):
        assert chart_distances(1, 500.0) == [0.0]

    def test_no_samples(self):
        assert chart_distances(0, 500.0) == []


class TestNearestIndex:
    DISTANCES = [0.0, 250.0, 500.0, 750.0, 1000.0]

    @pytest.mark.parametrize(
        "x,expected",
        [(0.0, 0), (100.0, 0), (130.0, 1), (499.0, 2), (760.0, 3), (1000.0, 4)],
    )
    def test_nearest(self, x, expected):
        assert nearest_index(self.DISTANCES, x) == expected

    def test_tie_goes_to_lower_index(self):
        assert nearest_index(self.DISTANCES, 125.0) == 0

    def test_clamps_outside_chart(self):
        assert nearest_index(self.DISTANCES, -50.0) == 0
        assert nearest_index(self.DISTANCES, 5000.0) == 4

    def test_empty(self):
        assert nearest_index([], 10.0) is None


class TestRenderProfilePng:
    def test_returns_png(self):
        img = render_profile_png(_profile([100.0, 120.0, 90.0]), 2000.0)
        assert img.startswith(PNG_SIGNATURE)

    def test_with_cursor(self):
        img = render_profile_png(_profile([100.0, 120.0, 90.0]), 2000.0, cursor=1)
        assert img.startswith(PNG_SIGNATURE)

    def test_flat_zero_length_profile(self):
        img = render_profile_png(_profile([50.0, 50.0]), 0.0)
        assert img.startswith(PNG_SIGNATURE)

    def test_out_of_range_cursor_ignored(self):
        img = render_profile_png(_profile([1.0, 2.0]), 10.0, cursor=9)
        assert img.startswith(PNG_SIGNATURE)

    def test_empty_profile_raises(self):
        with pytest.raises(EmptyInput):
            render_profile_png([], 100.0)
