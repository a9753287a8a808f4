import pytest

from terrain_profile.errors import InvalidArgument
from terrain_profile.models import (
    Empty,
    GeoPoint,
    OneSelected,
    PathSummary,
    ProfileSample,
    TwoSelected,
    selected_points,
)


class TestGeoPoint:
    def test_construction(self):
        pt = GeoPoint(lat=21.0285, lon=105.8542)
        assert pt.lat == 21.0285
        assert pt.lon == 105.8542

    def test_is_value_type(self):
        assert GeoPoint(1.0, 2.0) == GeoPoint(1.0, 2.0)
        assert hash(GeoPoint(1.0, 2.0)) == hash(GeoPoint(1.0, 2.0))

    def test_immutable(self):
        pt = GeoPoint(1.0, 2.0)
        with pytest.raises(AttributeError):
            pt.lat = 3.0

    def test_bounds_inclusive(self):
        GeoPoint(lat=90.0, lon=180.0)
        GeoPoint(lat=-90.0, lon=-180.0)

    @pytest.mark.parametrize("lat,lon", [(90.1, 0.0), (-91.0, 0.0), (0.0, 180.5), (0.0, -181.0)])
    def test_out_of_range_rejected(self, lat, lon):
        with pytest.raises(InvalidArgument):
            GeoPoint(lat=lat, lon=lon)

    def test_to_dict(self):
        assert GeoPoint(1.5, -2.5).to_dict() == {"lat": 1.5, "lon": -2.5}


class TestSelectedPoints:
    def test_empty(self):
        assert selected_points(Empty()) == []

    def test_one(self):
        a = GeoPoint(1.0, 2.0)
        assert selected_points(OneSelected(a)) == [a]

    def test_two(self):
        a, b = GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)
        assert selected_points(TwoSelected(a, b)) == [a, b]


class TestPathSummary:
    def test_to_dict(self):
        summary = PathSummary(
            total_distance=1000.0,
            start_elevation=10.0,
            end_elevation=20.0,
            min_elevation=5.0,
            max_elevation=25.0,
        )
        assert summary.to_dict() == {
            "total_distance": 1000.0,
            "start_elevation": 10.0,
            "end_elevation": 20.0,
            "min_elevation": 5.0,
            "max_elevation": 25.0,
        }


class TestProfileSample:
    def test_construction(self):
        sample = ProfileSample(point=GeoPoint(1.0, 2.0), elevation=123.4)
        assert sample.point == GeoPoint(1.0, 2.0)
        assert sample.elevation == 123.4
