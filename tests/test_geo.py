import math
import random

import pytest

from lockon.geo.arc import interpolate_arc
from lockon.geo.coords import (
    Coordinate,
    central_angle,
    clamp_lat,
    haversine_km,
    lon_delta,
    wrap_lon,
)


class TestCoords:
    @pytest.mark.parametrize(
        "lon, expected",
        [
            (0.0, 0.0),
            (179.5, 179.5),
            (180.0, -180.0),
            (-180.0, -180.0),
            (190.0, -170.0),
            (-190.0, 170.0),
            (540.0, -180.0),
            (725.0, 5.0),
        ],
    )
    def test_wrap_lon(self, lon, expected):
        assert wrap_lon(lon) == pytest.approx(expected)
        assert -180.0 <= wrap_lon(lon) < 180.0

    def test_wrap_lon_leaves_in_range_values_untouched(self):
        assert wrap_lon(-0.1278) == -0.1278

    def test_clamp_lat_never_wraps(self):
        assert clamp_lat(95.0) == 85.0
        assert clamp_lat(-120.0) == -85.0
        assert clamp_lat(12.5) == 12.5

    def test_lon_delta_takes_short_way(self):
        assert lon_delta(170.0, -170.0) == pytest.approx(20.0)
        assert lon_delta(-170.0, 170.0) == pytest.approx(-20.0)
        assert lon_delta(10.0, 40.0) == pytest.approx(30.0)

    def test_normalized_is_identity_in_range(self):
        c = Coordinate(51.5074, -0.1278)
        assert c.normalized() is c

    def test_normalized_clamps_and_wraps(self):
        c = Coordinate(89.0, 200.0).normalized()
        assert c.lat == 85.0
        assert c.lon == pytest.approx(-160.0)

    def test_central_angle(self):
        assert central_angle(Coordinate(0, 0), Coordinate(0, 90)) == pytest.approx(math.pi / 2)
        assert central_angle(Coordinate(10, 10), Coordinate(10, 10)) == 0.0

    def test_haversine_london_paris(self):
        d = haversine_km(Coordinate(51.5074, -0.1278), Coordinate(48.8566, 2.3522))
        assert 330 < d < 350


class TestInterpolateArc:
    def test_equator_quarter(self):
        pts = interpolate_arc(Coordinate(0, 0), Coordinate(0, 90), 4)
        assert len(pts) == 5
        lons = [p.lon for p in pts]
        assert lons == sorted(lons)
        assert lons[0] == 0 and lons[-1] == 90
        for p, expected in zip(pts, [0.0, 22.5, 45.0, 67.5, 90.0]):
            assert p.lon == pytest.approx(expected)
            assert p.lat == pytest.approx(0.0, abs=1e-9)

    def test_endpoints_and_length_for_random_pairs(self):
        rng = random.Random(7)
        for _ in range(200):
            a = Coordinate(rng.uniform(-90, 90), rng.uniform(-180, 180))
            b = Coordinate(rng.uniform(-90, 90), rng.uniform(-180, 180))
            steps = rng.randint(2, 64)
            pts = interpolate_arc(a, b, steps)
            assert len(pts) == steps + 1
            assert pts[0] == a
            assert pts[-1] == b
            assert all(-90.0 <= p.lat <= 90.0 for p in pts)
            assert all(-180.0 <= p.lon < 180.0 for p in pts[1:-1])

    def test_arc_bows_poleward(self):
        pts = interpolate_arc(Coordinate(51.5, -0.13), Coordinate(40.7, -74.0))
        mid = pts[len(pts) // 2]
        assert mid.lat > 51.5

    def test_identical_points_do_not_divide_by_zero(self):
        p = Coordinate(12.0, 34.0)
        pts = interpolate_arc(p, p, 8)
        assert len(pts) == 9
        assert all(q.lat == pytest.approx(12.0) and q.lon == pytest.approx(34.0) for q in pts)

    def test_near_identical_points(self):
        a = Coordinate(12.0, 34.0)
        b = Coordinate(12.0 + 1e-12, 34.0)
        pts = interpolate_arc(a, b, 8)
        assert len(pts) == 9
        assert pts[-1] == b

    def test_antipodal_points_fall_back(self):
        a = Coordinate(0.0, 0.0)
        b = Coordinate(0.0, -180.0)
        pts = interpolate_arc(a, b, 4)
        assert len(pts) == 5
        assert all(math.isfinite(p.lat) and math.isfinite(p.lon) for p in pts)

    def test_too_few_steps(self):
        with pytest.raises(ValueError):
            interpolate_arc(Coordinate(0, 0), Coordinate(1, 1), 1)
