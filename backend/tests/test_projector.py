import math

import pytest

from drillgeo.config import WGS84_A, WGS84_B
from drillgeo.errors import ConfigurationError
from drillgeo.models.schemas import GeoPoint, ProjectedPoint, ProjectionParameters
from drillgeo.services.accuracy import projection_round_trip_error
from drillgeo.services.projector import GeodeticProjector


def test_false_origin_is_projection_origin(site_params):
    proj = site_params.projection
    geo = GeodeticProjector(proj).to_geographic(
        ProjectedPoint(easting=proj.false_easting, northing=proj.false_northing)
    )
    assert geo.lat == pytest.approx(proj.origin_lat_deg, abs=1e-10)
    assert geo.lon == pytest.approx(proj.origin_lon_deg, abs=1e-10)


@pytest.mark.parametrize(
    "offset",
    [(0.0, 0.0), (12345.678, -4321.5), (-49000.0, 3000.0), (20000.0, 45000.0), (-30000.0, -40000.0)],
)
def test_round_trip_within_50km(site_params, offset):
    proj = site_params.projection
    projector = GeodeticProjector(proj)
    point = ProjectedPoint(easting=proj.false_easting + offset[0], northing=proj.false_northing + offset[1])
    assert projection_round_trip_error(projector, point) < 1e-6


def test_geographic_round_trip(site_params):
    projector = GeodeticProjector(site_params.projection)
    geo = GeoPoint(lat=53.2, lon=69.35)
    back = projector.to_geographic(projector.to_projected(geo))
    assert back.lat == pytest.approx(geo.lat, abs=1e-10)
    assert back.lon == pytest.approx(geo.lon, abs=1e-10)


def test_scale_factor_on_central_meridian(site_params):
    projector = GeodeticProjector(site_params.projection)
    factors = projector.point_scale_factor(GeoPoint(lat=53.4, lon=69.0))
    assert factors["meridional_scale"] == pytest.approx(0.9996, abs=1e-6)
    assert projector.grid_convergence(GeoPoint(lat=53.4, lon=69.0)) == pytest.approx(0.0, abs=1e-6)


def test_nan_input_gives_none(site_params):
    projector = GeodeticProjector(site_params.projection)
    assert projector.to_geographic(ProjectedPoint(easting=math.nan, northing=1000.0)) is None


def _projection(**overrides):
    values = dict(
        origin_lat_deg=0.0,
        origin_lon_deg=0.0,
        ellipsoid_major_axis=WGS84_A,
        ellipsoid_minor_axis=WGS84_B,
    )
    values.update(overrides)
    return ProjectionParameters(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"ellipsoid_minor_axis": WGS84_A},
        {"ellipsoid_minor_axis": WGS84_A + 1.0},
        {"ellipsoid_major_axis": 0.0},
        {"ellipsoid_minor_axis": -1.0},
        {"scale_factor": 0.0},
        {"origin_lat_deg": 91.0},
    ],
)
def test_invalid_projection_rejected(overrides):
    with pytest.raises(ConfigurationError):
        GeodeticProjector(_projection(**overrides))


def test_custom_ellipsoid_is_used():
    sphere_like = GeodeticProjector(_projection(ellipsoid_major_axis=6378000.0, ellipsoid_minor_axis=6377000.0))
    wgs84 = GeodeticProjector(_projection())
    point = ProjectedPoint(easting=0.0, northing=40000.0)
    assert sphere_like.to_geographic(point).lat != pytest.approx(wgs84.to_geographic(point).lat, abs=1e-7)
