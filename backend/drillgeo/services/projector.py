import logging
import math
from typing import Dict, Optional

from pyproj import CRS, Proj, Transformer
from pyproj.exceptions import CRSError

from drillgeo.errors import ConfigurationError
from drillgeo.models.schemas import GeoPoint, ProjectedPoint, ProjectionParameters
from drillgeo.services.crs_parser import LocalGridParser

logger = logging.getLogger(__name__)


def validate_projection(params: ProjectionParameters) -> None:
    a = params.ellipsoid_major_axis
    b = params.ellipsoid_minor_axis
    values = (
        params.origin_lat_deg,
        params.origin_lon_deg,
        params.scale_factor,
        params.false_easting,
        params.false_northing,
        a,
        b,
    )
    if not all(math.isfinite(v) for v in values):
        raise ConfigurationError("Projection parameters must be finite")
    if a <= 0 or b <= 0:
        raise ConfigurationError("Ellipsoid semi-axes must be positive")
    if b >= a:
        raise ConfigurationError("Ellipsoid minor axis must be smaller than the major axis")
    if params.scale_factor <= 0:
        raise ConfigurationError("Central meridian scale factor must be positive")
    if not -90.0 <= params.origin_lat_deg <= 90.0:
        raise ConfigurationError("Origin latitude must lie within [-90, 90]")
    if not -180.0 <= params.origin_lon_deg <= 180.0:
        raise ConfigurationError("Origin longitude must lie within [-180, 180]")


class GeodeticProjector:
    """Transverse Mercator mapping between the site grid and geographic lat/lon.

    Points cross this boundary only as named ``easting``/``northing`` or
    ``lat``/``lon`` fields. Internally pyproj is always driven in
    (easting, northing) / (lon, lat) order via ``always_xy=True``.
    Geographic coordinates are on the configured ellipsoid, which the site
    system aligns with WGS84.
    """

    def __init__(self, params: ProjectionParameters):
        validate_projection(params)
        self.params = params
        self.proj_string = LocalGridParser().to_proj(params)
        try:
            self.crs = CRS.from_proj4(self.proj_string)
        except CRSError as exc:
            raise ConfigurationError(f"Invalid projection definition: {exc}") from exc
        self.geodetic_crs = self.crs.geodetic_crs
        self._inverse = Transformer.from_crs(self.crs, self.geodetic_crs, always_xy=True)
        self._forward = Transformer.from_crs(self.geodetic_crs, self.crs, always_xy=True)
        logger.debug("Projector ready: %s", self.proj_string)

    @staticmethod
    def _finite(*values: float) -> bool:
        return all(math.isfinite(v) for v in values)

    def to_geographic(self, point: ProjectedPoint) -> Optional[GeoPoint]:
        if not self._finite(point.easting, point.northing):
            return None
        lon, lat = self._inverse.transform(point.easting, point.northing)
        if not self._finite(lon, lat) or abs(lat) > 90.0 or abs(lon) > 180.0:
            return None
        return GeoPoint(lat=float(lat), lon=float(lon))

    def to_projected(self, point: GeoPoint) -> Optional[ProjectedPoint]:
        easting, northing = self._forward.transform(point.lon, point.lat)
        if not self._finite(easting, northing):
            return None
        return ProjectedPoint(easting=float(easting), northing=float(northing))

    def grid_convergence(self, point: GeoPoint) -> float:
        factors = Proj(self.crs).get_factors(point.lon, point.lat)
        return float(factors.meridian_convergence)

    def point_scale_factor(self, point: GeoPoint) -> Dict[str, float]:
        factors = Proj(self.crs).get_factors(point.lon, point.lat)
        return {
            "meridional_scale": float(factors.meridional_scale),
            "parallel_scale": float(factors.parallel_scale),
            "areal_scale": float(factors.areal_scale),
        }
