import math
from typing import List, Optional

from pydantic import BaseModel
from pyproj import Geod

from drillgeo.models.schemas import GeoPoint, ProjectedPoint, RawPoint, TransformParameters
from drillgeo.services.pipeline import TransformPipeline
from drillgeo.services.projector import GeodeticProjector


class ReferencePair(BaseModel):
    """A raw survey point whose real-world position is independently known."""

    name: Optional[str] = None
    raw: RawPoint
    expected: GeoPoint


class ReferenceResidual(BaseModel):
    name: Optional[str] = None
    computed: Optional[GeoPoint] = None
    expected: GeoPoint
    distance_m: Optional[float] = None
    azimuth_deg: Optional[float] = None


def aggregate_max_residual(values: List[Optional[float]]) -> Optional[float]:
    vals = [v for v in values if v is not None]
    if not vals:
        return None
    return float(max(vals))


def validate_reference_pairs(params: TransformParameters, pairs: List[ReferencePair]) -> List[ReferenceResidual]:
    """Push each reference raw point through the pipeline and measure the miss.

    Distances are geodesic on the configured ellipsoid, azimuth from the
    expected position towards the computed one.
    """
    projection = params.projection
    geod = Geod(a=projection.ellipsoid_major_axis, b=projection.ellipsoid_minor_axis)
    pipeline = TransformPipeline(params, geographic=True)

    results: List[ReferenceResidual] = []
    for pair in pairs:
        computed = pipeline.project(pair.raw, pipeline.helmert.forward_raw(pair.raw))
        if computed is None:
            results.append(ReferenceResidual(name=pair.name, expected=pair.expected))
            continue
        azimuth, _, distance = geod.inv(pair.expected.lon, pair.expected.lat, computed.lon, computed.lat)
        results.append(
            ReferenceResidual(
                name=pair.name,
                computed=computed,
                expected=pair.expected,
                distance_m=float(distance),
                azimuth_deg=float(azimuth),
            )
        )
    return results


def projection_round_trip_error(projector: GeodeticProjector, point: ProjectedPoint) -> Optional[float]:
    geo = projector.to_geographic(point)
    if geo is None:
        return None
    back = projector.to_projected(geo)
    if back is None:
        return None
    return math.hypot(back.easting - point.easting, back.northing - point.northing)
