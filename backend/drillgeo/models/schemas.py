from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class RawPoint(BaseModel):
    """Survey coordinate in the site's raw local system."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: Optional[float] = None


class LocalPoint(BaseModel):
    """Coordinate in the working Cartesian frame (after the Helmert step)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: Optional[float] = None


class ProjectedPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    easting: float
    northing: float


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class HelmertParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    tx: float = 0.0
    ty: float = 0.0
    rotation_radians: float = 0.0
    scale: float = 1.0
    # Raw-frame origin removed before rotation/scale
    origin_x: float = 0.0
    origin_y: float = 0.0
    elevation_offset: float = 0.0


class ProjectionParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin_lat_deg: float
    origin_lon_deg: float
    scale_factor: float = 1.0
    false_easting: float = 0.0
    false_northing: float = 0.0
    ellipsoid_major_axis: float
    ellipsoid_minor_axis: float
    # Planar frame whose x/y are fed to the projection as easting/northing
    source_frame: Literal["local", "raw"] = "local"


class TransformParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    helmert: HelmertParameters
    projection: ProjectionParameters


class BoreholeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    name: str = "N/A"
    start: RawPoint
    end: Optional[RawPoint] = None


class TransformedRecord(BaseModel):
    id: Union[int, str]
    name: str
    start_local: LocalPoint
    end_local: Optional[LocalPoint] = None
    start_geo: Optional[GeoPoint] = None
    end_geo: Optional[GeoPoint] = None


class ExtentStats(BaseModel):
    min_x: Optional[float] = None
    max_x: Optional[float] = None
    span_x: Optional[float] = None
    min_y: Optional[float] = None
    max_y: Optional[float] = None
    span_y: Optional[float] = None
    min_z: Optional[float] = None
    max_z: Optional[float] = None
    span_z: Optional[float] = None
    center_x: Optional[float] = None
    center_y: Optional[float] = None
    center_z: Optional[float] = None

    @model_serializer(mode="wrap")
    def _drop_missing_axes(self, handler):
        # Axes without samples are omitted rather than reported as null
        return {key: value for key, value in handler(self).items() if value is not None}


class PipelineResult(BaseModel):
    records: List[TransformedRecord]
    stats: Optional[ExtentStats] = None
    excluded_count: int = 0
    total_count: int = 0
    excluded_ids: List[Union[int, str]] = Field(default_factory=list)
