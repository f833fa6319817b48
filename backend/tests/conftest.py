import pytest

from drillgeo.config import DEFAULT_HELMERT, DEFAULT_PROJECTION, WGS84_A, WGS84_B, parameters_from_mapping
from drillgeo.models.schemas import HelmertParameters, ProjectionParameters, TransformParameters


@pytest.fixture
def site_params() -> TransformParameters:
    return parameters_from_mapping({"helmert": DEFAULT_HELMERT, "projection": DEFAULT_PROJECTION})


@pytest.fixture
def identity_params() -> TransformParameters:
    return TransformParameters(
        helmert=HelmertParameters(tx=0.0, ty=0.0, rotation_radians=0.0, scale=1.0),
        projection=ProjectionParameters(
            origin_lat_deg=0.0,
            origin_lon_deg=0.0,
            scale_factor=1.0,
            ellipsoid_major_axis=WGS84_A,
            ellipsoid_minor_axis=WGS84_B,
        ),
    )


@pytest.fixture
def rows():
    return [
        {"HoleName": "DH-001", "RawStartPointX": "1000,5", "RawStartPointY": "2000,25", "RawStartPointZ": "350"},
        {"HoleName": "DH-002", "RawStartPointX": 1100.0, "RawStartPointY": 2050.0, "RawStartPointZ": 352.5,
         "RawEndPointX": 1120.0, "RawEndPointY": 2040.0, "RawEndPointZ": 250.0},
        {"HoleName": "DH-003", "RawStartPointX": "", "RawStartPointY": "2100"},
        {"HoleName": "DH-004", "RawStartPointX": " 1200.75 ", "RawStartPointY": "1980"},
        {"HoleName": "", "RawStartPointX": "1300", "RawStartPointY": "2200", "RawEndPointX": "n/a", "RawEndPointY": "2210"},
    ]
