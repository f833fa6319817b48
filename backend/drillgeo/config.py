"""
Transform parameter loading.

Parameters are read once per process, validated, and then treated as
constants. Sources, first match wins:

1. ``DRILLGEO_PARAMS_FILE``: a JSON document (``{"helmert": {...},
   "projection": {...}}``) or an INI file with a ``[local_grid]`` section
   and an optional ``[helmert]`` section.
2. Per-field ``DRILLGEO_*`` environment variables layered on the site
   defaults below.

Rotation may be given in radians, degrees or gons. A gon value above 200 is
read as a bearing measured back from 400 gon, so 398.9098 gon is a small
clockwise turn of -1.0902 gon.
"""
import configparser
import json
import logging
import math
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from drillgeo.errors import ConfigurationError
from drillgeo.models.schemas import HelmertParameters, ProjectionParameters, TransformParameters
from drillgeo.services.crs_parser import LocalGridParser
from drillgeo.services.helmert import validate_helmert
from drillgeo.services.projector import validate_projection

logger = logging.getLogger(__name__)

GON_TO_RAD = math.pi / 200.0

# WGS84 semi-axes
WGS84_A = 6378137.0
WGS84_B = 6356752.314245179

DEFAULT_HELMERT: Dict[str, Any] = {
    "tx": 0.0,
    "ty": 0.0,
    "rotation_gon": 398.9098,
    "scale": 1.000097549103,
    "elevation_offset": 0.0,
}

DEFAULT_PROJECTION: Dict[str, Any] = {
    "origin_lat_deg": 53.41320278,
    "origin_lon_deg": 69.0,
    "scale_factor": 0.9996,
    "false_easting": 500000.0,
    "false_northing": 7317.3475,
    "ellipsoid_major_axis": WGS84_A,
    "ellipsoid_minor_axis": WGS84_B,
    "source_frame": "local",
}

ENV_HELMERT = {
    "DRILLGEO_TX": "tx",
    "DRILLGEO_TY": "ty",
    "DRILLGEO_ROTATION_GON": "rotation_gon",
    "DRILLGEO_ROTATION_DEG": "rotation_deg",
    "DRILLGEO_ROTATION_RAD": "rotation_radians",
    "DRILLGEO_SCALE": "scale",
    "DRILLGEO_ORIGIN_X": "origin_x",
    "DRILLGEO_ORIGIN_Y": "origin_y",
    "DRILLGEO_ELEVATION_OFFSET": "elevation_offset",
}

ENV_PROJECTION = {
    "DRILLGEO_ORIGIN_LAT": "origin_lat_deg",
    "DRILLGEO_ORIGIN_LON": "origin_lon_deg",
    "DRILLGEO_SCALE_FACTOR": "scale_factor",
    "DRILLGEO_FALSE_EASTING": "false_easting",
    "DRILLGEO_FALSE_NORTHING": "false_northing",
    "DRILLGEO_ELLPS_A": "ellipsoid_major_axis",
    "DRILLGEO_ELLPS_B": "ellipsoid_minor_axis",
    "DRILLGEO_PROJECTION_FRAME": "source_frame",
}


def rotation_from_gons(gons: float) -> float:
    if gons > 200.0:
        gons -= 400.0
    return gons * GON_TO_RAD


def rotation_from_degrees(degrees: float) -> float:
    if degrees > 180.0:
        degrees -= 360.0
    return math.radians(degrees)


def _helmert_from_mapping(values: Mapping[str, Any]) -> HelmertParameters:
    fields = dict(values)
    units = [key for key in ("rotation_radians", "rotation_deg", "rotation_gon") if key in fields]
    if len(units) > 1:
        raise ConfigurationError(f"Rotation given more than once: {', '.join(units)}")
    if "rotation_gon" in fields:
        fields["rotation_radians"] = rotation_from_gons(float(fields.pop("rotation_gon")))
    elif "rotation_deg" in fields:
        fields["rotation_radians"] = rotation_from_degrees(float(fields.pop("rotation_deg")))
    return HelmertParameters(**fields)


def parameters_from_mapping(data: Mapping[str, Any]) -> TransformParameters:
    """Build and validate TransformParameters from plain configuration values."""
    try:
        helmert = _helmert_from_mapping(data.get("helmert", {}))
        projection = ProjectionParameters(**data.get("projection", {}))
    except ConfigurationError:
        raise
    except (ValidationError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid transform parameters: {exc}") from exc

    validate_helmert(helmert)
    validate_projection(projection)
    return TransformParameters(helmert=helmert, projection=projection)


ROTATION_KEYS = ("rotation_gon", "rotation_deg", "rotation_radians")


def _merge_helmert(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    helmert = dict(DEFAULT_HELMERT)
    if any(key in overrides for key in ROTATION_KEYS):
        for key in ROTATION_KEYS:
            helmert.pop(key, None)
    helmert.update(overrides)
    return helmert


def _with_defaults(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "helmert": _merge_helmert(data.get("helmert", {})),
        "projection": {**DEFAULT_PROJECTION, **data.get("projection", {})},
    }


def _read_ini(text: str) -> Dict[str, Any]:
    projection = LocalGridParser().parse_ini(text)
    parser = configparser.ConfigParser()
    parser.read_string(text)
    helmert: Dict[str, Any] = {}
    if parser.has_section("helmert"):
        helmert = {key: value.replace(",", ".") for key, value in parser.items("helmert")}
    return {"helmert": helmert, "projection": projection}


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read parameter file {path}: {exc}") from exc
    if path.suffix.lower() in (".ini", ".cfg"):
        return _read_ini(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Parameter file {path} is not valid JSON: {exc}") from exc


def _env_value(field: str, value: str) -> str:
    if field == "source_frame":
        return value.strip().lower()
    return value.strip().replace(",", ".", 1)


def _read_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    helmert = {field: _env_value(field, environ[name]) for name, field in ENV_HELMERT.items() if name in environ}
    projection = {
        field: _env_value(field, environ[name]) for name, field in ENV_PROJECTION.items() if name in environ
    }
    return {"helmert": helmert, "projection": projection}


def load_parameters(environ: Optional[Mapping[str, str]] = None) -> TransformParameters:
    env = os.environ if environ is None else environ
    params_file = env.get("DRILLGEO_PARAMS_FILE")
    if params_file:
        logger.info("Loading transform parameters from %s", params_file)
        data = _read_file(Path(params_file))
    else:
        data = _read_env(env)
    params = parameters_from_mapping(_with_defaults(data))
    logger.info(
        "Transform parameters: rotation=%.9f rad, scale=%.12f, TM origin=(%s, %s)",
        params.helmert.rotation_radians,
        params.helmert.scale,
        params.projection.origin_lat_deg,
        params.projection.origin_lon_deg,
    )
    return params


@lru_cache(maxsize=1)
def get_parameters() -> TransformParameters:
    """Process-wide parameters, loaded on first use."""
    return load_parameters()
