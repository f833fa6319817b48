import configparser
from typing import Dict, List

from drillgeo.errors import ConfigurationError
from drillgeo.models.schemas import ProjectionParameters


# [local_grid] keys as written by the site survey software
LOCAL_GRID_KEYS: Dict[str, str] = {
    "lat_origin": "origin_lat_deg",
    "cmeridian": "origin_lon_deg",
    "cm_scalef": "scale_factor",
    "false_east": "false_easting",
    "false_north": "false_northing",
    "semi_major": "ellipsoid_major_axis",
    "semi_minor": "ellipsoid_minor_axis",
}


class LocalGridParser:
    """Translate local grid definitions to and from PROJ strings"""

    def to_proj(self, params: ProjectionParameters) -> str:
        proj_parts: List[str] = [
            "+proj=tmerc",
            f"+lat_0={params.origin_lat_deg!r}",
            f"+lon_0={params.origin_lon_deg!r}",
            f"+k_0={params.scale_factor!r}",
            f"+x_0={params.false_easting!r}",
            f"+y_0={params.false_northing!r}",
            # Explicit axes: the site ellipsoid is locally fitted, not a named one
            f"+a={params.ellipsoid_major_axis!r}",
            f"+b={params.ellipsoid_minor_axis!r}",
            "+units=m",
            "+no_defs",
        ]
        return " ".join(proj_parts)

    def parse_ini(self, text: str, section: str = "local_grid") -> Dict:
        """Read a ``[local_grid]`` block into ProjectionParameters field values."""
        parser = configparser.ConfigParser()
        try:
            parser.read_string(text)
        except configparser.Error as exc:
            raise ConfigurationError(f"Unreadable grid definition: {exc}") from exc
        if not parser.has_section(section):
            raise ConfigurationError(f"Grid definition has no [{section}] section")

        values: Dict = {}
        for key, field in LOCAL_GRID_KEYS.items():
            raw = parser.get(section, key, fallback=None)
            if raw is None:
                continue
            try:
                values[field] = float(raw.replace(",", "."))
            except ValueError as exc:
                raise ConfigurationError(f"[{section}] {key}={raw!r} is not a number") from exc
        frame = parser.get(section, "source_frame", fallback=None)
        if frame:
            values["source_frame"] = frame.strip().lower()
        return values
