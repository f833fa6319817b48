import math
from typing import Dict, Optional, Tuple

from drillgeo.errors import ConfigurationError
from drillgeo.models.schemas import HelmertParameters, LocalPoint, RawPoint


def validate_helmert(params: HelmertParameters) -> None:
    values = (
        params.tx,
        params.ty,
        params.rotation_radians,
        params.scale,
        params.origin_x,
        params.origin_y,
        params.elevation_offset,
    )
    if not all(math.isfinite(v) for v in values):
        raise ConfigurationError("Helmert parameters must be finite")
    if params.scale == 0:
        raise ConfigurationError("Helmert scale must be non-zero")


class HelmertTransform2D:
    """2D similarity transform between the raw survey frame and the local frame.

    forward:  x' = tx + s * (dx*cos(t) - dy*sin(t))
              y' = ty + s * (dx*sin(t) + dy*cos(t))

    with dx = x - origin_x, dy = y - origin_y. Heights are not rotated or
    scaled; only the elevation offset is added.
    """

    def __init__(self, params: HelmertParameters):
        validate_helmert(params)
        self.params = params
        self._cos = math.cos(params.rotation_radians)
        self._sin = math.sin(params.rotation_radians)

    def forward(self, x: float, y: float) -> Tuple[float, float]:
        p = self.params
        dx = x - p.origin_x
        dy = y - p.origin_y
        x_out = p.tx + p.scale * (dx * self._cos - dy * self._sin)
        y_out = p.ty + p.scale * (dx * self._sin + dy * self._cos)
        return x_out, y_out

    def inverse(self, x: float, y: float) -> Tuple[float, float]:
        p = self.params
        u = (x - p.tx) / p.scale
        v = (y - p.ty) / p.scale
        dx = u * self._cos + v * self._sin
        dy = -u * self._sin + v * self._cos
        return dx + p.origin_x, dy + p.origin_y

    def _shift_z(self, z: Optional[float], sign: float) -> Optional[float]:
        if z is None:
            return None
        return z + sign * self.params.elevation_offset

    def forward_raw(self, point: RawPoint) -> LocalPoint:
        x, y = self.forward(point.x, point.y)
        return LocalPoint(x=x, y=y, z=self._shift_z(point.z, 1.0))

    def inverse_local(self, point: LocalPoint) -> RawPoint:
        x, y = self.inverse(point.x, point.y)
        return RawPoint(x=x, y=y, z=self._shift_z(point.z, -1.0))

    def describe(self) -> Dict[str, float]:
        return {
            "tx": self.params.tx,
            "ty": self.params.ty,
            "rotation_radians": self.params.rotation_radians,
            "rotation_gon": math.degrees(self.params.rotation_radians) * 400.0 / 360.0,
            "scale": self.params.scale,
            "elevation_offset": self.params.elevation_offset,
        }
