from typing import Dict, Optional, Sequence

import numpy as np

from drillgeo.models.schemas import ExtentStats, LocalPoint


def _axis_values(points: Sequence[LocalPoint], axis: str) -> np.ndarray:
    values = [getattr(p, axis) for p in points]
    arr = np.array([np.nan if v is None else v for v in values], dtype=float)
    return arr[np.isfinite(arr)]


def compute_extent(points: Sequence[LocalPoint]) -> Optional[ExtentStats]:
    """Bounding extent of a point batch, per axis.

    ``center`` is the midpoint of the range, not the mean of the samples.
    Returns None for an empty batch; axes with no valid sample are left unset.
    """
    if not points:
        return None

    fields: Dict[str, float] = {}
    for axis in ("x", "y", "z"):
        arr = _axis_values(points, axis)
        if arr.size == 0:
            continue
        lo = float(arr.min())
        hi = float(arr.max())
        fields[f"min_{axis}"] = lo
        fields[f"max_{axis}"] = hi
        fields[f"span_{axis}"] = hi - lo
        fields[f"center_{axis}"] = (lo + hi) / 2.0

    if not fields:
        return None
    return ExtentStats(**fields)
