import math
from typing import Iterable, List, Optional, Sequence, Tuple

from drillgeo.models.schemas import LocalPoint, TransformedRecord


def _minimum(values: Iterable[float]) -> float:
    finite = [v for v in values if math.isfinite(v)]
    return min(finite) if finite else 0.0


def _shift(point: Optional[LocalPoint], dx: float, dy: float) -> Optional[LocalPoint]:
    if point is None:
        return None
    return LocalPoint(x=point.x - dx, y=point.y - dy, z=point.z)


def display_offset(points: Sequence[LocalPoint]) -> Tuple[float, float]:
    """The ``(min_x, min_y)`` that normalize removes; ``(0.0, 0.0)`` for no points."""
    if not points:
        return 0.0, 0.0
    return _minimum(p.x for p in points), _minimum(p.y for p in points)


def normalize(points: Sequence[LocalPoint]) -> List[LocalPoint]:
    """Rebase a batch so its minimum x and y sit at the origin.

    Returns shifted copies. Normalise once per complete dataset; a sub-batch
    has a different minimum.
    """
    min_x, min_y = display_offset(points)
    return [_shift(p, min_x, min_y) for p in points]


def normalize_records(records: Sequence[TransformedRecord]) -> Tuple[List[TransformedRecord], Tuple[float, float]]:
    """Apply one shared display offset to every start and end point."""
    points: List[LocalPoint] = [r.start_local for r in records]
    points.extend(r.end_local for r in records if r.end_local is not None)
    min_x, min_y = display_offset(points)

    shifted = [
        r.model_copy(
            update={
                "start_local": _shift(r.start_local, min_x, min_y),
                "end_local": _shift(r.end_local, min_x, min_y),
            }
        )
        for r in records
    ]
    return shifted, (min_x, min_y)
