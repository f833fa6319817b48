import logging
import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from drillgeo.models.schemas import (
    BoreholeRecord,
    GeoPoint,
    LocalPoint,
    PipelineResult,
    ProjectedPoint,
    RawPoint,
    TransformedRecord,
    TransformParameters,
)
from drillgeo.services.extent import compute_extent
from drillgeo.services.helmert import HelmertTransform2D
from drillgeo.services.normalizer import normalize_records
from drillgeo.services.numeric import parse_optional
from drillgeo.services.projector import GeodeticProjector

logger = logging.getLogger(__name__)

Row = Union[BoreholeRecord, Mapping[str, Any]]


def _raw_point(x: Any, y: Any, z: Any) -> Optional[RawPoint]:
    px = parse_optional(x)
    py = parse_optional(y)
    if px is None or py is None or not (math.isfinite(px) and math.isfinite(py)):
        return None
    return RawPoint(x=px, y=py, z=parse_optional(z))


def _record_id(value: Any, index: int) -> Union[int, str]:
    # ids are ints or non-empty text; anything else falls back to the row index
    if isinstance(value, bool):
        return index
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return value.strip() or index
    if isinstance(value, numbers.Number):
        return str(value)
    return index


def record_from_row(index: int, row: Mapping[str, Any]) -> Tuple[Union[int, str], Optional[BoreholeRecord]]:
    """Build a BoreholeRecord from a row keyed by canonical field names.

    Returns ``(id, None)`` when the start point lacks a usable x or y.
    """
    record_id = _record_id(row.get("HoleId"), index)
    name = row.get("HoleName")
    name = str(name).strip() if name not in (None, "") else "N/A"

    start = _raw_point(row.get("RawStartPointX"), row.get("RawStartPointY"), row.get("RawStartPointZ"))
    if start is None:
        return record_id, None
    end = _raw_point(row.get("RawEndPointX"), row.get("RawEndPointY"), row.get("RawEndPointZ"))
    return record_id, BoreholeRecord(id=record_id, name=name, start=start, end=end)


def _usable(point: Optional[RawPoint]) -> bool:
    return point is not None and math.isfinite(point.x) and math.isfinite(point.y)


def _checked(record: BoreholeRecord) -> Optional[BoreholeRecord]:
    if not _usable(record.start):
        return None
    if record.end is not None and not _usable(record.end):
        return record.model_copy(update={"end": None})
    return record


class TransformPipeline:
    """Turn borehole rows into local and geographic coordinates plus extent stats.

    Each record is independent; with ``max_workers`` > 1 records are spread
    over a thread pool and reassembled in input order. Normalisation and
    statistics run only once every record has been transformed.
    """

    def __init__(
        self,
        params: TransformParameters,
        *,
        geographic: bool = True,
        normalize: bool = False,
        max_workers: Optional[int] = None,
    ):
        self.params = params
        self.helmert = HelmertTransform2D(params.helmert)
        self.projector = GeodeticProjector(params.projection) if geographic else None
        self.normalize = normalize
        self.max_workers = max_workers

    def project(self, raw: RawPoint, local: LocalPoint) -> Optional[GeoPoint]:
        if self.projector is None:
            return None
        planar = local if self.params.projection.source_frame == "local" else raw
        return self.projector.to_geographic(ProjectedPoint(easting=planar.x, northing=planar.y))

    def transform_record(self, record: BoreholeRecord) -> TransformedRecord:
        start_local = self.helmert.forward_raw(record.start)
        end_local = self.helmert.forward_raw(record.end) if record.end is not None else None
        return TransformedRecord(
            id=record.id,
            name=record.name,
            start_local=start_local,
            end_local=end_local,
            start_geo=self.project(record.start, start_local),
            end_geo=self.project(record.end, end_local) if record.end is not None else None,
        )

    def _prepare(self, rows: Iterable[Row]) -> Tuple[List[BoreholeRecord], List[Union[int, str]], int]:
        records: List[BoreholeRecord] = []
        excluded: List[Union[int, str]] = []
        total = 0
        for index, row in enumerate(rows):
            total += 1
            if isinstance(row, BoreholeRecord):
                record_id, record = row.id, _checked(row)
            else:
                record_id, record = record_from_row(index, row)
            if record is None:
                logger.debug("Excluding record %s: start point has no usable x/y", record_id)
                excluded.append(record_id)
            else:
                records.append(record)
        return records, excluded, total

    def _transform_all(self, records: List[BoreholeRecord]) -> List[TransformedRecord]:
        if not self.max_workers or self.max_workers <= 1 or len(records) < 2:
            return [self.transform_record(r) for r in records]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            # map() yields in submission order
            return list(pool.map(self.transform_record, records))

    def run(self, rows: Iterable[Row]) -> PipelineResult:
        records, excluded, total = self._prepare(rows)
        transformed = self._transform_all(records)

        if self.normalize and transformed:
            transformed, offset = normalize_records(transformed)
            logger.debug("Display offset applied: %s", offset)

        points: List[LocalPoint] = [r.start_local for r in transformed]
        points.extend(r.end_local for r in transformed if r.end_local is not None)
        stats = compute_extent(points)

        logger.info(
            "Processed %d rows: %d transformed, %d excluded",
            total,
            len(transformed),
            len(excluded),
        )
        if not transformed:
            logger.warning("No valid start coordinates found in %d rows", total)

        return PipelineResult(
            records=transformed,
            stats=stats,
            excluded_count=len(excluded),
            total_count=total,
            excluded_ids=excluded,
        )
