import logging
import math

import pytest

from drillgeo.models.schemas import BoreholeRecord, ProjectedPoint, RawPoint
from drillgeo.services.helmert import HelmertTransform2D
from drillgeo.services.pipeline import TransformPipeline, record_from_row
from drillgeo.services.projector import GeodeticProjector


def test_missing_start_x_is_excluded(site_params, rows):
    result = TransformPipeline(site_params).run(rows)
    assert len(result.records) == 4
    assert result.excluded_count == 1
    assert result.excluded_ids == [2]
    assert result.total_count == 5
    assert [r.name for r in result.records] == ["DH-001", "DH-002", "DH-004", "N/A"]


def test_local_points_follow_helmert(site_params, rows):
    result = TransformPipeline(site_params).run(rows)
    helmert = HelmertTransform2D(site_params.helmert)
    x, y = helmert.forward(1000.5, 2000.25)
    first = result.records[0]
    assert first.start_local.x == x and first.start_local.y == y
    assert first.start_local.z == 350.0
    assert first.end_local is None and first.end_geo is None


def test_unparsable_end_point_is_dropped_but_record_kept(site_params, rows):
    result = TransformPipeline(site_params).run(rows)
    last = result.records[-1]
    assert last.end_local is None
    assert last.start_geo is not None


def test_geographic_output(site_params, rows):
    result = TransformPipeline(site_params).run(rows)
    projector = GeodeticProjector(site_params.projection)
    second = result.records[1]
    expected = projector.to_geographic(
        ProjectedPoint(easting=second.start_local.x, northing=second.start_local.y)
    )
    assert second.start_geo == expected
    assert second.end_geo is not None
    assert second.end_geo != second.start_geo


def test_geographic_disabled(site_params, rows):
    result = TransformPipeline(site_params, geographic=False).run(rows)
    assert all(r.start_geo is None and r.end_geo is None for r in result.records)


def test_raw_frame_projection(site_params):
    params = site_params.model_copy(
        update={"projection": site_params.projection.model_copy(update={"source_frame": "raw"})}
    )
    proj = params.projection
    record = BoreholeRecord(id="A", start=RawPoint(x=proj.false_easting, y=proj.false_northing))
    result = TransformPipeline(params).run([record])
    assert result.records[0].start_geo.lat == pytest.approx(proj.origin_lat_deg, abs=1e-9)


def test_normalized_stats(site_params, rows):
    result = TransformPipeline(site_params, normalize=True).run(rows)
    assert result.stats.min_x == 0.0
    assert result.stats.min_y == 0.0
    assert result.stats.center_x == pytest.approx(result.stats.span_x / 2)
    assert all(r.start_local.x >= 0 and r.start_local.y >= 0 for r in result.records)


def test_stats_include_end_points(identity_params):
    record = BoreholeRecord(
        id=1,
        start=RawPoint(x=0.0, y=0.0, z=100.0),
        end=RawPoint(x=50.0, y=-10.0, z=20.0),
    )
    stats = TransformPipeline(identity_params, geographic=False).run([record]).stats
    assert (stats.min_x, stats.max_x) == (0.0, 50.0)
    assert (stats.min_y, stats.max_y) == (-10.0, 0.0)
    assert stats.span_z == 80.0


def test_empty_batch(site_params):
    result = TransformPipeline(site_params).run([])
    assert result.records == []
    assert result.stats is None
    assert result.excluded_count == 0


def test_all_excluded_is_not_an_error(site_params, caplog):
    rows = [{"HoleName": "X", "RawStartPointX": "", "RawStartPointY": "1"}] * 3
    with caplog.at_level(logging.INFO, logger="drillgeo"):
        result = TransformPipeline(site_params).run(rows)
    assert result.records == [] and result.stats is None
    assert result.excluded_count == 3
    assert "3 excluded" in caplog.text


def test_parallel_preserves_order(site_params):
    rows = [{"HoleName": f"H{i}", "RawStartPointX": 10.0 * i, "RawStartPointY": 5.0 * i} for i in range(200)]
    serial = TransformPipeline(site_params).run(rows)
    parallel = TransformPipeline(site_params, max_workers=8).run(rows)
    assert [r.name for r in parallel.records] == [f"H{i}" for i in range(200)]
    assert parallel == serial


def test_record_objects_with_nan_start_are_excluded(identity_params):
    records = [
        BoreholeRecord(id="ok", start=RawPoint(x=1.0, y=2.0)),
        BoreholeRecord(id="bad", start=RawPoint(x=math.nan, y=2.0)),
    ]
    result = TransformPipeline(identity_params).run(records)
    assert [r.id for r in result.records] == ["ok"]
    assert result.excluded_ids == ["bad"]


def test_record_from_row_defaults():
    record_id, record = record_from_row(7, {"RawStartPointX": "1", "RawStartPointY": "2"})
    assert record_id == 7
    assert record.name == "N/A"
    assert record.start == RawPoint(x=1.0, y=2.0)


def test_unusual_hole_ids_do_not_abort_batch(identity_params):
    rows = [
        {"HoleId": 12.5, "HoleName": "A", "RawStartPointX": 1, "RawStartPointY": 2},
        {"HoleId": {"code": "B-2"}, "HoleName": "B", "RawStartPointX": 3, "RawStartPointY": 4},
        {"HoleId": ["C"], "HoleName": "C", "RawStartPointX": 5, "RawStartPointY": 6},
        {"HoleId": " 17 ", "HoleName": "D", "RawStartPointX": 7, "RawStartPointY": 8},
        {"HoleId": 40, "HoleName": "E", "RawStartPointX": 9, "RawStartPointY": 10},
    ]
    result = TransformPipeline(identity_params).run(rows)
    assert [r.id for r in result.records] == ["12.5", 1, 2, "17", 40]
    assert result.excluded_count == 0


def test_unusual_hole_id_on_excluded_row(identity_params):
    rows = [{"HoleId": 3.25, "HoleName": "A", "RawStartPointX": "", "RawStartPointY": 2}]
    result = TransformPipeline(identity_params).run(rows)
    assert result.excluded_ids == ["3.25"]
