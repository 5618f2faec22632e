from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from territory_routing.data.catalog import (
    TerritoryCatalog,
    generate_synthetic_catalog,
    load_catalog_csv,
)
from territory_routing.models.domain import TIME_SLOTS, RoutePoint


def _point(tid: str, lat: float = 25.7, lon: float = -80.2) -> RoutePoint:
    return RoutePoint(
        territory=tid,
        latitude=lat,
        longitude=lon,
        priority=3,
        estimated_duration=20,
        success_probability=0.5,
        optimal_time_slot="morning",
    )


def test_route_point_clamps_ranges():
    point = RoutePoint(
        territory="T1",
        latitude=25.7,
        longitude=-80.2,
        priority=9,
        estimated_duration=0,
        success_probability=1.4,
        optimal_time_slot="evening",
    )

    assert point.priority == 5
    assert point.success_probability == 1.0
    assert point.estimated_duration > 0

    adjusted = point.with_adjustments(success_probability=-0.3)
    assert adjusted.success_probability == 0.0
    assert point.success_probability == 1.0


def test_route_point_normalizes_slot_and_visit_time():
    point = RoutePoint(
        territory="T1",
        latitude=25.7,
        longitude=-80.2,
        priority=3,
        estimated_duration=20,
        success_probability=0.5,
        optimal_time_slot="night",
        last_visited=datetime(2026, 1, 1, 9, 30),
    )

    assert point.optimal_time_slot == TIME_SLOTS[0]
    assert point.last_visited == datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc)


def test_catalog_version_bumps_on_every_mutation(now):
    catalog = TerritoryCatalog([_point("1"), _point("2")])
    assert catalog.version == 0
    assert len(catalog) == 2

    catalog.upsert(_point("3"))
    assert catalog.version == 1

    visited = catalog.mark_visited("1", now)
    assert visited.last_visited == now
    assert catalog.get("1").last_visited == now
    assert catalog.version == 2

    removed = catalog.remove("2")
    assert removed.territory == "2"
    assert catalog.version == 3

    catalog.replace_all([_point("9")])
    assert [point.territory for point in catalog.snapshot()] == ["9"]
    assert catalog.version == 4


def test_catalog_rejects_unknown_territory():
    catalog = TerritoryCatalog([_point("1")])

    with pytest.raises(KeyError):
        catalog.remove("missing")
    with pytest.raises(KeyError):
        catalog.mark_visited("missing")


def test_snapshot_is_detached_from_catalog():
    catalog = TerritoryCatalog([_point("1")])
    snapshot = catalog.snapshot()

    catalog.upsert(_point("2"))

    assert len(snapshot) == 1
    assert len(catalog.snapshot()) == 2


def test_synthetic_catalog_is_reproducible(now):
    first = generate_synthetic_catalog(22, seed=7, now=now)
    second = generate_synthetic_catalog(22, seed=7, now=now)
    other = generate_synthetic_catalog(22, seed=8, now=now)

    assert first == second
    assert first != other
    assert len(first) == 22
    assert len({point.territory for point in first}) == 22


def test_synthetic_catalog_value_ranges(now):
    points = generate_synthetic_catalog(30, seed=1, now=now)

    for point in points:
        assert 1 <= point.priority <= 5
        assert 15 <= point.estimated_duration < 45
        assert 0.2 <= point.success_probability <= 0.8
        assert point.optimal_time_slot in TIME_SLOTS
        assert now - timedelta(days=7) <= point.last_visited <= now


def test_load_catalog_csv(tmp_path: Path):
    source = tmp_path / "catalog.csv"
    source.write_text(
        "territory,latitude,longitude,priority,estimated_duration,success_probability,optimal_time_slot,last_visited\n"
        "T1,25.70,-80.19,4,25,0.6,Morning,2026-10-10T09:00:00\n"
        "T2,,-80.18,2,30,0.4,afternoon,\n"
        "T3,25.72,-80.17,7,40,0.9,night,\n",
        encoding="utf-8",
    )

    points = load_catalog_csv(source)

    assert [point.territory for point in points] == ["T1", "T3"]
    first, third = points
    assert first.optimal_time_slot == "morning"
    assert first.last_visited is not None and first.last_visited.tzinfo is not None
    assert third.priority == 5
    assert third.optimal_time_slot == "morning"
    assert third.last_visited is None


def test_load_catalog_csv_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_catalog_csv(tmp_path / "missing.csv")


def test_load_catalog_csv_bad_number(tmp_path: Path):
    source = tmp_path / "catalog.csv"
    source.write_text("territory,latitude,longitude\nT1,abc,-80.1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_catalog_csv(source)
