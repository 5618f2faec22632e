"""Territory catalog registry and loaders."""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional, Protocol

import numpy as np

from ..models.domain import TIME_SLOTS, RoutePoint


class CatalogProvider(Protocol):
    """Read-only view of the territory catalog consumed by the engine."""

    @property
    def version(self) -> int: ...

    def snapshot(self) -> tuple[RoutePoint, ...]: ...


class TerritoryCatalog:
    """Thread-safe registry of route points keyed by territory id.

    Every mutation bumps ``version`` so cached derivations (clusters) know
    when to recompute.
    """

    def __init__(self, points: Iterable[RoutePoint] = ()) -> None:
        self._lock = threading.RLock()
        self._points: dict[str, RoutePoint] = {}
        self._version = 0
        for point in points:
            self._points[point.territory] = point

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def snapshot(self) -> tuple[RoutePoint, ...]:
        with self._lock:
            return tuple(self._points.values())

    def get(self, territory: str) -> Optional[RoutePoint]:
        with self._lock:
            return self._points.get(territory)

    def upsert(self, point: RoutePoint) -> None:
        with self._lock:
            self._points[point.territory] = point
            self._version += 1

    def remove(self, territory: str) -> RoutePoint:
        with self._lock:
            if territory not in self._points:
                raise KeyError(f"Unknown territory '{territory}'")
            point = self._points.pop(territory)
            self._version += 1
            return point

    def replace_all(self, points: Iterable[RoutePoint]) -> None:
        with self._lock:
            self._points = {point.territory: point for point in points}
            self._version += 1

    def mark_visited(self, territory: str, when: datetime | None = None) -> RoutePoint:
        with self._lock:
            current = self._points.get(territory)
            if current is None:
                raise KeyError(f"Unknown territory '{territory}'")
            updated = replace(current, last_visited=when or datetime.now(timezone.utc))
            self._points[territory] = updated
            self._version += 1
            return updated


def generate_synthetic_catalog(
    count: int = 22,
    *,
    seed: int = 42,
    base_latitude: float = 25.6866,
    base_longitude: float = -80.1917,
    now: datetime | None = None,
) -> list[RoutePoint]:
    """Build a reproducible demo catalog laid out on a 6-column grid.

    Territories sit 0.02 degrees apart with +/-0.005 degree jitter. Priority,
    duration, success probability, time slot and last visit are drawn from a
    seeded generator so repeated calls return identical catalogs.
    """
    rng = np.random.default_rng(seed)
    reference = now or datetime.now(timezone.utc)
    week_ms = 7 * 24 * 60 * 60 * 1000

    points: list[RoutePoint] = []
    for index in range(count):
        row, col = divmod(index, 6)
        points.append(
            RoutePoint(
                territory=str(index + 1),
                latitude=base_latitude + row * 0.02 + float(rng.uniform(-0.005, 0.005)),
                longitude=base_longitude + col * 0.02 + float(rng.uniform(-0.005, 0.005)),
                priority=int(rng.integers(1, 6)),
                estimated_duration=float(rng.integers(15, 45)),
                success_probability=float(rng.uniform(0.2, 0.8)),
                optimal_time_slot=TIME_SLOTS[int(rng.integers(0, len(TIME_SLOTS)))],
                last_visited=reference - timedelta(milliseconds=int(rng.integers(0, week_ms))),
            )
        )
    return points


def _coerce_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        return float(value.replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _coerce_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None or value.strip() == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Unable to parse timestamp from value '{value}'") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_catalog_csv(source: Path) -> list[RoutePoint]:
    """Load territories from a CSV file.

    Rows without coordinates are skipped. Unknown time slots fall back to
    ``morning``.
    """

    if not source.exists():
        raise FileNotFoundError(f"Catalog file not found: {source}")

    points: list[RoutePoint] = []
    with source.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Catalog file '{source}' is missing a header row.")
        for line_number, row in enumerate(reader, start=2):
            territory = (row.get("territory") or "").strip()
            lat = _coerce_float(row.get("latitude"))
            lon = _coerce_float(row.get("longitude"))
            if not territory or lat is None or lon is None:
                logging.warning(f"Skipping catalog row {line_number}: missing territory or coordinates")
                continue
            slot = (row.get("optimal_time_slot") or "").strip().lower()
            points.append(
                RoutePoint(
                    territory=territory,
                    latitude=lat,
                    longitude=lon,
                    priority=int(_coerce_float(row.get("priority")) or 1),
                    estimated_duration=_coerce_float(row.get("estimated_duration")) or 30.0,
                    success_probability=_coerce_float(row.get("success_probability")) or 0.0,
                    optimal_time_slot=slot if slot in TIME_SLOTS else TIME_SLOTS[0],
                    last_visited=_coerce_datetime(row.get("last_visited")),
                )
            )
    logging.info(f"Loaded {len(points)} territories from {source}")
    return points
