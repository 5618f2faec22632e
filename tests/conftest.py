from datetime import datetime, timedelta, timezone

import pytest

from territory_routing.models.domain import Depot

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def yesterday() -> datetime:
    return NOW - timedelta(days=1)


@pytest.fixture
def depot() -> Depot:
    return Depot(code="OFFICE", latitude=25.6866, longitude=-80.1917)
