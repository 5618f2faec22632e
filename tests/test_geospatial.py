import pytest

from territory_routing.models.domain import RoutePoint
from territory_routing.services.geospatial import (
    distance_km,
    haversine_km,
    project_to_plane,
    route_distance_km,
)


def _point(tid: str, lat: float, lon: float) -> RoutePoint:
    return RoutePoint(
        territory=tid,
        latitude=lat,
        longitude=lon,
        priority=3,
        estimated_duration=20,
        success_probability=0.5,
        optimal_time_slot="morning",
    )


def test_haversine_known_distance():
    # Miami to Orlando is roughly 330 km as the crow flies
    distance = haversine_km(25.7617, -80.1918, 28.5383, -81.3792)
    assert 320 < distance < 340


@pytest.mark.parametrize(
    "a, b",
    [
        ((25.6866, -80.1917), (25.7066, -80.1717)),
        ((-33.86, 151.21), (51.50, -0.12)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_haversine_is_symmetric(a, b):
    assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))
    assert haversine_km(*a, *b) > 0


def test_distance_to_self_is_zero():
    point = _point("1", 25.7, -80.2)
    assert distance_km(point, point) == 0.0


def test_route_distance_includes_depot_legs(depot):
    first = _point("1", 25.70, -80.19)
    second = _point("2", 25.71, -80.18)

    expected = distance_km(depot, first) + distance_km(first, second) + distance_km(second, depot)

    assert route_distance_km([first, second], depot) == pytest.approx(expected)


def test_route_distance_of_single_point_is_round_trip(depot):
    point = _point("1", 25.70, -80.19)
    assert route_distance_km([point], depot) == pytest.approx(2 * distance_km(depot, point))


def test_route_distance_of_empty_route_is_zero(depot):
    assert route_distance_km([], depot) == 0.0


def test_project_to_plane_reference_is_origin():
    assert project_to_plane(25.0, -80.0, 25.0, -80.0) == (0.0, 0.0)
    x, y = project_to_plane(25.01, -80.0, 25.0, -80.0)
    assert x == pytest.approx(0.0)
    assert y == pytest.approx(haversine_km(25.0, -80.0, 25.01, -80.0), rel=1e-3)
