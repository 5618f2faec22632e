"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Protocol, Sequence

EARTH_RADIUS_KM = 6371.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: HasCoordinates, b: HasCoordinates) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def route_distance_km(points: Sequence[HasCoordinates], depot: HasCoordinates) -> float:
    """Length of the closed tour depot -> points... -> depot."""

    if not points:
        return 0.0
    total = distance_km(depot, points[0])
    for current, following in zip(points, points[1:]):
        total += distance_km(current, following)
    total += distance_km(points[-1], depot)
    return total


def travel_minutes(kilometres: float, minutes_per_km: float) -> float:
    return kilometres * minutes_per_km


def project_to_plane(lat: float, lon: float, ref_lat: float, ref_lon: float) -> tuple[float, float]:
    """Convert lat/lon to approximate Cartesian coordinates (km) around a reference point.

    Equirectangular projection; good approximation for city-sized areas.
    """
    x = EARTH_RADIUS_KM * math.radians(lon - ref_lon) * math.cos(math.radians(ref_lat))
    y = EARTH_RADIUS_KM * math.radians(lat - ref_lat)
    return x, y
