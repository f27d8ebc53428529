"""
Distance between two points using the haversine formula.

Great-circle distance stands in for a routing engine: the engines only compare distances,
so a monotone approximation of travel length is enough. Anything satisfying
``DistanceFunction`` can be injected instead.
"""

from __future__ import annotations

import math
from typing import Protocol

from spinfood.models import Location

EARTH_RADIUS_KM = 6_371.0


class DistanceFunction(Protocol):
    """Pure function returning a non-negative distance in km between two locations."""

    def __call__(self, a: Location, b: Location) -> float: ...


def haversine_km(a: Location, b: Location) -> float:
    """Return the great-circle distance in km between two locations."""
    lat1_r, lat2_r = math.radians(a.latitude), math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def to_meters(km: float) -> int:
    """Integer metres, the unit the CP-SAT objectives work in."""
    return int(round(km * 1000))
