"""Great-circle distance on a spherical Earth."""

from __future__ import annotations

import math
from typing import Any, Optional

from ..domain.errors import MalformedCoordinateError

EARTH_RADIUS_M = 6_371_000.0


def require_coordinate(value: Optional[float], vertex_id: Any = None) -> float:
    try:
        usable = value is not None and math.isfinite(value)
    except TypeError:
        usable = False
    if not usable:
        raise MalformedCoordinateError(
            f"Unusable coordinate {value!r}", vertex_id=vertex_id, value=value
        )
    return value


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in meters between two points.

    Raises:
        MalformedCoordinateError: If any coordinate is None or not finite.
    """
    lat1, lon1, lat2, lon2 = (require_coordinate(v) for v in (lat1, lon1, lat2, lon2))

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # Rounding can push a slightly past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))
