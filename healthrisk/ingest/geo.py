"""Great-circle distance and representative points for region polygons."""

import math
from collections.abc import Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def vertex_centroid(rings: Sequence[Sequence[Sequence[float]]]) -> tuple[float, float]:
    """Unweighted mean of every vertex in every ring, returned as (lat, lon).

    Vertices are GeoJSON ordered ([lon, lat]). This is not an area-weighted
    centroid and can fall outside concave polygons.
    """
    sum_lat = 0.0
    sum_lon = 0.0
    count = 0
    for ring in rings:
        for vertex in ring:
            sum_lon += vertex[0]
            sum_lat += vertex[1]
            count += 1
    if count == 0:
        raise ValueError("polygon has no vertices")
    return sum_lat / count, sum_lon / count
