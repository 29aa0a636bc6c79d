"""Geospatial helpers shared with the persistence layer."""

import math

EARTH_RADIUS_KM = 6371.0


def create_point(lat: float | None, lng: float | None) -> str | None:
    """Encode coordinates as WKT for a PostGIS geography column.

    Returns:
        ``"POINT(<lng> <lat>)"``, or None when either coordinate is missing
    """
    if lat is None or lng is None:
        return None
    return f"POINT({lng} {lat})"


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres (spherical law of cosines)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lng2 - lng1)
    cos_angle = (
        math.sin(phi1) * math.sin(phi2)
        + math.cos(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    )
    # rounding can push identical points just past 1.0
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)
