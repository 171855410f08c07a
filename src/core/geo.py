"""Geographic and ground-motion calculations - Pure functions.

This module provides the distance from an earthquake to the monitored
reference point and a rough peak ground acceleration (PGA) estimate.
All functions are pure with no side effects.

The PGA estimate approximates a published attenuation relationship with
fixed coefficients. It is a screening heuristic for alert text, not a
calibrated or certified seismic hazard calculation.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0

# Attenuation coefficients: ln(PGA) = a + b(M-6) + c(M-6)^2 + d ln(R)
PGA_COEFF_A = 0.03615
PGA_COEFF_B = 0.229
PGA_COEFF_C = -0.00114
PGA_COEFF_D = -0.647

# Pad added to epicentral distance for unmodeled focal depth / near-field effects
PGA_RANGE_PAD_KM = 30.0


@dataclass(frozen=True)
class ReferencePoint:
    """The fixed location earthquakes are measured against.

    Attributes:
        latitude: Location latitude
        longitude: Location longitude
        name: Human-readable name (e.g., "Kofu")
    """
    latitude: float
    longitude: float
    name: str = ""


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers, rounded to 2 decimal places
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Floating point can push a a hair past 1 for antipodal points
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 2)


def distance_to_reference(
    reference: ReferencePoint,
    latitude: float,
    longitude: float,
) -> float:
    """Distance in kilometers from the reference point to a location.

    Pure function.
    """
    return calculate_distance(
        reference.latitude,
        reference.longitude,
        latitude,
        longitude,
    )


def estimate_pga(magnitude: float, depth_km: float, distance_km: float) -> float:
    """Estimate peak ground acceleration at the reference point.

    Pure function.

    Uses R = sqrt(distance^2 + 30^2). Depth is accepted for interface
    stability but the fixed 30 km pad stands in for it, so results do
    not change with depth.

    Args:
        magnitude: Earthquake magnitude
        depth_km: Hypocenter depth in kilometers
        distance_km: Epicentral distance to the reference point

    Returns:
        Estimated PGA in units of g
    """
    effective_range = math.sqrt(distance_km ** 2 + PGA_RANGE_PAD_KM ** 2)
    m = magnitude - 6.0

    log_pga = (
        PGA_COEFF_A
        + PGA_COEFF_B * m
        + PGA_COEFF_C * m ** 2
        + PGA_COEFF_D * math.log(effective_range)
    )

    return math.exp(log_pga)

