"""Earthquake data models and parsing - Pure functions.

This module handles parsing USGS GeoJSON data into typed Earthquake objects.
All functions are pure with no side effects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        id: Unique USGS event ID
        magnitude: Earthquake magnitude
        depth_km: Depth in kilometers (never negative)
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        time: Event timestamp (UTC), None if the feed omitted it
        title: Feed title, e.g. "M 5.1 - 20 km SW of Kofu, Japan"
        place: Human-readable location description
        url: USGS event detail URL
        properties: Raw feed properties, kept but not interpreted
    """
    id: str
    magnitude: float
    depth_km: float
    latitude: float
    longitude: float
    time: datetime | None = None
    title: str = ""
    place: str = ""
    url: str = ""
    properties: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def _parse_depth(props: dict[str, Any], coords: list[Any]) -> float:
    """Pick the depth from properties.depth, else geometry, else 0."""
    depth = props.get("depth")
    if depth is None and len(coords) >= 3:
        depth = coords[2]
    if depth is None:
        return 0.0
    return max(float(depth), 0.0)


def parse_earthquake(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function: takes raw dict, returns typed Earthquake or None if invalid.

    Args:
        feature: GeoJSON feature dict from USGS API

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        event_id = feature.get("id")
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if not event_id or len(coords) < 2:
            return None

        magnitude = props.get("mag")
        if magnitude is None:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        event_time = None
        if time_ms is not None:
            event_time = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)

        return Earthquake(
            id=str(event_id),
            magnitude=float(magnitude),
            depth_km=_parse_depth(props, coords),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            time=event_time,
            title=props.get("title") or "",
            place=props.get("place") or "",
            url=props.get("url") or "",
            properties=dict(props),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def parse_earthquakes(geojson: dict[str, Any]) -> list[Earthquake]:
    """Parse USGS GeoJSON response into list of Earthquakes.

    Pure function: filters out invalid features and keeps feed order.

    Args:
        geojson: Full GeoJSON FeatureCollection from USGS API

    Returns:
        List of valid Earthquake objects, in the order the feed listed them
    """
    earthquakes = []

    for feature in geojson.get("features", []):
        earthquake = parse_earthquake(feature)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return earthquakes
