"""Unit tests for earthquake parsing.

These tests demonstrate the benefit of the Functional Core pattern:
- No mocks needed
- Fast, deterministic execution
- Simple assertions on pure functions
"""

from datetime import datetime, timezone

import pytest

from src.core.earthquake import (
    Earthquake,
    parse_earthquake,
    parse_earthquakes,
)


# Sample USGS GeoJSON feature for testing
SAMPLE_FEATURE = {
    "type": "Feature",
    "id": "us7000kufc",
    "properties": {
        "mag": 5.3,
        "place": "20 km SW of Kofu, Japan",
        "title": "M 5.3 - 20 km SW of Kofu, Japan",
        "time": 1703001600000,  # 2023-12-19 12:00:00 UTC
        "url": "https://earthquake.usgs.gov/earthquakes/eventpage/us7000kufc",
        "tsunami": 0,
        "magType": "mww",
    },
    "geometry": {
        "type": "Point",
        "coordinates": [138.45, 35.55, 12.0],  # lon, lat, depth
    },
}


class TestParseEarthquake:
    """Tests for parse_earthquake() pure function."""

    def test_parses_valid_feature(self):
        """Should parse a valid GeoJSON feature into Earthquake."""
        result = parse_earthquake(SAMPLE_FEATURE)

        assert result is not None
        assert result.id == "us7000kufc"
        assert result.magnitude == 5.3
        assert result.latitude == 35.55
        assert result.longitude == 138.45
        assert result.depth_km == 12.0
        assert result.title == "M 5.3 - 20 km SW of Kofu, Japan"
        assert result.place == "20 km SW of Kofu, Japan"

    def test_parses_time_correctly(self):
        """Should convert milliseconds to datetime."""
        result = parse_earthquake(SAMPLE_FEATURE)

        assert result is not None
        expected_time = datetime(2023, 12, 19, 12, 0, 0, tzinfo=timezone.utc)
        assert result.time == expected_time

    def test_keeps_passthrough_properties(self):
        """Uninterpreted feed properties are preserved."""
        result = parse_earthquake(SAMPLE_FEATURE)

        assert result is not None
        assert result.properties["magType"] == "mww"
        assert result.properties["tsunami"] == 0

    def test_prefers_properties_depth(self):
        """properties.depth wins over the geometry depth."""
        feature = {
            **SAMPLE_FEATURE,
            "properties": {**SAMPLE_FEATURE["properties"], "depth": 42.0},
        }
        result = parse_earthquake(feature)

        assert result is not None
        assert result.depth_km == 42.0

    def test_depth_defaults_to_zero_without_third_coordinate(self):
        """Two-coordinate geometry parses with zero depth."""
        feature = {
            **SAMPLE_FEATURE,
            "geometry": {"coordinates": [138.45, 35.55]},
        }
        result = parse_earthquake(feature)

        assert result is not None
        assert result.depth_km == 0.0

    def test_negative_depth_clamped_to_zero(self):
        """Above-sea-level hypocenters are reported as depth 0."""
        feature = {
            **SAMPLE_FEATURE,
            "geometry": {"coordinates": [138.45, 35.55, -1.2]},
        }
        result = parse_earthquake(feature)

        assert result is not None
        assert result.depth_km == 0.0

    def test_missing_time_is_allowed(self):
        """Time is optional."""
        props = {k: v for k, v in SAMPLE_FEATURE["properties"].items() if k != "time"}
        result = parse_earthquake({**SAMPLE_FEATURE, "properties": props})

        assert result is not None
        assert result.time is None

    def test_returns_none_for_missing_magnitude(self):
        """Should return None if magnitude is missing."""
        props = {k: v for k, v in SAMPLE_FEATURE["properties"].items() if k != "mag"}
        assert parse_earthquake({**SAMPLE_FEATURE, "properties": props}) is None

    def test_returns_none_for_missing_id(self):
        """Should return None if the feature has no id."""
        feature = {k: v for k, v in SAMPLE_FEATURE.items() if k != "id"}
        assert parse_earthquake(feature) is None

    def test_returns_none_for_missing_coordinates(self):
        """Should return None if coordinates are incomplete."""
        feature = {**SAMPLE_FEATURE, "geometry": {"coordinates": [138.45]}}
        assert parse_earthquake(feature) is None

    def test_returns_none_for_non_numeric_magnitude(self):
        """Should return None if magnitude is not a number."""
        feature = {
            **SAMPLE_FEATURE,
            "properties": {**SAMPLE_FEATURE["properties"], "mag": "big"},
        }
        assert parse_earthquake(feature) is None


class TestParseEarthquakes:
    """Tests for parse_earthquakes() pure function."""

    def test_keeps_feed_order(self):
        """Earthquakes come back in the order the feed listed them."""
        later = {
            **SAMPLE_FEATURE,
            "id": "later",
            "properties": {**SAMPLE_FEATURE["properties"], "time": 1703005200000},
        }
        earlier = {**SAMPLE_FEATURE, "id": "earlier"}

        result = parse_earthquakes({"features": [earlier, later]})

        assert [e.id for e in result] == ["earlier", "later"]

    def test_skips_invalid_features(self):
        """Invalid features are dropped, valid ones kept."""
        geojson = {"features": [SAMPLE_FEATURE, {"id": "bad"}, "not a feature"]}

        result = parse_earthquakes(geojson)

        assert len(result) == 1
        assert result[0].id == "us7000kufc"

    def test_empty_collection(self):
        """Should return empty list when there are no features."""
        assert parse_earthquakes({"features": []}) == []
        assert parse_earthquakes({}) == []


class TestEarthquake:
    """Tests for the Earthquake dataclass."""

    def test_coordinates_property(self):
        """coordinates returns (latitude, longitude)."""
        eq = Earthquake(id="x", magnitude=5.0, depth_km=10.0, latitude=35.0, longitude=138.0)
        assert eq.coordinates == (35.0, 138.0)

    def test_is_immutable(self):
        """Earthquake is frozen."""
        eq = Earthquake(id="x", magnitude=5.0, depth_km=10.0, latitude=35.0, longitude=138.0)
        with pytest.raises(AttributeError):
            eq.magnitude = 6.0
