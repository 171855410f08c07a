"""Tests for the USGS API client.

Uses the `responses` library to mock HTTP requests.
"""

from datetime import datetime
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from src.core.errors import FetchError
from src.core.geo import ReferencePoint
from src.shell.usgs_client import USGS_API_BASE, USGSClient, USGSQueryParams


KOFU = ReferencePoint(latitude=35.662139, longitude=138.568222)


def _sent_params() -> dict[str, str]:
    query = parse_qs(urlparse(responses.calls[0].request.url).query)
    return {k: v[0] for k, v in query.items()}


class TestBuildParams:
    """Tests for USGSClient._build_params()."""

    def test_radius_query(self):
        params = USGSClient()._build_params(USGSQueryParams(
            latitude=35.5,
            longitude=138.5,
            max_radius_km=100.0,
        ))

        assert params == {
            "format": "geojson",
            "orderby": "time",
            "latitude": "35.5",
            "longitude": "138.5",
            "maxradiuskm": "100.0",
        }

    def test_optional_start_and_limit(self):
        params = USGSClient()._build_params(USGSQueryParams(
            latitude=0.0,
            longitude=0.0,
            max_radius_km=10.0,
            start_time=datetime(2024, 1, 1, 6, 30, 0),
            limit=20,
        ))

        assert params["starttime"] == "2024-01-01T06:30:00"
        assert params["limit"] == "20"


class TestFetchEarthquakes:
    """Tests for USGSClient.fetch_nearby() and fetch_earthquakes()."""

    @responses.activate
    def test_returns_geojson(self, make_feature):
        body = {"type": "FeatureCollection", "features": [make_feature("e1")]}
        responses.add(responses.GET, USGS_API_BASE, json=body, status=200)

        result = USGSClient().fetch_nearby(KOFU, 100.0)

        assert result == body
        params = _sent_params()
        assert params["maxradiuskm"] == "100.0"
        assert params["latitude"] == "35.662139"
        assert "starttime" not in params

    @responses.activate
    def test_lookback_sets_start_time(self):
        responses.add(responses.GET, USGS_API_BASE, json={"features": []}, status=200)

        USGSClient().fetch_nearby(KOFU, 100.0, hours=2)

        assert "starttime" in _sent_params()

    @responses.activate
    def test_http_error_raises(self):
        responses.add(responses.GET, USGS_API_BASE, body="unavailable", status=503)

        with pytest.raises(FetchError):
            USGSClient().fetch_nearby(KOFU, 100.0)

    @responses.activate
    def test_timeout_raises(self):
        responses.add(responses.GET, USGS_API_BASE, body=requests.Timeout())

        with pytest.raises(FetchError, match="timed out"):
            USGSClient(timeout=5).fetch_nearby(KOFU, 100.0)

    @responses.activate
    def test_invalid_json_raises(self):
        responses.add(responses.GET, USGS_API_BASE, body="<html>", status=200)

        with pytest.raises(FetchError):
            USGSClient().fetch_nearby(KOFU, 100.0)

    @responses.activate
    def test_missing_features_raises(self):
        responses.add(responses.GET, USGS_API_BASE, json={"type": "FeatureCollection"}, status=200)

        with pytest.raises(FetchError, match="features"):
            USGSClient().fetch_nearby(KOFU, 100.0)
