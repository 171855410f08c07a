"""USGS API Client - Imperative Shell.

This module handles HTTP communication with the USGS Earthquake API.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from src.core.errors import FetchError
from src.core.geo import ReferencePoint


logger = logging.getLogger(__name__)


# USGS FDSN Event Web Service base URL
USGS_API_BASE = "https://earthquake.usgs.gov/fdsnws/event/1/query"

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


@dataclass
class USGSQueryParams:
    """Parameters for a radius query against the USGS API.

    Attributes:
        latitude: Search center latitude
        longitude: Search center longitude
        max_radius_km: Search radius in kilometers
        start_time: Fetch earthquakes after this time (None for feed default)
        limit: Maximum number of results (None for no limit)
    """
    latitude: float
    longitude: float
    max_radius_km: float
    start_time: datetime | None = None
    limit: int | None = None


class USGSClient:
    """Client for fetching earthquake data from USGS API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = USGS_API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize USGS client.

        Args:
            base_url: USGS API base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def _build_params(self, query: USGSQueryParams) -> dict[str, str]:
        """Build query parameters for USGS API request.

        Args:
            query: Query parameters

        Returns:
            Dict of URL query parameters
        """
        params: dict[str, str] = {
            "format": "geojson",
            "orderby": "time",
            "latitude": str(query.latitude),
            "longitude": str(query.longitude),
            "maxradiuskm": str(query.max_radius_km),
        }

        if query.start_time is not None:
            params["starttime"] = query.start_time.strftime("%Y-%m-%dT%H:%M:%S")

        if query.limit is not None:
            params["limit"] = str(query.limit)

        return params

    def fetch_earthquakes(self, query: USGSQueryParams) -> dict[str, Any]:
        """Fetch earthquake data from USGS API.

        This method performs HTTP I/O.

        Args:
            query: Query parameters

        Returns:
            Raw GeoJSON response from USGS

        Raises:
            FetchError: If the request fails or the response is malformed
        """
        params = self._build_params(query)

        logger.info(
            "Fetching earthquakes from USGS",
            extra={"params": params},
        )

        try:
            response = requests.get(
                self.base_url,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise FetchError(f"USGS request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise FetchError(f"USGS request failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"USGS returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise FetchError("USGS response has no features list")

        logger.info(
            "Fetched %d earthquakes from USGS",
            len(data["features"]),
        )

        return data

    def fetch_nearby(
        self,
        reference: ReferencePoint,
        radius_km: float,
        hours: int | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Convenience method to fetch earthquakes around a point.

        Args:
            reference: Search center
            radius_km: Search radius in kilometers
            hours: How many hours back to fetch (None for feed default)
            limit: Maximum results

        Returns:
            Raw GeoJSON response

        Raises:
            FetchError: If the request fails or the response is malformed
        """
        start = None
        if hours is not None:
            start = datetime.now(timezone.utc) - timedelta(hours=hours)

        query = USGSQueryParams(
            latitude=reference.latitude,
            longitude=reference.longitude,
            max_radius_km=radius_km,
            start_time=start,
            limit=limit,
        )

        return self.fetch_earthquakes(query)
