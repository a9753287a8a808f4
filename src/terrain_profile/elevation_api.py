"""Fetch elevation data from DEM APIs."""

import functools
import logging
import math

import requests

from terrain_profile.errors import LookupFailure

logger = logging.getLogger(__name__)

# API endpoints
OPEN_ELEVATION_URL = "https://api.open-elevation.com/api/v1/lookup"
OPEN_TOPO_DATA_URL = "https://api.opentopodata.org/v1/srtm30m"

ELEVATION_APIS = ("open-elevation", "opentopodata")


def fetch_elevations(
    locations: list[tuple[float, float]],
    api: str = "open-elevation",
    timeout: float = 30.0,
) -> list[float | None]:
    """Fetch DEM elevation for a list of (lat, lon) pairs in one request.

    Args:
        locations: Points to look up, in order
        api: Which API to use ("open-elevation" or "opentopodata")
        timeout: Request timeout in seconds

    Returns:
        Elevations in meters in request order. An entry is None where the
        service had no data for that point.

    Raises:
        LookupFailure: If the request fails or the response is malformed.
    """
    if api == "open-elevation":
        fetch = _fetch_open_elevation
    elif api == "opentopodata":
        fetch = _fetch_opentopodata
    else:
        raise ValueError(f"Unknown elevation API: {api}")

    logger.debug("Looking up %d elevations via %s", len(locations), api)
    try:
        data = fetch(locations, timeout)
    except requests.RequestException as e:
        logger.warning("Elevation lookup via %s failed: %s", api, e)
        raise LookupFailure(f"Elevation service request failed: {e}") from e
    except ValueError as e:
        # Body was not JSON
        raise LookupFailure(f"Elevation service returned invalid JSON: {e}") from e

    return _parse_results(data)


def _fetch_open_elevation(locations: list[tuple[float, float]], timeout: float) -> dict:
    """POST all locations to Open-Elevation."""
    response = requests.post(
        OPEN_ELEVATION_URL,
        json={"locations": [{"latitude": lat, "longitude": lon} for lat, lon in locations]},
        timeout=timeout,
    )
    response.raise_for_status()
    return response.json()


def _fetch_opentopodata(locations: list[tuple[float, float]], timeout: float) -> dict:
    """Fetch elevation from OpenTopoData API."""
    response = requests.get(
        OPEN_TOPO_DATA_URL,
        params={"locations": "|".join(f"{lat},{lon}" for lat, lon in locations)},
        timeout=timeout,
    )
    response.raise_for_status()
    return response.json()


def _is_finite_number(value) -> bool:
    # bool is an int subclass; NaN and Infinity decode from lenient JSON
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _parse_results(data) -> list[float | None]:
    """Extract the elevation column from a {"results": [...]} body."""
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise LookupFailure("Elevation service response has no results list")

    elevations = []
    for result in results:
        if not isinstance(result, dict) or "elevation" not in result:
            raise LookupFailure("Elevation service result is missing an elevation field")
        elev = result["elevation"]
        if elev is not None and not _is_finite_number(elev):
            raise LookupFailure(f"Elevation service returned a non-numeric elevation: {elev!r}")
        elevations.append(elev)
    return elevations


def make_lookup(api: str = "open-elevation", timeout: float = 30.0):
    """Bind provider settings into a lookup callable taking only the locations."""
    if api not in ELEVATION_APIS:
        raise ValueError(f"Unknown elevation API: {api}")
    return functools.partial(fetch_elevations, api=api, timeout=timeout)
