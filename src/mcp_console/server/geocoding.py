# mcp_console/server/geocoding.py
"""Open-Meteo geocoding lookup."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
REQUEST_TIMEOUT = 10.0


async def search_city(city: str, client: Optional[httpx.AsyncClient] = None) -> Optional[Dict[str, Any]]:
    """Return the best match for *city*, or None when the API knows nothing."""
    params = {"name": city, "count": 10, "language": "en", "format": "json"}
    if client is None:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as own:
            response = await own.get(GEOCODING_URL, params=params)
    else:
        response = await client.get(GEOCODING_URL, params=params)
    response.raise_for_status()

    results = response.json().get("results") or []
    log.debug("geocoding %r: %d result(s)", city, len(results))
    return results[0] if results else None


def describe_coordinates(city: str, match: Optional[Dict[str, Any]]) -> str:
    if not match:
        return f"No data found for {city}."
    latitude = match.get("latitude")
    longitude = match.get("longitude")
    return (
        f"Data for {city} is "
        f"{latitude if latitude is not None else 'unknown'} and "
        f"{longitude if longitude is not None else 'unknown'}!"
    )
