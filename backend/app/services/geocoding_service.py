"""Geocoding proxy: address autocomplete against the TomTom search API."""

import logging
from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from app.config import settings
from app.exceptions import InternalError, ValidationError

logger = logging.getLogger(__name__)

UPSTREAM_STATUS_CODE = 502


def _search_url(query: str) -> str:
    base = settings.GEOCODER_BASE_URL.rstrip("/")
    return f"{base}/search/2/search/{quote(query, safe='')}.json"


def _parse_results(payload: Any) -> List[Dict[str, Any]]:
    results = payload.get("results", []) if isinstance(payload, dict) else []
    suggestions: List[Dict[str, Any]] = []
    for item in results if isinstance(results, list) else []:
        address = (item.get("address") or {}).get("freeformAddress")
        position = item.get("position") or {}
        if not address or position.get("lat") is None or position.get("lon") is None:
            continue
        suggestions.append({"address": address, "lat": float(position["lat"]), "lon": float(position["lon"])})
    return suggestions[: settings.GEOCODER_RESULT_LIMIT]


def autocomplete(query: str) -> List[Dict[str, Any]]:
    keyword = (query or "").strip()
    if not keyword:
        raise ValidationError("query is required")

    params = {
        "key": settings.GEOCODER_API_KEY,
        "typeahead": "true",
        "limit": settings.GEOCODER_RESULT_LIMIT,
        "countrySet": settings.GEOCODER_COUNTRY_SET,
    }
    try:
        response = httpx.get(
            _search_url(keyword),
            params=params,
            timeout=float(settings.GEOCODER_TIMEOUT_SECONDS),
        )
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoder request failed for %r: %s", keyword, exc)
        raise InternalError(status_code=UPSTREAM_STATUS_CODE) from exc
    return _parse_results(payload)
