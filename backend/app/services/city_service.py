"""City directory: static city list with fuzzy name matching."""

import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from fuzzywuzzy import process

from app.config import settings
from app.exceptions import InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MATCH_SCORE_CUTOFF = 60


@lru_cache(maxsize=4)
def _load_cities(path: str) -> Tuple[Dict[str, Any], ...]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.exception("Failed to load city data from %s", path)
        raise InternalError() from exc
    return tuple(row for row in rows if isinstance(row, dict) and row.get("city"))


def get_cities() -> Tuple[Dict[str, Any], ...]:
    return _load_cities(settings.CITY_DATA_PATH)


def search_cities(query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    keyword = (query or "").strip()
    if not keyword:
        raise ValidationError("city query is required")
    cities = get_cities()
    choices = {index: row["city"] for index, row in enumerate(cities)}
    matches = process.extractBests(
        keyword,
        choices,
        score_cutoff=MATCH_SCORE_CUTOFF,
        limit=limit or settings.CITY_MATCH_LIMIT,
    )
    return [cities[index] for _name, _score, index in matches]


def find_city(name: str) -> Dict[str, Any]:
    """Exact, case-insensitive city lookup.

    ``"Portland, ME"`` narrows by state; a bare ambiguous name resolves to the
    first (most populous) row of the city list.
    """
    target = (name or "").strip().lower()
    if not target:
        raise ValidationError("location is required")
    city_name, _, state = (part.strip() for part in target.partition(","))
    for row in get_cities():
        if str(row["city"]).lower() != city_name:
            continue
        if state and state not in (str(row.get("state_id", "")).lower(), str(row.get("state_name", "")).lower()):
            continue
        return row
    raise NotFoundError("City", name, message="City not found")
