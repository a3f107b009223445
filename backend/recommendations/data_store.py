from __future__ import annotations

import copy
import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .config import DEFAULT_RECOMMENDATION_CONFIG

_catalog: Catalog | None = None


class Catalog:
    """Read-only, hand-curated neighborhood records keyed by exact city name."""

    def __init__(self, cities: Mapping[str, list[dict[str, Any]]], generic: dict[str, Any]):
        self._cities = MappingProxyType(
            {city: tuple(records) for city, records in cities.items()}
        )
        self._generic = generic

    @property
    def cities(self) -> list[str]:
        return sorted(self._cities)

    def records_for(self, city: str) -> list[dict[str, Any]]:
        """Deep copies of the records for ``city``; empty when the city is unlisted."""
        return copy.deepcopy(list(self._cities.get(city, ())))

    def generic_record(self, city: str, state: str) -> dict[str, Any]:
        """The generic template with the city and state names filled in."""
        values = {
            "{city}": city,
            "{state}": state,
            "{city_query}": "+".join(city.split()),
            "{state_query}": "+".join(state.split()),
        }
        return _fill(copy.deepcopy(self._generic), values)


def _fill(value: Any, values: dict[str, str]) -> Any:
    if isinstance(value, str):
        for placeholder, replacement in values.items():
            value = value.replace(placeholder, replacement)
        return value
    if isinstance(value, list):
        return [_fill(v, values) for v in value]
    if isinstance(value, dict):
        return {k: _fill(v, values) for k, v in value.items()}
    return value


def _load(path: Path) -> Catalog:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return Catalog(raw["cities"], raw["generic"])


def get_catalog() -> Catalog:
    """Return the neighborhood catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = _load(DEFAULT_RECOMMENDATION_CONFIG.catalog_path)
    return _catalog
