import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from processor.models import Property

logger = logging.getLogger(__name__)

Predicate = Callable[[Property], bool]


def _is_set(value: Any) -> bool:
    """Absent, None, "" and the literal string "null" impose no constraint."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip()) and value.strip().lower() != "null"
    if isinstance(value, (list, tuple, set)):
        return len(value) > 0
    return True


def _contains(field: Callable[[Property], Optional[str]], needle: str) -> Predicate:
    needle = needle.strip().lower()
    return lambda p: bool(field(p)) and needle in field(p).lower()


def _has_amenities(requested: Sequence[str]) -> Predicate:
    wanted = [a.strip().lower() for a in requested if a and a.strip()]
    return lambda p: all(any(w in have.lower() for have in p.amenities) for w in wanted)


def build_predicates(filters: Dict[str, Any]) -> List[Predicate]:
    predicates: List[Predicate] = []
    if _is_set(filters.get("city")):
        predicates.append(_contains(lambda p: p.city, str(filters["city"])))
    if _is_set(filters.get("bhk")):
        bhk = int(filters["bhk"])
        predicates.append(lambda p: p.bhk == bhk)
    if _is_set(filters.get("maxPrice")):
        max_price = float(filters["maxPrice"])
        predicates.append(lambda p: p.price <= max_price)
    if _is_set(filters.get("locality")):
        predicates.append(_contains(lambda p: p.locality, str(filters["locality"])))
    if _is_set(filters.get("possession")):
        predicates.append(_contains(lambda p: p.possession, str(filters["possession"])))
    if _is_set(filters.get("amenities")):
        amenities = filters["amenities"]
        if isinstance(amenities, str):
            amenities = [amenities]
        predicates.append(_has_amenities(amenities))
    return predicates


def apply_filters(properties: Sequence[Property], filters: Optional[Dict[str, Any]]) -> List[Property]:
    """AND-combine the filter keys that are present; order of the input is kept."""
    predicates = build_predicates(filters or {})
    results = [p for p in properties if all(pred(p) for pred in predicates)]
    logger.info(f"Filtered results: {len(results)} of {len(properties)}")
    return results


def search_specific_property(query: str, properties: Sequence[Property]) -> List[Property]:
    """Look a project up by name (or address fragment).

    A project name containing the whole query wins outright and only that
    entry is returned.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    for prop in properties:
        if needle in prop.project_name.lower():
            return [prop]
    return [
        prop
        for prop in properties
        if needle in prop.project_name.lower()
        or (prop.full_address and needle in prop.full_address.lower())
    ]
