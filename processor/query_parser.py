"""Keyword/regex filter extraction used when the LLM is unavailable.

Each field is read independently and stops at its first matching rule, so
"2 bhk or 3 bhk" gives bhk=2 and "1 cr ... 50 lakh" gives 1 Cr.
"""

import logging
import re
from typing import Any, Dict, Tuple, Union

from processor.extractors import CRORE, LAKH
from processor.models import READY_TO_MOVE, UNDER_CONSTRUCTION

logger = logging.getLogger(__name__)

KNOWN_CITIES = ("pune", "mumbai", "bangalore", "delhi", "hyderabad", "chennai")

KNOWN_LOCALITIES = (
    "chembur", "shivajinagar", "ashoknagar", "model colony", "sindhi society",
    "wakad", "baner", "hinjewadi", "kharadi", "kothrud", "andheri", "bandra",
)

BHK_PATTERNS = (
    re.compile(r"(\d)\s*bhk", re.I),
    re.compile(r"(\d)\s*bedroom", re.I),
    re.compile(r"(\d)\s*bed", re.I),
    re.compile(r"(\d)\s*b/?h/?k", re.I),
)

BUDGET_PATTERNS = (
    re.compile(r"under\s*₹?\s*(\d+(?:\.\d+)?)\s*(cr|crore)", re.I),
    re.compile(r"upto\s*₹?\s*(\d+(?:\.\d+)?)\s*(cr|crore)", re.I),
    re.compile(r"below\s*₹?\s*(\d+(?:\.\d+)?)\s*(cr|crore)", re.I),
    re.compile(r"under\s*₹?\s*(\d+(?:\.\d+)?)\s*(lakh|lac)", re.I),
    re.compile(r"(\d+(?:\.\d+)?)\s*(cr|crore)", re.I),
    re.compile(r"(\d+(?:\.\d+)?)\s*(lakh|lac)", re.I),
)

SPECIFIC_PROPERTY_PHRASES = (
    "address of", "details of", "information about", "show me",
    "tell me about", "where is", "location of", "full address of",
)


def is_specific_property_query(message: str) -> bool:
    lowered = (message or "").lower()
    return any(phrase in lowered for phrase in SPECIFIC_PROPERTY_PHRASES)


def _to_rupees(amount: float, unit: str) -> Union[int, float]:
    multiplier = CRORE if unit.lower() in ("cr", "crore") else LAKH
    value = round(amount * multiplier, 2)
    return int(value) if value == int(value) else value


def parse_budget(text: str) -> Tuple[bool, Union[int, float, None]]:
    for pattern in BUDGET_PATTERNS:
        m = pattern.search(text)
        if m:
            return True, _to_rupees(float(m.group(1)), m.group(2))
    return False, None


def parse_filters(message: str) -> Dict[str, Any]:
    """Derive a filter dict from free text; keys are present only when found."""
    filters: Dict[str, Any] = {}
    lowered = (message or "").lower()

    for city in KNOWN_CITIES:
        if city in lowered:
            filters["city"] = city
            break

    for pattern in BHK_PATTERNS:
        m = pattern.search(lowered)
        if m:
            filters["bhk"] = int(m.group(1))
            break

    found, max_price = parse_budget(lowered)
    if found:
        filters["maxPrice"] = max_price

    for locality in KNOWN_LOCALITIES:
        if locality in lowered:
            filters["locality"] = locality
            break

    if "ready" in lowered or "move in" in lowered:
        filters["possession"] = READY_TO_MOVE
    elif "under construction" in lowered:
        filters["possession"] = UNDER_CONSTRUCTION

    logger.info(f"Fallback parser filters: {filters}")
    return filters
