"""Field extractors turning raw CSV text into typed property attributes.

Every function here is total: malformed input gives ``None`` (or an empty
list) and the merge step decides whether the entry survives. The city and
locality matchers are ordered lists evaluated first-match-wins; reordering
them changes which value is picked for ambiguous addresses.
"""

import json
import re
from typing import Any, List, NamedTuple, Optional, Pattern, Tuple

from processor.helpers import capitalize_words, clean_text, parse_number_from_text
from processor.models import (
    BASE_AMENITIES,
    NEW_LAUNCH,
    READY_TO_MOVE,
    UNDER_CONSTRUCTION,
    UNKNOWN_POSSESSION,
)

LAKH = 100_000
CRORE = 10_000_000

MIN_AREA = 300
MAX_AREA = 5000
MAX_PRICE = 500_000_000  # 50 Cr


class Location(NamedTuple):
    city: Optional[str]
    locality: Optional[str]


# -----------------------
# Configuration / variant fields
# -----------------------

_BHK_RE = re.compile(r"(\d+)\s*BHK", re.I)


def extract_bhk(config_text: Any) -> Optional[int]:
    """'2 BHK Apartment' -> 2, 'Penthouse' -> None."""
    text = clean_text(config_text)
    if not text:
        return None
    m = _BHK_RE.search(text)
    return int(m.group(1)) if m else None


def parse_price(raw: Any) -> Optional[float]:
    """Normalize a raw price cell to rupees.

    - below 100: noise, rejected ("80" -> None)
    - 100 to 999: lakhs (150 -> 1.5 Cr, 250 -> 2.5 Cr)
    - 1,000 to 99,999: lakhs only when <= 200 and a multiple of 10,
      otherwise taken as rupees
    - above 50 Cr: rejected as unrealistic
    """
    price = parse_number_from_text(clean_text(raw))
    if price is None or price <= 0:
        return None
    if price < 100:
        return None
    if price < 1000:
        return price * LAKH
    if price < 100000:
        # Ambiguous band: the <= 200 check can never hold here, so every value
        # falls through to rupees. Kept as-is; see DESIGN.md.
        if price <= 200 and price % 10 == 0:
            return price * LAKH
        return price
    if price > MAX_PRICE:
        return None
    return price


def parse_area(raw: Any) -> Optional[float]:
    area = parse_number_from_text(clean_text(raw))
    if area is None or area <= 0:
        return None
    if area < MIN_AREA or area > MAX_AREA:
        return None
    return area


def parse_possession(status: Any) -> str:
    text = (clean_text(status) or "").lower()
    if not text:
        return UNKNOWN_POSSESSION
    if "ready" in text:
        return READY_TO_MOVE
    if "under" in text:
        return UNDER_CONSTRUCTION
    if "new" in text:
        return NEW_LAUNCH
    return UNKNOWN_POSSESSION


# -----------------------
# Location
# -----------------------

CITY_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"\b(mumbai|bombay)\b"), "Mumbai"),
    (re.compile(r"\b(pune|poona)\b"), "Pune"),
    (re.compile(r"\b(bangalore|bengaluru)\b"), "Bangalore"),
    (re.compile(r"\b(delhi|new delhi)\b"), "Delhi"),
    (re.compile(r"\b(hyderabad|secunderabad)\b"), "Hyderabad"),
    (re.compile(r"\b(chennai|madras)\b"), "Chennai"),
    (re.compile(r"\b(kolkata|calcutta)\b"), "Kolkata"),
    (re.compile(r"\b(ahmedabad|ahmadabad)\b"), "Ahmedabad"),
    (re.compile(r"\b(surat)\b"), "Surat"),
    (re.compile(r"\b(jaipur)\b"), "Jaipur"),
)

_KNOWN_CITY_RE = re.compile(
    r"\b(mumbai|pune|bangalore|delhi|hyderabad|chennai|kolkata|ahmedabad|surat|jaipur)\b", re.I
)

# Evaluated in this order; the first candidate passing is_valid_locality wins.
LOCALITY_PATTERNS: Tuple[Pattern[str], ...] = (
    # keyword-prefixed phrase: "near Baner Road", "sector Wakad"
    re.compile(r"(?:near|beside|opposite to|at|in|area|locality|sector)\s+([a-z\s]{3,30})(?=,|\.|$)", re.I),
    # area name tagged with a residential suffix: "Model Colony", "Shivaji Nagar"
    re.compile(
        r"([a-z\s]+)(?:\s+(nagar|colony|society|vihar|enclave|estate|park|gardens|road|street|lane))(?=,|\.|$)",
        re.I,
    ),
    # leading segment right before a known city
    re.compile(r"^([^,]{5,50})(?=,?\s*(?:mumbai|pune|bangalore|delhi|hyderabad|chennai|kolkata))", re.I),
    # run of capitalized words before a comma or a (lowercase) city name
    re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)(?=,|\s+(?:mumbai|pune|bangalore|delhi|hyderabad))"),
    # segment after a survey/plot/sector number
    re.compile(r"(?:survey no\.|plot no\.|sector no\.)\s*[a-z0-9]+\s*,\s*([^,]+)", re.I),
)

_LOCATION_PREFIX_RE = re.compile(r"^\s*(?:near|beside|opposite to|at|in|area|locality|sector)\s+", re.I)

LOCALITY_STOPWORDS = frozenset({
    "survey", "plot", "sector", "number", "no", "road", "street", "lane",
    "avenue", "marg", "near", "beside", "opposite", "at", "in", "area",
    "locality", "and", "the", "a", "an", "to", "of", "for", "beside godrej",
    "opposite to mca", "stadium", "school", "college", "hospital", "mamurdi",
    "thite", "nagar", "sai",
})


def looks_like_city(text: str) -> bool:
    return bool(_KNOWN_CITY_RE.search(text))


def is_valid_locality(locality: Optional[str]) -> bool:
    if not locality or len(locality) < 3:
        return False
    words = locality.lower().split()
    if not any(len(word) > 2 and word not in LOCALITY_STOPWORDS for word in words):
        return False
    if looks_like_city(locality):
        return False
    return bool(re.search(r"[a-zA-Z]", locality))


def _clean_locality(candidate: str) -> str:
    candidate = _LOCATION_PREFIX_RE.sub("", candidate.strip())
    return re.sub(r"\s+", " ", candidate, count=1).strip()


def extract_city(search_text: str) -> Optional[str]:
    lowered = search_text.lower()
    for pattern, city in CITY_PATTERNS:
        if pattern.search(lowered):
            return city
    return None


def extract_locality(full_address: str) -> Optional[str]:
    for pattern in LOCALITY_PATTERNS:
        m = pattern.search(full_address)
        if m and m.group(1):
            candidate = _clean_locality(m.group(1))
            if is_valid_locality(candidate):
                return capitalize_words(candidate)

    # first comma segment that reads like a locality
    for part in full_address.split(","):
        trimmed = part.strip()
        if trimmed and is_valid_locality(trimmed):
            return capitalize_words(trimmed)
    return None


def extract_location(full_address: Any, project_name: Any = None) -> Location:
    address = clean_text(full_address)
    if not address:
        return Location(None, None)
    name = clean_text(project_name)
    search_text = " ".join(part for part in (address, name) if part)
    return Location(extract_city(search_text), extract_locality(address))


# -----------------------
# Free-text and project fields
# -----------------------

AMENITY_KEYWORDS = (
    ("Swimming Pool", ("swimming", "pool")),
    ("Gym", ("gym", "fitness")),
    ("Park", ("park", "garden")),
    ("Club House", ("club", "clubhouse")),
    ("Lift", ("lift", "elevator")),
    ("Parking", ("parking", "car park")),
    ("Play Area", ("play", "children")),
)

LARGE_UNIT_AMENITIES = ("Club House", "Swimming Pool")


def extract_amenities(about_text: Any, bhk: Optional[int]) -> List[str]:
    amenities = list(BASE_AMENITIES)
    about = (clean_text(about_text) or "").lower()
    if about:
        for amenity, keywords in AMENITY_KEYWORDS:
            if any(keyword in about for keyword in keywords):
                amenities.append(amenity)
    if bhk is not None and bhk >= 3:
        amenities.extend(LARGE_UNIT_AMENITIES)
    return list(dict.fromkeys(amenities))


def extract_builder(project_name: Any) -> str:
    name = clean_text(project_name)
    if not name:
        return "Unknown Builder"
    words = name.split(" ")
    return f"{words[0]} Builders" if len(words) > 1 else f"{name} Builders"


def parse_rera_id(raw: Any) -> Optional[str]:
    """'["P99000056045"]' -> 'P99000056045'; unquoted values pass through."""
    text = clean_text(raw)
    if not text:
        return None
    m = re.search(r"[\"']([^\"']+)[\"']", text)
    return m.group(1) if m else text


def parse_images(raw: Any) -> List[str]:
    text = clean_text(raw)
    if not text:
        return []
    m = re.search(r"\[(.*)\]", text)
    if not m:
        return []
    try:
        images = json.loads(m.group(0))
    except ValueError:
        return []
    if not isinstance(images, list):
        return []
    return [str(url) for url in images if url]


def format_price(price: float) -> str:
    if price >= CRORE:
        return f"₹{price / CRORE:.1f} Cr"
    if price >= LAKH:
        return f"₹{price / LAKH:.1f} L"
    return f"₹{price:g}"
