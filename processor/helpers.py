import re
from typing import Any, Optional


def clean_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for blank/missing CSV cells."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number_from_text(text: Any) -> Optional[float]:
    """Drop everything except digits and dots, then parse the leading number.

    "₹ 1,20,00,000" -> 12000000.0, "850 sq.ft" -> 850.0, "1.2.3" -> 1.2.
    Labels with dots survive the strip, so "Rs. 85" reads as 0.85.
    """
    if text is None:
        return None
    digits = re.sub(r"[^\d.]", "", str(text))
    m = re.match(r"\d+(?:\.\d*)?|\.\d+", digits)
    return float(m.group(0)) if m else None


def capitalize_words(text: str) -> str:
    return re.sub(r"\w\S*", lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)
