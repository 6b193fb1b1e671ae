"""Aggregate statistics and deterministic summary text for a result set."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from processor.extractors import format_price
from processor.models import READY_TO_MOVE, UNDER_CONSTRUCTION, Property


@dataclass
class PropertyStats:
    total: int
    cities: List[str]
    localities: List[str]
    bhk_range: str
    price_range: str
    ready_to_move: int
    under_construction: int
    matching_bhk: int
    top_amenities: List[str] = field(default_factory=list)

    def to_prompt_lines(self) -> str:
        return "\n".join([
            f"- Total properties found: {self.total}",
            f"- Cities: {', '.join(self.cities)}",
            f"- Localities: {', '.join(self.localities)}",
            f"- BHK range: {self.bhk_range}",
            f"- Price range: {self.price_range}",
            f"- Possession: {self.ready_to_move} ready to move, "
            f"{self.under_construction} under construction",
            f"- Top amenities: {', '.join(self.top_amenities)}",
        ])


def _distinct(values) -> List[Any]:
    return [v for v in dict.fromkeys(values) if v]


def format_price_range(min_price: Optional[float], max_price: Optional[float]) -> str:
    if not min_price or not max_price:
        return "Various price ranges"
    return f"{format_price(min_price)} - {format_price(max_price)}"


def calculate_property_stats(properties: Sequence[Property]) -> PropertyStats:
    cities = _distinct(p.city for p in properties)
    localities = _distinct(p.locality for p in properties)[:3]
    bhks = sorted(_distinct(p.bhk for p in properties))
    prices = [p.price for p in properties if p.price and p.price > 0]

    # Counter.most_common keeps first-seen order among equal counts
    amenity_counts = Counter(a for p in properties for a in p.amenities)
    top_amenities = [name for name, _ in amenity_counts.most_common(5)]

    return PropertyStats(
        total=len(properties),
        cities=cities or ["Multiple cities"],
        localities=localities or ["Various areas"],
        bhk_range=f"{bhks[0]}-{bhks[-1]} BHK" if bhks else "Various configurations",
        price_range=format_price_range(min(prices) if prices else None, max(prices) if prices else None),
        ready_to_move=sum(1 for p in properties if p.possession == READY_TO_MOVE),
        under_construction=sum(1 for p in properties if p.possession == UNDER_CONSTRUCTION),
        matching_bhk=sum(1 for p in properties if p.bhk),
        top_amenities=top_amenities or ["Standard amenities"],
    )


def generate_data_driven_summary(
    properties: Sequence[Property], user_query: str, filters: Dict[str, Any]
) -> str:
    stats = calculate_property_stats(properties)

    summary = f"I found {stats.total} properties matching your search"
    if stats.cities:
        summary += f" in {', '.join(stats.cities)}"
    if stats.localities and stats.localities[0] != "Various areas":
        summary += f", primarily in {', '.join(stats.localities)}"
    summary += f". Price range: {stats.price_range}."

    possession_info = []
    if stats.ready_to_move > 0:
        possession_info.append(f"{stats.ready_to_move} ready to move")
    if stats.under_construction > 0:
        possession_info.append(f"{stats.under_construction} under construction")
    if possession_info:
        summary += f" {' and '.join(possession_info)} options available."

    if filters.get("bhk") and stats.matching_bhk > 0:
        summary += f" {stats.matching_bhk} properties match your {filters['bhk']}BHK requirement."
    return summary


NO_RESULT_SUGGESTIONS = (
    ("maxPrice", "adjusting your budget"),
    ("bhk", "trying different BHK configurations"),
    ("city", "expanding your location search"),
    ("possession", "considering different possession status"),
)


def generate_no_results_summary(user_query: str, filters: Dict[str, Any]) -> str:
    summary = f'I couldn\'t find any properties matching "{user_query}".'
    suggestions = [text for key, text in NO_RESULT_SUGGESTIONS if filters.get(key)]
    if suggestions:
        summary += f" You might try {' or '.join(suggestions)}."
    else:
        summary += " Please try adjusting your search criteria."
    return summary
