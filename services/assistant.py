"""Filter extraction and summary generation, LLM-backed with local fallbacks.

Each capability has a heuristic implementation, a Gemini implementation and
a ``Fallback*`` wrapper that tries the Gemini one and drops to the heuristic
one on any ``LLMError``. ``PropertyAssistant`` wires them to the property
collection for a single chat turn.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional, Protocol, Sequence

from config import Settings
from processor.models import Property
from processor.query_parser import is_specific_property_query, parse_filters
from processor.search import apply_filters, search_specific_property
from processor.summary import (
    calculate_property_stats,
    generate_data_driven_summary,
    generate_no_results_summary,
)
from services.llm import GeminiClient, LLMError, extract_json_object, strip_null_values

logger = logging.getLogger(__name__)


FILTER_SYSTEM_PROMPT = """Extract real estate search filters from user message. Return ONLY valid JSON with these fields:
{
  "city": "city name or null",
  "bhk": number or null,
  "maxPrice": number in rupees (convert "Cr" to 10000000, "Lakh" to 100000) or null,
  "locality": "area/locality or null",
  "possession": "Ready to Move or Under Construction or null",
  "amenities": ["array", "of", "amenities"] or null
}
Examples:
- "3BHK in Pune under 1.2 Cr" -> {"city": "Pune", "bhk": 3, "maxPrice": 12000000, "locality": null, "possession": null, "amenities": null}
- "2 bedroom flat in Mumbai" -> {"city": "Mumbai", "bhk": 2, "maxPrice": null, "locality": null, "possession": null, "amenities": null}
- "Ready to move apartment" -> {"city": null, "bhk": null, "maxPrice": null, "locality": null, "possession": "Ready to Move", "amenities": null}"""

SUMMARY_SYSTEM_PROMPT = """You are a helpful real estate assistant. Generate a SHORT summary of 2-4 lines describing the best-matched properties using ONLY the provided data.

IMPORTANT RULES:
- Use ONLY the data provided below - DO NOT make up or hallucinate any property details
- Keep it to 2-4 lines maximum
- Mention key facts from the data: locations, price ranges, possession status, key amenities
- If specific filters were applied, mention how they affected the results
- Do NOT mention any specific areas that are not in the data"""

NO_RESULTS_SYSTEM_PROMPT = """You are a helpful real estate assistant. Politely inform the user that no properties were found and provide helpful suggestions based ONLY on available data.

IMPORTANT RULES:
- Do NOT suggest specific areas or locations that are not in the available data
- Suggest general adjustments like budget, BHK, or possession status
- Keep it to 2-3 lines maximum
- Do not make up or hallucinate any information"""


# -----------------------
# Filter extraction
# -----------------------

class FilterExtractor(Protocol):
    def extract(self, message: str) -> Dict[str, Any]:
        ...


class HeuristicFilterExtractor:
    def extract(self, message: str) -> Dict[str, Any]:
        return parse_filters(message)


def _to_number(value: Any) -> Optional[float]:
    """Finite float, or None; JSON replies may carry Infinity or NaN."""
    try:
        number = float(str(value).replace(",", ""))
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_llm_filters(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Keep known keys with usable types; anything else is dropped."""
    data = strip_null_values(raw)
    filters: Dict[str, Any] = {}

    for key in ("city", "locality", "possession"):
        if isinstance(data.get(key), str):
            filters[key] = data[key].strip()

    bhk = _to_number(data.get("bhk")) if "bhk" in data else None
    if bhk is not None:
        filters["bhk"] = int(bhk)

    max_price = _to_number(data.get("maxPrice")) if "maxPrice" in data else None
    if max_price is not None:
        filters["maxPrice"] = int(max_price) if max_price == int(max_price) else max_price

    amenities = data.get("amenities")
    if isinstance(amenities, str):
        amenities = [amenities]
    if isinstance(amenities, list):
        cleaned = [str(a).strip() for a in amenities if a and str(a).strip()]
        if cleaned:
            filters["amenities"] = cleaned

    dropped = set(data) - set(filters)
    if dropped:
        logger.debug(f"Ignoring unusable LLM filter keys: {sorted(dropped)}")
    return filters


class LLMFilterExtractor:
    def __init__(self, client: GeminiClient, temperature: float = 0.1, max_tokens: int = 500):
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def extract(self, message: str) -> Dict[str, Any]:
        logger.info("Calling Gemini for filter extraction...")
        text = self.client.generate(
            FILTER_SYSTEM_PROMPT, message, temperature=self.temperature, max_tokens=self.max_tokens
        )
        filters = normalize_llm_filters(extract_json_object(text))
        logger.info(f"LLM filters: {filters}")
        return filters


class FallbackFilterExtractor:
    def __init__(self, primary: Optional[FilterExtractor], fallback: FilterExtractor):
        self.primary = primary
        self.fallback = fallback

    def extract(self, message: str) -> Dict[str, Any]:
        if self.primary is not None:
            try:
                return self.primary.extract(message)
            except LLMError as e:
                logger.warning(f"LLM filter extraction failed, using fallback parser: {e}")
        return self.fallback.extract(message)


# -----------------------
# Summaries
# -----------------------

class SummaryGenerator(Protocol):
    def summarize(self, properties: Sequence[Property], user_query: str, filters: Dict[str, Any]) -> str:
        ...


class TemplateSummaryGenerator:
    def summarize(self, properties: Sequence[Property], user_query: str, filters: Dict[str, Any]) -> str:
        if not properties:
            logger.info(f"No properties found for query: {user_query}")
            return generate_no_results_summary(user_query, filters)
        return generate_data_driven_summary(properties, user_query, filters)


class LLMSummaryGenerator:
    """Only aggregate statistics are sent to the model, never individual rows."""

    def __init__(self, client: GeminiClient, temperature: float = 0.7, max_tokens: int = 150):
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(self, properties: Sequence[Property], user_query: str, filters: Dict[str, Any]) -> str:
        header = f'User Query: "{user_query}"\nApplied Filters: {json.dumps(filters)}\n'
        if not properties:
            return (
                header
                + "\nGenerate a polite 2-3 line response explaining no properties were found "
                "and suggesting general adjustments."
            )
        stats = calculate_property_stats(properties)
        return (
            header
            + f"\nProperty Data Summary:\n{stats.to_prompt_lines()}\n\n"
            "Generate a 2-4 line summary using ONLY this data. "
            "Be specific about locations, prices, and key features."
        )

    def summarize(self, properties: Sequence[Property], user_query: str, filters: Dict[str, Any]) -> str:
        system = SUMMARY_SYSTEM_PROMPT if properties else NO_RESULTS_SYSTEM_PROMPT
        max_tokens = self.max_tokens if properties else min(self.max_tokens, 120)
        logger.info(f"Calling Gemini for summary of {len(properties)} properties...")
        return self.client.generate(
            system,
            self.build_prompt(properties, user_query, filters),
            temperature=self.temperature,
            max_tokens=max_tokens,
        )


class FallbackSummaryGenerator:
    def __init__(self, primary: Optional[SummaryGenerator], fallback: SummaryGenerator):
        self.primary = primary
        self.fallback = fallback

    def summarize(self, properties: Sequence[Property], user_query: str, filters: Dict[str, Any]) -> str:
        if self.primary is not None:
            try:
                return self.primary.summarize(properties, user_query, filters)
            except LLMError as e:
                logger.warning(f"LLM summary failed, using data-driven summary: {e}")
        return self.fallback.summarize(properties, user_query, filters)


# -----------------------
# Wiring
# -----------------------

def build_filter_extractor(settings: Settings, client: Optional[GeminiClient] = None) -> FilterExtractor:
    client = client or GeminiClient.from_settings(settings)
    primary = None
    if client.available:
        primary = LLMFilterExtractor(client, settings.filter_temperature, settings.filter_max_tokens)
    else:
        logger.info("Gemini API key not configured; filter extraction uses the keyword parser")
    return FallbackFilterExtractor(primary, HeuristicFilterExtractor())


def build_summary_generator(settings: Settings, client: Optional[GeminiClient] = None) -> SummaryGenerator:
    client = client or GeminiClient.from_settings(settings)
    primary = None
    if client.available:
        primary = LLMSummaryGenerator(client, settings.summary_temperature, settings.summary_max_tokens)
    else:
        logger.info("Gemini API key not configured; summaries use the data-driven templates")
    return FallbackSummaryGenerator(primary, TemplateSummaryGenerator())


class PropertyAssistant:
    """Answers one chat message against a read-only property collection."""

    def __init__(
        self,
        properties: Sequence[Property],
        filter_extractor: FilterExtractor,
        summary_generator: SummaryGenerator,
        max_results: int = 8,
    ):
        self.properties = properties
        self.filter_extractor = filter_extractor
        self.summary_generator = summary_generator
        self.max_results = max_results

    @classmethod
    def from_settings(cls, properties: Sequence[Property], settings: Settings) -> "PropertyAssistant":
        client = GeminiClient.from_settings(settings)
        return cls(
            properties,
            build_filter_extractor(settings, client),
            build_summary_generator(settings, client),
            max_results=settings.max_chat_results,
        )

    def extract_filters(self, message: str) -> Dict[str, Any]:
        if is_specific_property_query(message):
            logger.info("Specific property query detected")
            return {}
        return self.filter_extractor.extract(message)

    def chat(self, message: str) -> Dict[str, Any]:
        logger.info(f"User query: {message}")

        specific = search_specific_property(message, self.properties)
        if specific:
            return {
                "success": True,
                "summary": f'I found information about "{specific[0].project_name}":',
                "properties": [p.to_dict() for p in specific],
                "isSpecificProperty": True,
                "totalMatches": len(specific),
            }

        filters = self.extract_filters(message)
        results: List[Property] = apply_filters(self.properties, filters)
        summary = self.summary_generator.summarize(results, message, filters)
        return {
            "success": True,
            "summary": summary,
            "properties": [p.to_card() for p in results[: self.max_results]],
            "filters": filters,
            "totalMatches": len(results),
        }
