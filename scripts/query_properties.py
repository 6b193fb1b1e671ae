import argparse
import json
import sys
from pathlib import Path
from typing import List

# Auto-load .env so the Gemini key is available when running this script directly
from dotenv import load_dotenv

load_dotenv()

# Ensure local imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from config import settings  # type: ignore
from processor.extractors import format_price  # type: ignore
from processor.pipeline import load_property_collection  # type: ignore
from scripts.utils import setup_script_logging  # type: ignore
from services.assistant import (  # type: ignore
    FallbackFilterExtractor,
    FallbackSummaryGenerator,
    HeuristicFilterExtractor,
    PropertyAssistant,
    TemplateSummaryGenerator,
)

logger = setup_script_logging("query_properties", "query.log")


def build_assistant(no_llm: bool) -> PropertyAssistant:
    properties = load_property_collection(settings)
    if no_llm:
        return PropertyAssistant(
            properties,
            FallbackFilterExtractor(None, HeuristicFilterExtractor()),
            FallbackSummaryGenerator(None, TemplateSummaryGenerator()),
            max_results=settings.max_chat_results,
        )
    return PropertyAssistant.from_settings(properties, settings)


def format_listing(card: dict) -> str:
    locality = card.get("locality") or "N/A"
    return (
        f"- {card['projectName']} | {card['city']} / {locality} | {card['bhk']}BHK | "
        f"{format_price(card['price'])} | {card['area']:g} sq.ft | {card['possession']}"
    )


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the property assistant a question from the terminal")
    parser.add_argument("message", nargs="+", help="Natural-language query, e.g. '3BHK in Pune under 1.2 Cr'")
    parser.add_argument("--no-llm", action="store_true", help="Use the keyword parser and template summaries only")
    parser.add_argument("--json", action="store_true", help="Print the raw response payload")
    args = parser.parse_args(argv)

    assistant = build_assistant(args.no_llm)
    response = assistant.chat(" ".join(args.message))

    if args.json:
        print(json.dumps(response, ensure_ascii=False, indent=2))
        return 0

    print(f"\n{response['summary']}\n")
    if "filters" in response:
        print(f"Filters: {response['filters']}")
    print(f"Matches: {response['totalMatches']}")
    for card in response["properties"]:
        print(format_listing(card))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
