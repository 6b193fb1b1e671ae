"""Build the property collection once and persist it as processedProperties.json."""

import json
import logging
from pathlib import Path
from typing import List, Tuple

from pydantic import ValidationError

from config import Settings
from processor.merge import ValidationReport, build_property_collection, collect_statistics
from processor.models import Property
from processor.records import load_records

logger = logging.getLogger(__name__)


def save_properties(properties: List[Property], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([p.to_dict() for p in properties], f, ensure_ascii=False, indent=2)


def load_properties(path: Path) -> List[Property]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return [Property.model_validate(rec) for rec in data]


def process_property_data(raw_dir: Path, output_path: Path) -> Tuple[List[Property], ValidationReport]:
    records = load_records(raw_dir)
    properties, report = build_property_collection(records)
    logger.info(f"Final statistics: {collect_statistics(properties)}")
    save_properties(properties, output_path)
    logger.info(f"Processed data saved to {output_path}")
    return properties, report


def load_property_collection(settings: Settings) -> List[Property]:
    """Read the persisted merge output, or merge the CSVs when it is missing or unreadable."""
    path = settings.processed_path
    if path.exists():
        try:
            properties = load_properties(path)
            logger.info(f"Loaded {len(properties)} properties from processed data")
            return properties
        except (ValueError, ValidationError) as e:
            logger.warning(f"Could not read {path} ({e}); re-processing CSV files")

    logger.info("Processing CSV files...")
    properties, _ = process_property_data(settings.raw_dir, path)
    return properties
