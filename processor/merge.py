"""Merge project/address/configuration/variant rows into validated properties.

Three steps, each testable on its own:

1. ``build_drafts`` joins the rows and emits one ``PropertyDraft`` per
   (configuration, variant) pair, or one per configuration without variants.
2. ``merge_records`` keeps the drafts whose bhk, price, area and city were all
   extracted and turns them into ``Property`` entries.
3. ``filter_valid_properties`` applies the plausibility ranges.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from processor.extractors import (
    MAX_AREA,
    MAX_PRICE,
    MIN_AREA,
    extract_amenities,
    extract_bhk,
    extract_builder,
    extract_location,
    format_price,
    parse_area,
    parse_images,
    parse_possession,
    parse_price,
    parse_rera_id,
)
from processor.helpers import clean_text
from processor.models import Property
from processor.records import RecordSet, Row

logger = logging.getLogger(__name__)

MIN_PRICE = 500_000  # 5 Lakhs
MIN_BHK = 1
MAX_BHK = 10

REQUIRED_FIELDS = ("bhk", "price", "area", "city")


@dataclass(frozen=True)
class PropertyDraft:
    """A merged row before the required-field check; any extracted value may be None."""

    id: str
    project_id: str
    config_id: str
    variant_id: Optional[str]
    project_name: str
    builder: str
    project_type: Optional[str]
    status: Optional[str]
    rera_id: Optional[str]
    city: Optional[str]
    locality: Optional[str]
    full_address: Optional[str]
    pincode: Optional[str]
    bhk: Optional[int]
    area: Optional[float]
    price: Optional[float]
    possession: str
    amenities: Tuple[str, ...]
    property_images: Tuple[str, ...]
    slug: Optional[str]
    floor_plan_image: Optional[str]

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_property(self) -> Property:
        return Property(**{f.name: getattr(self, f.name) for f in fields(self)})


def _index_by(rows: List[Row], key: str) -> Dict[str, List[Row]]:
    """Group rows by a foreign key, keeping file order inside each group."""
    index: Dict[str, List[Row]] = {}
    for row in rows:
        value = clean_text(row.get(key))
        if value is not None:
            index.setdefault(value, []).append(row)
    return index


def build_draft(project: Row, config: Row, variant: Optional[Row], address: Optional[Row]) -> PropertyDraft:
    variant = variant or {}
    address = address or {}
    project_name = clean_text(project.get("projectName")) or ""
    bhk = extract_bhk(config.get("type"))
    location = extract_location(address.get("fullAddress"), project_name)
    config_id = clean_text(config.get("id")) or ""
    variant_id = clean_text(variant.get("id"))

    return PropertyDraft(
        id=variant_id or config_id,
        project_id=clean_text(project.get("id")) or "",
        config_id=config_id,
        variant_id=variant_id,
        project_name=project_name,
        builder=extract_builder(project_name),
        project_type=clean_text(project.get("projectType")),
        status=clean_text(project.get("status")),
        rera_id=parse_rera_id(project.get("reraId")),
        city=location.city,
        locality=location.locality,
        full_address=clean_text(address.get("fullAddress")),
        pincode=clean_text(address.get("pincode")),
        bhk=bhk,
        area=parse_area(variant.get("carpetArea")),
        price=parse_price(variant.get("price")),
        possession=parse_possession(project.get("status")),
        amenities=tuple(extract_amenities(variant.get("aboutProperty"), bhk)),
        property_images=tuple(parse_images(variant.get("propertyImages"))),
        slug=clean_text(project.get("slug")),
        floor_plan_image=clean_text(variant.get("floorPlanImage")),
    )


def build_drafts(records: RecordSet) -> List[PropertyDraft]:
    """Join the four row sets in project file order."""
    addresses = _index_by(records.addresses, "projectId")
    configurations = _index_by(records.configurations, "projectId")
    variants = _index_by(records.variants, "configurationId")

    drafts: List[PropertyDraft] = []
    for project in records.projects:
        project_id = clean_text(project.get("id"))
        if project_id is None:
            continue
        address = addresses.get(project_id, [None])[0]
        for config in configurations.get(project_id, []):
            config_variants = variants.get(clean_text(config.get("id")) or "", [])
            for variant in config_variants or [None]:
                try:
                    drafts.append(build_draft(project, config, variant, address))
                except Exception as e:
                    logger.warning(f"Error creating property entry for project {project_id}: {e}")
    return drafts


def create_property_entry(
    project: Row,
    config: Row,
    variant: Optional[Row],
    address: Optional[Row],
) -> Optional[Property]:
    """Build one property, or None when a required field is missing."""
    draft = build_draft(project, config, variant, address)
    missing = draft.missing_fields()
    if missing:
        logger.debug(
            f"Dropping {draft.project_name or draft.project_id} config={draft.config_id} "
            f"variant={draft.variant_id}: missing {', '.join(missing)}"
        )
        return None
    return draft.to_property()


def merge_records(records: RecordSet) -> List[Property]:
    merged: List[Property] = []
    incomplete = Counter()
    drafts = build_drafts(records)
    for draft in drafts:
        missing = draft.missing_fields()
        if missing:
            incomplete.update(missing)
            logger.debug(
                f"Dropping {draft.project_name or draft.project_id} config={draft.config_id} "
                f"variant={draft.variant_id}: missing {', '.join(missing)}"
            )
            continue
        merged.append(draft.to_property())

    logger.info(
        f"Total properties created: {len(merged)} of {len(drafts)} drafts "
        f"(missing fields: {dict(incomplete)})"
    )
    return merged


@dataclass
class ValidationReport:
    total: int = 0
    kept: int = 0
    rejected: Counter = field(default_factory=Counter)

    @property
    def dropped(self) -> int:
        return self.total - self.kept


def rejection_reason(prop: Property) -> Optional[str]:
    if not prop.price or prop.price < MIN_PRICE or prop.price > MAX_PRICE:
        return "price"
    if not prop.area or prop.area < MIN_AREA or prop.area > MAX_AREA:
        return "area"
    if not prop.bhk or prop.bhk < MIN_BHK or prop.bhk > MAX_BHK:
        return "bhk"
    if not prop.city:
        return "city"
    return None


def filter_valid_properties(properties: List[Property]) -> Tuple[List[Property], ValidationReport]:
    report = ValidationReport(total=len(properties))
    valid: List[Property] = []
    for prop in properties:
        reason = rejection_reason(prop)
        if reason is None:
            valid.append(prop)
            continue
        report.rejected[reason] += 1
        if reason == "price":
            logger.debug(f"Skipping property due to price: {prop.project_name} - {prop.price}")
        elif reason == "area":
            logger.debug(f"Skipping property due to area: {prop.project_name} - {prop.area} sq.ft")
    report.kept = len(valid)
    logger.info(
        f"Valid properties after filtering: {report.kept} "
        f"(dropped {report.dropped}: {dict(report.rejected)})"
    )
    return valid, report


def build_property_collection(records: RecordSet) -> Tuple[List[Property], ValidationReport]:
    return filter_valid_properties(merge_records(records))


def collect_statistics(properties: List[Property]) -> Dict[str, Any]:
    """Summary figures for logs and the processing script."""
    if not properties:
        return {"total": 0}
    prices = [p.price for p in properties]
    areas = [p.area for p in properties]
    return {
        "total": len(properties),
        "cities": sorted({p.city for p in properties}),
        "bhk_types": sorted({p.bhk for p in properties}),
        "price_range": f"{format_price(min(prices))} - {format_price(max(prices))}",
        "area_range": f"{min(areas):g} - {max(areas):g} sq.ft",
    }
