from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


READY_TO_MOVE = "Ready to Move"
UNDER_CONSTRUCTION = "Under Construction"
NEW_LAUNCH = "New Launch"
UNKNOWN_POSSESSION = "Unknown"

BASE_AMENITIES = ("Security", "Water Supply", "Power Backup")


class Property(BaseModel):
    """One sellable unit: a project configuration, optionally narrowed to a variant.

    Field names are snake_case in Python and camelCase on the wire
    (``projectName``, ``propertyImages``, ...), matching processedProperties.json.
    Instances are frozen; queries only ever select subsets.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    # identity
    id: str
    project_id: str
    config_id: str
    variant_id: Optional[str] = None

    # descriptive
    project_name: str
    builder: str
    project_type: Optional[str] = None
    status: Optional[str] = None
    rera_id: Optional[str] = None

    # location
    city: str
    locality: Optional[str] = None
    full_address: Optional[str] = None
    pincode: Optional[str] = None

    # physical
    bhk: int
    area: float
    price: float

    # derived
    possession: str = UNKNOWN_POSSESSION
    amenities: Tuple[str, ...] = BASE_AMENITIES
    property_images: Tuple[str, ...] = ()
    slug: Optional[str] = None
    floor_plan_image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_card(self) -> Dict[str, Any]:
        """Compact listing shape returned by the chat endpoint."""
        return {
            "id": self.id,
            "projectName": self.project_name,
            "city": self.city,
            "locality": self.locality,
            "bhk": self.bhk,
            "price": self.price,
            "possession": self.possession,
            "amenities": list(self.amenities) or list(BASE_AMENITIES),
            "area": self.area,
            "slug": self.slug,
            "builder": self.builder,
            "fullAddress": self.full_address,
        }
