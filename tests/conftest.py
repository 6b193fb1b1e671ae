import csv
from pathlib import Path
from typing import Dict, List

import pytest

from processor.models import READY_TO_MOVE, UNDER_CONSTRUCTION, Property
from processor.records import (
    ADDRESS_FILE,
    CONFIGURATION_FILE,
    PROJECT_FILE,
    VARIANT_FILE,
    RecordSet,
)


@pytest.fixture(autouse=True)
def no_gemini_key(monkeypatch):
    """Keep a developer's real key out of the tests."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("PROPCHAT_GEMINI_API_KEY", raising=False)


def make_property(**overrides) -> Property:
    values = {
        "id": "v-1",
        "project_id": "p-1",
        "config_id": "c-1",
        "variant_id": "v-1",
        "project_name": "Skyline Heights",
        "builder": "Skyline Builders",
        "city": "Pune",
        "locality": "Baner",
        "full_address": "Survey No. 12, Baner Road, Pune",
        "bhk": 2,
        "area": 850.0,
        "price": 8_500_000.0,
        "possession": READY_TO_MOVE,
        "amenities": ["Security", "Water Supply", "Power Backup", "Gym"],
    }
    values.update(overrides)
    return Property(**values)


@pytest.fixture
def property_factory():
    return make_property


@pytest.fixture
def sample_properties() -> List[Property]:
    return [
        make_property(),
        make_property(
            id="v-2", variant_id="v-2", config_id="c-2", bhk=3, area=1250.0, price=11_000_000.0,
            amenities=["Security", "Water Supply", "Power Backup", "Club House", "Swimming Pool"],
        ),
        make_property(
            id="v-3", variant_id="v-3", project_id="p-2", config_id="c-3",
            project_name="Harbour View", builder="Harbour Builders",
            city="Mumbai", locality="Chembur East", full_address="Chembur East, Mumbai 400071",
            bhk=3, area=1100.0, price=25_000_000.0, possession=UNDER_CONSTRUCTION,
        ),
        make_property(
            id="v-4", variant_id="v-4", project_id="p-3", config_id="c-4",
            project_name="Green Meadows", builder="Green Builders",
            city="Pune", locality="Wakad", full_address="Near Wakad Bridge, Wakad, Pune",
            bhk=1, area=450.0, price=7_800_000.0,
        ),
    ]


PROJECT_ROWS = [
    {
        "id": "p1", "projectName": "Skyline Heights", "slug": "skyline-heights",
        "projectType": "Residential", "status": "READY_TO_MOVE", "reraId": '["P52100000001"]',
    },
    {
        "id": "p2", "projectName": "Harbour View", "slug": "harbour-view",
        "projectType": "Residential", "status": "UNDER_CONSTRUCTION", "reraId": "",
    },
]

ADDRESS_ROWS = [
    {"projectId": "p1", "fullAddress": "Survey No. 12, Baner Road, Pune, Maharashtra", "pincode": "411045"},
    {"projectId": "p2", "fullAddress": "Chembur East, Mumbai 400071", "pincode": "400071"},
]

CONFIGURATION_ROWS = [
    {"id": "c1", "projectId": "p1", "type": "2 BHK"},
    {"id": "c2", "projectId": "p1", "type": "3 BHK"},
    {"id": "c3", "projectId": "p2", "type": "3BHK"},
]

VARIANT_ROWS = [
    {
        "id": "v1", "configurationId": "c1", "price": "8500000", "carpetArea": "850",
        "aboutProperty": "Gym and lift access", "propertyImages": '["https://img.example/1.jpg"]',
        "floorPlanImage": "https://img.example/plan1.jpg",
    },
    {
        "id": "v2", "configurationId": "c1", "price": "120", "carpetArea": "910",
        "aboutProperty": "", "propertyImages": "", "floorPlanImage": "",
    },
    {
        "id": "v3", "configurationId": "c3", "price": "250", "carpetArea": "1100 sq.ft",
        "aboutProperty": "Swimming pool and kids play area", "propertyImages": "[]",
        "floorPlanImage": "",
    },
]


@pytest.fixture
def sample_records() -> RecordSet:
    return RecordSet(
        projects=[dict(r) for r in PROJECT_ROWS],
        addresses=[dict(r) for r in ADDRESS_ROWS],
        configurations=[dict(r) for r in CONFIGURATION_ROWS],
        variants=[dict(r) for r in VARIANT_ROWS],
    )


def write_csv(path: Path, rows: List[Dict[str, str]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)


@pytest.fixture
def raw_dir(tmp_path) -> Path:
    """A data directory holding the four CSV exports."""
    raw = tmp_path / "raw"
    raw.mkdir()
    write_csv(raw / PROJECT_FILE, PROJECT_ROWS)
    write_csv(raw / ADDRESS_FILE, ADDRESS_ROWS)
    write_csv(raw / CONFIGURATION_FILE, CONFIGURATION_ROWS)
    write_csv(raw / VARIANT_FILE, VARIANT_ROWS)
    return raw


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeGenAI:
    """Stands in for the google.generativeai module inside services.llm."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []
        self.api_key = None

    def configure(self, api_key):
        self.api_key = api_key

    def GenerativeModel(self, model_name, system_instruction=None):
        fake = self

        class _Model:
            def generate_content(self, user, generation_config=None):
                fake.calls.append({
                    "model": model_name,
                    "system": system_instruction,
                    "user": user,
                    "config": generation_config,
                })
                if fake.error is not None:
                    raise fake.error
                return FakeResponse(fake.replies.pop(0))

        return _Model()


@pytest.fixture
def fake_genai(monkeypatch):
    def install(replies=None, error=None) -> FakeGenAI:
        fake = FakeGenAI(replies, error)
        monkeypatch.setattr("services.llm.genai", fake)
        return fake

    return install
