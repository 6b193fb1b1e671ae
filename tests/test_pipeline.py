import json

import pytest

from config import Settings
from processor.pipeline import (
    load_properties,
    load_property_collection,
    process_property_data,
    save_properties,
)


@pytest.fixture
def settings(raw_dir, tmp_path):
    return Settings(raw_dir=raw_dir, processed_dir=tmp_path / "processed")


def test_process_property_data_writes_camel_case_json(raw_dir, tmp_path):
    out = tmp_path / "processed" / "processedProperties.json"
    properties, report = process_property_data(raw_dir, out)

    assert [p.id for p in properties] == ["v1", "v2", "v3"]
    assert report.total == 3 and report.kept == 3

    stored = json.loads(out.read_text(encoding="utf-8"))
    assert len(stored) == 3
    assert stored[0]["projectName"] == "Skyline Heights"
    assert stored[0]["variantId"] == "v1"
    assert stored[0]["propertyImages"] == ["https://img.example/1.jpg"]
    assert "project_name" not in stored[0]


def test_save_and_load_round_trip(sample_properties, tmp_path):
    path = tmp_path / "props.json"
    save_properties(sample_properties, path)
    assert load_properties(path) == sample_properties


def test_load_properties_requires_a_list(tmp_path):
    path = tmp_path / "props.json"
    path.write_text('{"id": "x"}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_properties(path)


def test_collection_is_built_when_missing(settings):
    properties = load_property_collection(settings)
    assert len(properties) == 3
    assert settings.processed_path.exists()


def test_collection_is_read_from_processed_file(settings, sample_properties):
    save_properties(sample_properties, settings.processed_path)
    assert load_property_collection(settings) == sample_properties


@pytest.mark.parametrize("content", ["not json", "{}", '[{"id": "broken"}]'])
def test_unreadable_processed_file_triggers_rebuild(settings, content):
    settings.processed_path.parent.mkdir(parents=True, exist_ok=True)
    settings.processed_path.write_text(content, encoding="utf-8")
    properties = load_property_collection(settings)
    assert [p.id for p in properties] == ["v1", "v2", "v3"]


def test_collection_survives_a_badly_encoded_csv(settings, raw_dir):
    project_csv = raw_dir / "project.csv"
    project_csv.write_bytes(project_csv.read_bytes().replace(b"Skyline", b"Sk\xffyline"))
    properties = load_property_collection(settings)
    assert [p.id for p in properties] == ["v1", "v2", "v3"]
    assert properties[0].project_name == "Sk\ufffdyline Heights"
