from processor.records import PROJECT_FILE, VARIANT_FILE, load_csv, load_records


def test_missing_file_yields_no_rows(tmp_path):
    assert load_csv(tmp_path / "nope.csv") == []


def test_empty_file_yields_no_rows(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert load_csv(path) == []


def test_rows_are_plain_strings(raw_dir):
    rows = load_csv(raw_dir / VARIANT_FILE)
    assert len(rows) == 3
    assert rows[0]["price"] == "8500000"
    assert rows[0]["propertyImages"] == '["https://img.example/1.jpg"]'
    # blank cells stay blank instead of NaN
    assert rows[1]["aboutProperty"] == ""


def test_column_names_are_stripped(tmp_path):
    path = tmp_path / PROJECT_FILE
    path.write_text(" id , projectName \np1,Skyline Heights\n", encoding="utf-8")
    assert load_csv(path) == [{"id": "p1", "projectName": "Skyline Heights"}]


def test_load_records(raw_dir):
    records = load_records(raw_dir)
    assert records.counts() == {"projects": 2, "addresses": 2, "configurations": 3, "variants": 3}


def test_load_records_with_missing_files(tmp_path):
    records = load_records(tmp_path)
    assert records.counts() == {"projects": 0, "addresses": 0, "configurations": 0, "variants": 0}


def test_undecodable_bytes_are_replaced(tmp_path):
    path = tmp_path / PROJECT_FILE
    path.write_bytes(b"id,projectName\np1,Caf\xe9 Heights\n")
    assert load_csv(path) == [{"id": "p1", "projectName": "Caf\ufffd Heights"}]
