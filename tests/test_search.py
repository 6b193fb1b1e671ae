from processor.search import apply_filters, search_specific_property


def ids(properties):
    return [p.id for p in properties]


def test_city_bhk_and_budget_are_combined(property_factory):
    pune = property_factory(id="a", city="Pune", bhk=3, price=11_000_000)
    mumbai = property_factory(id="b", city="Mumbai", bhk=3, price=9_000_000)
    result = apply_filters([pune, mumbai], {"city": "pune", "bhk": 3, "maxPrice": 12_000_000})
    assert ids(result) == ["a"]


def test_empty_filters_return_everything_in_order(sample_properties):
    assert ids(apply_filters(sample_properties, {})) == ["v-1", "v-2", "v-3", "v-4"]
    assert ids(apply_filters(sample_properties, None)) == ["v-1", "v-2", "v-3", "v-4"]


def test_null_and_blank_values_impose_no_constraint(sample_properties):
    filters = {"city": "null", "locality": "", "possession": None, "amenities": []}
    assert len(apply_filters(sample_properties, filters)) == 4


def test_substring_matching_is_case_insensitive(sample_properties):
    assert ids(apply_filters(sample_properties, {"locality": "CHEMBUR"})) == ["v-3"]
    assert ids(apply_filters(sample_properties, {"possession": "ready"})) == ["v-1", "v-2", "v-4"]


def test_max_price_is_inclusive(sample_properties):
    assert ids(apply_filters(sample_properties, {"maxPrice": 8_000_000})) == ["v-4"]
    assert ids(apply_filters(sample_properties, {"maxPrice": 8_500_000})) == ["v-1", "v-4"]


def test_zero_bhk_is_a_constraint(sample_properties):
    assert apply_filters(sample_properties, {"bhk": 0}) == []


def test_amenities_must_all_be_present(sample_properties):
    assert ids(apply_filters(sample_properties, {"amenities": ["gym"]})) == ["v-1", "v-3", "v-4"]
    assert ids(apply_filters(sample_properties, {"amenities": ["pool", "club"]})) == ["v-2"]
    assert ids(apply_filters(sample_properties, {"amenities": "Swimming Pool"})) == ["v-2"]


def test_filtering_does_not_change_the_collection(sample_properties):
    before = list(sample_properties)
    apply_filters(sample_properties, {"city": "Mumbai"})
    assert sample_properties == before


def test_name_match_returns_first_entry_only(sample_properties):
    assert ids(search_specific_property("skyline", sample_properties)) == ["v-1"]


def test_address_match_when_no_name_matches(sample_properties):
    assert ids(search_specific_property("Mumbai 400071", sample_properties)) == ["v-3"]
    assert ids(search_specific_property("pune", sample_properties)) == ["v-1", "v-2", "v-4"]


def test_blank_or_unknown_query(sample_properties):
    assert search_specific_property("", sample_properties) == []
    assert search_specific_property("atlantis", sample_properties) == []
