from processor.summary import (
    calculate_property_stats,
    format_price_range,
    generate_data_driven_summary,
    generate_no_results_summary,
)


def test_no_results_mentions_budget():
    summary = generate_no_results_summary("3bhk under 90 lakh", {"maxPrice": 9_000_000})
    assert summary == (
        'I couldn\'t find any properties matching "3bhk under 90 lakh". '
        "You might try adjusting your budget."
    )


def test_no_results_suggestions_follow_filters():
    summary = generate_no_results_summary("q", {"bhk": 3, "maxPrice": 9_000_000, "city": "pune"})
    assert summary.endswith(
        "You might try adjusting your budget or trying different BHK configurations "
        "or expanding your location search."
    )


def test_no_results_without_filters():
    assert generate_no_results_summary("q", {}).endswith("Please try adjusting your search criteria.")


def test_property_stats(sample_properties):
    stats = calculate_property_stats(sample_properties)
    assert stats.total == 4
    assert stats.cities == ["Pune", "Mumbai"]
    assert stats.localities == ["Baner", "Chembur East", "Wakad"]
    assert stats.bhk_range == "1-3 BHK"
    assert stats.price_range == "₹78.0 L - ₹2.5 Cr"
    assert stats.ready_to_move == 3
    assert stats.under_construction == 1
    assert stats.top_amenities == ["Security", "Water Supply", "Power Backup", "Gym", "Club House"]


def test_stats_for_empty_result():
    stats = calculate_property_stats([])
    assert stats.cities == ["Multiple cities"]
    assert stats.localities == ["Various areas"]
    assert stats.bhk_range == "Various configurations"
    assert stats.price_range == "Various price ranges"
    assert stats.top_amenities == ["Standard amenities"]


def test_format_price_range():
    assert format_price_range(None, 5) == "Various price ranges"
    assert format_price_range(5_000_000, 12_000_000) == "₹50.0 L - ₹1.2 Cr"


def test_data_driven_summary(sample_properties):
    summary = generate_data_driven_summary(sample_properties[:2], "3bhk in pune", {"bhk": 3})
    assert summary == (
        "I found 2 properties matching your search in Pune, primarily in Baner. "
        "Price range: ₹85.0 L - ₹1.1 Cr. 2 ready to move options available. "
        "2 properties match your 3BHK requirement."
    )


def test_data_driven_summary_lists_both_possession_kinds(sample_properties):
    summary = generate_data_driven_summary(sample_properties, "homes", {})
    assert "3 ready to move and 1 under construction options available." in summary
    assert "requirement" not in summary
