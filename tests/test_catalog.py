import json
from pathlib import Path

import pytest

from mirador.portfolio import (
    build_rich_description,
    compare_properties,
    load_properties,
    save_properties,
    search_properties,
    status_color,
    with_description,
)

DATASET = Path(__file__).resolve().parent.parent / "data" / "properties.json"


@pytest.fixture
def catalog():
    return load_properties(DATASET)


def test_load_properties_keeps_original_fields(catalog):
    first = catalog[0]
    assert first.id == "prop-001"
    assert first.property_class == "A"
    assert first.to_dict()["class"] == "A"
    assert first.to_dict()["yearBuilt"] == 2019


def test_load_rejects_non_list(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"id": "x"}))
    with pytest.raises(ValueError):
        load_properties(path)


def test_save_and_reload_round_trip(tmp_path, catalog):
    path = tmp_path / "properties.json"
    save_properties(path, catalog)
    assert [item.id for item in load_properties(path)] == [item.id for item in catalog]


def test_search_matches_title_address_and_type(catalog):
    assert [p.id for p in search_properties("domain", catalog)] == ["prop-001"]
    assert [p.id for p in search_properties("chicago", catalog)] == ["prop-006"]
    assert {p.id for p in search_properties("OFFICE", catalog)} == {"prop-001", "prop-006"}
    assert len(search_properties("", catalog)) == len(catalog)


def test_compare_builds_rows(catalog):
    rows = compare_properties(["prop-001", "prop-004"], catalog)
    assert [row["id"] for row in rows] == ["prop-001", "prop-004"]
    assert rows[0]["price_per_sqft"] == round(48_500_000 / 210_000, 2)
    assert rows[1]["trust_score"] == 90


def test_compare_validates_input(catalog):
    with pytest.raises(ValueError):
        compare_properties(["prop-001"], catalog)
    with pytest.raises(ValueError):
        compare_properties([f"prop-00{i}" for i in range(1, 6)], catalog)
    with pytest.raises(KeyError):
        compare_properties(["prop-001", "missing"], catalog)


def test_status_colors():
    assert status_color("for-sale") == "#3b82f6"
    assert status_color("off-market") == "#06b6d4"
    assert status_color("trending") == "#eab308"
    assert status_color("flagged") == "#ef4444"
    assert status_color("unknown") == "#3b82f6"
    assert status_color(None) == "#3b82f6"


def test_rich_description(catalog):
    text = build_rich_description(catalog[0])
    assert text.startswith("Domain Tower at 11501 Alterra Pkwy, Austin, TX 78758 is a Office, Class A asset.")
    assert "approximately 210,000 square feet" in text
    assert "Pricing guidance is around $48,500,000." in text
    assert "Current status: for sale." in text
    assert "Key features include LEED Gold, Structured parking, Fitness center." in text


def test_with_description_keeps_existing_text(make_property):
    described = make_property("a", description="Hand written")
    assert with_description(described).model_extra["description"] == "Hand written"

    generated = with_description(make_property("b", title="Depot", type="Industrial"))
    assert generated.model_extra["description"].startswith("Depot at  is a Industrial asset.")


def test_rich_description_tolerates_odd_list_fields(make_property):
    record = make_property(
        "odd",
        "Austin, TX",
        keyFeatures="Rooftop",
        opportunities=[12, None, "Rezoning"],
        risks=[{"kind": "flood"}],
    )
    text = build_rich_description(record)

    assert "Key features" not in text
    assert "Opportunities: 12, Rezoning." in text
    assert "Considerations/Risks: {'kind': 'flood'}." in text
