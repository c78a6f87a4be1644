"""Tests for the option type catalogue and colour helpers."""
from app.variants.variant_types import (
    VARIANT_TYPES,
    compose_colour,
    get_type_by_name,
    is_colour_type,
    parse_colour,
)


def test_type_detection():
    assert get_type_by_name("Size").key == "size"
    assert get_type_by_name("  storage capacity ").key == "storage"
    assert get_type_by_name("Color").key == "colour"
    assert get_type_by_name("Strap colour").key == "colour"
    assert get_type_by_name("Engraving").key == "other"
    assert get_type_by_name("") is VARIANT_TYPES[0]


def test_colour_type():
    assert is_colour_type("Colour")
    assert not is_colour_type("Size")


def test_parse_colour():
    assert parse_colour("Red|#FF0000") == {"label": "Red", "code": "#FF0000"}
    assert parse_colour(" Navy | #000080 ") == {"label": "Navy", "code": "#000080"}
    assert parse_colour("00ff00") == {"label": "", "code": "#00ff00"}
    assert parse_colour("Teal") == {"label": "Teal", "code": ""}
    assert parse_colour(None) == {"label": "", "code": ""}


def test_compose_colour():
    assert compose_colour("Red", "FF0000") == "Red|#FF0000"
    assert compose_colour("Red", "") == "Red"
    assert compose_colour("", "#fff") == "#fff"


def test_type_to_dict_lists_suggestions():
    data = get_type_by_name("Size").to_dict()
    assert data["label"] == "Size"
    assert "XL" in data["suggestions"]
