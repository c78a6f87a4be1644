"""Tests for product persistence and variant payload validation."""
import pytest

from app.models.audit_log import AuditLog
from app.services import product_service


def _variant(size, colour=None, **extra):
    item = {"option1_name": "Size", "option1_value": size}
    if colour:
        item.update(option2_name="Colour", option2_value=colour)
    item.update(extra)
    return item


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"option1_name": "Size"}, "Variants must be a list."),
        (["S"], "Each variant must be an object."),
        ([{"option1_name": "Size", "option1_value": " "}], "Option 1"),
        ([_variant("S", sku="A"), _variant("M", sku="a")], "Duplicate SKU"),
        ([_variant("S", "Red"), _variant("s", "red")], "Duplicate variant combination"),
    ],
)
def test_invalid_payloads(payload, message):
    with pytest.raises(ValueError, match=message):
        product_service.validate_variants_payload(payload)


def test_valid_payload_passes():
    product_service.validate_variants_payload(
        [_variant("S", "Red", sku="T-S"), _variant("M", "Red"), _variant("L", "Red")]
    )


def test_create_product_writes_audit_log(db):
    product = product_service.create_product("  Linen Shirt ", actor_id=7)

    assert product.name == "Linen Shirt"
    assert product.status == "DRAFT"
    entry = AuditLog.query.filter_by(product_id=product.id).one()
    assert entry.action == "CREATE_PRODUCT"
    assert entry.actor_id == "7"


def test_save_variants_reuses_rows(db):
    product = product_service.create_product("Linen Shirt", actor_id=1)
    product_service.save_variants(
        product.id,
        [_variant("S", price=10, inventory_quantity=2), _variant("M", price=12.5)],
        actor_id=1,
    )
    first_ids = {v.option1_value: v.id for v in product.variants}

    # Same combination without an id keeps the row; a new value gets a new row.
    product_service.save_variants(
        product.id,
        [_variant("M", price=13), _variant("L")],
        actor_id=1,
    )

    rows = {v.option1_value: v for v in product.variants}
    assert set(rows) == {"M", "L"}
    assert rows["M"].id == first_ids["M"]
    assert rows["M"].price_paise == 1300
    assert rows["M"].position == 0
    assert rows["M"].is_default
    assert not rows["L"].is_default


def test_save_variants_unknown_product(db):
    assert product_service.save_variants(999999, [], actor_id=1) is None


def test_variants_payload_round_trips_through_editor_shape(db):
    product = product_service.create_product("Phone Case", actor_id=1)
    product_service.save_variants(
        product.id, [_variant("S", "Red", sku="PC-S", price=4.99)], actor_id=1
    )

    (item,) = product_service.variants_payload(product)
    assert item["option2_value"] == "Red"
    assert item["sku"] == "PC-S"
    assert item["price"] == 4.99


def test_stats_count_variants_and_inventory(db):
    before = product_service.get_stats()
    product = product_service.create_product("Scarf", actor_id=1)
    product_service.save_variants(
        product.id,
        [_variant("S", inventory_quantity=3), _variant("M", inventory_quantity=4)],
        actor_id=1,
    )

    after = product_service.get_stats()
    assert after["products"]["DRAFT"] == before["products"].get("DRAFT", 0) + 1
    assert after["variants"] == before["variants"] + 2
    assert after["inventory"] == before["inventory"] + 7
