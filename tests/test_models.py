"""Tests for database models."""
from app.models.audit_log import AuditLog
from app.models.product import Product
from app.models.variant import ProductVariant


def test_product_creation(db):
    p = Product(name="Test Tee", description="Cotton", status="DRAFT")
    db.session.add(p)
    db.session.flush()

    assert p.id is not None
    assert p.variants == []
    assert p.option_names == []
    assert p.total_inventory == 0


def test_variant_price_and_pairs(db):
    p = Product(name="Test Kurta", status="DRAFT")
    db.session.add(p)
    db.session.flush()

    v = ProductVariant(
        product_id=p.id,
        option1_name="Size",
        option1_value="M",
        option2_name="Colour",
        option2_value="Indigo",
        price_paise=149950,  # Rs 1,499.50
        inventory_quantity=4,
    )
    db.session.add(v)
    db.session.flush()

    assert v.price == 1499.5
    assert v.pairs == [("Size", "M"), ("Colour", "Indigo")]
    data = v.to_dict()
    assert data["option3_name"] == ""
    assert data["price"] == 1499.5


def test_variants_ordered_by_position(db):
    p = Product(name="Test Case", status="DRAFT")
    p.variants = [
        ProductVariant(option1_name="Model", option1_value="A2", position=1, inventory_quantity=2),
        ProductVariant(option1_name="Model", option1_value="A1", position=0, inventory_quantity=3),
    ]
    db.session.add(p)
    db.session.flush()
    db.session.expire(p, ["variants"])

    assert [v.option1_value for v in p.variants] == ["A1", "A2"]
    assert p.option_names == ["Model"]
    assert p.total_inventory == 5


def test_audit_log(db):
    entry = AuditLog(actor_id="42", action="SAVE_VARIANTS", payload={"count": 2})
    db.session.add(entry)
    db.session.flush()

    assert entry.id is not None
    assert entry.action in AuditLog.ACTIONS
