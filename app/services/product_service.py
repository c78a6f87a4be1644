import logging
from datetime import datetime, timezone
from app.extensions import db
from app.models.product import Product
from app.models.variant import ProductVariant
from app.models.audit_log import AuditLog
from app.variants.generator import MAX_DIMENSIONS, pairs_from_payload, signature
from app.variants.overlay import coerce_price, coerce_quantity

logger = logging.getLogger(__name__)


def create_product(name, actor_id, description=""):
    """Create a DRAFT product without variants."""
    product = Product(
        name=name.strip(),
        description=description or "",
        status="DRAFT",
    )
    db.session.add(product)
    db.session.flush()  # get product.id

    db.session.add(
        AuditLog(
            actor_id=str(actor_id),
            action="CREATE_PRODUCT",
            product_id=product.id,
            payload={"name": product.name},
        )
    )
    db.session.commit()
    return product


def get_product(product_id):
    return db.session.get(Product, product_id)


def variants_payload(product):
    """Flat variant dicts as the variant editor expects them on mount."""
    return [v.to_dict() for v in product.variants]


def validate_variants_payload(variants):
    """Reject variant lists the product page cannot sell.

    Raises ValueError with a message meant for the merchant.
    """
    if not isinstance(variants, list):
        raise ValueError("Variants must be a list.")

    seen_skus = set()
    seen_combinations = set()
    for item in variants:
        if not isinstance(item, dict):
            raise ValueError("Each variant must be an object.")

        name = (item.get("option1_name") or "").strip()
        value = (item.get("option1_value") or "").strip()
        if not name or not value:
            raise ValueError(
                "Each variant must include Option 1 name and value (e.g., Size: 8)."
            )

        sku = (item.get("sku") or "").strip().lower()
        if sku:
            if sku in seen_skus:
                raise ValueError("Duplicate SKU detected. Ensure SKUs are unique.")
            seen_skus.add(sku)

        combination = tuple(
            (n.lower(), v.lower()) for n, v in pairs_from_payload(item)
        )
        if combination in seen_combinations:
            raise ValueError(
                "Duplicate variant combination detected. Ensure each row is unique."
            )
        seen_combinations.add(combination)


def _fill_row(row, item, position):
    pairs = list(pairs_from_payload(item))
    pairs += [("", "")] * (MAX_DIMENSIONS - len(pairs))
    for index, (name, value) in enumerate(pairs, start=1):
        setattr(row, f"option{index}_name", name)
        setattr(row, f"option{index}_value", value)
    row.sku = (item.get("sku") or "").strip()
    row.price_paise = round(coerce_price(item.get("price")) * 100)
    row.inventory_quantity = coerce_quantity(item.get("inventory_quantity"))
    row.position = position
    row.is_default = position == 0


def save_variants(product_id, variants, actor_id):
    """Replace a product's variants with the list the editor emitted.

    Rows are reused when the incoming variant carries their id or the same
    option combination, so ids survive regeneration.
    """
    product = db.session.get(Product, product_id)
    if not product:
        return None

    validate_variants_payload(variants)

    by_id = {row.id: row for row in product.variants}
    by_signature = {signature(row.pairs): row for row in product.variants}

    rows = []
    used = set()
    for position, item in enumerate(variants):
        row = by_id.get(item.get("id"))
        if row is None or row.id in used:
            row = by_signature.get(signature(pairs_from_payload(item)))
        if row is None or row.id in used:
            row = ProductVariant()
        else:
            used.add(row.id)
        _fill_row(row, item, position)
        rows.append(row)

    removed = len(product.variants) - len(used)
    product.variants = rows  # delete-orphan drops the rest
    product.updated_at = datetime.now(timezone.utc)

    db.session.add(
        AuditLog(
            actor_id=str(actor_id),
            action="SAVE_VARIANTS",
            product_id=product.id,
            payload={"count": len(rows), "removed": removed},
        )
    )
    db.session.commit()
    logger.info(
        "Saved %d variant(s) for product %s (%d removed)",
        len(rows),
        product.id,
        removed,
    )
    return product


def get_stats():
    """Product counts by status plus variant and inventory totals."""
    rows = (
        db.session.query(Product.status, db.func.count(Product.id))
        .group_by(Product.status)
        .all()
    )
    variant_count, inventory = db.session.query(
        db.func.count(ProductVariant.id),
        db.func.coalesce(db.func.sum(ProductVariant.inventory_quantity), 0),
    ).one()
    return {
        "products": dict(rows),
        "variants": variant_count,
        "inventory": int(inventory),
    }
