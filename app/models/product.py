from datetime import datetime, timezone
from app.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(
        db.String(20), nullable=False, default="DRAFT", index=True
    )
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    variants = db.relationship(
        "ProductVariant",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="ProductVariant.position",
    )

    VALID_STATUSES = {"DRAFT", "ACTIVE", "ARCHIVED"}

    @property
    def total_inventory(self):
        return sum(v.inventory_quantity or 0 for v in self.variants)

    @property
    def option_names(self):
        """Option names in dimension order, read off the first variant."""
        if not self.variants:
            return []
        first = self.variants[0]
        return [
            name
            for name in (first.option1_name, first.option2_name, first.option3_name)
            if name
        ]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "option_names": self.option_names,
            "total_inventory": self.total_inventory,
            "variants": [v.to_dict() for v in self.variants],
        }

    def __repr__(self):
        return f"<Product {self.id}: {self.name}>"
