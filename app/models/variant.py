from app.extensions import db


class ProductVariant(db.Model):
    __tablename__ = "product_variants"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku = db.Column(db.String(100), default="")
    option1_name = db.Column(db.String(100), default="")  # "Size"
    option1_value = db.Column(db.String(100), default="")  # "M"
    option2_name = db.Column(db.String(100), default="")
    option2_value = db.Column(db.String(100), default="")
    option3_name = db.Column(db.String(100), default="")
    option3_value = db.Column(db.String(100), default="")
    price_paise = db.Column(db.Integer, nullable=False, default=0)
    inventory_quantity = db.Column(db.Integer, nullable=False, default=0)
    position = db.Column(db.Integer, default=0)
    is_default = db.Column(db.Boolean, default=False)

    @property
    def price(self):
        """Price in rupees as a float."""
        return (self.price_paise or 0) / 100

    @property
    def pairs(self):
        return [
            (name, value)
            for name, value in (
                (self.option1_name, self.option1_value),
                (self.option2_name, self.option2_value),
                (self.option3_name, self.option3_value),
            )
            if name and value
        ]

    def to_dict(self):
        return {
            "id": self.id,
            "sku": self.sku or "",
            "option1_name": self.option1_name or "",
            "option1_value": self.option1_value or "",
            "option2_name": self.option2_name or "",
            "option2_value": self.option2_value or "",
            "option3_name": self.option3_name or "",
            "option3_value": self.option3_value or "",
            "price": self.price,
            "inventory_quantity": self.inventory_quantity or 0,
            "position": self.position or 0,
            "is_default": bool(self.is_default),
        }

    def __repr__(self):
        label = " / ".join(f"{n}: {v}" for n, v in self.pairs)
        return f"<ProductVariant {label}>"
