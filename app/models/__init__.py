from app.models.product import Product
from app.models.variant import ProductVariant
from app.models.audit_log import AuditLog

__all__ = ["Product", "ProductVariant", "AuditLog"]
