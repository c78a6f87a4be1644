"""Variant matrix core: options, generation, overlay, grouping, selection."""
from app.variants.generator import Variant, generate, signature, variants_changed
from app.variants.manager import VariantManager
from app.variants.options import MAX_OPTIONS, Option, OptionError, OptionErrors, OptionStore
from app.variants.overlay import OverlayStore
from app.variants.reorder import reorder
from app.variants.session import EditSessionGate

__all__ = [
    "EditSessionGate",
    "MAX_OPTIONS",
    "Option",
    "OptionError",
    "OptionErrors",
    "OptionStore",
    "OverlayStore",
    "Variant",
    "VariantManager",
    "generate",
    "reorder",
    "signature",
    "variants_changed",
]
