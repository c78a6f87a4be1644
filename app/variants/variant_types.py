"""Predefined option types with value suggestions, and colour value helpers."""
import re
from dataclasses import dataclass, field
from typing import List, Optional

_HEX_RE = re.compile(r"^#?[0-9A-Fa-f]{3,8}$")


@dataclass(frozen=True)
class VariantType:
    key: str
    label: str
    synonyms: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    value_hint: Optional[str] = None
    placeholder: Optional[str] = None

    def to_dict(self):
        return {
            "key": self.key,
            "label": self.label,
            "suggestions": list(self.suggestions),
            "value_hint": self.value_hint,
            "placeholder": self.placeholder,
        }


VARIANT_TYPES = [
    VariantType(
        "colour",
        "Colour",
        synonyms=["color", "colour"],
        value_hint="Enter as Name and #Hex (e.g., Red | #FF0000).",
    ),
    VariantType(
        "size",
        "Size",
        suggestions=["XS", "S", "M", "L", "XL", "2XL", "3XL"],
        value_hint="Common sizes: XS, S, M, L, XL, 2XL, 3XL.",
        placeholder="e.g., M",
    ),
    VariantType(
        "storage",
        "Storage Capacity",
        suggestions=["32GB", "64GB", "128GB", "256GB", "512GB", "1TB"],
        value_hint="Use units (e.g., 128GB, 1TB).",
    ),
    VariantType(
        "ram",
        "RAM",
        suggestions=["4GB", "8GB", "16GB", "32GB"],
        value_hint="Use units (e.g., 8GB).",
    ),
    VariantType("weight", "Weight", value_hint="Include units (e.g., 500g).", placeholder="e.g., 500g"),
    VariantType("volume", "Volume", value_hint="Include units (e.g., 250ml).", placeholder="e.g., 250ml"),
    VariantType("length", "Length", value_hint="Include units (e.g., 20cm).", placeholder="e.g., 20cm"),
    VariantType("material", "Material", value_hint="e.g., Cotton, Leather"),
    VariantType("pattern", "Pattern", value_hint="e.g., Solid, Stripes, Floral"),
    VariantType("style", "Style", value_hint="e.g., Casual, Formal, Sport"),
    VariantType("shoe_size", "Shoe Size", value_hint="e.g., 8, 8.5, 42EU"),
    VariantType("waist", "Waist", value_hint="e.g., 32, 34"),
    VariantType("age_range", "Age Range", value_hint="e.g., 0-3M, 3-6M, 6-12M"),
    VariantType("brand", "Brand"),
    VariantType("model", "Model"),
    VariantType("fit", "Fit", value_hint="e.g., Slim, Regular, Relaxed"),
    VariantType("finish", "Finish", value_hint="e.g., Matte, Glossy"),
    VariantType("dimensions", "Dimensions", value_hint="e.g., 10x20x5 cm"),
    VariantType("flavor", "Flavor", value_hint="e.g., Vanilla, Chocolate"),
    VariantType("scent", "Scent", value_hint="e.g., Lavender, Citrus"),
    VariantType("other", "Other (custom)"),
]

_BY_KEY = {t.key: t for t in VARIANT_TYPES}


def get_type_by_name(name=None):
    """Detect the predefined type behind a free-text option name."""
    n = (name or "").strip().lower()
    if not n:
        return VARIANT_TYPES[0]
    for vtype in VARIANT_TYPES:
        if vtype.label.lower() == n:
            return vtype
        if any(s.lower() == n for s in vtype.synonyms):
            return vtype
    if "color" in n or "colour" in n:
        return _BY_KEY["colour"]
    return _BY_KEY["other"]


def is_colour_type(name=None):
    return get_type_by_name(name).key == "colour"


def parse_colour(value=None):
    """Split ``"Red|#FF0000"`` into ``{"label": "Red", "code": "#FF0000"}``."""
    raw = (value or "").strip()
    if not raw:
        return {"label": "", "code": ""}
    if "|" in raw:
        label, code = raw.split("|", 1)
        return {"label": label.strip(), "code": code.strip()}
    if _HEX_RE.match(raw):
        return {"label": "", "code": raw if raw.startswith("#") else f"#{raw}"}
    return {"label": raw, "code": ""}


def compose_colour(label, code):
    label = (label or "").strip()
    code = (code or "").strip()
    if code and not code.startswith("#"):
        code = f"#{code}"
    if label and code:
        return f"{label}|{code}"
    return label or code
