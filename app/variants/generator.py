"""Variant generation: the cartesian product of saved option values."""
import itertools
from dataclasses import dataclass, replace
from typing import Optional, Tuple

SIGNATURE_DELIMITER = "|"
PAIR_SEPARATOR = ":"
ESCAPE = "\\"
MAX_DIMENSIONS = 3


def _escape(text):
    for char in (ESCAPE, SIGNATURE_DELIMITER, PAIR_SEPARATOR):
        text = text.replace(char, ESCAPE + char)
    return text


def signature(pairs):
    """Stable identity key of a combination, e.g. ``Size:S|Color:Red``.

    Pairs without a name or a value are left out. Delimiters inside names
    and values are backslash-escaped, so ``Red|#FF0000`` becomes
    ``Red\\|#FF0000`` and distinct combinations never share a key.
    """
    return SIGNATURE_DELIMITER.join(
        f"{_escape(name)}{PAIR_SEPARATOR}{_escape(value)}"
        for name, value in pairs
        if name and value
    )


def parse_signature(sig):
    """Inverse of ``signature``: the (name, value) pairs of a key."""
    if not sig:
        return ()
    pairs = []
    name, current = None, []
    chars = iter(sig)
    for char in chars:
        if char == ESCAPE:
            current.append(next(chars, ""))
        elif char == PAIR_SEPARATOR and name is None:
            name, current = "".join(current), []
        elif char == SIGNATURE_DELIMITER:
            pairs.append((name or "", "".join(current)))
            name, current = None, []
        else:
            current.append(char)
    pairs.append((name or "", "".join(current)))
    return tuple(pairs)


@dataclass
class Variant:
    pairs: Tuple[Tuple[str, str], ...]
    signature: str
    position: int
    is_default: bool
    price: float = 0
    inventory_quantity: int = 0
    sku: str = ""
    id: Optional[int] = None

    def value_for(self, name):
        for pair_name, value in self.pairs:
            if pair_name == name:
                return value
        return None

    def to_dict(self):
        """Flat representation handed to the product form."""
        data = {
            "id": self.id,
            "sku": self.sku,
            "price": self.price,
            "inventory_quantity": self.inventory_quantity,
            "position": self.position,
            "is_default": self.is_default,
        }
        for index in range(MAX_DIMENSIONS):
            name, value = self.pairs[index] if index < len(self.pairs) else ("", "")
            data[f"option{index + 1}_name"] = name
            data[f"option{index + 1}_value"] = value
        return data


def pairs_from_payload(item):
    """Read up to three (name, value) pairs from a flat variant dict."""
    pairs = []
    for index in range(1, MAX_DIMENSIONS + 1):
        name = (item.get(f"option{index}_name") or "").strip()
        value = (item.get(f"option{index}_value") or "").strip()
        if name and value:
            pairs.append((name, value))
    return tuple(pairs)


def generate(options, overlay=None):
    """Expand options into variants, later options varying fastest.

    Options without a name or without non-blank values are skipped. Price,
    inventory, SKU and id come from the overlay when the signature is known.
    """
    dimensions = []
    for option in options[:MAX_DIMENSIONS]:
        name = option.name.strip()
        values = option.clean_values()
        if name and values:
            dimensions.append((name, values))
    if not dimensions:
        return []

    names = [name for name, _ in dimensions]
    variants = []
    for position, combo in enumerate(itertools.product(*(v for _, v in dimensions))):
        pairs = tuple(zip(names, combo))
        variant = Variant(
            pairs=pairs,
            signature=signature(pairs),
            position=position,
            is_default=position == 0,
        )
        if overlay is not None:
            overlay.apply(variant)
        variants.append(variant)
    return variants


def snapshot(variants):
    """Detached copies handed to the external consumer."""
    return [replace(v) for v in variants]


def _fingerprint(variants):
    return [
        (v.signature, v.price, v.inventory_quantity, v.sku, v.id) for v in variants
    ]


def variants_changed(previous, current):
    """True when two variant lists differ in combinations or in overlay data."""
    if previous is None:
        return True
    return _fingerprint(previous) != _fingerprint(current)
