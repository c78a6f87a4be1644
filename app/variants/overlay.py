"""Per-signature price and inventory data kept across regeneration."""
import logging
from dataclasses import dataclass
from typing import Optional

from app.variants.generator import parse_signature, signature

logger = logging.getLogger(__name__)


def coerce_price(value):
    """Parse a price input; blanks, garbage and negatives become 0."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0
    if price != price or price < 0:  # NaN
        return 0
    return price


def coerce_quantity(value):
    """Parse an inventory input as a non-negative integer."""
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, quantity)


@dataclass
class OverlayEntry:
    price: float = 0
    inventory_quantity: int = 0
    sku: str = ""
    id: Optional[int] = None


class OverlayStore:
    """Mapping of variant signature to the data the merchant typed in.

    Entries outlive regeneration as long as their signature re-occurs.
    """

    def __init__(self):
        self._entries = {}

    def __contains__(self, signature):
        return signature in self._entries

    def __len__(self):
        return len(self._entries)

    def get(self, signature):
        return self._entries.get(signature)

    def set(self, signature, price=None, inventory_quantity=None, sku=None, id=None):
        """Merge a partial update into the entry for a signature."""
        entry = self._entries.setdefault(signature, OverlayEntry())
        if price is not None:
            entry.price = coerce_price(price)
        if inventory_quantity is not None:
            entry.inventory_quantity = coerce_quantity(inventory_quantity)
        if sku is not None:
            entry.sku = sku
        if id is not None:
            entry.id = id
        return entry

    def set_for_all(self, signatures, price):
        """Apply one price to every signature of a group."""
        price = coerce_price(price)
        for sig in signatures:
            self._entries.setdefault(sig, OverlayEntry()).price = price
        return price

    def prune(self, keep_signatures):
        keep = set(keep_signatures)
        stale = [sig for sig in self._entries if sig not in keep]
        for sig in stale:
            del self._entries[sig]
        if stale:
            logger.debug("Pruned %d overlay entries", len(stale))
        return stale

    def rekey(self, mapping):
        """Move entries to new signatures after a rename or reorder."""
        moved = {}
        for old, new in mapping.items():
            if old in self._entries:
                moved[new] = self._entries.pop(old)
        self._entries.update(moved)
        return len(moved)

    def rekey_pairs(self, transform):
        """Re-key every entry through ``transform(pairs) -> pairs``."""
        mapping = {}
        for sig in self._entries:
            new_sig = signature(transform(parse_signature(sig)))
            if new_sig != sig:
                mapping[sig] = new_sig
        return self.rekey(mapping)

    def apply(self, variant):
        """Copy overlay data onto a freshly generated variant."""
        entry = self._entries.get(variant.signature)
        if entry is None:
            return variant
        variant.price = entry.price
        variant.inventory_quantity = entry.inventory_quantity
        variant.sku = entry.sku
        variant.id = entry.id
        return variant

    def total_inventory(self, signatures):
        total = 0
        for sig in signatures:
            entry = self._entries.get(sig)
            if entry is not None:
                total += entry.inventory_quantity
        return total

    def prices(self, signatures):
        """Prices of the given signatures, 0 for unknown ones."""
        return [
            self._entries[sig].price if sig in self._entries else 0
            for sig in signatures
        ]
