"""Grouped, collapsible presentation of generated variants.

Variants are grouped by the value they carry for one chosen option
(``group_by``). A group gets its own collapsible header row only when there
are at least two option dimensions and the group holds at least two
variants; otherwise its single variant row is shown directly.

The group price cell shows one editable price when every variant in the
group agrees, and a read-only range otherwise. A range turns into an
editable uniform price only after ``activate_price_edit``; edits there fan
out to every variant of the group through ``OverlayStore.set_for_all``.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

OTHER_GROUP = "Other"
LABEL_SEPARATOR = " / "


@dataclass
class VariantGroup:
    key: str
    variants: list = field(default_factory=list)

    @property
    def signatures(self):
        return [v.signature for v in self.variants]


@dataclass
class PriceCell:
    mode: str  # "uniform", "range" or "editing"
    price: Optional[float] = None
    low: Optional[float] = None
    high: Optional[float] = None
    display: str = ""

    @property
    def editable(self):
        return self.mode != "range"


@dataclass
class Row:
    kind: str  # "group" or "variant"
    key: str
    label: str
    group_key: str
    indented: bool = False
    signatures: List[str] = field(default_factory=list)


def format_amount(amount):
    return f"{amount:,.2f}"


class GroupingView:
    def __init__(self, overlay, currency_label="Rs"):
        self.overlay = overlay
        self.currency_label = currency_label
        self.group_by = ""
        self.collapsed = set()
        self.price_editing = set()

    # -- group-by dimension ----------------------------------------------

    def resolve_group_by(self, names):
        """Fall back to the first dimension when the current one is gone."""
        if self.group_by not in names:
            self.group_by = names[0] if names else ""
        return self.group_by

    def set_group_by(self, name, names):
        if name not in names:
            return False
        if name != self.group_by:
            self.group_by = name
            self.collapsed.clear()
            self.price_editing.clear()
        return True

    def rename_dimension(self, old_name, new_name):
        if old_name and self.group_by == old_name:
            self.group_by = new_name

    def drop_dimension(self, name, remaining_names):
        if self.group_by == name:
            self.group_by = remaining_names[0] if remaining_names else ""

    # -- grouping ---------------------------------------------------------

    def groups(self, variants, names):
        if not variants or not names:
            return []

        if len(names) == 1:
            only = names[0]
            return [
                VariantGroup(key=v.value_for(only) or v.signature, variants=[v])
                for v in variants
            ]

        dimension = self.resolve_group_by(names)
        grouped = {}
        for variant in variants:
            key = variant.value_for(dimension) or OTHER_GROUP
            grouped.setdefault(key, VariantGroup(key=key)).variants.append(variant)
        return list(grouped.values())

    def has_header(self, group, names):
        return len(names) >= 2 and len(group.variants) >= 2

    def rows(self, variants, names):
        """Flatten groups into the rows a table would render, in order."""
        rows = []
        for group in self.groups(variants, names):
            headed = self.has_header(group, names)
            if headed:
                rows.append(
                    Row(
                        kind="group",
                        key=group.key,
                        label=group.key,
                        group_key=group.key,
                        signatures=group.signatures,
                    )
                )
                if not self.is_expanded(group.key):
                    continue
            for variant in group.variants:
                rows.append(
                    Row(
                        kind="variant",
                        key=variant.signature,
                        label=self.variant_label(variant, headed),
                        group_key=group.key,
                        indented=headed,
                        signatures=[variant.signature],
                    )
                )
        return rows

    def variant_label(self, variant, headed):
        if headed:
            parts = [
                f"{name}: {value}"
                for name, value in variant.pairs
                if name != self.group_by
            ]
        else:
            parts = [value for _, value in variant.pairs]
        return LABEL_SEPARATOR.join(parts)

    # -- expand / collapse -------------------------------------------------

    def is_expanded(self, key):
        return key not in self.collapsed

    def toggle_group(self, key):
        if key in self.collapsed:
            self.collapsed.discard(key)
            return True
        self.collapsed.add(key)
        return False

    def all_expanded(self, groups):
        return all(self.is_expanded(g.key) for g in groups)

    def set_all_expanded(self, groups, expanded):
        if expanded:
            self.collapsed.clear()
        else:
            self.collapsed = {g.key for g in groups}

    def toggle_all(self, groups):
        """Expand all / Collapse all. Returns the new expanded state."""
        expand = not self.all_expanded(groups)
        self.set_all_expanded(groups, expand)
        return expand

    def shows_expand_all(self, groups, names):
        return len(groups) > 1 and len(names) > 1

    # -- group cells -------------------------------------------------------

    def price_cell(self, group):
        prices = self.overlay.prices(group.signatures)
        if not prices:
            return PriceCell(mode="uniform", price=0, display=format_amount(0))

        low, high = min(prices), max(prices)
        if low == high:
            return PriceCell(
                mode="uniform", price=low, low=low, high=high, display=format_amount(low)
            )
        if group.key in self.price_editing:
            return PriceCell(mode="editing", low=low, high=high)
        return PriceCell(
            mode="range",
            low=low,
            high=high,
            display=f"{self.currency_label} {format_amount(low)}–{format_amount(high)}",
        )

    def activate_price_edit(self, group):
        self.price_editing.add(group.key)
        return self.price_cell(group)

    def set_group_price(self, group, price):
        """Fan one price out to every variant of the group, selected or not."""
        applied = self.overlay.set_for_all(group.signatures, price)
        logger.debug("Group %s price set to %s", group.key, applied)
        return applied

    def blur_price_edit(self, group):
        self.price_editing.discard(group.key)
        return self.price_cell(group)

    def inventory_total(self, group):
        return self.overlay.total_inventory(group.signatures)

    def store_total(self, variants):
        return self.overlay.total_inventory(v.signature for v in variants)
