"""Variant selection and bulk deletion with orphan-value pruning."""
import logging
from dataclasses import replace

logger = logging.getLogger(__name__)

CHECKED = "checked"
UNCHECKED = "unchecked"
INDETERMINATE = "indeterminate"


def checkbox_state(selected, signatures):
    signatures = set(signatures)
    if not signatures:
        return UNCHECKED
    chosen = signatures & selected
    if not chosen:
        return UNCHECKED
    if chosen == signatures:
        return CHECKED
    return INDETERMINATE


def prune_options(options, variants, deleted_signatures):
    """Drop option values used only by deleted variants.

    Returns new Option objects; the inputs are not modified. A value is
    pruned when some deleted variant uses it and no remaining variant does.
    Options left without any non-blank value are dropped.
    """
    deleted_signatures = set(deleted_signatures)
    deleted = [v for v in variants if v.signature in deleted_signatures]
    remaining = [v for v in variants if v.signature not in deleted_signatures]

    pruned = []
    for option in options:
        name = option.name.strip()
        used_remaining = {v.value_for(name) for v in remaining}
        used_deleted = {v.value_for(name) for v in deleted}
        orphans = used_deleted - used_remaining
        orphans.discard(None)

        values = [v for v in option.values if v not in orphans]
        if not values:
            values = [""]
        if not any(v.strip() for v in values):
            logger.info("Dropping option %s: every value was deleted", name)
            continue
        if orphans:
            logger.info("Pruned %s from option %s", sorted(orphans), name)
        pruned.append(replace(option, values=values))
    return pruned


class SelectionEngine:
    """Selected variant signatures, kept by signature rather than row index."""

    def __init__(self):
        self.selected = set()

    def __len__(self):
        return len(self.selected)

    def is_selected(self, signature):
        return signature in self.selected

    def toggle(self, signature):
        if signature in self.selected:
            self.selected.discard(signature)
            return False
        self.selected.add(signature)
        return True

    def select_all(self, signatures):
        self.selected = set(signatures)

    def clear(self):
        self.selected = set()

    def toggle_all(self, signatures):
        """Header checkbox: clear when everything is selected, else select all."""
        signatures = set(signatures)
        if signatures and signatures <= self.selected:
            self.clear()
        else:
            self.select_all(signatures)

    def toggle_group(self, signatures):
        signatures = set(signatures)
        if signatures and signatures <= self.selected:
            self.selected -= signatures
        else:
            self.selected |= signatures

    def state(self, signatures):
        return checkbox_state(self.selected, signatures)

    def retain(self, signatures):
        """Forget selections whose variant no longer exists."""
        self.selected &= set(signatures)
