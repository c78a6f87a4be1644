"""VariantManager: options in, a consistent variant matrix out.

Every public mutation runs to completion in the same order: update the
option store, regenerate, reconcile the overlay, then decide whether the
committed variant list must be pushed to ``on_variants_change``. Nothing is
pushed while an option is open for editing; the table keeps showing a live
preview that includes the option being typed into.
"""
import logging

from app.variants.generator import generate, pairs_from_payload, signature, snapshot, variants_changed
from app.variants.grouping import GroupingView
from app.variants.menus import SELECTION_MENU, MenuRegistry, row_menu
from app.variants.options import OptionStore, find_duplicate_name
from app.variants.overlay import OverlayStore
from app.variants.selection import SelectionEngine, prune_options
from app.variants.session import EditSessionGate

logger = logging.getLogger(__name__)


class VariantManager:
    def __init__(
        self,
        variants=None,
        on_variants_change=None,
        on_editing_state_change=None,
        currency_label="Rs",
    ):
        self.gate = EditSessionGate()
        self.options = OptionStore(self.gate)
        self.overlay = OverlayStore()
        self.grouping = GroupingView(self.overlay, currency_label=currency_label)
        self.selection = SelectionEngine()
        self.menus = MenuRegistry()
        self.menus.register(SELECTION_MENU)

        self.on_variants_change = on_variants_change
        self.on_editing_state_change = on_editing_state_change
        self._emitted = []
        # (option id, name) the open option's overlay entries are keyed under
        self._keyed = None

        self.gate.subscribe(self._gate_changed)
        self._load(variants or [])
        if self.on_editing_state_change:
            self.on_editing_state_change(False, None)

    def _load(self, variants):
        """Rebuild options and overlay from a persisted variant list."""
        named = {}
        ordered = sorted(variants, key=lambda item: item.get("position") or 0)
        for item in ordered:
            pairs = pairs_from_payload(item)
            for name, value in pairs:
                values = named.setdefault(name, [])
                if value not in values:
                    values.append(value)
            if not pairs:
                continue
            self.overlay.set(
                signature(pairs),
                price=item.get("price", 0),
                inventory_quantity=item.get("inventory_quantity", 0),
                sku=item.get("sku") or "",
                id=item.get("id"),
            )

        self.options.load(list(named.items())[: self.options.max_options])
        self.grouping.resolve_group_by(self.dimension_names())
        self._emitted = snapshot(self.variants())
        self._sync_menus()

    # -- derived views ----------------------------------------------------

    @property
    def has_unsaved_edit(self):
        return self.gate.is_editing

    @property
    def editing_index(self):
        if self.gate.editing_id is None:
            return None
        return self.options.index_of(self.gate.editing_id)

    def variants(self):
        """The committed matrix: saved options only."""
        return generate(self.options.saved_options(), self.overlay)

    def preview(self):
        """What the table shows, including the option being edited."""
        return generate(self.options.live_options(), self.overlay)

    def emitted(self):
        return snapshot(self._emitted)

    def dimension_names(self):
        return [o.name.strip() for o in self.options.live_options()]

    def all_signatures(self):
        return [v.signature for v in self.preview()]

    def groups(self):
        return self.grouping.groups(self.preview(), self.dimension_names())

    def rows(self):
        return self.grouping.rows(self.preview(), self.dimension_names())

    def find_group(self, key):
        for group in self.groups():
            if group.key == key:
                return group
        return None

    def total_inventory(self):
        return self.grouping.store_total(self.preview())

    def select_all_state(self):
        return self.selection.state(self.all_signatures())

    def group_selection_state(self, key):
        group = self.find_group(key)
        if group is None:
            return None
        return self.selection.state(group.signatures)

    # -- option editing ---------------------------------------------------

    def add_option(self):
        option = self.options.add_option()
        if option is not None:
            self._keyed = (option.id, "")
            self._changed()
        return option

    def edit_option(self, option_id):
        option = self.options.get(option_id)
        if option is None or option.editing:
            return False
        if not self.options.edit_option(option_id):
            return False
        self._keyed = (option_id, option.name.strip())
        self._changed()
        return True

    def rename_option(self, option_id, name):
        if not self.options.rename_option(option_id, name):
            return False
        self._follow_rename(option_id)
        self._changed()
        return True

    def set_value(self, option_id, index, value):
        return self._apply(self.options.set_value(option_id, index, value))

    def remove_value(self, option_id, index):
        if not self.options.remove_value(option_id, index):
            return False
        self._prune()
        self._changed()
        return True

    def move_value(self, option_id, from_index, to_index):
        return self._apply(self.options.move_value(option_id, from_index, to_index))

    def commit_option(self, option_id):
        if not self.options.commit(option_id):
            return False
        self._keyed = None
        self.grouping.resolve_group_by(self.dimension_names())
        self._prune()
        self._changed()
        return True

    def remove_option(self, option_id):
        removed = self.options.remove(option_id)
        if removed is None:
            return False
        if self._keyed and self._keyed[0] == option_id:
            self._keyed = None
        self.grouping.drop_dimension(removed.name.strip(), self.dimension_names())
        self._prune()
        self._changed()
        return True

    def reorder_options(self, from_index, to_index):
        if not self.options.reorder(from_index, to_index):
            return False
        self._rekey_order()
        self._changed()
        return True

    def move_option(self, active_id, over_id):
        if not self.options.move_option(active_id, over_id):
            return False
        self._rekey_order()
        self._changed()
        return True

    # -- per-variant and per-group data ------------------------------------

    def set_variant_price(self, sig, price):
        if sig not in self.all_signatures():
            return False
        self.overlay.set(sig, price=price)
        self._changed()
        return True

    def set_variant_inventory(self, sig, quantity):
        if sig not in self.all_signatures():
            return False
        self.overlay.set(sig, inventory_quantity=quantity)
        self._changed()
        return True

    def set_group_price(self, key, price):
        group = self.find_group(key)
        if group is None:
            return False
        self.grouping.set_group_price(group, price)
        self._changed()
        return True

    def activate_group_price_edit(self, key):
        group = self.find_group(key)
        if group is None:
            return None
        return self.grouping.activate_price_edit(group)

    def blur_group_price_edit(self, key):
        group = self.find_group(key)
        if group is None:
            return None
        return self.grouping.blur_price_edit(group)

    def set_group_by(self, name):
        return self.grouping.set_group_by(name, self.dimension_names())

    def toggle_group(self, key):
        return self.grouping.toggle_group(key)

    def toggle_all_groups(self):
        return self.grouping.toggle_all(self.groups())

    # -- selection and deletion --------------------------------------------

    def toggle_variant_selection(self, sig):
        if sig not in self.all_signatures():
            return False
        self.selection.toggle(sig)
        self._sync_menus()
        return True

    def toggle_group_selection(self, key):
        group = self.find_group(key)
        if group is None:
            return False
        self.selection.toggle_group(group.signatures)
        self._sync_menus()
        return True

    def toggle_select_all(self):
        self.selection.toggle_all(self.all_signatures())
        self._sync_menus()
        return self.select_all_state()

    def open_selection_menu(self):
        if not self.selection.selected:
            return False
        return self.menus.open(SELECTION_MENU)

    def toggle_row_menu(self, sig):
        return self.menus.toggle(row_menu(sig))

    def click(self, hit_regions=()):
        return self.menus.click(hit_regions)

    def delete_selected(self):
        """Bulk delete through the generating options, then regenerate."""
        if not self.selection.selected:
            return False
        deleted = self._delete_signatures(self.selection.selected)
        if deleted:
            self.selection.clear()
            self.menus.close(SELECTION_MENU)
            self._changed()
        return deleted

    def delete_variant(self, sig):
        deleted = self._delete_signatures({sig})
        if deleted:
            self.menus.close(row_menu(sig))
            self._changed()
        return deleted

    def _delete_signatures(self, signatures):
        if self.gate.is_editing:
            logger.debug("Delete refused while %s is open", self.gate.editing_id)
            return False
        current = self.variants()
        signatures = set(signatures) & {v.signature for v in current}
        if not signatures:
            return False

        options = prune_options(self.options.options, current, signatures)
        self.options.replace(options)
        self.grouping.resolve_group_by(self.dimension_names())
        self._prune()
        logger.info(
            "Deleted %d variant(s), %d remain", len(signatures), len(self.variants())
        )
        return True

    # -- internals ---------------------------------------------------------

    def _apply(self, ok):
        if ok:
            self._changed()
        return ok

    def _prune(self):
        # The open option's entries may sit under signatures the preview
        # cannot show yet (blank name, clashing values); commit prunes them.
        if self.gate.is_editing:
            return
        self.overlay.prune(self.all_signatures())

    def _follow_rename(self, option_id):
        """Move the open option's overlay entries to its new name as it is typed.

        Blank or clashing names are skipped; entries stay under the last
        usable name until the next one.
        """
        if not self._keyed or self._keyed[0] != option_id:
            return
        new_name = self.options.get(option_id).name.strip()
        old_name = self._keyed[1]
        if not new_name or new_name == old_name:
            return
        if find_duplicate_name(option_id, new_name, self.options.options):
            return
        if old_name:
            self._rekey_dimension(old_name, new_name)
            self.grouping.rename_dimension(old_name, new_name)
        self._keyed = (option_id, new_name)

    def _rekey_dimension(self, old_name, new_name):
        def rename(pairs):
            return tuple((new_name if n == old_name else n, v) for n, v in pairs)

        self.overlay.rekey_pairs(rename)

    def _rekey_order(self):
        order = {name: i for i, name in enumerate(self.dimension_names())}

        def reorder_pairs(pairs):
            return tuple(sorted(pairs, key=lambda pair: order.get(pair[0], len(order))))

        self.overlay.rekey_pairs(reorder_pairs)

    def _sync_menus(self):
        signatures = self.all_signatures()
        self.selection.retain(signatures)
        self.menus.sync((row_menu(s) for s in signatures), keep=(SELECTION_MENU,))
        if not self.selection.selected:
            self.menus.close(SELECTION_MENU)

    def _changed(self):
        self._sync_menus()
        self.propagate()

    def propagate(self):
        """Push the committed matrix to the consumer if it changed."""
        if self.gate.is_editing:
            return False
        current = self.variants()
        if not variants_changed(self._emitted, current):
            return False
        self._emitted = snapshot(current)
        logger.info("Emitting %d variant(s)", len(current))
        if self.on_variants_change:
            self.on_variants_change(snapshot(current))
        return True

    def _gate_changed(self, editing_id):
        if not self.on_editing_state_change:
            return
        index = self.options.index_of(editing_id) if editing_id else None
        self.on_editing_state_change(editing_id is not None, index)
