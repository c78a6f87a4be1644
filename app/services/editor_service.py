"""Variant editors held open per product between requests."""
import logging
import threading
from dataclasses import asdict
from flask import current_app
from app.extensions import editors
from app.services import product_service
from app.variants.generator import signature
from app.variants.grouping import PriceCell
from app.variants.manager import VariantManager
from app.variants.menus import SELECTION_MENU, row_menu
from app.variants.options import Option
from app.variants.variant_types import get_type_by_name, is_colour_type, parse_colour

logger = logging.getLogger(__name__)

# action name -> (VariantManager method, payload keys passed positionally)
ACTIONS = {
    "add_option": ("add_option", ()),
    "edit_option": ("edit_option", ("option_id",)),
    "rename_option": ("rename_option", ("option_id", "name")),
    "set_value": ("set_value", ("option_id", "index", "value")),
    "remove_value": ("remove_value", ("option_id", "index")),
    "move_value": ("move_value", ("option_id", "from_index", "to_index")),
    "commit_option": ("commit_option", ("option_id",)),
    "remove_option": ("remove_option", ("option_id",)),
    "reorder_options": ("reorder_options", ("from_index", "to_index")),
    "move_option": ("move_option", ("active_id", "over_id")),
    "set_variant_price": ("set_variant_price", ("signature", "price")),
    "set_variant_inventory": ("set_variant_inventory", ("signature", "inventory_quantity")),
    "set_group_price": ("set_group_price", ("group", "price")),
    "activate_group_price": ("activate_group_price_edit", ("group",)),
    "blur_group_price": ("blur_group_price_edit", ("group",)),
    "set_group_by": ("set_group_by", ("name",)),
    "toggle_group": ("toggle_group", ("group",)),
    "toggle_all_groups": ("toggle_all_groups", ()),
    "toggle_variant": ("toggle_variant_selection", ("signature",)),
    "toggle_group_selection": ("toggle_group_selection", ("group",)),
    "toggle_select_all": ("toggle_select_all", ()),
    "open_selection_menu": ("open_selection_menu", ()),
    "toggle_row_menu": ("toggle_row_menu", ("signature",)),
    "click": ("click", ("regions",)),
    "delete_selected": ("delete_selected", ()),
    "delete_variant": ("delete_variant", ("signature",)),
}

_INT_ARGS = {"index", "from_index", "to_index"}


class Editor:
    """A VariantManager plus what the product form tracks about it."""

    def __init__(self, product_id, variants, currency_label="Rs"):
        self.product_id = product_id
        # One request at a time per editor; re-entrant so views can hold it
        # across an action and the state read that follows.
        self.lock = threading.RLock()
        self.pending = None
        self.has_unsaved_edit = False
        self.editing_index = None
        self.manager = VariantManager(
            variants,
            on_variants_change=self._variants_changed,
            on_editing_state_change=self._editing_changed,
            currency_label=currency_label,
        )

    @property
    def dirty(self):
        return self.pending is not None

    def _variants_changed(self, variants):
        self.pending = [v.to_dict() for v in variants]

    def _editing_changed(self, has_unsaved_edit, editing_index):
        self.has_unsaved_edit = has_unsaved_edit
        self.editing_index = editing_index


def open_editor(product):
    """Start (or restart) an editor seeded with the product's saved variants."""
    editor = Editor(
        product.id,
        product_service.variants_payload(product),
        currency_label=current_app.config["PRICE_CURRENCY_LABEL"],
    )
    editors.put(product.id, editor)
    logger.info("Opened variant editor for product %s", product.id)
    return editor


def get_editor(product_id):
    return editors.get(product_id)


def discard_editor(product_id):
    editor = editors.pop(product_id)
    if editor is not None:
        logger.info("Discarded variant editor for product %s", product_id)
    return editor


def _arguments(action, arg_names, payload):
    missing = [name for name in arg_names if name not in payload]
    if missing:
        raise ValueError(f"{action} requires: {', '.join(missing)}")
    args = []
    for name in arg_names:
        value = payload[name]
        if name in _INT_ARGS:
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValueError(f"{name} must be an integer") from None
        args.append(value)
    return args


def _result(value):
    if isinstance(value, Option):
        return value.to_dict()
    if isinstance(value, PriceCell):
        return asdict(value)
    if isinstance(value, set):
        return sorted(value)
    return value


def apply_action(editor, action, payload=None):
    """Route a named UI action to the editor's VariantManager."""
    route = ACTIONS.get(action)
    if route is None:
        raise ValueError(f"Unknown action: {action}")
    method_name, arg_names = route
    args = _arguments(action, arg_names, payload or {})
    with editor.lock:
        return _result(getattr(editor.manager, method_name)(*args))


def save_editor(editor, actor_id):
    """Persist the committed variant list. Callers check has_unsaved_edit first."""
    with editor.lock:
        manager = editor.manager
        variants = editor.pending
        if variants is None:
            variants = [v.to_dict() for v in manager.emitted()]

        product = product_service.save_variants(editor.product_id, variants, actor_id)
        if product is None:
            return None

        # New rows now have ids; fold them back in so the next save reuses them.
        for row in product.variants:
            manager.overlay.set(signature(row.pairs), id=row.id)
        manager.propagate()
        editor.pending = None
        return product


def _option_state(manager, option):
    vtype = get_type_by_name(option.name)
    data = option.to_dict()
    data["errors"] = manager.options.errors_for(option.id).to_dict()
    data["type"] = vtype.to_dict()
    if is_colour_type(option.name):
        data["colours"] = [parse_colour(v) for v in option.values]
    return data


def _group_state(manager, group, names):
    return {
        "key": group.key,
        "has_header": manager.grouping.has_header(group, names),
        "expanded": manager.grouping.is_expanded(group.key),
        "selection": manager.selection.state(group.signatures),
        "price": asdict(manager.grouping.price_cell(group)),
        "inventory": manager.grouping.inventory_total(group),
        "signatures": group.signatures,
    }


def _state(editor):
    manager = editor.manager
    preview = manager.preview()
    by_signature = {v.signature: v for v in preview}
    names = manager.dimension_names()
    groups = manager.grouping.groups(preview, names)

    rows = []
    for row in manager.grouping.rows(preview, names):
        data = asdict(row)
        if row.kind == "variant":
            variant = by_signature[row.key]
            data["price"] = variant.price
            data["inventory_quantity"] = variant.inventory_quantity
            data["selected"] = manager.selection.is_selected(row.key)
            data["menu_open"] = manager.menus.is_open(row_menu(row.key))
        rows.append(data)

    options = manager.options
    return {
        "product_id": editor.product_id,
        "has_unsaved_edit": editor.has_unsaved_edit,
        "editing_index": editor.editing_index,
        "dirty": editor.dirty,
        "can_add_option": (
            len(options.options) < options.max_options and not manager.has_unsaved_edit
        ),
        "can_reorder": not manager.has_unsaved_edit,
        "options": [_option_state(manager, o) for o in options.options],
        "group_by": manager.grouping.group_by,
        "dimensions": names,
        "groups": [_group_state(manager, g, names) for g in groups],
        "show_expand_all": manager.grouping.shows_expand_all(groups, names),
        "all_expanded": manager.grouping.all_expanded(groups),
        "rows": rows,
        "selection": {
            "count": len(manager.selection),
            "state": manager.select_all_state(),
            "menu_open": manager.menus.is_open(SELECTION_MENU),
        },
        "total_inventory": manager.total_inventory(),
        "variants": [v.to_dict() for v in manager.emitted()],
    }


def serialize_state(editor):
    with editor.lock:
        return _state(editor)
