"""Tests for the option store, validation and the edit session gate."""
from app.variants.options import OptionError, OptionStore, find_duplicate_values
from app.variants.session import EditSessionGate


def _store():
    return OptionStore(EditSessionGate())


def _fill(store, name, values):
    option = store.add_option()
    store.rename_option(option.id, name)
    for index, value in enumerate(values):
        store.set_value(option.id, index, value)
    return option


def test_new_option_is_open_with_one_blank_slot():
    store = _store()
    option = store.add_option()

    assert option.editing
    assert option.values == [""]
    assert store.gate.editing_id == option.id


def test_add_option_refused_while_editing():
    store = _store()
    store.add_option()
    assert store.add_option() is None
    assert len(store.options) == 1


def test_add_option_refused_beyond_three():
    store = _store()
    for name in ("Size", "Color", "Fit"):
        option = _fill(store, name, ["a"])
        assert store.commit(option.id)

    assert store.add_option() is None
    assert len(store.options) == 3


def test_option_ids_are_never_reused():
    store = _store()
    first = store.add_option()
    store.remove(first.id)
    second = store.add_option()
    assert second.id != first.id


def test_filling_last_slot_appends_blank():
    store = _store()
    option = store.add_option()

    store.set_value(option.id, 0, "S")
    assert option.values == ["S", ""]
    store.set_value(option.id, 1, "M")
    assert option.values == ["S", "M", ""]
    # Editing a middle slot does not grow the list.
    store.set_value(option.id, 0, "XS")
    assert option.values == ["XS", "M", ""]


def test_set_value_out_of_range():
    store = _store()
    option = store.add_option()
    assert not store.set_value(option.id, 5, "S")


def test_remove_last_value_leaves_blank_slot():
    store = _store()
    option = store.add_option()
    store.remove_value(option.id, 0)
    assert option.values == [""]


def test_duplicate_name_warning_is_live():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)

    option = store.add_option()
    store.rename_option(option.id, " size ")
    assert store.errors_for(option.id).duplicate_name == "size"

    store.rename_option(option.id, "Color")
    assert not store.errors_for(option.id)


def test_duplicate_value_warning_is_live():
    store = _store()
    option = _fill(store, "Size", ["S", "M", " s"])
    assert store.errors_for(option.id).duplicate_values == [2]

    store.remove_value(option.id, 2)
    assert store.errors_for(option.id).duplicate_values == []


def test_find_duplicate_values_ignores_blanks():
    assert find_duplicate_values(["", "A", " ", "a", "B", "b "]) == [3, 5]


def test_commit_rejects_empty_name_and_values():
    store = _store()
    option = store.add_option()

    assert not store.commit(option.id)
    errors = store.errors_for(option.id)
    assert errors.codes == [OptionError.EMPTY_NAME, OptionError.EMPTY_VALUES]
    assert option.editing
    assert store.gate.is_editing


def test_commit_rejects_duplicate_name():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)

    other = _fill(store, "SIZE", ["M"])
    assert not store.commit(other.id)
    assert OptionError.DUPLICATE_NAME in store.errors_for(other.id).codes
    # The saved option is untouched by the failed commit.
    assert size.values == ["S"]
    assert not size.editing


def test_commit_rejects_duplicate_values():
    store = _store()
    option = _fill(store, "Color", ["Red", "red"])
    assert not store.commit(option.id)
    assert store.errors_for(option.id).duplicate_values == [1]


def test_commit_strips_blank_values_and_closes_session():
    store = _store()
    option = _fill(store, "  Size ", [" S ", "M"])

    assert store.commit(option.id)
    assert option.name == "Size"
    assert option.values == ["S", "M"]
    assert not option.editing
    assert not store.gate.is_editing
    assert not store.errors_for(option.id)


def test_typing_clears_empty_value_error():
    store = _store()
    option = store.add_option()
    store.rename_option(option.id, "Size")
    store.commit(option.id)
    assert store.errors_for(option.id).empty_values

    store.set_value(option.id, 0, "S")
    assert not store.errors_for(option.id).empty_values


def test_only_one_option_edits_at_a_time():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)
    color = _fill(store, "Color", ["Red"])
    store.commit(color.id)

    assert store.edit_option(size.id)
    assert not store.edit_option(color.id)
    assert [o.editing for o in store.options] == [True, False]
    assert size.values == ["S", ""]


def test_remove_closes_edit_session():
    store = _store()
    option = store.add_option()
    assert store.remove(option.id) is option
    assert not store.gate.is_editing
    assert store.options == []


def test_reorder_refused_while_editing():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)
    color = _fill(store, "Color", ["Red"])

    assert not store.reorder(1, 0)
    store.commit(color.id)
    assert store.reorder(1, 0)
    assert [o.name for o in store.options] == ["Color", "Size"]


def test_move_option_by_id():
    store = _store()
    for name in ("Size", "Color", "Fit"):
        store.commit(_fill(store, name, ["a"]).id)
    fit = store.options[2]

    assert store.move_option(fit.id, store.options[0].id)
    assert [o.name for o in store.options] == ["Fit", "Size", "Color"]


def test_move_value_while_editing():
    store = _store()
    option = _fill(store, "Size", ["S", "M", "L"])
    assert store.move_value(option.id, 2, 0)
    assert option.values == ["L", "S", "M", ""]

    store.commit(option.id)
    assert not store.move_value(option.id, 0, 1)


def test_live_options_include_usable_editing_option():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)
    color = _fill(store, "Color", [])

    assert [o.name for o in store.live_options()] == ["Size"]
    store.set_value(color.id, 0, "Red")
    assert [o.name for o in store.live_options()] == ["Size", "Color"]
    assert [o.name for o in store.saved_options()] == ["Size"]


def test_clashing_editing_option_left_out_of_live_options():
    store = _store()
    size = _fill(store, "Size", ["S"])
    store.commit(size.id)
    color = _fill(store, "Color", ["Red", "red"])

    assert [o.name for o in store.live_options()] == ["Size"]
    store.remove_value(color.id, 1)
    assert [o.name for o in store.live_options()] == ["Size", "Color"]

    store.rename_option(color.id, "SIZE")
    assert [o.name for o in store.live_options()] == ["Size"]


def test_gate_notifies_transitions_only():
    gate = EditSessionGate()
    seen = []
    gate.subscribe(seen.append)

    assert gate.open("a")
    assert gate.open("a")
    assert not gate.open("b")
    assert not gate.close("b")
    assert gate.close("a")
    assert seen == ["a", None]
