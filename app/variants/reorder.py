"""Reorderable list helpers used by option and value drag-and-drop."""


def reorder(items, from_index, to_index):
    """Return a new list with the item at from_index moved to to_index.

    Out-of-range indices leave the order unchanged.
    """
    result = list(items)
    size = len(result)
    if not (0 <= from_index < size and 0 <= to_index < size):
        return result
    if from_index == to_index:
        return result
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def move_by_id(items, active_id, over_id, key=lambda item: item.id):
    """Apply a drag-end event given the dragged and the hovered item ids."""
    if over_id is None or active_id == over_id:
        return list(items)

    ids = [key(item) for item in items]
    try:
        from_index = ids.index(active_id)
        to_index = ids.index(over_id)
    except ValueError:
        return list(items)
    return reorder(items, from_index, to_index)
