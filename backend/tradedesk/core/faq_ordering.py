"""FAQ Ordering — drag-and-drop reorder and auto-order rules for FAQ pages."""

from typing import Hashable, Sequence


def next_order(max_order: int | None) -> int:
    """Order for a new FAQ appended to a page; 0 on an empty page."""
    return 0 if max_order is None else max_order + 1


def reorder(
    page_ids: Sequence[Hashable],
    dragged_id: Hashable,
    target_id: Hashable | None = None,
) -> list[Hashable]:
    """New id order for a page after dropping dragged_id before target_id.

    page_ids is the destination page in current order and may or may not already
    contain the dragged item. Without a target the item goes last. The result index
    of each id is its new `order` value.
    """
    remaining = [fid for fid in page_ids if fid != dragged_id]
    index = len(remaining)
    if target_id is not None:
        try:
            index = remaining.index(target_id)
        except ValueError:
            raise LookupError("Target FAQ not found in the destination page")
    remaining.insert(index, dragged_id)
    return remaining
