# unit_selector.py
from typing import Iterable, List

from ir_model import Item, ItemKind


def select_units(items: Iterable[Item]) -> List[str]:
    """Return the ids of function definitions, in declaration order.

    Every other item kind is skipped without looking inside it. An id that
    appears twice is only reported once.
    """
    seen = set()
    units = []
    for item in items:
        if item.kind is not ItemKind.FUNCTION or item.id in seen:
            continue
        seen.add(item.id)
        units.append(item.id)
    return units
