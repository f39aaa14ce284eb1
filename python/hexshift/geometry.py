"""Board geometry for the stacked 7-6-7-6-7-6-7 hex layout.

Every layer has the same shape: seven rows whose lengths alternate between a
long row of seven hexes and a short row of six. Neighbors are expressed in
terms of *slots* (the current index inside a row-slot sequence), never in
terms of a hex's origin column, so callers resolve a hex identity to its
current slot first and then ask this module for the neighboring slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


LONG_ROW = 7
SHORT_ROW = 6

# fmt: off
ROW_LENS: Tuple[int, ...] = (
    LONG_ROW,
    SHORT_ROW,
    LONG_ROW,
    SHORT_ROW,
    LONG_ROW,
    SHORT_ROW,
    LONG_ROW,
)
# fmt: on

ROW_COUNT = len(ROW_LENS)


@dataclass(frozen=True)
class Slot:
    """A visual cell of a layer: ``row`` index plus ``slot`` index within it."""

    row: int
    slot: int


def row_length(row: int) -> int:
    """Return the number of slots in ``row``, or ``0`` outside the board."""

    if row < 0 or row >= ROW_COUNT:
        return 0
    return ROW_LENS[row]


def is_long_row(row: int) -> bool:
    return row_length(row) == LONG_ROW


def in_bounds(layer: int, row: int, col: int, layers: int) -> bool:
    if layer < 1 or layer > layers:
        return False
    length = row_length(row)
    return 0 <= col < length


def _cross_row_slots(row: int, slot: int, target_row: int) -> List[int]:
    # Staggered rows: a long row overhangs the short row on both sides
    target_len = row_length(target_row)
    if not target_len:
        return []

    here_long = is_long_row(row)
    target_long = target_len == LONG_ROW

    if here_long and not target_long:
        candidates = [slot - 1, slot]
    elif not here_long and target_long:
        candidates = [slot, slot + 1]
    else:
        candidates = [slot - 1, slot]

    return [c for c in candidates if 0 <= c < target_len]


def slot_neighbors(row: int, slot: int) -> List[Slot]:
    """Return the neighboring slots of ``(row, slot)`` in a fixed order.

    Order is left, right, then the row above, then the row below. Slots that
    fall off the board are omitted; rows do not wrap around.
    """

    length = row_length(row)
    if not length or not 0 <= slot < length:
        return []

    out: List[Slot] = []
    if slot - 1 >= 0:
        out.append(Slot(row, slot - 1))
    if slot + 1 < length:
        out.append(Slot(row, slot + 1))

    for target_row in (row - 1, row + 1):
        for target_slot in _cross_row_slots(row, slot, target_row):
            out.append(Slot(target_row, target_slot))
    return out


def all_slots() -> List[Slot]:
    """Every slot of a single layer in row-then-slot order."""

    return [Slot(row, slot) for row in range(ROW_COUNT) for slot in range(ROW_LENS[row])]


__all__ = [
    "LONG_ROW",
    "SHORT_ROW",
    "ROW_LENS",
    "ROW_COUNT",
    "Slot",
    "row_length",
    "is_long_row",
    "in_bounds",
    "slot_neighbors",
    "all_slots",
]
