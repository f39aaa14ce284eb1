from hexshift.geometry import (
    LONG_ROW,
    ROW_COUNT,
    SHORT_ROW,
    Slot,
    all_slots,
    in_bounds,
    is_long_row,
    row_length,
    slot_neighbors,
)


def test_rows_alternate_long_and_short():
    assert ROW_COUNT == 7
    assert [row_length(r) for r in range(ROW_COUNT)] == [7, 6, 7, 6, 7, 6, 7]
    assert is_long_row(0) and not is_long_row(1)
    assert row_length(-1) == 0
    assert row_length(ROW_COUNT) == 0


def test_long_corner_neighbors():
    assert slot_neighbors(0, 0) == [Slot(0, 1), Slot(1, 0)]
    assert slot_neighbors(0, 6) == [Slot(0, 5), Slot(1, 5)]


def test_short_row_reaches_two_long_slots_above_and_below():
    assert slot_neighbors(1, 0) == [Slot(1, 1), Slot(0, 0), Slot(0, 1), Slot(2, 0), Slot(2, 1)]
    assert slot_neighbors(3, 5) == [Slot(3, 4), Slot(2, 5), Slot(2, 6), Slot(4, 5), Slot(4, 6)]


def test_long_row_maps_to_left_and_same_short_slot():
    assert slot_neighbors(2, 3) == [
        Slot(2, 2),
        Slot(2, 4),
        Slot(1, 2),
        Slot(1, 3),
        Slot(3, 2),
        Slot(3, 3),
    ]


def test_out_of_range_slots_have_no_neighbors():
    assert slot_neighbors(7, 0) == []
    assert slot_neighbors(0, LONG_ROW) == []
    assert slot_neighbors(1, SHORT_ROW) == []
    assert slot_neighbors(0, -1) == []


def test_adjacency_is_symmetric():
    for slot in all_slots():
        for neighbor in slot_neighbors(slot.row, slot.slot):
            assert slot in slot_neighbors(neighbor.row, neighbor.slot)


def test_in_bounds():
    assert in_bounds(1, 0, 6, layers=7)
    assert not in_bounds(1, 1, 6, layers=7)
    assert not in_bounds(0, 0, 0, layers=7)
    assert not in_bounds(8, 0, 0, layers=7)
    assert len(all_slots()) == 46
