from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import pytest

from hexshift.game.scenario import (
    MovementPattern,
    Position,
    Scenario,
    Transition,
    TransitionType,
    pos_id,
)
from hexshift.geometry import ROW_LENS


SAMPLE_SCENARIO = Path(__file__).resolve().parents[1] / "scenarios" / "prism_path.json"


def make_scenario(**overrides) -> Scenario:
    fields = dict(
        id="test",
        name="Test",
        layers=1,
        start=Position(1, 0, 0),
        goal=Position(1, 6, 6),
        reveal_on_enter_guaranteed_up=False,
    )
    fields.update(overrides)
    return Scenario(**fields)


def up(source: Tuple[int, int, int], dest: Tuple[int, int, int]) -> Transition:
    return Transition(TransitionType.UP, Position(*source), Position(*dest))


def down(source: Tuple[int, int, int], dest: Tuple[int, int, int]) -> Transition:
    return Transition(TransitionType.DOWN, Position(*source), Position(*dest))


def all_positions_except(layer: int, keep: Iterable[Position]) -> Tuple[Position, ...]:
    kept = {pos_id(p) for p in keep}
    return tuple(
        Position(layer, row, col)
        for row, length in enumerate(ROW_LENS)
        for col in range(length)
        if pos_id(Position(layer, row, col)) not in kept
    )


@pytest.fixture
def open_scenario() -> Scenario:
    """One static layer with nothing in the way."""

    return make_scenario()


@pytest.fixture
def climb_scenario() -> Scenario:
    """Seven static layers; the goal on layer 3 needs an UP on layers 1 and 2.

    Shortest route: two steps along row 0 to the layer 1 UP, two more to the
    layer 2 UP, two more to the goal, six turns in all.
    """

    return make_scenario(
        id="climb",
        name="Climb",
        layers=7,
        start=Position(1, 0, 0),
        goal=Position(3, 0, 6),
        transitions=(
            up((1, 0, 2), (2, 0, 2)),
            up((2, 0, 4), (3, 0, 4)),
        ),
    )


@pytest.fixture
def rotation_scenario() -> Scenario:
    """Start and goal are the only hexes; they only touch after two turns.

    Row 0 (long) rotates left and row 1 (short) rotates right. The start
    slides from slot 0 to 6 to 5 while the goal slides from slot 3 to 4 to 5,
    which puts the goal in the start's lower neighbor slots after two passes.
    """

    start = Position(1, 0, 0)
    goal = Position(1, 1, 3)
    return make_scenario(
        id="rotation",
        name="Rotation",
        start=start,
        goal=goal,
        missing=all_positions_except(1, [start, goal]),
        movement={1: MovementPattern.LONG_LEFT_SHORT_RIGHT},
    )
