"""Scenario description: positions, transitions, movement patterns.

A :class:`Scenario` is the static input to a board. It is built either in
code or from the JSON shape used by scenario files::

    {
      "id": "prism_path", "name": "Prism Path", "layers": 7,
      "start": {"layer": 1, "row": 0, "col": 0},
      "goal": {"layer": 3, "row": 0, "col": 6},
      "missing": [...], "blocked": [...],
      "movement": {"2": "SEVEN_LEFT_SIX_RIGHT"},
      "transitions": [{"type": "UP", "from": {...}, "to": {...}}],
      "revealOnEnterGuaranteedUp": true
    }

:func:`validate_scenario` enforces the structural rules that the board itself
takes for granted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Set, Tuple, Union

from ..geometry import ROW_COUNT, in_bounds
from ..protocol import read_file


class ScenarioError(ValueError):
    pass


class TransitionType(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class MovementPattern(str, Enum):
    NONE = "NONE"
    LONG_LEFT_SHORT_RIGHT = "SEVEN_LEFT_SIX_RIGHT"
    TOP_RIGHT_BOTTOM_LEFT = "TOP3_RIGHT_BOTTOM4_LEFT"


@dataclass(frozen=True, order=True)
class Position:
    layer: int
    row: int
    col: int

    @property
    def hex_id(self) -> str:
        return pos_id(self)

    def to_dict(self) -> Dict[str, int]:
        return {"layer": self.layer, "row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: Any, label: str = "position") -> "Position":
        if not isinstance(data, Mapping):
            raise ScenarioError(f"{label} must be an object with layer/row/col")
        try:
            return cls(layer=int(data["layer"]), row=int(data["row"]), col=int(data["col"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise ScenarioError(f"{label} needs integer layer/row/col: {data!r}") from exc


@dataclass(frozen=True)
class Transition:
    type: TransitionType
    source: Position
    dest: Position

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "from": self.source.to_dict(), "to": self.dest.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> "Transition":
        if not isinstance(data, Mapping):
            raise ScenarioError("Transition must be an object")
        try:
            kind = TransitionType(str(data.get("type", "")).upper())
        except ValueError as exc:
            raise ScenarioError(f"Invalid transition type: {data.get('type')!r}") from exc
        if "from" not in data or "to" not in data:
            raise ScenarioError("Transition missing from/to")
        return cls(
            type=kind,
            source=Position.from_dict(data["from"], "transition.from"),
            dest=Position.from_dict(data["to"], "transition.to"),
        )


_HEX_ID = re.compile(r"^L(\d+)-R(\d+)-C(\d+)$")


def pos_id(position: Position) -> str:
    return f"L{position.layer}-R{position.row}-C{position.col}"


def parse_hex_id(hex_id: str) -> Position:
    match = _HEX_ID.match(hex_id)
    if match is None:
        raise ScenarioError(f"Bad hex id: {hex_id!r}")
    return Position(int(match.group(1)), int(match.group(2)), int(match.group(3)))


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    layers: int
    start: Position
    goal: Position
    missing: Tuple[Position, ...] = ()
    blocked: Tuple[Position, ...] = ()
    movement: Tuple[Tuple[int, MovementPattern], ...] = ()
    transitions: Tuple[Transition, ...] = ()
    reveal_on_enter_guaranteed_up: bool = True
    objective: str = "Reach the goal hex."
    description: str = ""
    notes: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Layer patterns are kept as sorted pairs so the scenario stays hashable
        if isinstance(self.movement, Mapping):
            object.__setattr__(self, "movement", tuple(sorted(self.movement.items())))

    def pattern_for_layer(self, layer: int) -> MovementPattern:
        for movement_layer, pattern in self.movement:
            if movement_layer == layer:
                return pattern
        return MovementPattern.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "layers": self.layers,
            "objective": self.objective,
            "description": self.description,
            "notes": list(self.notes),
            "start": self.start.to_dict(),
            "goal": self.goal.to_dict(),
            "missing": [p.to_dict() for p in self.missing],
            "blocked": [p.to_dict() for p in self.blocked],
            "movement": {str(layer): pattern.value for layer, pattern in self.movement},
            "transitions": [t.to_dict() for t in self.transitions],
            "revealOnEnterGuaranteedUp": self.reveal_on_enter_guaranteed_up,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Scenario":
        if not isinstance(data, Mapping):
            raise ScenarioError("Scenario is missing/invalid")
        for key in ("id", "name", "layers", "start", "goal"):
            if key not in data:
                raise ScenarioError(f"Scenario missing {key!r}")

        try:
            layers = int(data["layers"])
        except (TypeError, ValueError) as exc:
            raise ScenarioError(f"Scenario layers must be an integer: {data['layers']!r}") from exc

        raw_movement = data.get("movement") or {}
        if not isinstance(raw_movement, Mapping):
            raise ScenarioError(f"Scenario movement must be an object, got {type(raw_movement).__name__}")
        movement: Dict[int, MovementPattern] = {}
        for key, value in raw_movement.items():
            try:
                layer = int(key)
            except (TypeError, ValueError) as exc:
                raise ScenarioError(f"Invalid movement layer key: {key!r}") from exc
            try:
                movement[layer] = MovementPattern(str(value).upper())
            except ValueError as exc:
                raise ScenarioError(f"Invalid movement pattern on layer {layer}: {value!r}") from exc

        reveal = data.get("revealOnEnterGuaranteedUp")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            layers=layers,
            start=Position.from_dict(data["start"], "start"),
            goal=Position.from_dict(data["goal"], "goal"),
            missing=tuple(Position.from_dict(p, "missing") for p in _list_field(data, "missing")),
            blocked=tuple(Position.from_dict(p, "blocked") for p in _list_field(data, "blocked")),
            movement=movement,
            transitions=tuple(Transition.from_dict(t) for t in _list_field(data, "transitions")),
            reveal_on_enter_guaranteed_up=reveal if isinstance(reveal, bool) else True,
            objective=str(data.get("objective") or "Reach the goal hex."),
            description=str(data.get("description") or ""),
            notes=tuple(str(n) for n in _list_field(data, "notes")),
        )


def _list_field(data: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = data.get(key) or ()
    if not isinstance(value, (list, tuple)):
        raise ScenarioError(f"Scenario {key} must be a list, got {type(value).__name__}")
    return value


def _assert_in_bounds(position: Position, layers: int, label: str) -> None:
    if not in_bounds(position.layer, position.row, position.col, layers):
        raise ScenarioError(
            f"{label} out of bounds: L{position.layer} R{position.row} C{position.col}. "
            f"Valid rows: 0..{ROW_COUNT - 1}, layers: 1..{layers}."
        )


def validate_scenario(scenario: Scenario) -> None:
    """Raise :class:`ScenarioError` unless ``scenario`` is structurally sound."""

    if not scenario.id or not scenario.name:
        raise ScenarioError("Scenario needs id and name")
    if scenario.layers < 1:
        raise ScenarioError(f"Scenario needs at least one layer, got {scenario.layers}")

    layers = scenario.layers
    _assert_in_bounds(scenario.start, layers, "start")
    _assert_in_bounds(scenario.goal, layers, "goal")
    for position in scenario.missing:
        _assert_in_bounds(position, layers, "missing")
    for position in scenario.blocked:
        _assert_in_bounds(position, layers, "blocked")

    impassable = {pos_id(p) for p in scenario.missing} | {pos_id(p) for p in scenario.blocked}
    if pos_id(scenario.start) in impassable:
        raise ScenarioError("Start cannot be missing/blocked")
    if pos_id(scenario.goal) in impassable:
        raise ScenarioError("Goal cannot be missing/blocked")

    sources: Set[str] = set()
    up_layers: Set[int] = set()
    for transition in scenario.transitions:
        _assert_in_bounds(transition.source, layers, "Transition FROM")
        _assert_in_bounds(transition.dest, layers, "Transition TO")

        source_id = pos_id(transition.source)
        if source_id in sources:
            raise ScenarioError(f"Multiple transitions from same hex: {source_id}")
        sources.add(source_id)

        if source_id in impassable:
            raise ScenarioError(f"Transition FROM missing/blocked: {source_id}")
        dest_id = pos_id(transition.dest)
        if dest_id in impassable:
            raise ScenarioError(f"Transition TO missing/blocked: {dest_id}")

        if transition.type is TransitionType.UP:
            up_layers.add(transition.source.layer)

    for layer, _ in scenario.movement:
        if layer < 1 or layer > layers:
            raise ScenarioError(f"Invalid movement layer key: {layer}")

    if scenario.reveal_on_enter_guaranteed_up:
        for layer in range(1, layers + 1):
            if layer not in up_layers:
                raise ScenarioError(
                    f"revealOnEnterGuaranteedUp is true, but Layer {layer} has no usable UP transitions."
                )


def load_scenario(path: Union[str, Path], validate: bool = True) -> Scenario:
    scenario = Scenario.from_dict(read_file(path))
    if validate:
        validate_scenario(scenario)
    return scenario


def describe_scenario(scenario: Scenario) -> List[str]:
    """Summarize a scenario in a few human-readable notes."""

    notes: List[str] = []

    moving: List[str] = []
    static: List[str] = []
    for layer in range(1, scenario.layers + 1):
        bucket = static if scenario.pattern_for_layer(layer) is MovementPattern.NONE else moving
        bucket.append(str(layer))

    if moving:
        notes.append(f"Moving layers: {', '.join(moving)}.")
    if static:
        notes.append(f"Static layers: {', '.join(static)}.")

    if scenario.reveal_on_enter_guaranteed_up:
        notes.append("On first entry to a layer, at least one UP transition is revealed.")

    if scenario.missing:
        notes.append(f"Missing hexes: {len(scenario.missing)}.")
    if scenario.blocked:
        notes.append(f"Blocked hexes: {len(scenario.blocked)}.")

    ups = sum(1 for t in scenario.transitions if t.type is TransitionType.UP)
    downs = len(scenario.transitions) - ups
    if ups or downs:
        notes.append(f"Transitions: {ups} UP, {downs} DOWN.")

    return notes


def positions(items: Sequence[Tuple[int, int, int]]) -> Tuple[Position, ...]:
    """Build a tuple of positions from ``(layer, row, col)`` triples."""

    return tuple(Position(*item) for item in items)


__all__ = [
    "ScenarioError",
    "TransitionType",
    "MovementPattern",
    "Position",
    "Transition",
    "Scenario",
    "pos_id",
    "parse_hex_id",
    "validate_scenario",
    "load_scenario",
    "describe_scenario",
    "positions",
]
