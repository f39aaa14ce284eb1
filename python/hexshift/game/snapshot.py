"""Snapshot and restore for :class:`~hexshift.game.board.BoardState`.

Two flavours exist. :func:`snapshot_state` captures everything and
:func:`restore_state` rebuilds a fully independent board. The lite pair
(:func:`lite_snapshot` / :func:`restore_lite`) only captures what a turn can
change and borrows the scenario, hex table and transition index from a base
board, which is how the turn-aware search keeps its forks cheap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ..protocol import ProtocolError
from .board import BoardState, Hex, HexId, HexKind
from .scenario import Position, Scenario, ScenarioError, Transition


RowsValue = Tuple[Tuple[int, Tuple[Tuple[HexId, ...], ...]], ...]
Signature = Tuple[int, HexId, RowsValue]


def freeze_rows(state: BoardState) -> RowsValue:
    """Every layer's row-slot sequences as nested tuples, ordered by layer."""

    return tuple(
        (layer, tuple(tuple(row_ids) for row_ids in state.rows[layer]))
        for layer in sorted(state.rows)
    )


def _thaw_rows(rows: RowsValue) -> Dict[int, list]:
    return {layer: [list(row_ids) for row_ids in layer_rows] for layer, layer_rows in rows}


@dataclass(frozen=True)
class BoardSnapshot:
    scenario: Scenario
    turn: int
    visible_layers: Tuple[int, ...]
    player_hex_id: HexId
    hexes: Tuple[Hex, ...]
    rows: RowsValue
    transitions: Tuple[Tuple[HexId, Transition], ...]
    revealed: Tuple[HexId, ...]
    last_guaranteed_up_id: Optional[HexId] = None
    last_guaranteed_up_turn: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario.to_dict(),
            "turn": self.turn,
            "visibleLayers": list(self.visible_layers),
            "playerHexId": self.player_hex_id,
            "hexes": [
                {
                    "id": h.id,
                    "pos": h.position.to_dict(),
                    "kind": h.kind.value,
                    "missing": h.missing,
                    "blocked": h.blocked,
                }
                for h in self.hexes
            ],
            "rows": [
                {"layer": layer, "rows": [list(row_ids) for row_ids in layer_rows]}
                for layer, layer_rows in self.rows
            ],
            "transitionsByFromId": [
                {"fromId": from_id, "t": transition.to_dict()}
                for from_id, transition in self.transitions
            ],
            "revealed": list(self.revealed),
            "lastGuaranteedUpId": self.last_guaranteed_up_id,
            "lastGuaranteedUpTurn": self.last_guaranteed_up_turn,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardSnapshot":
        try:
            return cls(
                scenario=Scenario.from_dict(data["scenario"]),
                turn=int(data["turn"]),
                visible_layers=tuple(int(layer) for layer in data["visibleLayers"]),
                player_hex_id=str(data["playerHexId"]),
                hexes=tuple(
                    Hex(
                        id=str(h["id"]),
                        position=Position.from_dict(h["pos"]),
                        kind=HexKind(h["kind"]),
                        missing=bool(h["missing"]),
                        blocked=bool(h["blocked"]),
                    )
                    for h in data["hexes"]
                ),
                rows=tuple(
                    (int(entry["layer"]), tuple(tuple(row_ids) for row_ids in entry["rows"]))
                    for entry in data["rows"]
                ),
                transitions=tuple(
                    (str(entry["fromId"]), Transition.from_dict(entry["t"]))
                    for entry in data["transitionsByFromId"]
                ),
                revealed=tuple(data.get("revealed") or ()),
                last_guaranteed_up_id=data.get("lastGuaranteedUpId"),
                last_guaranteed_up_turn=data.get("lastGuaranteedUpTurn"),
            )
        except (KeyError, TypeError, ValueError, ScenarioError) as exc:
            raise ProtocolError(f"Malformed snapshot: {exc}") from exc


def snapshot_state(state: BoardState) -> BoardSnapshot:
    return BoardSnapshot(
        scenario=state.scenario,
        turn=state.turn,
        visible_layers=tuple(sorted(state.visible_layers)),
        player_hex_id=state.player_hex_id,
        hexes=tuple(state.hexes.values()),
        rows=freeze_rows(state),
        transitions=tuple(state.transitions.items()),
        revealed=tuple(sorted(state.revealed)),
        last_guaranteed_up_id=state.last_guaranteed_up_id,
        last_guaranteed_up_turn=state.last_guaranteed_up_turn,
    )


def restore_state(snapshot: BoardSnapshot) -> BoardState:
    return BoardState.assemble(
        scenario=snapshot.scenario,
        hexes={h.id: h for h in snapshot.hexes},
        rows=_thaw_rows(snapshot.rows),
        transitions=dict(snapshot.transitions),
        turn=snapshot.turn,
        player_hex_id=snapshot.player_hex_id,
        visible_layers=snapshot.visible_layers,
        revealed=snapshot.revealed,
        last_guaranteed_up_id=snapshot.last_guaranteed_up_id,
        last_guaranteed_up_turn=snapshot.last_guaranteed_up_turn,
    )


@dataclass(frozen=True)
class LiteSnapshot:
    turn: int
    player_hex_id: HexId
    visible_layers: FrozenSet[int]
    rows: RowsValue
    revealed: FrozenSet[HexId]
    last_guaranteed_up_id: Optional[HexId] = None
    last_guaranteed_up_turn: Optional[int] = None

    @property
    def signature(self) -> Signature:
        return (self.turn, self.player_hex_id, self.rows)


def lite_snapshot(state: BoardState) -> LiteSnapshot:
    return LiteSnapshot(
        turn=state.turn,
        player_hex_id=state.player_hex_id,
        visible_layers=frozenset(state.visible_layers),
        rows=freeze_rows(state),
        revealed=frozenset(state.revealed),
        last_guaranteed_up_id=state.last_guaranteed_up_id,
        last_guaranteed_up_turn=state.last_guaranteed_up_turn,
    )


def restore_lite(base: BoardState, snapshot: LiteSnapshot) -> BoardState:
    # Scenario, hex table and transition index are shared with ``base``
    return BoardState.assemble(
        scenario=base.scenario,
        hexes=base.hexes,
        rows=_thaw_rows(snapshot.rows),
        transitions=base.transitions,
        turn=snapshot.turn,
        player_hex_id=snapshot.player_hex_id,
        visible_layers=snapshot.visible_layers,
        revealed=snapshot.revealed,
        last_guaranteed_up_id=snapshot.last_guaranteed_up_id,
        last_guaranteed_up_turn=snapshot.last_guaranteed_up_turn,
    )


__all__ = [
    "RowsValue",
    "Signature",
    "freeze_rows",
    "BoardSnapshot",
    "snapshot_state",
    "restore_state",
    "LiteSnapshot",
    "lite_snapshot",
    "restore_lite",
]
