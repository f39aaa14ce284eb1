from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from ..geometry import ROW_LENS, Slot, slot_neighbors
from .scenario import Position, Scenario, ScenarioError, Transition, TransitionType, pos_id


LOG = logging.getLogger("hexshift.board")

HexId = str
LayerRows = List[List[HexId]]


class HexKind(str, Enum):
    NORMAL = "NORMAL"
    GOAL = "GOAL"


@dataclass(frozen=True)
class Hex:
    id: HexId
    position: Position
    kind: HexKind = HexKind.NORMAL
    missing: bool = False
    blocked: bool = False

    @property
    def passable(self) -> bool:
        return not (self.missing or self.blocked)


class BoardState:
    """One playable board: hex table, row-slot sequences and player bookkeeping.

    Hex identity never changes; which slot a hex currently occupies is only
    recorded in :attr:`rows`. The hex table and the transition index are not
    touched after construction, which lets forks share them.
    """

    def __init__(self, scenario: Scenario) -> None:
        missing = {pos_id(p) for p in scenario.missing}
        blocked = {pos_id(p) for p in scenario.blocked}
        goal_id = pos_id(scenario.goal)

        hexes: Dict[HexId, Hex] = {}
        rows: Dict[int, LayerRows] = {}

        # Build grid in origin order
        for layer in range(1, scenario.layers + 1):
            layer_rows: LayerRows = []
            for row, length in enumerate(ROW_LENS):
                row_ids: List[HexId] = []
                for col in range(length):
                    position = Position(layer, row, col)
                    hex_id = pos_id(position)
                    hexes[hex_id] = Hex(
                        id=hex_id,
                        position=position,
                        kind=HexKind.GOAL if hex_id == goal_id else HexKind.NORMAL,
                        missing=hex_id in missing,
                        blocked=hex_id in blocked,
                    )
                    row_ids.append(hex_id)
                layer_rows.append(row_ids)
            rows[layer] = layer_rows

        transitions: Dict[HexId, Transition] = {}
        for transition in scenario.transitions:
            transitions[pos_id(transition.source)] = transition

        start_id = pos_id(scenario.start)
        if start_id not in hexes:
            raise ScenarioError(f"Unknown starting hex: {start_id}")

        self.scenario = scenario
        self.turn = 0
        self.visible_layers: Set[int] = set()
        self.player_hex_id: HexId = start_id
        self.hexes = hexes
        self.rows = rows
        self.transitions = transitions
        self.revealed: Set[HexId] = set()
        self.last_guaranteed_up_id: Optional[HexId] = None
        self.last_guaranteed_up_turn: Optional[int] = None

        self.enter_layer(scenario.start.layer)
        self.reveal_hex(start_id)

    @classmethod
    def assemble(
        cls,
        scenario: Scenario,
        hexes: Dict[HexId, Hex],
        rows: Dict[int, LayerRows],
        transitions: Dict[HexId, Transition],
        turn: int,
        player_hex_id: HexId,
        visible_layers: Iterable[int],
        revealed: Iterable[HexId],
        last_guaranteed_up_id: Optional[HexId] = None,
        last_guaranteed_up_turn: Optional[int] = None,
    ) -> "BoardState":
        """Create a state from already-built parts without re-running setup."""

        state = cls.__new__(cls)
        state.scenario = scenario
        state.turn = turn
        state.visible_layers = set(visible_layers)
        state.player_hex_id = player_hex_id
        state.hexes = hexes
        state.rows = rows
        state.transitions = transitions
        state.revealed = set(revealed)
        state.last_guaranteed_up_id = last_guaranteed_up_id
        state.last_guaranteed_up_turn = last_guaranteed_up_turn
        return state

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_hex(self, hex_id: HexId) -> Optional[Hex]:
        return self.hexes.get(hex_id)

    @property
    def player_hex(self) -> Optional[Hex]:
        return self.hexes.get(self.player_hex_id)

    @property
    def goal_hex_id(self) -> HexId:
        return pos_id(self.scenario.goal)

    def is_passable(self, hex_id: HexId) -> bool:
        hex_ = self.hexes.get(hex_id)
        return hex_ is not None and hex_.passable

    def player_on_goal(self) -> bool:
        hex_ = self.player_hex
        return hex_ is not None and hex_.kind is HexKind.GOAL

    def transition_from(self, hex_id: HexId) -> Optional[Transition]:
        return self.transitions.get(hex_id)

    def current_slot(self, hex_id: HexId) -> Optional[Slot]:
        """Where ``hex_id`` sits right now; rotation never moves a hex between rows."""

        hex_ = self.hexes.get(hex_id)
        if hex_ is None:
            return None
        row_ids = self.rows[hex_.position.layer][hex_.position.row]
        return Slot(hex_.position.row, row_ids.index(hex_id))

    def hex_at(self, layer: int, row: int, slot: int) -> Optional[HexId]:
        layer_rows = self.rows.get(layer)
        if layer_rows is None or not 0 <= row < len(layer_rows):
            return None
        row_ids = layer_rows[row]
        if not 0 <= slot < len(row_ids):
            return None
        return row_ids[slot]

    def neighbor_ids(self, hex_id: HexId) -> List[HexId]:
        """Same-layer neighbors under the current layout, impassable ones included."""

        hex_ = self.hexes.get(hex_id)
        slot = self.current_slot(hex_id)
        if hex_ is None or slot is None:
            return []

        out: List[HexId] = []
        for neighbor in slot_neighbors(slot.row, slot.slot):
            neighbor_id = self.hex_at(hex_.position.layer, neighbor.row, neighbor.slot)
            if neighbor_id is not None:
                out.append(neighbor_id)
        return out

    def passable_neighbor_ids(self, hex_id: HexId) -> List[HexId]:
        return [n for n in self.neighbor_ids(hex_id) if self.is_passable(n)]

    def passable_transition_dest(self, hex_id: HexId) -> Optional[HexId]:
        transition = self.transitions.get(hex_id)
        if transition is None:
            return None
        dest_id = pos_id(transition.dest)
        return dest_id if self.is_passable(dest_id) else None

    def hex_flags(self, hex_id: HexId) -> Dict[str, object]:
        hex_ = self.hexes.get(hex_id)
        if hex_ is None:
            raise KeyError(hex_id)
        return {
            "kind": hex_.kind.value,
            "missing": hex_.missing,
            "blocked": hex_.blocked,
            "revealed": hex_id in self.revealed,
        }

    # ------------------------------------------------------------------
    # Reveal / layer entry
    # ------------------------------------------------------------------
    def is_revealed(self, hex_id: HexId) -> bool:
        return hex_id in self.revealed

    def reveal_hex(self, hex_id: HexId) -> None:
        if hex_id in self.hexes:
            self.revealed.add(hex_id)

    def reveal_layer(self, layer: int) -> None:
        for row_ids in self.rows.get(layer, []):
            self.revealed.update(row_ids)

    def enter_layer(self, layer: int) -> Optional[HexId]:
        """Mark ``layer`` visible; on first entry reveal one way up if required."""

        if layer in self.visible_layers:
            return None
        self.visible_layers.add(layer)

        if not self.scenario.reveal_on_enter_guaranteed_up:
            return None

        for row_ids in self.rows.get(layer, []):
            for hex_id in row_ids:
                hex_ = self.hexes[hex_id]
                if not hex_.passable:
                    continue
                transition = self.transitions.get(hex_id)
                if transition is not None and transition.type is TransitionType.UP:
                    self.reveal_hex(hex_id)
                    self.last_guaranteed_up_id = hex_id
                    self.last_guaranteed_up_turn = self.turn
                    LOG.debug("Layer %d entered; revealed guaranteed UP at %s", layer, hex_id)
                    return hex_id

        LOG.debug("Layer %d entered without a usable UP transition", layer)
        return None


__all__ = ["HexId", "HexKind", "Hex", "BoardState"]
