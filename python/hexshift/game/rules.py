"""Movement and turn rules built on top of :mod:`hexshift.game.board`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..geometry import LONG_ROW
from .board import BoardState, HexId
from .scenario import MovementPattern, Scenario, pos_id
from .snapshot import BoardSnapshot, restore_state, snapshot_state


LOG = logging.getLogger("hexshift.rules")

HISTORY_LIMIT = 40
LOG_LIMIT = 200


class MoveFailure(str, Enum):
    INVALID = "INVALID"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class MoveResult:
    ok: bool
    reason: Optional[MoveFailure] = None
    transition_triggered: bool = False
    won: bool = False


def attempt_move(state: BoardState, target_id: HexId) -> MoveResult:
    """Try to step the player onto ``target_id``.

    INVALID leaves the state untouched. BLOCKED and every successful move
    consume exactly one turn.
    """

    player = state.player_hex
    target = state.get_hex(target_id)
    if player is None or target is None:
        return MoveResult(ok=False, reason=MoveFailure.INVALID)

    if player.position.layer != target.position.layer:
        return MoveResult(ok=False, reason=MoveFailure.INVALID)

    if target_id not in state.neighbor_ids(state.player_hex_id):
        return MoveResult(ok=False, reason=MoveFailure.INVALID)

    if not target.passable:
        end_turn(state)
        return MoveResult(ok=False, reason=MoveFailure.BLOCKED)

    state.player_hex_id = target_id
    state.reveal_hex(target_id)

    # Transitions fire on arrival, attached to hex identity
    triggered = False
    dest_id = state.passable_transition_dest(target_id)
    if dest_id is not None:
        triggered = True
        state.player_hex_id = dest_id
        state.enter_layer(state.hexes[dest_id].position.layer)
        state.reveal_hex(dest_id)

    won = state.player_on_goal()
    LOG.debug(
        "Turn %d: moved to %s (transition=%s, won=%s)",
        state.turn,
        state.player_hex_id,
        triggered,
        won,
    )

    end_turn(state)
    return MoveResult(ok=True, transition_triggered=triggered, won=won)


def pass_turn(state: BoardState) -> None:
    end_turn(state)


def end_turn(state: BoardState) -> None:
    state.turn += 1
    for layer in range(1, state.scenario.layers + 1):
        apply_rotation(state, layer, state.scenario.pattern_for_layer(layer))


def rotation_direction(pattern: MovementPattern, row_index: int, row_len: int) -> Optional[str]:
    """Return ``"L"``, ``"R"`` or ``None`` for how a row moves under ``pattern``."""

    if pattern is MovementPattern.NONE or row_len <= 1:
        return None
    if pattern is MovementPattern.LONG_LEFT_SHORT_RIGHT:
        return "L" if row_len == LONG_ROW else "R"
    if pattern is MovementPattern.TOP_RIGHT_BOTTOM_LEFT:
        return "R" if row_index <= 2 else "L"
    raise ValueError(f"Unknown movement pattern: {pattern!r}")


def rotate_row(row_ids: List[HexId], direction: Optional[str]) -> None:
    if direction == "L":
        row_ids.append(row_ids.pop(0))
    elif direction == "R":
        row_ids.insert(0, row_ids.pop())


def apply_rotation(state: BoardState, layer: int, pattern: MovementPattern) -> None:
    if pattern is MovementPattern.NONE:
        return
    layer_rows = state.rows.get(layer)
    if layer_rows is None:
        return
    for row_index, row_ids in enumerate(layer_rows):
        rotate_row(row_ids, rotation_direction(pattern, row_index, len(row_ids)))


@dataclass(frozen=True)
class MoveLogEntry:
    number: int
    target: Optional[HexId]
    ok: bool
    reason: Optional[MoveFailure] = None


@dataclass
class GameSession:
    """A live game: the board plus run log and undo history."""

    scenario: Scenario
    state: BoardState = field(init=False)
    move_count: int = field(init=False, default=0)
    log: List[MoveLogEntry] = field(init=False, default_factory=list)
    history: List[BoardSnapshot] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.state = BoardState(self.scenario)
        self.move_count = 0
        self.log = []
        self.history = []

    @property
    def won(self) -> bool:
        return self.state.player_on_goal()

    def move(self, target_id: HexId) -> MoveResult:
        before = snapshot_state(self.state)
        result = attempt_move(self.state, target_id)
        if result.reason is not MoveFailure.INVALID:
            self._push_history(before)
        self._record(target_id, result.ok, result.reason)
        return result

    def pass_turn(self) -> None:
        self._push_history(snapshot_state(self.state))
        pass_turn(self.state)
        self._record(None, True, None)

    def undo(self) -> bool:
        if not self.history:
            return False
        self.state = restore_state(self.history.pop())
        return True

    def start_hex_id(self) -> HexId:
        return pos_id(self.scenario.start)

    def _push_history(self, snapshot: BoardSnapshot) -> None:
        self.history.append(snapshot)
        if len(self.history) > HISTORY_LIMIT:
            self.history = self.history[-HISTORY_LIMIT:]

    def _record(self, target_id: Optional[HexId], ok: bool, reason: Optional[MoveFailure]) -> None:
        self.move_count += 1
        self.log.insert(0, MoveLogEntry(self.move_count, target_id, ok, reason))
        del self.log[LOG_LIMIT:]


__all__ = [
    "MoveFailure",
    "MoveResult",
    "attempt_move",
    "pass_turn",
    "end_turn",
    "rotation_direction",
    "rotate_row",
    "apply_rotation",
    "MoveLogEntry",
    "GameSession",
]
