"""Layered hex board with rotating rows, plus static and turn-aware reachability."""

from __future__ import annotations

from typing import Dict, Set

from .game.board import BoardState, HexId
from .game.rules import MoveResult, attempt_move, pass_turn
from .game.scenario import Scenario
from .reachability import ReachInfo, reachable_ids, static_reachability
from .search import TemporalResult, temporal_reachability


def new_game(scenario: Scenario) -> BoardState:
    return BoardState(scenario)


def get_reachability(state: BoardState) -> Dict[HexId, ReachInfo]:
    return static_reachability(state)


def get_reachable(state: BoardState) -> Set[HexId]:
    return reachable_ids(state)


def try_move(state: BoardState, target_id: HexId) -> MoveResult:
    return attempt_move(state, target_id)


def end_turn(state: BoardState) -> None:
    pass_turn(state)


__all__ = [
    "BoardState",
    "MoveResult",
    "ReachInfo",
    "Scenario",
    "TemporalResult",
    "new_game",
    "get_reachability",
    "get_reachable",
    "try_move",
    "end_turn",
    "temporal_reachability",
]
