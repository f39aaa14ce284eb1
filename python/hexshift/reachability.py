"""Single-turn reachability over the current board layout.

Ordinary steps between same-layer neighbors cost one; riding a transition
costs nothing. The search is a 0-1 BFS: zero-cost hops go to the front of the
deque, unit steps to the back, so every hex is settled at its minimal
distance the first time it is popped.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional, Set, Tuple

from .config import DEFAULT_EXPANSION_CAP, MIN_EXPANSION_CAP
from .game.board import BoardState, HexId


LOG = logging.getLogger("hexshift.reachability")


@dataclass(frozen=True)
class ReachInfo:
    reachable: bool
    distance: Optional[int]
    explored_order: int


@dataclass(frozen=True)
class GoalDistance:
    reachable: bool
    distance: Optional[int]
    explored: int


def static_reachability(
    state: BoardState,
    expansion_cap: int = DEFAULT_EXPANSION_CAP,
) -> Dict[HexId, ReachInfo]:
    """Report every hex reachable from the player's hex with its distance.

    Hexes missing from the result were not shown reachable. When
    ``expansion_cap`` settles before the queue drains the partial result is
    returned.
    """

    start_id = state.player_hex_id
    if not state.is_passable(start_id):
        return {}

    dist: Dict[HexId, int] = {start_id: 0}
    queue: Deque[Tuple[HexId, int]] = deque([(start_id, 0)])
    report: Dict[HexId, ReachInfo] = {}
    cap = max(expansion_cap, MIN_EXPANSION_CAP)

    while queue:
        if len(report) >= cap:
            LOG.warning(
                "Static reachability stopped after %d expansions with %d queued",
                len(report),
                len(queue),
            )
            break

        current, d = queue.popleft()
        if current in report or d > dist[current]:
            continue
        report[current] = ReachInfo(reachable=True, distance=d, explored_order=len(report))

        dest_id = state.passable_transition_dest(current)
        if dest_id is not None and d < dist.get(dest_id, d + 1):
            dist[dest_id] = d
            queue.appendleft((dest_id, d))

        for neighbor_id in state.passable_neighbor_ids(current):
            if d + 1 < dist.get(neighbor_id, d + 2):
                dist[neighbor_id] = d + 1
                queue.append((neighbor_id, d + 1))

    return report


def reachable_ids(state: BoardState, expansion_cap: int = DEFAULT_EXPANSION_CAP) -> Set[HexId]:
    return {hex_id for hex_id, info in static_reachability(state, expansion_cap).items() if info.reachable}


def static_goal_distance(
    state: BoardState,
    expansion_cap: int = DEFAULT_EXPANSION_CAP,
) -> GoalDistance:
    """Goal-focused summary: is the goal reachable right now, and how far."""

    goal_id = state.goal_hex_id
    if not state.is_passable(goal_id):
        return GoalDistance(reachable=False, distance=None, explored=0)

    report = static_reachability(state, expansion_cap)
    info = report.get(goal_id)
    if info is None:
        return GoalDistance(reachable=False, distance=None, explored=len(report))
    return GoalDistance(reachable=True, distance=info.distance, explored=info.explored_order + 1)


__all__ = [
    "ReachInfo",
    "GoalDistance",
    "static_reachability",
    "reachable_ids",
    "static_goal_distance",
]
