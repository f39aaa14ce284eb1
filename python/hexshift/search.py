from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional, Set, Tuple

from .config import DEFAULT_TURN_BUDGET
from .game.board import BoardState, HexId
from .game.rules import attempt_move, pass_turn
from .game.snapshot import LiteSnapshot, Signature, lite_snapshot, restore_lite


LOG = logging.getLogger("hexshift.search")

PASS = "pass"
MOVE = "move"


@dataclass(frozen=True)
class PlannedAction:
    kind: str
    target: Optional[HexId] = None


@dataclass(frozen=True)
class TemporalResult:
    reachable: bool
    min_turns: Optional[int]
    explored: int
    frontier: int
    plan: Tuple[PlannedAction, ...] = ()


@dataclass
class _SearchNode:
    snapshot: LiteSnapshot
    depth: int
    parent: Optional["_SearchNode"] = None
    action: Optional[PlannedAction] = None

    def plan(self) -> Tuple[PlannedAction, ...]:
        actions: List[PlannedAction] = []
        node: Optional[_SearchNode] = self
        while node is not None and node.action is not None:
            actions.append(node.action)
            node = node.parent
        actions.reverse()
        return tuple(actions)


def _successors(base: BoardState, snapshot: LiteSnapshot) -> Iterator[Tuple[PlannedAction, BoardState]]:
    # Each successor is generated on its own fork of ``snapshot``
    waiting = restore_lite(base, snapshot)
    neighbor_ids = waiting.passable_neighbor_ids(waiting.player_hex_id)
    pass_turn(waiting)
    yield PlannedAction(PASS), waiting

    for neighbor_id in neighbor_ids:
        fork = restore_lite(base, snapshot)
        result = attempt_move(fork, neighbor_id)
        if not result.ok:
            continue
        yield PlannedAction(MOVE, neighbor_id), fork


def temporal_reachability(state: BoardState, turn_budget: int = DEFAULT_TURN_BUDGET) -> TemporalResult:
    """Search every pass/move sequence of at most ``turn_budget`` turns for the goal.

    The search is breadth-first over elapsed turns, so the first goal found
    uses the fewest turns. Equivalent configurations (same turn, same player
    hex, same row layout on every layer) are expanded once. ``state`` itself
    is never modified; it only lends its read-only tables to the forks.
    """

    if state.player_on_goal():
        return TemporalResult(reachable=True, min_turns=0, explored=1, frontier=0)

    root = _SearchNode(snapshot=lite_snapshot(state), depth=0)
    queue: Deque[_SearchNode] = deque([root])
    seen: Set[Signature] = {root.snapshot.signature}
    explored = 0
    # Nodes left unexpanded because they sit on the turn horizon
    horizon = 0

    LOG.debug("Temporal search from %s with budget %d", state.player_hex_id, turn_budget)

    while queue:
        node = queue.popleft()
        explored += 1
        if node.depth >= turn_budget:
            horizon += 1
            continue

        for action, fork in _successors(state, node.snapshot):
            child = _SearchNode(
                snapshot=lite_snapshot(fork),
                depth=node.depth + 1,
                parent=node,
                action=action,
            )
            signature = child.snapshot.signature
            if signature in seen:
                continue
            seen.add(signature)

            if fork.player_on_goal():
                LOG.info(
                    "Goal reachable in %d turns (explored=%d, frontier=%d)",
                    child.depth,
                    explored,
                    len(queue),
                )
                return TemporalResult(
                    reachable=True,
                    min_turns=child.depth,
                    explored=explored,
                    frontier=len(queue),
                    plan=child.plan(),
                )
            queue.append(child)

    LOG.info("Goal not reachable within %d turns (explored=%d, horizon=%d)", turn_budget, explored, horizon)
    return TemporalResult(reachable=False, min_turns=None, explored=explored, frontier=horizon)


__all__ = ["PASS", "MOVE", "PlannedAction", "TemporalResult", "temporal_reachability"]
