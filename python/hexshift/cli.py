"""Command-line interface for playing and analysing a hexshift scenario."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config import ConfigError, SearchConfig
from .game.board import BoardState, HexId, HexKind
from .game.rules import GameSession, MoveFailure
from .game.scenario import ScenarioError, TransitionType, describe_scenario, load_scenario, parse_hex_id
from .geometry import LONG_ROW
from .protocol import ProtocolError
from .reachability import static_goal_distance, static_reachability
from .search import PASS, PlannedAction, temporal_reachability


LOG = logging.getLogger("hexshift.cli")

HELP = """Commands:
  move <row> <slot> | move <hex-id>   step to a neighboring hex
  pass                                 end the turn without moving
  reach                                static reachability from here
  plan                                 search for the fewest turns to the goal
  layer <n>                            show another layer
  notes                                scenario summary
  undo | reset | help | quit"""


def _hex_symbol(state: BoardState, hex_id: HexId) -> str:
    if hex_id == state.player_hex_id:
        return "@"
    hex_ = state.hexes[hex_id]
    if hex_.missing:
        return " "
    if hex_.blocked:
        return "#"
    if hex_.kind is HexKind.GOAL:
        return "G"
    transition = state.transition_from(hex_id)
    if transition is not None:
        return "^" if transition.type is TransitionType.UP else "v"
    return "."


def format_layer(state: BoardState, layer: int) -> List[str]:
    """Render one layer in current slot order, short rows indented."""

    lines = [f"Layer {layer} (turn {state.turn})"]
    for row_index, row_ids in enumerate(state.rows.get(layer, [])):
        indent = "" if len(row_ids) == LONG_ROW else " "
        cells = " ".join(_hex_symbol(state, hex_id) for hex_id in row_ids)
        lines.append(f"{row_index}: {indent}{cells}")
    return lines


def format_plan(plan: Sequence[PlannedAction]) -> str:
    if not plan:
        return "(none)"
    return ", ".join("pass" if step.kind == PASS else f"move {step.target}" for step in plan)


def _print_analysis(state: BoardState, config: SearchConfig) -> None:
    static = static_goal_distance(state, config.expansion_cap)
    temporal = temporal_reachability(state, config.turn_budget)

    print(f"Reachable (static): {'YES' if static.reachable else 'NO'}")
    distance = "-" if static.distance is None else static.distance
    print(f"Min distance: {distance} (ignores shifts)")
    print(f"Reachable (with shifts <= {config.turn_budget}): {'YES' if temporal.reachable else 'NO'}")
    min_turns = "-" if temporal.min_turns is None else temporal.min_turns
    print(f"Min turns: {min_turns}")
    print(f"Explored: {temporal.explored}  Frontier: {temporal.frontier}")
    if temporal.reachable:
        print(f"Plan: {format_plan(temporal.plan)}")


def _parse_target(state: BoardState, tokens: Sequence[str]) -> Optional[HexId]:
    if len(tokens) == 1:
        try:
            return parse_hex_id(tokens[0].upper()).hex_id
        except ScenarioError:
            return None
    if len(tokens) == 2:
        try:
            row, slot = int(tokens[0]), int(tokens[1])
        except ValueError:
            return None
        player = state.player_hex
        if player is None:
            return None
        return state.hex_at(player.position.layer, row, slot)
    return None


def _play(session: GameSession, config: SearchConfig) -> int:
    view_layer: Optional[int] = None

    print(f"{session.scenario.name}: {session.scenario.objective}")
    print("Type 'help' for commands.")

    while True:
        state = session.state
        player = state.player_hex
        layer = view_layer or (player.position.layer if player else 1)
        print()
        print("\n".join(format_layer(state, layer)))

        try:
            line = input("> ")
        except EOFError:
            return 0

        tokens = line.strip().split()
        if not tokens:
            continue
        command, args = tokens[0].lower(), tokens[1:]

        if command in {"q", "quit", "exit"}:
            return 0
        if command in {"h", "help", "?"}:
            print(HELP)
        elif command in {"m", "move"}:
            target = _parse_target(state, args)
            if target is None:
                print("Usage: move <row> <slot> or move <hex-id>.")
                continue
            result = session.move(target)
            view_layer = None
            if not result.ok:
                if result.reason is MoveFailure.BLOCKED:
                    print(f"{target} is blocked. The turn is lost.")
                else:
                    print(f"Cannot move to {target}.")
                continue
            if result.transition_triggered:
                print(f"Transition! Now on {session.state.player_hex_id}.")
            if result.won:
                print(f"Goal reached in {session.state.turn} turns.")
                return 0
        elif command in {"p", "pass"}:
            session.pass_turn()
            print("Turn ended.")
        elif command in {"r", "reach"}:
            report = static_reachability(state, config.expansion_cap)
            goal = report.get(state.goal_hex_id)
            print(f"{len(report)} hexes reachable without waiting.")
            print(f"Goal: {'distance ' + str(goal.distance) if goal else 'not reachable right now'}.")
        elif command in {"plan", "hint"}:
            _print_analysis(state, config)
        elif command in {"l", "layer"}:
            try:
                requested = int(args[0])
            except (IndexError, ValueError):
                print("Usage: layer <n>")
                continue
            if requested not in state.rows:
                print(f"No layer {requested}.")
                continue
            view_layer = requested
        elif command in {"n", "notes"}:
            for note in describe_scenario(session.scenario):
                print(f"- {note}")
        elif command in {"u", "undo"}:
            print("Undid last turn." if session.undo() else "Nothing to undo.")
        elif command == "reset":
            session.reset()
            view_layer = None
            print("Ready.")
        else:
            print(f"Unknown command {command!r}. Type 'help'.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Play or analyse a hexshift scenario")
    parser.add_argument("scenario", help="path to a scenario JSON file")
    parser.add_argument("--analyze", action="store_true", help="print reachability and exit")
    parser.add_argument("--turn-budget", type=int, default=None)
    parser.add_argument("--expansion-cap", type=int, default=None)
    parser.add_argument("--no-validate", action="store_true", help="skip scenario validation")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        config = SearchConfig.from_env().with_overrides(args.turn_budget, args.expansion_cap)
    except ConfigError as exc:
        LOG.error("Invalid search settings: %s", exc)
        return 2

    try:
        scenario = load_scenario(args.scenario, validate=not args.no_validate)
    except (ScenarioError, ProtocolError, OSError) as exc:
        LOG.error("Could not load %s: %s", args.scenario, exc)
        return 2

    if args.analyze:
        session = GameSession(scenario)
        print(f"{scenario.name} ({scenario.id})")
        for note in describe_scenario(scenario):
            print(f"- {note}")
        _print_analysis(session.state, config)
        return 0

    return _play(GameSession(scenario), config)


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    sys.exit(main())
