"""Pygame front-end for playing a hexshift scenario."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

try:
    import pygame
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit(
        "Pygame is required for the graphical client. Install it with 'pip install pygame'."
    ) from exc

from ..config import ConfigError, SearchConfig
from ..game.board import HexId, HexKind
from ..game.rules import GameSession, MoveFailure
from ..game.scenario import ScenarioError, TransitionType, load_scenario
from ..geometry import ROW_COUNT, SHORT_ROW, Slot, all_slots, row_length
from ..protocol import ProtocolError
from ..reachability import reachable_ids, static_goal_distance
from ..search import TemporalResult, temporal_reachability


LOG = logging.getLogger("hexshift.viewer")


# ---------------------------------------------------------------------------
# Board layout (pointy-top hexes, short rows indented by half a hex)
# ---------------------------------------------------------------------------

HEX_RADIUS = 34
HEX_WIDTH = math.sqrt(3) * HEX_RADIUS
ROW_SPACING = 1.5 * HEX_RADIUS
BOARD_ORIGIN = (330, 90)


def slot_center(row: int, slot: int) -> Tuple[float, float]:
    x = BOARD_ORIGIN[0] + slot * HEX_WIDTH
    if row_length(row) == SHORT_ROW:
        x += HEX_WIDTH / 2
    y = BOARD_ORIGIN[1] + row * ROW_SPACING
    return x, y


def slot_at(pos: Tuple[float, float]) -> Optional[Slot]:
    """Return the slot whose hex contains ``pos``, if any."""

    mx, my = pos
    best: Optional[Slot] = None
    best_dist = HEX_WIDTH / 2
    for slot in all_slots():
        x, y = slot_center(slot.row, slot.slot)
        dist = math.hypot(mx - x, my - y)
        if dist <= best_dist:
            best, best_dist = slot, dist
    return best


def hex_corners(center: Tuple[float, float], radius: float = HEX_RADIUS) -> List[Tuple[float, float]]:
    cx, cy = center
    return [
        (cx + radius * math.cos(math.radians(60 * i - 30)), cy + radius * math.sin(math.radians(60 * i - 30)))
        for i in range(6)
    ]


# ---------------------------------------------------------------------------
# Rendering configuration
# ---------------------------------------------------------------------------

WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 620
FPS = 30

BACKGROUND = (250, 250, 250)
HEX_FILL = (207, 216, 220)
HEX_HIDDEN = (144, 164, 174)
HEX_BLOCKED = (97, 97, 97)
HEX_GOAL = (255, 213, 79)
HEX_OUTLINE = (84, 110, 122)
REACHABLE_TINT = (129, 199, 132)
PLAYER_COLOR = (211, 47, 47)
TEXT_COLOR = (33, 33, 33)
MESSAGE_COLOR = (94, 53, 177)


@dataclass
class Button:
    label: str
    rect: pygame.Rect

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, hovered: bool) -> None:
        base_color = (33, 150, 243)
        color = tuple(min(c + 40, 255) for c in base_color) if hovered else base_color
        pygame.draw.rect(surface, color, self.rect, border_radius=6)
        pygame.draw.rect(surface, (13, 71, 161), self.rect, width=2, border_radius=6)
        text_surf = font.render(self.label, True, (255, 255, 255))
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def contains(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


class HexshiftPygameApp:
    def __init__(self, session: GameSession, config: SearchConfig) -> None:
        pygame.init()
        pygame.display.set_caption(f"hexshift - {session.scenario.name}")
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()

        self.font_small = pygame.font.Font(None, 24)
        self.font_medium = pygame.font.Font(None, 30)

        labels = ["Pass", "Undo", "Reset", "Layer -", "Layer +", "Hint"]
        self.buttons = [
            Button(label, pygame.Rect(40 + idx * 150, WINDOW_HEIGHT - 70, 130, 45))
            for idx, label in enumerate(labels)
        ]

        self.session = session
        self.config = config
        self.view_layer: Optional[int] = None
        self.message: Optional[str] = None
        self.hint: Optional[TemporalResult] = None
        self.reachable: Set[HexId] = set()
        self._refresh()

    # ------------------------------------------------------------------
    # Game flow helpers
    # ------------------------------------------------------------------
    @property
    def current_layer(self) -> int:
        if self.view_layer is not None:
            return self.view_layer
        player = self.session.state.player_hex
        return player.position.layer if player else 1

    def _refresh(self) -> None:
        self.reachable = reachable_ids(self.session.state, self.config.expansion_cap)
        self.hint = None

    def _shift_layer(self, delta: int) -> None:
        layers = self.session.scenario.layers
        self.view_layer = (self.current_layer - 1 + delta) % layers + 1

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------
    def handle_click(self, pos: Tuple[int, int]) -> None:
        for button in self.buttons:
            if button.contains(pos):
                self._handle_button(button)
                return

        if self.session.won:
            return

        slot = slot_at(pos)
        if slot is None:
            return
        target = self.session.state.hex_at(self.current_layer, slot.row, slot.slot)
        if target is None:
            return

        result = self.session.move(target)
        if not result.ok:
            if result.reason is MoveFailure.BLOCKED:
                self.message = "Blocked! The turn is lost."
            else:
                self.message = "Not a neighboring hex."
        elif result.won:
            self.message = f"Goal reached in {self.session.state.turn} turns!"
        elif result.transition_triggered:
            self.message = f"Transition to layer {self.session.state.player_hex.position.layer}"
        else:
            self.message = None

        self.view_layer = None
        self._refresh()

    def _handle_button(self, button: Button) -> None:
        if button.label == "Pass":
            self.session.pass_turn()
            self.message = "Turn ended."
        elif button.label == "Undo":
            self.message = "Undid last turn" if self.session.undo() else "Nothing to undo"
        elif button.label == "Reset":
            self.session.reset()
            self.view_layer = None
            self.message = "Ready."
        elif button.label == "Layer -":
            self._shift_layer(-1)
            return
        elif button.label == "Layer +":
            self._shift_layer(1)
            return
        elif button.label == "Hint":
            self.hint = temporal_reachability(self.session.state, self.config.turn_budget)
            return
        self._refresh()

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def draw(self) -> None:
        self.screen.fill(BACKGROUND)
        self._draw_board()
        self._draw_ui()

    def _draw_board(self) -> None:
        state = self.session.state
        layer = self.current_layer

        for row in range(ROW_COUNT):
            for slot_index in range(row_length(row)):
                hex_id = state.hex_at(layer, row, slot_index)
                if hex_id is None:
                    continue
                hex_ = state.hexes[hex_id]
                center = slot_center(row, slot_index)
                corners = hex_corners(center)

                if hex_.missing:
                    pygame.draw.polygon(self.screen, (230, 230, 230), corners, 1)
                    continue

                if hex_.blocked:
                    fill = HEX_BLOCKED
                elif hex_.kind is HexKind.GOAL:
                    fill = HEX_GOAL
                elif hex_id in self.reachable:
                    fill = REACHABLE_TINT
                elif state.is_revealed(hex_id):
                    fill = HEX_FILL
                else:
                    fill = HEX_HIDDEN

                pygame.draw.polygon(self.screen, fill, corners)
                pygame.draw.polygon(self.screen, HEX_OUTLINE, corners, 2)

                transition = state.transition_from(hex_id)
                if transition is not None:
                    mark = "UP" if transition.type is TransitionType.UP else "DN"
                    text = self.font_small.render(mark, True, TEXT_COLOR)
                    self.screen.blit(text, text.get_rect(center=center))

                if hex_id == state.player_hex_id:
                    x, y = center
                    pygame.draw.circle(self.screen, PLAYER_COLOR, (int(x), int(y)), HEX_RADIUS // 2)

    def _draw_ui(self) -> None:
        mouse_pos = pygame.mouse.get_pos()
        for button in self.buttons:
            button.draw(self.screen, self.font_small, button.contains(mouse_pos))

        state = self.session.state
        static = static_goal_distance(state, self.config.expansion_cap)
        status_lines = [
            f"Turn: {state.turn}",
            f"Viewing layer {self.current_layer} of {self.session.scenario.layers}",
            f"Visible: {', '.join(str(n) for n in sorted(state.visible_layers))}",
            f"Static goal distance: {static.distance if static.reachable else '-'}",
        ]
        if self.hint is not None:
            turns = self.hint.min_turns if self.hint.reachable else "-"
            status_lines.append(f"Min turns (<= {self.config.turn_budget}): {turns}")

        for idx, line in enumerate(status_lines):
            text = self.font_medium.render(line, True, TEXT_COLOR)
            self.screen.blit(text, (30, 40 + idx * 32))

        if self.message:
            msg = self.font_small.render(self.message, True, MESSAGE_COLOR)
            self.screen.blit(msg, (30, 40 + len(status_lines) * 32 + 12))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)

            self.draw()
            pygame.display.flip()
            self.clock.tick(FPS)

        pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="hexshift graphical client")
    parser.add_argument("scenario", help="path to a scenario JSON file")
    parser.add_argument("--turn-budget", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        config = SearchConfig.from_env().with_overrides(turn_budget=args.turn_budget)
    except ConfigError as exc:
        LOG.error("Invalid search settings: %s", exc)
        return 2

    try:
        scenario = load_scenario(args.scenario)
    except (ScenarioError, ProtocolError, OSError) as exc:
        LOG.error("Could not load %s: %s", args.scenario, exc)
        return 2

    app = HexshiftPygameApp(GameSession(scenario), config)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
