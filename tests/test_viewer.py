import pytest

pygame = pytest.importorskip("pygame")

from hexshift.client.pygame_app import (  # noqa: E402
    BOARD_ORIGIN,
    HEX_WIDTH,
    HexshiftPygameApp,
    hex_corners,
    slot_at,
    slot_center,
)
from hexshift.config import SearchConfig  # noqa: E402
from hexshift.game.rules import GameSession  # noqa: E402
from hexshift.geometry import all_slots  # noqa: E402


def test_every_slot_center_maps_back_to_its_slot():
    for slot in all_slots():
        assert slot_at(slot_center(slot.row, slot.slot)) == slot


def test_short_rows_are_offset_by_half_a_hex():
    long_x, _ = slot_center(0, 0)
    short_x, _ = slot_center(1, 0)
    assert short_x - long_x == pytest.approx(HEX_WIDTH / 2)


def test_points_off_the_board_hit_nothing():
    assert slot_at((0, 0)) is None
    assert slot_at((BOARD_ORIGIN[0] + 20 * HEX_WIDTH, BOARD_ORIGIN[1])) is None


def test_hex_corners():
    corners = hex_corners((100.0, 100.0), radius=10)
    assert len(corners) == 6
    for x, y in corners:
        assert ((x - 100) ** 2 + (y - 100) ** 2) ** 0.5 == pytest.approx(10)


@pytest.fixture
def app(monkeypatch, open_scenario):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    viewer = HexshiftPygameApp(GameSession(open_scenario), SearchConfig())
    yield viewer
    pygame.quit()


def test_clicking_a_neighbor_moves_the_player(app):
    assert "L1-R0-C1" in app.reachable

    app.handle_click(tuple(int(v) for v in slot_center(0, 1)))
    assert app.session.state.player_hex_id == "L1-R0-C1"
    assert app.session.state.turn == 1

    app.handle_click(tuple(int(v) for v in slot_center(4, 4)))
    assert app.message == "Not a neighboring hex."
    assert app.session.state.turn == 1


def test_buttons_and_rendering(app):
    by_label = {button.label: button for button in app.buttons}

    app.handle_click(by_label["Pass"].rect.center)
    assert app.session.state.turn == 1

    app.handle_click(by_label["Hint"].rect.center)
    assert app.hint is not None and app.hint.min_turns == 9

    app.handle_click(by_label["Undo"].rect.center)
    assert app.session.state.turn == 0

    app.handle_click(by_label["Layer +"].rect.center)
    assert app.current_layer == 1
    assert app.session.state.visible_layers == {1}

    app.draw()
    assert app.session.state.player_hex_id == "L1-R0-C0"
