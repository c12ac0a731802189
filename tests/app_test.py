import pygame
import pytest

from kidsdoku.app import KidSudokuApp
from kidsdoku.config import Settings
from kidsdoku.feedback import NullFeedback
from kidsdoku.models import Position
from kidsdoku.session import SessionState


@pytest.fixture
def app(tmp_path):
    settings = Settings(data_dir=tmp_path, sounds_dir=tmp_path, sound_enabled=False, seed=4)
    game = KidSudokuApp(settings, feedback=NullFeedback())
    yield game
    if game.session is not None:
        game.session.close()
    pygame.quit()


def _click_button(app, label_action):
    """Clicks the first drawn button whose action is `label_action`."""
    for rect, action in app.buttons:
        if action == label_action:
            app.handle_click(rect.center)
            return
    raise AssertionError("button not drawn")


def test_menu_draws_buttons(app):
    app.draw()
    assert app.screen_name == "menu"
    assert len(app.buttons) == 5


def test_selection_screen_starts_a_premade_game(app):
    app.show_selection()
    app.draw()
    puzzle_buttons = [rect for rect, _ in app.buttons if rect.width == 70]
    assert len(puzzle_buttons) == 43
    assert all(rect.bottom <= app.WINDOW_HEIGHT for rect in puzzle_buttons)

    app.handle_click(puzzle_buttons[0].center)
    assert app.screen_name == "game"
    assert app.session.state is SessionState.READY
    assert app.session.puzzle.puzzle_id == "storybook-4-easy-1"


def test_keyboard_play(app):
    app.start_premade_game(app.catalog.get("storybook-4-easy-1"))
    app.draw()

    cell = app.cell_size
    app.handle_click((app.GRID_X + cell // 2, app.GRID_Y + cell // 2))
    assert app.session.selected_position == Position(0, 0)

    app.handle_key(pygame.K_1)
    assert app.session.puzzle.cell(Position(0, 0)).symbol == 0

    app.handle_key(pygame.K_u)
    assert app.session.puzzle.cell(Position(0, 0)).is_empty

    app.handle_key(pygame.K_DOWN)
    assert app.session.selected_position == Position(1, 0)

    app.handle_key(pygame.K_h)
    assert app.session.hint_count == 1
    app.draw()


def test_random_game_draws_while_generating_and_after(app):
    app.start_random_game(6)
    app.draw()
    assert app.session.wait_until_ready(timeout=60)
    app.draw()
    assert app.session.puzzle.given_count >= 14


def test_victory_overlay_replaces_board_buttons(app):
    app.start_premade_game(app.catalog.get("storybook-4-easy-1"))
    while not app.session.is_solved:
        app.session.hint()
    app.draw()

    assert len(app.buttons) == 2
    assert app.progress.completions.is_completed("storybook-4-easy-1")
    _click_button(app, app.show_menu)
    assert app.screen_name == "menu"
    assert app.session is None
