import argparse
import random
from dataclasses import replace

import pygame

from kidsdoku.catalog import PremadePuzzleCatalog, PuzzleDifficulty
from kidsdoku.config import load_settings
from kidsdoku.feedback import SoundFeedback
from kidsdoku.log import get_logger
from kidsdoku.models import Config, MessageKind, Position
from kidsdoku.progress import ProgressTracker
from kidsdoku.session import GameSession

logger = get_logger(__name__)


# =========================================================================
# PYGAME FRONT END
# Menu, puzzle selection and the game screen around one GameSession.
# =========================================================================
class KidSudokuApp:
    def __init__(self, settings=None, catalog=None, progress=None, feedback=None):
        pygame.init()
        self.settings = settings or load_settings()
        self.catalog = catalog or PremadePuzzleCatalog.default()
        self.progress = progress or ProgressTracker.from_settings(self.settings, self.catalog)
        self.feedback = feedback or SoundFeedback(self.settings.sounds_dir, self.settings.sound_enabled)
        self.rng = random.Random(self.settings.seed)

        self.WINDOW_WIDTH = 820
        self.WINDOW_HEIGHT = 660
        self.screen = pygame.display.set_mode((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        pygame.display.set_caption("KidSudoku")

        # Color Palette
        self.BG_COLOR = (250, 245, 235)
        self.GRID_BG = (255, 255, 255)
        self.BLACK = (40, 40, 40)
        self.SUBGRID_LINE = (210, 200, 185)
        self.PRIMARY = (90, 120, 90)
        self.PRIMARY_LIGHT = (160, 200, 160)
        self.ACCENT = (230, 150, 60)
        self.SUCCESS = (70, 170, 90)
        self.WARNING = (220, 90, 70)
        self.TEXT_GRAY = (110, 110, 120)
        self.SELECTION = (225, 240, 225)
        self.HIGHLIGHT = (255, 235, 180)

        # Grid positioning (432 divides evenly by 3, 4 and 6)
        self.GRID_SIZE = 432
        self.GRID_X = 30
        self.GRID_Y = 90
        self.PALETTE_Y = self.GRID_Y + self.GRID_SIZE + 20
        self.PANEL_X = self.GRID_X + self.GRID_SIZE + 30
        self.PANEL_WIDTH = 300

        # Fonts
        self.font_title = pygame.font.Font(None, 52)
        self.font_large = pygame.font.Font(None, 48)
        self.font_medium = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 24)

        self.key_mapping = {}
        for value in range(1, 10):
            self.key_mapping[getattr(pygame, f"K_{value}")] = value - 1
            self.key_mapping[getattr(pygame, f"K_KP{value}")] = value - 1

        self.session = None
        self.screen_name = "menu"
        self.selection_size = self.settings.board_size if self.settings.board_size in (4, 6) else 4
        self.buttons = []
        self.running = False

    # ------------------------------------------------------------------
    # Game setup
    # ------------------------------------------------------------------
    def _config_for(self, size):
        config = Config.for_size(size)
        if config is None:
            raise ValueError(f"No board layout for size {size}")
        return config

    def start_random_game(self, size):
        self._replace_session(GameSession(
            self._config_for(size),
            feedback=self.feedback,
            progress=self.progress,
            rng=random.Random(self.rng.getrandbits(64)),
        ))

    def start_premade_game(self, premade):
        self._replace_session(GameSession(
            premade.config,
            premade=premade,
            feedback=self.feedback,
            progress=self.progress,
            rng=random.Random(self.rng.getrandbits(64)),
        ))

    def _replace_session(self, session):
        if self.session is not None:
            self.session.close()
        self.session = session
        self.screen_name = "game"

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def draw_rounded_rect(self, surface, color, rect, radius=10):
        pygame.draw.rect(surface, color, pygame.Rect(rect), border_radius=radius)

    def draw_button(self, text, rect, color, action, text_color=(255, 255, 255)):
        """Draws a clickable button and registers its action for this frame."""
        rect = pygame.Rect(rect)
        shadow = rect.move(2, 2)
        self.draw_rounded_rect(self.screen, (0, 0, 0), shadow, 8)
        self.draw_rounded_rect(self.screen, color, rect, 8)
        label = self.font_small.render(text, True, text_color)
        self.screen.blit(label, label.get_rect(center=rect.center))
        self.buttons.append((rect, action))
        return rect

    def draw_stat_card(self, label, value, x, y, width):
        """Draws a statistic display card (Time, Mistakes, Hints, Stars)."""
        self.draw_rounded_rect(self.screen, self.GRID_BG, (x, y, width, 55), 8)
        self.screen.blit(self.font_small.render(label, True, self.TEXT_GRAY), (x + 10, y + 6))
        self.screen.blit(self.font_medium.render(str(value), True, self.BLACK), (x + 10, y + 26))

    def draw_text(self, text, font, color, center):
        surface = font.render(text, True, color)
        self.screen.blit(surface, surface.get_rect(center=center))

    @property
    def cell_size(self):
        return self.GRID_SIZE // self.session.config.size

    def symbol_text(self, index):
        if index is None:
            return ""
        if self.settings.show_numbers:
            return str(index + 1)
        symbol = self.session.config.symbol(index)
        return "?" if symbol is None else symbol

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------
    def draw_menu(self):
        """Draws the main menu screen."""
        self.screen.fill(self.BG_COLOR)
        self.draw_text("KidSudoku", self.font_title, self.PRIMARY, (self.WINDOW_WIDTH // 2, 110))
        self.draw_text("Fill every row, column and box with one of each!",
                       self.font_small, self.TEXT_GRAY, (self.WINDOW_WIDTH // 2, 160))

        menu_x = (self.WINDOW_WIDTH - 360) // 2
        entries = [
            ("Random 3 x 3", self.PRIMARY, lambda: self.start_random_game(3)),
            ("Random 4 x 4", self.PRIMARY, lambda: self.start_random_game(4)),
            ("Random 6 x 6", self.PRIMARY, lambda: self.start_random_game(6)),
            ("Storybook Puzzles", self.ACCENT, self.show_selection),
            ("Exit", self.WARNING, self.request_quit),
        ]
        for i, (text, color, action) in enumerate(entries):
            self.draw_button(text, (menu_x, 220 + i * 75, 360, 58), color, action)

        earned = len(self.progress.badges.earned)
        self.draw_text(f"Badges: {earned} / {len(self.progress.badges.badges())}",
                       self.font_small, self.TEXT_GRAY, (self.WINDOW_WIDTH // 2, self.WINDOW_HEIGHT - 30))

    def show_selection(self):
        self.screen_name = "selection"

    def draw_selection(self):
        """Lists the premade puzzles for one board size, grouped by difficulty."""
        self.screen.fill(self.BG_COLOR)
        self.draw_button("< Menu", (20, 20, 100, 35), self.TEXT_GRAY, self.show_menu)
        self.draw_text("Storybook Puzzles", self.font_title, self.PRIMARY, (self.WINDOW_WIDTH // 2, 45))

        for i, size in enumerate(self.catalog.sizes()):
            color = self.ACCENT if size == self.selection_size else self.TEXT_GRAY
            self.draw_button(f"{size} x {size}", (self.WINDOW_WIDTH // 2 - 130 + i * 140, 85, 120, 35),
                             color, lambda size=size: setattr(self, "selection_size", size))

        y = 150
        for difficulty in PuzzleDifficulty:
            puzzles = self.catalog.puzzles(self.selection_size, difficulty)
            if not puzzles:
                continue
            label = self.font_medium.render(difficulty.display_name, True, self.BLACK)
            self.screen.blit(label, (40, y))
            y += 30
            for i, premade in enumerate(puzzles):
                rating = self.progress.completions.rating(premade.id)
                if rating is not None and rating >= 3.0:
                    color = self.ACCENT
                elif self.progress.completions.is_completed(premade.id):
                    color = self.SUCCESS
                else:
                    color = self.PRIMARY
                # Ten puzzles per row
                self.draw_button(f"#{premade.number}", (40 + (i % 10) * 76, y + (i // 10) * 42, 70, 36), color,
                                 lambda premade=premade: self.start_premade_game(premade))
            y += ((len(puzzles) + 9) // 10) * 42 + 14

    def show_menu(self):
        if self.session is not None:
            self.session.close()
            self.session = None
        self.screen_name = "menu"

    def draw_grid(self):
        """Draws the board: cell backgrounds, region lines and symbols."""
        session = self.session
        config = session.config
        size = config.size
        cell = self.cell_size

        self.draw_rounded_rect(self.screen, self.GRID_BG, (self.GRID_X, self.GRID_Y, self.GRID_SIZE, self.GRID_SIZE), 8)

        for board_cell in session.puzzle.cells:
            row, col = board_cell.position.row, board_cell.position.col
            rect = pygame.Rect(self.GRID_X + col * cell, self.GRID_Y + row * cell, cell, cell)
            if board_cell.position == session.selected_position:
                pygame.draw.rect(self.screen, self.SELECTION, rect.inflate(-4, -4))
            elif session.highlighted_value is not None and board_cell.symbol == session.highlighted_value:
                pygame.draw.rect(self.screen, self.HIGHLIGHT, rect.inflate(-4, -4))

            if not board_cell.is_empty:
                color = self.BLACK if board_cell.is_fixed else self.PRIMARY
                self.draw_text(self.symbol_text(board_cell.symbol), self.font_large, color, rect.center)

        for i in range(size + 1):
            h_major = i % config.subgrid_rows == 0
            v_major = i % config.subgrid_cols == 0
            pygame.draw.line(self.screen, self.BLACK if h_major else self.SUBGRID_LINE,
                             (self.GRID_X, self.GRID_Y + i * cell),
                             (self.GRID_X + self.GRID_SIZE, self.GRID_Y + i * cell), 3 if h_major else 1)
            pygame.draw.line(self.screen, self.BLACK if v_major else self.SUBGRID_LINE,
                             (self.GRID_X + i * cell, self.GRID_Y),
                             (self.GRID_X + i * cell, self.GRID_Y + self.GRID_SIZE), 3 if v_major else 1)

        if session.is_generating:
            self.draw_text("Generating puzzle...", self.font_medium, self.TEXT_GRAY,
                           (self.GRID_X + self.GRID_SIZE // 2, self.GRID_Y + self.GRID_SIZE // 2))

    def draw_palette(self):
        session = self.session
        width = self.GRID_SIZE // max(len(session.palette_symbols), 1)
        for i, (index, _symbol) in enumerate(session.palette_symbols):
            color = self.ACCENT if index == session.selected_palette_symbol else self.PRIMARY_LIGHT
            self.draw_button(self.symbol_text(index), (self.GRID_X + i * width + 3, self.PALETTE_Y, width - 6, 50),
                             color, lambda index=index: self.on_palette(index), self.BLACK)

    def on_palette(self, index):
        if self.session.selected_position is not None:
            self.session.place_selected(index)
        else:
            self.session.select_palette_symbol(index)

    def draw_panel(self):
        """Stat cards and action buttons to the right of the board."""
        session = self.session
        stats = [
            ("Time", session.formatted_time),
            ("Mistakes", str(session.mistake_count)),
            ("Hints", str(session.hint_count)),
            ("Stars", f"{session.calculate_stars():g} / 3"),
        ]
        for i, (label, value) in enumerate(stats):
            x = self.PANEL_X + (i % 2) * (self.PANEL_WIDTH // 2)
            y = self.GRID_Y + (i // 2) * 65
            self.draw_stat_card(label, value, x, y, self.PANEL_WIDTH // 2 - 10)

        actions = [
            ("New Puzzle", self.PRIMARY, session.start_new_puzzle),
            ("Hint", self.ACCENT, session.hint),
            ("Undo", self.TEXT_GRAY, session.undo),
            ("Erase", self.TEXT_GRAY, session.erase_selected),
            ("Menu", self.WARNING, self.show_menu),
        ]
        for i, (text, color, action) in enumerate(actions):
            self.draw_button(text, (self.PANEL_X, self.GRID_Y + 150 + i * 57, self.PANEL_WIDTH - 10, 45), color, action)

    def draw_message(self):
        message = self.session.message
        if message is None:
            return
        colors = {MessageKind.INFO: self.TEXT_GRAY, MessageKind.SUCCESS: self.SUCCESS, MessageKind.WARNING: self.WARNING}
        self.draw_text(message.text, self.font_medium, colors[message.kind], (self.WINDOW_WIDTH // 2, 70))

    def draw_victory(self):
        overlay = pygame.Surface((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        overlay.set_alpha(190)
        overlay.fill((30, 30, 40))
        self.screen.blit(overlay, (0, 0))

        mx, my = (self.WINDOW_WIDTH - 420) // 2, (self.WINDOW_HEIGHT - 300) // 2
        self.draw_rounded_rect(self.screen, self.GRID_BG, (mx, my, 420, 300), 16)
        self.draw_text("Amazing!", self.font_title, self.SUCCESS, (self.WINDOW_WIDTH // 2, my + 50))
        self.draw_text(f"{self.session.calculate_stars():g} / 3 stars", self.font_medium, self.ACCENT,
                       (self.WINDOW_WIDTH // 2, my + 105))
        self.draw_text(f"Time {self.session.formatted_time}", self.font_small, self.TEXT_GRAY,
                       (self.WINDOW_WIDTH // 2, my + 140))
        for i, badge in enumerate(self.progress.newly_earned[:2]):
            self.draw_text(f"New badge: {badge.display_name}", self.font_small, self.PRIMARY,
                           (self.WINDOW_WIDTH // 2, my + 170 + i * 24))

        self.draw_button("Play Again", (mx + 30, my + 230, 170, 45), self.PRIMARY, self.session.start_new_puzzle)
        self.draw_button("Menu", (mx + 220, my + 230, 170, 45), self.TEXT_GRAY, self.show_menu)

    def draw_game(self):
        self.screen.fill(self.BG_COLOR)
        self.draw_text(self.session.title, self.font_title, self.PRIMARY, (self.WINDOW_WIDTH // 2, 35))
        self.draw_message()
        self.draw_grid()
        self.draw_palette()
        self.draw_panel()
        if self.session.is_solved:
            # Only the overlay's buttons stay clickable
            self.buttons = []
            self.draw_victory()

    def draw(self):
        self.buttons = []
        if self.screen_name == "menu":
            self.draw_menu()
        elif self.screen_name == "selection":
            self.draw_selection()
        else:
            self.draw_game()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def request_quit(self):
        self.running = False

    def cell_at(self, pos):
        """Board position under a pixel, or None outside the grid."""
        x, y = pos
        if not (self.GRID_X <= x < self.GRID_X + self.GRID_SIZE and self.GRID_Y <= y < self.GRID_Y + self.GRID_SIZE):
            return None
        return Position((y - self.GRID_Y) // self.cell_size, (x - self.GRID_X) // self.cell_size)

    def handle_click(self, pos):
        """Runs the button under the pointer, or taps the board cell there."""
        for rect, action in self.buttons:
            if rect.collidepoint(pos):
                action()
                return

        if self.screen_name == "game" and not self.session.is_solved:
            position = self.cell_at(pos)
            if position is not None:
                self.session.tap_cell(position)

    def handle_key(self, key):
        """Digits place symbols, Backspace erases, arrows move, U undoes and H hints."""
        if self.screen_name != "game" or self.session.is_solved:
            return
        session = self.session

        value = self.key_mapping.get(key)
        if value is not None and value < session.config.size:
            session.place_selected(value)
        elif key in (pygame.K_DELETE, pygame.K_BACKSPACE, pygame.K_0):
            session.erase_selected()
        elif key == pygame.K_u:
            session.undo()
        elif key == pygame.K_h:
            session.hint()
        elif session.selected_position is not None:
            row, col = session.selected_position.row, session.selected_position.col
            last = session.config.size - 1
            moves = {
                pygame.K_UP: (max(row - 1, 0), col),
                pygame.K_DOWN: (min(row + 1, last), col),
                pygame.K_LEFT: (row, max(col - 1, 0)),
                pygame.K_RIGHT: (row, min(col + 1, last)),
            }
            if key in moves:
                session.selected_position = Position(*moves[key])

    def run(self):
        """Main game loop."""
        clock = pygame.time.Clock()
        self.running = True

        while self.running:
            elapsed_ms = clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)
                elif event.type == pygame.KEYDOWN:
                    self.handle_key(event.key)

            if self.session is not None:
                self.session.poll()
                self.session.tick(elapsed_ms / 1000.0)

            self.draw()
            pygame.display.flip()

        if self.session is not None:
            self.session.close()
        pygame.quit()


def main(argv=None):
    parser = argparse.ArgumentParser(prog="kidsdoku", description="Symbol Sudoku for kids.")
    parser.add_argument("--size", type=int, choices=(3, 4, 6), help="start a random puzzle of this size")
    parser.add_argument("--premade", help="start a storybook puzzle by id, e.g. storybook-4-easy-1")
    parser.add_argument("--seed", type=int, help="seed for reproducible puzzles")
    parser.add_argument("--env-file", help="path to a .env file")
    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)
    get_logger(level=settings.log_level)
    if args.seed is not None:
        settings = replace(settings, seed=args.seed)

    app = KidSudokuApp(settings)
    if args.premade:
        premade = app.catalog.get(args.premade)
        if premade is None:
            parser.error(f"unknown puzzle id {args.premade!r}")
        app.start_premade_game(premade)
    elif args.size:
        app.start_random_game(args.size)
    app.run()
