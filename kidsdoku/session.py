import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

from kidsdoku.background import GenerationTask
from kidsdoku.feedback import FeedbackEvent, NullFeedback
from kidsdoku.generator import PuzzleGenerator
from kidsdoku.log import get_logger
from kidsdoku.models import Message, MessageKind, Puzzle
from kidsdoku.progress import CompletionEvent
from kidsdoku.solver import is_valid

logger = get_logger(__name__)

# (upper bound on mistakes + hints, stars)
STAR_TABLE = [(0, 3.0), (2, 2.5), (4, 2.0), (6, 1.5), (8, 1.0), (10, 0.5)]


def stars_for_penalties(penalties):
    """Star rating out of 3, in half steps, for a number of mistakes plus hints."""
    for limit, stars in STAR_TABLE:
        if penalties <= limit:
            return stars
    return 0.0


class SessionState(Enum):
    GENERATING = "generating"
    READY = "ready"
    SOLVED = "solved"


class MoveOutcome(Enum):
    IGNORED = "ignored"
    PLACED = "placed"
    CLEARED = "cleared"
    REJECTED = "rejected"
    HINTED = "hinted"
    UNDONE = "undone"
    SOLVED = "solved"


@dataclass(frozen=True)
class HistoryEntry:
    position: object
    previous: object


# =========================================================================
# GAME SESSION
# Owns one puzzle and everything the player does to it. All methods are
# meant to be called from a single thread; only puzzle generation runs
# elsewhere and is picked up through poll().
# =========================================================================
class GameSession:
    def __init__(self, config, premade=None, generator=None, feedback=None, progress=None,
                 rng=None, executor=None):
        self.config = config
        self.premade = premade
        self.rng = rng or random.Random()
        self.generator = generator or PuzzleGenerator(random.Random(self.rng.getrandbits(64)))
        self.feedback = feedback or NullFeedback()
        self.progress = progress

        self._owns_executor = executor is None
        self._executor = executor
        self._task = None

        self.puzzle = Puzzle.placeholder(config)
        self.state = SessionState.GENERATING
        self.message = None
        self.selected_position = None
        self.selected_palette_symbol = None
        self.highlighted_value = None
        self.mistake_count = 0
        self.hint_count = 0
        self.elapsed_time = 0.0
        self.move_history = []

        self.start_new_puzzle()

    # ------------------------------------------------------------------
    # Puzzle lifecycle
    # ------------------------------------------------------------------
    def start_new_puzzle(self):
        """Resets the game and loads the premade puzzle again or starts a fresh generation."""
        self._cancel_generation()

        self.selected_position = None
        self.selected_palette_symbol = None
        self.highlighted_value = None
        self.move_history = []
        self.mistake_count = 0
        self.hint_count = 0
        self.elapsed_time = 0.0

        if self.premade is not None:
            self.puzzle = self.premade.to_puzzle(self.config)
            self.state = SessionState.READY
            self.message = Message("New puzzle ready!")
            return

        self.puzzle = Puzzle.placeholder(self.config)
        self.state = SessionState.GENERATING
        self.message = None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kidsdoku-generator")
        self._task = GenerationTask(self.config, self.generator, self._executor)
        logger.info("Generating a new %dx%d puzzle", self.config.size, self.config.size)

    def _cancel_generation(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def poll(self):
        """
        Picks up a finished generation. Returns True when a new puzzle was adopted.
        The placeholder stays in place until the whole puzzle is available.
        """
        task = self._task
        if task is None or not task.done():
            return False

        self._task = None
        puzzle = task.result()
        if puzzle is None:
            return False

        self.puzzle = puzzle
        self.state = SessionState.READY
        self.message = Message("New puzzle ready!")
        logger.info("Puzzle ready with %d clues", puzzle.given_count)
        return True

    def wait_until_ready(self, timeout=None):
        """Blocks until an in-flight generation finishes, then adopts it."""
        if self._task is not None:
            self._task.wait(timeout)
            self.poll()
        return self.state is not SessionState.GENERATING

    def close(self):
        self._cancel_generation()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    @property
    def is_generating(self):
        return self.state is SessionState.GENERATING

    @property
    def is_solved(self):
        return self.state is SessionState.SOLVED

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def is_valid(self, value, position):
        return is_valid(value, position, self.puzzle.board(), self.config)

    def _write(self, position, value):
        cell = self.puzzle.cell(position)
        self.move_history.append(HistoryEntry(position, cell.symbol))
        self.puzzle.update_cell(position, value)

    def place_value(self, position, value):
        """
        Attempts to place a symbol on the board.
        Placing the symbol a cell already shows clears the cell instead.
        """
        if self.state is not SessionState.READY:
            return MoveOutcome.IGNORED

        cell = self.puzzle.cell(position)
        if cell.is_fixed:
            return MoveOutcome.IGNORED

        if not 0 <= value < self.config.size:
            logger.warning("Symbol index %d out of range for a %dx%d board", value, self.config.size, self.config.size)
            self.message = Message("Invalid symbol!", MessageKind.WARNING)
            return MoveOutcome.IGNORED

        if cell.symbol == value:
            self._write(position, None)
            return MoveOutcome.CLEARED

        if self.is_valid(value, position):
            self._write(position, value)
            self.highlighted_value = value
            self.message = None
            if self.check_for_completion():
                return MoveOutcome.SOLVED
            self.feedback.signal(FeedbackEvent.CORRECT_PLACEMENT)
            return MoveOutcome.PLACED

        self.mistake_count += 1
        self.feedback.signal(FeedbackEvent.INCORRECT_PLACEMENT)
        self.message = Message("That symbol is already there!", MessageKind.WARNING, self.config.symbol(value))
        return MoveOutcome.REJECTED

    def erase(self, position):
        """Clears a player-filled cell."""
        if self.state is not SessionState.READY:
            return MoveOutcome.IGNORED

        cell = self.puzzle.cell(position)
        if cell.is_fixed:
            self.message = Message("That one is part of the puzzle.")
            return MoveOutcome.IGNORED
        if cell.is_empty:
            return MoveOutcome.IGNORED

        self._write(position, None)
        return MoveOutcome.CLEARED

    def hint(self):
        """Fills a random empty cell with its solution."""
        if self.state is not SessionState.READY:
            return MoveOutcome.IGNORED

        empty = self.puzzle.empty_positions()
        if not empty:
            self.message = Message("No hints available!")
            return MoveOutcome.IGNORED

        position = self.rng.choice(empty)
        solution = self.puzzle.cell(position).solution
        self.hint_count += 1
        self._write(position, solution)
        self.highlighted_value = solution
        self.selected_palette_symbol = solution
        self.message = Message("Here's a hint!")

        if self.check_for_completion():
            return MoveOutcome.SOLVED
        self.feedback.signal(FeedbackEvent.HINT)
        return MoveOutcome.HINTED

    def undo(self):
        """Reverts the last change made to the board."""
        if self.state is not SessionState.READY:
            return MoveOutcome.IGNORED

        if not self.move_history:
            self.message = Message("Nothing to undo!")
            return MoveOutcome.IGNORED

        entry = self.move_history.pop()
        self.puzzle.update_cell(entry.position, entry.previous)
        self.highlighted_value = entry.previous
        self.message = None
        return MoveOutcome.UNDONE

    @property
    def can_undo(self):
        return bool(self.move_history)

    # ------------------------------------------------------------------
    # Selection (used by the front end)
    # ------------------------------------------------------------------
    def select_palette_symbol(self, index):
        self.selected_palette_symbol = index
        self.highlighted_value = index
        self.selected_position = None
        self.message = None

    def tap_cell(self, position):
        """
        Fixed cells highlight their symbol; an empty cell takes the selected
        palette symbol; anything else becomes the selected cell.
        """
        self.message = None
        cell = self.puzzle.cell(position)

        if cell.is_fixed:
            self.highlighted_value = cell.symbol
            self.selected_palette_symbol = cell.symbol
            self.selected_position = None
            return MoveOutcome.IGNORED

        if self.selected_palette_symbol is not None and cell.is_empty:
            return self.place_value(position, self.selected_palette_symbol)

        self.selected_position = position
        self.highlighted_value = cell.symbol
        self.selected_palette_symbol = cell.symbol
        return MoveOutcome.IGNORED

    def place_selected(self, value):
        if self.selected_position is None:
            self.message = Message("Tap a square first.")
            return MoveOutcome.IGNORED
        return self.place_value(self.selected_position, value)

    def erase_selected(self):
        if self.selected_position is None:
            self.message = Message("Tap a square first.")
            return MoveOutcome.IGNORED
        outcome = self.erase(self.selected_position)
        if outcome is MoveOutcome.CLEARED:
            self.selected_position = None
        return outcome

    # ------------------------------------------------------------------
    # Completion & scoring
    # ------------------------------------------------------------------
    def check_for_completion(self):
        """Checks every cell against the solution and finishes the game if all match."""
        if not self.puzzle.is_solved():
            return False

        self.state = SessionState.SOLVED
        self.message = Message("Amazing! Puzzle complete!", MessageKind.SUCCESS)
        self.feedback.signal(FeedbackEvent.VICTORY)

        stars = self.calculate_stars()
        logger.info("Puzzle solved in %s with %.1f stars", self.formatted_time, stars)
        if self.progress is not None:
            self.progress.puzzle_completed(CompletionEvent(
                puzzle_id=self.puzzle.puzzle_id,
                size=self.config.size,
                difficulty=self.puzzle.difficulty,
                stars=stars,
                mistakes=self.mistake_count,
                hints=self.hint_count,
                elapsed_time=self.elapsed_time,
            ))
        return True

    def calculate_stars(self):
        return stars_for_penalties(self.mistake_count + self.hint_count)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------
    def tick(self, seconds=1.0):
        if self.state is SessionState.READY:
            self.elapsed_time += seconds

    @property
    def formatted_time(self):
        minutes, seconds = divmod(int(self.elapsed_time), 60)
        return f"{minutes:02d}:{seconds:02d}"

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------
    @property
    def palette_symbols(self):
        """(index, symbol) pairs for the palette, taken from the solution's first row."""
        if self.is_generating or not self.puzzle.solution:
            indices = list(range(self.config.size))
        else:
            indices = sorted(set(self.puzzle.solution[0]))
        return [(index, self.config.symbol(index)) for index in indices]

    def display_symbol(self, cell):
        if cell.is_empty:
            return ""
        symbol = self.config.symbol(cell.symbol)
        return "?" if symbol is None else symbol

    @property
    def filled_count(self):
        return self.puzzle.filled_count

    @property
    def title(self):
        if self.premade is not None:
            return self.premade.display_name
        return f"{self.config.size} x {self.config.size} Puzzle"
