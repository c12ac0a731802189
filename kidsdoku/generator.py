import random

from kidsdoku.log import get_logger
from kidsdoku.models import Puzzle
from kidsdoku.solver import has_unique_solution

logger = get_logger(__name__)

# Clue counts tuned for young players; other sizes keep about 40% of the cells.
TARGET_GIVENS = {3: 4, 4: 8, 6: 14}
DEFAULT_GIVENS_RATIO = 0.4


class GenerationCancelled(Exception):
    """Raised inside a generation run when its cancel event is set."""


def target_givens(size):
    if size in TARGET_GIVENS:
        return TARGET_GIVENS[size]
    return int(size * size * DEFAULT_GIVENS_RATIO)


# =========================================================================
# PUZZLE GENERATOR
# Builds a solved board from a base pattern, shuffles it with
# validity-preserving moves, then removes clues while the solution stays unique.
# =========================================================================
class PuzzleGenerator:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def generate_complete_board(self, config):
        """
        Base pattern: row r starts at (r * subgrid_cols + r // subgrid_rows).
        Rows inside one band are shifted by a full region width and each band
        is shifted by one, so rows, columns and regions are all permutations.
        """
        size = config.size
        return [
            [(row * config.subgrid_cols + row // config.subgrid_rows + col) % size for col in range(size)]
            for row in range(size)
        ]

    def shuffle_board(self, board, config):
        """Randomizes a valid board in place without breaking any constraint."""
        self.shuffle_rows(board, config)
        self.shuffle_columns(board, config)
        self.permute_symbols(board, config)
        return board

    def _shuffled_bands(self, band_size, band_count):
        """Line order after shuffling whole bands and the lines within each band."""
        order = []
        bands = list(range(band_count))
        self.rng.shuffle(bands)
        for band in bands:
            lines = [band * band_size + offset for offset in range(band_size)]
            self.rng.shuffle(lines)
            order.extend(lines)
        return order

    def shuffle_rows(self, board, config):
        order = self._shuffled_bands(config.subgrid_rows, config.size // config.subgrid_rows)
        board[:] = [board[row] for row in order]

    def shuffle_columns(self, board, config):
        order = self._shuffled_bands(config.subgrid_cols, config.size // config.subgrid_cols)
        for row in range(config.size):
            board[row] = [board[row][col] for col in order]

    def permute_symbols(self, board, config):
        permutation = list(range(config.size))
        self.rng.shuffle(permutation)
        for row in range(config.size):
            board[row] = [permutation[value] for value in board[row]]

    def carve(self, solution, config, cancel_event=None):
        """
        Removes clues from a solved board, one cell at a time.
        A removal is kept only if the board still has exactly one solution,
        and carving stops once the target clue count is reached.
        """
        size = config.size
        puzzle = [row[:] for row in solution]
        target = target_givens(size)
        givens = config.total_cells

        # Visit all cells in a random order
        cells = list(range(config.total_cells))
        self.rng.shuffle(cells)

        for index in cells:
            if givens <= target:
                break
            if cancel_event is not None and cancel_event.is_set():
                raise GenerationCancelled()

            row, col = divmod(index, size)
            if puzzle[row][col] is None:
                continue

            backup = puzzle[row][col]
            puzzle[row][col] = None

            if has_unique_solution(puzzle, config):
                givens -= 1
            else:
                # The clue is needed, put it back
                puzzle[row][col] = backup

        return puzzle

    def generate(self, config, cancel_event=None):
        """Main entry point: returns a new Puzzle for `config`."""
        logger.debug("Generating %dx%d puzzle", config.size, config.size)
        solution = self.generate_complete_board(config)
        self.shuffle_board(solution, config)

        board = self.carve(solution, config, cancel_event=cancel_event)
        puzzle = Puzzle.from_boards(config, board, solution)
        logger.debug("Generated %dx%d puzzle with %d clues", config.size, config.size, puzzle.given_count)
        return puzzle
