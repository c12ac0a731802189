from kidsdoku.models import Position


# =========================================================================
# PLACEMENT RULES
# Shared by the solver's backtracking step and the game session.
# Boards are rows of symbol indices, with None for empty cells.
# =========================================================================
def region_origin(position, config):
    """Top-left corner of the subgrid region containing `position`."""
    return (
        (position.row // config.subgrid_rows) * config.subgrid_rows,
        (position.col // config.subgrid_cols) * config.subgrid_cols,
    )


def is_valid(value, position, board, config):
    """
    Checks if placing `value` at `position` is allowed.
    The target cell itself is skipped, so re-checking a placed value is safe.
    The value range is not checked here.
    """
    row, col = position.row, position.col

    # Check row and column
    for i in range(config.size):
        if i != col and board[row][i] == value:
            return False
        if i != row and board[i][col] == value:
            return False

    # Check subgrid
    start_row, start_col = region_origin(position, config)
    for i in range(start_row, start_row + config.subgrid_rows):
        for j in range(start_col, start_col + config.subgrid_cols):
            if (i != row or j != col) and board[i][j] == value:
                return False

    return True


def next_empty_cell(board, config):
    """First empty cell in row-major order, or None if the board is full."""
    for row in range(config.size):
        for col in range(config.size):
            if board[row][col] is None:
                return Position(row, col)
    return None


def is_valid_solution(board, config):
    """True if every row, column and region holds each symbol exactly once."""
    expected = set(range(config.size))
    size = config.size

    for i in range(size):
        if len(board[i]) != size or set(board[i]) != expected:
            return False
        if {board[r][i] for r in range(size)} != expected:
            return False

    for start_row in range(0, size, config.subgrid_rows):
        for start_col in range(0, size, config.subgrid_cols):
            region = [
                board[r][c]
                for r in range(start_row, start_row + config.subgrid_rows)
                for c in range(start_col, start_col + config.subgrid_cols)
            ]
            if len(region) != size or set(region) != expected:
                return False
    return True


# =========================================================================
# BACKTRACKING SOLVER
# A plain DFS used to count solutions (capped) for the uniqueness check.
# =========================================================================
class BacktrackingSolver:
    def __init__(self, board, config):
        self.config = config
        self.board = [row[:] for row in board]

    def count_solutions(self, limit=2):
        """
        Counts solutions of the board, stopping as soon as `limit` are found.
        Empty cells are visited in row-major order and candidates in increasing
        order; the board is restored after every trial placement.
        """
        position = next_empty_cell(self.board, self.config)
        if position is None:
            return 1

        total = 0
        for candidate in range(self.config.size):
            if is_valid(candidate, position, self.board, self.config):
                self.board[position.row][position.col] = candidate
                total += self.count_solutions(limit - total)
                self.board[position.row][position.col] = None

                if total >= limit:
                    break
        return total

    def solve(self):
        """Fills the board with the first solution found. Returns False if there is none."""
        position = next_empty_cell(self.board, self.config)
        if position is None:
            return True

        for candidate in range(self.config.size):
            if is_valid(candidate, position, self.board, self.config):
                self.board[position.row][position.col] = candidate
                if self.solve():
                    return True
                self.board[position.row][position.col] = None
        return False


def count_solutions(board, config, limit=2):
    return BacktrackingSolver(board, config).count_solutions(limit)


def has_unique_solution(board, config):
    """Returns True if the puzzle has exactly one solution."""
    return count_solutions(board, config, limit=2) == 1
