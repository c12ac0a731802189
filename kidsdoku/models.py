from dataclasses import dataclass, field, replace
from enum import Enum

from kidsdoku.log import get_logger

logger = get_logger(__name__)


# =========================================================================
# SYMBOLS & BOARD SHAPE
# =========================================================================
class SymbolGroup(Enum):
    ANIMALS = 1
    FRUITS = 2
    SPORTS = 3
    WEATHER = 4
    VEHICLES = 5
    NATURE = 6
    NUMBERS = 7

    @property
    def symbols(self):
        return _SYMBOLS[self]

    @property
    def palette_title(self):
        return self.name.capitalize()


_SYMBOLS = {
    SymbolGroup.ANIMALS: ("🐶", "🐱", "🐻", "🐼", "🐸", "🦊"),
    SymbolGroup.FRUITS: ("🍎", "🍊", "🍓", "🍉", "🍇", "🍌"),
    SymbolGroup.SPORTS: ("⚽", "🏀", "⚾", "🎾", "🏈", "🏐"),
    SymbolGroup.WEATHER: ("☀", "⛅", "☁", "🌧", "⚡", "🌈"),
    SymbolGroup.VEHICLES: ("🚗", "🚕", "🚙", "🚌", "🚎", "🏎"),
    SymbolGroup.NATURE: ("🌸", "🌺", "🌻", "🌷", "🌹", "🌼"),
    SymbolGroup.NUMBERS: ("1", "2", "3", "4", "5", "6", "7", "8", "9"),
}


@dataclass(frozen=True)
class Config:
    """
    Board shape: an N x N grid split into subgrid_rows x subgrid_cols regions.
    The symbol group only affects how values are displayed.
    """
    size: int
    subgrid_rows: int
    subgrid_cols: int
    symbol_group: SymbolGroup = SymbolGroup.NUMBERS

    def __post_init__(self):
        if self.size <= 0 or self.subgrid_rows <= 0 or self.subgrid_cols <= 0:
            raise ValueError(f"Invalid board shape: {self.size} ({self.subgrid_rows}x{self.subgrid_cols})")
        if self.subgrid_rows * self.subgrid_cols != self.size:
            raise ValueError(
                f"Subgrid {self.subgrid_rows}x{self.subgrid_cols} does not tile a {self.size}x{self.size} board"
            )

    @property
    def symbols(self):
        return self.symbol_group.symbols[:self.size]

    @property
    def total_cells(self):
        return self.size * self.size

    def symbol(self, index):
        """Returns the display symbol for a value, or None if the index is out of range."""
        symbols = self.symbols
        if index is None or not 0 <= index < len(symbols):
            logger.warning("Symbol index %s out of bounds (max: %d)", index, len(symbols) - 1)
            return None
        return symbols[index]

    def with_symbol_group(self, group):
        return replace(self, symbol_group=group)

    @classmethod
    def three_by_three(cls):
        return cls(3, 1, 3, SymbolGroup.ANIMALS)

    @classmethod
    def four_by_four(cls):
        return cls(4, 2, 2, SymbolGroup.SPORTS)

    @classmethod
    def six_by_six(cls):
        return cls(6, 2, 3, SymbolGroup.FRUITS)

    @classmethod
    def for_size(cls, size):
        presets = {3: cls.three_by_three, 4: cls.four_by_four, 6: cls.six_by_six}
        preset = presets.get(size)
        return preset() if preset else None


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def index(self, size):
        return self.row * size + self.col


# =========================================================================
# CELL VALUES
# A cell is either Empty or Filled with a symbol index.
# =========================================================================
class Empty:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "EMPTY"

    def __bool__(self):
        return False

    @property
    def symbol(self):
        return None


EMPTY = Empty()


@dataclass(frozen=True)
class Filled:
    symbol: int


def cell_value(symbol):
    """Converts an optional symbol index into a cell value."""
    if symbol is None or isinstance(symbol, Empty):
        return EMPTY
    if isinstance(symbol, Filled):
        return symbol
    return Filled(symbol)


@dataclass
class Cell:
    position: Position
    solution: int
    value: object = EMPTY
    is_fixed: bool = False

    @property
    def symbol(self):
        """The current symbol index, or None when the cell is empty."""
        return self.value.symbol

    @property
    def is_empty(self):
        return isinstance(self.value, Empty)

    @property
    def is_correct(self):
        return self.value.symbol == self.solution


# =========================================================================
# PUZZLE
# =========================================================================
@dataclass
class Puzzle:
    """
    A board in play: row-major cells plus the solution they were built from.
    Only non-fixed cells change, and only through update_cell.
    """
    config: Config
    cells: list
    solution: tuple
    puzzle_id: str = None
    difficulty: str = None

    def cell(self, position):
        return self.cells[position.index(self.config.size)]

    def update_cell(self, position, value):
        cell = self.cell(position)
        if cell.is_fixed:
            return False
        cell.value = cell_value(value)
        return True

    def board(self):
        """Current values as rows of symbol indices (None for empty cells)."""
        size = self.config.size
        return [[self.cells[row * size + col].symbol for col in range(size)] for row in range(size)]

    def empty_positions(self):
        return [cell.position for cell in self.cells if cell.is_empty and not cell.is_fixed]

    @property
    def filled_count(self):
        return sum(1 for cell in self.cells if not cell.is_empty)

    @property
    def given_count(self):
        return sum(1 for cell in self.cells if cell.is_fixed)

    @property
    def correct_count(self):
        return sum(1 for cell in self.cells if cell.is_correct)

    def is_solved(self):
        return self.correct_count == self.config.total_cells

    @classmethod
    def from_boards(cls, config, initial, solution, puzzle_id=None, difficulty=None):
        """Builds a puzzle where every non-None entry of `initial` is a fixed clue."""
        size = config.size
        cells = []
        for row in range(size):
            for col in range(size):
                value = initial[row][col]
                cells.append(Cell(
                    position=Position(row, col),
                    solution=solution[row][col],
                    value=cell_value(value),
                    is_fixed=value is not None,
                ))
        frozen = tuple(tuple(row) for row in solution)
        return cls(config, cells, frozen, puzzle_id=puzzle_id, difficulty=difficulty)

    @classmethod
    def placeholder(cls, config):
        """An all-empty puzzle shown while the real one is being generated."""
        size = config.size
        empty = [[None] * size for _ in range(size)]
        zeros = [[0] * size for _ in range(size)]
        return cls.from_boards(config, empty, zeros)


# =========================================================================
# USER-FACING MESSAGES
# =========================================================================
class MessageKind(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class Message:
    text: str
    kind: MessageKind = MessageKind.INFO
    symbol: str = field(default=None, compare=False)
