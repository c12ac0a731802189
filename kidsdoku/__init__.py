from kidsdoku.catalog import PremadePuzzle, PremadePuzzleCatalog, PuzzleDifficulty
from kidsdoku.generator import PuzzleGenerator
from kidsdoku.models import Cell, Config, Position, Puzzle, SymbolGroup
from kidsdoku.session import GameSession, MoveOutcome, SessionState
from kidsdoku.solver import BacktrackingSolver

__version__ = "0.1.0"
