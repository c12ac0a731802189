import pytest

from kidsdoku.catalog import PremadePuzzle, PremadePuzzleCatalog, PuzzleDifficulty, parse_boards
from kidsdoku.models import Position
from kidsdoku.solver import count_solutions, is_valid_solution

CATALOG = PremadePuzzleCatalog.default()


def test_default_catalog_contents():
    assert len(CATALOG) == 86
    assert CATALOG.sizes() == [4, 6]
    for size in (4, 6):
        assert len(CATALOG.puzzles(size, "easy")) == 10
        assert len(CATALOG.puzzles(size, "normal")) == 12
        assert len(CATALOG.puzzles(size, "hard")) == 21
    assert CATALOG.puzzles(3) == []


@pytest.mark.parametrize("premade", list(CATALOG), ids=lambda p: p.id)
def test_every_catalog_puzzle_is_consistent(premade):
    config = premade.config
    solution = [list(row) for row in premade.solution_board]
    initial = [list(row) for row in premade.initial_board]

    assert is_valid_solution(solution, config)
    for row in range(config.size):
        for col in range(config.size):
            if initial[row][col] is not None:
                assert initial[row][col] == solution[row][col]
    assert count_solutions(initial, config) >= 1


def test_ids_are_unique_and_numbered_from_one():
    ids = [premade.id for premade in CATALOG]
    assert len(set(ids)) == len(ids)
    for size in (4, 6):
        for difficulty in PuzzleDifficulty:
            numbers = [premade.number for premade in CATALOG.puzzles(size, difficulty)]
            assert numbers == list(range(1, len(numbers) + 1))


def test_ids_and_names():
    premade = CATALOG.get("storybook-6-normal-2")
    assert premade is not None
    assert premade.size == 6
    assert premade.difficulty is PuzzleDifficulty.NORMAL
    assert premade.display_name == "Normal #2"
    assert CATALOG.get("storybook-9-easy-1") is None


def test_digits_are_labels():
    # 6x6 puzzles may use any six digits; they map in sorted order
    initial, solution = parse_boards("""
        9.8
        ...
        ...
    """, """
        968
        689
        896
    """, 3)
    assert solution[0] == [2, 0, 1]
    assert initial[0] == [2, None, 1]


def test_to_puzzle_marks_clues_fixed():
    premade = CATALOG.get("storybook-4-easy-1")
    puzzle = premade.to_puzzle()

    assert puzzle.puzzle_id == "storybook-4-easy-1"
    assert puzzle.difficulty == "easy"
    assert puzzle.cell(Position(0, 1)).is_fixed
    assert puzzle.cell(Position(0, 0)).is_empty
    assert puzzle.given_count == 10
    # Each call gives an independent board
    puzzle.update_cell(Position(0, 0), 0)
    assert premade.to_puzzle().cell(Position(0, 0)).is_empty


@pytest.mark.parametrize(
    "initial, solution",
    [
        ("12\n21\n1.", "12\n21"),     # too many rows
        ("1.\n.", "12\n21"),          # short row
        ("1x\n..", "12\n21"),         # bad character
        ("13\n..", "12\n21"),         # clue not in the solution
        ("..\n..", "11\n11"),         # too few distinct digits
        ("..\n..", "1a\na1"),         # non-digit solution
    ],
)
def test_parse_rejects_malformed_boards(initial, solution):
    with pytest.raises(ValueError):
        parse_boards(initial, solution, 2)


def test_parse_rejects_unknown_difficulty():
    with pytest.raises(ValueError):
        PremadePuzzle.parse(1, 4, "extreme", "....\n....\n....\n....", "1234\n3412\n2143\n4321")
