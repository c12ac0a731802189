"""
Hand-authored puzzles.

Boards are written one row per line, using '.' for an empty cell and a digit
for a symbol. Digits are labels only: the distinct digits of a solution are
sorted and mapped onto symbol indices 0..size-1.

    initial:  0..3        solution: 0213
              ..0.                  3102
              .1..                  1320
              2..1                  2031
"""
from dataclasses import dataclass
from enum import Enum

from kidsdoku.models import Config, Puzzle


class PuzzleDifficulty(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def display_name(self):
        return self.value.capitalize()


def _rows(text):
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def parse_boards(initial, solution, size):
    """Decodes compact notation into (initial, solution) boards of symbol indices."""
    initial_rows = _rows(initial)
    solution_rows = _rows(solution)

    if len(initial_rows) != size or len(solution_rows) != size:
        raise ValueError(f"Boards must have {size} rows")
    for line in initial_rows + solution_rows:
        if len(line) != size:
            raise ValueError(f"Row {line!r} must have {size} columns")
    for line in solution_rows:
        if not line.isdigit():
            raise ValueError(f"Invalid character in solution row {line!r}")

    labels = sorted({char for line in solution_rows for char in line})
    if len(labels) != size:
        raise ValueError(f"Solution must use exactly {size} distinct digits, found {len(labels)}")
    index_of = {label: index for index, label in enumerate(labels)}

    initial_board = []
    for line in initial_rows:
        row = []
        for char in line:
            if char == ".":
                row.append(None)
            elif char in index_of:
                row.append(index_of[char])
            else:
                raise ValueError(f"Invalid character {char!r} in puzzle row {line!r}")
        initial_board.append(row)

    solution_board = [[index_of[char] for char in line] for line in solution_rows]
    return initial_board, solution_board


@dataclass(frozen=True)
class PremadePuzzle:
    number: int
    size: int
    difficulty: PuzzleDifficulty
    initial_board: tuple
    solution_board: tuple
    theme: str = "storybook"

    @property
    def id(self):
        return f"{self.theme}-{self.size}-{self.difficulty.value}-{self.number}".lower()

    @property
    def display_name(self):
        return f"{self.difficulty.display_name} #{self.number}"

    @property
    def config(self):
        return Config.for_size(self.size)

    def to_puzzle(self, config=None):
        """A fresh playable Puzzle; the catalog is trusted, so no uniqueness check."""
        return Puzzle.from_boards(
            config or self.config,
            self.initial_board,
            self.solution_board,
            puzzle_id=self.id,
            difficulty=self.difficulty.value,
        )

    @classmethod
    def parse(cls, number, size, difficulty, initial, solution, theme="storybook"):
        initial_board, solution_board = parse_boards(initial, solution, size)
        return cls(
            number=number,
            size=size,
            difficulty=PuzzleDifficulty(difficulty),
            initial_board=tuple(tuple(row) for row in initial_board),
            solution_board=tuple(tuple(row) for row in solution_board),
            theme=theme,
        )


class PremadePuzzleCatalog:
    def __init__(self, puzzles):
        self._puzzles = list(puzzles)
        self._by_id = {puzzle.id: puzzle for puzzle in self._puzzles}

    def __iter__(self):
        return iter(self._puzzles)

    def __len__(self):
        return len(self._puzzles)

    def puzzles(self, size, difficulty=None):
        if difficulty is not None:
            difficulty = PuzzleDifficulty(difficulty)
        return [
            puzzle for puzzle in self._puzzles
            if puzzle.size == size and (difficulty is None or puzzle.difficulty == difficulty)
        ]

    def get(self, puzzle_id):
        return self._by_id.get(puzzle_id)

    def sizes(self):
        return sorted({puzzle.size for puzzle in self._puzzles})

    @classmethod
    def default(cls):
        return cls(PremadePuzzle.parse(*entry) for entry in _DEFAULT_PUZZLES)


_DEFAULT_PUZZLES = [
    # 4x4
    (1, 4, "easy", """
        .234
        3...
        21.3
        4.21
     """, """
        1234
        3412
        2143
        4321
     """),
    (2, 4, "easy", """
        12.4
        .412
        21.3
        ..21
     """, """
        1234
        3412
        2143
        4321
     """),
    (3, 4, "easy", """
        .2..
        3.1.
        .143
        4321
     """, """
        1234
        3412
        2143
        4321
     """),
    (4, 4, "easy", """
        .23.
        3412
        .14.
        4..1
     """, """
        1234
        3412
        2143
        4321
     """),
    (5, 4, "easy", """
        .2.4
        341.
        21.3
        .3.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (6, 4, "easy", """
        12..
        .4.2
        214.
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (7, 4, "easy", """
        .2.4
        .41.
        2.43
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (8, 4, "easy", """
        .2.4
        3.1.
        2143
        ..21
     """, """
        1234
        3412
        2143
        4321
     """),
    (9, 4, "easy", """
        123.
        3.1.
        ..43
        .321
     """, """
        1234
        3412
        2143
        4321
     """),
    (10, 4, "easy", """
        12.4
        34.2
        ..4.
        4.21
     """, """
        1234
        3412
        2143
        4321
     """),
    (1, 4, "normal", """
        ....
        3412
        .14.
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (2, 4, "normal", """
        .234
        ...2
        .14.
        4.21
     """, """
        1234
        3412
        2143
        4321
     """),
    (3, 4, "normal", """
        1.34
        .4..
        2.43
        ..21
     """, """
        1234
        3412
        2143
        4321
     """),
    (4, 4, "normal", """
        .23.
        .4.2
        21.3
        4..1
     """, """
        1234
        3412
        2143
        4321
     """),
    (5, 4, "normal", """
        12.4
        3...
        .143
        .32.
     """, """
        1234
        3412
        2143
        4321
     """),
    (6, 4, "normal", """
        12..
        3..2
        .143
        4.2.
     """, """
        1234
        3412
        2143
        4321
     """),
    (7, 4, "normal", """
        12.4
        ...2
        2.43
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (8, 4, "normal", """
        ..34
        3..2
        2.4.
        4321
     """, """
        1234
        3412
        2143
        4321
     """),
    (9, 4, "normal", """
        ..34
        3..2
        21..
        4321
     """, """
        1234
        3412
        2143
        4321
     """),
    (10, 4, "normal", """
        123.
        34.2
        2.43
        ....
     """, """
        1234
        3412
        2143
        4321
     """),
    (11, 4, "normal", """
        .234
        ..1.
        ..43
        .321
     """, """
        1234
        3412
        2143
        4321
     """),
    (12, 4, "normal", """
        .2.4
        3.12
        214.
        ..2.
     """, """
        1234
        3412
        2143
        4321
     """),
    (1, 4, "hard", """
        1..4
        .41.
        2..3
        4.2.
     """, """
        1234
        3412
        2143
        4321
     """),
    (2, 4, "hard", """
        ...4
        34.2
        .1.3
        4.2.
     """, """
        1234
        3412
        2143
        4321
     """),
    (3, 4, "hard", """
        1..4
        341.
        ....
        432.
     """, """
        1234
        3412
        2143
        4321
     """),
    (4, 4, "hard", """
        .2.4
        .412
        .14.
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (5, 4, "hard", """
        1...
        .4..
        2.43
        .32.
     """, """
        1234
        3412
        2143
        4321
     """),
    (6, 4, "hard", """
        ..3.
        3412
        2.43
        ....
     """, """
        1234
        3412
        2143
        4321
     """),
    (7, 4, "hard", """
        .2.4
        ..1.
        21.3
        .3..
     """, """
        1234
        3412
        2143
        4321
     """),
    (8, 4, "hard", """
        1234
        ..1.
        2...
        .3.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (9, 4, "hard", """
        ...4
        341.
        .1..
        .321
     """, """
        1234
        3412
        2143
        4321
     """),
    (10, 4, "hard", """
        ..34
        ...2
        2143
        4...
     """, """
        1234
        3412
        2143
        4321
     """),
    (11, 4, "hard", """
        .23.
        ...2
        21..
        43..
     """, """
        1234
        3412
        2143
        4321
     """),
    (12, 4, "hard", """
        12..
        3.1.
        2.4.
        .32.
     """, """
        1234
        3412
        2143
        4321
     """),
    (13, 4, "hard", """
        1.34
        ....
        21..
        432.
     """, """
        1234
        3412
        2143
        4321
     """),
    (14, 4, "hard", """
        1.34
        3.1.
        2...
        ..21
     """, """
        1234
        3412
        2143
        4321
     """),
    (15, 4, "hard", """
        1...
        3..2
        .14.
        43..
     """, """
        1234
        3412
        2143
        4321
     """),
    (16, 4, "hard", """
        .234
        ..1.
        2...
        4.21
     """, """
        1234
        3412
        2143
        4321
     """),
    (17, 4, "hard", """
        .23.
        ..1.
        21.3
        4...
     """, """
        1234
        3412
        2143
        4321
     """),
    (18, 4, "hard", """
        .23.
        .4..
        21..
        .3.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (19, 4, "hard", """
        123.
        ....
        ..43
        432.
     """, """
        1234
        3412
        2143
        4321
     """),
    (20, 4, "hard", """
        ..34
        ..1.
        2...
        43.1
     """, """
        1234
        3412
        2143
        4321
     """),
    (21, 4, "hard", """
        1..4
        ..1.
        2..3
        4..1
     """, """
        1234
        3412
        2143
        4321
     """),
    # 6x6
    (1, 6, "easy", """
        .234.6
        4.612.
        23.6.5
        .643.2
        .12.64
        64523.
     """, """
        123456
        456123
        231645
        564312
        312564
        645231
     """),
    (2, 6, "easy", """
        9.82.4
        25..68
        6.95.2
        5.2689
        .964.5
        42.89.
     """, """
        968254
        254968
        689542
        542689
        896425
        425896
     """),
    (3, 6, "easy", """
        .5792.
        9.41.7
        57.49.
        .49.15
        7.52..
        49257.
     """, """
        157924
        924157
        571492
        249715
        715249
        492571
     """),
    (4, 6, "easy", """
        34.6.8
        ..8.45
        4.3..7
        7.6534
        534.86
        86.453
     """, """
        345678
        678345
        453867
        786534
        534786
        867453
     """),
    (5, 6, "easy", """
        9.76.4
        .549.7
        7.8465
        465..8
        8.9546
        .4.8.9
     """, """
        987654
        654987
        798465
        465798
        879546
        546879
     """),
    (6, 6, "easy", """
        876543
        .4.8.6
        76843.
        4..7.8
        6.73.4
        35.6.7
     """, """
        876543
        543876
        768435
        435768
        687354
        354687
     """),
    (7, 6, "easy", """
        468.75
        ..5468
        84..97
        5978..
        68.759
        .5.684
     """, """
        468975
        975468
        846597
        597846
        684759
        759684
     """),
    (8, 6, "easy", """
        643.21
        .2.6.3
        364.82
        .8..6.
        436218
        .184.6
     """, """
        643821
        821643
        364182
        182364
        436218
        218436
     """),
    (9, 6, "easy", """
        4.6123
        12..5.
        5.42.1
        231.64
        64.312
        .126.5
     """, """
        456123
        123456
        564231
        231564
        645312
        312645
     """),
    (10, 6, "easy", """
        2.6.31
        83.246
        6.41.3
        183.24
        .62..8
        .18462
     """, """
        246831
        831246
        624183
        183624
        462318
        318462
     """),
    (1, 6, "normal", """
        .57.9.
        .941.7
        5.1.4.
        9.3571
        71..39
        43.7.5
     """, """
        157394
        394157
        571943
        943571
        715439
        439715
     """),
    (2, 6, "normal", """
        ...826
        826...
        51.268
        2.8.13
        1..6.2
        6.2135
     """, """
        351826
        826351
        513268
        268513
        135682
        682135
     """),
    (3, 6, "normal", """
        .697..
        7.1.69
        6..1.2
        2.794.
        9.62.7
        1.2.94
     """, """
        469721
        721469
        694172
        217946
        946217
        172694
     """),
    (4, 6, "normal", """
        2..6..
        678235
        ..2..6
        78..52
        5..8.7
        86752.
     """, """
        235678
        678235
        352786
        786352
        523867
        867523
     """),
    (5, 6, "normal", """
        .56.3.
        2..4.6
        56..23
        3.26.5
        6.5..2
        123564
     """, """
        456231
        231456
        564123
        312645
        645312
        123564
     """),
    (6, 6, "normal", """
        .18.73
        27.91.
        .893.7
        7.2.9.
        89.73.
        3.71.9
     """, """
        918273
        273918
        189327
        732891
        891732
        327189
     """),
    (7, 6, "normal", """
        315...
        .2.315
        15.4.2
        .4.531
        5.1.48
        .821.3
     """, """
        315824
        824315
        153482
        248531
        531248
        482153
     """),
    (8, 6, "normal", """
        91.8.4
        82.913
        1...82
        2483.1
        .9..4.
        .82.39
     """, """
        913824
        824913
        139482
        248391
        391248
        482139
     """),
    (9, 6, "normal", """
        12.7.9
        78.123
        ......
        89.231
        3.2..8
        978.12
     """, """
        123789
        789123
        231897
        897231
        312978
        978312
     """),
    (10, 6, "normal", """
        .96528
        .2..9.
        .4.285
        .529.4
        .6.85.
        .856.9
     """, """
        496528
        528496
        649285
        852964
        964852
        285649
     """),
    (11, 6, "normal", """
        .9352.
        5.71.3
        319.7.
        .5..31
        9.17.2
        .7531.
     """, """
        193527
        527193
        319275
        752931
        931752
        275319
     """),
    (12, 6, "normal", """
        1.5.7.
        .7.1.5
        3.1.9.
        72.5.3
        513.29
        2973.1
     """, """
        135972
        972135
        351297
        729513
        513729
        297351
     """),
    (1, 6, "hard", """
        ..59.2
        .8.465
        .54.98
        ...54.
        54..29
        2.86..
     """, """
        465982
        982465
        654298
        829546
        546829
        298654
     """),
    (2, 6, "hard", """
        ......
        1529.3
        7..2.5
        5213.7
        3.75.1
        .1.7.9
     """, """
        973152
        152973
        739215
        521397
        397521
        215739
     """),
    (3, 6, "hard", """
        4.3.1.
        7.9.2.
        ..4.97
        1...3.
        3.29.1
        9.1342
     """, """
        423719
        719423
        234197
        197234
        342971
        971342
     """),
    (4, 6, "hard", """
        ....27
        ..7183
        31....
        .9.831
        .3.792
        2..318
     """, """
        183927
        927183
        318279
        792831
        831792
        279318
     """),
    (5, 6, "hard", """
        ...947
        947...
        ..6.79
        794..5
        685.9.
        .79856
     """, """
        568947
        947568
        856479
        794685
        685794
        479856
     """),
    (6, 6, "hard", """
        .9..81
        .812.3
        9.2...
        8.732.
        ...817
        178.32
     """, """
        293781
        781293
        932178
        817329
        329817
        178932
     """),
    (7, 6, "hard", """
        .38651
        ......
        38.165
        51.89.
        8..5.6
        .65.8.
     """, """
        938651
        651938
        389165
        516893
        893516
        165389
     """),
    (8, 6, "hard", """
        ..725.
        25..17
        .7.5..
        54..73
        ..1425
        42..3.
     """, """
        317254
        254317
        173542
        542173
        731425
        425731
     """),
    (9, 6, "hard", """
        ......
        9.4327
        .7384.
        8.92.3
        .3249.
        4.8.32
     """, """
        327984
        984327
        273849
        849273
        732498
        498732
     """),
    (10, 6, "hard", """
        ..2.56
        .567..
        ....45
        645...
        827564
        564.27
     """, """
        782456
        456782
        278645
        645278
        827564
        564827
     """),
    (11, 6, "hard", """
        .397..
        .2.139
        9.....
        47..13
        ..1247
        2473..
     """, """
        139724
        724139
        913472
        472913
        391247
        247391
     """),
    (12, 6, "hard", """
        ..4.57
        85...4
        423.7.
        .8..4.
        3.2785
        5...23
     """, """
        234857
        857234
        423578
        785342
        342785
        578423
     """),
    (13, 6, "hard", """
        ..7924
        92..37
        3714..
        ...7.3
        7.324.
        4....1
     """, """
        137924
        924137
        371492
        249713
        713249
        492371
     """),
    (14, 6, "hard", """
        .493.8
        3.814.
        9..7..
        8.7.91
        ..18..
        7..914
     """, """
        149378
        378149
        914783
        837491
        491837
        783914
     """),
    (15, 6, "hard", """
        .596.8
        .78259
        9....6
        8.75.2
        59..6.
        78...5
     """, """
        259678
        678259
        925786
        867592
        592867
        786925
     """),
    (16, 6, "hard", """
        .39..4
        85..39
        91.485
        ...91.
        391548
        ..8...
     """, """
        139854
        854139
        913485
        485913
        391548
        548391
     """),
    (17, 6, "hard", """
        ....8.
        9.43.7
        .7384.
        8.92.3
        .3249.
        4.8.32
     """, """
        327984
        984327
        273849
        849273
        732498
        498732
     """),
    (18, 6, "hard", """
        .3.75.
        7.1..8
        .8.17.
        5.7..3
        82.51.
        175.82
     """, """
        238751
        751238
        382175
        517823
        823517
        175382
     """),
    (19, 6, "hard", """
        ..8.56
        7.69..
        .8..7.
        56.89.
        .92.67
        .752.9
     """, """
        928756
        756928
        289675
        567892
        892567
        675289
     """),
    (20, 6, "hard", """
        56.9.7
        9.75.3
        3562.9
        ......
        6.5792
        ..93.6
     """, """
        563927
        927563
        356279
        792635
        635792
        279356
     """),
    (21, 6, "hard", """
        9.31.2
        1...63
        6.....
        4.1396
        3.6.21
        .14..9
     """, """
        963142
        142963
        639214
        421396
        396421
        214639
     """),
]
