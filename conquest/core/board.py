"""Immutable board snapshots and the pure state-transition functions.

A board is a square grid whose cells hold ``None`` (empty), ``"human"`` or
``"ai"``. Every transition returns a new :class:`Board`; nothing here ever
mutates a board once it has been built.
"""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from conquest.core.errors import IllegalMove, InvalidCell, InvalidSize

HUMAN = "human"
AI = "ai"
EMPTY = None
SIDES = (HUMAN, AI)

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

SYMBOLS = {EMPTY: ".", HUMAN: "H", AI: "A"}

Cell = Optional[str]
Move = Tuple[int, int]


class Score(NamedTuple):
    human: int
    ai: int


@dataclass(frozen=True)
class Board:
    cells: Tuple[Tuple[Cell, ...], ...]

    def __post_init__(self):
        size = len(self.cells)
        if size < 1:
            raise InvalidSize("board must have at least one row")
        for r, row in enumerate(self.cells):
            if len(row) != size:
                raise InvalidSize(f"row {r} has {len(row)} cells, expected {size}")

    @property
    def size(self) -> int:
        return len(self.cells)

    def __getitem__(self, pos: Move) -> Cell:
        row, col = pos
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        if not all(isinstance(i, int) and not isinstance(i, bool) for i in (row, col)):
            return False
        return 0 <= row < self.size and 0 <= col < self.size

    def empty_cells(self) -> Iterator[Move]:
        """Yield empty coordinates in row-major order (top-to-bottom, left-to-right)."""
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell is EMPTY:
                    yield r, c

    def to_rows(self) -> List[List[Cell]]:
        """Wire form: a list of rows of ``None`` / ``"human"`` / ``"ai"``."""
        return [list(row) for row in self.cells]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> "Board":
        """Build a board from its wire form, rejecting empty, jagged or unknown grids."""
        cells = []
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if cell is not EMPTY and cell not in SIDES:
                    raise InvalidCell(f"unknown cell {cell!r} at ({r}, {c})")
            cells.append(tuple(row))
        return cls(tuple(cells))

    def render(self) -> str:
        """ASCII grid with row and column indices."""
        header = "   " + " ".join(str(c) for c in range(self.size))
        lines = [header]
        for r, row in enumerate(self.cells):
            lines.append(f"{r:>2} " + " ".join(SYMBOLS[cell] for cell in row))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def other_side(side: str) -> str:
    if side == HUMAN:
        return AI
    if side == AI:
        return HUMAN
    raise IllegalMove(f"unknown side {side!r}")


def neighbor_offsets(include_diagonals: bool) -> Tuple[Move, ...]:
    return ORTHOGONAL + DIAGONAL if include_diagonals else ORTHOGONAL


def create_empty_board(n: int) -> Board:
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidSize(f"board size must be a positive integer, got {n!r}")
    return Board(tuple((EMPTY,) * n for _ in range(n)))


def is_legal_move(board: Board, row: int, col: int) -> bool:
    return board.in_bounds(row, col) and board.cells[row][col] is EMPTY


def apply_move(board: Board, row: int, col: int, side: str, include_diagonals: bool) -> Board:
    """Place ``side`` at (row, col) and flip adjacent opposing tiles.

    Only the direct neighbours of the placed tile are examined; tiles flipped
    by this move never flip anything themselves.
    """
    opponent = other_side(side)
    if not board.in_bounds(row, col):
        raise IllegalMove(f"({row}, {col}) is outside a {board.size}x{board.size} board")
    if board.cells[row][col] is not EMPTY:
        raise IllegalMove(f"({row}, {col}) is already occupied")

    grid = [list(r) for r in board.cells]
    grid[row][col] = side
    for dr, dc in neighbor_offsets(include_diagonals):
        nr, nc = row + dr, col + dc
        if board.in_bounds(nr, nc) and grid[nr][nc] == opponent:
            grid[nr][nc] = side  # capture
    return Board(tuple(tuple(r) for r in grid))


def compute_score(board: Board) -> Score:
    human = ai = 0
    for row in board.cells:
        for cell in row:
            if cell == HUMAN:
                human += 1
            elif cell == AI:
                ai += 1
    return Score(human, ai)


def is_terminal(board: Board) -> bool:
    return all(cell is not EMPTY for row in board.cells for cell in row)


def winner(board: Board) -> Optional[str]:
    """``"human"``, ``"ai"`` or ``"draw"`` for a finished board, otherwise None."""
    if not is_terminal(board):
        return None
    score = compute_score(board)
    if score.human > score.ai:
        return HUMAN
    if score.ai > score.human:
        return AI
    return "draw"
