import logging
from dataclasses import replace
from typing import Optional

from conquest.config import CONFIG, GameSettings
from conquest.core.board import (
    AI,
    HUMAN,
    Board,
    Move,
    Score,
    apply_move,
    compute_score,
    create_empty_board,
    is_legal_move,
    is_terminal,
    winner,
)
from conquest.core.errors import IllegalMove
from conquest.core.search import SearchEngine

logger = logging.getLogger(__name__)


class Game:
    """One in-memory game between a human and the search engine."""

    def __init__(self, settings: Optional[GameSettings] = None, engine: Optional[SearchEngine] = None):
        self.engine = engine or SearchEngine()
        self.reset(settings)

    def reset(self, settings: Optional[GameSettings] = None):
        """Start over on an empty board; the AI plays at once if it moves first."""
        if settings is not None:
            self.settings = settings.validate()
        elif not hasattr(self, "settings"):
            self.settings = replace(CONFIG.game).validate()
        self.board: Board = create_empty_board(self.settings.board_size)
        self.winner: Optional[str] = None
        self.last_move: Optional[Move] = None
        self.turn = self.settings.first_player
        if self.turn == AI:
            self.play_ai()

    def play_human(self, row: int, col: int) -> Board:
        if self.winner is not None:
            raise IllegalMove("game is already over")
        if self.turn != HUMAN:
            raise IllegalMove("it is not the human's turn")
        if not is_legal_move(self.board, row, col):
            raise IllegalMove(f"({row}, {col}) is not an empty cell on the board")
        self._apply(row, col, HUMAN)
        return self.board

    def play_ai(self) -> Optional[Move]:
        if self.winner is not None or self.turn != AI:
            return None
        move = self.engine.select_best_move(self.board, self.settings.difficulty, self.settings.include_diagonals)
        if move is None:
            return None
        self._apply(move[0], move[1], AI)
        return move

    def _apply(self, row: int, col: int, side: str):
        self.board = apply_move(self.board, row, col, side, self.settings.include_diagonals)
        self.last_move = (row, col)
        if is_terminal(self.board):
            self.winner = winner(self.board)
            self.turn = None
            logger.info("game over: %s (%s)", self.winner, self.score())
        else:
            self.turn = AI if side == HUMAN else HUMAN

    def score(self) -> Score:
        return compute_score(self.board)

    def is_over(self) -> bool:
        return self.winner is not None

    def render(self) -> str:
        return self.board.render()
