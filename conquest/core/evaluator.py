"""Static evaluation used at the leaves of the search."""

from conquest.core.board import Board, compute_score


class Evaluator:
    def evaluate(self, board: Board) -> int:
        """Tile differential, positive favors the automated side."""
        score = compute_score(board)
        return score.ai - score.human
