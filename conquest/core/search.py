import logging
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

from conquest.config import CONFIG, SearchConfig
from conquest.core.board import AI, HUMAN, Board, Move, apply_move, is_terminal
from conquest.core.errors import InvalidDifficulty
from conquest.core.evaluator import Evaluator
from conquest.core.utils import format_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    move: Optional[Move]
    score: Optional[int]
    depth: int
    nodes: int
    elapsed_ms: int


def resolve_depth(difficulty: str, size: int, config: Optional[SearchConfig] = None) -> int:
    """Depth bound for ``difficulty``, clamped by each size cap in turn."""
    cfg = config or CONFIG.search
    if not isinstance(difficulty, str) or difficulty not in cfg.difficulty_depths:
        raise InvalidDifficulty(f"unknown difficulty {difficulty!r}")
    depth = cfg.difficulty_depths[difficulty]
    for min_size, max_depth in cfg.size_caps:
        if size >= min_size and depth > max_depth:
            depth = max_depth
    return depth


def _score_root_in_worker(
    evaluator: Evaluator, board: Board, move: Move, depth: int, include_diagonals: bool
) -> Tuple[int, int]:
    return SearchEngine(evaluator)._score_root_move(board, move, depth, include_diagonals)


class SearchEngine:
    """Fixed-depth minimax over every empty cell, without pruning.

    The automated side (``"ai"``) maximizes ``evaluator.evaluate``; the human
    side minimizes it. Root ties go to the first move in row-major order.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, config: Optional[SearchConfig] = None):
        self.evaluator = evaluator or Evaluator()
        self.config = config or CONFIG.search
        self.nodes = 0

    def resolve_depth(self, difficulty: str, size: int) -> int:
        return resolve_depth(difficulty, size, self.config)

    def select_best_move(self, board: Board, difficulty: str, include_diagonals: bool) -> Optional[Move]:
        return self.search(board, difficulty, include_diagonals).move

    def search(self, board: Board, difficulty: str, include_diagonals: bool) -> SearchResult:
        depth = self.resolve_depth(difficulty, board.size)
        start_time = time.time()

        moves = list(board.empty_cells())
        if self.config.workers > 1 and len(moves) > 1:
            results = self._score_parallel(board, moves, depth, include_diagonals)
        else:
            results = [self._score_root_move(board, m, depth, include_diagonals) for m in moves]

        nodes = sum(n for _, n in results)
        best_move = None
        best_score = None
        for move, (score, _) in zip(moves, results):
            if best_score is None or score > best_score:
                best_score = score
                best_move = move

        elapsed = time.time() - start_time
        self.nodes = nodes
        level = logging.INFO if self.config.log_info else logging.DEBUG
        logger.log(level, format_info(depth, best_score, nodes, elapsed, best_move))
        return SearchResult(best_move, best_score, depth, nodes, int(elapsed * 1000))

    def _score_parallel(
        self, board: Board, moves: List[Move], depth: int, include_diagonals: bool
    ) -> List[Tuple[int, int]]:
        # Futures are read back in submission order so tie-breaks match the serial scan.
        with ProcessPoolExecutor(max_workers=min(self.config.workers, len(moves))) as pool:
            futures = [
                pool.submit(_score_root_in_worker, self.evaluator, board, move, depth, include_diagonals)
                for move in moves
            ]
            return [f.result() for f in futures]

    def _score_root_move(self, board: Board, move: Move, depth: int, include_diagonals: bool) -> Tuple[int, int]:
        child = apply_move(board, move[0], move[1], AI, include_diagonals)
        return self._minimax(child, depth, False, include_diagonals)

    def _minimax(self, board: Board, depth: int, maximizing: bool, include_diagonals: bool) -> Tuple[int, int]:
        """Return ``(value, nodes visited)`` for ``board``."""
        if depth == 0 or is_terminal(board):
            return self.evaluator.evaluate(board), 1

        side = AI if maximizing else HUMAN
        nodes = 1
        best = None
        for r, c in board.empty_cells():
            value, n = self._minimax(
                apply_move(board, r, c, side, include_diagonals), depth - 1, not maximizing, include_diagonals
            )
            nodes += n
            if best is None or (value > best if maximizing else value < best):
                best = value
        return best, nodes


def select_best_move(board: Board, difficulty: str, include_diagonals: bool) -> Optional[Move]:
    return SearchEngine().select_best_move(board, difficulty, include_diagonals)
