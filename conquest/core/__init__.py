"""Core engine components: board snapshots, transitions, evaluation and errors.

The search engine lives in :mod:`conquest.core.search`; it is not re-exported
here because it depends on :mod:`conquest.config`, which imports these errors.
"""

from .board import (
    AI,
    EMPTY,
    HUMAN,
    Board,
    Score,
    apply_move,
    compute_score,
    create_empty_board,
    is_legal_move,
    is_terminal,
    winner,
)
from .errors import EngineError, IllegalMove, InvalidCell, InvalidDifficulty, InvalidSize
from .evaluator import Evaluator
