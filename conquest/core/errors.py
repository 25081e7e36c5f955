"""Exceptions raised by the board and search engines."""


class EngineError(ValueError):
    """Base class for deterministic engine failures (never retried)."""


class InvalidSize(EngineError):
    pass


class IllegalMove(EngineError):
    pass


class InvalidDifficulty(EngineError):
    pass


class InvalidCell(EngineError):
    pass
