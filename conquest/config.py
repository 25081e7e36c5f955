# conquest/config.py
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple
import json
import os
import tomllib

from conquest.core.errors import InvalidDifficulty, InvalidSize

DIFFICULTY_DEPTHS = {
    "easy": 1,
    "medium": 3,
    "hard": 4,
}

# (min board size, max depth), applied in order so later caps win
SIZE_CAPS = [(6, 3), (7, 2)]

THEMES = ("neon", "toxic", "sunset")
FIRST_PLAYERS = ("human", "ai")

# browser blob keys -> field names
_CAMEL_KEYS = {
    "boardSize": "board_size",
    "firstPlayer": "first_player",
    "includeDiagonals": "include_diagonals",
}


@dataclass
class SearchConfig:
    difficulty_depths: Dict[str, int] = field(default_factory=lambda: DIFFICULTY_DEPTHS.copy())
    size_caps: List[Tuple[int, int]] = field(default_factory=lambda: list(SIZE_CAPS))
    workers: int = 1  # >1 evaluates root moves in a process pool
    log_info: bool = True


@dataclass
class GameSettings:
    board_size: int = 5
    difficulty: str = "medium"
    first_player: str = "human"
    include_diagonals: bool = False
    theme: str = "neon"

    def validate(self) -> "GameSettings":
        if isinstance(self.board_size, bool) or not isinstance(self.board_size, int) or self.board_size < 1:
            raise InvalidSize(f"board size must be a positive integer, got {self.board_size!r}")
        if self.difficulty not in DIFFICULTY_DEPTHS:
            raise InvalidDifficulty(f"unknown difficulty {self.difficulty!r}")
        if self.first_player not in FIRST_PLAYERS:
            raise ValueError(f"first player must be one of {FIRST_PLAYERS}, got {self.first_player!r}")
        if self.theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {self.theme!r}")
        self.include_diagonals = bool(self.include_diagonals)
        return self

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GameSettings":
        settings = cls()
        for k, v in raw.items():
            k = _CAMEL_KEYS.get(k, k)
            if hasattr(settings, k):
                setattr(settings, k, v)
        return settings.validate()

    @classmethod
    def from_json(cls, blob: str) -> "GameSettings":
        raw = json.loads(blob)
        if not isinstance(raw, dict):
            raise ValueError("settings blob must be a JSON object")
        return cls.from_dict(raw)

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())

    @classmethod
    def load(cls, path: str) -> "GameSettings":
        if not os.path.exists(path):
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_json(f.read())


@dataclass
class UIConfig:
    engine_name: str = "Neon Conquest"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    game: GameSettings = field(default_factory=GameSettings)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "game", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        # TOML arrays come back as lists
        cfg.search.size_caps = [tuple(cap) for cap in cfg.search.size_caps]
        cfg.game.validate()
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CONQUEST_CONFIG_TOML", "config.toml"))

override_workers = os.environ.get("CONQUEST_SEARCH_WORKERS")
if override_workers:
    CONFIG.search.workers = int(override_workers)
override_level = os.environ.get("CONQUEST_LOG_LEVEL")
if override_level:
    CONFIG.log_level = override_level
