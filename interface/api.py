"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from conquest.config import CONFIG, GameSettings
from conquest.core.board import Board, apply_move, compute_score, is_terminal
from conquest.core.errors import EngineError
from conquest.core.search import SearchEngine
from conquest.core.utils import configure_logging
from conquest.main import Game

configure_logging(CONFIG.log_level)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

engine = SearchEngine()
game = Game(engine=engine)
_game_lock = threading.Lock()

CellToken = Optional[Literal["human", "ai"]]


class AIMoveRequest(BaseModel):
    board: List[List[CellToken]]
    difficulty: str
    includeDiagonals: bool = False


class ApplyRequest(BaseModel):
    board: List[List[CellToken]]
    row: int
    col: int
    side: Literal["human", "ai"]
    includeDiagonals: bool = False


class MoveRequest(BaseModel):
    row: int
    col: int


class SettingsRequest(BaseModel):
    boardSize: int = Field(default=5, ge=1)
    difficulty: str = "medium"
    firstPlayer: Literal["human", "ai"] = "human"
    includeDiagonals: bool = False
    theme: str = "neon"


def _board_state(board: Board) -> dict:
    score = compute_score(board)
    return {
        "board": board.to_rows(),
        "score": {"human": score.human, "ai": score.ai},
        "isGameOver": is_terminal(board),
    }


def _game_state() -> dict:
    state = _board_state(game.board)
    last = game.last_move
    state.update(
        {
            "turn": game.turn,
            "winner": game.winner,
            "lastMove": {"r": last[0], "c": last[1]} if last else None,
            "settings": game.settings.to_json(),
        }
    )
    return state


@app.post("/api/ai")
def ai_move(req: AIMoveRequest):
    try:
        board = Board.from_rows(req.board)
        move = engine.select_best_move(board, req.difficulty, req.includeDiagonals)
    except EngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"move": {"r": move[0], "c": move[1]} if move else None}


@app.post("/api/apply")
def apply(req: ApplyRequest):
    try:
        board = Board.from_rows(req.board)
        new_board = apply_move(board, req.row, req.col, req.side, req.includeDiagonals)
    except EngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _board_state(new_board)


@app.get("/game")
def get_game():
    with _game_lock:
        return _game_state()


@app.post("/game/move")
def make_move(req: MoveRequest):
    with _game_lock:
        try:
            game.play_human(req.row, req.col)
            game.play_ai()
        except EngineError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state()


@app.post("/game/reset")
def reset_game(req: Optional[SettingsRequest] = None):
    with _game_lock:
        try:
            settings = GameSettings.from_dict(req.model_dump()) if req else None
            game.reset(settings)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=CONFIG.ui.api_host, port=CONFIG.ui.api_port)
