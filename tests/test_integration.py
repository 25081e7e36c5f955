"""
Integration test suite for the Neon Conquest engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine, engine vs scripted)
- Parallel root search agreeing with the serial search
- FastAPI REST API integration
- Command-line front end
"""

import json
import random
from unittest.mock import patch

import pytest

from conquest.config import GameSettings, SearchConfig
from conquest.core.board import (
    AI,
    EMPTY,
    HUMAN,
    Board,
    apply_move,
    compute_score,
    create_empty_board,
    is_legal_move,
    is_terminal,
    winner,
)
from conquest.core.search import SearchEngine
from conquest.main import Game


def mirrored(board):
    """Swap the two sides so the engine can play the human's moves."""
    swap = {HUMAN: AI, AI: HUMAN, EMPTY: EMPTY}
    return Board.from_rows([[swap[cell] for cell in row] for row in board.cells])


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE — FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Tests that the engine can play complete games without crashing."""

    @pytest.mark.parametrize("diagonals", [False, True])
    def test_engine_vs_engine_completes(self, diagonals):
        engine = SearchEngine(config=SearchConfig(log_info=False))
        board = create_empty_board(4)
        side = HUMAN
        moves = 0
        while not is_terminal(board):
            if side == AI:
                move = engine.select_best_move(board, "medium", diagonals)
            else:
                move = engine.select_best_move(mirrored(board), "easy", diagonals)
            assert is_legal_move(board, *move)
            board = apply_move(board, move[0], move[1], side, diagonals)
            side = AI if side == HUMAN else HUMAN
            moves += 1

        assert moves == 16
        score = compute_score(board)
        assert score.human + score.ai == 16
        assert winner(board) in (HUMAN, AI, "draw")

    def test_game_session_against_random_player(self):
        rng = random.Random(42)
        game = Game(
            GameSettings(board_size=5, difficulty="easy", include_diagonals=True),
            SearchEngine(config=SearchConfig(log_info=False)),
        )
        while not game.is_over():
            game.play_human(*rng.choice(list(game.board.empty_cells())))
            game.play_ai()
        score = game.score()
        assert score.human + score.ai == 25
        assert game.winner == winner(game.board)
        assert game.turn is None

    def test_large_board_hard_search_is_capped(self):
        engine = SearchEngine(config=SearchConfig(log_info=False))
        rng = random.Random(1)
        rows = [[rng.choice((HUMAN, AI)) for _ in range(7)] for _ in range(7)]
        for r, c in rng.sample([(r, c) for r in range(7) for c in range(7)], 8):
            rows[r][c] = EMPTY
        result = engine.search(Board.from_rows(rows), "hard", True)
        assert result.depth == 2
        assert result.move is not None
        # 8 root children, each with 7 replies, each with 6 answers
        assert result.nodes == 8 + 8 * 7 + 8 * 7 * 6


# ════════════════════════════════════════════════════════════════════════════
#  PARALLEL ROOT SEARCH
# ════════════════════════════════════════════════════════════════════════════


class TestParallelSearch:
    """Process-pool root enumeration must reproduce the serial answer exactly."""

    @pytest.mark.parametrize("diagonals", [False, True])
    def test_parallel_matches_serial(self, diagonals):
        serial = SearchEngine(config=SearchConfig(workers=1, log_info=False))
        parallel = SearchEngine(config=SearchConfig(workers=3, log_info=False))
        rng = random.Random(9)
        for _ in range(3):
            rows = [[rng.choice((HUMAN, AI, EMPTY)) for _ in range(4)] for _ in range(4)]
            board = Board.from_rows(rows)
            a = serial.search(board, "medium", diagonals)
            b = parallel.search(board, "medium", diagonals)
            assert (a.move, a.score, a.nodes) == (b.move, b.score, b.nodes)

    def test_parallel_keeps_row_major_tie_break(self):
        parallel = SearchEngine(config=SearchConfig(workers=4, log_info=False))
        assert parallel.select_best_move(create_empty_board(3), "easy", False) == (0, 0)

    def test_parallel_single_move_runs_serially(self):
        parallel = SearchEngine(config=SearchConfig(workers=4, log_info=False))
        board = Board.from_rows([[HUMAN, AI], [AI, EMPTY]])
        with patch("conquest.core.search.ProcessPoolExecutor") as pool:
            assert parallel.select_best_move(board, "hard", False) == (1, 1)
        pool.assert_not_called()


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app

        self.client = TestClient(app)
        response = self.client.post("/game/reset", json={"boardSize": 3, "difficulty": "easy"})
        assert response.status_code == 200

    def test_ai_move_full_board_is_null(self):
        board = [["human", "ai"], ["ai", "human"]]
        response = self.client.post("/api/ai", json={"board": board, "difficulty": "hard", "includeDiagonals": False})
        assert response.status_code == 200
        assert response.json() == {"move": None}

    def test_ai_move_returns_coordinates(self):
        board = [["human", "human"], ["human", None]]
        response = self.client.post("/api/ai", json={"board": board, "difficulty": "easy", "includeDiagonals": True})
        assert response.status_code == 200
        assert response.json() == {"move": {"r": 1, "c": 1}}

    def test_ai_move_invalid_difficulty(self):
        response = self.client.post("/api/ai", json={"board": [[None]], "difficulty": "godlike"})
        assert response.status_code == 400
        assert "godlike" in response.json()["detail"]

    def test_ai_move_jagged_board(self):
        response = self.client.post("/api/ai", json={"board": [[None, None], [None]], "difficulty": "easy"})
        assert response.status_code == 400

    def test_ai_move_unknown_token(self):
        response = self.client.post("/api/ai", json={"board": [["robot"]], "difficulty": "easy"})
        assert response.status_code == 422

    def test_apply_diagonal_capture(self):
        board = [[None, None, None], [None, "human", None], [None, None, None]]
        body = {"board": board, "row": 0, "col": 0, "side": "ai", "includeDiagonals": True}
        response = self.client.post("/api/apply", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["board"][0][0] == "ai"
        assert data["board"][1][1] == "ai"
        assert data["score"] == {"human": 0, "ai": 2}
        assert data["isGameOver"] is False

    def test_apply_orthogonal_leaves_diagonal(self):
        board = [[None, None, None], [None, "human", None], [None, None, None]]
        body = {"board": board, "row": 0, "col": 0, "side": "ai", "includeDiagonals": False}
        data = self.client.post("/api/apply", json=body).json()
        assert data["board"][1][1] == "human"

    def test_apply_occupied_returns_400(self):
        body = {"board": [["human"]], "row": 0, "col": 0, "side": "ai"}
        response = self.client.post("/api/apply", json=body)
        assert response.status_code == 400

    def test_apply_out_of_bounds_returns_400(self):
        body = {"board": [[None]], "row": 1, "col": 0, "side": "human"}
        assert self.client.post("/api/apply", json=body).status_code == 400

    def test_get_game_initial(self):
        data = self.client.get("/game").json()
        assert data["board"] == [[None] * 3 for _ in range(3)]
        assert data["turn"] == "human"
        assert data["winner"] is None
        assert data["lastMove"] is None
        assert json.loads(data["settings"])["board_size"] == 3

    def test_game_move_gets_ai_reply(self):
        response = self.client.post("/game/move", json={"row": 1, "col": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "human"
        assert data["lastMove"] is not None
        assert data["score"]["human"] + data["score"]["ai"] >= 2

    def test_game_move_illegal(self):
        self.client.post("/game/move", json={"row": 0, "col": 0})
        response = self.client.post("/game/move", json={"row": 0, "col": 0})
        assert response.status_code == 400
        assert self.client.post("/game/move", json={"row": 9, "col": 9}).status_code == 400

    def test_reset_ai_first(self):
        response = self.client.post(
            "/game/reset", json={"boardSize": 4, "difficulty": "easy", "firstPlayer": "ai", "includeDiagonals": True}
        )
        data = response.json()
        assert data["turn"] == "human"
        assert data["score"] == {"human": 0, "ai": 1}
        assert data["lastMove"] is not None

    def test_reset_invalid_settings(self):
        assert self.client.post("/game/reset", json={"difficulty": "brutal"}).status_code == 400
        assert self.client.post("/game/reset", json={"theme": "pastel"}).status_code == 400
        assert self.client.post("/game/reset", json={"boardSize": 0}).status_code == 422

    def test_reset_without_body_keeps_settings(self):
        self.client.post("/game/move", json={"row": 0, "col": 0})
        data = self.client.post("/game/reset").json()
        assert data["board"] == [[None] * 3 for _ in range(3)]

    def test_full_api_game_flow(self):
        for _ in range(9):
            state = self.client.get("/game").json()
            if state["isGameOver"]:
                break
            r, c = next((r, c) for r in range(3) for c in range(3) if state["board"][r][c] is None)
            assert self.client.post("/game/move", json={"row": r, "col": c}).status_code == 200
        state = self.client.get("/game").json()
        assert state["isGameOver"] is True
        assert state["winner"] in ("human", "ai", "draw")
        assert state["turn"] is None


# ════════════════════════════════════════════════════════════════════════════
#  COMMAND-LINE FRONT END
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def run(self, argv, inputs):
        from interface import cli

        with patch("builtins.input", side_effect=inputs):
            return cli.main(argv)

    def test_one_cell_game(self, capsys):
        assert self.run(["--size", "1", "--difficulty", "easy"], ["0 0"]) == 0
        out = capsys.readouterr().out
        assert "Game over. You win! (1-0)" in out

    def test_ai_first(self, capsys):
        assert self.run(["--size", "3", "--difficulty", "easy", "--ai-first"], ["q"]) == 0
        assert "AI plays 0 0" in capsys.readouterr().out

    def test_bad_input_and_help(self, capsys):
        assert self.run(["--size", "3", "--difficulty", "easy"], ["hello", "h", "7 7", "--1 0", "\u00b2 1", "1 2 3", "q"]) == 0
        out = capsys.readouterr().out
        assert "Please enter a row and a column" in out
        assert "Enter 'row col'" in out
        assert "Illegal move" in out
        assert out.count("Please enter a row and a column") == 4

    def test_eof_quits(self):
        assert self.run(["--size", "3"], EOFError()) == 0

    def test_invalid_size(self, capsys):
        assert self.run(["--size", "0"], []) == 2
        assert "Invalid settings" in capsys.readouterr().out

    def test_settings_file_saved(self, tmp_path):
        path = tmp_path / "settings.json"
        assert self.run(["--settings", str(path), "--save", "--size", "4", "--diagonals"], ["q"]) == 0
        saved = GameSettings.load(str(path))
        assert saved.board_size == 4
        assert saved.include_diagonals is True

    def test_settings_file_loaded(self, tmp_path, capsys):
        path = tmp_path / "settings.json"
        path.write_text('{"boardSize": 1, "difficulty": "hard", "firstPlayer": "ai"}')
        assert self.run(["--settings", str(path)], []) == 0
        assert "Game over. AI wins (0-1)" in capsys.readouterr().out
