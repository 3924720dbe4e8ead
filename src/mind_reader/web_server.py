from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from loguru import logger
from pydantic import BaseModel

from mind_reader.config import configure_logging, load_config
from mind_reader.errors import (
    GameNotActive,
    GameNotFound,
    InvalidMoveSymbol,
    InvalidUsername,
    MindReaderError,
    PlayerNotAuthorized,
)
from mind_reader.game_logic import CHOICES
from mind_reader.game_manager import GameManager
from mind_reader.models import AIAnalysis, GameState, PlayerPattern


# ---------------- Request/Response models ----------------
class JoinRequest(BaseModel):
    player_id: str
    username: str = "Anonymous"


class MoveRequest(BaseModel):
    player_id: str
    choice: str


class Scores(BaseModel):
    player: int
    ai: int


class MoveResponse(BaseModel):
    correct: bool
    ai_choice: str
    winner: str
    scores: Scores
    pattern: PlayerPattern
    next_prediction: AIAnalysis


def _to_http(err: MindReaderError) -> HTTPException:
    if isinstance(err, GameNotFound):
        return HTTPException(status_code=404, detail=str(err))
    if isinstance(err, PlayerNotAuthorized):
        return HTTPException(status_code=403, detail=str(err))
    if isinstance(err, GameNotActive):
        return HTTPException(status_code=409, detail=str(err))
    if isinstance(err, (InvalidMoveSymbol, InvalidUsername)):
        return HTTPException(status_code=400, detail=str(err))
    return HTTPException(status_code=500, detail=str(err))


# ---------------- App init ----------------
def create_app(manager: Optional[GameManager] = None, cfg: Optional[dict] = None) -> FastAPI:
    cfg = cfg if cfg is not None else load_config()
    manager = manager or GameManager.from_config(cfg)
    app = FastAPI(title="Mind Reader RPS")
    app.state.manager = manager

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/api/config")
    def api_config():
        return {
            "choices": CHOICES,
            "rationale_model": str(cfg.get("rationale", {}).get("model", "")),
            "rationale_enabled": bool(cfg.get("rationale", {}).get("enabled", True)),
        }

    @app.post("/api/games", response_model=GameState)
    def create_game(req: JoinRequest):
        try:
            return manager.create_game(req.player_id, req.username)
        except MindReaderError as e:
            raise _to_http(e)

    @app.get("/api/games/{game_id}", response_model=GameState)
    def get_game(game_id: str):
        try:
            return manager.get_game(game_id)
        except MindReaderError as e:
            raise _to_http(e)

    @app.get("/api/games/{game_id}/prediction", response_model=AIAnalysis)
    def get_prediction(game_id: str, x_api_key: Optional[str] = Header(default=None)):
        try:
            return manager.get_ai_prediction(game_id, api_key=x_api_key)
        except MindReaderError as e:
            raise _to_http(e)

    @app.post("/api/games/{game_id}/moves", response_model=MoveResponse)
    def make_move(game_id: str, req: MoveRequest, x_api_key: Optional[str] = Header(default=None)):
        try:
            move = manager.make_move(game_id, req.player_id, req.choice, api_key=x_api_key)
            game = manager.get_game(game_id)
            pattern = manager.get_player_pattern(game_id)
            next_prediction = manager.get_ai_prediction(game_id, api_key=x_api_key)
        except MindReaderError as e:
            logger.info(f"Move rejected for game {game_id}: {e}")
            raise _to_http(e)
        return MoveResponse(
            correct=move.correct,
            ai_choice=move.ai_choice,
            winner=move.winner,
            scores=Scores(player=game.player_score, ai=game.ai_score),
            pattern=pattern,
            next_prediction=next_prediction,
        )

    @app.get("/api/games/{game_id}/pattern", response_model=PlayerPattern)
    def get_pattern(game_id: str):
        try:
            return manager.get_player_pattern(game_id)
        except MindReaderError as e:
            raise _to_http(e)

    @app.post("/api/games/{game_id}/end", response_model=GameState)
    def end_game(game_id: str):
        try:
            return manager.end_game(game_id)
        except MindReaderError as e:
            raise _to_http(e)

    @app.get("/api/stats")
    def stats():
        return manager.get_global_stats()

    return app


cfg = load_config()
configure_logging(cfg)
app = create_app(cfg=cfg)


if __name__ == "__main__":
    import uvicorn

    server_cfg = cfg.get("server", {})
    uvicorn.run(app, host=str(server_cfg.get("host", "127.0.0.1")), port=int(server_cfg.get("port", 8000)))
