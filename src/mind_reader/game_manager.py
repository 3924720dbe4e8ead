import random
import uuid
from typing import Optional

from loguru import logger

from mind_reader.analysis_cache import AnalysisCache
from mind_reader.errors import (
    GameNotActive,
    GameNotFound,
    InvalidUsername,
    PlayerNotAuthorized,
)
from mind_reader.game_logic import counter_move, determine_winner, validate_choice
from mind_reader.models import AIAnalysis, GameState, Move, PlayerPattern
from mind_reader.pattern_analyzer import analyze_pattern, generate_pattern_hash
from mind_reader.predictor import Predictor
from mind_reader.rationale import RationaleWriter
from mind_reader.session_store import InMemoryGameStore

USERNAME_MIN, USERNAME_MAX = 3, 20


class GameManager:
    """
    Turns player moves into recorded rounds and serves predictions for live games.
    Credentials for the rationale service are passed per call, never stored.
    """

    def __init__(
        self,
        predictor: Optional[Predictor] = None,
        store: Optional[InMemoryGameStore] = None,
        cache: Optional[AnalysisCache] = None,
    ):
        self.predictor = predictor or Predictor()
        self.store = store if store is not None else InMemoryGameStore()
        self.cache = cache if cache is not None else AnalysisCache()
        self.metrics = {"total_moves": 0, "ai_correct_predictions": 0}

    @classmethod
    def from_config(cls, cfg: dict) -> "GameManager":
        seed = cfg.get("ai", {}).get("seed")
        predictor = Predictor(
            rationale_writer=RationaleWriter.from_config(cfg),
            rng=random.Random(seed) if seed is not None else None,
        )
        return cls(
            predictor=predictor,
            store=InMemoryGameStore(ttl_seconds=int(cfg.get("sessions", {}).get("ttl_seconds", 3600))),
            cache=AnalysisCache(ttl_seconds=int(cfg.get("cache", {}).get("ttl_seconds", 300))),
        )

    def create_game(self, player_id: str, username: str = "Anonymous") -> GameState:
        username = (username or "").strip()
        if not (USERNAME_MIN <= len(username) <= USERNAME_MAX):
            raise InvalidUsername(f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters")
        state = GameState(
            game_id=uuid.uuid4().hex,
            player_id=player_id,
            username=username,
            status="playing",
        )
        self.store.create(state)
        logger.info(f"Player {player_id} ({username}) joined game {state.game_id}")
        return state

    def get_game(self, game_id: str) -> GameState:
        state = self.store.get(game_id)
        if state is None:
            raise GameNotFound(game_id)
        return state

    def _active_game(self, game_id: str) -> GameState:
        game = self.get_game(game_id)
        if game.status != "playing":
            raise GameNotActive(game_id, game.status)
        return game

    def get_player_pattern(self, game_id: str) -> PlayerPattern:
        return analyze_pattern(self.get_game(game_id).moves)

    def get_ai_prediction(self, game_id: str, api_key: Optional[str] = None) -> AIAnalysis:
        game = self._active_game(game_id)
        pattern = analyze_pattern(game.moves)
        pattern_hash = generate_pattern_hash(pattern)

        analysis = self.cache.get(pattern_hash)
        if analysis is None:
            analysis = self.predictor.predict_next_move(pattern, api_key=api_key)
            self.cache.put(pattern_hash, analysis)

        game.pending_analysis = analysis
        self.store.save(game)
        return analysis

    def process_move(
        self,
        game_id: str,
        player_id: str,
        choice: str,
        ai_prediction: str,
        ai_confidence: int,
    ) -> Move:
        game = self._active_game(game_id)
        if game.player_id != player_id:
            raise PlayerNotAuthorized(game_id, player_id)
        choice = validate_choice(choice)
        ai_prediction = validate_choice(ai_prediction)

        ai_choice = counter_move(ai_prediction)
        move = Move(
            player_id=player_id,
            choice=choice,
            ai_prediction=ai_prediction,
            ai_choice=ai_choice,
            ai_confidence=int(ai_confidence),
            correct=ai_prediction == choice,
            winner=determine_winner(choice, ai_choice),
        )

        # Scores follow the round winner, not prediction accuracy
        if move.winner == "ai":
            game.ai_score += 1
            game.current_streak = 0
        elif move.winner == "player":
            game.player_score += 1
            game.current_streak += 1

        game.moves.append(move)
        # any analysis shown before this round no longer describes the history
        game.pending_analysis = None
        self.store.save(game)

        self.metrics["total_moves"] += 1
        if move.correct:
            self.metrics["ai_correct_predictions"] += 1
        return move

    def make_move(self, game_id: str, player_id: str, choice: str, api_key: Optional[str] = None) -> Move:
        """Play a round against the prediction that was in effect before the reveal."""
        game = self._active_game(game_id)
        analysis = game.pending_analysis or self.get_ai_prediction(game_id, api_key=api_key)
        return self.process_move(game_id, player_id, choice, analysis.prediction, analysis.confidence)

    def end_game(self, game_id: str) -> GameState:
        game = self.get_game(game_id)
        game.status = "finished"
        game.pending_analysis = None
        pattern = analyze_pattern(game.moves)
        logger.info(
            f"Game {game_id} finished: player {game.player_score} - ai {game.ai_score} "
            f"over {pattern.total_moves} moves, randomness={pattern.randomness_score}"
        )
        self.store.evict(game_id)
        return game

    def get_global_stats(self) -> dict:
        total = self.metrics["total_moves"]
        correct = self.metrics["ai_correct_predictions"]
        return {
            "total_moves": total,
            "ai_accuracy": (correct / total) * 100 if total > 0 else 0.0,
        }
