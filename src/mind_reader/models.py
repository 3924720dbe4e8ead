import time
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Choice = Literal["rock", "paper", "scissors"]
Winner = Literal["player", "ai", "tie"]
PatternType = Literal["frequency", "sequential", "complex", "meta", "psychological"]
GameStatus = Literal["waiting", "playing", "finished"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class Move(BaseModel):
    """One recorded turn. Created once by the game manager and never mutated."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    choice: Choice
    timestamp: int = Field(default_factory=_now_ms)
    ai_prediction: Choice
    ai_choice: Choice  # what the AI actually played
    ai_confidence: int
    correct: bool  # whether the prediction matched the player's choice
    winner: Winner


class PlayerPattern(BaseModel):
    frequencies: Dict[str, int]
    transitions: Dict[str, Dict[str, int]]
    streaks: Dict[str, int]
    total_moves: int
    last_moves: List[str]
    # Historical name: this is the fraction of moves the AI predicted wrongly,
    # not the player's round-win rate.
    win_rate: float
    randomness_score: int


class AIAnalysis(BaseModel):
    prediction: Choice
    confidence: int
    reasoning: str
    pattern_type: PatternType


class GameState(BaseModel):
    game_id: str
    player_id: str
    username: str = "Anonymous"
    player_score: int = 0
    ai_score: int = 0
    moves: List[Move] = Field(default_factory=list)
    current_streak: int = 0
    game_start_time: int = Field(default_factory=_now_ms)
    status: GameStatus = "waiting"
    # prediction shown to the player before their next choice is revealed
    pending_analysis: Optional[AIAnalysis] = None
