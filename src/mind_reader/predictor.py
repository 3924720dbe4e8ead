import random
from typing import List, Optional

from loguru import logger

from mind_reader.ai_policy import Candidate, Strategy, default_strategies
from mind_reader.game_logic import counter_move
from mind_reader.models import AIAnalysis, PlayerPattern
from mind_reader.pattern_analyzer import round_half_up
from mind_reader.rationale import RationaleWriter

MAX_CONFIDENCE = 85
MIN_MOVES_FOR_ANALYSIS = 2
OPENING_GUESS = "rock"
OPENING_CONFIDENCE = 35
OPENING_REASON = "Most players start with rock. It's a classic opening move!"
NO_CANDIDATE = Candidate("rock", 0.33, "frequency")


class Predictor:
    """
    Runs every strategy against a PlayerPattern and keeps the highest scorer.
    Ties go to the earlier strategy: the scan only replaces on strict improvement.
    """

    def __init__(
        self,
        strategies: Optional[List[Strategy]] = None,
        rationale_writer: Optional[RationaleWriter] = None,
        rng: Optional[random.Random] = None,
    ):
        self.strategies = strategies if strategies is not None else default_strategies(rng)
        self.rationale_writer = rationale_writer or RationaleWriter(enabled=False)

    def candidates(self, pattern: PlayerPattern) -> List[Candidate]:
        out = []
        for strategy in self.strategies:
            cand = strategy.propose(pattern)
            if cand is not None:
                logger.debug(f"{strategy.name}: {cand.choice} score={cand.score:.3f} ({cand.pattern_type})")
                out.append(cand)
        return out

    @staticmethod
    def select(candidates: List[Candidate]) -> Candidate:
        best = candidates[0] if candidates else NO_CANDIDATE
        for cand in candidates:
            if cand.score > best.score:
                best = cand
        return best

    def predict_next_move(self, pattern: PlayerPattern, api_key: Optional[str] = None) -> AIAnalysis:
        if pattern.total_moves < MIN_MOVES_FOR_ANALYSIS:
            # first-move bias: most players open with rock
            return AIAnalysis(
                prediction=OPENING_GUESS,
                confidence=OPENING_CONFIDENCE,
                reasoning=OPENING_REASON,
                pattern_type="psychological",
            )

        best = self.select(self.candidates(pattern))
        confidence = min(round_half_up(best.score * 100), MAX_CONFIDENCE)
        reasoning = self.rationale_writer.write(pattern, best.pattern_type, best.choice, api_key=api_key)
        return AIAnalysis(
            prediction=best.choice,
            confidence=confidence,
            reasoning=reasoning,
            pattern_type=best.pattern_type,
        )


def choose_ai_move(analysis: AIAnalysis) -> str:
    """The AI plays whatever beats the predicted move."""
    return counter_move(analysis.prediction)
