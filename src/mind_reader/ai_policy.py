import random
from typing import NamedTuple, Optional

from mind_reader.game_logic import CHOICES
from mind_reader.models import PlayerPattern

ROTATIONS = {
    ("rock", "paper", "scissors"): "rock",
    ("scissors", "rock", "paper"): "scissors",
}


class Candidate(NamedTuple):
    choice: str
    score: float
    pattern_type: str


class Strategy:
    """A heuristic that may propose the player's next move from a pattern."""

    name = "base"

    def propose(self, pattern: PlayerPattern) -> Optional[Candidate]:
        raise NotImplementedError


class FrequencyStrategy(Strategy):
    """Predict the player's favourite move."""

    name = "frequency"

    def propose(self, pattern):
        # max() keeps the first maximum, so ties resolve rock -> paper -> scissors
        favourite = max(CHOICES, key=lambda c: pattern.frequencies.get(c, 0))
        return Candidate(favourite, 0.3, "frequency")


class TransitionStrategy(Strategy):
    """
    First-order Markov: P(next | last), read from the transition table.
    Skipped when nothing has ever followed the last move.
    """

    name = "transition"

    def propose(self, pattern):
        if not pattern.last_moves:
            return None
        row = pattern.transitions.get(pattern.last_moves[-1], {})
        total = sum(row.values())
        if total == 0:
            return None
        likely = max(CHOICES, key=lambda c: row.get(c, 0))
        return Candidate(likely, row.get(likely, 0) / total * 0.5, "sequential")


class MetaStrategy(Strategy):
    """A player working hard at being random is due to play their least used move."""

    name = "meta"

    def __init__(self, randomness_threshold: int = 70):
        self.randomness_threshold = randomness_threshold

    def propose(self, pattern):
        if pattern.randomness_score <= self.randomness_threshold:
            return None
        least = min(CHOICES, key=lambda c: pattern.frequencies.get(c, 0))
        return Candidate(least, 0.4, "meta")


class WinStayLoseShiftStrategy(Strategy):
    """After a repeat, guess that the player switches to one of the other two moves."""

    name = "win_stay_lose_shift"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def propose(self, pattern):
        if len(pattern.last_moves) < 2:
            return None
        last, before = pattern.last_moves[-1], pattern.last_moves[-2]
        if last != before:
            return None
        alternatives = [c for c in CHOICES if c != last]
        return Candidate(self.rng.choice(alternatives), 0.35, "psychological")


class RotationStrategy(Strategy):
    """Detect rock->paper->scissors and scissors->rock->paper in the last three moves."""

    name = "rotation"

    def propose(self, pattern):
        if len(pattern.last_moves) < 3:
            return None
        nxt = ROTATIONS.get(tuple(pattern.last_moves[-3:]))
        if nxt is None:
            return None
        return Candidate(nxt, 0.6, "sequential")


def default_strategies(rng: Optional[random.Random] = None):
    """All strategies in declaration order; earlier ones win score ties."""
    return [
        FrequencyStrategy(),
        TransitionStrategy(),
        MetaStrategy(),
        WinStayLoseShiftStrategy(rng),
        RotationStrategy(),
    ]
