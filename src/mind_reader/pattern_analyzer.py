import base64
import math
from collections import Counter
from typing import Dict, List, Sequence

import numpy as np

from mind_reader.game_logic import CHOICES
from mind_reader.models import Move, PlayerPattern

RECENT_WINDOW = 10
HASH_WINDOW = 5


def round_half_up(x: float) -> int:
    # builtin round() is banker's rounding; scores are reported half-up
    return int(math.floor(x + 0.5))


def calculate_frequencies(choices: Sequence[str]) -> Dict[str, int]:
    counts = Counter(choices)
    return {c: counts[c] for c in CHOICES}


def calculate_transitions(choices: Sequence[str]) -> Dict[str, Dict[str, int]]:
    """transitions[a][b] = how often b immediately followed a."""
    transitions = {a: {b: 0 for b in CHOICES} for a in CHOICES}
    for prev, cur in zip(choices[:-1], choices[1:]):
        transitions[prev][cur] += 1
    return transitions


def calculate_streaks(choices: Sequence[str]) -> Dict[str, int]:
    """Longest run of consecutive identical choices, per symbol."""
    streaks = {c: 0 for c in CHOICES}
    if not choices:
        return streaks
    current = 1
    for prev, cur in zip(choices[:-1], choices[1:]):
        if cur == prev:
            current += 1
            continue
        streaks[prev] = max(streaks[prev], current)
        current = 1
    # close the final run
    last = choices[-1]
    streaks[last] = max(streaks[last], current)
    return streaks


def calculate_randomness(frequencies: Dict[str, int], total_moves: int) -> int:
    """
    Shannon entropy of the frequency distribution, normalized against log2(3)
    and scaled to 0..100. An empty history counts as fully unpredictable.
    """
    if total_moves == 0:
        return 100
    p = np.array([frequencies[c] for c in CHOICES], dtype=float) / total_moves
    p = p[p > 0]  # no log(0) terms
    entropy = float(-np.sum(p * np.log2(p)))
    return round_half_up(entropy / math.log2(len(CHOICES)) * 100)


def analyze_pattern(moves: Sequence[Move]) -> PlayerPattern:
    """Derive a fresh PlayerPattern from the full ordered move history."""
    choices: List[str] = [m.choice for m in moves]
    total = len(choices)
    frequencies = calculate_frequencies(choices)
    misses = sum(1 for m in moves if not m.correct)
    return PlayerPattern(
        frequencies=frequencies,
        transitions=calculate_transitions(choices),
        streaks=calculate_streaks(choices),
        total_moves=total,
        last_moves=choices[-RECENT_WINDOW:],
        win_rate=misses / max(total, 1),
        randomness_score=calculate_randomness(frequencies, total),
    )


def generate_pattern_hash(pattern: PlayerPattern) -> str:
    """
    Cache key built from the last five choices and the move count.
    Different histories sharing both collide; that is acceptable for a cache.
    """
    key = f"{''.join(pattern.last_moves[-HASH_WINDOW:])}-{pattern.total_moves}"
    return base64.b64encode(key.encode("utf-8")).decode("ascii")
