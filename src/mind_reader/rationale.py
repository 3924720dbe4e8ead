"""
Rationale writer - phrasing only.

Turns an already-made prediction into a short in-character sentence.
Never influences the prediction; every failure degrades to a canned line.
"""

import os
from typing import Callable, Optional

from loguru import logger
from openai import OpenAI

from mind_reader.models import PlayerPattern

FALLBACK_REASONS = {
    "frequency": "You love playing {prediction} - it's your go-to move!",
    "sequential": "Following your pattern, {prediction} comes next.",
    "meta": "You're being unpredictable, but I think {prediction} is due!",
    "psychological": "After {last_move}, players often switch to {prediction}.",
    "complex": "Your complex pattern points to {prediction}.",
}
DEFAULT_REASON = "I predict {prediction}!"
EMPTY_REPLY_REASON = "I sense you'll play {prediction} next!"


def fallback_rationale(pattern_type: str, prediction: str, last_move: Optional[str] = None) -> str:
    template = FALLBACK_REASONS.get(pattern_type, DEFAULT_REASON)
    return template.format(prediction=prediction, last_move=last_move or "that")


def build_prompt(pattern: PlayerPattern, pattern_type: str, prediction: str) -> str:
    f = pattern.frequencies
    return (
        "Analyze this Rock-Paper-Scissors game pattern.\n\n"
        f"Player's last 10 moves: {', '.join(pattern.last_moves)}\n"
        f"Frequency: Rock={f.get('rock', 0)}, Paper={f.get('paper', 0)}, Scissors={f.get('scissors', 0)}\n"
        f"Randomness: {pattern.randomness_score}%\n"
        f"Pattern type detected: {pattern_type}\n\n"
        f"We predict they'll play {prediction} next.\n\n"
        f"Provide a brief, engaging explanation (max 40 words) for why they might choose {prediction}.\n"
        "Consider RPS psychology: rock=aggressive, paper=defensive, scissors=clever.\n"
        "Be conversational and slightly playful."
    )


class RationaleWriter:
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        timeout_s: float = 5.0,
        max_tokens: int = 120,
        temperature: float = 0.8,
        default_api_key: Optional[str] = None,
        enabled: bool = True,
        client_factory: Optional[Callable[..., OpenAI]] = None,
    ):
        """
        Args:
            default_api_key: used when a call supplies no key of its own
            client_factory: builds the chat client from (api_key, timeout); defaults to OpenAI
        """
        self.model = model
        self.timeout_s = float(timeout_s)
        self.max_tokens = int(max_tokens)
        self.temperature = float(temperature)
        self.default_api_key = default_api_key
        self.enabled = enabled
        self.client_factory = client_factory or self._openai_client

    @classmethod
    def from_config(cls, cfg: dict, client_factory=None) -> "RationaleWriter":
        rcfg = (cfg or {}).get("rationale", {})
        key_env = str(rcfg.get("api_key_env", "OPENAI_API_KEY"))
        return cls(
            model=str(rcfg.get("model", "gpt-4o-mini")),
            timeout_s=float(rcfg.get("timeout_s", 5.0)),
            max_tokens=int(rcfg.get("max_tokens", 120)),
            temperature=float(rcfg.get("temperature", 0.8)),
            default_api_key=os.getenv(key_env) or None,
            enabled=bool(rcfg.get("enabled", True)),
            client_factory=client_factory,
        )

    @staticmethod
    def _openai_client(api_key: str, timeout: float) -> OpenAI:
        # one attempt only; the caller falls back instead of retrying
        return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def _generate(self, api_key: str, prompt: str) -> str:
        client = self.client_factory(api_key, self.timeout_s)
        response = client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return (response.choices[0].message.content or "").strip()

    def write(
        self,
        pattern: PlayerPattern,
        pattern_type: str,
        prediction: str,
        api_key: Optional[str] = None,
    ) -> str:
        last_move = pattern.last_moves[-1] if pattern.last_moves else None
        key = api_key or self.default_api_key
        if not self.enabled or not key:
            logger.debug("Rationale service unavailable (no key or disabled); using fallback")
            return fallback_rationale(pattern_type, prediction, last_move)

        try:
            text = self._generate(key, build_prompt(pattern, pattern_type, prediction))
        except Exception as e:
            logger.warning(f"Rationale generation failed ({type(e).__name__}: {e}); using fallback")
            return fallback_rationale(pattern_type, prediction, last_move)
        return text or EMPTY_REPLY_REASON.format(prediction=prediction)
