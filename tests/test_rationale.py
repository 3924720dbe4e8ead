from types import SimpleNamespace

import pytest

from mind_reader.models import PlayerPattern
from mind_reader.rationale import RationaleWriter, build_prompt, fallback_rationale


def make_pattern(last_moves=("rock", "rock", "paper")):
    return PlayerPattern(
        frequencies={"rock": 2, "paper": 1, "scissors": 0},
        transitions={a: {b: 0 for b in ("rock", "paper", "scissors")} for a in ("rock", "paper", "scissors")},
        streaks={"rock": 2, "paper": 1, "scissors": 0},
        total_moves=len(last_moves),
        last_moves=list(last_moves),
        win_rate=1.0,
        randomness_score=58,
    )


class FakeClient:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def recording_factory(client, seen):
    def factory(api_key, timeout):
        seen.append((api_key, timeout))
        return client

    return factory


@pytest.mark.parametrize(
    "tag,expected",
    [
        ("frequency", "You love playing scissors - it's your go-to move!"),
        ("sequential", "Following your pattern, scissors comes next."),
        ("meta", "You're being unpredictable, but I think scissors is due!"),
        ("psychological", "After paper, players often switch to scissors."),
        ("complex", "Your complex pattern points to scissors."),
        ("unknown", "I predict scissors!"),
    ],
)
def test_fallback_templates(tag, expected):
    assert fallback_rationale(tag, "scissors", "paper") == expected


def test_prompt_carries_pattern_details():
    prompt = build_prompt(make_pattern(), "frequency", "rock")
    assert "rock, rock, paper" in prompt
    assert "Rock=2, Paper=1, Scissors=0" in prompt
    assert "Randomness: 58%" in prompt
    assert "Pattern type detected: frequency" in prompt
    assert "max 40 words" in prompt


def test_missing_key_skips_service():
    seen = []
    writer = RationaleWriter(client_factory=recording_factory(FakeClient("hi"), seen))
    text = writer.write(make_pattern(), "psychological", "scissors")
    assert text == "After paper, players often switch to scissors."
    assert seen == []


def test_per_call_key_wins_over_default():
    seen = []
    client = FakeClient("  Rock feels bold today.  ")
    writer = RationaleWriter(default_api_key="sk-default", timeout_s=2.5, client_factory=recording_factory(client, seen))
    text = writer.write(make_pattern(), "frequency", "rock", api_key="sk-caller")
    assert text == "Rock feels bold today."
    assert seen == [("sk-caller", 2.5)]
    assert client.calls[0]["model"] == writer.model
    assert client.calls[0]["max_tokens"] == writer.max_tokens


def test_empty_reply_uses_generic_line():
    writer = RationaleWriter(default_api_key="sk", client_factory=lambda key, timeout: FakeClient(""))
    assert writer.write(make_pattern(), "meta", "paper") == "I sense you'll play paper next!"


def test_timeout_falls_back():
    def slow(api_key, timeout):
        raise TimeoutError("took too long")

    writer = RationaleWriter(default_api_key="sk", client_factory=slow)
    assert writer.write(make_pattern(), "meta", "paper") == "You're being unpredictable, but I think paper is due!"


def test_disabled_writer_never_calls_service():
    seen = []
    writer = RationaleWriter(enabled=False, default_api_key="sk", client_factory=recording_factory(FakeClient("x"), seen))
    assert writer.write(make_pattern(), "sequential", "rock") == "Following your pattern, rock comes next."
    assert seen == []


def test_from_config_reads_key_from_env(monkeypatch):
    monkeypatch.setenv("RPS_TEST_KEY", "sk-env")
    cfg = {"rationale": {"api_key_env": "RPS_TEST_KEY", "model": "m", "timeout_s": 1, "enabled": True}}
    writer = RationaleWriter.from_config(cfg)
    assert writer.default_api_key == "sk-env"
    assert writer.model == "m"
    assert writer.timeout_s == 1.0


def test_real_client_makes_a_single_bounded_attempt():
    client = RationaleWriter._openai_client("sk-test", 2.0)
    assert client.max_retries == 0
    assert client.timeout == 2.0
