import csv

import pytest

from mind_reader.errors import InvalidMoveSymbol
from mind_reader.main import commit, get_logger_csv, log_round, parse_choice


def test_parse_choice_accepts_shortcuts():
    assert parse_choice("r") == "rock"
    assert parse_choice(" P ") == "paper"
    assert parse_choice("scissors") == "scissors"
    with pytest.raises(InvalidMoveSymbol):
        parse_choice("x")


def test_round_log(tmp_path):
    path = get_logger_csv(str(tmp_path))
    assert get_logger_csv(str(tmp_path)) == path
    log_round(path, "rock", "paper", "lose", 60, "sequential", "abc123")
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["ts", "player", "ai", "result", "conf", "pattern", "proof"]
    assert rows[1][1:] == ["rock", "paper", "lose", "60", "sequential", "abc123"]


def test_commit_is_short_hex():
    proof = commit("paper")
    assert len(proof) == 10
    int(proof, 16)
