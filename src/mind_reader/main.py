import os
import csv
import time
from hashlib import sha256

from loguru import logger

from mind_reader.config import configure_logging, ensure_outputs_dir, load_config
from mind_reader.errors import InvalidMoveSymbol
from mind_reader.game_logic import adjudicate, validate_choice
from mind_reader.game_manager import GameManager
from mind_reader.predictor import choose_ai_move

SHORTCUTS = {"r": "rock", "p": "paper", "s": "scissors"}


def parse_choice(raw: str) -> str:
    raw = (raw or "").strip().lower()
    return validate_choice(SHORTCUTS.get(raw, raw))


def get_logger_csv(out_dir: str) -> str:
    csv_path = os.path.join(out_dir, "round_log.csv")
    if not os.path.exists(csv_path):
        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["ts", "player", "ai", "result", "conf", "pattern", "proof"])
    return csv_path


def log_round(csv_path, player, ai, result, conf, pattern, proof):
    with open(csv_path, "a", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow([f"{time.time():.3f}", player, ai, result, conf, pattern, (proof or "")])


def commit(ai_move: str) -> str:
    """Short sha256 commitment to the AI move, shown before the player chooses."""
    payload = f"{time.time():.6f}|{ai_move}"
    return sha256(payload.encode("utf-8")).hexdigest()[:10]


def main():
    cfg = load_config()
    configure_logging(cfg)
    out_dir = ensure_outputs_dir(cfg["logging"]["out_dir"])
    csv_log = get_logger_csv(out_dir)

    manager = GameManager.from_config(cfg)
    game = manager.create_game("local", "Player")
    wins = losses = ties = 0

    print("Mind Reader RPS - type r / p / s to play, q to quit.")
    try:
        while True:
            analysis = manager.get_ai_prediction(game.game_id)
            proof = commit(choose_ai_move(analysis))
            print(f"\nAI confidence: {analysis.confidence}%  [{analysis.pattern_type}]  proof={proof}")
            print(f"AI: {analysis.reasoning}")

            raw = input("Your move> ")
            if raw.strip().lower() in ("q", "quit", "exit"):
                break
            try:
                choice = parse_choice(raw)
            except InvalidMoveSymbol as e:
                print(f"Redo: {e}")
                continue

            move = manager.make_move(game.game_id, "local", choice)
            outcome = adjudicate(move.choice, move.ai_choice)
            logger.info(f"Player: {move.choice} AI: {move.ai_choice} -> {outcome} (predicted {move.ai_prediction})")
            if outcome == "win":
                wins += 1
            elif outcome == "lose":
                losses += 1
            else:
                ties += 1

            print(f"You: {move.choice}  AI: {move.ai_choice}  -> {outcome.upper()}")
            print(f"Score  W {wins}  L {losses}  T {ties}   (AI read you: {'yes' if move.correct else 'no'})")
            log_round(csv_log, move.choice, move.ai_choice, outcome, move.ai_confidence, analysis.pattern_type, proof)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        final = manager.end_game(game.game_id)
        print(f"\nFinal: you {final.player_score} - AI {final.ai_score}")


if __name__ == "__main__":
    main()
