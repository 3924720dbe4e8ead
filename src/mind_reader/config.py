import os
import sys

import yaml
from loguru import logger


def load_config(path: str = None) -> dict:
    config_path = path or os.path.join(os.path.dirname(__file__), "config.yaml")
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def configure_logging(cfg: dict) -> None:
    level = str(cfg.get("logging", {}).get("level", "INFO")).upper()
    logger.remove()
    logger.add(sys.stderr, level=level)


def ensure_outputs_dir(out_dir_name: str) -> str:
    # Project root is two levels up from this file ( .../src/mind_reader/config.py )
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
    out_dir = os.path.join(root, out_dir_name)
    os.makedirs(out_dir, exist_ok=True)
    return out_dir
