"""
Entry point for termtris.

Supports three modes:
  - play:         Play Tetris in the terminal.
  - scores:       Print the stored high-score table.
  - instructions: Print the controls and scoring rules.

Usage:
    python main.py
    python main.py --mode play --config config/game.yaml
    python main.py --mode play --seed 42
    python main.py --mode scores
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "board_width": 10,
    "board_height": 20,
    "score_file": "highscore.txt",
    "input_poll_ms": 5,
    "pause_poll_ms": 100,
    "flash_frames": 6,
    "flash_frame_ms": 100,
    "high_score_count": 10,
    "seed": None,
}


def load_config(config_path: str | pathlib.Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Keys missing from the file keep their DEFAULT_CONFIG values.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dict of configuration key-value pairs.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}
    config = dict(DEFAULT_CONFIG)
    config.update(loaded)
    return config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with mode, config, and seed attributes.
    """
    parser = argparse.ArgumentParser(
        description="termtris: falling-block puzzle game for the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["play", "scores", "instructions"],
        default="play",
        help="Run mode: 'play' (start a game), 'scores' (high scores), 'instructions' (controls).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/game.yaml",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for piece selection (overrides the config value).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point: parse args, load config, and dispatch to the selected mode."""
    args = parse_args(argv)

    if args.mode == "instructions":
        from termtris.play import show_instructions
        show_instructions()
        return

    config = load_config(args.config)
    if args.seed is not None:
        config["seed"] = args.seed

    if args.mode == "play":
        from termtris.play import play_game
        play_game(config)

    elif args.mode == "scores":
        from termtris.play import show_scores
        show_scores(config)

    else:
        print(f"Unknown mode: {args.mode}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
