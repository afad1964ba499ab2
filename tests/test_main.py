"""Tests for config loading and the CLI entry point."""

from __future__ import annotations

import pytest

import main


def test_load_config_fills_defaults(tmp_path):
    path = tmp_path / "game.yaml"
    path.write_text("board_width: 8\nseed: 7\n")
    config = main.load_config(path)
    assert config["board_width"] == 8
    assert config["seed"] == 7
    assert config["board_height"] == 20
    assert config["score_file"] == "highscore.txt"


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "game.yaml"
    path.write_text("")
    assert main.load_config(path) == main.DEFAULT_CONFIG


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        main.load_config(tmp_path / "nope.yaml")


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.mode == "play"
    assert args.config == "config/game.yaml"
    assert args.seed is None


def test_parse_args_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        main.parse_args(["--mode", "train"])


def test_main_scores_mode(tmp_path, capsys):
    scores = tmp_path / "scores.txt"
    scores.write_text("90\n15\n")
    config = tmp_path / "game.yaml"
    config.write_text(f"score_file: {scores}\n")

    main.main(["--mode", "scores", "--config", str(config)])

    out = capsys.readouterr().out
    assert "90" in out and "15" in out


def test_main_instructions_mode(capsys):
    main.main(["--mode", "instructions"])
    assert "Controls:" in capsys.readouterr().out
