"""
Terminal play mode plus the high-score and instructions screens.

play_game runs one session inside curses.wrapper: the gravity driver on the
main thread, keyboard input on a background thread (see
termtris.scheduler), and a curses renderer. The final score is stored once
the terminal has been restored.
"""

from __future__ import annotations

import random
import threading
from typing import Any

try:
    import curses
except ImportError:
    curses = None  # type: ignore[assignment]

from termtris.game.tetris import TetrisGame, Action
from termtris.renderer import TerminalRenderer
from termtris.scheduler import GameSession
from termtris.scores import ScoreStore, DEFAULT_SCORE_FILE


# ── Keyboard mapping ─────────────────────────────────────────────────────
# Arrow keys or WASD to move/rotate, Space for hard drop, P to pause, Q/Esc to quit
KEY_ESCAPE = 27

KEY_MAP: dict[int, Action] = {
    ord("a"): Action.LEFT,
    ord("A"): Action.LEFT,
    ord("d"): Action.RIGHT,
    ord("D"): Action.RIGHT,
    ord("s"): Action.SOFT_DROP,
    ord("S"): Action.SOFT_DROP,
    ord("w"): Action.ROTATE,
    ord("W"): Action.ROTATE,
    ord(" "): Action.HARD_DROP,
    ord("p"): Action.PAUSE,
    ord("P"): Action.PAUSE,
    ord("q"): Action.QUIT,
    ord("Q"): Action.QUIT,
    KEY_ESCAPE: Action.QUIT,
}
if curses is not None:
    KEY_MAP.update({
        curses.KEY_LEFT: Action.LEFT,
        curses.KEY_RIGHT: Action.RIGHT,
        curses.KEY_DOWN: Action.SOFT_DROP,
        curses.KEY_UP: Action.ROTATE,
    })

INSTRUCTIONS = """\
Tetris is a classic puzzle game where you must arrange falling tetrominos.
Clear lines by filling all cells in a horizontal row. As you clear more lines,
the level increases and pieces fall faster.

Controls:
  Left, Right or A, D : Move piece left/right
  Up or W             : Rotate piece clockwise
  Down or S           : Soft drop (move down faster)
  Space               : Hard drop (immediately drop to bottom)
  P                   : Pause/Resume game
  Q or Esc            : Quit

Scoring:
  1 line           : 40 x (level + 1) points
  2 lines          : 100 x (level + 1) points
  3 lines          : 300 x (level + 1) points
  4 lines (Tetris) : 1200 x (level + 1) points
  Soft drop        : 1 point per cell
  Hard drop        : 2 points per cell"""


class CursesInput:
    """Non-blocking keyboard source backed by a curses window.

    getch() cannot peek, so key_available() reads one key ahead and
    read_key() hands it out. `lock` is the renderer's screen lock, since
    getch() also refreshes the window.
    """

    def __init__(self, screen: Any, lock: threading.Lock | None = None) -> None:
        self.screen = screen
        self.lock = lock if lock is not None else threading.Lock()
        self.screen.nodelay(True)
        self.screen.keypad(True)
        self._pending: int | None = None

    def key_available(self) -> bool:
        if self._pending is None:
            try:
                with self.lock:
                    key = self.screen.getch()
            except curses.error:
                return False
            if key != -1:
                self._pending = key
        return self._pending is not None

    def read_key(self) -> int | None:
        if not self.key_available():
            return None
        key, self._pending = self._pending, None
        return key


def play_game(config: dict[str, Any]) -> dict[str, Any]:
    """Play one game in the terminal and store the final score.

    Prints a summary line once the terminal is restored.

    Args:
        config: Config dict loaded from game.yaml.

    Returns:
        The final game state.
    """
    if curses is None:
        raise ImportError("curses is required for play mode.")

    store = ScoreStore(config.get("score_file", DEFAULT_SCORE_FILE))
    previous_best = store.high_score()

    final_state = curses.wrapper(_run_session, config, previous_best)

    score = final_state["score"]
    store.save(score)
    print(
        f"Game over | Score: {score} | Lines: {final_state['total_lines']}"
        f" | Level: {final_state['level']}"
    )
    if score > previous_best:
        print("New high score!")
    return final_state


def _run_session(screen: Any, config: dict[str, Any], high_score: int) -> dict[str, Any]:
    """Body of curses.wrapper: run the session and show the result screen."""
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    seed = config.get("seed")
    game = TetrisGame(
        config.get("board_width", 10),
        config.get("board_height", 20),
        rng=random.Random(seed),
    )
    renderer = TerminalRenderer(
        screen,
        high_score=high_score,
        flash_frames=config.get("flash_frames", 6),
        flash_frame_ms=config.get("flash_frame_ms", 100),
    )
    session = GameSession(
        game,
        CursesInput(screen, lock=renderer.lock),
        renderer=renderer,
        key_map=KEY_MAP,
        input_poll_ms=config.get("input_poll_ms", 5),
        pause_poll_ms=config.get("pause_poll_ms", 100),
    )
    final_state = session.run()

    renderer.show_game_over(final_state, final_state["score"] > high_score)
    screen.nodelay(False)
    screen.getch()
    return final_state


def show_scores(config: dict[str, Any]) -> list[int]:
    """Print the stored high scores as a ranked table."""
    store = ScoreStore(config.get("score_file", DEFAULT_SCORE_FILE))
    scores = store.top(config.get("high_score_count", 10))
    if not scores:
        print("No high scores yet!")
        return scores

    print("HIGH SCORES")
    print(f"{'Rank':>4}  {'Score':>10}")
    for rank, score in enumerate(scores, start=1):
        print(f"{rank:>4}  {score:>10}")
    return scores


def show_instructions() -> None:
    """Print the controls and scoring rules."""
    print(INSTRUCTIONS)
