"""
Curses renderer for the Tetris game.

Draws a snapshot from TetrisGame.get_state(): the board with the active
piece overlaid, the next piece preview, and a sidebar with score / level /
lines, the best stored score, and the controls. Cells are two characters
wide so the well looks roughly square.
"""

from __future__ import annotations

import threading
import time
from typing import Any

import numpy as np

try:
    import curses
except ImportError:
    curses = None  # type: ignore[assignment]

from termtris.game.pieces import PIECE_COLORS


# ── Glyphs ───────────────────────────────────────────────────────────────
FILLED_CELL = "■ "
EMPTY_CELL = "· "
SIDEBAR_WIDTH = 16

# ── Color names -> curses colors (resolved once curses is initialized) ───
CURSES_COLOR_NAMES: dict[str, str] = {
    "cyan": "COLOR_CYAN",
    "blue": "COLOR_BLUE",
    "white": "COLOR_WHITE",
    "yellow": "COLOR_YELLOW",
    "green": "COLOR_GREEN",
    "magenta": "COLOR_MAGENTA",
    "red": "COLOR_RED",
}

# Line-clear flash cycle
FLASH_COLORS = ["white", "yellow", "red"]

CONTROLS_TEXT = [
    "Controls:",
    "← → : Move",
    "↑   : Rotate",
    "↓   : Down",
    "Space: Drop",
    "P   : Pause",
    "Q   : Quit",
]


class TerminalRenderer:
    """Curses-based renderer for game snapshots.

    Attributes:
        screen: The curses window to draw on.
        high_score: Best stored score, shown in the sidebar.
        flash_frames: Number of frames in the line-clear animation.
        flash_frame_ms: Duration of each animation frame.
        lock: Held while touching the screen; share it with anything else
            that calls into the same curses window from another thread.
    """

    def __init__(
        self,
        screen: Any,
        high_score: int = 0,
        flash_frames: int = 6,
        flash_frame_ms: int = 100,
        lock: threading.Lock | None = None,
    ) -> None:
        """Initialize the renderer.

        Color pairs are set up on the first draw, so the renderer can be
        built before curses has started colors.

        Args:
            screen: A curses window (usually the stdscr from curses.wrapper).
            high_score: Best stored score to display.
            flash_frames: Line-clear animation frame count.
            flash_frame_ms: Line-clear animation frame duration.
            lock: Screen lock, a new one if None.
        """
        if curses is None:
            raise ImportError("curses is required for terminal rendering.")

        self.screen = screen
        self.high_score = high_score
        self.flash_frames = flash_frames
        self.flash_frame_ms = flash_frame_ms
        self.lock = lock if lock is not None else threading.Lock()
        self._pairs: dict[str, int] = {}
        self._initialized = False

    def render(self, state: dict[str, Any]) -> None:
        """Draw a full frame for the given snapshot."""
        with self.lock:
            if not self._initialized:
                self._init_colors()

            self.screen.erase()
            self._draw_header(state)
            self._draw_board(state["grid"])
            self._draw_sidebar(state)
            if state["paused"]:
                self._put(self._footer_row(state["grid"]), 0,
                          "GAME PAUSED - Press P to continue", curses.A_BOLD)
            self.screen.refresh()

    def flash_rows(self, rows: list[int], grid: np.ndarray, state: dict[str, Any]) -> None:
        """Blink the given full rows on the grid as it was before the clear.

        Blocks for flash_frames * flash_frame_ms.
        """
        for frame in range(self.flash_frames):
            color = FLASH_COLORS[frame % len(FLASH_COLORS)]
            with self.lock:
                if not self._initialized:
                    self._init_colors()
                self.screen.erase()
                self._draw_header(state)
                self._draw_board(grid, flash_rows=set(rows), flash_color=color)
                self.screen.refresh()
            time.sleep(self.flash_frame_ms / 1000.0)

    def show_game_over(self, state: dict[str, Any], new_high_score: bool) -> None:
        """Draw the final score screen."""
        with self.lock:
            if not self._initialized:
                self._init_colors()

            self.screen.erase()
            self._put(1, 0, "GAME OVER!", curses.A_BOLD | self._attr("red"))
            self._put(2, 0, f"Final Score: {state['score']}")
            self._put(3, 0, f"Level: {state['level']}  Lines: {state['total_lines']}")
            if new_high_score:
                self._put(4, 0, "New High Score!", curses.A_BOLD | self._attr("green"))
            self._put(6, 0, "Press any key to continue")
            self.screen.refresh()

    # ── Drawing helpers ──────────────────────────────────────────────────

    def _init_colors(self) -> None:
        """Create one color pair per color name. Called once."""
        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
                background = -1
            except curses.error:
                background = curses.COLOR_BLACK
            for pair, (name, attr_name) in enumerate(CURSES_COLOR_NAMES.items(), start=1):
                curses.init_pair(pair, getattr(curses, attr_name), background)
                self._pairs[name] = pair
        self._initialized = True

    def _attr(self, color: str | None) -> int:
        pair = self._pairs.get(color or "")
        return curses.color_pair(pair) if pair else 0

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        """addstr that ignores writes past the window edge."""
        try:
            self.screen.addstr(y, x, text, attr)
        except curses.error:
            pass

    def _draw_header(self, state: dict[str, Any]) -> None:
        self._put(0, 0, "TETRIS", curses.A_BOLD)
        self._put(0, 9, "P: Pause")
        self._put(1, 0, f"Score: {state['score']}  Level: {state['level']}  "
                        f"Lines: {state['total_lines']}")

    def _draw_board(
        self,
        grid: np.ndarray,
        flash_rows: set[int] | None = None,
        flash_color: str = "white",
    ) -> None:
        """Draw the bordered well. Board row r is screen row r + 3."""
        height, width = grid.shape
        inner = "═" * (width * 2 + 1)
        self._put(2, 0, f"╔{inner}╗")
        for row in range(height):
            y = row + 3
            self._put(y, 0, "║ ")
            for col in range(width):
                cell = int(grid[row, col])
                x = 2 + col * 2
                if cell == 0:
                    self._put(y, x, EMPTY_CELL, curses.A_DIM)
                elif flash_rows and row in flash_rows:
                    self._put(y, x, FILLED_CELL, self._attr(flash_color) | curses.A_BOLD)
                else:
                    self._put(y, x, FILLED_CELL, self._attr(PIECE_COLORS.get(cell)))
            self._put(y, 2 + width * 2, "║")
        self._put(height + 3, 0, f"╚{inner}╝")

    def _draw_sidebar(self, state: dict[str, Any]) -> None:
        x = state["grid"].shape[1] * 2 + 5
        self._put(4, x, "Next:", curses.A_BOLD)
        mask = state["next_mask"]
        if mask is not None:
            attr = self._attr(state["next_color"])
            for r in range(mask.shape[0]):
                for c in range(mask.shape[1]):
                    if mask[r, c] != 0:
                        self._put(5 + r, x + c * 2, FILLED_CELL, attr)

        self._put(10, x, "High Score:", curses.A_BOLD)
        self._put(11, x, f"{self.high_score:>{SIDEBAR_WIDTH - 4}}", self._attr("yellow"))

        for i, line in enumerate(CONTROLS_TEXT):
            self._put(13 + i, x, line, curses.A_BOLD if i == 0 else 0)

    @staticmethod
    def _footer_row(grid: np.ndarray) -> int:
        return grid.shape[0] + 5
