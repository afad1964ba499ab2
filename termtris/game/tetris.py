"""
Game state machine: spawning, gravity, movement, rotation, scoring, levels.

This module ties together the Board and Piece definitions into a full
Tetris session with NES-style scoring, a one-piece preview, a simple
left/right wall kick, pause, and level-based fall speed.

Every public mutator is a complete transition: callers that share a game
between threads hold one lock around each call (see termtris.scheduler),
and no call leaves the session half-updated when it returns.
"""

from __future__ import annotations

import enum
import random
from typing import Any, Callable

import numpy as np

from termtris.game.board import Board
from termtris.game.pieces import Piece


class Action(enum.IntEnum):
    """Logical player actions."""
    LEFT = 0
    RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    PAUSE = 5
    QUIT = 6


class Phase(enum.Enum):
    """Observable engine states. Spawning and locking never outlive a call."""
    FALLING = "falling"
    LINE_CLEARING = "line_clearing"
    GAME_OVER = "game_over"


# NES-style scoring table: index = lines cleared (1-4), multiplied by (level + 1)
SCORE_TABLE: dict[int, int] = {
    1: 40,
    2: 100,
    3: 300,
    4: 1200,
}

SOFT_DROP_POINTS = 1
HARD_DROP_POINTS = 2

MAX_LEVEL = 9
LINES_PER_LEVEL = 10

BASE_FALL_DELAY_MS = 500
FALL_DELAY_STEP_MS = 50
MIN_FALL_DELAY_MS = 50

# (rows, grid copy) -> None, called before full rows are removed
LineClearHook = Callable[[list[int], np.ndarray], None]


def calculate_score(lines_cleared: int, level: int) -> int:
    """Points for one lock that cleared `lines_cleared` rows at `level`.

    Uses NES-style scoring:
      1 line  = 40  * (level + 1)
      2 lines = 100 * (level + 1)
      3 lines = 300 * (level + 1)
      4 lines = 1200 * (level + 1)
    """
    if lines_cleared <= 0:
        return 0
    return SCORE_TABLE.get(lines_cleared, 0) * (level + 1)


def level_for_lines(total_lines: int) -> int:
    """Level 0-9: one level per 10 cleared lines."""
    return min(MAX_LEVEL, total_lines // LINES_PER_LEVEL)


def fall_delay_ms(level: int) -> int:
    """Gravity interval in milliseconds at the given level."""
    return max(MIN_FALL_DELAY_MS, BASE_FALL_DELAY_MS - level * FALL_DELAY_STEP_MS)


class TetrisGame:
    """A single Tetris session.

    Attributes:
        board: The game board.
        score: Current score.
        level: Current level (0-9, derived from total_lines).
        total_lines: Total lines cleared since game start.
        current_piece: The active piece, or None before the first spawn.
        next_piece: The piece that spawns after the current one.
        paused: Whether gravity and player moves are suspended.
        game_over: Whether the session has ended.
        lines_cleared: Rows cleared by the most recent lock.
        phase: Current Phase.
        on_line_clear: Optional hook called with the full rows (bottom to
            top) and a grid copy after a lock, before the rows are removed.
    """

    def __init__(
        self,
        board_width: int = 10,
        board_height: int = 20,
        rng: random.Random | None = None,
        on_line_clear: LineClearHook | None = None,
    ) -> None:
        """Initialize a new game. Call reset() to spawn the first piece.

        Args:
            board_width: Board width in columns.
            board_height: Board height in rows.
            rng: Random source for piece selection (a fresh random.Random if None).
            on_line_clear: Line-clear hook, see class docstring.
        """
        self.board = Board(board_width, board_height)
        self.rng = rng if rng is not None else random.Random()
        self.on_line_clear = on_line_clear
        self.score: int = 0
        self.level: int = 0
        self.total_lines: int = 0
        self.current_piece: Piece | None = None
        self.next_piece: Piece | None = None
        self.paused: bool = False
        self.game_over: bool = False
        self.lines_cleared: int = 0
        self.phase: Phase = Phase.FALLING

    def reset(self) -> dict[str, Any]:
        """Reset the game to its initial state and spawn the first piece.

        Returns:
            Initial game state dict (same format as get_state()).
        """
        self.board.reset()
        self.score = 0
        self.level = 0
        self.total_lines = 0
        self.current_piece = None
        self.next_piece = Piece.random(rng=self.rng)
        self.paused = False
        self.game_over = False
        self.lines_cleared = 0
        self.phase = Phase.FALLING
        self._spawn_piece()
        return self.get_state()

    @property
    def fall_delay_ms(self) -> int:
        """Milliseconds between gravity ticks at the current level."""
        return fall_delay_ms(self.level)

    @property
    def accepting_moves(self) -> bool:
        return not (self.game_over or self.paused) and self.current_piece is not None

    # ── Player and timer operations ──────────────────────────────────────

    def step(self, action: Action) -> bool:
        """Apply one logical action.

        Returns:
            The result of the dispatched operation (False for no-ops).
        """
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.HARD_DROP:
            # A zero-row drop still locks the piece
            accepted = self.accepting_moves
            self.hard_drop()
            return accepted
        if action == Action.PAUSE:
            return self.toggle_pause()
        if action == Action.QUIT:
            return self.end()
        return False

    def tick(self) -> bool:
        """Gravity: move the piece down one row, or lock it if blocked.

        Returns:
            True if the piece moved down, False if it locked or the game is
            paused or over.
        """
        if not self.accepting_moves:
            return False
        if self._move(0, 1):
            return True
        self._lock_and_spawn()
        return False

    def move_left(self) -> bool:
        """Shift the piece one column left. Returns whether it moved."""
        if not self.accepting_moves:
            return False
        return self._move(-1, 0)

    def move_right(self) -> bool:
        """Shift the piece one column right. Returns whether it moved."""
        if not self.accepting_moves:
            return False
        return self._move(1, 0)

    def soft_drop(self) -> bool:
        """Move the piece down one row for one point. Never locks."""
        if not self.accepting_moves:
            return False
        if self._move(0, 1):
            self.score += SOFT_DROP_POINTS
            return True
        return False

    def hard_drop(self) -> int:
        """Drop the piece as far as it goes and lock it immediately.

        Awards 2 points per row dropped.

        Returns:
            Number of rows dropped.
        """
        if not self.accepting_moves:
            return 0
        rows = 0
        while self._move(0, 1):
            rows += 1
        self.score += HARD_DROP_POINTS * rows
        self._lock_and_spawn()
        return rows

    def rotate(self) -> bool:
        """Rotate the piece clockwise, kicking one column left or right.

        Tries the rotated piece in place, then one column left of the
        original position, then one column right. If all three collide the
        piece is restored to its original rotation and column.

        Returns:
            True if the rotation succeeded (possibly with a kick).
        """
        if not self.accepting_moves:
            return False
        piece = self.current_piece
        original_x = piece.x
        piece.rotate_cw()
        for dx in (0, -1, 1):
            piece.x = original_x + dx
            if not self.board.collides(piece):
                return True
        piece.x = original_x
        # Three more clockwise turns bring the piece back to where it was
        for _ in range(3):
            piece.rotate_cw()
        return False

    def toggle_pause(self) -> bool:
        """Flip the paused flag. Returns the new value (False once over)."""
        if self.game_over:
            return False
        self.paused = not self.paused
        return self.paused

    def end(self) -> bool:
        """Force the session into game over (player quit).

        Returns:
            True if this call ended the game, False if it was already over.
        """
        if self.game_over:
            return False
        self.game_over = True
        self.paused = False
        self.phase = Phase.GAME_OVER
        return True

    # ── Snapshot ─────────────────────────────────────────────────────────

    def get_state(self) -> dict[str, Any]:
        """Return a render-ready snapshot made of copies.

        Returns:
            Dict with keys:
              - grid: np.ndarray, locked cells plus the active piece
              - locked_grid: np.ndarray, locked cells only
              - current_piece: piece kind name or None
              - current_mask: np.ndarray (4x4) or None
              - current_x / current_y: int
              - current_color: str or None
              - next_piece: piece kind name or None
              - next_mask: np.ndarray (4x4) or None
              - next_color: str or None
              - score, level, total_lines, lines_cleared: int
              - paused, game_over: bool
              - phase: Phase
        """
        current = self.current_piece
        nxt = self.next_piece
        overlay = current
        # A piece that failed to spawn is never drawn over locked cells
        if self.game_over and current is not None and self.board.collides(current):
            overlay = None
        return {
            "grid": self.board.snapshot(overlay),
            "locked_grid": self.board.get_grid(),
            "current_piece": current.name if current else None,
            "current_mask": current.shape.copy() if current else None,
            "current_x": current.x if current else 0,
            "current_y": current.y if current else 0,
            "current_color": current.color if current else None,
            "next_piece": nxt.name if nxt else None,
            "next_mask": nxt.shape.copy() if nxt else None,
            "next_color": nxt.color if nxt else None,
            "score": self.score,
            "level": self.level,
            "total_lines": self.total_lines,
            "lines_cleared": self.lines_cleared,
            "paused": self.paused,
            "game_over": self.game_over,
            "phase": self.phase,
        }

    # ── Internal transitions ─────────────────────────────────────────────

    def _spawn_piece(self) -> bool:
        """Promote the next piece, centered at row 0, and draw a new next.

        Returns:
            True if the piece fits, False if it collides (game over).
        """
        piece = self.next_piece
        piece.x = self.board.width // 2 - 2
        piece.y = 0
        piece.rotation = 0
        self.current_piece = piece
        self.next_piece = Piece.random(rng=self.rng)

        if self.board.collides(piece):
            self.game_over = True
            self.phase = Phase.GAME_OVER
            return False
        return True

    def _move(self, dx: int, dy: int) -> bool:
        """Try to move the current piece by (dx, dy).

        Args:
            dx: Column offset (positive = right).
            dy: Row offset (positive = down).

        Returns:
            True if the move succeeded, False if blocked (piece unchanged).
        """
        piece = self.current_piece
        piece.x += dx
        piece.y += dy
        if self.board.collides(piece):
            piece.x -= dx
            piece.y -= dy
            return False
        return True

    def _lock_and_spawn(self) -> None:
        """Lock the piece, clear full rows, score them, and spawn the next."""
        self.board.lock_piece(self.current_piece)

        rows = self.board.full_rows()
        self.lines_cleared = len(rows)
        if rows:
            self.phase = Phase.LINE_CLEARING
            if self.on_line_clear is not None:
                self.on_line_clear(rows, self.board.get_grid())
            self.board.clear_rows(rows)
            self.total_lines += len(rows)
            self.score += calculate_score(len(rows), self.level)
            self.level = level_for_lines(self.total_lines)
            self.phase = Phase.FALLING

        self._spawn_piece()
