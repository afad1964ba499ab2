"""
Runs a TetrisGame in real time: a gravity driver and an input consumer.

Both activities share one TetrisGame and one lock. Every engine call, and
every snapshot handed to the renderer, happens while holding that lock, so
neither the renderer nor the other thread can see a half-applied
transition. Drawing itself happens outside the lock, serialized by a
separate render lock, and is best-effort: a failed frame is dropped and the
next one redraws everything. Line-clear flashes are queued under the lock
and played after it is released, so the other loop keeps running.

The gravity driver runs on the caller's thread; the input consumer runs on a
daemon thread. Both stop once the game is over.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Hashable
from typing import Any, Protocol

import numpy as np

from termtris.game.tetris import Action, TetrisGame

DEFAULT_INPUT_POLL_MS = 5
DEFAULT_PAUSE_POLL_MS = 100


class InputSource(Protocol):
    """Non-blocking keyboard source."""

    def key_available(self) -> bool: ...

    def read_key(self) -> Hashable | None: ...


class Renderer(Protocol):
    """Draws snapshots produced by TetrisGame.get_state()."""

    def render(self, state: dict[str, Any]) -> None: ...

    def flash_rows(self, rows: list[int], grid: np.ndarray, state: dict[str, Any]) -> None: ...


class GameSession:
    """Drives one game until it is over.

    Attributes:
        game: The shared game. Only touch it while holding `lock`.
        lock: Guards every read and write of `game`.
        input_source: Keyboard source polled by the input thread.
        renderer: Snapshot consumer, or None for a headless session.
        key_map: Raw key -> Action. Keys missing from the map are ignored.
        error: The exception that ended the session early, if any.
    """

    def __init__(
        self,
        game: TetrisGame,
        input_source: InputSource,
        renderer: Renderer | None = None,
        key_map: dict[Hashable, Action] | None = None,
        input_poll_ms: int = DEFAULT_INPUT_POLL_MS,
        pause_poll_ms: int = DEFAULT_PAUSE_POLL_MS,
    ) -> None:
        self.game = game
        self.lock = threading.Lock()
        self.input_source = input_source
        self.renderer = renderer
        self.key_map = key_map if key_map is not None else {a: a for a in Action}
        self.input_poll_s = input_poll_ms / 1000.0
        self.pause_poll_s = pause_poll_ms / 1000.0
        self.error: BaseException | None = None

        self._stopped = threading.Event()
        self._render_lock = threading.Lock()
        self._frame_seq = 0
        self._drawn_seq = -1
        self._pending_flashes: list[tuple[list[int], np.ndarray, dict[str, Any]]] = []
        self._input_thread: threading.Thread | None = None

        self.game.on_line_clear = self._on_line_clear

    # ── Public API ───────────────────────────────────────────────────────

    def run(self) -> dict[str, Any]:
        """Play until game over and return the final state.

        Spawns the first piece if the game has not been reset yet, starts
        the input thread, and runs the gravity driver on this thread.

        Raises:
            Exception: Whatever ended either loop unexpectedly.
        """
        with self.lock:
            if self.game.current_piece is None:
                self.game.reset()
        self.render()

        self._input_thread = threading.Thread(target=self._input_loop, daemon=True)
        self._input_thread.start()
        try:
            self._gravity_loop()
        except Exception as e:
            self._fail(e)
        finally:
            self._stopped.set()
            self._input_thread.join(timeout=1.0)

        if self.error is not None:
            raise self.error
        self.render()
        return self.snapshot()

    def apply(self, action: Action) -> bool:
        """Run one player action as a single locked transition."""
        with self.lock:
            if self.game.game_over:
                return False
            result = self.game.step(action)
            over = self.game.game_over
            flashes = self._take_flashes()
        self._show_flashes(flashes)
        if over:
            self._stopped.set()
        return result

    def tick(self) -> bool:
        """Run one gravity transition as a single locked transition."""
        with self.lock:
            moved = self.game.tick()
            over = self.game.game_over
            flashes = self._take_flashes()
        self._show_flashes(flashes)
        if over:
            self._stopped.set()
        return moved

    def snapshot(self) -> dict[str, Any]:
        with self.lock:
            return self._snapshot_locked()

    def stop(self) -> None:
        """End the game from outside both loops."""
        with self.lock:
            self.game.end()
        self._stopped.set()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def render(self) -> None:
        """Draw the latest snapshot. Failures are dropped."""
        if self.renderer is None:
            return
        state = self.snapshot()
        with self._render_lock:
            # Another thread already drew something newer
            if state["seq"] < self._drawn_seq:
                return
            self._drawn_seq = state["seq"]
            try:
                self.renderer.render(state)
            except Exception:
                pass

    # ── Loops ────────────────────────────────────────────────────────────

    def _gravity_loop(self) -> None:
        while self.running:
            with self.lock:
                paused = self.game.paused
            if paused:
                self._stopped.wait(self.pause_poll_s)
                continue

            frame_start = time.monotonic()
            self.tick()
            self.render()

            with self.lock:
                delay_s = self.game.fall_delay_ms / 1000.0
            elapsed = time.monotonic() - frame_start
            self._stopped.wait(max(0.001, delay_s - elapsed))

    def _input_loop(self) -> None:
        try:
            while self.running:
                if not self.input_source.key_available():
                    self._stopped.wait(self.input_poll_s)
                    continue
                key = self.input_source.read_key()
                action = self.key_map.get(key) if key is not None else None
                if action is None:
                    continue
                self.apply(action)
                self.render()
        except Exception as e:
            self._fail(e)

    # ── Helpers ──────────────────────────────────────────────────────────

    def _snapshot_locked(self) -> dict[str, Any]:
        state = self.game.get_state()
        self._frame_seq += 1
        state["seq"] = self._frame_seq
        return state

    def _on_line_clear(self, rows: list[int], grid: np.ndarray) -> None:
        # Called by the engine with self.lock already held. The flash itself
        # is drawn by _show_flashes once the lock is released.
        if self.renderer is None:
            return
        self._pending_flashes.append((rows, grid, self._snapshot_locked()))

    def _take_flashes(self) -> list[tuple[list[int], np.ndarray, dict[str, Any]]]:
        # Caller holds self.lock
        flashes, self._pending_flashes = self._pending_flashes, []
        return flashes

    def _show_flashes(self, flashes: list[tuple[list[int], np.ndarray, dict[str, Any]]]) -> None:
        """Play line-clear animations without holding the session lock."""
        for rows, grid, state in flashes:
            with self._render_lock:
                self._drawn_seq = max(self._drawn_seq, state["seq"])
                try:
                    self.renderer.flash_rows(rows, grid, state)
                except Exception:
                    pass

    def _fail(self, error: BaseException) -> None:
        if self.error is None:
            self.error = error
        with self.lock:
            self.game.end()
        self._stopped.set()
