"""
Board logic for a 10x20 Tetris grid.

The board is a 2D numpy array (height x width) of int8 values:
  - 0 = empty cell
  - 1-7 = piece type ID (used for coloring)

There is no hidden buffer zone. A piece may hang above row 0 right after
spawning; cells above the top edge are never treated as out of bounds.
"""

from __future__ import annotations

import numpy as np

from termtris.game.pieces import Piece


class Board:
    """Tetris board with collision detection, locking, and line clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        """Initialize an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def collides(self, piece: Piece) -> bool:
        """Check whether a piece at its current position is blocked.

        A filled cell of the piece collides if it is:
          - Left of column 0 or right of the last column.
          - At or below row `height`.
          - On top of a filled grid cell.

        Cells above row 0 are exempt from the overlap check, which lets a
        freshly spawned piece sit partly above the visible field.

        Args:
            piece: The piece to test.

        Returns:
            True if the piece collides, False if the position is free.
        """
        for row, col in piece.cells():
            if col < 0 or col >= self.width or row >= self.height:
                return True
            if row < 0:
                continue
            if self.grid[row, col] != 0:
                return True
        return False

    def lock_piece(self, piece: Piece) -> None:
        """Write a piece's ID into the grid at each of its filled cells.

        Cells outside the grid are dropped. Does NOT check for collision.

        Args:
            piece: The piece to lock.
        """
        for row, col in piece.cells():
            if 0 <= row < self.height and 0 <= col < self.width:
                self.grid[row, col] = piece.id

    def full_rows(self) -> list[int]:
        """Return the indices of completely filled rows, bottom to top."""
        filled = np.all(self.grid != 0, axis=1)
        return [int(r) for r in np.flatnonzero(filled)[::-1]]

    def clear_rows(self, rows: list[int]) -> None:
        """Remove the given rows and shift everything above them down.

        Rows are processed from the highest index up so that shifting never
        moves a row that is still waiting to be removed. Each removal drops
        the rows above it by one and inserts an empty row at the top.

        Args:
            rows: Row indices to remove.
        """
        for removed, row in enumerate(sorted(set(rows), reverse=True)):
            # Earlier removals shifted every row above them down by one
            row += removed
            self.grid[1:row + 1] = self.grid[:row].copy()
            self.grid[0] = 0

    def snapshot(self, piece: Piece | None = None) -> np.ndarray:
        """Return a copy of the grid with the active piece drawn in.

        Piece cells outside the grid are skipped. Does not mutate the board.

        Args:
            piece: The active piece to overlay, or None.

        Returns:
            A numpy array of shape (height, width), dtype int8.
        """
        view = self.grid.copy()
        if piece is not None:
            for row, col in piece.cells():
                if 0 <= row < self.height and 0 <= col < self.width:
                    view[row, col] = piece.id
        return view

    def get_grid(self) -> np.ndarray:
        """Return a copy of the locked-cell grid."""
        return self.grid.copy()

    def reset(self) -> None:
        """Clear the entire board, setting all cells to 0."""
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
