"""
Tetromino catalog and the mutable piece instance.

The catalog is process-wide constant data: seven piece kinds, each with
exactly 4 rotation states stored as 4x4 numpy masks. A mask cell is 0 when
empty and the kind's ID (1-7) when occupied, so locking a piece writes its
color ID straight into the board.

Coordinate convention:
  - A piece's (x, y) is the board column/row of its mask's top-left corner.
  - On the board, row 0 is the top and row increases downward.
  - Rotation index 0 is the spawn orientation; each +1 is a clockwise turn.
"""

from __future__ import annotations

import random

import numpy as np

# =============================================================================
# Piece Colors: terminal color names (mapped to curses colors by the renderer)
# =============================================================================

COLOR_CYAN    = "cyan"     # I
COLOR_BLUE    = "blue"     # J
COLOR_WHITE   = "white"    # L (terminals have no orange)
COLOR_YELLOW  = "yellow"   # O
COLOR_GREEN   = "green"    # S
COLOR_MAGENTA = "magenta"  # T
COLOR_RED     = "red"      # Z

NUM_ROTATIONS = 4
MASK_SIZE = 4


def _masks(piece_id: int, rotations: list[list[list[int]]]) -> list[np.ndarray]:
    """Build read-only int8 masks, replacing 1s with the piece ID."""
    masks = []
    for rows in rotations:
        mask = np.array(rows, dtype=np.int8) * piece_id
        mask.setflags(write=False)
        masks.append(mask)
    return masks


# =============================================================================
# Tetromino Definitions
# =============================================================================
# Rotation order: [0=spawn, 1=CW, 2=180, 3=CCW]. Every state is a full 4x4
# box so that rotating never changes the anchor.

I_PIECE: dict = {
    "id": 1,
    "name": "I",
    "color": COLOR_CYAN,
    "rotations": _masks(1, [
        [[0, 0, 0, 0],
         [1, 1, 1, 1],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 1, 0]],
        [[0, 0, 0, 0],
         [0, 0, 0, 0],
         [1, 1, 1, 1],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0]],
    ]),
}

J_PIECE: dict = {
    "id": 2,
    "name": "J",
    "color": COLOR_BLUE,
    "rotations": _masks(2, [
        [[1, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0]],
    ]),
}

L_PIECE: dict = {
    "id": 3,
    "name": "L",
    "color": COLOR_WHITE,
    "rotations": _masks(3, [
        [[0, 0, 1, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 1, 0],
         [1, 0, 0, 0],
         [0, 0, 0, 0]],
        [[1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ]),
}

O_PIECE: dict = {
    "id": 4,
    "name": "O",
    "color": COLOR_YELLOW,
    # All 4 rotations are identical for O-piece
    "rotations": _masks(4, [
        [[0, 1, 1, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
    ] * NUM_ROTATIONS),
}

S_PIECE: dict = {
    "id": 5,
    "name": "S",
    "color": COLOR_GREEN,
    "rotations": _masks(5, [
        [[0, 1, 1, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 1, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [0, 1, 1, 0],
         [1, 1, 0, 0],
         [0, 0, 0, 0]],
        [[1, 0, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ]),
}

T_PIECE: dict = {
    "id": 6,
    "name": "T",
    "color": COLOR_MAGENTA,
    "rotations": _masks(6, [
        [[0, 1, 0, 0],
         [1, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
    ]),
}

Z_PIECE: dict = {
    "id": 7,
    "name": "Z",
    "color": COLOR_RED,
    "rotations": _masks(7, [
        [[1, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 1, 0],
         [0, 1, 1, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 0]],
        [[0, 0, 0, 0],
         [1, 1, 0, 0],
         [0, 1, 1, 0],
         [0, 0, 0, 0]],
        [[0, 1, 0, 0],
         [1, 1, 0, 0],
         [1, 0, 0, 0],
         [0, 0, 0, 0]],
    ]),
}

# =============================================================================
# Lookup tables
# =============================================================================

PIECE_TYPES: list[dict] = [I_PIECE, J_PIECE, L_PIECE, O_PIECE, S_PIECE, T_PIECE, Z_PIECE]

PIECES_BY_NAME: dict[str, dict] = {piece["name"]: piece for piece in PIECE_TYPES}

# Piece ID -> color name, used by the renderer for locked cells
PIECE_COLORS: dict[int, str] = {piece["id"]: piece["color"] for piece in PIECE_TYPES}


def shape_mask(name: str, rotation: int) -> np.ndarray:
    """Return the read-only 4x4 mask for a piece kind in a rotation state.

    Args:
        name: Piece kind ("I", "J", "L", "O", "S", "T" or "Z").
        rotation: Rotation state index (0-3).

    Returns:
        A 4x4 int8 array holding the piece ID in occupied cells.

    Raises:
        ValueError: If the kind or rotation is out of range.
    """
    piece = PIECES_BY_NAME.get(name)
    if piece is None:
        raise ValueError(f"Unknown piece kind: {name!r}")
    if not 0 <= rotation < NUM_ROTATIONS:
        raise ValueError(f"Rotation out of range: {rotation}")
    return piece["rotations"][rotation]


class Piece:
    """A piece on (or waiting to enter) the board.

    Attributes:
        name: Piece kind, a key of PIECES_BY_NAME.
        x: Column of the mask's top-left corner.
        y: Row of the mask's top-left corner.
        rotation: Rotation state index (0-3).
    """

    def __init__(self, name: str, x: int = 0, y: int = 0, rotation: int = 0) -> None:
        if name not in PIECES_BY_NAME:
            raise ValueError(f"Unknown piece kind: {name!r}")
        self.name = name
        self.x = x
        self.y = y
        self.rotation = rotation

    @classmethod
    def random(cls, x: int = 0, y: int = 0, rng: random.Random | None = None) -> Piece:
        """Create a piece of a uniformly chosen kind at rotation 0."""
        chooser = rng if rng is not None else random
        return cls(chooser.choice(PIECE_TYPES)["name"], x, y)

    @property
    def id(self) -> int:
        return PIECES_BY_NAME[self.name]["id"]

    @property
    def color(self) -> str:
        return PIECES_BY_NAME[self.name]["color"]

    @property
    def shape(self) -> np.ndarray:
        """Mask for the current rotation."""
        return shape_mask(self.name, self.rotation)

    def rotate_cw(self) -> None:
        """Advance the rotation index by one, modulo 4. No validation."""
        self.rotation = (self.rotation + 1) % NUM_ROTATIONS

    def cells(self) -> list[tuple[int, int]]:
        """Board (row, col) coordinates of every occupied cell."""
        rows, cols = np.nonzero(self.shape)
        return [(self.y + int(r), self.x + int(c)) for r, c in zip(rows, cols)]

    def __repr__(self) -> str:
        return f"Piece({self.name!r}, x={self.x}, y={self.y}, rotation={self.rotation})"
