"""Game logic: board, pieces, and the session state machine."""

from termtris.game.pieces import PIECE_TYPES, PIECE_COLORS, Piece, shape_mask
from termtris.game.board import Board
from termtris.game.tetris import TetrisGame, Action, Phase

__all__ = [
    "PIECE_TYPES",
    "PIECE_COLORS",
    "Piece",
    "shape_mask",
    "Board",
    "TetrisGame",
    "Action",
    "Phase",
]
