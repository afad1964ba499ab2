"""Tests for collision, locking, and row clearing on the Board."""

from __future__ import annotations

import numpy as np

from termtris.game.board import Board
from termtris.game.pieces import Piece


def test_new_board_is_empty():
    board = Board()
    assert board.grid.shape == (20, 10)
    assert not board.grid.any()


def test_spawn_position_is_free_on_empty_board():
    board = Board()
    for name in "IJLOSTZ":
        assert not board.collides(Piece(name, x=3, y=0))


def test_collides_with_side_walls():
    board = Board()
    assert board.collides(Piece("I", x=-1, y=0))
    assert not board.collides(Piece("I", x=0, y=0))
    assert board.collides(Piece("I", x=7, y=0))
    assert not board.collides(Piece("I", x=6, y=0))


def test_collides_with_floor():
    board = Board()
    assert not board.collides(Piece("O", x=3, y=18))
    assert board.collides(Piece("O", x=3, y=19))


def test_cells_above_top_are_allowed():
    board = Board()
    board.grid[0, :] = 1
    board.grid[0, 4] = 0
    board.grid[0, 5] = 0
    # O occupies rows -1 and 0 in columns 4-5
    assert not board.collides(Piece("O", x=3, y=-1))


def test_cells_above_top_still_check_walls():
    board = Board()
    assert not board.collides(Piece("I", x=-2, y=-3, rotation=1))
    assert board.collides(Piece("I", x=-3, y=-3, rotation=1))


def test_collides_with_locked_cells():
    board = Board()
    board.grid[19, 4] = 1
    assert board.collides(Piece("O", x=3, y=18))
    assert not board.collides(Piece("O", x=5, y=18))


def test_lock_piece_writes_piece_id():
    board = Board()
    board.lock_piece(Piece("O", x=3, y=18))
    assert (board.grid[18:20, 4:6] == 4).all()
    assert np.count_nonzero(board.grid) == 4


def test_locked_piece_collides_at_same_position():
    board = Board()
    piece = Piece("T", x=2, y=10, rotation=2)
    assert not board.collides(piece)
    board.lock_piece(piece)
    assert board.collides(piece)


def test_lock_piece_drops_cells_above_top():
    board = Board()
    board.lock_piece(Piece("O", x=3, y=-1))
    assert np.count_nonzero(board.grid) == 2
    assert (board.grid[0, 4:6] == 4).all()


def test_full_rows_bottom_to_top():
    board = Board()
    board.grid[19, :] = 1
    board.grid[17, :] = 2
    board.grid[18, :9] = 3
    assert board.full_rows() == [19, 17]


def test_clear_separated_rows_shifts_content_down():
    board = Board()
    board.grid[19, :] = 1
    board.grid[18, 0] = 2
    board.grid[17, :] = 1
    board.grid[16, 1] = 3

    board.clear_rows([19, 17])

    assert board.grid.shape == (20, 10)
    assert board.grid[19, 0] == 2
    assert np.count_nonzero(board.grid[19]) == 1
    assert board.grid[18, 1] == 3
    assert np.count_nonzero(board.grid[18]) == 1
    assert not board.grid[:18].any()


def test_clear_adjacent_rows():
    board = Board()
    board.grid[19, :] = 1
    board.grid[18, :] = 1
    board.grid[17, 5] = 6

    board.clear_rows([18, 19])

    assert board.grid[19, 5] == 6
    assert np.count_nonzero(board.grid) == 1
    assert board.full_rows() == []


def test_clear_rows_leaves_no_full_rows():
    board = Board()
    rng = np.random.default_rng(0)
    board.grid[10:, :] = rng.integers(1, 8, size=(10, 10))
    for row in range(10, 20, 3):
        board.grid[row, row % 10] = 0
    full = board.full_rows()
    board.clear_rows(full)
    assert board.full_rows() == []
    assert not board.grid[:len(full)].any()


def test_snapshot_overlays_piece_without_mutating():
    board = Board()
    board.grid[19, 0] = 1
    view = board.snapshot(Piece("O", x=3, y=0))
    assert (view[0:2, 4:6] == 4).all()
    assert view[19, 0] == 1
    assert not board.grid[0:2].any()
    view[19, 0] = 0
    assert board.grid[19, 0] == 1


def test_reset_clears_grid():
    board = Board()
    board.grid[5, 5] = 3
    board.reset()
    assert not board.grid.any()
