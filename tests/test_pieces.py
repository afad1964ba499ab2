"""Tests for the tetromino catalog and piece instances."""

from __future__ import annotations

import random

import numpy as np
import pytest

from termtris.game.pieces import (
    PIECE_COLORS,
    PIECE_TYPES,
    PIECES_BY_NAME,
    Piece,
    shape_mask,
)

KINDS = ["I", "J", "L", "O", "S", "T", "Z"]


def test_catalog_has_seven_kinds_with_distinct_ids():
    assert sorted(p["name"] for p in PIECE_TYPES) == sorted(KINDS)
    assert sorted(p["id"] for p in PIECE_TYPES) == list(range(1, 8))
    assert set(PIECE_COLORS) == set(range(1, 8))


@pytest.mark.parametrize("name", KINDS)
def test_every_rotation_is_a_4x4_tetromino(name):
    piece_id = PIECES_BY_NAME[name]["id"]
    for rotation in range(4):
        mask = shape_mask(name, rotation)
        assert mask.shape == (4, 4)
        assert np.count_nonzero(mask) == 4
        assert set(np.unique(mask)) == {0, piece_id}


def test_masks_are_read_only():
    mask = shape_mask("T", 0)
    with pytest.raises(ValueError):
        mask[0, 0] = 9


def test_shape_mask_rejects_out_of_range():
    with pytest.raises(ValueError):
        shape_mask("X", 0)
    with pytest.raises(ValueError):
        shape_mask("T", 4)
    with pytest.raises(ValueError):
        shape_mask("T", -1)


def test_piece_rejects_unknown_kind():
    with pytest.raises(ValueError):
        Piece("Q")


@pytest.mark.parametrize("name", KINDS)
def test_four_clockwise_turns_are_identity(name):
    piece = Piece(name, x=3, y=5)
    original = piece.shape.copy()
    for _ in range(4):
        piece.rotate_cw()
    assert piece.rotation == 0
    assert (piece.x, piece.y) == (3, 5)
    np.testing.assert_array_equal(piece.shape, original)


def test_rotate_cw_wraps_modulo_four():
    piece = Piece("J", rotation=3)
    piece.rotate_cw()
    assert piece.rotation == 0


def test_random_piece_starts_unrotated_at_anchor():
    piece = Piece.random(4, 2, rng=random.Random(1))
    assert piece.name in KINDS
    assert (piece.x, piece.y, piece.rotation) == (4, 2, 0)


def test_random_selection_covers_all_kinds():
    rng = random.Random(123)
    seen = {Piece.random(rng=rng).name for _ in range(500)}
    assert seen == set(KINDS)


def test_cells_are_offset_by_anchor():
    piece = Piece("O", x=3, y=10)
    assert sorted(piece.cells()) == [(10, 4), (10, 5), (11, 4), (11, 5)]
