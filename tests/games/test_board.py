import random

import numpy as np
import pytest

from ricochet_engine.games.ricochet_robots.board import Board, DIRECTIONS, DIR_MASKS, NORTH, EAST, SOUTH, WEST
from ricochet_engine.games.ricochet_robots.generator import build_board, place_pieces


def test_slide_to_board_edge():
    board = Board.empty(8)
    assert board.slide((3, 3), NORTH) == (3, 0)
    assert board.slide((3, 3), EAST) == (7, 3)
    assert board.slide((3, 3), SOUTH) == (3, 7)
    assert board.slide((3, 3), WEST) == (0, 3)


def test_slide_returns_none_without_movement():
    board = Board.empty(8)
    assert board.slide((0, 0), NORTH) is None
    assert board.slide((0, 0), WEST) is None
    moves = board.legal_moves((0, 0), [(0, 0)])
    assert moves == [(EAST, (7, 0)), (SOUTH, (0, 7))]


def test_slide_stops_before_robot():
    board = Board.empty(8)
    robots = [(3, 3), (3, 1)]
    assert board.slide((3, 3), NORTH, robots) == (3, 2)
    # Adjacent robot: no movement at all
    assert board.slide((3, 2), NORTH, [(3, 2), (3, 1)]) is None


def test_one_sided_wall_blocks_both_ways():
    board = Board.empty(8)
    board.add_wall(3, 4, EAST)  # flag only on the west cell of the pair
    assert not board.has_wall(4, 4, WEST)
    assert board.slide((0, 4), EAST) == (3, 4)
    assert board.slide((7, 4), WEST) == (4, 4)
    assert board.is_blocked(4, 4, WEST)
    assert board.is_blocked(3, 4, EAST)


def test_mirrored_wall_sets_both_flags():
    board = Board.empty(8)
    board.add_wall(2, 2, SOUTH, mirror=True)
    assert board.has_wall(2, 2, SOUTH)
    assert board.has_wall(2, 3, NORTH)


def test_slide_never_returns_start_cell():
    rng = random.Random(11)
    for _ in range(3):
        board = build_board(16, rng=rng)
        robots, _, _ = place_pieces(board, 4, rng=rng)
        for cell in board.cells():
            for direction in DIRECTIONS:
                dest = board.slide(cell, direction, robots)
                assert dest != cell


def test_free_path_matches_robot_free_slide():
    board = build_board(12, rng=random.Random(2))
    for cell in board.cells():
        for direction in DIRECTIONS:
            path = board.free_path(cell, direction)
            dest = board.slide(cell, direction)
            assert (path[-1] if path else None) == dest


def test_free_path_cache_cleared_on_new_wall():
    board = Board.empty(8)
    assert board.free_path((0, 0), EAST)[-1] == (7, 0)
    board.add_wall(4, 0, WEST)
    assert board.free_path((0, 0), EAST)[-1] == (3, 0)


def test_free_path_cache_cleared_on_wall_mask():
    board = Board.empty(8)
    assert board.free_path((0, 0), SOUTH)[-1] == (0, 7)
    board.add_wall_mask(0, 4, DIR_MASKS[SOUTH] | DIR_MASKS[WEST])
    assert board.wall_mask(0, 4) == DIR_MASKS[SOUTH] | DIR_MASKS[WEST]
    assert board.free_path((0, 0), SOUTH)[-1] == (0, 4)


def test_center_cells():
    assert Board.empty(16).center_cells() == {(7, 7), (8, 7), (7, 8), (8, 8)}
    assert Board.empty(8).center_cells() == {(3, 3), (4, 3), (3, 4), (4, 4)}


def test_board_validation():
    with pytest.raises(ValueError):
        Board(size=3)
    with pytest.raises(ValueError):
        Board(size=8, walls=np.zeros((4, 4), dtype=np.uint8))


def test_signature_tracks_walls():
    a = Board.empty(8)
    b = Board.empty(8)
    assert a.signature() == b.signature()
    assert a == b
    b.add_wall(2, 2, NORTH)
    assert a.signature() != b.signature()
    assert a != b
    assert b.copy() == b
