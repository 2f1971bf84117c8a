"""
Game ID: a compact, shareable string for one puzzle.

Layout is three upper-case hexadecimal segments joined by ``-``::

    ROBOTS-TARGET-WALLS

* ROBOTS: robot count, then an ``x``/``y`` nibble pair per robot in
  ROBOT_COLORS order.
* TARGET: index of the target color, then ``x``/``y``.
* WALLS: one ``x``/``y``/type triplet per cell that has walls, in row-major
  order. The type is the index of the cell's wall mask in WALL_TYPE_MASKS.
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from ...core.encoder import Encoder
from .board import Board, DIR_MASKS, NORTH, EAST, SOUTH, WEST
from .game import ROBOT_COLORS, RRGameState

_N, _E, _S, _W = (DIR_MASKS[d] for d in (NORTH, EAST, SOUTH, WEST))

WALL_TYPE_MASKS: Tuple[int, ...] = (
    _N | _W,
    _N | _E,
    _S | _W,
    _S | _E,
    _N,
    _S,
    _W,
    _E,
)

_HEX = "0123456789abcdef"


class GameIdError(ValueError):
    """Raised for a Game ID that cannot be encoded or parsed."""


def wall_type(mask: int) -> int:
    """Return the Game ID wall type of a cell mask."""
    try:
        return WALL_TYPE_MASKS.index(mask)
    except ValueError:
        raise GameIdError(f"wall mask {mask:#06b} has no Game ID wall type") from None


def _nibble(value: int) -> str:
    if not (0 <= value < 16):
        raise GameIdError(f"value {value} does not fit in one hex digit")
    return _HEX[value]


def _parse(segment: str, what: str) -> List[int]:
    values = []
    for ch in segment:
        value = _HEX.find(ch)
        if value < 0:
            raise GameIdError(f"invalid hex digit {ch!r} in {what}")
        values.append(value)
    return values


def encode_game_id(state: RRGameState) -> str:
    if state.board is None:
        raise GameIdError("state has no board to encode")
    robots = _nibble(len(state.robots)) + "".join(_nibble(x) + _nibble(y) for x, y in state.robots)
    gx, gy = state.goal
    target = _nibble(state.goal_robot) + _nibble(gx) + _nibble(gy)
    walls = []
    ys, xs = np.nonzero(state.board.walls)
    for y, x in zip(ys.tolist(), xs.tolist()):
        kind = wall_type(state.board.wall_mask(x, y))
        walls.append(_nibble(x) + _nibble(y) + str(kind))
    return f"{robots}-{target}-{''.join(walls)}".upper()


def decode_game_id(game_id: str, size: int = 16) -> RRGameState:
    """Parse a Game ID; raises GameIdError when it is malformed."""
    if not isinstance(game_id, str):
        raise GameIdError(f"Game ID must be a string, got {type(game_id).__name__}")
    parts = game_id.strip().lower().split("-")
    if len(parts) != 3:
        raise GameIdError(f"expected 3 segments, got {len(parts)}")
    robot_str, target_str, wall_str = parts

    if not robot_str:
        raise GameIdError("empty robot segment")
    robot_digits = _parse(robot_str, "robot segment")
    num_robots = robot_digits[0]
    if not (1 <= num_robots <= len(ROBOT_COLORS)):
        raise GameIdError(f"robot count must be between 1 and {len(ROBOT_COLORS)}, got {num_robots}")
    if len(robot_digits) != 1 + 2 * num_robots:
        raise GameIdError(f"robot segment should have {1 + 2 * num_robots} digits, got {len(robot_digits)}")
    robots = tuple(
        (robot_digits[1 + 2 * i], robot_digits[2 + 2 * i]) for i in range(num_robots)
    )

    if len(target_str) != 3:
        raise GameIdError(f"target segment should have 3 digits, got {len(target_str)}")
    color, gx, gy = _parse(target_str, "target segment")
    if color >= num_robots:
        raise GameIdError(f"target color index {color} out of range")

    if len(wall_str) % 3:
        raise GameIdError(f"wall segment length {len(wall_str)} is not a multiple of 3")
    wall_digits = _parse(wall_str, "wall segment")

    try:
        board = Board(size=size, boundaries=False)
    except ValueError as e:
        raise GameIdError(str(e)) from None
    for i in range(0, len(wall_digits), 3):
        x, y, kind = wall_digits[i : i + 3]
        if kind >= len(WALL_TYPE_MASKS):
            raise GameIdError(f"wall type {kind} out of range")
        if not board.in_bounds(x, y):
            raise GameIdError(f"wall cell {(x, y)} is outside the board")
        board.add_wall_mask(x, y, WALL_TYPE_MASKS[kind])

    try:
        return RRGameState(robots=robots, goal=(gx, gy), goal_robot=color, board=board)
    except ValueError as e:
        raise GameIdError(str(e)) from None


class GameIdEncoder(Encoder):
    """Encoder pairing encode_game_id and decode_game_id for a board size."""

    def __init__(self, size: int = 16):
        self.size = size

    def encode(self, state: RRGameState) -> str:
        return encode_game_id(state)

    def decode(self, data: str) -> RRGameState:
        return decode_game_id(data, size=self.size)
