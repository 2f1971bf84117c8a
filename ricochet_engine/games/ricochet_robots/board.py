from __future__ import annotations

import hashlib
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

Cell = Tuple[int, int]

# Direction indices
NORTH, EAST, SOUTH, WEST = range(4)
DIRECTIONS = (NORTH, EAST, SOUTH, WEST)
DIRECTION_NAMES = ("north", "east", "south", "west")
DX = [0, 1, 0, -1]
DY = [-1, 0, 1, 0]
# Bitmask encoding for walls: 1<<direction
DIR_MASKS = [1 << d for d in range(4)]
OPPOSITE_DIR = {NORTH: SOUTH, EAST: WEST, SOUTH: NORTH, WEST: EAST}

MIN_BOARD_SIZE = 4


class Board:
    """Square board holding the wall flags of every cell.

    Walls are stored one-sided, exactly as placed: ``walls[y, x]`` is a
    bitmask of the sides of cell (x, y) carrying a wall. Movement between two
    neighbouring cells is blocked if either cell has the flag facing the
    other one, so asymmetric layouts still block in both directions.
    """

    def __init__(self, size: int = 16, walls: np.ndarray | None = None, boundaries: bool = True):
        self.size = int(size)
        if self.size < MIN_BOARD_SIZE:
            raise ValueError(f"board size must be at least {MIN_BOARD_SIZE}, got {self.size}")
        if walls is None:
            self.walls = np.zeros((self.size, self.size), dtype=np.uint8)
            if boundaries:
                self._add_board_boundaries()
        else:
            if walls.shape != (self.size, self.size):
                raise ValueError(f"walls must have shape {(self.size, self.size)}, got {walls.shape}")
            self.walls = walls.astype(np.uint8)
        self._paths: Dict[Tuple[Cell, int], Tuple[Cell, ...]] = {}

    # ---------------------------------------------------------------------
    # Wall helpers
    # ---------------------------------------------------------------------
    def _add_board_boundaries(self) -> None:
        # North & South outer walls
        self.walls[0, :] |= DIR_MASKS[NORTH]
        self.walls[-1, :] |= DIR_MASKS[SOUTH]
        # West & East outer walls
        self.walls[:, 0] |= DIR_MASKS[WEST]
        self.walls[:, -1] |= DIR_MASKS[EAST]

    def add_wall(self, x: int, y: int, direction: int, mirror: bool = False) -> None:
        """Flag a wall on the given side of cell (x,y).

        With ``mirror`` the opposite flag is also set on the adjacent cell.
        """
        self.walls[y, x] |= DIR_MASKS[direction]
        if mirror:
            nx, ny = x + DX[direction], y + DY[direction]
            if self.in_bounds(nx, ny):
                self.walls[ny, nx] |= DIR_MASKS[OPPOSITE_DIR[direction]]
        self._paths.clear()

    def add_wall_mask(self, x: int, y: int, mask: int) -> None:
        """OR a whole direction bitmask into cell (x,y)."""
        self.walls[y, x] |= mask
        self._paths.clear()

    def has_wall(self, x: int, y: int, direction: int) -> bool:
        return bool(self.walls[y, x] & DIR_MASKS[direction])

    def wall_mask(self, x: int, y: int) -> int:
        return int(self.walls[y, x])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_blocked(self, x: int, y: int, direction: int) -> bool:
        """True if a robot on (x,y) cannot cross into its neighbour in ``direction``."""
        nx, ny = x + DX[direction], y + DY[direction]
        if not self.in_bounds(nx, ny):
            return True
        if self.has_wall(x, y, direction):
            return True
        return self.has_wall(nx, ny, OPPOSITE_DIR[direction])

    def signature(self) -> int:
        """Return a stable, compact integer signature for walls and size.

        Uses BLAKE2b on the walls bytes and dimensions to avoid collisions
        across different boards while keeping hashing lightweight.
        """
        hasher = hashlib.blake2b(digest_size=8)
        hasher.update(self.size.to_bytes(2, byteorder="little", signed=False))
        hasher.update(self.walls.tobytes())
        return int.from_bytes(hasher.digest(), byteorder="little", signed=False)

    def center_cells(self) -> Set[Cell]:
        """Return the 2x2 hub in the middle of the board."""
        lo = self.size // 2 - 1
        return {(lo, lo), (lo + 1, lo), (lo, lo + 1), (lo + 1, lo + 1)}

    def cells(self) -> Iterable[Cell]:
        for y in range(self.size):
            for x in range(self.size):
                yield (x, y)

    # ---------------------------------------------------------------------
    # Movement helpers
    # ---------------------------------------------------------------------
    def next_position(
        self,
        x: int,
        y: int,
        direction: int,
        robots: Sequence[Cell] = (),
    ) -> Cell:
        """Return the position where a robot will stop given a direction."""
        robot_set = set(robots)
        cx, cy = x, y
        while not self.is_blocked(cx, cy, direction):
            nx, ny = cx + DX[direction], cy + DY[direction]
            if (nx, ny) in robot_set:
                break
            cx, cy = nx, ny
        return cx, cy

    def slide(self, cell: Cell, direction: int, robots: Sequence[Cell] = ()) -> Optional[Cell]:
        """Slide from ``cell`` until a wall, the edge or a robot stops it.

        Returns None when the robot cannot move at all in that direction.
        """
        x, y = cell
        dest = self.next_position(x, y, direction, robots)
        if dest == (x, y):
            return None
        return dest

    def legal_moves(self, cell: Cell, robots: Sequence[Cell]) -> List[Tuple[int, Cell]]:
        """Return (direction, destination) for every direction that moves the robot."""
        moves: List[Tuple[int, Cell]] = []
        for direction in DIRECTIONS:
            dest = self.slide(cell, direction, robots)
            if dest is not None:
                moves.append((direction, dest))
        return moves

    def free_path(self, cell: Cell, direction: int) -> Tuple[Cell, ...]:
        """Cells traversed by a robot-free slide, in order, excluding ``cell``.

        Cached until the walls change; the search engine walks these paths and
        stops in front of the first occupied cell.
        """
        key = (cell, direction)
        path = self._paths.get(key)
        if path is None:
            steps: List[Cell] = []
            cx, cy = cell
            while not self.is_blocked(cx, cy, direction):
                cx, cy = cx + DX[direction], cy + DY[direction]
                steps.append((cx, cy))
            path = tuple(steps)
            self._paths[key] = path
        return path

    # ---------------------------------------------------------------------
    # Factory helpers
    # ---------------------------------------------------------------------
    @classmethod
    def empty(cls, size: int = 16) -> "Board":
        return cls(size=size)

    def copy(self) -> "Board":
        return Board(size=self.size, walls=self.walls.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.walls, other.walls)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        walled = int(np.count_nonzero(self.walls))
        return f"Board(size={self.size}, walled_cells={walled})"
