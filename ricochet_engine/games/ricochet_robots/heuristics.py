"""Walls-only distance fields used to guide and bound the search.

Both fields are computed backwards from the target cell over a table of
"which cells reach X in one slide" with every robot removed from the board:

* the wall-stop field follows slides that end against a wall or the edge,
  which is the path a lone robot actually takes;
* the stop-anywhere field also lets a slide end on any cell it crosses.

Robots can act as blockers that shorten a path, so only the stop-anywhere
field is a lower bound on the real number of moves. The wall-stop field is
used to order the frontier and to trace candidate completions.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional

from .board import Board, Cell, DIRECTIONS


def reverse_moves(board: Board, stop_anywhere: bool = False) -> Dict[Cell, List[Cell]]:
    """Map every cell to the cells that reach it in one robot-free slide."""
    table: Dict[Cell, List[Cell]] = {cell: [] for cell in board.cells()}
    for origin in board.cells():
        for direction in DIRECTIONS:
            if stop_anywhere:
                for landing in board.free_path(origin, direction):
                    table[landing].append(origin)
            else:
                landing = board.slide(origin, direction)
                if landing is not None:
                    table[landing].append(origin)
    return table


def backward_distances(target: Cell, reverse_table: Dict[Cell, List[Cell]]) -> Dict[Cell, int]:
    """Breadth-first search from ``target`` over the reverse-move graph.

    Cells that can never reach the target are absent from the result.
    """
    distances: Dict[Cell, int] = {target: 0}
    queue = deque([target])
    while queue:
        cell = queue.popleft()
        dist = distances[cell] + 1
        for origin in reverse_table.get(cell, ()):
            if origin not in distances:
                distances[origin] = dist
                queue.append(origin)
    return distances


class DistanceField:
    """Both distance fields of one (board, target cell) pair."""

    def __init__(self, board: Board, target: Cell):
        self.board = board
        self.target = target
        self.wall_stop = backward_distances(target, reverse_moves(board))
        self.relaxed = backward_distances(target, reverse_moves(board, stop_anywhere=True))

    def distance(self, cell: Cell) -> Optional[int]:
        """Wall-stop distance of ``cell``, None if unreachable."""
        return self.wall_stop.get(cell)

    def lower_bound(self, cell: Cell) -> Optional[int]:
        """Admissible bound on the moves needed from ``cell``.

        None means no sequence of moves brings a robot from ``cell`` to the
        target, whatever the other robots do.
        """
        return self.relaxed.get(cell)
