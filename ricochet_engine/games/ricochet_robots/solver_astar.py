from __future__ import annotations

import heapq
import logging
import time
from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Set, Tuple

from ...config import DEDUP_MODES, SolverConfig
from ...core.solver import HeuristicSolver
from .board import Board, Cell, DIRECTIONS
from .game import Move, Robots, RRGameState, Target, move_robot
from .heuristics import DistanceField

logger = logging.getLogger(__name__)

_UNREACHABLE = 1 << 16
_CLOCK_CHECK_EVERY = 1024


class SearchLimitExceeded(RuntimeError):
    """Raised when a search runs past its state or time budget."""

    def __init__(self, message: str, states_explored: int):
        super().__init__(message)
        self.states_explored = states_explored


@dataclass
class SolveResult:
    moves: Optional[List[Move]]  # None when no solution exists
    states_explored: int
    elapsed: float = 0.0  # seconds

    @property
    def solved(self) -> bool:
        return self.moves is not None

    @property
    def length(self) -> Optional[int]:
        return None if self.moves is None else len(self.moves)


def dedup_key(robots: Robots, mode: str = "color") -> Hashable:
    """Key under which a configuration counts as visited.

    ``"color"`` keeps which robot stands where. ``"occupancy"`` only keeps the
    set of occupied cells, so configurations that swap robots between the
    same cells collapse to one node; that mode can miss solutions and exists
    to reproduce results of solvers that key states that way.
    """
    if mode == "color":
        return robots
    if mode == "occupancy":
        return tuple(sorted(robots))
    raise ValueError(f"dedup must be one of {DEDUP_MODES}, got {mode!r}")


class _Node:
    __slots__ = ("robots", "g", "parent", "move")

    def __init__(self, robots: Robots, g: int, parent: "_Node | None" = None, move: Move | None = None):
        self.robots = robots
        self.g = g
        self.parent = parent
        self.move = move

    def path(self) -> List[Move]:
        moves: List[Move] = []
        node = self
        while node.move is not None:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return moves


class AStarSolver(HeuristicSolver):
    """A* search for the shortest solution in Ricochet Robots.

    Frontier priority is ``g + h`` where ``h`` is the stop-anywhere distance
    of the goal robot, an admissible and consistent bound, so the first goal
    configuration dequeued is optimal. Ties prefer configurations whose goal
    robot is closer along the wall-stop field.

    With ``splice`` enabled, every dequeued configuration is also completed
    greedily: the goal robot follows the wall-stop field one real slide at a
    time. A completed trace becomes the incumbent and is returned as soon as
    no frontier entry can beat it, which keeps the answer optimal while
    often stopping several layers early. Traces that get stuck are dropped.
    """

    def __init__(
        self,
        board: Board,
        max_depth: int | None = None,
        max_states: int | None = None,
        time_limit: float | None = None,
        dedup: str = "color",
        splice: bool = True,
    ):
        if dedup not in DEDUP_MODES:
            raise ValueError(f"dedup must be one of {DEDUP_MODES}, got {dedup!r}")
        self.board = board
        self.max_depth = max_depth
        self.max_states = max_states
        self.time_limit = time_limit
        self.dedup = dedup
        self.splice = splice
        self.last_result: SolveResult | None = None
        self._fields: Dict[Tuple[int, Cell], DistanceField] = {}

    @classmethod
    def from_config(cls, board: Board, config: SolverConfig) -> "AStarSolver":
        return cls(
            board,
            max_depth=config.max_depth,
            max_states=config.max_states,
            time_limit=config.time_limit,
            dedup=config.dedup,
            splice=config.splice,
        )

    # ------------------------------------------------------------------
    # Heuristic
    # ------------------------------------------------------------------
    def distance_field(self, goal: Cell) -> DistanceField:
        # Fields depend on the walls, so the signature is part of the key.
        key = (self.board.signature(), goal)
        field = self._fields.get(key)
        if field is None:
            field = DistanceField(self.board, goal)
            self._fields[key] = field
        return field

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------
    def solve(self, state: RRGameState) -> List[Move]:
        """Return the optimal move list; ``[]`` if solved already or unsolvable.

        ``last_result`` tells the two apart.
        """
        result = self.search(state)
        return result.moves or []

    def search(self, state: RRGameState) -> SolveResult:
        started = time.perf_counter()
        deadline = None if self.time_limit is None else started + self.time_limit
        goal, goal_robot = state.goal, state.goal_robot
        field = self.distance_field(goal)
        bound = field.lower_bound

        start_robots = state.robots
        h0 = bound(start_robots[goal_robot])
        if h0 is None or (self.max_depth is not None and h0 > self.max_depth):
            return self._finish(None, 0, started)

        counter = 0
        frontier: List[Tuple[int, int, int, _Node]] = []
        heapq.heappush(frontier, (h0, self._tie(field, start_robots[goal_robot]), counter, _Node(start_robots, 0)))
        g_cost: Dict[Hashable, int] = {dedup_key(start_robots, self.dedup): 0}
        closed: Set[Hashable] = set()
        incumbent: List[Move] | None = None
        explored = 0

        while frontier:
            f, _, _, node = heapq.heappop(frontier)
            if incumbent is not None and len(incumbent) <= f:
                return self._finish(incumbent, explored, started)
            key = dedup_key(node.robots, self.dedup)
            if key in closed:
                continue
            self._check_limits(explored, deadline)
            closed.add(key)
            explored += 1

            robots, g = node.robots, node.g
            if robots[goal_robot] == goal:
                return self._finish(node.path(), explored, started)

            if self.splice:
                tail = self._trace(robots, goal_robot, field)
                if tail is not None:
                    length = g + len(tail)
                    within_depth = self.max_depth is None or length <= self.max_depth
                    if within_depth and (incumbent is None or length < len(incumbent)):
                        incumbent = node.path() + tail
                    if incumbent is not None and len(incumbent) <= f:
                        return self._finish(incumbent, explored, started)

            if self.max_depth is not None and g >= self.max_depth:
                continue

            occupied = set(robots)
            for idx, cell in enumerate(robots):
                for direction in DIRECTIONS:
                    dest = self._slide(cell, direction, occupied)
                    if dest is None:
                        continue
                    child = move_robot(robots, idx, dest)
                    child_key = dedup_key(child, self.dedup)
                    if child_key in closed:
                        continue
                    g_child = g + 1
                    known = g_cost.get(child_key)
                    if known is not None and known <= g_child:
                        continue
                    h = bound(child[goal_robot])
                    if h is None:
                        continue
                    f_child = g_child + h
                    if self.max_depth is not None and f_child > self.max_depth:
                        continue
                    if incumbent is not None and f_child >= len(incumbent):
                        continue
                    g_cost[child_key] = g_child
                    counter += 1
                    heapq.heappush(
                        frontier,
                        (
                            f_child,
                            self._tie(field, child[goal_robot]),
                            counter,
                            _Node(child, g_child, node, Move(idx, direction, dest)),
                        ),
                    )
        return self._finish(incumbent, explored, started)

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def _slide(self, cell: Cell, direction: int, occupied: Set[Cell]) -> Optional[Cell]:
        # Same stop rule as Board.slide, walking the cached robot-free path.
        dest = None
        for step in self.board.free_path(cell, direction):
            if step in occupied:
                break
            dest = step
        return dest

    def _trace(self, robots: Robots, goal_robot: int, field: DistanceField) -> Optional[List[Move]]:
        """Walk the goal robot down the wall-stop field with real slides."""
        cell = robots[goal_robot]
        dist = field.distance(cell)
        if dist is None:
            return None
        moves: List[Move] = []
        while dist > 0:
            occupied = set(robots)
            for direction in DIRECTIONS:
                dest = self._slide(cell, direction, occupied)
                if dest is not None and field.distance(dest) == dist - 1:
                    break
            else:
                return None
            moves.append(Move(goal_robot, direction, dest))
            robots = move_robot(robots, goal_robot, dest)
            cell = dest
            dist -= 1
        return moves

    @staticmethod
    def _tie(field: DistanceField, cell: Cell) -> int:
        dist = field.distance(cell)
        return _UNREACHABLE if dist is None else dist

    def _check_limits(self, explored: int, deadline: float | None) -> None:
        if self.max_states is not None and explored >= self.max_states:
            raise SearchLimitExceeded(f"search exceeded {self.max_states} states", explored)
        if deadline is not None and explored % _CLOCK_CHECK_EVERY == 0 and time.perf_counter() > deadline:
            raise SearchLimitExceeded(f"search exceeded {self.time_limit:.3f}s", explored)

    def _finish(self, moves: List[Move] | None, explored: int, started: float) -> SolveResult:
        result = SolveResult(moves=moves, states_explored=explored, elapsed=time.perf_counter() - started)
        self.last_result = result
        logger.debug(
            "solve finished: length=%s states=%d elapsed=%.3fs",
            result.length,
            explored,
            result.elapsed,
        )
        return result


def solve(
    robots: Robots,
    board: Board,
    target: Target,
    **solver_kwargs,
) -> SolveResult:
    """Solve one puzzle given as a configuration, walls and target."""
    state = RRGameState(robots=tuple(robots), goal=target.cell, goal_robot=target.color, board=board)
    return AStarSolver(board, **solver_kwargs).search(state)
