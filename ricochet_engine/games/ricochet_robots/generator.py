from __future__ import annotations

import logging
import random
import time
from typing import List, Optional, Set, Tuple

from ...config import GeneratorConfig, SolverConfig
from .board import Board, Cell, NORTH, EAST, SOUTH, WEST
from .game import ROBOT_COLORS, RRGameState
from .solver_astar import AStarSolver, SearchLimitExceeded, SolveResult

logger = logging.getLogger(__name__)

# Corner pairs placed on interior cells
L_ORIENTS = [
    (NORTH, WEST),
    (NORTH, EAST),
    (SOUTH, WEST),
    (SOUTH, EAST),
]


class GenerationError(RuntimeError):
    """Raised when no acceptable puzzle was found within the attempt budget."""


def _block(x: int, y: int, radius: int = 1) -> Set[Cell]:
    return {(x + dx, y + dy) for dx in range(-radius, radius + 1) for dy in range(-radius, radius + 1)}


def build_board(
    size: int = 16,
    num_walls: int = 20,
    wall_attempts: int = 1000,
    rng: random.Random | None = None,
) -> Board:
    """Build a bordered board with a walled central hub and random walls.

    Edge cells receive a single spur perpendicular to the edge; interior
    cells receive an L-shaped corner. No wall is placed next to the hub or
    within one cell of a previously placed wall. Every resulting cell mask
    is one of the eight categories a Game ID can carry.
    """
    rng = rng or random.Random()
    board = Board(size=size)

    # Central 2x2 hub, walled on its outward sides
    hub = board.center_cells()
    lo = size // 2 - 1
    for x, y in hub:
        board.add_wall(x, y, WEST if x == lo else EAST)
        board.add_wall(x, y, NORTH if y == lo else SOUTH)

    forbidden: Set[Cell] = set()
    for x, y in hub:
        forbidden |= _block(x, y)

    placed = 0
    attempts = 0
    last = size - 1
    while placed < num_walls and attempts < wall_attempts:
        attempts += 1
        x = rng.randrange(size)
        y = rng.randrange(size)
        if (x, y) in forbidden:
            continue
        on_ns_edge = y in (0, last)
        on_we_edge = x in (0, last)
        if on_ns_edge and on_we_edge:
            continue  # corners already carry two walls
        flip = rng.random() < 0.5
        if on_ns_edge:
            board.add_wall(x, y, EAST if flip else WEST)
        elif on_we_edge:
            board.add_wall(x, y, NORTH if flip else SOUTH)
        else:
            if board.wall_mask(x, y):
                continue
            d1, d2 = L_ORIENTS[rng.randrange(len(L_ORIENTS))]
            board.add_wall(x, y, d1)
            board.add_wall(x, y, d2)
        forbidden |= _block(x, y)
        placed += 1
    logger.debug("placed %d/%d walls in %d attempts", placed, num_walls, attempts)
    return board


def place_pieces(
    board: Board,
    num_robots: int = 4,
    rng: random.Random | None = None,
) -> Tuple[Tuple[Cell, ...], Cell, int]:
    """Pick distinct non-hub cells for the robots and the target, and a target color."""
    rng = rng or random.Random()
    blocked = set(board.center_cells())
    cells: List[Cell] = []
    while len(cells) < num_robots + 1:
        pos = (rng.randrange(board.size), rng.randrange(board.size))
        if pos in blocked:
            continue
        blocked.add(pos)
        cells.append(pos)
    goal_robot = rng.randrange(min(num_robots, len(ROBOT_COLORS)))
    return tuple(cells[:num_robots]), cells[num_robots], goal_robot


class PuzzleGenerator:
    """Generates puzzles whose optimal solution length lies within a window."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        solver_config: SolverConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or GeneratorConfig()
        self.solver_config = solver_config or SolverConfig()
        self.rng = rng or random.Random()
        self.attempts = 0
        # Candidates dropped because their search ran past the budget; some of
        # them may have had an optimal length inside the window.
        self.discarded = 0
        self.last_result: SolveResult | None = None

    def candidate(self) -> RRGameState:
        """One random, not yet validated puzzle."""
        cfg = self.config
        board = build_board(cfg.board_size, cfg.num_walls, cfg.wall_attempts, rng=self.rng)
        robots, goal, goal_robot = place_pieces(board, cfg.num_robots, rng=self.rng)
        return RRGameState(robots=robots, goal=goal, goal_robot=goal_robot, board=board)

    def evaluate(self, state: RRGameState, time_limit: float | None = None) -> Optional[SolveResult]:
        """Solve a candidate within the per-candidate budget, None if it ran out."""
        cfg = self.config
        max_depth = cfg.max_solution_length
        if self.solver_config.max_depth is not None:
            max_depth = min(max_depth, self.solver_config.max_depth)
        max_states = self.solver_config.max_states or cfg.max_states_per_candidate
        limits = [t for t in (time_limit, self.solver_config.time_limit) if t is not None]
        solver = AStarSolver(
            state.board,
            max_depth=max_depth,
            max_states=max_states,
            time_limit=min(limits) if limits else None,
            dedup=self.solver_config.dedup,
            splice=self.solver_config.splice,
        )
        try:
            return solver.search(state)
        except SearchLimitExceeded as e:
            self.discarded += 1
            logger.debug("candidate discarded: %s", e)
            return None

    def accepts(self, result: Optional[SolveResult]) -> bool:
        if result is None or result.length is None:
            return False
        lo, hi = self.config.bounds
        return lo <= result.length <= hi

    def generate(self) -> RRGameState:
        """Build candidates until one is accepted.

        Raises GenerationError after ``max_attempts`` candidates or once the
        configured time limit has passed. ``attempts`` and ``discarded``
        describe the last call only.
        """
        cfg = self.config
        self.attempts = 0
        self.discarded = 0
        started = time.perf_counter()
        deadline = None if cfg.time_limit is None else started + cfg.time_limit
        for attempt in range(1, cfg.max_attempts + 1):
            remaining = None
            if deadline is not None:
                remaining = deadline - time.perf_counter()
                if remaining <= 0:
                    break
            state = self.candidate()
            result = self.evaluate(state, time_limit=remaining)
            self.attempts = attempt
            if self.accepts(result):
                self.last_result = result
                logger.info(
                    "generated puzzle after %d attempt(s): length=%d states=%d discarded=%d",
                    attempt,
                    result.length,
                    result.states_explored,
                    self.discarded,
                )
                return state
            logger.debug(
                "candidate %d rejected (length=%s)", attempt, None if result is None else result.length
            )
        if self.discarded:
            logger.info("%d candidate(s) ran past the search budget and were discarded", self.discarded)
        raise GenerationError(
            f"no puzzle with a solution length in [{cfg.min_solution_length}, {cfg.max_solution_length}] "
            f"after {self.attempts} attempt(s) and {time.perf_counter() - started:.1f}s"
        )


def generate_solvable_puzzle(
    bounds: Tuple[int, int] = (4, 12),
    rng: random.Random | None = None,
    size: int | None = None,
    config: GeneratorConfig | None = None,
    solver_config: SolverConfig | None = None,
) -> RRGameState:
    """Return a random puzzle whose optimal solution length lies within ``bounds``.

    ``bounds``, and ``size`` when given, override the matching fields of
    ``config``.
    """
    cfg = config or GeneratorConfig()
    cfg = GeneratorConfig.from_dict(
        {
            **cfg.to_dict(),
            "board_size": cfg.board_size if size is None else size,
            "min_solution_length": bounds[0],
            "max_solution_length": bounds[1],
        }
    )
    return PuzzleGenerator(cfg, solver_config=solver_config, rng=rng).generate()
