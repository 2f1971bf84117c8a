from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from ...core.game import Game, GameState
from .board import Board, Cell, DIRECTIONS, DIRECTION_NAMES

if TYPE_CHECKING:
    from .solver_astar import SolveResult

ROBOT_COLORS: Tuple[str, ...] = ("red", "blue", "green", "yellow")

Direction = int  # alias
Action = Tuple[Union[int, str], Direction]  # (robot index or color, direction)
Robots = Tuple[Cell, ...]  # positions (x,y) in ROBOT_COLORS order


class Target(NamedTuple):
    color: int  # index into ROBOT_COLORS
    cell: Cell


class Move(NamedTuple):
    """One completed slide."""

    robot: int
    direction: Direction
    destination: Cell

    @property
    def color(self) -> str:
        return ROBOT_COLORS[self.robot]

    def __str__(self) -> str:
        x, y = self.destination
        return f"{self.color} {DIRECTION_NAMES[self.direction]} -> ({x}, {y})"


def color_index(color: str | int) -> int:
    """Resolve a color name or index to its index in ROBOT_COLORS."""
    if isinstance(color, str):
        try:
            return ROBOT_COLORS.index(color.lower())
        except ValueError:
            raise ValueError(f"unknown robot color {color!r}") from None
    if not (0 <= color < len(ROBOT_COLORS)):
        raise ValueError(f"robot index {color} out of range")
    return int(color)


def move_robot(robots: Robots, robot: int, destination: Cell) -> Robots:
    """Return a new configuration with one robot relocated."""
    return robots[:robot] + (destination,) + robots[robot + 1 :]


@dataclass(frozen=True)
class RRGameState(GameState):
    """Immutable puzzle position: robots, target and the walls they live in."""

    robots: Robots
    goal: Cell
    goal_robot: int  # index of robot that must reach goal
    move_count: int = 0
    # Full Board reference excluded from equality/hash to keep it lightweight
    board: Optional[Board] = field(default=None, compare=False, hash=False, repr=False)
    # Compact signature that captures board walls+size for hashing/equality
    board_sig: int = 0

    def __post_init__(self):
        robots = tuple(tuple(pos) for pos in self.robots)
        object.__setattr__(self, "robots", robots)
        object.__setattr__(self, "goal", tuple(self.goal))
        if not robots or len(robots) > len(ROBOT_COLORS):
            raise ValueError(f"expected 1 to {len(ROBOT_COLORS)} robots, got {len(robots)}")
        if len(set(robots)) != len(robots):
            raise ValueError(f"robots must occupy distinct cells: {robots}")
        if not (0 <= self.goal_robot < len(robots)):
            raise ValueError(f"goal robot {self.goal_robot} out of range")
        if self.board is not None:
            for x, y in robots + (self.goal,):
                if not self.board.in_bounds(x, y):
                    raise ValueError(f"cell {(x, y)} is outside the {self.board.size}x{self.board.size} board")
            # Populate board_sig if not provided
            if self.board_sig == 0:
                object.__setattr__(self, "board_sig", self.board.signature())

    @property
    def is_terminal(self) -> bool:
        return self.robots[self.goal_robot] == self.goal

    @property
    def target(self) -> Target:
        return Target(self.goal_robot, self.goal)

    def apply(self, move: Move) -> "RRGameState":
        return RRGameState(
            robots=move_robot(self.robots, move.robot, move.destination),
            goal=self.goal,
            goal_robot=self.goal_robot,
            move_count=self.move_count + 1,
            board=self.board,
            board_sig=self.board_sig,
        )


class RicochetRobotsGame(Game):
    """
    Interactive round over one Ricochet Robots puzzle.

    Keeps the starting position of the round so it can be restarted, replays
    solutions from it and solves it on request.
    """

    def __init__(
        self,
        board: Board | None = None,
        num_robots: int = 4,
        rng: random.Random | None = None,
    ) -> None:
        if not (1 <= num_robots <= len(ROBOT_COLORS)):
            raise ValueError(f"num_robots must be between 1 and {len(ROBOT_COLORS)}")
        self.board = board or Board.empty(16)
        self.num_robots = num_robots
        self.rng = rng or random.Random()

        # internal state
        self._initial: RRGameState | None = None
        self._state: RRGameState | None = None

    # ------------------------------------------------------------------
    # Game interface
    # ------------------------------------------------------------------
    def reset(self, seed: int | None = None) -> RRGameState:
        if seed is not None:
            self.rng.seed(seed)
        robots = self._random_robot_positions()
        goal_robot = self.rng.randrange(self.num_robots)
        goal = self._random_empty_cell(exclude=robots)
        return self.load(
            RRGameState(
                robots=robots,
                goal=goal,
                goal_robot=goal_robot,
                board=self.board,
            )
        )

    def load(self, state: RRGameState) -> RRGameState:
        """Start a round from an existing puzzle, e.g. a decoded Game ID."""
        if state.board is not None:
            self.board = state.board
        self.num_robots = len(state.robots)
        self._initial = RRGameState(
            robots=state.robots,
            goal=state.goal,
            goal_robot=state.goal_robot,
            board=self.board,
        )
        self._state = self._initial
        return self._state

    def step(self, action: Action) -> Tuple[RRGameState, bool, Dict[str, Any]]:
        """Slide one robot; the robot may be given by index or color name."""
        state = self._require_state()
        robot, direction = action
        robot_idx = color_index(robot)
        if robot_idx >= self.num_robots:
            raise ValueError("invalid robot index")
        if direction not in DIRECTIONS:
            raise ValueError(f"invalid direction {direction}")
        dest = self.board.slide(state.robots[robot_idx], direction, state.robots)
        if dest is None:
            raise ValueError(f"{ROBOT_COLORS[robot_idx]} robot cannot move {DIRECTION_NAMES[direction]}")
        move = Move(robot_idx, direction, dest)
        self._state = state.apply(move)
        info: Dict[str, Any] = {"move": move}
        return self._state, self._state.is_terminal, info

    def legal_actions(self, state: RRGameState | None = None) -> List[Action]:
        return [(move.robot, move.direction) for move in self._all_moves(state or self._require_state())]

    # ------------------------------------------------------------------
    # Round helpers
    # ------------------------------------------------------------------
    @property
    def state(self) -> RRGameState:
        return self._require_state()

    @property
    def initial_state(self) -> RRGameState:
        self._require_state()
        return self._initial

    @property
    def solved(self) -> bool:
        return self._require_state().is_terminal

    @property
    def game_id(self) -> str:
        from .game_id import encode_game_id

        return encode_game_id(self.initial_state)

    def legal_moves(self, robot: int, state: RRGameState | None = None) -> List[Move]:
        st = state or self._require_state()
        return [
            Move(robot, direction, dest)
            for direction, dest in self.board.legal_moves(st.robots[robot], st.robots)
        ]

    def reset_round(self) -> RRGameState:
        """Put every robot back where the round started."""
        self._state = self.initial_state
        return self._state

    def apply_solution(self, moves: Sequence[Move]) -> RRGameState:
        """Replay ``moves`` from the start of the round and return the final state."""
        self.reset_round()
        for move in moves:
            _, _, info = self.step((move.robot, move.direction))
            if info["move"].destination != tuple(move.destination):
                raise ValueError(f"move {move} does not match the board, robot stopped at {info['move'].destination}")
        return self._state

    def solve(self, **solver_kwargs: Any) -> "SolveResult":
        """Optimal solution from the start of the round."""
        from .solver_astar import AStarSolver

        solver = AStarSolver(self.board, **solver_kwargs)
        return solver.search(self.initial_state)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_state(self) -> RRGameState:
        if self._state is None:
            raise RuntimeError("Game not reset")
        return self._state

    def _all_moves(self, state: RRGameState) -> List[Move]:
        moves: List[Move] = []
        for idx in range(len(state.robots)):
            moves.extend(self.legal_moves(idx, state))
        return moves

    def _random_empty_cell(self, exclude: Sequence[Cell]) -> Cell:
        blocked = set(exclude) | self.board.center_cells()
        while True:
            pos = (self.rng.randrange(self.board.size), self.rng.randrange(self.board.size))
            if pos not in blocked:
                return pos

    def _random_robot_positions(self) -> Robots:
        positions: List[Cell] = []
        while len(positions) < self.num_robots:
            positions.append(self._random_empty_cell(exclude=positions))
        return tuple(positions)
