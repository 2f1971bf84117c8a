import random

import pytest

from ricochet_engine.games.ricochet_robots import (
    AStarSolver,
    RicochetRobotsGame,
    SearchLimitExceeded,
    Target,
    dedup_key,
    solve,
)
from ricochet_engine.games.ricochet_robots.board import Board, DIRECTIONS, EAST
from ricochet_engine.games.ricochet_robots.game import Move, RRGameState
from ricochet_engine.games.ricochet_robots.generator import build_board, generate_solvable_puzzle, place_pieces


def brute_force_length(board, robots, goal, goal_robot):
    """Plain breadth-first search over colored configurations."""
    start = tuple(robots)
    if start[goal_robot] == goal:
        return 0
    seen = {start}
    frontier = [start]
    depth = 0
    while frontier:
        depth += 1
        next_frontier = []
        for current in frontier:
            for idx, cell in enumerate(current):
                for direction in DIRECTIONS:
                    dest = board.slide(cell, direction, current)
                    if dest is None:
                        continue
                    child = current[:idx] + (dest,) + current[idx + 1 :]
                    if child in seen:
                        continue
                    if child[goal_robot] == goal:
                        return depth
                    seen.add(child)
                    next_frontier.append(child)
        frontier = next_frontier
    return None


def replay(board, robots, moves):
    robots = tuple(robots)
    for move in moves:
        dest = board.slide(robots[move.robot], move.direction, robots)
        assert dest == move.destination
        robots = robots[: move.robot] + (dest,) + robots[move.robot + 1 :]
    return robots


def corner_state(board):
    # red, blue, green top-left/bottom-right/bottom-left; yellow out of the way
    robots = ((0, 0), (7, 7), (0, 7), (3, 5))
    return RRGameState(robots=robots, goal=(7, 0), goal_robot=0, board=board)


def test_single_slide_solution():
    board = Board.empty(8)
    state = corner_state(board)
    solver = AStarSolver(board)
    result = solver.search(state)
    assert result.moves == [Move(0, EAST, (7, 0))]
    assert result.length == 1
    assert result.states_explored >= 1


def test_module_level_solve():
    board = Board.empty(8)
    result = solve(((0, 0), (7, 7), (0, 7), (3, 5)), board, Target(0, (7, 0)))
    assert result.length == 1


def test_already_solved():
    board = Board.empty(8)
    state = RRGameState(robots=((7, 0), (7, 7)), goal=(7, 0), goal_robot=0, board=board)
    solver = AStarSolver(board)
    assert solver.solve(state) == []
    assert solver.last_result.moves == []
    assert solver.last_result.states_explored == 1


def test_two_move_solution_and_depth_limit():
    board = Board.empty(8)
    state = RRGameState(
        robots=((0, 0), (3, 3), (2, 6), (5, 2)), goal=(7, 7), goal_robot=0, board=board
    )
    result = AStarSolver(board).search(state)
    assert result.length == 2
    assert replay(board, state.robots, result.moves)[0] == (7, 7)

    limited = AStarSolver(board, max_depth=1).search(state)
    assert limited.moves is None


def test_robot_used_as_blocker():
    board = Board.empty(8)
    state = RRGameState(
        robots=((0, 0), (4, 0), (7, 7), (0, 7)), goal=(3, 0), goal_robot=0, board=board
    )
    result = AStarSolver(board).search(state)
    assert result.moves == [Move(0, EAST, (3, 0))]


def test_unreachable_target_returns_none():
    board = Board.empty(5)
    for direction in DIRECTIONS:
        board.add_wall(2, 2, direction)
    state = RRGameState(robots=((0, 0), (4, 4)), goal=(2, 2), goal_robot=0, board=board)
    solver = AStarSolver(board)
    assert solver.solve(state) == []
    assert solver.last_result.moves is None


def test_state_limit_raises():
    board = Board.empty(8)
    solver = AStarSolver(board, max_states=1, splice=False)
    with pytest.raises(SearchLimitExceeded) as exc_info:
        solver.search(corner_state(board))
    assert exc_info.value.states_explored == 1


def test_time_limit_raises():
    board = Board.empty(8)
    solver = AStarSolver(board, time_limit=0.0)
    with pytest.raises(SearchLimitExceeded, match="exceeded"):
        solver.search(corner_state(board))


@pytest.mark.parametrize("seed", range(6))
def test_matches_brute_force_on_small_boards(seed):
    rng = random.Random(seed)
    board = build_board(5, num_walls=4, rng=rng)
    robots, goal, goal_robot = place_pieces(board, 3, rng=rng)
    state = RRGameState(robots=robots, goal=goal, goal_robot=goal_robot, board=board)
    expected = brute_force_length(board, robots, goal, goal_robot)
    for splice in (True, False):
        result = AStarSolver(board, splice=splice).search(state)
        assert result.length == expected
        if result.moves is not None:
            assert replay(board, robots, result.moves)[goal_robot] == goal


@pytest.mark.parametrize("seed", range(4))
def test_matches_brute_force_with_interior_walls(seed):
    rng = random.Random(100 + seed)
    board = build_board(8, num_walls=10, rng=rng)
    robots, goal, goal_robot = place_pieces(board, 2, rng=rng)
    state = RRGameState(robots=robots, goal=goal, goal_robot=goal_robot, board=board)
    expected = brute_force_length(board, robots, goal, goal_robot)
    assert AStarSolver(board).search(state).length == expected


def test_solution_replays_through_game():
    state = generate_solvable_puzzle((2, 5), rng=random.Random(21), size=8)
    game = RicochetRobotsGame()
    game.load(state)
    result = game.solve()
    assert 2 <= result.length <= 5
    final = game.apply_solution(result.moves)
    assert final.is_terminal
    assert final.move_count == result.length


class TestDedupKey:
    """Visited-state keys: color-aware by default, occupancy as compatibility mode."""

    def test_swapped_robots_are_distinct_by_color(self):
        a = ((1, 1), (5, 5), (2, 6), (6, 2))
        b = ((5, 5), (1, 1), (2, 6), (6, 2))
        assert dedup_key(a, "color") != dedup_key(b, "color")

    def test_swapped_robots_collapse_by_occupancy(self):
        a = ((1, 1), (5, 5), (2, 6), (6, 2))
        b = ((5, 5), (1, 1), (2, 6), (6, 2))
        assert dedup_key(a, "occupancy") == dedup_key(b, "occupancy")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            dedup_key(((0, 0),), "shape")
        with pytest.raises(ValueError):
            AStarSolver(Board.empty(8), dedup="shape")

    def test_occupancy_mode_never_beats_optimal(self):
        for seed in range(4):
            rng = random.Random(seed)
            board = build_board(5, num_walls=4, rng=rng)
            robots, goal, goal_robot = place_pieces(board, 3, rng=rng)
            state = RRGameState(robots=robots, goal=goal, goal_robot=goal_robot, board=board)
            optimal = AStarSolver(board).search(state)
            compat = AStarSolver(board, dedup="occupancy").search(state)
            if compat.moves is not None:
                assert optimal.moves is not None
                assert compat.length >= optimal.length
                assert replay(board, robots, compat.moves)[goal_robot] == goal

    def test_occupancy_mode_solves_simple_case(self):
        board = Board.empty(8)
        result = AStarSolver(board, dedup="occupancy").search(corner_state(board))
        assert result.length == 1
