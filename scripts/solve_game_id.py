#!/usr/bin/env python3
"""
Solve a puzzle given as a Game ID.

Usage:
    python scripts/solve_game_id.py 40F1F0DF-0... [--dedup occupancy] [--time-limit 30]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ricochet_engine.config import SolverConfig, load_config
from ricochet_engine.games.ricochet_robots import (
    ROBOT_COLORS,
    AStarSolver,
    GameIdError,
    SearchLimitExceeded,
    decode_game_id,
)


def main():
    parser = argparse.ArgumentParser(description="Find the optimal solution of a Game ID")
    parser.add_argument("game_id", help="Game ID string (ROBOTS-TARGET-WALLS)")
    parser.add_argument("--config", type=str, help="YAML config whose solver section is used")
    parser.add_argument("--board-size", type=int, default=16, help="Board size the Game ID was made for")
    parser.add_argument("--dedup", choices=["color", "occupancy"], help="Visited-state key")
    parser.add_argument("--max-depth", type=int, help="Longest solution to look for")
    parser.add_argument("--time-limit", type=float, help="Give up after this many seconds")
    args = parser.parse_args()

    solver_cfg = load_config(args.config).solver if args.config else SolverConfig()
    for key in ("dedup", "max_depth", "time_limit"):
        value = getattr(args, key)
        if value is not None:
            setattr(solver_cfg, key, value)

    try:
        state = decode_game_id(args.game_id, size=args.board_size)
    except GameIdError as e:
        print(f"Invalid Game ID: {e}")
        sys.exit(2)

    print(f"Target: {ROBOT_COLORS[state.goal_robot]} robot to {state.goal}")
    solver = AStarSolver.from_config(state.board, solver_cfg)
    try:
        result = solver.search(state)
    except SearchLimitExceeded as e:
        print(f"Gave up: {e} ({e.states_explored} states explored)")
        sys.exit(1)

    if result.moves is None:
        print(f"No solution ({result.states_explored} states explored, {result.elapsed:.2f}s)")
        sys.exit(1)
    print(f"Optimal solution: {result.length} moves ({result.states_explored} states explored, {result.elapsed:.2f}s)")
    for i, move in enumerate(result.moves, start=1):
        print(f"  {i:2d}. {move}")


if __name__ == "__main__":
    main()
