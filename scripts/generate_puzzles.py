#!/usr/bin/env python3
"""
Generate Ricochet Robots puzzles and print their Game IDs.

Usage:
    python scripts/generate_puzzles.py --count 10 --seed 1
    python scripts/generate_puzzles.py configs/default.yaml --count 5 --min-length 6
"""
from __future__ import annotations

import argparse
import random
import sys
import time
from pathlib import Path
from typing import Dict, List

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ricochet_engine.config import EngineConfig, GeneratorConfig, load_config
from ricochet_engine.games.ricochet_robots import (
    ROBOT_COLORS,
    GenerationError,
    PuzzleGenerator,
    encode_game_id,
)


def analyze_lengths(lengths: List[int]) -> Dict[str, object]:
    """Summarise the optimal solution lengths of a batch."""
    if not lengths:
        return {}
    ordered = sorted(lengths)
    histogram: Dict[int, int] = {}
    for length in ordered:
        histogram[length] = histogram.get(length, 0) + 1
    return {
        "total_puzzles": len(ordered),
        "min_solve_length": ordered[0],
        "max_solve_length": ordered[-1],
        "mean_solve_length": sum(ordered) / len(ordered),
        "median_solve_length": ordered[len(ordered) // 2],
        "distribution": histogram,
    }


def main():
    parser = argparse.ArgumentParser(description="Generate solvable Ricochet Robots puzzles")
    parser.add_argument("config", nargs="?", help="Optional YAML config (see configs/default.yaml)")
    parser.add_argument("--count", type=int, default=1, help="Number of puzzles to generate")
    parser.add_argument("--seed", type=int, help="Seed for reproducible puzzles")
    parser.add_argument("--board-size", type=int, help="Board size (square, at most 16)")
    parser.add_argument("--min-length", type=int, help="Minimum optimal solution length")
    parser.add_argument("--max-length", type=int, help="Maximum optimal solution length")
    args = parser.parse_args()

    config = load_config(args.config) if args.config else EngineConfig()
    overrides = {
        "board_size": args.board_size,
        "min_solution_length": args.min_length,
        "max_solution_length": args.max_length,
    }
    gen_cfg = GeneratorConfig.from_dict(
        {**config.generator.to_dict(), **{k: v for k, v in overrides.items() if v is not None}}
    )

    generator = PuzzleGenerator(gen_cfg, solver_config=config.solver, rng=random.Random(args.seed))
    lengths: List[int] = []
    for i in range(args.count):
        start_time = time.time()
        try:
            state = generator.generate()
        except GenerationError as e:
            print(f"Puzzle {i + 1}: {e}")
            continue
        result = generator.last_result
        lengths.append(result.length)
        print(
            f"{encode_game_id(state)}  target={ROBOT_COLORS[state.goal_robot]}@{state.goal}"
            f"  moves={result.length}  states={result.states_explored}"
            f"  attempts={generator.attempts}  discarded={generator.discarded}"
            f"  time={time.time() - start_time:.2f}s"
        )

    analysis = analyze_lengths(lengths)
    if analysis:
        print("\nSummary:")
        for key, value in analysis.items():
            print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
