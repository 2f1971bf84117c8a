"""
Solver and generator for Ricochet Robots puzzles.
"""
from .config import EngineConfig, GeneratorConfig, SolverConfig, load_config
from .games.ricochet_robots import (
    AStarSolver,
    Board,
    GameIdError,
    GenerationError,
    Move,
    PuzzleGenerator,
    RicochetRobotsGame,
    RRGameState,
    SearchLimitExceeded,
    SolveResult,
    Target,
    decode_game_id,
    encode_game_id,
    generate_solvable_puzzle,
    solve,
)

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "GeneratorConfig",
    "SolverConfig",
    "load_config",
    "AStarSolver",
    "Board",
    "GameIdError",
    "GenerationError",
    "Move",
    "PuzzleGenerator",
    "RicochetRobotsGame",
    "RRGameState",
    "SearchLimitExceeded",
    "SolveResult",
    "Target",
    "decode_game_id",
    "encode_game_id",
    "generate_solvable_puzzle",
    "solve",
]
