"""Ricochet Robots puzzle engine."""
from .board import Board, Cell, NORTH, EAST, SOUTH, WEST, DIRECTIONS, DIRECTION_NAMES
from .game import ROBOT_COLORS, Move, Target, RicochetRobotsGame, RRGameState
from .heuristics import DistanceField, backward_distances, reverse_moves
from .solver_astar import AStarSolver, SearchLimitExceeded, SolveResult, dedup_key, solve
from .generator import GenerationError, PuzzleGenerator, build_board, generate_solvable_puzzle
from .game_id import GameIdEncoder, GameIdError, decode_game_id, encode_game_id

__all__ = [
    "Board",
    "Cell",
    "NORTH",
    "EAST",
    "SOUTH",
    "WEST",
    "DIRECTIONS",
    "DIRECTION_NAMES",
    "ROBOT_COLORS",
    "Move",
    "Target",
    "RicochetRobotsGame",
    "RRGameState",
    "DistanceField",
    "backward_distances",
    "reverse_moves",
    "AStarSolver",
    "SearchLimitExceeded",
    "SolveResult",
    "dedup_key",
    "solve",
    "GenerationError",
    "PuzzleGenerator",
    "build_board",
    "generate_solvable_puzzle",
    "GameIdEncoder",
    "GameIdError",
    "decode_game_id",
    "encode_game_id",
]
