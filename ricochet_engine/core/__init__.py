"""
Core abstractions shared by the puzzle engine.
"""
from .game import Game, GameState
from .encoder import Encoder
from .solver import HeuristicSolver

__all__ = [
    "Game",
    "GameState",
    "Encoder",
    "HeuristicSolver",
]
