from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List

from .game import GameState


class HeuristicSolver(ABC):
    """
    Classical search algorithm that turns a GameState into a move sequence,
    used for hints, solution playback and puzzle acceptance tests.
    """

    @abstractmethod
    def solve(self, state: GameState) -> List[Any]:
        """
        Return a sequence of actions that reaches a terminal state.
        """
        raise NotImplementedError
