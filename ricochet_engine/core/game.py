from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple, List


@dataclass(frozen=True)
class GameState(ABC):
    """
    Immutable representation of a puzzle position.

    Sub-classes add the concrete fields (robot positions, target, walls
    reference) and MAY override __hash__ for faster performance.
    """

    @property
    @abstractmethod
    def is_terminal(self) -> bool:
        """Return True if the position solves the puzzle."""
        raise NotImplementedError


class Game(ABC):
    """
    Interactive session over a single puzzle. Moves are applied to the
    current round and can be listed for any position.
    """

    @abstractmethod
    def reset(self, seed: int | None = None) -> GameState:
        """
        Start a new round and return the initial state.
        """
        raise NotImplementedError

    @abstractmethod
    def step(self, action: Any) -> Tuple[GameState, bool, Dict[str, Any]]:
        """
        Apply action and return (next_state, done, info).
        """
        raise NotImplementedError

    @abstractmethod
    def legal_actions(self, state: GameState) -> List[Any]:
        """
        Return the actions that change the given GameState.
        """
        raise NotImplementedError
