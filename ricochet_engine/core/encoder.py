from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .game import GameState


class Encoder(ABC):
    """
    Converts a domain-specific GameState into a shareable representation
    and back.
    """

    @abstractmethod
    def encode(self, state: GameState) -> Any:
        """
        Return the encoded form; its type depends on the concrete encoder.
        """
        raise NotImplementedError

    @abstractmethod
    def decode(self, data: Any) -> GameState:
        """
        Rebuild the GameState produced by encode().
        """
        raise NotImplementedError
