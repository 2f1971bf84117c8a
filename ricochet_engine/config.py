"""
Settings for the solver and the puzzle generator, loadable from YAML.

Example file::

    generator:
      board_size: 16
      min_solution_length: 4
      max_solution_length: 12
    solver:
      dedup: color
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

DEDUP_MODES = ("color", "occupancy")
MAX_ENCODABLE_SIZE = 16  # one hex nibble per coordinate in a Game ID


def _check_keys(cls, data: Dict[str, Any]) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")


@dataclass
class SolverConfig:
    """Search limits and policies for AStarSolver."""

    max_depth: Optional[int] = None
    max_states: Optional[int] = None
    time_limit: Optional[float] = None  # seconds
    dedup: str = "color"
    splice: bool = True

    def __post_init__(self):
        if self.dedup not in DEDUP_MODES:
            raise ValueError(f"dedup must be one of {DEDUP_MODES}, got {self.dedup!r}")
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        if self.max_states is not None and self.max_states < 1:
            raise ValueError("max_states must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SolverConfig":
        _check_keys(cls, data)
        return cls(**data)


@dataclass
class GeneratorConfig:
    """Board construction and acceptance window for PuzzleGenerator."""

    board_size: int = 16
    num_robots: int = 4
    num_walls: int = 20
    wall_attempts: int = 1000
    min_solution_length: int = 4
    max_solution_length: int = 12
    max_attempts: int = 500
    # Per-candidate search budget; candidates that exceed it are discarded.
    max_states_per_candidate: Optional[int] = 200_000
    time_limit: Optional[float] = None  # seconds, whole generate() call

    def __post_init__(self):
        if not (4 <= self.board_size <= MAX_ENCODABLE_SIZE):
            raise ValueError(f"board_size must be between 4 and {MAX_ENCODABLE_SIZE}")
        if not (1 <= self.num_robots <= 4):
            raise ValueError("num_robots must be between 1 and 4")
        if self.min_solution_length < 0 or self.min_solution_length > self.max_solution_length:
            raise ValueError(
                f"invalid solution length window [{self.min_solution_length}, {self.max_solution_length}]"
            )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be positive")

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.min_solution_length, self.max_solution_length

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        _check_keys(cls, data)
        return cls(**data)


@dataclass
class EngineConfig:
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {"generator": self.generator.to_dict(), "solver": self.solver.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "EngineConfig":
        data = data or {}
        unknown = sorted(set(data) - {"generator", "solver"})
        if unknown:
            raise ValueError(f"Unknown config section(s): {', '.join(unknown)}")
        return cls(
            generator=GeneratorConfig.from_dict(data.get("generator") or {}),
            solver=SolverConfig.from_dict(data.get("solver") or {}),
        )


def load_config(path: str | Path) -> EngineConfig:
    """Read an EngineConfig from a YAML file."""
    with Path(path).open("r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return EngineConfig.from_dict(data)


def save_config(config: EngineConfig, path: str | Path) -> Path:
    path = Path(path)
    with path.open("w") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
    return path
