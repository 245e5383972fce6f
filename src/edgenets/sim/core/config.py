from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import InvalidConfigurationError


@dataclass
class EvolutionConfig:
    population_density: float = 0.2
    node_density: float = 0.4
    mutation_rate: float = 0.1
    selection_rate: float = 0.2
    sensitivity: float = 0.2
    dispersion_allowed: int = 2
    generation_count: int = 100
    seed: Optional[int] = None
    max_sampling_attempts: int = 10_000

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _open_unit("population_density", self.population_density)
        _open_unit("node_density", self.node_density)
        _closed_unit("mutation_rate", self.mutation_rate)
        _closed_unit("selection_rate", self.selection_rate)
        _closed_unit("sensitivity", self.sensitivity)
        _non_negative_int("dispersion_allowed", self.dispersion_allowed)
        _non_negative_int("generation_count", self.generation_count)
        if not _is_int(self.max_sampling_attempts) or self.max_sampling_attempts <= 0:
            raise InvalidConfigurationError(
                f"max_sampling_attempts must be a positive integer, got {self.max_sampling_attempts!r}"
            )
        if self.seed is not None and not _is_int(self.seed):
            raise InvalidConfigurationError(f"seed must be an integer or None, got {self.seed!r}")


@dataclass
class RenderConfig:
    color: tuple[int, int, int] = (255, 255, 255)
    # Radius in pixels around each node / line sample; negative skips drawing.
    node_level: int = 0
    line_level: int = -1


@dataclass
class AppConfig:
    evolution: EvolutionConfig = field(default_factory=EvolutionConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})


def load_config(raw: dict) -> AppConfig:
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(f"Configuration must be a mapping, got {type(raw).__name__}")
    evolution_raw = _section(raw, "evolution", EvolutionConfig)
    evolution = EvolutionConfig(**evolution_raw)

    render_raw = _section(raw, "render", RenderConfig)
    color = render_raw.pop("color", None)
    for name, value in render_raw.items():
        if not _is_int(value):
            raise InvalidConfigurationError(f"render.{name} must be an integer, got {value!r}")
    render = RenderConfig(**render_raw)
    if color is not None:
        if (
            not isinstance(color, (tuple, list))
            or len(color) != 3
            or not all(_is_int(channel) and 0 <= channel <= 255 for channel in color)
        ):
            raise InvalidConfigurationError(f"render.color must be an RGB triple, got {color!r}")
        render.color = (color[0], color[1], color[2])
    return AppConfig(evolution=evolution, render=render)


def _section(raw: dict, name: str, schema: type) -> dict:
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"{name} must be a mapping, got {type(section).__name__}")
    unknown = set(section) - set(schema.__dataclass_fields__)
    if unknown:
        raise InvalidConfigurationError(f"Unknown {name} options: {', '.join(sorted(map(str, unknown)))}")
    return dict(section)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _open_unit(name: str, value: float) -> None:
    if not _is_number(value) or not 0.0 < value < 1.0:
        raise InvalidConfigurationError(f"{name} must be in (0, 1), got {value!r}")


def _closed_unit(name: str, value: float) -> None:
    if not _is_number(value) or not 0.0 <= value <= 1.0:
        raise InvalidConfigurationError(f"{name} must be in [0, 1], got {value!r}")


def _non_negative_int(name: str, value: int) -> None:
    if not _is_int(value) or value < 0:
        raise InvalidConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
