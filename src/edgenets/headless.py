from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Optional

import pygame
from loguru import logger

from .render import draw_population
from .sim.core.config import AppConfig
from .sim.core.engine import EvolutionEngine
from .sim.core.errors import EdgeNetsError
from .sim.core.pixels import GrayImage
from .sim.types.snapshot import PopulationSnapshot

_HEADER = [
    "generation",
    "population",
    "created",
    "mutated",
    "survivors",
    "discarded",
    "lifetime",
    "live_nodes",
    "ready_nodes",
    "best_fitness",
    "lower_bound",
    "generation_ms",
]

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_LOG_FORMAT, colorize=sys.stderr.isatty())


def _format_row(metrics: object, generation_ms: float) -> list[object]:
    return [
        metrics.generation,
        metrics.population,
        metrics.created,
        metrics.mutated,
        metrics.survivors,
        metrics.discarded,
        metrics.lifetime,
        metrics.live_nodes,
        metrics.ready_nodes,
        "" if metrics.best_fitness is None else metrics.best_fitness,
        "" if metrics.lower_bound is None else metrics.lower_bound,
        f"{generation_ms:.3f}",
    ]


def _summary(snapshot: PopulationSnapshot, config: AppConfig, generations: int, deterministic_log: bool) -> dict:
    fitness = [net.fitness for net in snapshot.nets]
    payload = snapshot.to_payload()
    payload.update(
        {
            "generations": generations,
            "deterministic_log": deterministic_log,
            "fitness": {
                "min": min(fitness) if fitness else None,
                "max": max(fitness) if fitness else None,
                "avg": sum(fitness) / len(fitness) if fitness else None,
            },
            "config": {
                "population_density": config.evolution.population_density,
                "node_density": config.evolution.node_density,
                "mutation_rate": config.evolution.mutation_rate,
                "selection_rate": config.evolution.selection_rate,
                "sensitivity": config.evolution.sensitivity,
                "dispersion_allowed": config.evolution.dispersion_allowed,
            },
        }
    )
    return payload


def load_image(image_path: Path) -> pygame.Surface:
    return pygame.image.load(str(image_path))


def run_headless(
    image_path: Path,
    generations: Optional[int] = None,
    seed: Optional[int] = None,
    log_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
    deterministic_log: bool = False,
) -> PopulationSnapshot:
    config = AppConfig.from_yaml(config_path) if config_path else AppConfig()
    if seed is not None:
        config.evolution.seed = seed
    count = config.evolution.generation_count if generations is None else generations

    surface = load_image(image_path)
    pixels = GrayImage.from_surface(surface)
    engine = EvolutionEngine(pixels, config.evolution)
    logger.info("[headless] {} loaded ({}x{}), {} generation(s)", image_path, pixels.width, pixels.height, count)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    try:
        for _ in range(count):
            metrics = engine.step()
            if writer:
                generation_ms = 0.0 if deterministic_log else metrics.duration_ms
                writer.writerow(_format_row(metrics, generation_ms))
    finally:
        if csv_file:
            csv_file.close()

    snapshot = engine.snapshot()
    logger.info("[headless] {} net(s) survived {} generation(s)", len(snapshot.nets), count)

    if summary_path:
        Path(summary_path).write_text(json.dumps(_summary(snapshot, config, count, deterministic_log), indent=2))
    if output_path:
        draw_population(surface, snapshot, config.render)
        pygame.image.save(surface, str(output_path))
        logger.info("[headless] Rendered nets to {}", output_path)
    return snapshot


def main() -> None:
    parser = argparse.ArgumentParser(description="Detect intensity bands with evolving nets")
    parser.add_argument("image", type=Path, help="Grayscale image to analyse")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-generation metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file with the surviving nets")
    parser.add_argument("--output", type=Path, default=None, help="Image file to render the surviving nets onto")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (generation_ms is forced to 0.000 so identical seeds match).",
    )
    args = parser.parse_args()
    configure_logging(args.log_level)
    try:
        run_headless(
            args.image,
            generations=args.generations,
            seed=args.seed,
            log_path=args.log,
            config_path=args.config,
            summary_path=args.summary,
            output_path=args.output,
            deterministic_log=args.deterministic_log,
        )
    except EdgeNetsError as exc:
        logger.error("[headless] {}", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
