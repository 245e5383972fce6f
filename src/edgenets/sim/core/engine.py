from __future__ import annotations

from time import perf_counter
from typing import List, Optional, Tuple

from loguru import logger

from ..systems import generation, metrics as metrics_system, selection
from ..types.metrics import GenerationMetrics
from ..types.snapshot import NetSnapshot, PopulationSnapshot, SnapshotMetadata
from ..utils.ranges import Range
from .config import EvolutionConfig
from .net import Net
from .pixels import PixelSource, resistance_range
from .rng import DeterministicRng


class EvolutionEngine:
    """Evolves a population of nets over a grayscale image.

    Each generation tops the population up to the configured density,
    lets every net crawl for a fixed number of ticks and keeps the nets whose
    fitness falls inside the selection band.
    """

    def __init__(self, pixels: PixelSource, config: EvolutionConfig):
        config.validate()
        self._pixels = pixels
        self._config = config
        self._rng = DeterministicRng(config.seed, max_attempts=config.max_sampling_attempts)
        self._resistance_range = resistance_range(pixels, config.sensitivity)
        self._nets: List[Net] = []
        self._metrics: List[GenerationMetrics] = []
        self._generation = 0

    @property
    def nets(self) -> List[Net]:
        return self._nets

    @property
    def metrics(self) -> List[GenerationMetrics]:
        return self._metrics

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def resistance_range(self) -> Tuple[int, int]:
        return self._resistance_range

    def reset(self) -> None:
        self._nets.clear()
        self._metrics.clear()
        self._rng.reset()
        self._generation = 0

    def calculate_features(self) -> generation.NetFeatures:
        config = self._config
        return generation.calculate_features(
            self._pixels.width,
            self._pixels.height,
            len(self._nets),
            config.population_density,
            config.node_density,
            config.mutation_rate,
        )

    def occupied_ranges(self) -> Tuple[Optional[Range], ...]:
        return generation.occupied_ranges(self._nets)

    def populate(self, features: generation.NetFeatures) -> Tuple[int, int]:
        return generation.populate(self, features)

    def tick(self) -> int:
        """Run every net once against a frozen snapshot of the other nets' ranges."""
        snapshot = self.occupied_ranges()
        pruned = 0
        for index, net in enumerate(self._nets):
            others = snapshot[:index] + snapshot[index + 1 :]
            pruned += net.run(self._pixels, others)
        return pruned

    def simulate(self, lifetime: int) -> int:
        pruned = 0
        for _ in range(lifetime):
            pruned += self.tick()
        return pruned

    def select(self) -> selection.SelectionResult[Net]:
        result = selection.select_survivors(self._nets, self._config.selection_rate)
        self._nets = result.survivors
        return result

    def step(self) -> GenerationMetrics:
        start = perf_counter()
        features = self.calculate_features()
        created, mutated = self.populate(features)
        population = len(self._nets)
        pruned = self.simulate(features.lifetime)
        result = self.select()
        elapsed_ms = (perf_counter() - start) * 1000.0

        metrics = metrics_system.create_metrics(
            self._generation, population, created, mutated, features.lifetime, result, elapsed_ms
        )
        self._metrics.append(metrics)
        if not result.survivors:
            logger.warning("[EvolutionEngine] Generation {}: no net survived selection", self._generation)
        else:
            logger.debug(
                "[EvolutionEngine] Generation {}: created={} mutated={} pruned_nodes={} survivors={}/{} best={} lower_bound={}",
                self._generation,
                created,
                mutated,
                pruned,
                metrics.survivors,
                population,
                metrics.best_fitness,
                metrics.lower_bound,
            )
        self._generation += 1
        return metrics

    def run(self, generations: Optional[int] = None) -> PopulationSnapshot:
        count = self._config.generation_count if generations is None else generations
        if count < 0:
            raise ValueError(f"generations must be non-negative, got {count}")
        logger.info(
            "[EvolutionEngine] Start: {} generation(s) on {}x{} image, resistance range {}",
            count,
            self._pixels.width,
            self._pixels.height,
            self._resistance_range,
        )
        for _ in range(count):
            self.step()
        logger.info("[EvolutionEngine] Finished at generation {} with {} net(s)", self._generation, len(self._nets))
        return self.snapshot()

    def snapshot(self) -> PopulationSnapshot:
        nets = tuple(
            NetSnapshot(chain=net.chain(), fitness=net.fitness(), resistance=net.resistance, limits=net.limits())
            for net in self._nets
        )
        metadata = SnapshotMetadata(
            width=self._pixels.width,
            height=self._pixels.height,
            seed=self._rng.seed,
            generation=self.generation,
        )
        return PopulationSnapshot(nets=nets, metadata=metadata)
