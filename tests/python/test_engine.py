from __future__ import annotations

import math

import pytest

from edgenets.sim.core.config import EvolutionConfig
from edgenets.sim.core.engine import EvolutionEngine
from edgenets.sim.core.errors import InvalidConfigurationError, SamplingExhaustedError
from edgenets.sim.core.net import EMPTY_FITNESS, Net
from edgenets.sim.core.node import NodeState
from edgenets.sim.core.pixels import GrayImage


def _net(row: int, direction: int = 90, node_count: int = 0) -> Net:
    return Net(row=row, node_count=node_count, horizontal_step=1, direction=direction, resistance=255, dispersion_allowed=2)


def test_features_follow_image_size_and_densities():
    engine = EvolutionEngine(GrayImage.uniform(50, 100), EvolutionConfig(population_density=0.2, node_density=0.4, seed=1))

    features = engine.calculate_features()

    assert features.target_count == 20
    assert features.node_count == 20
    assert features.horizontal_step == 3
    assert features.lifetime == int(100 * (1 - 0.2))
    assert features.regular_count == int(20 * (1 - 0.1))
    assert features.mutant_count == int(20 * 0.1)


def test_existing_nets_reduce_the_target():
    engine = EvolutionEngine(GrayImage.uniform(50, 100), EvolutionConfig(population_density=0.2, seed=1))
    engine.nets.append(_net(10))

    assert engine.calculate_features().target_count == 19


def test_populate_places_nets_on_distinct_rows():
    engine = EvolutionEngine(GrayImage.uniform(50, 100), EvolutionConfig(population_density=0.2, seed=7))
    features = engine.calculate_features()

    created, mutated = engine.populate(features)

    assert (created, mutated) == (features.regular_count, features.mutant_count)
    assert len(engine.nets) == created + mutated
    rows = [net.limits()[0] for net in engine.nets]
    assert len(set(rows)) == len(rows)
    assert all(0 <= row < 100 for row in rows)
    assert all(len(net) == features.node_count + 1 for net in engine.nets)
    low, high = engine.resistance_range
    assert all(low <= net.resistance <= high for net in engine.nets[:created])
    assert all(1 <= net.resistance <= 255 for net in engine.nets[created:])


def test_placement_fails_when_the_image_is_fully_claimed():
    engine = EvolutionEngine(GrayImage.uniform(10, 10), EvolutionConfig(population_density=0.5, seed=3))
    wide = _net(0, node_count=1)
    wide.nodes[1].y = 9
    wide.update_limits()
    engine.nets.append(wide)

    with pytest.raises(SamplingExhaustedError):
        engine.step()


def test_tick_ignores_a_nets_own_range():
    engine = EvolutionEngine(GrayImage.uniform(10, 10), EvolutionConfig(seed=3))
    net = _net(5, node_count=1)
    net.nodes[1].y = 8
    net.update_limits()
    engine.nets.append(net)

    engine.tick()

    assert [node.y for node in net.nodes] == [4, 7]
    assert all(node.state == NodeState.FREE for node in net.nodes)


def test_tick_uses_a_frozen_snapshot_of_other_nets():
    engine = EvolutionEngine(GrayImage.uniform(10, 10), EvolutionConfig(seed=3))
    leader = _net(6, direction=270)
    follower = _net(5, direction=270)
    engine.nets.extend([leader, follower])

    engine.tick()

    assert leader.chain()[0].y == 7
    assert follower.nodes[0].state == NodeState.BLOCKED
    assert follower.chain()[0].y == 5


def test_empty_population_regenerates_next_generation():
    engine = EvolutionEngine(GrayImage.uniform(20, 20), EvolutionConfig(population_density=0.2, seed=5))
    doomed = _net(500)
    engine.nets.append(doomed)

    engine.tick()
    assert doomed.fitness() == EMPTY_FITNESS
    result = engine.select()

    assert result.survivors == []
    assert engine.nets == []
    features = engine.calculate_features()
    assert features.target_count == math.ceil(20 * 0.2)
    engine.populate(features)
    assert len(engine.nets) == features.regular_count + features.mutant_count


def test_zero_generations_returns_an_empty_population():
    engine = EvolutionEngine(GrayImage.uniform(8, 8), EvolutionConfig(generation_count=0, seed=1))

    snapshot = engine.run()

    assert snapshot.nets == ()
    assert snapshot.metadata.generation == 0
    assert engine.generation == 0
    assert engine.metrics == []


def test_run_respects_selection_and_image_bounds(banded_image):
    config = EvolutionConfig(generation_count=3, seed=42)
    engine = EvolutionEngine(banded_image, config)

    snapshot = engine.run()

    assert snapshot.metadata.generation == 3
    assert snapshot.metadata.seed == 42
    assert engine.generation == 3
    assert len(engine.metrics) == 3
    last = engine.metrics[-1]
    assert last.survivors == len(snapshot.nets)
    for net in snapshot.nets:
        assert net.fitness >= 0
        assert net.fitness >= last.lower_bound
        assert net.chain
        for coordinate in net.chain:
            assert 0 <= coordinate.x < banded_image.width
            assert 0 <= coordinate.y < banded_image.height


def test_identical_seeds_produce_identical_populations(banded_image):
    first = EvolutionEngine(banded_image, EvolutionConfig(generation_count=3, seed=1234)).run()
    second = EvolutionEngine(banded_image, EvolutionConfig(generation_count=3, seed=1234)).run()

    assert first == second


def test_reset_replays_from_the_seed(banded_image):
    engine = EvolutionEngine(banded_image, EvolutionConfig(generation_count=2, seed=77))
    first = engine.run()

    engine.reset()
    assert engine.nets == []
    assert engine.run() == first


def test_engine_rejects_configuration_changed_after_construction():
    config = EvolutionConfig()
    config.selection_rate = 1.5

    with pytest.raises(InvalidConfigurationError):
        EvolutionEngine(GrayImage.uniform(4, 4), config)
