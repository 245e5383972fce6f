import csv
import json
import sys

import pygame
import pytest
from loguru import logger

from edgenets.headless import main, run_headless
from edgenets.sim.core.errors import InvalidConfigurationError
from edgenets.sim.core.rng import DeterministicRng


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


@pytest.fixture
def band_png(tmp_path):
    surface = pygame.Surface((30, 30))
    for y in range(30):
        level = 40 if y < 15 else 210
        for x in range(30):
            surface.set_at((x, y), (level, level, level))
    path = tmp_path / "bands.png"
    pygame.image.save(surface, str(path))
    return path


def test_headless_log_header_and_rows(tmp_path, band_png):
    log_path = tmp_path / "generations.csv"
    run_headless(band_png, generations=2, seed=1, log_path=log_path, deterministic_log=True)
    rows = _read_csv(log_path)

    assert len(rows) == 3
    assert rows[0] == [
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
    idx = {name: i for i, name in enumerate(rows[0])}
    assert [row[idx["generation"]] for row in rows[1:]] == ["0", "1"]
    assert all(row[idx["generation_ms"]] == "0.000" for row in rows[1:])
    first = rows[1]
    assert int(first[idx["population"]]) == int(first[idx["created"]]) + int(first[idx["mutated"]])
    assert int(first[idx["survivors"]]) + int(first[idx["discarded"]]) == int(first[idx["population"]])


def test_deterministic_logs_match_for_identical_seeds(tmp_path, band_png):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    run_headless(band_png, generations=2, seed=8, log_path=first, deterministic_log=True)
    run_headless(band_png, generations=2, seed=8, log_path=second, deterministic_log=True)

    assert first.read_text() == second.read_text()


def test_headless_summary_and_rendered_output(tmp_path, band_png):
    summary_path = tmp_path / "summary.json"
    output_path = tmp_path / "nets.png"

    snapshot = run_headless(
        band_png,
        generations=2,
        seed=3,
        summary_path=summary_path,
        output_path=output_path,
    )

    payload = json.loads(summary_path.read_text())
    assert payload["generations"] == 2
    assert payload["seed"] == 3
    assert payload["width"] == 30
    assert payload["height"] == 30
    assert len(payload["nets"]) == len(snapshot.nets)
    assert output_path.exists()
    assert pygame.image.load(str(output_path)).get_size() == (30, 30)


def test_headless_reads_yaml_configuration(tmp_path, band_png):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("evolution:\n  generation_count: 1\n  seed: 5\n")
    log_path = tmp_path / "one.csv"

    run_headless(band_png, log_path=log_path, config_path=config_path, deterministic_log=True)

    assert len(_read_csv(log_path)) == 2


def test_headless_rejects_invalid_yaml_configuration(tmp_path, band_png):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("evolution:\n  population_density: 3\n")

    with pytest.raises(InvalidConfigurationError):
        run_headless(band_png, generations=1, config_path=config_path)


@pytest.fixture
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.__stderr__)


def test_main_exits_with_status_one_when_every_row_is_claimed(tmp_path, monkeypatch, capsys, restore_logging):
    surface = pygame.Surface((4, 2))
    surface.fill((0, 0, 0))
    for x in range(4):
        surface.set_at((x, 1), (200, 200, 200))
    image_path = tmp_path / "two_rows.png"
    pygame.image.save(surface, str(image_path))
    config_path = tmp_path / "crowded.yaml"
    config_path.write_text(
        "evolution:\n  population_density: 0.99\n  mutation_rate: 0.0\n  max_sampling_attempts: 5\n"
    )
    # Every Gaussian draw lands on row 0, so the second net can never be placed.
    monkeypatch.setattr(DeterministicRng, "gaussian", lambda self, mean, stddev: 0.0)
    monkeypatch.setattr(
        sys, "argv", ["edgenets-headless", str(image_path), "--config", str(config_path), "--generations", "1"]
    )

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "after 5 attempts" in capsys.readouterr().err
