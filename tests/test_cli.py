"""Tests for the command-line interface."""

import json
import numpy as np
import pytest
from gravity_system.cli.main import build_config, create_parser, main, run_simulation
from gravity_system.utils.config import Config


def test_list_backends(capsys):
    main(["--list-backends"])
    out = capsys.readouterr().out
    assert "Available backends:" in out
    assert "- numpy" in out


def test_run_small_simulation(capsys):
    main([
        "--backend", "numpy", "--planets", "3", "--ships", "5",
        "--steps", "4", "--seed", "1", "--debug-every", "2", "--verbose",
    ])
    out = capsys.readouterr().out
    assert "Running simulation: 3 planets, 5 ships" in out
    assert "[Buffers] allocated ships=5 planets=3" in out
    assert "Simulation complete!" in out


def test_command_line_overrides_config_file(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps({"planet_count": 8, "ship_count": 9, "dt": 0.05}))

    args = create_parser().parse_args(["--config", str(path), "--ships", "2"])
    config = build_config(args)

    assert config.planet_count == 8
    assert config.ship_count == 2
    assert config.dt == 0.05


def test_zero_debug_interval_rejected():
    args = create_parser().parse_args(["--debug-every", "0"])
    with pytest.raises(ValueError):
        build_config(args)


def test_zero_render_interval_rejected():
    args = create_parser().parse_args(["--render", "--render-every", "0"])
    with pytest.raises(ValueError):
        build_config(args)


def test_gpu_switch():
    """--no-gpu turns off GPU preference; no flag keeps the config value."""
    parser = create_parser()
    assert build_config(parser.parse_args([])).prefer_gpu is True
    assert build_config(parser.parse_args(["--no-gpu"])).prefer_gpu is False
    assert build_config(parser.parse_args(["--gpu"])).prefer_gpu is True


def test_seed_reproduces_scene():
    """The same seed spawns and evolves the same scene."""
    config = Config(planet_count=3, ship_count=4, steps=3, backend="numpy", seed=11)
    first = run_simulation(config).get_state()
    second = run_simulation(config).get_state()

    for a, b in zip(first[:4], second[:4]):
        assert np.array_equal(a, b)
