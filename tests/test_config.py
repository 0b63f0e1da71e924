"""Tests for configuration files."""

import json
import os
import tempfile
import pytest
from gravity_system.utils.config import Config, load_config, save_config


def test_save_load_json():
    """Test saving and loading JSON format."""
    config = Config(planet_count=12, ship_count=34, limit_x=(-5.0, 5.0), seed=9)

    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        temp_path = f.name

    try:
        save_config(config, temp_path)
        loaded = load_config(temp_path)

        assert loaded == config
        assert loaded.limit_x == (-5.0, 5.0)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_save_load_yaml():
    """Test saving and loading YAML format."""
    pytest.importorskip("yaml")
    config = Config(ship_count=7, backend="numpy", dt=0.02)

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        temp_path = f.name

    try:
        save_config(config, temp_path)
        loaded = load_config(temp_path)

        assert loaded == config
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_lists_become_tuples():
    config = Config.from_dict({"limit_y": [-3, 3], "planet_mass_range": [0.2, 0.4]})
    assert config.limit_y == (-3.0, 3.0)
    assert config.planet_mass_range == (0.2, 0.4)


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"ships": 10}))
    with pytest.raises(ValueError):
        load_config(str(path))


def test_invalid_values_rejected():
    with pytest.raises(ValueError):
        Config(dt=0.0)
    with pytest.raises(ValueError):
        Config(group_size=0)
    with pytest.raises(ValueError):
        Config(debug_every=0)
    with pytest.raises(ValueError):
        Config(render_every=0)

