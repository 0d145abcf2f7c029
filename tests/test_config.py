"""Tests for configuration loading."""

import os
import tempfile
from unittest.mock import patch
import yaml
import pytest
from gaswatch.config import Config, find_config_file, merge_settings


def _write_config(data) -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(data, f)
        return f.name


def test_config_defaults():
    """Test that config loads with defaults when file is minimal."""
    temp_path = _write_config({
        "etherscan": {"api_key": "abc"},
        "polling": {"poll_secs": 15},
    })

    try:
        config = Config(temp_path)
        assert config.etherscan_api_key == "abc"
        assert config.poll_secs == 15
        assert config.etherscan_url == "https://api.etherscan.io/api"  # default
        assert config.short_capacity == 360
        assert config.long_capacity == 148
        assert config.minute_flush_secs == 60
        assert config.hour_flush_secs == 3600
        assert config.long_countdown_secs == 600
        assert config.gas_limit == 21000
        assert config.block_time_secs == 13
    finally:
        os.unlink(temp_path)


def test_config_env_overrides():
    """Test that environment variables override config values."""
    temp_path = _write_config({
        "etherscan": {"api_key": "original", "api_url": "http://original/api"},
        "polling": {"poll_secs": 10},
    })

    try:
        with patch.dict(os.environ, {"GW_ETHERSCAN_API_KEY": "override", "GW_POLL_SECS": "30"}):
            config = Config(temp_path)
        assert config.etherscan_api_key == "override"
        assert config.poll_secs == 30
        assert config.etherscan_url == "http://original/api"  # not overridden
    finally:
        os.unlink(temp_path)


def test_config_local_overrides(tmp_path):
    """Test that config.local.yaml is merged over config.yaml."""
    main = tmp_path / "config.yaml"
    main.write_text(yaml.dump({"windows": {"short_capacity": 100, "long_capacity": 50}}))
    (tmp_path / "config.local.yaml").write_text(yaml.dump({"windows": {"long_capacity": 24}}))

    config = Config(str(main))
    assert config.short_capacity == 100
    assert config.long_capacity == 24


def test_config_missing_explicit_path():
    """Test that an explicit missing path raises."""
    with pytest.raises(FileNotFoundError):
        Config("/nonexistent/gaswatch/config.yaml")


def test_config_creates_default(tmp_path, monkeypatch):
    """Test that a default config.yaml is written when none is found."""
    monkeypatch.chdir(tmp_path)
    config = Config()

    assert (tmp_path / "config.yaml").exists()
    assert config.poll_secs == 10


def test_config_rejects_non_positive_capacity(tmp_path):
    """Test that invalid window capacities are rejected."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"windows": {"short_capacity": 0}}))
    with pytest.raises(ValueError):
        Config(str(path))


def test_find_config_file_walks_up(tmp_path):
    """Test that the nearest config.yaml in a parent directory is found."""
    (tmp_path / "config.yaml").write_text("{}")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config_file(nested) == tmp_path / "config.yaml"


def test_merge_settings_leaves_inputs_unchanged():
    """Test that nested sections merge key by key without mutating the base."""
    base = {"windows": {"short_capacity": 360, "long_capacity": 148}, "polling": {"poll_secs": 10}}
    merged = merge_settings(base, {"windows": {"long_capacity": 24}, "estimates": {"gas_limit": 1}})

    assert merged == {
        "windows": {"short_capacity": 360, "long_capacity": 24},
        "polling": {"poll_secs": 10},
        "estimates": {"gas_limit": 1},
    }
    assert base["windows"]["long_capacity"] == 148


def test_config_rejects_non_mapping_file(tmp_path):
    """Test that a YAML file that is not a mapping is rejected."""
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        Config(str(path))
