"""Tests for conflux.yaml configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from conflux.core.config_loader import ConfigLoader
from conflux.core.environment import Environment
from conflux.core.filters import Filter


class TestConfigLoader:
    """Test ConfigLoader functionality."""

    def test_init_with_explicit_path(self, tmp_path):
        """Test initialization with explicit config path."""
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("environments: {}")

        loader = ConfigLoader(config_file)
        assert loader.config_path == config_file

    def test_init_with_nonexistent_explicit_path(self, tmp_path, caplog):
        """Test initialization with nonexistent explicit path."""
        with caplog.at_level(logging.WARNING, logger="conflux.core.config_loader"):
            loader = ConfigLoader(tmp_path / "nonexistent.yaml")

        assert loader.config_path is None
        assert "does not exist" in caplog.text

    def test_find_config_in_current_dir(self, tmp_path, monkeypatch):
        """Test finding conflux.yaml in current directory."""
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("environments: {}")
        monkeypatch.chdir(tmp_path)

        assert ConfigLoader().config_path == config_file

    def test_find_config_in_parent_dir(self, tmp_path, monkeypatch):
        """Test finding conflux.yaml in parent directory."""
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("environments: {}")
        subdir = tmp_path / "subdir"
        subdir.mkdir()
        monkeypatch.chdir(subdir)

        assert ConfigLoader().config_path == config_file

    def test_no_config_file_found(self):
        """Test when no conflux.yaml is found."""
        loader = ConfigLoader()
        assert loader.config_path is None
        assert loader.load() == {}

    def test_load_valid_config(self, tmp_path):
        """Test loading a valid configuration file."""
        config_data = {
            "environments": {
                "production": {
                    "sources": [
                        {"path": "./config.yaml"},
                        {"uri": "redis://localhost:6379"},
                    ]
                }
            }
        }
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text(yaml.dump(config_data))

        assert ConfigLoader(config_file).load() == config_data

    def test_load_invalid_yaml(self, tmp_path):
        """Test loading an invalid YAML file."""
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid conflux.yaml"):
            ConfigLoader(config_file).load()

    def test_load_non_mapping(self, tmp_path):
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            ConfigLoader(config_file).load()

    def test_get_environment_config(self, tmp_path):
        """Test getting configuration for a specific environment."""
        config_data = {
            "environments": {
                "production": {"sources": [{"path": "prod.yaml"}]},
                "development": {"sources": [{"path": "dev.yaml"}]},
            }
        }
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text(yaml.dump(config_data))

        loader = ConfigLoader(config_file)
        assert loader.get_environment_config("production") == {"sources": [{"path": "prod.yaml"}]}
        assert loader.get_environment_config("development") == {"sources": [{"path": "dev.yaml"}]}
        assert loader.get_environment_config("staging") is None

    def test_get_sources(self, tmp_path):
        """Test getting sources for an environment."""
        config_data = {
            "environments": {
                "production": {
                    "sources": [
                        {"path": "./config.yaml", "depth": 3},
                        {"uri": "redis://localhost:6379", "name": "live"},
                    ]
                }
            }
        }
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text(yaml.dump(config_data))

        loader = ConfigLoader(config_file)
        sources = loader.get_sources("production")
        assert sources == [
            {"path": "./config.yaml", "depth": 3},
            {"uri": "redis://localhost:6379", "name": "live"},
        ]
        assert loader.get_sources("nonexistent") == []

    def test_parse_source_with_path(self):
        """Test parsing source configuration with path."""
        parsed = ConfigLoader().parse_source(
            {"path": "./config.yaml", "name": "Main Config", "depth": 3}
        )
        assert parsed["path_or_uri"] == Path("./config.yaml")
        assert parsed["name"] == "Main Config"
        assert parsed["depth"] == 3

    def test_parse_source_relative_to_config_file(self, tmp_path):
        """Test that relative paths resolve against the config file's directory."""
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text("environments: {}")

        parsed = ConfigLoader(config_file).parse_source({"path": "settings/base.yaml"})
        assert parsed["path_or_uri"] == tmp_path / "settings" / "base.yaml"

    def test_parse_source_with_uri(self):
        """Test parsing source configuration with URI."""
        parsed = ConfigLoader().parse_source({"uri": "redis://localhost:6379"})
        assert parsed["path_or_uri"] == "redis://localhost:6379"

    def test_parse_source_missing_path_and_uri(self):
        """Test parsing source without path or URI raises error."""
        with pytest.raises(ValueError, match="must have either 'path' or 'uri'"):
            ConfigLoader().parse_source({"name": "Invalid"})

    def test_parse_source_with_filter(self):
        """Test parsing source with filter configuration."""
        source_config = {
            "path": "./config.yaml",
            "filter": {
                "include_regex": "^(database|redis)",
                "hierarchical_spec": {"database": True, "redis": {"host": True}},
                "depth": 2,
            },
        }

        parsed = ConfigLoader().parse_source(source_config)
        filter_obj = parsed["filter"]
        assert isinstance(filter_obj, Filter)
        assert filter_obj.include_regex.pattern == "^(database|redis)"
        assert filter_obj.hierarchical_spec == {"database": True, "redis": {"host": True}}
        assert filter_obj.depth == 2
        assert parsed["depth"] == 2

    def test_parse_source_depth_at_source_level(self):
        """Test parsing source with depth at source level."""
        parsed = ConfigLoader().parse_source({"path": "./config.yaml", "depth": 5})
        assert parsed["depth"] == 5


class TestEnvironmentWithConfluxYaml:
    """Test Environment integration with conflux.yaml."""

    def test_environment_loads_from_config_file(self, tmp_path):
        """Test Environment loads sources from conflux.yaml."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("database:\n  host: localhost")
        json_file = tmp_path / "config.json"
        json_file.write_text('{"api": {"key": "secret"}}')

        config_data = {
            "environments": {
                "production": {
                    "sources": [
                        {"path": "config.yaml"},
                        {"path": str(json_file), "depth": 2},
                    ]
                }
            }
        }
        config_file = tmp_path / "conflux.yaml"
        config_file.write_text(yaml.dump(config_data))

        env = Environment("production")
        assert len(env.registered_sources) == 2
        assert env.config_file_path == config_file
        effective, _ = env.accessor().properties()
        assert effective == {"database.host": "localhost", "api.key": "secret"}

    def test_environment_appends_explicit_sources(self, tmp_path):
        """Test explicit sources come after conflux.yaml ones and win."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("key: from_yaml\nother: kept")
        env_file = tmp_path / ".env"
        env_file.write_text("KEY=from_env")

        config_data = {"environments": {"test": {"sources": [{"path": str(yaml_file)}]}}}
        (tmp_path / "conflux.yaml").write_text(yaml.dump(config_data))

        env = Environment("test", sources=[str(env_file)])
        effective, _ = env.accessor().properties()

        assert effective == {"key": "from_env", "other": "kept"}

    def test_environment_skips_invalid_sources(self, tmp_path, caplog):
        """Test Environment logs and skips unusable entries in conflux.yaml."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("key: value")
        config_data = {
            "environments": {
                "production": {
                    "sources": [
                        {"invalid": "source"},
                        {"path": "settings.unknown"},
                        {"path": str(yaml_file)},
                    ]
                }
            }
        }
        (tmp_path / "conflux.yaml").write_text(yaml.dump(config_data))

        with caplog.at_level(logging.WARNING, logger="conflux.core.environment"):
            env = Environment("production")

        assert len(env.registered_sources) == 1
        assert caplog.text.count("Skipping source") == 2

    def test_environment_with_filter_from_config(self, tmp_path):
        """Test Environment loads sources with filters from conflux.yaml."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text(
            """
database:
  host: localhost
  password: secret
redis:
  host: redis.local
api:
  key: apikey
"""
        )
        config_data = {
            "environments": {
                "production": {
                    "sources": [
                        {
                            "path": str(yaml_file),
                            "filter": {"include_regex": "^(database|redis)", "depth": 2},
                        }
                    ]
                }
            }
        }
        (tmp_path / "conflux.yaml").write_text(yaml.dump(config_data))

        effective, _ = Environment("production").accessor().properties()

        assert "database.host" in effective
        assert "redis.host" in effective
        assert "api.key" not in effective

    def test_environment_with_custom_config_path(self, tmp_path):
        """Test Environment with custom config file path."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("key: value")
        custom_dir = tmp_path / "custom"
        custom_dir.mkdir()
        config_file = custom_dir / "my-config.yaml"
        config_file.write_text(
            yaml.dump({"environments": {"staging": {"sources": [{"path": str(yaml_file)}]}}})
        )

        env = Environment("staging", config_path=config_file)
        assert env.config_file_path == config_file
        assert len(env.registered_sources) == 1
