"""
Configuration loading and logging setup.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from starentity import (
    EntitySet, Environment, StarEntityConfig, configure_logging, get_config, set_config,
)

from sample_entities import ItemEntity


@pytest.fixture
def starentity_logger():
    logger = logging.getLogger("starentity")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if getattr(handler, "_starentity_handler", False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


class TestStarEntityConfig:

    def test_defaults(self):
        config = StarEntityConfig()
        assert config.environment == Environment.DEVELOPMENT
        assert config.sets.unique_find_keys is False
        assert config.sets.validate_per_rule is True

    def test_for_environment(self):
        assert StarEntityConfig.for_environment(Environment.DEVELOPMENT).logging.level == "DEBUG"
        assert StarEntityConfig.for_environment(Environment.TESTING).logging.level == "WARNING"
        assert StarEntityConfig.for_environment(Environment.PRODUCTION).debug is False

    def test_from_dict(self):
        config = StarEntityConfig.from_dict({
            "environment": "testing",
            "debug": True,
            "sets": {"unique_find_keys": True, "unknown": 1},
            "logging": {"level": "ERROR"},
            "custom": {"team": "content"},
        })

        assert config.environment == Environment.TESTING
        assert config.debug is True
        assert config.sets.unique_find_keys is True
        assert not hasattr(config.sets, "unknown")
        assert config.logging.level == "ERROR"
        assert config.custom == {"team": "content"}

    def test_to_dict_round_trip(self):
        config = StarEntityConfig.from_dict({"sets": {"validate_per_rule": False}})
        data = config.to_dict()

        assert data["sets"] == {"unique_find_keys": False, "validate_per_rule": False}
        assert StarEntityConfig.from_dict(data).to_dict() == data

    def test_from_file(self, tmp_path):
        path = tmp_path / "starentity.json"
        path.write_text(json.dumps({"environment": "production", "sets": {"unique_find_keys": True}}))

        config = StarEntityConfig.from_file(path)

        assert config.environment == Environment.PRODUCTION
        assert config.sets.unique_find_keys is True

    def test_from_file_errors(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StarEntityConfig.from_file(tmp_path / "missing.json")

        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("sets: {}")
        with pytest.raises(ValueError):
            StarEntityConfig.from_file(yaml_path)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("STARENTITY_ENV", "staging")
        monkeypatch.setenv("STARENTITY_DEBUG", "true")
        monkeypatch.setenv("STARENTITY_LOG_LEVEL", "warning")
        monkeypatch.setenv("STARENTITY_UNIQUE_FIND_KEYS", "true")
        monkeypatch.setenv("STARENTITY_VALIDATE_PER_RULE", "false")

        config = StarEntityConfig.from_environment()

        assert config.environment == Environment.STAGING
        assert config.debug is True
        assert config.logging.level == "WARNING"
        assert config.sets.unique_find_keys is True
        assert config.sets.validate_per_rule is False


class TestGlobalConfig:

    def test_get_config_is_lazy_and_stable(self):
        assert get_config() is get_config()

    def test_sets_capture_config_at_construction(self):
        before = EntitySet(ItemEntity)
        set_config(StarEntityConfig.from_dict({"sets": {"unique_find_keys": True}}))
        after = EntitySet(ItemEntity)

        assert before.config.unique_find_keys is False
        assert after.config.unique_find_keys is True


class TestConfigureLogging:

    def test_stream_handler(self, starentity_logger):
        config = StarEntityConfig.from_dict({"logging": {"level": "debug"}})

        logger = configure_logging(config)

        handlers = [h for h in logger.handlers if getattr(h, "_starentity_handler", False)]
        assert logger is starentity_logger
        assert logger.level == logging.DEBUG
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_reconfigure_replaces_handler(self, starentity_logger, tmp_path):
        configure_logging(StarEntityConfig())
        log_file = tmp_path / "starentity.log"
        config = StarEntityConfig.from_dict({"logging": {"file_path": str(log_file)}})

        logger = configure_logging(config)

        handlers = [h for h in logger.handlers if getattr(h, "_starentity_handler", False)]
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)

    def test_set_operations_log_to_file(self, starentity_logger, tmp_path):
        log_file = tmp_path / "starentity.log"
        configure_logging(StarEntityConfig.from_dict({
            "logging": {"level": "DEBUG", "file_path": str(log_file)},
        }))

        EntitySet(ItemEntity, [{"name": "a"}, {"name": "b"}]).move_to(0, 1)

        for handler in starentity_logger.handlers:
            handler.flush()
        content = log_file.read_text()
        assert "Filled 2 ItemEntity entities" in content
        assert "Moved entity from 0 to 1" in content
