"""
Configuration Management for StarEntity

🔧 Unified Configuration System:
Dataclass based configuration with per-environment presets, dictionary,
JSON file and environment variable loading, plus logging setup for the
``starentity`` logger hierarchy.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
import logging
import os

class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

@dataclass
class SetConfig:
    """
    Behaviour switches for entity sets.

    unique_find_keys: emit a matching index once instead of once per query field
    validate_per_rule: repeat member messages once per set validator (legacy loop)
    """
    unique_find_keys: bool = False
    validate_per_rule: bool = True

@dataclass
class StarEntityConfig:
    """Complete configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    sets: SetConfig = field(default_factory=SetConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Custom configuration
    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'StarEntityConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'StarEntityConfig':
        """Create configuration from dictionary"""
        if "environment" in config_dict:
            config = cls.for_environment(Environment(config_dict["environment"]))
        else:
            config = cls()

        if "debug" in config_dict:
            config.debug = bool(config_dict["debug"])

        # Update nested configs
        for section in ("sets", "logging"):
            for key, value in config_dict.get(section, {}).items():
                target = getattr(config, section)
                if hasattr(target, key):
                    setattr(target, key, value)

        if "custom" in config_dict:
            config.custom.update(config_dict["custom"])

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'StarEntityConfig':
        """Load configuration from a JSON file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix != '.json':
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        with open(config_path) as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> 'StarEntityConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('STARENTITY_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        # Override with environment variables
        if os.getenv('STARENTITY_DEBUG'):
            config.debug = os.getenv('STARENTITY_DEBUG').lower() == 'true'

        if os.getenv('STARENTITY_LOG_LEVEL'):
            config.logging.level = os.getenv('STARENTITY_LOG_LEVEL').upper()

        if os.getenv('STARENTITY_UNIQUE_FIND_KEYS'):
            config.sets.unique_find_keys = os.getenv('STARENTITY_UNIQUE_FIND_KEYS').lower() == 'true'

        if os.getenv('STARENTITY_VALIDATE_PER_RULE'):
            config.sets.validate_per_rule = os.getenv('STARENTITY_VALIDATE_PER_RULE').lower() == 'true'

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "sets": {
                "unique_find_keys": self.sets.unique_find_keys,
                "validate_per_rule": self.sets.validate_per_rule
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count
            },
            "custom": self.custom
        }

# Global configuration management
_current_config: Optional[StarEntityConfig] = None

def set_config(config: StarEntityConfig):
    """Set the global configuration"""
    global _current_config
    _current_config = config

def get_config() -> StarEntityConfig:
    """Get the current global configuration"""
    global _current_config
    if _current_config is None:
        _current_config = StarEntityConfig()
    return _current_config

def reset_config():
    """Drop the global configuration so the next lookup starts from defaults"""
    global _current_config
    _current_config = None

def configure_logging(config: Optional[StarEntityConfig] = None) -> logging.Logger:
    """
    Attach a handler to the ``starentity`` logger according to the logging config.

    Calling it again replaces the handler installed by the previous call.
    """
    config = config or get_config()
    logger = logging.getLogger("starentity")
    logger.setLevel(config.logging.level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_starentity_handler", False):
            logger.removeHandler(handler)
            handler.close()

    if config.logging.file_path:
        handler = RotatingFileHandler(
            config.logging.file_path,
            maxBytes=config.logging.max_file_size,
            backupCount=config.logging.backup_count
        )
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(config.logging.format))
    handler._starentity_handler = True
    logger.addHandler(handler)
    return logger
