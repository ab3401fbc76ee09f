"""
Configuration management for feedqa.
"""
import copy
import os
import json
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = 'FEEDQA_'

# Default configuration
DEFAULT_CONFIG = {
    "transport": {
        "proxy_url": "https://api.allorigins.win/raw?url=",
        "timeout_seconds": None,
        "user_agent": "feedqa/0.1 (+https://github.com/feedqa/feedqa)"
    },
    "model": {
        "name": "distilbert-base-cased-distilled-squad",
        "device": None,
        "max_context_chars": 2000
    },
    "store": {
        "path": "feeds.db"
    },
    "logging": {
        "level": "INFO",
        "file": None
    }
}

class Config:
    """
    Configuration manager for feedqa.
    """
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the Config.

        Args:
            config_path: Path to a YAML or JSON configuration file
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from file or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path:
            path = Path(self.config_path)
            if path.exists():
                try:
                    user_config = self._read_file(path)
                except (OSError, ValueError, yaml.YAMLError) as e:
                    logger.warning(f"Error loading config from {self.config_path}: {e}")
                    logger.warning("Using default configuration")
                else:
                    if isinstance(user_config, dict):
                        self._update_dict(config, user_config)
            else:
                logger.warning(f"Config file {self.config_path} not found, using defaults")

        # Override with environment variables
        self._override_from_env(config)

        return config

    @staticmethod
    def _read_file(path: Path) -> Any:
        if path.suffix.lower() in ['.yaml', '.yml']:
            with open(path, 'r') as f:
                return yaml.safe_load(f)
        if path.suffix.lower() == '.json':
            with open(path, 'r') as f:
                return json.load(f)
        raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _update_dict(self, target: Dict, source: Dict) -> None:
        """
        Recursively update a dictionary.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _override_from_env(self, config: Dict, prefix: str = ENV_PREFIX) -> None:
        """
        Override configuration with environment variables.

        Sections are separated by a double underscore, so
        ``FEEDQA_TRANSPORT__TIMEOUT_SECONDS=30`` sets ``transport.timeout_seconds``.

        Args:
            config: Configuration dictionary to update
            prefix: Prefix for environment variables
        """
        for key, value in os.environ.items():
            if not key.startswith(prefix) or key == f"{prefix}CONFIG_PATH":
                continue

            parts = key[len(prefix):].lower().split('__')

            # Navigate to the right place in the config
            current = config
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            try:
                # Try to parse as JSON
                current[parts[-1]] = json.loads(value)
            except json.JSONDecodeError:
                # If not valid JSON, use as string
                current[parts[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated key path (e.g., 'model.name')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        parts = key.split('.')
        current = self.config

        for part in parts:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current


# Global configuration instance
config = Config(os.getenv('FEEDQA_CONFIG_PATH'))

def load_config(config_path: Optional[str] = None) -> Config:
    """
    Replace the global configuration with one loaded from ``config_path``.
    """
    global config
    config = Config(config_path)
    return config

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        key: Dot-separated key path (e.g., 'store.path')
        default: Default value if key not found

    Returns:
        Configuration value
    """
    return config.get(key, default)
