"""
Configuration management for the reaction analyzer.

Handles loading, updating, and persisting configuration for the PubChem
client and the resolution engine.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Optional
import yaml

logger = logging.getLogger(__name__)

# Default config path relative to project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'analyzer_config.yaml'


class ConfigManager:
    """
    Manages system configuration for remote lookup and resolution.

    Provides methods to load, update, and persist configuration. Missing
    sections or keys are filled in from DEFAULT_CONFIG.
    """

    DEFAULT_CONFIG = {
        'pubchem': {
            'base_url': 'https://pubchem.ncbi.nlm.nih.gov/rest/pug',
            'timeout': 15,
            'max_retries': 3,
            'retry_base_delay': 1.0,
            'rate_limit_calls': 5,
            'rate_limit_period': 1,
            'user_agent': 'Reaction-Analyzer/1.0 (stoichiometry)'
        },
        'resolution': {
            'enable_remote': True,
            'max_workers': 8,
            'collect_trace': True
        }
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = config_path
        self.config: dict[str, Any] = {}

        if config_path and Path(config_path).exists():
            self.load_config(Path(config_path))
        else:
            logger.info("No config file found, using defaults")
            self.config = copy.deepcopy(self.DEFAULT_CONFIG)

    def load_config(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            FileNotFoundError: If config file does not exist
            yaml.YAMLError: If config file is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded_config = yaml.safe_load(f)

            if not loaded_config:
                logger.warning(f"Empty config file at {path}, using defaults")
                self.config = copy.deepcopy(self.DEFAULT_CONFIG)
            else:
                self.config = self._merge_with_defaults(loaded_config)

            self.config_path = path
            logger.info(f"Loaded configuration from {path}")

            return self.config

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise

    def get_pubchem_param(self, name: str) -> Any:
        """
        Get a PubChem client parameter by name.

        Raises:
            KeyError: If parameter not found
        """
        if name not in self.config.get('pubchem', {}):
            raise KeyError(f"PubChem parameter '{name}' not found in configuration")

        return self.config['pubchem'][name]

    def get_resolution_param(self, name: str) -> Any:
        """
        Get a resolution parameter by name.

        Raises:
            KeyError: If parameter not found
        """
        if name not in self.config.get('resolution', {}):
            raise KeyError(f"Resolution parameter '{name}' not found in configuration")

        return self.config['resolution'][name]

    def update_param(self, section: str, name: str, value: Any) -> None:
        """Set ``config[section][name]`` to ``value``."""
        self.config.setdefault(section, {})
        old_value = self.config[section].get(name)
        self.config[section][name] = value

        logger.info(f"Updated {section}.{name}: {old_value} -> {value}")

    def save_config(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save to (uses self.config_path if not provided)

        Raises:
            ValueError: If no path provided and no config_path set
        """
        save_path = path or self.config_path

        if not save_path:
            raise ValueError("No path provided and no config_path set")

        save_path = Path(save_path)
        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)

            with open(save_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(
                    self.config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2
                )

            logger.info(f"Saved configuration to {save_path}")

        except Exception as e:
            logger.error(f"Failed to save configuration: {e}")
            raise

    def get_all_config(self) -> dict[str, Any]:
        """Get a deep copy of the complete configuration dictionary."""
        return copy.deepcopy(self.config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        logger.info("Configuration reset to defaults")

    def _merge_with_defaults(self, loaded_config: dict) -> dict:
        """Merge loaded config with defaults to ensure all keys exist."""
        merged = copy.deepcopy(self.DEFAULT_CONFIG)

        for section, values in loaded_config.items():
            if section in merged and isinstance(values, dict):
                merged[section].update(values)
            else:
                merged[section] = values

        return merged

    def validate_config(self) -> list[str]:
        """
        Validate the current configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        pubchem = self.config.get('pubchem', {})
        for name in ('timeout', 'rate_limit_period', 'retry_base_delay'):
            value = pubchem.get(name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                errors.append(f"pubchem.{name} must be a non-negative number, got {value!r}")

        for name in ('max_retries', 'rate_limit_calls'):
            value = pubchem.get(name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(f"pubchem.{name} must be a non-negative integer, got {value!r}")

        if not str(pubchem.get('base_url', '')).startswith(('http://', 'https://')):
            errors.append("pubchem.base_url must be an http(s) URL")

        resolution = self.config.get('resolution', {})
        max_workers = resolution.get('max_workers')
        if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
            errors.append("resolution.max_workers must be a positive integer")

        for name in ('enable_remote', 'collect_trace'):
            if not isinstance(resolution.get(name), bool):
                errors.append(f"resolution.{name} must be a boolean")

        return errors
