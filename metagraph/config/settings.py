"""
Settings module for model enrichment.

This module provides a settings class to manage configuration
options and defaults for annotation naming, name resolution,
exposure propagation and output generation.
"""

import os
import json
import logging
from copy import deepcopy
from typing import Dict, List, Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "http://metagraph.io/meta/ExtendedMetadata"


class Settings:
    """
    Settings for model enrichment.

    This class manages configuration options, environment variables,
    and user preferences for the metagraph library.
    """

    ENV_PREFIX = "METAGRAPH_"

    # Default settings
    DEFAULT_SETTINGS = {
        # Annotation naming
        "annotations": {
            "namespace": DEFAULT_NAMESPACE
        },

        # Name resolution
        "resolution": {
            "cache_enabled": True,
            "name_fallback": True
        },

        # Exposure propagation
        "exposure": {
            "include_unbound": True
        },

        # Output generation
        "output": {
            "diagram_style": "default",
            "output_directory": "output"
        }
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_path: Optional path to a JSON config file
        """
        # Start with default settings
        self.settings = deepcopy(self.DEFAULT_SETTINGS)

        # Load from config file if provided
        if config_path:
            self.load_from_file(config_path)

        # Override with environment variables
        self._load_from_env()

    def load_from_file(self, config_path: str) -> bool:
        """
        Load settings from a JSON config file.

        Args:
            config_path: Path to the config file

        Returns:
            True if successfully loaded, False otherwise
        """
        try:
            with open(config_path, 'r') as f:
                user_settings = json.load(f)

            self._update_dict_recursive(self.settings, user_settings)
            logger.info(f"Loaded settings from {config_path}")
            return True

        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings from {config_path}: {str(e)}")
            return False

    def _update_dict_recursive(self, target: Dict, source: Dict) -> None:
        """
        Update a dictionary recursively.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict_recursive(target[key], value)
            else:
                target[key] = value

    def _setting_path(self, name: str) -> List[str]:
        """
        Split an environment variable name (without prefix) into a setting path.

        The first component names the section. When the rest matches an
        existing key of that section (keys may contain underscores) it is
        kept whole, otherwise every underscore starts a nested level.

        Args:
            name: Lower-cased variable name without the prefix

        Returns:
            Setting path components
        """
        parts = name.split('_')
        section, rest = parts[0], '_'.join(parts[1:])
        if rest and isinstance(self.settings.get(section), dict) and rest in self.settings[section]:
            return [section, rest]
        return parts

    def _load_from_env(self) -> None:
        """Load settings from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.ENV_PREFIX):
                setting_path = self._setting_path(key[len(self.ENV_PREFIX):].lower())

                current = self.settings
                for part in setting_path[:-1]:
                    if not isinstance(current.get(part), dict):
                        current[part] = {}
                    current = current[part]

                current[setting_path[-1]] = self._convert_value(value)

                logger.debug(f"Setting {key} from environment variable")

    def _convert_value(self, value: str) -> Any:
        """
        Convert string value to appropriate type.

        Args:
            value: String value to convert

        Returns:
            Converted value
        """
        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

        return value

    def get(self, *path: str, default: Any = None) -> Any:
        """
        Get a setting value by path.

        Args:
            *path: Path components to the setting
            default: Default value if setting not found

        Returns:
            Setting value or default
        """
        current = self.settings

        for part in path:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def set(self, *path_and_value: Any) -> None:
        """
        Set a setting value by path.

        Args:
            *path_and_value: Path components and value, where the last
                            element is the value to set
        """
        if len(path_and_value) < 2:
            logger.error("set() requires at least one path component and a value")
            return

        path = path_and_value[:-1]
        value = path_and_value[-1]

        current = self.settings

        for part in path[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[path[-1]] = value

    def save_to_file(self, config_path: str) -> bool:
        """
        Save current settings to a JSON file.

        Args:
            config_path: Path to save the config file

        Returns:
            True if successfully saved, False otherwise
        """
        try:
            os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

            with open(config_path, 'w') as f:
                json.dump(self.settings, f, indent=2)

            logger.info(f"Saved settings to {config_path}")
            return True

        except (OSError, TypeError) as e:
            logger.warning(f"Failed to save settings to {config_path}: {str(e)}")
            return False

    def get_all(self) -> Dict[str, Any]:
        """
        Get all settings.

        Returns:
            Copy of all settings
        """
        return deepcopy(self.settings)

    def reset(self) -> None:
        """Reset all settings to defaults."""
        self.settings = deepcopy(self.DEFAULT_SETTINGS)
        logger.info("Reset settings to defaults")

    def reset_section(self, section: str) -> bool:
        """
        Reset a specific section to defaults.

        Args:
            section: Section name

        Returns:
            True if section existed and was reset, False otherwise
        """
        if section in self.DEFAULT_SETTINGS:
            self.settings[section] = deepcopy(self.DEFAULT_SETTINGS[section])
            logger.info(f"Reset {section} settings to defaults")
            return True
        else:
            logger.warning(f"Section {section} not found in default settings")
            return False
