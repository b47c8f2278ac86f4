"""
Configuration management for pline2ifc.

Loads project settings, credentials, wall layer mappings and geometry
defaults from JSON files.
"""

import json
from pathlib import Path
from typing import Dict, List, Any, Optional
from fnmatch import fnmatch
from loguru import logger

from pline2ifc.core.models import EditorCredentials, MaterialLayerDefaults


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.json"


class Config:
    """Configuration manager for project settings and layer mappings."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to JSON config file. If None, uses the bundled default.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = json.load(f)

        logger.info(f"Loaded config: {self._config.get('name', 'Unknown')}")

    def get_layers_for_element(self, element_type: str) -> List[str]:
        """
        Get layer patterns for a specific element type.

        Args:
            element_type: Type of element ('walls')

        Returns:
            List of layer name patterns
        """
        mapping = self._config.get("layer_mapping", {}).get(element_type, {})
        return mapping.get("patterns", [])

    def get_excluded_layers_for_element(self, element_type: str) -> List[str]:
        """Get excluded layer patterns for a specific element type."""
        mapping = self._config.get("layer_mapping", {}).get(element_type, {})
        return mapping.get("exclude", [])

    def matches_layer_pattern(self, layer_name: str, element_type: str) -> bool:
        """
        Check if a layer name matches the patterns for an element type.

        Args:
            layer_name: Name of the layer to check
            element_type: Type of element

        Returns:
            True if layer matches and is not excluded
        """
        patterns = self.get_layers_for_element(element_type)
        excluded = self.get_excluded_layers_for_element(element_type)

        # Exclusions win
        for exclude_pattern in excluded:
            if fnmatch(layer_name.upper(), exclude_pattern.upper()):
                return False

        for pattern in patterns:
            if fnmatch(layer_name.upper(), pattern.upper()):
                return True

        return False

    def get_geometry_default(self, param_name: str, default: Any = None) -> Any:
        """
        Get a geometry default parameter.

        Args:
            param_name: Parameter name
            default: Default value if not found

        Returns:
            Parameter value or default
        """
        return self._config.get("geometry_defaults", {}).get(param_name, default)

    def get_project_setting(self, setting: str, default: Any = None) -> Any:
        """Get a value from the ``project`` section."""
        return self._config.get("project", {}).get(setting, default)

    def get_credentials(self) -> EditorCredentials:
        """Build editor credentials, falling back to defaults for missing fields."""
        return EditorCredentials(**self._config.get("credentials", {}))

    def get_material_defaults(self) -> MaterialLayerDefaults:
        """Build the material layer defaults applied to generated walls."""
        return MaterialLayerDefaults(**self._config.get("material_layer", {}))


# Global default config instance
_default_config: Optional[Config] = None


def get_default_config() -> Config:
    """Get the default global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = Config()
    return _default_config


def load_config(config_path: str) -> Config:
    """
    Load configuration from a specific file.

    Args:
        config_path: Path to JSON config file

    Returns:
        Config instance
    """
    return Config(config_path)
