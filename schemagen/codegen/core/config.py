"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
Configurations are immutable once built; a generator holds one for
its whole lifetime.
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union

from ...logging_config import get_logger
from .presets import Preset, as_preset

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


VALID_CASES = {"pascal", "camel", "snake", "screaming_snake"}


@dataclass(frozen=True)
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    package_name: str = "main"

    # Code style settings
    indent_size: int = 2
    use_tabs: bool = False

    # Naming settings
    struct_case: str = "pascal"
    field_case: str = "pascal"

    # Type handling
    use_pointers_for_optional: bool = True

    # JSON settings
    generate_json_tags: bool = True
    json_tag_omitempty: bool = True

    # Additional metadata
    add_comments: bool = True

    # Caller presets, applied after the built-in defaults in this order
    presets: Tuple[Preset, ...] = ()

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "presets", tuple(as_preset(preset) for preset in self.presets)
        )
        for name in ("struct_case", "field_case"):
            if getattr(self, name) not in VALID_CASES:
                raise ConfigError(f"Invalid {name}: {getattr(self, name)}")
        if self.indent_size < 0:
            raise ConfigError(f"Invalid indent_size: {self.indent_size}")

    @property
    def indent(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size

    def with_presets(self, *presets) -> "GeneratorConfig":
        """Return a copy with extra presets appended."""
        return replace(self, presets=self.presets + tuple(presets))


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._config_classes: Dict[str, Type[GeneratorConfig]] = {}

    def register_language(
        self,
        language: str,
        defaults: Dict[str, Any],
        config_class: Type[GeneratorConfig] = GeneratorConfig,
    ):
        """Register default settings and the config class of a language."""
        self._configs[language] = dict(defaults)
        self._config_classes[language] = config_class

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        base_config = self._configs.get(language, {}).copy()

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        config_class = self._config_classes.get(language, GeneratorConfig)
        return self._dict_to_config(base_config, config_class)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(
        self, config_dict: Dict[str, Any], config_class: Type[GeneratorConfig]
    ) -> GeneratorConfig:
        """Convert dictionary to a config instance; unknown keys go to custom."""
        known_fields = {f.name for f in fields(config_class)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            merged_custom = dict(config_args.get("custom", {}))
            merged_custom.update(custom_args)
            config_args["custom"] = merged_custom

        try:
            return config_class(**config_args)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def list_languages(self) -> list[str]:
        """Get list of languages with registered defaults."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> list[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.custom:
            warnings.append(
                f"Unrecognized settings: {', '.join(sorted(config.custom))}"
            )

        # Language-specific validations
        if language == "go":
            from ..languages.go.naming import validate_go_package_name

            warnings.extend(validate_go_package_name(config.package_name))

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
        from ..languages.go.config import GO_DEFAULTS, GoConfig

        _config_manager.register_language("go", GO_DEFAULTS, GoConfig)
    return _config_manager


def load_config(
    language: str = "go",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)
