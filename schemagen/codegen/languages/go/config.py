"""
Go-specific configuration and validation.

Extends the base configuration system with Go-specific settings.
"""

from dataclasses import dataclass
from typing import Iterable, List, Union

from ...core.config import ConfigError, GeneratorConfig
from .types import ConflictStrategy


VALID_INT_TYPES = {"int", "int8", "int16", "int32", "int64"}
VALID_FLOAT_TYPES = {"float32", "float64"}
VALID_UNKNOWN_TYPES = {"interface{}", "any"}


@dataclass(frozen=True)
class GoConfig(GeneratorConfig):
    """Go-specific configuration."""

    int_type: str = "int64"
    float_type: str = "float64"
    string_type: str = "string"
    bool_type: str = "bool"

    # Time handling for string fields with a date-time format
    time_type: str = "time.Time"
    time_import: str = "time"

    unknown_type: str = "interface{}"  # or "any" for Go 1.18+
    conflict_strategy: Union[ConflictStrategy, str] = ConflictStrategy.INTERFACE

    # Repeat the enum type on every constant of a const block
    enum_type_on_every_constant: bool = False

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.conflict_strategy, ConflictStrategy):
            try:
                strategy = ConflictStrategy(self.conflict_strategy)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid conflict_strategy: {self.conflict_strategy}"
                ) from e
            object.__setattr__(self, "conflict_strategy", strategy)
        self._validate_go_settings()

    def _validate_go_settings(self):
        """Validate Go-specific configuration."""
        if self.int_type not in VALID_INT_TYPES:
            raise ConfigError(f"Invalid int_type: {self.int_type}")

        if self.float_type not in VALID_FLOAT_TYPES:
            raise ConfigError(f"Invalid float_type: {self.float_type}")

        if self.unknown_type not in VALID_UNKNOWN_TYPES:
            raise ConfigError(f"Invalid unknown_type: {self.unknown_type}")


def format_go_imports(imports: Iterable[str], indent: str = "\t") -> str:
    """Format import statements for Go."""
    quoted: List[str] = sorted(f'"{imp}"' for imp in set(imports))
    if not quoted:
        return ""

    if len(quoted) == 1:
        return f"import {quoted[0]}"

    # Multiple imports
    lines = ["import ("]
    for imp in quoted:
        lines.append(f"{indent}{imp}")
    lines.append(")")

    return "\n".join(lines)


GO_DEFAULTS = {
    "package_name": "main",
    "struct_case": "pascal",
    "field_case": "pascal",
    "use_pointers_for_optional": True,
    "generate_json_tags": True,
    "json_tag_omitempty": True,
    "add_comments": True,
}
