"""
Go code generator module.

Renders Go structs with JSON tags and Go enums from the intermediate
model, with preset hooks for overriding any rendering decision.
"""

from .config import GoConfig, format_go_imports
from .generator import GoGenerator, create_go_generator
from .naming import create_go_sanitizer
from .presets import GO_DEFAULT_ENUM_PRESET, GO_DEFAULT_STRUCT_PRESET
from .renderers import EnumRenderer, GoRenderer, StructRenderer
from .types import ConflictStrategy, GoType, GoTypeMapper, TypeConflictError

__all__ = [
    "GoGenerator",
    "GoConfig",
    "GoRenderer",
    "StructRenderer",
    "EnumRenderer",
    "GoType",
    "GoTypeMapper",
    "ConflictStrategy",
    "TypeConflictError",
    "GO_DEFAULT_STRUCT_PRESET",
    "GO_DEFAULT_ENUM_PRESET",
    "create_go_generator",
    "create_go_sanitizer",
    "format_go_imports",
]
