"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    BatchRenderError,
    CodeGenerator,
    EnumConstantCollisionError,
    FieldNameCollisionError,
    GenerationResult,
    GeneratorError,
    HookFailureError,
    RenderResult,
    UnnameableModelError,
    UnsupportedModelKindError,
    generate_code,
)
from .schema import InputModel, MixedType, ModelKind, ModelNode, TypeTag
from .processor import ProcessorError, process_document
from .presets import FieldKind, HookContext, HookName, Preset, PresetError, PresetStack
from .renderer import Renderer
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "RenderResult",
    "GenerationResult",
    "generate_code",
    # Errors
    "GeneratorError",
    "UnnameableModelError",
    "FieldNameCollisionError",
    "EnumConstantCollisionError",
    "HookFailureError",
    "UnsupportedModelKindError",
    "BatchRenderError",
    # Intermediate model
    "InputModel",
    "ModelNode",
    "ModelKind",
    "MixedType",
    "TypeTag",
    "process_document",
    "ProcessorError",
    # Presets
    "Preset",
    "PresetStack",
    "PresetError",
    "HookName",
    "HookContext",
    "FieldKind",
    "Renderer",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
