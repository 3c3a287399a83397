"""
Code generation from schema documents.

Turns the intermediate model into Go declarations through composable
presets.
"""

from .core.generator import (
    BatchRenderError,
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    RenderResult,
    generate_code,
)
from .core.presets import FieldKind, HookContext, HookName, Preset
from .core.processor import process_document
from .core.schema import InputModel, ModelKind, ModelNode, TypeTag
from .core.config import GeneratorConfig, ConfigManager, load_config
from .registry import (
    GeneratorRegistry,
    get_generator,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from .languages.go import GoConfig, GoGenerator


def generate_from_document(document, language="go", config=None, package_name=None):
    """
    Generate complete source files from a schema document.

    Args:
        document: JSON Schema or AsyncAPI document (dict)
        language: Target language name
        config: Generator configuration dict, path or config object
        package_name: Package for the generated files

    Returns:
        GenerationResult with the generated code
    """
    generator = get_generator(language, config)
    options = {"package_name": package_name} if package_name else None
    return generate_code(generator, document, options)


__all__ = [
    "GeneratorRegistry",
    "CodeGenerator",
    "GoGenerator",
    "GoConfig",
    "GenerationResult",
    "RenderResult",
    "GeneratorError",
    "BatchRenderError",
    "Preset",
    "HookName",
    "HookContext",
    "FieldKind",
    "InputModel",
    "ModelNode",
    "ModelKind",
    "TypeTag",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "process_document",
    "generate_code",
    "generate_from_document",
    "get_generator",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
]
