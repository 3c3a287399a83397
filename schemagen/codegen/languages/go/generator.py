"""
Go code generator implementation.

Renders Go structs with JSON tags and Go enums (named type plus const
block) from the intermediate model, through composable presets.
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ....logging_config import get_logger
from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator, RenderResult, UnsupportedModelKindError
from ...core.naming import NamingCase
from ...core.presets import PresetStack
from ...core.schema import InputModel, ModelKind, ModelNode
from .config import GoConfig, format_go_imports
from .naming import create_go_sanitizer
from .presets import GO_DEFAULT_ENUM_PRESET, GO_DEFAULT_STRUCT_PRESET
from .renderers import EnumRenderer, StructRenderer
from .types import GoTypeMapper

logger = get_logger(__name__)


def _hex(text: str) -> str:
    return str(text).encode("utf-8").hex()


def _as_go_config(config: Union[GeneratorConfig, Dict[str, Any], None]) -> GoConfig:
    if config is None:
        return load_config("go")
    if isinstance(config, GoConfig):
        return config
    if isinstance(config, GeneratorConfig):
        return GoConfig(**{f.name: getattr(config, f.name) for f in fields(GeneratorConfig)})
    if isinstance(config, Mapping):
        return load_config("go", custom_config=dict(config))
    raise TypeError(f"Invalid config type: {type(config)}")


class GoGenerator(CodeGenerator):
    """Code generator for Go structs and enums."""

    def __init__(
        self,
        config: Union[GeneratorConfig, Dict[str, Any], None] = None,
        presets=(),
    ):
        """
        Initialize Go generator.

        Args:
            config: GoConfig, base GeneratorConfig or dict of overrides
            presets: Extra presets appended after the configured ones
        """
        config = _as_go_config(config)
        if presets:
            config = config.with_presets(*presets)
        super().__init__(config)

        self.sanitizer = create_go_sanitizer()
        self.type_mapper = GoTypeMapper(config, self.name_type)
        self.struct_presets = PresetStack(
            ModelKind.STRUCT, GO_DEFAULT_STRUCT_PRESET, config.presets
        )
        self.enum_presets = PresetStack(ModelKind.ENUM, GO_DEFAULT_ENUM_PRESET, config.presets)
        logger.debug("GoGenerator initialized with %d preset(s)", len(config.presets))

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    # Naming and type services

    def name_type(self, identifier: str) -> str:
        """Go type name for a model identifier."""
        return self.sanitizer.sanitize_name(identifier, NamingCase(self.config.struct_case))

    def name_field(self, field_name: str, field: Optional[ModelNode] = None) -> str:
        """Go field name for a property name."""
        case = NamingCase(self.config.field_case)
        name = self.sanitizer.sanitize_name(field_name, case)
        if not name:
            # Names without letters or digits are spelled out from their bytes
            name = self.sanitizer.sanitize_name(f"field {_hex(field_name)}", case)
        return name

    def name_enum_key(self, value: Any) -> str:
        """Constant name suffix for an enum value."""
        if isinstance(value, str):
            text = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            text = json.dumps(value).replace("-", " minus ").replace(".", " dot ")
        else:
            text = json.dumps(value, sort_keys=True)
        if not text:
            return "Empty"
        return self.sanitizer.sanitize_key(text) or self.sanitizer.sanitize_key(
            f"value {_hex(text)}"
        )

    def render_type(self, node: ModelNode) -> str:
        """Go type syntax for a node."""
        return self.type_mapper.map_type(node).name

    # Rendering

    async def render_struct(self, model: ModelNode, input_model: InputModel) -> RenderResult:
        """Render a model as a Go struct."""
        return await StructRenderer(self, self.struct_presets, model, input_model).render()

    async def render_enum(self, model: ModelNode, input_model: InputModel) -> RenderResult:
        """Render a model as a Go enum."""
        return await EnumRenderer(self, self.enum_presets, model, input_model).render()

    async def render(self, model: ModelNode, input_model: InputModel) -> RenderResult:
        """Render a model with the renderer matching its kind."""
        kind = ModelKind.of(model)
        if kind == ModelKind.STRUCT:
            return await self.render_struct(model, input_model)
        if kind == ModelKind.ENUM:
            return await self.render_enum(model, input_model)
        raise UnsupportedModelKindError(model.id)

    async def render_complete_model(
        self, model: ModelNode, input_model: InputModel, options: Mapping[str, Any]
    ) -> RenderResult:
        """Render a model as a Go file with package clause and imports."""
        output = await self.render(model, input_model)
        imports = format_go_imports(output.dependencies, self.config.indent)
        text = self.render_template(
            "file.go.j2",
            {
                "package_name": options["package_name"],
                "imports": imports,
                "body": output.text,
            },
        )
        return RenderResult(
            text=text, dependencies=output.dependencies, model_name=output.model_name
        )


def create_go_generator(config: Optional[Dict[str, Any]] = None, presets=()) -> GoGenerator:
    """Create a Go generator with default configuration."""
    return GoGenerator(load_config("go", custom_config=config), presets=presets)
