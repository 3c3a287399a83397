"""
Renderers for Go struct and enum declarations.

Every rendering decision goes through the preset stack; the default
presets in presets.py call back into the default_* methods here.
"""

import json
from typing import Any, Dict, List, Tuple

from ...core.generator import (
    EnumConstantCollisionError,
    FieldNameCollisionError,
    RenderResult,
    UnnameableModelError,
)
from ...core.presets import FieldKind, HookName
from ...core.renderer import Renderer
from ...core.schema import ModelNode, TypeTag
from .types import GoType

ADDITIONAL_PROPERTIES_NAME = "additionalProperties"
PATTERN_PROPERTIES_SUFFIX = "PatternProperties"
SCALAR_TAGS = frozenset({TypeTag.STRING, TypeTag.NUMBER, TypeTag.INTEGER, TypeTag.BOOLEAN})


class GoRenderer(Renderer):
    """Common services for Go renderers, reachable from hooks."""

    def name_type(self, identifier: str) -> str:
        return self.generator.name_type(identifier)

    def name_field(self, field_name: str, field: ModelNode = None) -> str:
        return self.generator.name_field(field_name, field)

    def render_type(self, node: ModelNode) -> str:
        """Go type syntax of a node."""
        return self.go_type(node).name

    def go_type(self, node: ModelNode) -> GoType:
        return self.generator.type_mapper.map_type(node)

    def type_name(self) -> str:
        """Go type name of the model being rendered."""
        name = self.name_type(self.model.id) if self.model.id else ""
        if not name:
            raise UnnameableModelError(self.model.id)
        return name


class StructRenderer(GoRenderer):
    """Renderer for Go's `struct` type."""

    def classify_fields(self) -> List[Tuple[str, ModelNode, FieldKind]]:
        """List declared properties followed by the synthetic map fields."""
        entries = [
            (name, node, FieldKind.PROPERTY) for name, node in self.model.properties.items()
        ]
        if self.model.additional_properties is not None:
            entries.append(
                (
                    ADDITIONAL_PROPERTIES_NAME,
                    self.model.additional_properties,
                    FieldKind.ADDITIONAL_PROPERTY,
                )
            )
        for pattern, node in self.model.pattern_properties.items():
            entries.append(
                (f"{pattern}{PATTERN_PROPERTIES_SUFFIX}", node, FieldKind.PATTERN_PROPERTIES)
            )
        return entries

    def _check_collisions(self, entries: List[Tuple[str, ModelNode, FieldKind]]):
        seen: Dict[str, str] = {}
        for field_name, node, _ in entries:
            formatted = self.name_field(field_name, node)
            if formatted in seen:
                raise FieldNameCollisionError(
                    self.model.id, formatted, seen[formatted], field_name
                )
            seen[formatted] = field_name

    async def render_fields(self) -> str:
        entries = self.classify_fields()
        self._check_collisions(entries)

        lines = []
        for field_name, node, kind in entries:
            lines.append(
                await self.run_preset(
                    HookName.FIELD, field_name=field_name, field=node, field_kind=kind
                )
            )
        return self.render_block(lines)

    def render_json_tag(self, field_name: str) -> str:
        """Struct tag carrying the original property name."""
        if not self.config.generate_json_tags:
            return ""
        options = ",omitempty" if self.config.json_tag_omitempty else ""
        return f'`json:"{field_name}{options}"`'

    def default_field(self, field_name: str, field: ModelNode, kind: FieldKind) -> str:
        formatted_name = self.name_field(field_name, field)
        go_type = self.go_type(field)
        for dependency in sorted(go_type.imports_needed):
            self.add_dependency(dependency)

        # Map fields are optional as a whole: no pointer and no tag
        if kind != FieldKind.PROPERTY:
            return f"{formatted_name} {go_type.as_map_value().name}"

        if self.config.use_pointers_for_optional and not self.model.is_required(field_name):
            go_type = go_type.as_pointer()

        line = " ".join(
            part for part in (formatted_name, go_type.name, self.render_json_tag(field_name)) if part
        )
        if self.config.add_comments and field.description:
            return f"{self.render_comments(field.description)}\n{line}"
        return line

    def default_self(self, content: str) -> str:
        name = self.type_name()
        doc = f"{name} represents a {name} model." if self.config.add_comments else ""
        return self.generator.render_template(
            "struct.go.j2", {"doc": doc, "name": name, "body": content}
        )

    async def render(self) -> RenderResult:
        name = self.type_name()
        content = [
            await self.render_fields(),
            await self.run_preset(HookName.ADDITIONAL_CONTENT),
        ]
        body = self.indent(self.render_block(content, 2))
        return self.result(await self.run_self_preset(body), name)


class EnumRenderer(GoRenderer):
    """Renderer for Go enums: a named type plus a const block."""

    def backing_type(self) -> str:
        """Go type every value of the enum shares, or the any type."""
        if self.model.type in SCALAR_TAGS:
            return self.render_type(self.model)
        return self.config.unknown_type

    def constant_values(self) -> List[Any]:
        """Enum values that get a constant; null only fits the any type."""
        values = list(self.model.enum or [])
        if self.backing_type() != self.config.unknown_type:
            values = [value for value in values if value is not None]
        return values

    def constant_names(self, type_name: str) -> List[str]:
        names: Dict[str, Any] = {}
        for value in self.constant_values():
            constant = f"{type_name}{self.generator.name_enum_key(value)}"
            if constant in names:
                raise EnumConstantCollisionError(self.model.id, constant, names[constant], value)
            names[constant] = value
        return list(names)

    def render_literal(self, value: Any) -> str:
        """Go literal for an enum value."""
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return json.dumps(value)
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        # Composite values have no Go constant form; keep their JSON text
        return json.dumps(json.dumps(value, sort_keys=True), ensure_ascii=False)

    def render_constants(self, type_name: str) -> List[str]:
        lines = []
        values = self.constant_values()
        for index, (constant, value) in enumerate(zip(self.constant_names(type_name), values)):
            restate = index == 0 or self.config.enum_type_on_every_constant
            type_declaration = f" {type_name}" if restate else ""
            lines.append(f"{constant}{type_declaration} = {self.render_literal(value)}")
        return lines

    def render_declaration(self, type_name: str) -> str:
        backing = self.backing_type()
        doc = ""
        if self.config.add_comments:
            described = "mixed types" if backing == self.config.unknown_type else backing
            doc = f"{type_name} represents an enum of {described}."
        return self.generator.render_template(
            "enum.go.j2", {"doc": doc, "name": type_name, "backing_type": backing}
        )

    def default_self(self, content: str) -> str:
        if not self.constant_values():
            return content
        type_name = self.type_name()
        constants = [self.indent(line) for line in self.render_constants(type_name)]
        return self.generator.render_template(
            "enum_constants.go.j2", {"content": content, "constants": constants}
        )

    async def render(self) -> RenderResult:
        name = self.type_name()
        self.constant_names(name)
        seed = self.render_declaration(name)
        return self.result(await self.run_self_preset(seed), name)
