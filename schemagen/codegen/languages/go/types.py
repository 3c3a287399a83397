"""
Go-specific type system for code generation.

Maps intermediate model nodes to Go type syntax with configuration-driven
behavior.
"""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional
from enum import Enum

from ...core.generator import GeneratorError
from ...core.schema import MixedType, ModelNode, TypeTag


class ConflictStrategy(Enum):
    """Strategies for handling mixed types."""

    INTERFACE = "interface"  # Use the configured unknown type
    ANY = "any"  # Use any (Go 1.18+)
    STRICT = "strict"  # Fail with error
    FIRST_TYPE = "first_type"  # Use the first detected type


class TypeConflictError(GeneratorError):
    """Raised in strict mode when a node carries mixed types."""

    pass


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a Go type.

    Carries the syntax plus the imports the syntax relies on.
    """

    name: str  # The Go type name (e.g., "string", "*User")
    base_name: str = field(default="")  # Base name without pointer (e.g., "User")
    is_pointer: bool = field(default=False)
    imports_needed: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Set base_name if not provided."""
        if not self.base_name:
            object.__setattr__(self, "base_name", self.name.lstrip("*"))

    def as_pointer(self) -> "GoType":
        """Return a pointer version of this type."""
        if self.is_pointer:
            return self

        return GoType(
            name=f"*{self.name}",
            base_name=self.base_name,
            is_pointer=True,
            imports_needed=self.imports_needed,
        )

    def as_map_value(self) -> "GoType":
        """Return a string-keyed map with this type as value."""
        return GoType(name=f"map[string]{self.name}", imports_needed=self.imports_needed)


class GoTypeMapper:
    """
    Central engine for mapping model nodes to Go types.

    Type names of referenced models are produced by the name_type callable
    so that naming stays in one place.
    """

    def __init__(self, config, name_type: Callable[[str], str]):
        """
        Args:
            config: GoConfig with type preferences
            name_type: Converts a model id into a Go type name
        """
        self.config = config
        self.name_type = name_type

    @property
    def any_type(self) -> GoType:
        return GoType(name=self.config.unknown_type)

    def map_type(self, node: ModelNode) -> GoType:
        """
        Map a node to a Go type.

        Args:
            node: The node to map

        Returns:
            GoType with imports metadata
        """
        if isinstance(node.type, MixedType):
            return self._handle_type_conflict(node)
        return self.map_tag(node.type, node)

    def map_tag(self, tag: Optional[TypeTag], node: ModelNode) -> GoType:
        """Map one type tag, using the node for nested information."""
        if tag == TypeTag.STRING:
            if node.format == "date-time":
                return GoType(
                    name=self.config.time_type,
                    imports_needed=frozenset({self.config.time_import}),
                )
            return GoType(name=self.config.string_type)
        elif tag == TypeTag.INTEGER:
            return GoType(name=self.config.int_type)
        elif tag == TypeTag.NUMBER:
            return GoType(name=self.config.float_type)
        elif tag == TypeTag.BOOLEAN:
            return GoType(name=self.config.bool_type)
        elif tag == TypeTag.ARRAY:
            return self._map_array_type(node)
        elif tag == TypeTag.TUPLE:
            # Go has no tuples; positional values of any type
            return GoType(name=f"[]{self.config.unknown_type}")
        elif tag == TypeTag.REFERENCE and node.ref:
            return GoType(name=self.name_type(node.ref))
        elif tag == TypeTag.OBJECT and node.id:
            return GoType(name=self.name_type(node.id))

        # Unions, unconstrained values and anything unknown
        return self.any_type

    def _map_array_type(self, node: ModelNode) -> GoType:
        """Map array/slice types."""
        if isinstance(node.items, ModelNode):
            element_type = self.map_type(node.items)
            return GoType(
                name=f"[]{element_type.name}",
                imports_needed=element_type.imports_needed,
            )
        return GoType(name=f"[]{self.config.unknown_type}")

    def _handle_type_conflict(self, node: ModelNode) -> GoType:
        """Handle nodes with mixed types."""
        strategy = self.config.conflict_strategy
        tags = node.type.tags

        if strategy == ConflictStrategy.ANY:
            return GoType(name="any")
        elif strategy == ConflictStrategy.FIRST_TYPE and tags:
            return self.map_tag(tags[0], node)
        elif strategy == ConflictStrategy.STRICT:
            raise TypeConflictError(
                f"Strict mode: cannot resolve mixed types "
                f"{[t.value for t in tags]} of model {node.id!r}"
            )

        return self.any_type
