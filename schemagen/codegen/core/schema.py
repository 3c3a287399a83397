"""
Intermediate model representation for code generation.

The input processor turns schema documents into a tree of ModelNode
objects, indexed by identifier in an InputModel. Renderers only read
these structures.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Union
from enum import Enum


class TypeTag(Enum):
    """Abstract type classification of a model node."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    TUPLE = "tuple"
    UNION = "union"
    REFERENCE = "reference"
    UNCONSTRAINED = "unconstrained"


@dataclass(frozen=True)
class MixedType:
    """A node whose values may be any of several type tags."""

    tags: Tuple[TypeTag, ...]

    def __post_init__(self):
        # Keep first-seen order, drop duplicates
        unique = tuple(dict.fromkeys(self.tags))
        object.__setattr__(self, "tags", unique)

    @classmethod
    def of(cls, tags: Iterable[TypeTag]) -> Union["MixedType", TypeTag]:
        """Collapse to a single tag when only one distinct tag is given."""
        mixed = cls(tuple(tags))
        if len(mixed.tags) == 1:
            return mixed.tags[0]
        return mixed


NodeType = Union[TypeTag, MixedType, None]


class ModelKind(Enum):
    """How a model node is rendered."""

    STRUCT = "struct"
    ENUM = "enum"
    OTHER = "other"

    @classmethod
    def of(cls, node: "ModelNode") -> "ModelKind":
        # An enum list wins over object shape, even when empty
        if node.enum is not None:
            return cls.ENUM
        if node.type == TypeTag.OBJECT:
            return cls.STRUCT
        return cls.OTHER


@dataclass
class ModelNode:
    """Represents one declared or anonymous type of the input."""

    id: Optional[str] = None
    type: NodeType = None
    properties: Dict[str, "ModelNode"] = field(default_factory=dict)
    required: Set[str] = field(default_factory=set)
    additional_properties: Optional["ModelNode"] = None
    pattern_properties: Dict[str, "ModelNode"] = field(default_factory=dict)
    enum: Optional[List[Any]] = None

    # Arrays carry one node, tuples a list of positional nodes
    items: Union["ModelNode", List["ModelNode"], None] = None
    union: List["ModelNode"] = field(default_factory=list)

    # Target model id when type is REFERENCE
    ref: Optional[str] = None

    format: Optional[str] = None
    description: Optional[str] = None

    def is_required(self, name: str) -> bool:
        """Check whether a property is listed as required."""
        return name in self.required

    @property
    def kind(self) -> ModelKind:
        return ModelKind.of(self)

    @property
    def is_mixed(self) -> bool:
        return isinstance(self.type, MixedType)


@dataclass
class InputModel:
    """Index of all declared models of one processed document."""

    models: Dict[str, ModelNode] = field(default_factory=dict)
    original_input: Any = None

    def get(self, model_id: str) -> Optional[ModelNode]:
        """Look up a model by identifier."""
        return self.models.get(model_id)

    def add(self, node: ModelNode) -> None:
        """Register a named model, keeping discovery order."""
        if not node.id:
            raise ValueError("Only named models can be registered")
        self.models[node.id] = node

    def __contains__(self, model_id: str) -> bool:
        return model_id in self.models

    def __len__(self) -> int:
        return len(self.models)
