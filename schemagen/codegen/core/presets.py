"""
Preset composition engine.

A preset is a partial mapping of hook name to hook implementation for
one model kind. Hooks are run through a PresetStack: the built-in
default first, then every caller preset in registration order. Each
stage receives the content produced by the stage before it, so the last
stage decides the final output while earlier output stays available to
wrap, extend or discard.
"""

import inspect
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from ...logging_config import get_logger
from .generator import GeneratorError, HookFailureError
from .schema import InputModel, ModelKind, ModelNode

logger = get_logger(__name__)


class PresetError(Exception):
    """Exception raised for malformed presets."""

    pass


class HookName(Enum):
    """Named rendering decision points."""

    SELF = "self"
    FIELD = "field"
    ADDITIONAL_CONTENT = "additionalContent"

    @classmethod
    def parse(cls, name: Union[str, "HookName"]) -> "HookName":
        """Accept enum members, their values or snake_case spellings."""
        if isinstance(name, cls):
            return name
        for member in cls:
            if name in (member.value, member.name.lower()):
                return member
        raise PresetError(f"Unknown hook: {name}")


class FieldKind(Enum):
    """Classification of a struct field."""

    PROPERTY = "property"
    ADDITIONAL_PROPERTY = "additionalProperty"
    PATTERN_PROPERTIES = "patternProperties"


# Hooks each model kind may define
HOOKS_BY_KIND: Dict[ModelKind, frozenset] = {
    ModelKind.STRUCT: frozenset(
        {HookName.SELF, HookName.FIELD, HookName.ADDITIONAL_CONTENT}
    ),
    ModelKind.ENUM: frozenset({HookName.SELF}),
}


@dataclass(frozen=True)
class HookContext:
    """Values handed to a hook for one invocation."""

    renderer: Any
    model: ModelNode
    input_model: InputModel
    content: str = ""
    options: Any = None

    # Field-level hooks only
    field_name: Optional[str] = None
    field: Optional[ModelNode] = None
    field_kind: Optional[FieldKind] = None


Hook = Callable[[HookContext], Union[Optional[str], Awaitable[Optional[str]]]]


def _freeze_hooks(kind: ModelKind, hooks: Optional[Mapping]) -> Mapping[HookName, Hook]:
    """Validate hook names for a kind and return a read-only mapping."""
    frozen = {}
    for name, impl in (hooks or {}).items():
        hook_name = HookName.parse(name)
        if hook_name not in HOOKS_BY_KIND[kind]:
            raise PresetError(
                f"Hook '{hook_name.value}' is not available for {kind.value} models"
            )
        if not callable(impl):
            raise PresetError(f"Hook '{hook_name.value}' must be callable")
        frozen[hook_name] = impl
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class Preset:
    """Caller-supplied overrides of default rendering, per model kind."""

    struct: Mapping[HookName, Hook] = field(default_factory=dict)
    enum: Mapping[HookName, Hook] = field(default_factory=dict)
    options: Any = None

    def __post_init__(self):
        object.__setattr__(self, "struct", _freeze_hooks(ModelKind.STRUCT, self.struct))
        object.__setattr__(self, "enum", _freeze_hooks(ModelKind.ENUM, self.enum))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Preset":
        """Build a preset from a plain dict such as {"struct": {"self": fn}}."""
        unknown = set(data) - {"struct", "enum", "options"}
        if unknown:
            raise PresetError(f"Unknown preset keys: {', '.join(sorted(unknown))}")
        return cls(
            struct=data.get("struct") or {},
            enum=data.get("enum") or {},
            options=data.get("options"),
        )

    def hooks_for(self, kind: ModelKind) -> Mapping[HookName, Hook]:
        if kind == ModelKind.STRUCT:
            return self.struct
        if kind == ModelKind.ENUM:
            return self.enum
        return MappingProxyType({})


def as_preset(value: Union[Preset, Mapping[str, Any]]) -> Preset:
    """Coerce a preset given as a dict."""
    if isinstance(value, Preset):
        return value
    if isinstance(value, Mapping):
        return Preset.from_mapping(value)
    raise PresetError(f"Invalid preset type: {type(value)}")


class PresetStack:
    """Ordered, immutable pipeline of hook implementations for one kind."""

    def __init__(
        self,
        kind: ModelKind,
        default_hooks: Mapping[Union[str, HookName], Hook],
        presets: Sequence[Union[Preset, Mapping[str, Any]]] = (),
    ):
        self.kind = kind
        stages = [(_freeze_hooks(kind, default_hooks), None)]
        for preset in presets:
            preset = as_preset(preset)
            stages.append((preset.hooks_for(kind), preset.options))
        self._stages: Tuple[Tuple[Mapping[HookName, Hook], Any], ...] = tuple(stages)

    def __len__(self) -> int:
        return len(self._stages)

    async def run(self, hook: HookName, context: HookContext, content: str = "") -> str:
        """
        Thread content through every stage defining the hook.

        Args:
            hook: Hook to run
            context: Render context for this invocation
            content: Seed content handed to the first stage

        Returns:
            Output of the last stage defining the hook
        """
        for index, (hooks, options) in enumerate(self._stages):
            impl = hooks.get(hook)
            if impl is None:
                continue

            stage_context = replace(context, content=content, options=options)
            logger.debug(
                "Running %s hook '%s' stage %d for %s",
                self.kind.value,
                hook.value,
                index,
                context.model.id,
            )
            try:
                result = impl(stage_context)
                if inspect.isawaitable(result):
                    result = await result
            except GeneratorError:
                raise
            except Exception as e:
                raise HookFailureError(hook.value, context.model.id, e) from e

            if result is None:
                result = ""
            elif not isinstance(result, str):
                raise HookFailureError(
                    hook.value,
                    context.model.id,
                    TypeError(f"hook returned {type(result).__name__}, expected str"),
                )
            content = result

        return content
