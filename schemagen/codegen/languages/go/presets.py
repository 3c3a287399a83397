"""
Default Go presets.

These always sit at the bottom of the preset stack. Caller presets
receive their output as content.
"""

from ...core.presets import HookContext, HookName


def _struct_self(context: HookContext) -> str:
    return context.renderer.default_self(context.content)


def _struct_field(context: HookContext) -> str:
    return context.renderer.default_field(
        context.field_name, context.field, context.field_kind
    )


def _enum_self(context: HookContext) -> str:
    return context.renderer.default_self(context.content)


GO_DEFAULT_STRUCT_PRESET = {
    HookName.SELF: _struct_self,
    HookName.FIELD: _struct_field,
}

GO_DEFAULT_ENUM_PRESET = {
    HookName.SELF: _enum_self,
}
