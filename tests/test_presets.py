"""Tests for the preset composition engine."""

import asyncio

import pytest

from schemagen.codegen.core.generator import HookFailureError, UnnameableModelError
from schemagen.codegen.core.presets import (
    HookContext,
    HookName,
    Preset,
    PresetError,
    PresetStack,
)
from schemagen.codegen.core.schema import InputModel, ModelKind, ModelNode, TypeTag
from schemagen.codegen.languages.go import GoGenerator


def _context(model_id="Model"):
    return HookContext(
        renderer=None,
        model=ModelNode(id=model_id, type=TypeTag.OBJECT),
        input_model=InputModel(),
    )


def _append(text):
    return lambda context: context.content + text


class TestHookNames:

    def test_parse_accepts_values_and_member_names(self):
        assert HookName.parse("self") is HookName.SELF
        assert HookName.parse("additionalContent") is HookName.ADDITIONAL_CONTENT
        assert HookName.parse("additional_content") is HookName.ADDITIONAL_CONTENT
        assert HookName.parse(HookName.FIELD) is HookName.FIELD

    def test_unknown_hook(self):
        with pytest.raises(PresetError):
            Preset(struct={"render": _append("x")})

    def test_field_hook_not_available_for_enums(self):
        with pytest.raises(PresetError):
            Preset(enum={"field": _append("x")})

    def test_hook_must_be_callable(self):
        with pytest.raises(PresetError):
            Preset(struct={"self": "not callable"})

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(PresetError):
            Preset.from_mapping({"union": {}})

    def test_preset_hooks_are_read_only(self):
        preset = Preset(struct={"self": _append("x")})
        with pytest.raises(TypeError):
            preset.struct[HookName.FIELD] = _append("y")


class TestPresetStack:

    async def test_stages_run_in_order(self):
        stack = PresetStack(
            ModelKind.STRUCT,
            {HookName.SELF: _append("default")},
            [Preset(struct={"self": _append("A")}), Preset(struct={"self": _append("B")})],
        )
        assert len(stack) == 3

        result = await stack.run(HookName.SELF, _context(), "seed:")
        assert result == "seed:defaultAB"

    async def test_presets_without_the_hook_are_skipped(self):
        stack = PresetStack(
            ModelKind.STRUCT,
            {HookName.SELF: _append("default")},
            [Preset(enum={"self": _append("enum")}), {"struct": {"self": _append("!")}}],
        )

        assert await stack.run(HookName.SELF, _context()) == "default!"

    async def test_hook_missing_everywhere_returns_seed(self):
        stack = PresetStack(ModelKind.STRUCT, {})
        assert await stack.run(HookName.ADDITIONAL_CONTENT, _context(), "seed") == "seed"

    async def test_async_hooks_are_awaited(self):
        async def slow(context):
            await asyncio.sleep(0)
            return context.content + " async"

        stack = PresetStack(
            ModelKind.ENUM, {HookName.SELF: _append("sync")}, [Preset(enum={"self": slow})]
        )

        assert await stack.run(HookName.SELF, _context()) == "sync async"

    async def test_none_result_is_empty_text(self):
        stack = PresetStack(
            ModelKind.STRUCT,
            {HookName.SELF: _append("default")},
            [Preset(struct={"self": lambda context: None})],
        )

        assert await stack.run(HookName.SELF, _context()) == ""

    async def test_options_belong_to_their_preset(self):
        seen = []

        def record(context):
            seen.append(context.options)
            return context.content

        stack = PresetStack(
            ModelKind.STRUCT,
            {HookName.SELF: record},
            [
                Preset(struct={"self": record}, options={"suffix": "X"}),
                Preset(struct={"self": record}),
            ],
        )
        await stack.run(HookName.SELF, _context())

        assert seen == [None, {"suffix": "X"}, None]

    async def test_raising_hook_is_wrapped(self):
        def broken(context):
            raise ValueError("boom")

        stack = PresetStack(ModelKind.STRUCT, {HookName.SELF: broken})

        with pytest.raises(HookFailureError) as exc_info:
            await stack.run(HookName.SELF, _context("Broken"))

        assert exc_info.value.hook == "self"
        assert exc_info.value.model_id == "Broken"
        assert isinstance(exc_info.value.__cause__, ValueError)

    async def test_non_text_result_is_a_failure(self):
        stack = PresetStack(ModelKind.STRUCT, {HookName.SELF: lambda context: 42})

        with pytest.raises(HookFailureError):
            await stack.run(HookName.SELF, _context())

    async def test_generator_errors_pass_through(self):
        def unnameable(context):
            raise UnnameableModelError(context.model.id)

        stack = PresetStack(ModelKind.STRUCT, {HookName.SELF: unnameable})

        with pytest.raises(UnnameableModelError):
            await stack.run(HookName.SELF, _context())


class TestPresetsThroughGenerator:

    def _model(self):
        return ModelNode(
            id="Address",
            type=TypeTag.OBJECT,
            properties={"street": ModelNode(type=TypeTag.STRING)},
            required={"street"},
        )

    async def test_override_struct(self):
        generator = GoGenerator(presets=[Preset(struct={"self": lambda context: "C"})])
        result = await generator.render(self._model(), InputModel())

        assert result.text == "C"

    async def test_later_preset_sees_earlier_output(self):
        generator = GoGenerator(
            presets=[
                Preset(struct={"self": lambda context: "A"}),
                Preset(struct={"self": lambda context: context.content + "B"}),
            ]
        )
        result = await generator.render(self._model(), InputModel())

        assert result.text == "AB"

    async def test_configured_presets_run_before_constructor_presets(self):
        generator = GoGenerator(
            {"presets": [{"struct": {"self": lambda context: "config"}}]},
            presets=[Preset(struct={"self": lambda context: context.content + "+call"})],
        )
        result = await generator.render(self._model(), InputModel())

        assert result.text == "config+call"

    async def test_dependencies_are_deduplicated_in_order(self):
        def self_hook(context):
            context.renderer.add_dependency("time")
            context.renderer.add_dependency("fmt")
            context.renderer.add_dependency("time")
            return context.content

        generator = GoGenerator(presets=[Preset(struct={"self": self_hook})])
        result = await generator.render(self._model(), InputModel())

        assert result.dependencies == ("time", "fmt")

    async def test_renders_are_independent(self):
        calls = []

        def self_hook(context):
            if not calls:
                context.renderer.add_dependency("time")
            calls.append(context.model.id)
            return context.content

        generator = GoGenerator(presets=[Preset(struct={"self": self_hook})])
        first = await generator.render(self._model(), InputModel())
        second = await generator.render(self._model(), InputModel())

        assert first.dependencies == ("time",)
        assert second.dependencies == ()
        assert first.text == second.text

    async def test_hook_failure_names_the_model(self):
        def broken(context):
            raise RuntimeError("nope")

        generator = GoGenerator(presets=[Preset(struct={"field": broken})])

        with pytest.raises(HookFailureError) as exc_info:
            await generator.render(self._model(), InputModel())

        assert exc_info.value.hook == "field"
        assert exc_info.value.model_id == "Address"
