"""Tests for batch generation and complete file output."""

import pytest

from schemagen.codegen import generate_from_document
from schemagen.codegen.core.generator import (
    BatchRenderError,
    GeneratorError,
    UnsupportedModelKindError,
    generate_code,
)
from schemagen.codegen.core.presets import Preset
from schemagen.codegen.core.schema import InputModel, ModelNode, TypeTag
from schemagen.codegen.languages.go import GoGenerator


EXPECTED_EMAIL = (
    "// EmailVerification represents a EmailVerification model.\n"
    "type EmailVerification struct {\n"
    '  Status Status `json:"status,omitempty"`\n'
    "  AdditionalProperties map[string]interface{}\n"
    "}"
)

EXPECTED_STATUS = (
    "// Status represents an enum of string.\n"
    "type Status string\n"
    "\n"
    "const (\n"
    '  StatusPending Status = "pending"\n'
    '  StatusFailed = "failed"\n'
    '  StatusSuccessful = "successful"\n'
    ")"
)

EXPECTED_PHONE = (
    "// PhoneVerification represents a PhoneVerification model.\n"
    "type PhoneVerification struct {\n"
    '  Status Status `json:"status,omitempty"`\n'
    "}"
)


def _time_preset():
    def self_hook(context):
        context.renderer.add_dependency("time")
        return context.content

    return Preset(struct={"self": self_hook})


class TestGenerate:

    async def test_asyncapi_document(self, generator, asyncapi_document):
        results = await generator.generate(asyncapi_document)

        assert [result.model_name for result in results] == [
            "EmailVerification",
            "Status",
            "PhoneVerification",
        ]
        assert [result.text for result in results] == [
            EXPECTED_EMAIL,
            EXPECTED_STATUS,
            EXPECTED_PHONE,
        ]

    async def test_processed_input_is_accepted(self, generator, asyncapi_document):
        input_model = await generator.process(asyncapi_document)
        results = await generator.generate(input_model)

        assert len(results) == 3

    async def test_nested_objects_become_models(self, generator):
        results = await generator.generate(
            {
                "$id": "Order",
                "type": "object",
                "properties": {
                    "customer": {"type": "object", "properties": {"name": {"type": "string"}}},
                    "items": {
                        "type": "array",
                        "items": {"type": "object", "properties": {"sku": {"type": "string"}}},
                    },
                },
                "additionalProperties": False,
            }
        )

        assert [result.model_name for result in results] == [
            "Order",
            "OrderCustomer",
            "OrderItemsItem",
        ]
        order = results[0].text
        assert '  Customer *OrderCustomer `json:"customer,omitempty"`' in order
        assert '  Items *[]OrderItemsItem `json:"items,omitempty"`' in order

    async def test_render_rejects_other_kinds(self, generator):
        with pytest.raises(UnsupportedModelKindError):
            await generator.render(ModelNode(id="Name", type=TypeTag.STRING), InputModel())

    async def test_batch_keeps_successes(self, generator):
        input_model = InputModel()
        input_model.add(ModelNode(id="Good", type=TypeTag.OBJECT))
        input_model.add(ModelNode(id="Bad", type=TypeTag.STRING))

        with pytest.raises(BatchRenderError) as exc_info:
            await generator.generate(input_model)

        error = exc_info.value
        assert [result.model_name for result in error.results] == ["Good"]
        assert list(error.errors) == ["Bad"]
        assert isinstance(error.errors["Bad"], UnsupportedModelKindError)

    async def test_interrupts_are_not_collected(self, generator, monkeypatch):
        class Interrupted(BaseException):
            pass

        original_render = generator.render

        async def render(model, input_model):
            if model.id == "Stop":
                raise Interrupted()
            return await original_render(model, input_model)

        monkeypatch.setattr(generator, "render", render)
        input_model = InputModel()
        input_model.add(ModelNode(id="Good", type=TypeTag.OBJECT))
        input_model.add(ModelNode(id="Stop", type=TypeTag.OBJECT))

        with pytest.raises(Interrupted):
            await generator.generate(input_model)


class TestCompleteModels:

    async def test_package_and_no_imports(self, generator, asyncapi_document):
        results = await generator.generate_complete_models(
            asyncapi_document, {"package_name": "some_package"}
        )

        assert results[1].text == f"package some_package\n\n{EXPECTED_STATUS}"

    async def test_single_import(self, address_schema):
        generator = GoGenerator(presets=[_time_preset()])
        results = await generator.generate_complete_models(
            address_schema, {"package_name": "some_package"}
        )

        assert results[0].text.startswith(
            "package some_package\n\nimport \"time\"\n\n// Address represents a Address model."
        )
        assert results[0].dependencies == ("time",)

    async def test_import_block(self):
        def self_hook(context):
            context.renderer.add_dependency("time")
            context.renderer.add_dependency("fmt")
            return context.content

        generator = GoGenerator(presets=[Preset(struct={"self": self_hook})])
        results = await generator.generate_complete_models(
            {"$id": "Log", "type": "object", "additionalProperties": False},
            {"package_name": "logs"},
        )

        assert results[0].text.startswith(
            'package logs\n\nimport (\n  "fmt"\n  "time"\n)\n\n// Log represents a Log model.'
        )
        assert results[0].dependencies == ("time", "fmt")

    async def test_options_object_with_package_name(self, generator):
        class Options:
            package_name = "models"

        results = await generator.generate_complete_models(
            {"$id": "Empty", "type": "object", "additionalProperties": False}, Options()
        )

        assert results[0].text.startswith("package models\n\n")

    async def test_config_package_name_is_the_fallback(self):
        generator = GoGenerator({"package_name": "fallback"})
        results = await generator.generate_complete_models(
            {"$id": "Empty", "type": "object", "additionalProperties": False}
        )

        assert results[0].text.startswith("package fallback\n\n")

    async def test_missing_package_name(self):
        generator = GoGenerator({"package_name": ""})

        with pytest.raises(GeneratorError):
            await generator.generate_complete_models(
                {"$id": "Empty", "type": "object", "additionalProperties": False}
            )


class TestGenerateCode:

    def test_success(self, generator, asyncapi_document):
        result = generate_code(generator, asyncapi_document, {"package_name": "events"})

        assert result.success
        assert result.code.count("package events") == 3
        assert result.metadata["models"] == [
            "EmailVerification",
            "Status",
            "PhoneVerification",
        ]
        assert result.metadata["kinds"] == {
            "email_verification": "struct",
            "status": "enum",
            "phone_verification": "struct",
        }
        assert result.metadata["file_extension"] == ".go"

    def test_partial_failure_keeps_code(self, generator):
        input_model = InputModel()
        input_model.add(ModelNode(id="Good", type=TypeTag.OBJECT))
        input_model.add(ModelNode(id="Bad", type=TypeTag.STRING))

        result = generate_code(generator, input_model)

        assert not result.success
        assert "type Good struct" in result.code
        assert list(result.errors) == ["Bad"]
        assert result.warnings == ["Model Bad was not generated"]
        assert result.metadata["model_count"] == 2

    def test_invalid_document(self, generator):
        result = generate_code(generator, ["not", "a", "schema"])

        assert not result.success
        assert result.error_message.startswith("Code generation failed")

    def test_generate_from_document(self, address_schema):
        result = generate_from_document(
            address_schema,
            language="golang",
            config={"enum_type_on_every_constant": True},
            package_name="geo",
        )

        assert result.success
        assert result.code.startswith("package geo\n\n// Address represents a Address model.")
        assert result.metadata["dependencies"] == []
