"""
Convert schema documents into the intermediate model.

Accepts JSON Schema documents and AsyncAPI documents given as dicts.
Objects and enums found anywhere in the tree are split out into their
own named models; the places that use them hold reference nodes.
"""

from typing import Any, Dict, Iterable, Set

from ...logging_config import get_logger
from .schema import InputModel, MixedType, ModelNode, TypeTag

logger = get_logger(__name__)


class ProcessorError(Exception):
    """Exception raised for documents that cannot be processed."""

    pass


_JSON_TYPES = {
    "string": TypeTag.STRING,
    "number": TypeTag.NUMBER,
    "integer": TypeTag.INTEGER,
    "boolean": TypeTag.BOOLEAN,
    "object": TypeTag.OBJECT,
    "array": TypeTag.ARRAY,
    "null": TypeTag.UNCONSTRAINED,
}

_MESSAGE_OPERATIONS = ("publish", "subscribe")


def value_type_tag(value: Any) -> TypeTag:
    """Type tag of a literal JSON value."""
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, int):
        return TypeTag.INTEGER
    if isinstance(value, float):
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.STRING
    if isinstance(value, dict):
        return TypeTag.OBJECT
    if isinstance(value, list):
        return TypeTag.ARRAY
    return TypeTag.UNCONSTRAINED


def enum_value_type(values: Iterable[Any]):
    """Type of an enum without a declared type, inferred from its values."""
    tags = [value_type_tag(value) for value in values]
    # Integers and fractions are all JSON numbers
    if TypeTag.NUMBER in tags:
        tags = [TypeTag.NUMBER if tag == TypeTag.INTEGER else tag for tag in tags]
    return MixedType.of(tags)


class DocumentProcessor:
    """Walks one document and fills an InputModel."""

    def __init__(self, document: Dict[str, Any], implicit_additional_properties: bool = True):
        self.document = document
        self.implicit_additional_properties = implicit_additional_properties
        self.input_model = InputModel(original_input=document)
        self._refs: Dict[str, str] = {}
        # Pointers to non-model schemas currently being inlined
        self._inlining: Set[str] = set()

    def process(self, root_name: str = "Root") -> InputModel:
        if "asyncapi" in self.document:
            self._process_asyncapi()
        else:
            root = self.document.get("$id") or root_name
            self._refs["#"] = root
            self._register(self.document, root)
        return self.input_model

    def _process_asyncapi(self):
        channels = self.document.get("channels") or {}
        for channel_name, channel in channels.items():
            for operation in _MESSAGE_OPERATIONS:
                message = (channel.get(operation) or {}).get("message") or {}
                message = self._dereference(message)
                payload = message.get("payload")
                if payload is None:
                    continue
                name = f"{channel_name}_{operation}_payload"
                self._convert(payload, name, split=True)

        schemas = (self.document.get("components") or {}).get("schemas") or {}
        for schema_name in schemas:
            self._convert({"$ref": f"#/components/schemas/{schema_name}"}, schema_name)

    def _resolve_pointer(self, pointer: str) -> Any:
        if not pointer.startswith("#"):
            raise ProcessorError(f"Only local references are supported: {pointer}")

        target = self.document
        for part in pointer[1:].split("/"):
            if not part:
                continue
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(target, dict) and part in target:
                target = target[part]
            elif isinstance(target, list) and part.isdigit() and int(part) < len(target):
                target = target[int(part)]
            else:
                raise ProcessorError(f"Unresolved reference: {pointer}")
        return target

    def _dereference(self, schema: Any) -> Any:
        seen = set()
        while isinstance(schema, dict) and "$ref" in schema:
            pointer = schema["$ref"]
            if pointer in seen:
                raise ProcessorError(f"Circular reference: {pointer}")
            seen.add(pointer)
            schema = self._resolve_pointer(pointer)
        return schema

    def _unique_name(self, name: str) -> str:
        if name not in self.input_model:
            return name
        counter = 2
        while f"{name}_{counter}" in self.input_model:
            counter += 1
        logger.warning("Model id %s already used, renamed to %s_%d", name, name, counter)
        return f"{name}_{counter}"

    def _register(self, schema: Dict[str, Any], name: str) -> ModelNode:
        """Add a model to the index before descending so parents come first."""
        node = ModelNode(id=self._unique_name(name))
        self.input_model.add(node)
        logger.debug("Registered model %s", node.id)
        self._fill(node, schema, node.id)
        return node

    def _reference_to(self, model_id: str) -> ModelNode:
        return ModelNode(type=TypeTag.REFERENCE, ref=model_id)

    def _convert(self, schema: Any, context_name: str, split: bool = True) -> ModelNode:
        """
        Convert a schema used at some position of the tree.

        Args:
            schema: Schema dict or boolean schema
            context_name: Name to use when the schema must become a model
            split: Whether objects and enums become their own models
        """
        if isinstance(schema, bool) or schema is None:
            return ModelNode(type=TypeTag.UNCONSTRAINED)
        if not isinstance(schema, dict):
            raise ProcessorError(f"Invalid schema at {context_name}: {schema!r}")

        if "$ref" in schema:
            pointer = schema["$ref"]
            if pointer in self._refs:
                return self._reference_to(self._refs[pointer])

            target = self._resolve_pointer(pointer)
            if not self._is_model(target):
                if pointer in self._inlining:
                    logger.warning("Recursive reference %s inlined as unconstrained", pointer)
                    return ModelNode(type=TypeTag.UNCONSTRAINED)
                self._inlining.add(pointer)
                try:
                    return self._convert(target, context_name, split=False)
                finally:
                    self._inlining.discard(pointer)

            name = self._unique_name(target.get("$id") or pointer.rstrip("/").split("/")[-1])
            self._refs[pointer] = name
            self._register(target, name)
            return self._reference_to(name)

        if split and self._is_model(schema):
            node = self._register(schema, schema.get("$id") or context_name)
            return self._reference_to(node.id)

        node = ModelNode(id=schema.get("$id"))
        self._fill(node, schema, node.id or context_name)
        return node

    def _is_model(self, schema: Any) -> bool:
        if not isinstance(schema, dict):
            return False
        if "enum" in schema:
            return True
        return self._schema_type(schema) == TypeTag.OBJECT

    def _schema_type(self, schema: Dict[str, Any]):
        declared = schema.get("type")
        if isinstance(declared, list):
            tags = [_JSON_TYPES.get(t, TypeTag.UNCONSTRAINED) for t in declared if t != "null"]
            if not tags:
                return TypeTag.UNCONSTRAINED
            return MixedType.of(tags)
        if declared is not None:
            return _JSON_TYPES.get(declared, TypeTag.UNCONSTRAINED)
        if any(key in schema for key in ("properties", "additionalProperties", "patternProperties")):
            return TypeTag.OBJECT
        if "items" in schema:
            return TypeTag.ARRAY
        return None

    def _fill(self, node: ModelNode, schema: Dict[str, Any], name: str):
        node.description = schema.get("description")
        node.format = schema.get("format")
        node.type = self._schema_type(schema)

        if "enum" in schema:
            node.enum = list(schema["enum"])
            if node.type is None and node.enum:
                node.type = enum_value_type(node.enum)
            return

        for key in ("oneOf", "anyOf"):
            if key in schema:
                node.type = TypeTag.UNION
                node.union = [
                    self._convert(member, f"{name}_{key}_{index}")
                    for index, member in enumerate(schema[key])
                ]
                return

        if node.type == TypeTag.ARRAY:
            items = schema.get("items")
            if isinstance(items, list):
                node.type = TypeTag.TUPLE
                node.items = [
                    self._convert(item, f"{name}_item_{index}")
                    for index, item in enumerate(items)
                ]
            elif items is not None:
                node.items = self._convert(items, f"{name}_item")
            return

        if node.type == TypeTag.OBJECT:
            self._fill_object(node, schema, name)
        elif node.type is None:
            node.type = TypeTag.UNCONSTRAINED

    def _fill_object(self, node: ModelNode, schema: Dict[str, Any], name: str):
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            node.properties[prop_name] = self._convert(prop_schema, f"{name}_{prop_name}")

        node.required = set(schema.get("required") or [])

        additional = schema.get("additionalProperties")
        if additional is None:
            if self.implicit_additional_properties:
                node.additional_properties = ModelNode(type=TypeTag.UNCONSTRAINED)
        elif additional is not False:
            node.additional_properties = self._convert(
                additional, f"{name}_additional_properties"
            )

        for pattern, pattern_schema in (schema.get("patternProperties") or {}).items():
            node.pattern_properties[pattern] = self._convert(
                pattern_schema, f"{name}_pattern_properties"
            )


def process_document(
    document: Any,
    root_name: str = "Root",
    implicit_additional_properties: bool = True,
) -> InputModel:
    """
    Convert a JSON Schema or AsyncAPI document into an InputModel.

    Args:
        document: Parsed document (dict)
        root_name: Name for a JSON Schema root without $id
        implicit_additional_properties: Treat a missing additionalProperties
            keyword as "any value allowed"

    Returns:
        InputModel indexing every named model in discovery order
    """
    if not isinstance(document, dict):
        raise ProcessorError(f"Expected a schema object, got {type(document).__name__}")

    processor = DocumentProcessor(document, implicit_additional_properties)
    input_model = processor.process(root_name)
    logger.info("Processed document into %d model(s)", len(input_model))
    return input_model
