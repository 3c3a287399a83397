"""
Shared fixtures for the schemagen test suite.
"""

import pytest

from schemagen.codegen.core.processor import process_document
from schemagen.codegen.languages.go import GoGenerator


ADDRESS_SCHEMA = {
    "$id": "Address",
    "type": "object",
    "properties": {
        "street_name": {"type": "string"},
        "city": {"type": "string", "description": "City description"},
        "house_number": {"type": "number"},
        "marriage": {"type": "boolean"},
        "members": {"oneOf": [{"type": "string"}, {"type": "number"}]},
        "tuple_type": {"type": "array", "items": [{"type": "string"}, {"type": "number"}]},
        "array_type": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["street_name", "city", "house_number", "array_type"],
    "additionalProperties": {"type": "string"},
    "patternProperties": {"^S(.?*)test&": {"type": "string"}},
}

ASYNCAPI_DOCUMENT = {
    "asyncapi": "2.2.0",
    "info": {"title": "Account Service", "version": "1.0.0"},
    "channels": {
        "emailVerification": {
            "publish": {
                "message": {
                    "payload": {
                        "$id": "email_verification",
                        "type": "object",
                        "properties": {"status": {"$ref": "#/components/schemas/status"}},
                        "required": ["status"],
                    }
                }
            }
        },
        "phoneVerification": {
            "subscribe": {
                "message": {
                    "payload": {
                        "$id": "phone_verification",
                        "type": "object",
                        "properties": {"status": {"$ref": "#/components/schemas/status"}},
                        "required": ["status"],
                        "additionalProperties": False,
                    }
                }
            }
        },
    },
    "components": {
        "schemas": {
            "status": {
                "$id": "status",
                "type": "string",
                "enum": ["pending", "failed", "successful"],
            }
        }
    },
}


@pytest.fixture
def generator():
    """Go generator with default configuration."""
    return GoGenerator()


@pytest.fixture
def address_schema():
    return ADDRESS_SCHEMA


@pytest.fixture
def asyncapi_document():
    return ASYNCAPI_DOCUMENT


def first_model(document):
    """Process a document and return its first model with the index."""
    input_model = process_document(document)
    model = next(iter(input_model.models.values()))
    return model, input_model
