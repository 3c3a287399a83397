"""schemagen - render Go models from JSON Schema and AsyncAPI documents."""

__version__ = "0.1.0"
