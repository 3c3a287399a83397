"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement, the
render result container and the errors a render can fail with.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from pathlib import Path

from ...logging_config import get_logger
from .schema import InputModel, ModelKind, ModelNode
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnnameableModelError(GeneratorError):
    """A model has no identifier a type name can be derived from."""

    def __init__(self, model_id: Optional[str] = None):
        self.model_id = model_id
        super().__init__(f"Cannot derive a type name for model {model_id!r}")


class FieldNameCollisionError(GeneratorError):
    """Two fields of one struct map to the same target identifier."""

    def __init__(self, model_id: str, field_name: str, first: str, second: str):
        self.model_id = model_id
        self.field_name = field_name
        super().__init__(
            f"Fields '{first}' and '{second}' of model '{model_id}' "
            f"both render as '{field_name}'"
        )


class EnumConstantCollisionError(GeneratorError):
    """Two enum values map to the same constant name."""

    def __init__(self, model_id: str, constant_name: str, first: Any, second: Any):
        self.model_id = model_id
        self.constant_name = constant_name
        super().__init__(
            f"Enum values {first!r} and {second!r} of model '{model_id}' "
            f"both render as '{constant_name}'"
        )


class HookFailureError(GeneratorError):
    """A preset hook raised or returned something other than text."""

    def __init__(self, hook: str, model_id: Optional[str], cause: Exception):
        self.hook = hook
        self.model_id = model_id
        self.cause = cause
        super().__init__(f"Hook '{hook}' failed for model '{model_id}': {cause}")


class UnsupportedModelKindError(GeneratorError):
    """A model is neither a struct nor an enum."""

    def __init__(self, model_id: Optional[str]):
        self.model_id = model_id
        super().__init__(f"Model '{model_id}' cannot be rendered as a struct or enum")


class BatchRenderError(GeneratorError):
    """One or more models of a batch failed to render."""

    def __init__(self, results: List["RenderResult"], errors: Dict[str, Exception]):
        self.results = results
        self.errors = errors
        details = "; ".join(f"{name}: {error}" for name, error in errors.items())
        super().__init__(f"{len(errors)} model(s) failed to render: {details}")


@dataclass(frozen=True)
class RenderResult:
    """Text and dependencies produced by rendering one model."""

    text: str
    dependencies: Tuple[str, ...] = ()
    model_name: Optional[str] = None


class DependencyCollector:
    """Per-render record of external packages needed by the output."""

    def __init__(self):
        self._dependencies: Dict[str, None] = {}

    def add(self, dependency: str) -> None:
        self._dependencies.setdefault(dependency, None)

    def freeze(self) -> Tuple[str, ...]:
        return tuple(self._dependencies)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Any = None):
        """Initialize generator with configuration."""
        self.config = config
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    async def process(self, document: Any) -> InputModel:
        """
        Turn a document into the model index.

        Already processed input is passed through unchanged.
        """
        if isinstance(document, InputModel):
            return document

        from .processor import process_document

        return process_document(document)

    @abstractmethod
    async def render(self, model: ModelNode, input_model: InputModel) -> RenderResult:
        """
        Render one model.

        Raises:
            UnsupportedModelKindError: If the model kind has no renderer
        """
        pass

    @abstractmethod
    async def render_complete_model(
        self, model: ModelNode, input_model: InputModel, options: Mapping[str, Any]
    ) -> RenderResult:
        """Render one model wrapped as a standalone source file."""
        pass

    async def generate(self, document: Any) -> List[RenderResult]:
        """
        Render every model of a document.

        Models are rendered concurrently; results keep index order.

        Raises:
            BatchRenderError: If any model failed, carrying the successes
        """
        input_model = await self.process(document)
        return await self._render_all(
            input_model, lambda model: self.render(model, input_model)
        )

    async def generate_complete_models(
        self, document: Any, options: Any = None
    ) -> List[RenderResult]:
        """
        Render every model of a document as a complete source file.

        Args:
            document: Schema document or processed InputModel
            options: Mapping or object providing at least package_name

        Raises:
            BatchRenderError: If any model failed, carrying the successes
        """
        input_model = await self.process(document)
        file_options = self._file_options(options)
        return await self._render_all(
            input_model,
            lambda model: self.render_complete_model(model, input_model, file_options),
        )

    def _file_options(self, options: Any) -> Dict[str, Any]:
        """Normalize per-file options, filling gaps from the configuration."""
        if options is None:
            resolved = {}
        elif isinstance(options, Mapping):
            resolved = dict(options)
        else:
            resolved = {"package_name": getattr(options, "package_name", None)}

        if not resolved.get("package_name"):
            resolved["package_name"] = getattr(self.config, "package_name", None)
        if not resolved.get("package_name"):
            raise GeneratorError("A package name is required for complete models")
        return resolved

    async def _render_all(self, input_model: InputModel, render_one) -> List[RenderResult]:
        names = list(input_model.models)
        outcomes = await asyncio.gather(
            *(render_one(input_model.models[name]) for name in names),
            return_exceptions=True,
        )

        results = []
        errors = {}
        for name, outcome in zip(names, outcomes):
            # Cancellation, interrupts and exits are not render failures
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                logger.error("Failed to render model %s: %s", name, outcome)
                errors[name] = outcome
            else:
                results.append(outcome)

        if errors:
            raise BatchRenderError(results, errors)
        return results

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.results: List[RenderResult] = []
        self.errors: Dict[str, Exception] = {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator, document: Any, options: Any = None
) -> GenerationResult:
    """
    Generate complete models synchronously with error handling.

    Successful models are kept even when others fail; the failures are
    reported through success, error_message and errors.

    Args:
        generator: Code generator instance
        document: Schema document or processed InputModel
        options: Per-file options (package_name)

    Returns:
        GenerationResult with code, warnings, and metadata
    """

    async def run():
        input_model = await generator.process(document)
        try:
            results = await generator.generate_complete_models(input_model, options)
        except BatchRenderError as e:
            return input_model, e.results, e.errors
        return input_model, results, {}

    try:
        input_model, results, errors = asyncio.run(run())
    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)

    code = generator.format_code("\n\n".join(result.text for result in results))
    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "model_count": len(results) + len(errors),
        "models": [result.model_name for result in results],
        "dependencies": sorted(
            {dep for result in results for dep in result.dependencies}
        ),
        "kinds": {
            name: ModelKind.of(model).value for name, model in input_model.models.items()
        },
    }

    result = GenerationResult(code, metadata=metadata)
    result.results = list(results)
    if errors:
        result.success = False
        result.errors = dict(errors)
        result.error_message = "; ".join(f"{name}: {err}" for name, err in errors.items())
        result.warnings.extend(f"Model {name} was not generated" for name in errors)
    return result
