"""
Base renderer shared by all model renderers.

A renderer is created for a single render call. It owns the dependency
collector of that call and is what hooks receive as context.renderer.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable

from .generator import DependencyCollector, RenderResult
from .presets import HookContext, HookName, PresetStack
from .schema import InputModel, ModelNode
from .templates import comment_lines, indent_lines


class Renderer(ABC):
    """Renders one model through a preset stack."""

    def __init__(
        self,
        generator: Any,
        presets: PresetStack,
        model: ModelNode,
        input_model: InputModel,
    ):
        self.generator = generator
        self.config = generator.config
        self.presets = presets
        self.model = model
        self.input_model = input_model
        self._dependencies = DependencyCollector()

    def add_dependency(self, dependency: str) -> None:
        """Record an external package the output needs; duplicates collapse."""
        self._dependencies.add(dependency)

    @property
    def dependencies(self) -> tuple:
        return self._dependencies.freeze()

    def indent(self, content: str, levels: int = 1) -> str:
        """Indent every non-blank line by the configured indentation."""
        return indent_lines(content, levels, self.config.indent)

    def render_block(self, lines: Iterable[str], new_lines: int = 1) -> str:
        """Join non-empty parts with the given number of newlines."""
        separator = "\n" * new_lines
        return separator.join(line for line in lines if line)

    def render_comments(self, text: str) -> str:
        return comment_lines(text)

    def context(self, **fields) -> HookContext:
        return HookContext(
            renderer=self, model=self.model, input_model=self.input_model, **fields
        )

    async def run_preset(self, hook: HookName, content: str = "", **fields) -> str:
        """Run a hook through the preset stack for this model."""
        return await self.presets.run(hook, self.context(**fields), content)

    async def run_self_preset(self, content: str = "") -> str:
        return await self.run_preset(HookName.SELF, content)

    def result(self, text: str, model_name: str) -> RenderResult:
        return RenderResult(text=text, dependencies=self.dependencies, model_name=model_name)

    @abstractmethod
    async def render(self) -> RenderResult:
        """Render the model and return the immutable result."""
        pass
