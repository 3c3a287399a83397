from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    BatchRenderError,
    GeneratorError,
    get_generator,
    list_supported_languages,
    load_config,
)
from .codegen.core.config import ConfigError, get_config_manager
from .codegen.core.naming import NameSanitizer, NamingCase
from .codegen.core.processor import ProcessorError, process_document
from .codegen.registry import RegistryError, get_registry
from .logging_config import configure_logging, get_logger
from .utils import DocumentLoaderError, load_document

logger = get_logger(__name__)


class CLIHandler:
    """Handle command-line code generation from a schema document."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        logger.debug("CLIHandler initialized")

    def run(self, args: argparse.Namespace) -> int:
        """Run generation for parsed arguments.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        if args.list_languages:
            return self._list_languages()

        if not args.input and not args.url:
            self.console.print("❌ [red]An input file or --url is required[/red]")
            return 1

        try:
            source, document = load_document(file_path=args.input, url=args.url)
            config = self._build_config(args)
            generator = get_generator(args.language, config)
            input_model = process_document(document, root_name=args.root_name)
        except (
            DocumentLoaderError,
            FileNotFoundError,
            ConfigError,
            RegistryError,
            ProcessorError,
        ) as e:
            self.console.print(f"❌ [red]{e}[/red]")
            logger.error("Generation setup failed: %s", e)
            return 1

        self.console.print(f"📄 Loaded: {source} ({len(input_model)} models)")
        for warning in get_config_manager().validate_config(config, args.language):
            self.console.print(f"⚠️  [yellow]{warning}[/yellow]")

        exit_code = 0
        try:
            results = asyncio.run(
                generator.generate_complete_models(
                    input_model, {"package_name": config.package_name}
                )
            )
        except BatchRenderError as e:
            results = e.results
            for name, error in e.errors.items():
                self.console.print(f"❌ [red]{name}: {error}[/red]")
            exit_code = 1
        except GeneratorError as e:
            self.console.print(f"❌ [red]{e}[/red]")
            logger.error("Generation failed: %s", e)
            return 1

        self._output(results, generator.file_extension, args)
        if args.verbose:
            self._show_summary(results)
        return exit_code

    def _build_config(self, args: argparse.Namespace):
        overrides: dict[str, Any] = {}
        if args.package_name:
            overrides["package_name"] = args.package_name
        if args.no_comments:
            overrides["add_comments"] = False
        if args.no_pointers:
            overrides["use_pointers_for_optional"] = False
        if args.no_json_tags:
            overrides["generate_json_tags"] = False
        return load_config(args.language, custom_config=overrides, config_file=args.config)

    def _output(self, results, extension: str, args: argparse.Namespace) -> None:
        if args.output_dir:
            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            for result in results:
                file_name = _snake(result.model_name) + extension
                path = output_dir / file_name
                path.write_text(result.text + "\n", encoding="utf-8")
                logger.info("Wrote %s", path)
            self.console.print(
                f"✅ [green]Wrote {len(results)} file(s) to {output_dir}[/green]"
            )
            return

        for result in results:
            self.console.print(Syntax(result.text, args.language, theme="monokai"))

    def _show_summary(self, results) -> None:
        table = Table(title="Generated models")
        table.add_column("Model")
        table.add_column("Dependencies")
        for result in results:
            table.add_row(result.model_name or "-", ", ".join(result.dependencies) or "-")
        self.console.print(table)

    def _list_languages(self) -> int:
        registry = get_registry()
        table = Table(title="Supported languages")
        table.add_column("Language")
        table.add_column("Aliases")
        for language in list_supported_languages():
            aliases = ", ".join(registry.get_aliases_for_language(language)) or "-"
            table.add_row(language, aliases)
        self.console.print(table)
        return 0


def _snake(name: str | None) -> str:
    return NameSanitizer().sanitize_name(name or "model", NamingCase.SNAKE_CASE)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the schemagen command."""
    parser = argparse.ArgumentParser(
        prog="schemagen",
        description="Generate Go models from JSON Schema or AsyncAPI documents",
    )
    parser.add_argument("input", nargs="?", help="Path to a JSON schema document")
    parser.add_argument("--url", help="Fetch the schema document from a URL")
    parser.add_argument(
        "--language", "-l", default="go", help="Target language (default: go)"
    )
    parser.add_argument("--package-name", metavar="NAME", help="Package for generated files")
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "--output-dir", "-o", metavar="DIR", help="Write one file per model to DIR"
    )
    parser.add_argument(
        "--root-name",
        default="Root",
        help="Name for a root schema without $id (default: Root)",
    )
    parser.add_argument("--no-comments", action="store_true", help="Omit doc comments")
    parser.add_argument(
        "--no-pointers", action="store_true", help="Don't use pointers for optional fields"
    )
    parser.add_argument("--no-json-tags", action="store_true", help="Omit JSON struct tags")
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages and exit"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show a summary table")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return CLIHandler().run(args)


if __name__ == "__main__":
    sys.exit(main())
