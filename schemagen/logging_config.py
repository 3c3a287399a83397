"""Logging setup for schemagen.

Modules obtain namespaced loggers through get_logger(); the CLI calls
configure_logging() once to attach a rich console handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "schemagen"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package root logger.

    Args:
        name: Usually the calling module's __name__.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "WARNING", use_rich: bool = True) -> None:
    """Attach a handler to the package root logger.

    Calling it again only changes the level.

    Args:
        level: Logging level name or number.
        use_rich: Render records with rich; plain stderr formatting otherwise.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    root.setLevel(level)

    if _configured:
        return

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root.addHandler(handler)
    root.propagate = False
    _configured = True
