"""Utility functions for loading schema documents.

Documents are JSON objects (JSON Schema or AsyncAPI) read from a local
file or fetched from a URL.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class DocumentLoaderError(Exception):
    """Raised when a schema document cannot be loaded."""

    pass


def _ensure_object(data: Any, source: str) -> dict:
    if not isinstance(data, dict):
        logger.error("Document %s is not a JSON object", source)
        raise DocumentLoaderError(
            f"Schema document must be a JSON object: {source} ({type(data).__name__})"
        )
    return data


def load_document_from_file(file_path: str | Path) -> tuple[str, dict]:
    """Load a schema document from a local file.

    Args:
        file_path: Path to the JSON document.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        FileNotFoundError: If file doesn't exist.
        DocumentLoaderError: If the file cannot be read or is not a JSON object.
    """
    file_path = Path(file_path)
    logger.debug("Loading schema document from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise DocumentLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise DocumentLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded schema document from %s", file_path)
    return str(file_path), _ensure_object(data, str(file_path))


def load_document_from_url(url: str, timeout: int = 30) -> tuple[str, dict]:
    """Fetch a schema document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        DocumentLoaderError: If the URL is invalid, the request fails, or the
            response is not a JSON object.
    """
    logger.debug("Fetching schema document from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise DocumentLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise DocumentLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        logger.error("HTTP error %s for URL: %s", status, url)
        raise DocumentLoaderError(f"HTTP error {status} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise DocumentLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise DocumentLoaderError(f"Invalid JSON response from URL {url}: {e}") from e

    logger.info("Fetched schema document from %s", url)
    return url, _ensure_object(data, url)


def load_document(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, dict]:
    """Load a schema document from either a file or a URL.

    Raises:
        DocumentLoaderError: If neither or both sources are given, or loading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if not file_path and not url:
        raise DocumentLoaderError("Either file_path or url must be provided")

    if file_path and url:
        raise DocumentLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_document_from_file(file_path)
    return load_document_from_url(url, timeout)
