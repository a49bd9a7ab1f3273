"""Load test run reports and title mappings from JSON files."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from xray_bridge.errors import MissingInputError, ParseError
from xray_bridge.models.mapping import TitleKeyMapping
from xray_bridge.models.report import TestRunReport

log = logging.getLogger(__name__)


async def load_report(path: Path) -> TestRunReport:
    """Load a Playwright JSON report.

    Raises:
        MissingInputError: If the file does not exist
        ParseError: If the content is not a valid report

    """
    return await _load_model(path, TestRunReport, "test run report")


async def load_mapping(path: Path) -> TitleKeyMapping:
    """Load the title to test key mapping.

    Raises:
        MissingInputError: If the file does not exist
        ParseError: If the content is not an object of strings

    """
    return await _load_model(path, TitleKeyMapping, "test mapping")


async def _load_model[M: BaseModel](path: Path, model: type[M], label: str) -> M:
    data = await read_json(path, label)
    try:
        result = model.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Invalid {label} schema in {path}: {e}") from e

    log.debug("Loaded %s from %s", label, path)
    return result


async def read_json(path: Path, label: str = "input") -> Any:
    """Read and decode a JSON file off the event loop."""
    if not path.is_file():
        raise MissingInputError(f"Missing {label} file: {path}")

    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError as e:
        raise MissingInputError(f"Missing {label} file: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {label} file {path}: {e}") from e

    if not content.strip():
        raise ParseError(f"Empty {label} file: {path}")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {label} file {path}: {e}") from e
