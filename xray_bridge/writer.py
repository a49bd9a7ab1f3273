"""Persist Xray payloads to disk."""

import asyncio
import json
import logging
import os
from pathlib import Path

from xray_bridge.errors import WriteError
from xray_bridge.models.payload import TrackerPayload

log = logging.getLogger(__name__)


def serialize_payload(payload: TrackerPayload) -> str:
    """Render the payload as pretty-printed JSON in declared key order."""
    return json.dumps(payload.to_json_dict(), indent=2, ensure_ascii=False) + "\n"


async def write_payload(payload: TrackerPayload, path: Path) -> Path:
    """Write the payload to ``path``, creating parent directories.

    Raises:
        WriteError: If the file cannot be written

    """
    content = serialize_payload(payload)
    try:
        await asyncio.to_thread(_write_text, path, content)
    except OSError as e:
        raise WriteError(f"Cannot write Xray results to {path}: {e}") from e

    log.info("Xray results written to: %s", path)
    return path


def _write_text(path: Path, content: str) -> None:
    """Write through a sibling temp file so a failed write keeps the old file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
