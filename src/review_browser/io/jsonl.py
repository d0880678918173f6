# review_browser/io/jsonl.py

"""Low-level JSON / JSONL read/write helpers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _looks_like_json_array(path: Path) -> bool:
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            stripped = line.lstrip()
            if stripped:
                return stripped.startswith("[")
    return False


def iter_json_objects(
    path: Path,
    *,
    log_errors: bool = True,
) -> Iterator[dict[str, Any]]:
    """Iterate over JSON objects in a JSON array file or a JSONL file.

    For JSONL, empty lines and invalid JSON lines are skipped. Array elements
    that are not objects are skipped as well. A missing file raises
    FileNotFoundError.
    """
    if not path.exists():
        msg = f"JSON file not found: {path}"
        raise FileNotFoundError(msg)

    if _looks_like_json_array(path):
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        for index, obj in enumerate(data):
            if isinstance(obj, dict):
                yield obj
            elif log_errors:
                logger.warning("Skipping non-object element %d in %s", index, path)
        return

    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                if log_errors:
                    logger.warning(
                        "Skipping invalid JSON line %d in %s: %s",
                        line_number,
                        path,
                        exc,
                    )
                continue
            if isinstance(obj, dict):
                yield obj


def write_jsonl(path: Path, objects: Iterable[dict[str, Any]]) -> None:
    """Write objects to a JSONL file, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for obj in objects:
            f.write(json.dumps(obj, ensure_ascii=False) + "\n")
