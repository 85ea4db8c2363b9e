"""
Decoding of task payloads.

By convention the canonical payload of a task is the first text part of
its first artifact, and that text is usually itself a JSON envelope of
the form ``{"message"?, "data"?: {"reply"?, "message"?} | str}``.

``extract_data`` only parses the JSON. ``extract_text`` additionally
unwraps the envelope one layer deep by trying ``TEXT_EXTRACTORS`` in
order; the first extractor that returns a value wins.
"""

import json
import logging
from typing import Any, Callable, Optional

from .errors import DecodeError
from .types import Task

logger = logging.getLogger(__name__)

NO_RESPONSE = "(no response)"


def first_text(task: Task) -> Optional[str]:
    """Return the text of the first artifact's first text part; empty text counts as none."""
    if not task.artifacts:
        return None
    for part in task.artifacts[0].parts:
        if part.kind == "text":
            return part.text or None
    return None


def parse_json(text: str) -> Any:
    """Parse ``text`` as JSON, raising ``DecodeError`` when it is not."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DecodeError(f"Artifact text is not JSON: {e}") from e


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _present(value: Any) -> bool:
    # Empty objects and arrays still count; null, false, 0 and "" do not.
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _data(parsed: Any) -> Any:
    if isinstance(parsed, dict):
        return parsed.get("data")
    return None


def _bare_string(parsed: Any) -> Optional[str]:
    if isinstance(parsed, str):
        return parsed
    return None


def _top_level_message(parsed: Any) -> Optional[str]:
    if isinstance(parsed, dict) and _present(parsed.get("message")):
        return _stringify(parsed["message"])
    return None


def _data_reply(parsed: Any) -> Optional[str]:
    data = _data(parsed)
    if isinstance(data, dict) and _present(data.get("reply")):
        return _stringify(data["reply"])
    return None


def _data_message(parsed: Any) -> Optional[str]:
    data = _data(parsed)
    if isinstance(data, dict) and _present(data.get("message")):
        return _stringify(data["message"])
    return None


def _data_string(parsed: Any) -> Optional[str]:
    data = _data(parsed)
    if isinstance(data, str) and data:
        return data
    return None


def _pretty_json(parsed: Any) -> str:
    return json.dumps(parsed, indent=2, ensure_ascii=False)


TextExtractor = Callable[[Any], Optional[str]]

# Unwrap priority for extract_text. The last entry always matches.
TEXT_EXTRACTORS: tuple[TextExtractor, ...] = (
    _bare_string,
    _top_level_message,
    _data_reply,
    _data_message,
    _data_string,
    _pretty_json,
)


def unwrap_text(parsed: Any) -> str:
    """Apply ``TEXT_EXTRACTORS`` to an already parsed payload."""
    for extractor in TEXT_EXTRACTORS:
        text = extractor(parsed)
        if text is not None:
            return text
    # Unreachable while _pretty_json is last.
    return _pretty_json(parsed)


def extract_text(task: Task) -> str:
    """Return a human readable string for ``task``."""
    text = first_text(task)
    if text is None:
        return NO_RESPONSE
    try:
        parsed = parse_json(text)
    except DecodeError:
        return text
    return unwrap_text(parsed)


def extract_data(task: Task) -> Any:
    """Return the parsed JSON payload of ``task``.

    Falls back to the raw string when the text is not JSON, and returns
    None when the task carries no text part at all.
    """
    text = first_text(task)
    if text is None:
        return None
    try:
        return parse_json(text)
    except DecodeError:
        logger.debug("Task %s payload is not JSON, returning raw text", task.id)
        return text
