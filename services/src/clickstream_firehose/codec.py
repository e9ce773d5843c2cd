from __future__ import annotations

import base64
from typing import Any

RECORD_DELIMITER = "\n"


class RecordDecodeError(ValueError):
    """Raised when a record payload is not base64-encoded UTF-8 text."""


def decode_payload(data: Any) -> str:
    if not isinstance(data, str):
        raise RecordDecodeError(f"Payload must be base64 text, got {type(data).__name__}")

    try:
        raw = base64.b64decode(data, validate=True)
    except ValueError as exc:
        raise RecordDecodeError(f"Payload is not valid base64: {exc}") from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RecordDecodeError(f"Payload is not valid UTF-8 text: {exc.reason}") from exc


def encode_payload(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def append_delimiter(text: str, delimiter: str = RECORD_DELIMITER) -> str:
    # Always appends; a payload that already ends with the delimiter gets a second one.
    return text + delimiter