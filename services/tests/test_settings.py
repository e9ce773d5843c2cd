from __future__ import annotations

import pytest
from pydantic import ValidationError

from clickstream_firehose.settings import Settings, decode_escapes


def test_defaults_append_newline_and_mark_processing_failed() -> None:
    settings = Settings()

    assert settings.record_delimiter == "\n"
    assert settings.failure_status == "ProcessingFailed"
    assert settings.require_json is False
    assert settings.max_response_bytes == 6_000_000


def test_failure_status_accepts_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAILURE_STATUS", "Dropped")

    assert Settings().failure_status == "Dropped"


def test_failure_status_rejects_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAILURE_STATUS", "Ok")

    with pytest.raises(ValidationError):
        Settings()


def test_empty_delimiter_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECORD_DELIMITER", "")

    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("\\n", "\n"),
        ("\\r\\n", "\r\n"),
        ("\\t", "\t"),
        ("|", "|"),
        ("\\\\n", "\\n"),
    ],
)
def test_delimiter_escape_sequences_are_decoded(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected: str,
) -> None:
    monkeypatch.setenv("RECORD_DELIMITER", raw)

    assert Settings().record_delimiter == expected


def test_decode_escapes_leaves_unknown_sequences() -> None:
    assert decode_escapes("\\x") == "\\x"


def test_max_response_bytes_is_capped_at_lambda_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_RESPONSE_BYTES", "6000001")

    with pytest.raises(ValidationError):
        Settings()
