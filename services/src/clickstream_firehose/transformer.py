from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from clickstream_firehose.codec import (
    RECORD_DELIMITER,
    RecordDecodeError,
    append_delimiter,
    decode_payload,
    encode_payload,
)
from clickstream_firehose.models import (
    Failed,
    FirehoseRecord,
    RecordOutcome,
    RecordStatus,
    TransformationEvent,
    TransformationResponse,
    Transformed,
    TransformResult,
)
from clickstream_firehose.settings import LAMBDA_RESPONSE_MAX_BYTES

LOGGER = logging.getLogger(__name__)

REASON_DECODE_ERROR = "decode_error"
REASON_INVALID_JSON = "invalid_json"
REASON_UNEXPECTED_ERROR = "unexpected_error"
REASON_RESPONSE_TOO_LARGE = "response_too_large"

_FAILURE_STATUSES = (RecordStatus.PROCESSING_FAILED, RecordStatus.DROPPED)
# The Lambda runtime serializes the response with json.dumps default separators.
_ENVELOPE_BYTES = len(json.dumps({"records": []}))
_SEPARATOR_BYTES = len(", ")


class InvalidBatchError(ValueError):
    """Raised when the invocation payload is not a Firehose transformation batch."""


def parse_event(event: Mapping[str, Any]) -> TransformationEvent:
    if not isinstance(event, Mapping):
        raise InvalidBatchError(f"Expected a mapping event, got {type(event).__name__}")

    try:
        return TransformationEvent.model_validate(event)
    except ValidationError as exc:
        raise InvalidBatchError(
            f"Malformed transformation batch ({exc.error_count()} errors)"
        ) from exc


def transform_record(
    record: FirehoseRecord,
    *,
    delimiter: str = RECORD_DELIMITER,
    require_json: bool = False,
) -> RecordOutcome:
    try:
        text = decode_payload(record.data)
        if require_json:
            _ensure_json_document(text)
        return Transformed(
            record_id=record.record_id,
            data=encode_payload(append_delimiter(text, delimiter)),
        )
    except RecordDecodeError as exc:
        return Failed(record_id=record.record_id, reason=REASON_DECODE_ERROR, error=str(exc))
    except json.JSONDecodeError as exc:
        return Failed(record_id=record.record_id, reason=REASON_INVALID_JSON, error=str(exc))
    except Exception as exc:
        LOGGER.exception("record_transform_unexpected_error", extra={"record_id": record.record_id})
        return Failed(
            record_id=record.record_id,
            reason=REASON_UNEXPECTED_ERROR,
            error=str(exc),
        )


def transform(
    batch: TransformationEvent,
    *,
    delimiter: str = RECORD_DELIMITER,
    require_json: bool = False,
    failure_status: RecordStatus | str = RecordStatus.PROCESSING_FAILED,
    max_response_bytes: int = LAMBDA_RESPONSE_MAX_BYTES,
) -> TransformationResponse:
    """Transform every record of ``batch``, one result per input record in input order.

    Per-record failures are reported with ``failure_status``; nothing raised by a single
    record aborts its siblings.  Once the serialized response would grow past
    ``max_response_bytes`` the remaining records are reported as ``ProcessingFailed``.
    """
    status = RecordStatus(failure_status)
    if status not in _FAILURE_STATUSES:
        raise ValueError(f"Unsupported failure status: {status.value}")

    outcomes = transform_outcomes(batch, delimiter=delimiter, require_json=require_json)
    results: list[TransformResult] = []
    response_bytes = _ENVELOPE_BYTES
    overflowed = False
    for record, outcome in zip(batch.records, outcomes, strict=True):
        if isinstance(outcome, Transformed):
            result = TransformResult(
                record_id=outcome.record_id,
                result=RecordStatus.OK,
                data=outcome.data,
            )
        else:
            result = _failed_result(record, outcome, status=status)

        separator = _SEPARATOR_BYTES if results else 0
        size = separator + serialized_size(result)
        if overflowed or response_bytes + size > max_response_bytes:
            if not overflowed:
                LOGGER.warning(
                    "transform_response_size_exceeded",
                    extra={
                        "record_id": record.record_id,
                        "reason": REASON_RESPONSE_TOO_LARGE,
                        "max_response_bytes": max_response_bytes,
                        "remaining_records": len(batch.records) - len(results),
                    },
                )
            overflowed = True
            result = TransformResult(
                record_id=record.record_id,
                result=RecordStatus.PROCESSING_FAILED,
                reason=REASON_RESPONSE_TOO_LARGE,
            )
            size = separator + serialized_size(result)

        response_bytes += size
        results.append(result)

    return TransformationResponse(records=results)


def transform_outcomes(
    batch: TransformationEvent,
    *,
    delimiter: str = RECORD_DELIMITER,
    require_json: bool = False,
) -> list[RecordOutcome]:
    return [
        transform_record(record, delimiter=delimiter, require_json=require_json)
        for record in batch.records
    ]


def serialized_size(result: TransformResult) -> int:
    """Bytes ``result`` takes in the JSON document the Lambda runtime returns."""
    return len(json.dumps(result.model_dump(mode="json", by_alias=True, exclude_none=True)))


def summarize(results: Iterable[TransformResult]) -> dict[str, Any]:
    statuses: Counter[str] = Counter()
    reasons: Counter[str] = Counter()
    for result in results:
        statuses[result.result.value] += 1
        if result.reason is not None:
            reasons[result.reason] += 1

    return {
        "ok": statuses[RecordStatus.OK.value],
        "failed": statuses[RecordStatus.PROCESSING_FAILED.value]
        + statuses[RecordStatus.DROPPED.value],
        "processing_failed": statuses[RecordStatus.PROCESSING_FAILED.value],
        "dropped": statuses[RecordStatus.DROPPED.value],
        "failure_reasons": dict(reasons),
    }


def _failed_result(
    record: FirehoseRecord,
    outcome: Failed,
    *,
    status: RecordStatus,
) -> TransformResult:
    LOGGER.warning(
        "record_transform_failed",
        extra={
            "record_id": outcome.record_id,
            "reason": outcome.reason,
            "error": outcome.error,
            "status": status.value,
        },
    )
    if status is RecordStatus.DROPPED or not isinstance(record.data, str):
        return TransformResult(record_id=record.record_id, result=status, reason=outcome.reason)

    # Firehose writes the original payload of ProcessingFailed records to the error prefix.
    return TransformResult(
        record_id=record.record_id,
        result=status,
        data=record.data,
        reason=outcome.reason,
    )


def _ensure_json_document(text: str) -> None:
    document = json.loads(text)
    if not isinstance(document, (dict, list)):
        raise json.JSONDecodeError("Expected a JSON object or array", text, 0)
