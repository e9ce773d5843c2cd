from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from clickstream_firehose.settings import Settings
from clickstream_firehose.transformer import InvalidBatchError, parse_event, summarize, transform

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # The Lambda runtime installs its own root handler, which makes basicConfig a no-op.
    logging.getLogger().setLevel(level)


def lambda_handler(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
    configure_logging()
    settings = Settings()

    try:
        batch = parse_event(event)
    except InvalidBatchError:
        LOGGER.exception("transform_batch_invalid")
        raise

    response = transform(
        batch,
        delimiter=settings.record_delimiter,
        require_json=settings.require_json,
        failure_status=settings.failure_status,
        max_response_bytes=settings.max_response_bytes,
    )

    LOGGER.info(
        "transform_batch_complete",
        extra={
            "invocation_id": batch.invocation_id,
            "records_in": len(batch.records),
            **summarize(response.records),
            "remaining_time_ms": _remaining_time_ms(context),
        },
    )
    return response.to_firehose()


def _remaining_time_ms(context: Any) -> int | None:
    get_remaining = getattr(context, "get_remaining_time_in_millis", None)
    if get_remaining is None:
        return None
    return int(get_remaining())
