from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordStatus(str, Enum):
    OK = "Ok"
    DROPPED = "Dropped"
    PROCESSING_FAILED = "ProcessingFailed"


class FirehoseRecord(BaseModel):
    """Single record handed to the transformation Lambda by Kinesis Data Firehose."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Firehose sends string ids; other scalar ids are echoed back untouched.
    record_id: Any = Field(alias="recordId")
    # Type-checked per record by the codec so one bad payload cannot fail the batch.
    data: Any = None
    approximate_arrival_timestamp: int | None = Field(
        default=None,
        alias="approximateArrivalTimestamp",
    )
    kinesis_record_metadata: dict[str, Any] | None = Field(
        default=None,
        alias="kinesisRecordMetadata",
    )

    @field_validator("record_id")
    @classmethod
    def _validate_record_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, (dict, list)):
            raise ValueError("recordId must be a scalar value")
        return value


class TransformationEvent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    records: list[FirehoseRecord]
    invocation_id: str | None = Field(default=None, alias="invocationId")
    delivery_stream_arn: str | None = Field(default=None, alias="deliveryStreamArn")
    source_kinesis_stream_arn: str | None = Field(
        default=None,
        alias="sourceKinesisStreamArn",
    )
    region: str | None = None


class TransformResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    record_id: Any = Field(alias="recordId")
    result: RecordStatus
    data: str | None = None
    reason: str | None = Field(default=None, exclude=True)


class TransformationResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    records: list[TransformResult]

    def to_firehose(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Transformed(BaseModel):
    """Successful per-record outcome carrying the re-encoded payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["transformed"] = "transformed"
    record_id: Any
    data: str


class Failed(BaseModel):
    """Per-record failure; ``reason`` is a stable tag used in logs and summaries."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    record_id: Any
    reason: str
    error: str


RecordOutcome = Transformed | Failed
