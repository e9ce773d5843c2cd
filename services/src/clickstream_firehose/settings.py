from __future__ import annotations

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Lambda caps synchronous invocation responses at 6 MB.
LAMBDA_RESPONSE_MAX_BYTES = 6_000_000

_ESCAPE_PATTERN = re.compile(r"\\([nrt\\])")
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}


def decode_escapes(value: str) -> str:
    # Lambda environment variables cannot hold a literal newline, so "\n" arrives as two characters.
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(1)], value)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    record_delimiter: str = Field(default="\n", alias="RECORD_DELIMITER")
    failure_status: Literal["ProcessingFailed", "Dropped"] = Field(
        default="ProcessingFailed",
        alias="FAILURE_STATUS",
    )
    require_json: bool = Field(default=False, alias="REQUIRE_JSON")
    max_response_bytes: int = Field(
        default=LAMBDA_RESPONSE_MAX_BYTES,
        alias="MAX_RESPONSE_BYTES",
    )

    @field_validator("record_delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        if not value:
            raise ValueError("RECORD_DELIMITER must not be empty")
        return decode_escapes(value)

    @field_validator("max_response_bytes")
    @classmethod
    def _validate_response_bytes(cls, value: int) -> int:
        if value < 1 or value > LAMBDA_RESPONSE_MAX_BYTES:
            raise ValueError("MAX_RESPONSE_BYTES must be between 1 and 6_000_000")
        return value
