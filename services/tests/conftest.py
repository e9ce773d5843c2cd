"""
This file configures pytest.

It puts services/src on sys.path so the tests run from a plain checkout as well as
from an editable install.

pip install -e ".[test]"
pytest -q
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RECORD_DELIMITER",
        "FAILURE_STATUS",
        "REQUIRE_JSON",
        "MAX_RESPONSE_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)
