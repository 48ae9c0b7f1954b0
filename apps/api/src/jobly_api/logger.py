"""
Structured JSON Logging Utilities for the Jobly API Service.

Every log line is a single compact JSON object on stdout, enriched with the
service name, environment and version, so log pipelines can filter on fields
instead of parsing free text.
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from typing import Any

from jobly_common.config import get_config

from . import SERVICE_NAME, __version__

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _normalize_level(level: str) -> str:
    """Returns `level` upper-cased, or INFO if it is not a known level."""
    level_upper = level.upper()
    return level_upper if level_upper in _VALID_LEVELS else "INFO"


def log_event(level: str, msg: str, **fields: Any) -> None:
    """
    Emits a structured, single-line JSON log entry to standard output.

    Standard fields `ts`, `service`, `env`, `version`, `level` and `msg` are
    always present; keyword arguments are added at the top level.

    Example:
    ```python
    log_event("INFO", "job_created", job_id=12, company_handle="c1")
    ```
    produces
    ```json
    {"ts":"...","service":"api","env":"local","version":"0.1.0","level":"INFO",
     "msg":"job_created","job_id":12,"company_handle":"c1"}
    ```
    """
    record = {
        "ts": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "env": get_config().environment,
        "version": __version__,
        "level": _normalize_level(level),
        "msg": msg,
    }
    record.update(fields)
    print(json.dumps(record, separators=(",", ":"), default=str), file=sys.stdout, flush=True)
