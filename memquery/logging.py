"""
memquery.logging
AUTHOR: carter-vin

JSON event lines for each memory query

Events:
- query_start: path about to be read, huge pages wanted or not
- report_read: the kB values read
- query_failed: SourceUnavailable / RequiredFieldMissing with its message
- query_done: always last, success or failure

stderr only; stdout carries the report text or JSON
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any

VALID_EVENT_TYPES = {
    "query_start",
    "report_read",
    "query_failed",
    "query_done",
}

MESSAGE_LIMIT = 200


def _truncate_message(value: str, *, limit: int = MESSAGE_LIMIT) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, version: str, **fields: Any) -> None:
    """
    Write one query event to stderr

    - unknown event_type -> ValueError
    - event_type, version, utc_now always set; fields merged after them
    - keys sorted, compact separators
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if isinstance(fields.get("message"), str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "version": version,
        **fields,
    }

    sys.stderr.write(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False) + "\n"
    )
