"""
Conversion between wire requests, persisted records and response items.
The payload is opaque cargo and is never transformed.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from .errors import ValidationError
from .schema import ActionRecord, ResponseItem

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
LATEST = datetime.max.replace(tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a timestamp to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Fixed-width UTC text so lexical order matches time order."""
    return to_utc(value).isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def hours_before(now: datetime, hours: int) -> datetime:
    """now - hours, clamped to the representable range."""
    try:
        return now - timedelta(hours=hours)
    except OverflowError:
        return EARLIEST if hours > 0 else LATEST


def to_record(user_id: str, payload: Dict[str, Any], created_at: datetime) -> ActionRecord:
    """Build a record for insertion; the store assigns the id."""
    try:
        created_at = to_utc(created_at)
    except OverflowError:
        raise ValidationError(f"actionCreatedAt is out of range: {created_at}")
    return ActionRecord(
        id=None,
        user_id=user_id,
        created_at=created_at,
        payload=payload,
    )


def to_response_item(record: ActionRecord, save_interval: int) -> ResponseItem:
    return ResponseItem(
        created_at=record.created_at,
        payload=record.payload,
        save_interval=save_interval,
    )


def to_row(record: ActionRecord) -> Tuple[str, str, str, str]:
    """Record -> (id, user_id, created_at, action) column values."""
    return (
        record.id,
        record.user_id,
        format_timestamp(record.created_at),
        json.dumps(record.payload),
    )


def from_row(row: Tuple[str, str, str, str]) -> ActionRecord:
    record_id, user_id, created_at, action = row
    return ActionRecord(
        id=record_id,
        user_id=user_id,
        created_at=parse_timestamp(created_at),
        payload=json.loads(action),
    )
