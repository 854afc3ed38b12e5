"""Key layout, timestamps and tombstone structure shared by all resource types."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any

from core.errors import ParseError

KEY_SEPARATOR = ":"

TOMBSTONE_FIELDS = frozenset({"deleted", "backup", "deletedBy", "metadata"})


def make_key(resource_type: str, user_id: str, item_id: str) -> str:
    return KEY_SEPARATOR.join((resource_type, user_id, item_id))


def user_prefix(resource_type: str, user_id: str) -> str:
    return f"{resource_type}{KEY_SEPARATOR}{user_id}{KEY_SEPARATOR}"


def parse_key(name: str) -> tuple[str, str, str] | None:
    """Split '<type>:<userId>:<id>'; ids may themselves contain ':'."""
    parts = name.split(KEY_SEPARATOR, 2)
    if len(parts) < 3 or not all(parts):
        return None
    return parts[0], parts[1], parts[2]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def decode_record(key: str, raw: str) -> dict[str, Any]:
    try:
        record = json.loads(raw)
    except ValueError as e:
        raise ParseError(f"Stored value at {key} is not valid JSON: {e}") from e
    if not isinstance(record, dict):
        raise ParseError(f"Stored value at {key} is not an object")
    return record


def encode_record(record: dict[str, Any]) -> str:
    return json.dumps(record, separators=(",", ":"))


def is_tombstone(record: dict[str, Any]) -> bool:
    return record.get("deleted") is True


def build_tombstone(
    entity: dict[str, Any],
    *,
    key: str,
    item_id: str,
    user_id: str,
    deleted_by: str,
    deleted_at: datetime,
    retention: timedelta,
) -> dict[str, Any]:
    deleted_at_str = format_timestamp(deleted_at)
    return {
        "id": entity.get("id") or item_id,
        "userId": entity.get("userId") or user_id,
        "deleted": True,
        "deletedBy": deleted_by,
        "backup": entity,
        "metadata": {
            "deletedAt": deleted_at_str,
            "deletedBy": deleted_by,
            "originalKey": key,
            "expiresAt": format_timestamp(deleted_at + retention),
        },
        "createdAt": entity.get("createdAt") or "",
        "updatedAt": deleted_at_str,
    }


def tombstone_expiry(record: dict[str, Any]) -> datetime | None:
    """metadata.expiresAt, falling back to older top-level fields."""
    metadata = record.get("metadata")
    if isinstance(metadata, dict) and metadata.get("expiresAt"):
        return parse_timestamp(metadata["expiresAt"])
    return parse_timestamp(record.get("expiresAt") or record.get("deletedAt"))
