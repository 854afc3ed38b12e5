"""Generic soft-delete lifecycle for user-owned resources.

One ResourceService instance per resource type. Every record lives at
'<type>:<userId>:<id>' for its whole life: delete overwrites it with a
tombstone carrying the original as `backup`, restore writes the backup back,
and permanent_delete removes the key.
"""

import logging
import uuid
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

import pydantic

from core.errors import InvalidInputError, NotFoundError, ParseError
from core.kv import KeyListing, KVStore
from core.models import ResourceInput, TrashItem, TrashMetadata
from core.services.tombstones import (
    TOMBSTONE_FIELDS,
    build_tombstone,
    decode_record,
    encode_record,
    format_timestamp,
    is_tombstone,
    make_key,
    parse_key,
    parse_timestamp,
    user_prefix,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30

# Store-level TTL on tombstones trails metadata.expiresAt by this margin.
TTL_GRACE = timedelta(days=1)

_PROTECTED_ON_UPDATE = frozenset({"id", "userId", "createdAt"}) | TOMBSTONE_FIELDS

InputT = TypeVar("InputT", bound=ResourceInput)


@dataclass(frozen=True)
class ResourceDefinition(Generic[InputT]):
    resource_type: str
    input_model: type[InputT]
    trash_fields: tuple[str, ...]
    trash_fallbacks: Mapping[str, str] = field(default_factory=dict)
    retention_days: int = DEFAULT_RETENTION_DAYS


def _validation_message(error: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}" for err in error.errors()
    )


def trash_sort_key(item: TrashItem) -> datetime:
    return parse_timestamp(item.metadata.deleted_at) or datetime.min.replace(tzinfo=timezone.utc)


class ResourceService(Generic[InputT]):
    def __init__(
        self,
        definition: ResourceDefinition[InputT],
        store: KVStore,
        retention_days: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.definition = definition
        self._store = store
        if retention_days is None:
            retention_days = definition.retention_days
        if retention_days < 1:
            raise ValueError(f"retention for {definition.resource_type} must be at least 1 day, got {retention_days}")
        self._retention = timedelta(days=retention_days)
        self._clock = clock

    @property
    def resource_type(self) -> str:
        return self.definition.resource_type

    @property
    def retention(self) -> timedelta:
        return self._retention

    def key(self, user_id: str, item_id: str) -> str:
        return make_key(self.resource_type, user_id, item_id)

    def _load(self, key: str) -> dict[str, Any] | None:
        raw = self._store.get(key)
        if raw is None:
            return None
        return decode_record(key, raw)

    def _load_active(self, user_id: str, item_id: str) -> tuple[str, dict[str, Any]]:
        key = self.key(user_id, item_id)
        record = self._load(key)
        if record is None or is_tombstone(record):
            raise NotFoundError(f"{self.resource_type} {item_id} not found")
        return key, record

    def _validate(self, payload: dict[str, Any]) -> InputT:
        try:
            return self.definition.input_model.model_validate(payload)
        except pydantic.ValidationError as e:
            raise InvalidInputError(f"Invalid {self.resource_type}: {_validation_message(e)}") from e

    def _iter_records(self, user_id: str) -> Iterator[tuple[str, dict[str, Any]]]:
        """Parsed records under the user's prefix; malformed values are logged and skipped."""
        for name in KeyListing(self._store, user_prefix(self.resource_type, user_id)):
            try:
                record = self._load(name)
            except ParseError:
                logger.warning("Skipping malformed %s record at %s", self.resource_type, name)
                continue
            if record is not None:
                yield name, record

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise InvalidInputError(f"Invalid {self.resource_type}: payload must be an object")

        payload = {k: v for k, v in data.items() if k not in TOMBSTONE_FIELDS}
        validated = self._validate(payload)

        now = format_timestamp(self._clock())
        item_id = str(payload.get("id") or uuid.uuid4())
        record = {
            **payload,
            **validated.derived_fields(),
            "id": item_id,
            "userId": user_id,
            "createdAt": payload.get("createdAt") or now,
            "updatedAt": now,
        }
        self._store.put(self.key(user_id, item_id), encode_record(record))
        logger.info("Created %s %s for %s", self.resource_type, item_id, user_id)
        return record

    def get(self, user_id: str, item_id: str) -> dict[str, Any]:
        _, record = self._load_active(user_id, item_id)
        return record

    def update(self, user_id: str, item_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(changes, dict):
            raise InvalidInputError(f"Invalid {self.resource_type}: payload must be an object")

        key, current = self._load_active(user_id, item_id)
        merged = {
            **current,
            **{k: v for k, v in changes.items() if k not in _PROTECTED_ON_UPDATE},
        }
        validated = self._validate(merged)
        merged.update(validated.derived_fields(changes))
        merged["updatedAt"] = format_timestamp(self._clock())

        self._store.put(key, encode_record(merged))
        return merged

    def delete(self, user_id: str, item_id: str) -> None:
        """Overwrite the record with a tombstone. Deleting a tombstone is a no-op."""
        key = self.key(user_id, item_id)
        current = self._load(key)
        if current is None:
            raise NotFoundError(f"{self.resource_type} {item_id} not found")
        if is_tombstone(current):
            logger.debug("%s already in trash; keeping original backup", key)
            return

        tombstone = build_tombstone(
            current,
            key=key,
            item_id=item_id,
            user_id=user_id,
            deleted_by=user_id,
            deleted_at=self._clock(),
            retention=self._retention,
        )
        ttl = int((self._retention + TTL_GRACE).total_seconds())
        self._store.put(key, encode_record(tombstone), ttl_seconds=ttl)
        logger.info("Moved %s to trash (expires %s)", key, tombstone["metadata"]["expiresAt"])

    def _project(self, key: str, record: dict[str, Any]) -> TrashItem:
        backup = record.get("backup") if isinstance(record.get("backup"), dict) else {}
        metadata = record.get("metadata") if isinstance(record.get("metadata"), dict) else {}
        _, key_user, key_id = parse_key(key) or ("", "", "")

        details: dict[str, Any] = {}
        for name in self.definition.trash_fields:
            value = backup.get(name)
            if value in (None, "") and name in self.definition.trash_fallbacks:
                value = backup.get(self.definition.trash_fallbacks[name])
            if value not in (None, ""):
                details[name] = value

        return TrashItem(
            id=key_id,
            user_id=key_user,
            record_type=self.resource_type,
            metadata=TrashMetadata.model_validate(
                {
                    "deletedAt": record.get("deletedAt") or "",
                    "deletedBy": record.get("deletedBy"),
                    "originalKey": key,
                    **metadata,
                }
            ),
            details=details,
        )

    def list_trash(self, user_id: str) -> list[TrashItem]:
        items: list[TrashItem] = []
        for key, record in self._iter_records(user_id):
            if not is_tombstone(record):
                continue
            try:
                items.append(self._project(key, record))
            except pydantic.ValidationError:
                logger.warning("Skipping tombstone with malformed metadata at %s", key)
        items.sort(key=trash_sort_key, reverse=True)
        return items

    def restore(self, user_id: str, item_id: str) -> dict[str, Any]:
        key = self.key(user_id, item_id)
        record = self._load(key)
        if record is None or not is_tombstone(record):
            raise NotFoundError(f"{self.resource_type} {item_id} is not in trash")

        backup = record.get("backup")
        if not isinstance(backup, dict):
            raise ParseError(f"Tombstone at {key} has no backup to restore")

        self._store.put(key, encode_record(backup))
        logger.info("Restored %s from trash", key)
        return backup

    def permanent_delete(self, user_id: str, item_id: str) -> None:
        self._store.delete(self.key(user_id, item_id))

    def purge_from_trash(self, user_id: str, item_id: str) -> bool:
        """Permanently delete the item only if it is a tombstone. Active records are left alone."""
        key = self.key(user_id, item_id)
        record = self._load(key)
        if record is None or not is_tombstone(record):
            return False
        self._store.delete(key)
        logger.info("Permanently deleted %s from trash", key)
        return True

    def empty_trash(self, user_id: str) -> int:
        doomed = [key for key, record in self._iter_records(user_id) if is_tombstone(record)]
        for key in doomed:
            self._store.delete(key)
        if doomed:
            logger.info("Emptied %d %s tombstones for %s", len(doomed), self.resource_type, user_id)
        return len(doomed)

    # Defined last: the name shadows the builtin for annotations later in this class body.
    def list(self, user_id: str) -> list[dict[str, Any]]:
        return [record for _, record in self._iter_records(user_id) if not is_tombstone(record)]
