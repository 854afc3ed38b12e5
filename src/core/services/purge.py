"""Trash purge sweep: permanently removes tombstones whose retention has expired.

The sweep never raises: per-item and per-type failures are counted under
`errors` and the run moves on. Overlapping runs are safe because
permanent_delete is idempotent.
"""

import logging
import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.config import Config
from core.errors import ParseError, StorageUnavailableError
from core.kv import KeyListing, KVStore
from core.models import PurgeSummary
from core.services.resources import RESOURCE_DEFINITIONS, make_service
from core.services.tombstones import (
    KEY_SEPARATOR,
    decode_record,
    is_tombstone,
    parse_key,
    tombstone_expiry,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


class PurgeOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    max_deletes: int | None = Field(default=None, ge=0)
    max_workers: int = Field(default=1, ge=1)
    # resource type -> object exposing permanent_delete(user_id, item_id)
    services: dict[str, Any] = {}
    now: datetime | None = None

    @classmethod
    def from_config(cls, config: Config) -> "PurgeOptions":
        return cls(
            batch_size=config.purge_batch_size,
            max_deletes=config.purge_max_deletes,
            max_workers=config.purge_max_workers,
        )


class _DeleteBudget:
    """Run-wide delete cap. Slots are reserved before dispatch so concurrent workers never overshoot."""

    def __init__(self, limit: int | None) -> None:
        self._limit = limit
        self._reserved = 0
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        with self._lock:
            if self._limit is not None and self._reserved >= self._limit:
                return False
            self._reserved += 1
            return True

    def release(self) -> None:
        with self._lock:
            self._reserved -= 1

    @property
    def exhausted(self) -> bool:
        with self._lock:
            return self._limit is not None and self._reserved >= self._limit


class _Tally:
    def __init__(self) -> None:
        self.checked = 0
        self.deleted = 0
        self.errors = 0
        self._lock = threading.Lock()

    def add(self, checked: int = 0, deleted: int = 0, errors: int = 0) -> None:
        with self._lock:
            self.checked += checked
            self.deleted += deleted
            self.errors += errors

    def summary(self) -> PurgeSummary:
        with self._lock:
            return PurgeSummary(checked=self.checked, deleted=self.deleted, errors=self.errors)


@dataclass
class _Sweep:
    resource_type: str
    store: KVStore
    service: Any
    now: datetime
    budget: _DeleteBudget
    tally: _Tally

    def process_key(self, name: str) -> None:
        if self.budget.exhausted:
            return
        self.tally.add(checked=1)

        try:
            raw = self.store.get(name)
        except StorageUnavailableError as e:
            logger.warning("Could not read %s during purge: %s", name, e.message)
            self.tally.add(errors=1)
            return
        if raw is None:
            return

        try:
            record = decode_record(name, raw)
        except ParseError as e:
            logger.warning("Skipping unparsable record during purge: %s", e.message)
            self.tally.add(errors=1)
            return

        if not is_tombstone(record):
            return

        expires_at = tombstone_expiry(record)
        if expires_at is None:
            logger.warning("Tombstone %s has no usable expiry; leaving it", name)
            return
        if expires_at > self.now:
            return

        parsed = parse_key(name)
        if parsed is None:
            logger.warning("Cannot parse key %s; leaving tombstone", name)
            return
        _, user_id, item_id = parsed

        if not self.budget.try_acquire():
            return
        try:
            self.service.permanent_delete(user_id, item_id)
        except Exception:
            self.budget.release()
            self.tally.add(errors=1)
            logger.exception("Failed to permanently delete expired trash item %s", name)
            return
        self.tally.add(deleted=1)


def _sweep_type(sweep: _Sweep, batch_size: int, executor: ThreadPoolExecutor | None) -> None:
    listing = KeyListing(sweep.store, f"{sweep.resource_type}{KEY_SEPARATOR}", page_size=batch_size)
    try:
        for page in listing.pages():
            if sweep.budget.exhausted:
                return
            if executor is not None:
                for _ in executor.map(sweep.process_key, page):
                    pass
            else:
                for name in page:
                    sweep.process_key(name)
    except StorageUnavailableError as e:
        logger.warning("Listing %s keys failed; skipping type: %s", sweep.resource_type, e.message)
        sweep.tally.add(errors=1)


def run_purge(
    bindings: Mapping[str, KVStore | None] | None,
    options: PurgeOptions | None = None,
) -> PurgeSummary:
    """Sweep every bound resource type for expired tombstones.

    Types without a store binding contribute nothing; an all-zero summary is a
    normal result for a deployment with no stores configured.
    """
    opts = options or PurgeOptions()
    bindings = bindings or {}
    now = opts.now or utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    budget = _DeleteBudget(opts.max_deletes)
    tally = _Tally()
    executor = ThreadPoolExecutor(max_workers=opts.max_workers) if opts.max_workers > 1 else None

    try:
        for resource_type in RESOURCE_DEFINITIONS:
            if budget.exhausted:
                logger.info("Delete cap of %s reached; ending purge early", opts.max_deletes)
                break

            store = bindings.get(resource_type)
            if store is None:
                logger.debug("No store bound for %s; skipping", resource_type)
                continue

            service = opts.services.get(resource_type) or make_service(resource_type, store)
            sweep = _Sweep(resource_type, store, service, now, budget, tally)
            try:
                _sweep_type(sweep, opts.batch_size, executor)
            except Exception:
                logger.exception("Purge of %s failed", resource_type)
                tally.add(errors=1)
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    summary = tally.summary()
    logger.info(
        "Trash purge complete: %d checked, %d deleted, %d errors",
        summary.checked,
        summary.deleted,
        summary.errors,
    )
    return summary
