from os import environ
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

RESOURCE_TYPES: tuple[str, ...] = ("trip", "mileage", "expense")


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    dynamodb_endpoint: str | None = None
    trips_table: str | None = None
    mileage_table: str | None = None
    expenses_table: str | None = None
    trash_retention_days: int = Field(default=30, ge=1)
    retention_overrides: dict[str, Annotated[int, Field(ge=1)]] = {}
    purge_batch_size: int = Field(default=50, ge=1)
    purge_max_deletes: int | None = None
    purge_max_workers: int = Field(default=1, ge=1)
    cron_admin_secret: str = ""
    environment: str

    def table_for(self, resource_type: str) -> str | None:
        return {
            "trip": self.trips_table,
            "mileage": self.mileage_table,
            "expense": self.expenses_table,
        }.get(resource_type)

    def retention_days_for(self, resource_type: str) -> int:
        return self.retention_overrides.get(resource_type, self.trash_retention_days)


def _table_name(var: str, default: str) -> str | None:
    """Empty string disables the binding for partial deployments."""
    return environ.get(var, default) or None


def _retention_overrides() -> dict[str, int]:
    overrides: dict[str, int] = {}
    for resource_type in RESOURCE_TYPES:
        raw = environ.get(f"{resource_type.upper()}_RETENTION_DAYS")
        if raw:
            overrides[resource_type] = int(raw)
    return overrides


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config — for testing only."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    max_deletes = int(environ.get("PURGE_MAX_DELETES", "500"))

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        dynamodb_endpoint=environ.get("DYNAMODB_ENDPOINT"),
        trips_table=_table_name("TRIPS_TABLE", "TripsKV"),
        mileage_table=_table_name("MILEAGE_TABLE", "MileageKV"),
        expenses_table=_table_name("EXPENSES_TABLE", "ExpensesKV"),
        trash_retention_days=int(environ.get("TRASH_RETENTION_DAYS", "30")),
        retention_overrides=_retention_overrides(),
        purge_batch_size=int(environ.get("PURGE_BATCH_SIZE", "50")),
        purge_max_deletes=max_deletes if max_deletes > 0 else None,
        purge_max_workers=int(environ.get("PURGE_MAX_WORKERS", "1")),
        cron_admin_secret=environ.get("CRON_ADMIN_SECRET", ""),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
