"""Resource type registry: trip, mileage and expense share one lifecycle."""

from collections.abc import Callable, Mapping
from datetime import datetime

from core.config import Config
from core.errors import InvalidInputError, StorageUnavailableError
from core.kv import KVStore
from core.models import ExpenseInput, MileageInput, TripInput
from core.services.lifecycle import ResourceDefinition, ResourceService
from core.services.tombstones import utcnow

TRIP = ResourceDefinition(
    resource_type="trip",
    input_model=TripInput,
    trash_fields=("title", "date", "createdAt", "stops", "totalMiles", "startAddress"),
    trash_fallbacks={"title": "startAddress"},
)

MILEAGE = ResourceDefinition(
    resource_type="mileage",
    input_model=MileageInput,
    trash_fields=("miles", "vehicle", "date"),
)

EXPENSE = ResourceDefinition(
    resource_type="expense",
    input_model=ExpenseInput,
    trash_fields=("category", "amount", "description", "date"),
)

RESOURCE_DEFINITIONS: dict[str, ResourceDefinition] = {d.resource_type: d for d in (TRIP, MILEAGE, EXPENSE)}


def get_definition(resource_type: str) -> ResourceDefinition:
    try:
        return RESOURCE_DEFINITIONS[resource_type]
    except KeyError:
        raise InvalidInputError(f"Unknown resource type: {resource_type!r}") from None


def make_service(
    resource_type: str,
    store: KVStore,
    retention_days: int | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> ResourceService:
    return ResourceService(get_definition(resource_type), store, retention_days=retention_days, clock=clock)


def build_services(
    bindings: Mapping[str, KVStore | None],
    config: Config | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> dict[str, ResourceService]:
    """Services for every resource type whose store binding is present."""
    services: dict[str, ResourceService] = {}
    for resource_type in RESOURCE_DEFINITIONS:
        store = bindings.get(resource_type)
        if store is None:
            continue
        retention = config.retention_days_for(resource_type) if config else None
        services[resource_type] = make_service(resource_type, store, retention_days=retention, clock=clock)
    return services


def require_service(services: Mapping[str, ResourceService], resource_type: str) -> ResourceService:
    get_definition(resource_type)
    service = services.get(resource_type)
    if service is None:
        raise StorageUnavailableError(f"No store bound for {resource_type}")
    return service
