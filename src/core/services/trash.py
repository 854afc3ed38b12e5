"""Cross-type trash operations backing the trash endpoints."""

from collections.abc import Mapping
from typing import Any

from core.errors import NotFoundError
from core.models import TrashItem
from core.services.lifecycle import ResourceService, trash_sort_key
from core.services.resources import require_service


def _selected(services: Mapping[str, ResourceService], resource_type: str | None) -> list[ResourceService]:
    if resource_type:
        return [require_service(services, resource_type)]
    return list(services.values())


def list_all_trash(
    services: Mapping[str, ResourceService],
    user_id: str,
    resource_type: str | None = None,
) -> list[TrashItem]:
    items: list[TrashItem] = []
    for service in _selected(services, resource_type):
        items.extend(service.list_trash(user_id))
    items.sort(key=trash_sort_key, reverse=True)
    return items


def restore_item(
    services: Mapping[str, ResourceService],
    user_id: str,
    item_id: str,
    resource_type: str | None = None,
) -> dict[str, Any]:
    """Restore from the given type, or from the first type holding a tombstone for the id."""
    for service in _selected(services, resource_type):
        try:
            return service.restore(user_id, item_id)
        except NotFoundError:
            continue
    raise NotFoundError(f"{item_id} is not in trash")


def purge_item(
    services: Mapping[str, ResourceService],
    user_id: str,
    item_id: str,
    resource_type: str | None = None,
) -> int:
    """Remove the item from trash in the given type, or in every type holding a tombstone for the id.

    Returns how many tombstones were removed; purging an id that is not in
    trash is a no-op.
    """
    return sum(service.purge_from_trash(user_id, item_id) for service in _selected(services, resource_type))


def empty_all_trash(services: Mapping[str, ResourceService], user_id: str) -> int:
    return sum(service.empty_trash(user_id) for service in services.values())
