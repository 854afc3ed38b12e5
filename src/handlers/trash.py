"""Trash handler. Lists, restores, permanently deletes and empties trash across resource types.

Routes:
    GET    /trash[?type=]        list trashed items, newest deletion first
    DELETE /trash                empty the caller's trash
    POST   /trash/{id}[?type=]   restore an item
    DELETE /trash/{id}[?type=]   permanently delete an item
"""

import logging
from typing import Any

from core.clients import get_kv_bindings
from core.config import get_config
from core.http import error_response, get_path_param, get_query_param, get_user_id, json_response
from core.services.resources import build_services
from core.services.trash import empty_all_trash, list_all_trash, purge_item, restore_item

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        user_id = get_user_id(event)
        services = build_services(get_kv_bindings(), get_config())
        method = str(event.get("httpMethod", "GET")).upper()
        item_id = get_path_param(event, "id")
        resource_type = get_query_param(event, "type")

        if item_id is None:
            if method == "GET":
                items = list_all_trash(services, user_id, resource_type)
                return json_response(200, [item.to_dict() for item in items])
            if method == "DELETE":
                count = empty_all_trash(services, user_id)
                logger.info("Emptied trash for %s: %d items", user_id, count)
                return json_response(200, {"deleted": count, "message": f"{count} items permanently deleted"})
        else:
            if method == "POST":
                restored = restore_item(services, user_id, item_id, resource_type)
                return json_response(200, {"success": True, "restored": restored})
            if method == "DELETE":
                purge_item(services, user_id, item_id, resource_type)
                return json_response(200, {"success": True})

        return json_response(405, {"error": "Method Not Allowed"})
    except Exception as e:
        return error_response(e)
