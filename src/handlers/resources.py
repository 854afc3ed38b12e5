"""Resource CRUD handler: /{resourceType} and /{resourceType}/{id} for trips, mileage and expenses."""

from typing import Any

from core.clients import get_kv_bindings
from core.config import get_config
from core.http import error_response, get_json_body, get_path_param, get_user_id, json_response
from core.services.lifecycle import ResourceService
from core.services.resources import build_services, require_service


def _dispatch(
    service: ResourceService, method: str, user_id: str, item_id: str | None, event: dict[str, Any]
) -> dict[str, Any]:
    if item_id is None:
        if method == "GET":
            return json_response(200, service.list(user_id))
        if method == "POST":
            return json_response(201, service.create(user_id, get_json_body(event)))
    else:
        if method == "GET":
            return json_response(200, service.get(user_id, item_id))
        if method == "PUT":
            return json_response(200, service.update(user_id, item_id, get_json_body(event)))
        if method == "DELETE":
            service.delete(user_id, item_id)
            return json_response(200, {"success": True})
    return json_response(405, {"error": "Method Not Allowed"})


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        user_id = get_user_id(event)
        resource_type = get_path_param(event, "resourceType") or ""
        services = build_services(get_kv_bindings(), get_config())
        service = require_service(services, resource_type)
        method = str(event.get("httpMethod", "GET")).upper()
        return _dispatch(service, method, user_id, get_path_param(event, "id"), event)
    except Exception as e:
        return error_response(e)
