"""Trash purge trigger, invoked by the EventBridge schedule or an authorized HTTP call."""

import hmac
import logging
from typing import Any

from core.clients import get_kv_bindings
from core.config import get_config
from core.http import json_response
from core.services.purge import PurgeOptions, run_purge

logger = logging.getLogger(__name__)


def _is_http_request(event: dict[str, Any]) -> bool:
    return "httpMethod" in event or "headers" in event


def _bearer_token(event: dict[str, Any]) -> str:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    header = (headers.get("authorization") or "").strip()
    if header.startswith("Bearer "):
        return header[len("Bearer ") :].strip()
    return header


def _authorized(event: dict[str, Any], secret: str) -> bool:
    token = _bearer_token(event)
    if not token or not secret:
        return False
    return hmac.compare_digest(token.encode(), secret.encode())


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    """Run one purge sweep and return its summary.

    Scheduled events run unconditionally; HTTP callers must present the
    shared admin secret. Partial failures inside the sweep still return 200.
    """
    try:
        config = get_config()
    except Exception:
        logger.exception("Trash purge configuration is invalid")
        return json_response(500, {"error": "Internal Server Error"})

    if _is_http_request(event) and not _authorized(event, config.cron_admin_secret):
        source_ip = ((event.get("requestContext") or {}).get("identity") or {}).get("sourceIp", "")
        logger.warning("Unauthorized purge attempt from %s", source_ip)
        return json_response(401, {"error": "Unauthorized"})

    try:
        summary = run_purge(get_kv_bindings(), PurgeOptions.from_config(config))
    except Exception:
        logger.exception("Trash purge failed")
        return json_response(500, {"error": "Internal Server Error"})

    return json_response(200, {"success": True, "summary": summary.model_dump()})
