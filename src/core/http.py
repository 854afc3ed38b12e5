"""API Gateway proxy event helpers shared by the HTTP handlers."""

import json
import logging
from typing import Any

from core.errors import AuthenticationError, ErrorCode, InvalidInputError, TripkeeperError, USER_MESSAGES

logger = logging.getLogger(__name__)


def json_response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", "Cache-Control": "no-store"},
        "body": json.dumps(body),
    }


def error_response(error: Exception) -> dict[str, Any]:
    """Map an exception to a client-safe response; internal messages never leak."""
    if isinstance(error, TripkeeperError):
        return json_response(error.status_code, {"error": error.user_message, "code": error.code.value})
    logger.error("Unhandled error: %s", error, exc_info=error)
    return json_response(
        500,
        {"error": USER_MESSAGES[ErrorCode.INTERNAL_ERROR], "code": ErrorCode.INTERNAL_ERROR.value},
    )


def get_user_id(event: dict[str, Any]) -> str:
    """User id placed in the request context by the upstream authorizer."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    user_id = authorizer.get("userId")
    if not user_id:
        raise AuthenticationError("Missing userId in authorizer context")
    return str(user_id)


def get_json_body(event: dict[str, Any]) -> Any:
    body = event.get("body")
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise InvalidInputError(f"Request body is not valid JSON: {e}") from e


def get_path_param(event: dict[str, Any], name: str) -> str | None:
    return (event.get("pathParameters") or {}).get(name)


def get_query_param(event: dict[str, Any], name: str) -> str | None:
    return (event.get("queryStringParameters") or {}).get(name)
