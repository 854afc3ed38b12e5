"""Lazy-initialized boto3 clients and KV bindings — reused across warm Lambda invocations."""

from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config as BotoConfig

from core.config import get_config
from core.kv import KVStore, build_kv_bindings

# Store calls must fail fast; a timeout surfaces as StorageUnavailableError.
_BOTO_CONFIG = BotoConfig(connect_timeout=3, read_timeout=5, retries={"max_attempts": 3, "mode": "standard"})


@lru_cache(maxsize=1)
def get_dynamo_client() -> Any:
    config = get_config()
    return boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint,
        region_name=config.aws_region,
        config=_BOTO_CONFIG,
    )


def get_kv_bindings() -> dict[str, KVStore | None]:
    return build_kv_bindings(get_config(), get_dynamo_client())
