"""Shared test fixtures for Tripkeeper."""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (DynamoDB Local doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class FakeClock:
    """Callable UTC clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_store():
    """A fresh in-memory KV store per test; nothing leaks between tests."""
    from core.kv import InMemoryKVStore

    return InMemoryKVStore()


@pytest.fixture
def trip_service(memory_store, clock):
    from core.services.resources import make_service

    return make_service("trip", memory_store, clock=clock)


@pytest.fixture
def mileage_service(memory_store, clock):
    from core.services.resources import make_service

    return make_service("mileage", memory_store, clock=clock)


@pytest.fixture
def expense_service(memory_store, clock):
    from core.services.resources import make_service

    return make_service("expense", memory_store, clock=clock)


# DynamoDB fixtures
@pytest.fixture
def dynamodb_client():
    """Provide a DynamoDB client for integration tests."""
    import boto3
    from core.config import get_config

    config = get_config()

    return boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint or "http://localhost:8000",
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )


@pytest.fixture
def trips_kv(dynamodb_client):
    """Provide the trips KV table as a store; removes every key it wrote afterwards."""
    from core.config import get_config
    from core.kv import DynamoKVStore, KeyListing

    store = DynamoKVStore(dynamodb_client, get_config().trips_table or "TripsKV")
    yield store

    # Cleanup: scan and delete all items created during test
    for name in list(KeyListing(store, "trip:it-")):
        store.delete(name)
