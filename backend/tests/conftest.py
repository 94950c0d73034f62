"""
Pytest configuration and fixtures
"""

import pytest
import os
import sys
from datetime import datetime, timedelta, timezone

# Add backend to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Settings are read at import time; never talk to real AWS from tests
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ["ENVIRONMENT"] = "local"
os.environ["API_DATE_FORMAT"] = "DDMMYYYY"
os.environ["RESERVATION_ID_STRATEGY"] = "random"
os.environ["LOG_FORMAT"] = "text"

import boto3
from fastapi.testclient import TestClient
from moto import mock_aws

from hai.dependencies import get_db_service
from hai.main import app
from hai.repositories.guest import GuestRepository
from hai.repositories.message import MessageRepository
from hai.repositories.property import PropertyRepository
from hai.repositories.reservation import ReservationRepository
from hai.repositories.staff import StaffRepository
from hai.repositories.task import TaskRepository
from hai.scripts.create_tables_local import table_definition
from hai.services.db import DatabaseService

TEST_TABLE = "hai-table-test"


class TickingClock:
    """Deterministic clock; every reading is one second after the previous one"""

    def __init__(self, start=datetime(2025, 11, 1, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def table():
    """Single table with GSI1-GSI3 in an in-memory DynamoDB"""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="us-east-1")
        client.create_table(**table_definition(TEST_TABLE))
        yield boto3.resource("dynamodb", region_name="us-east-1").Table(TEST_TABLE)


@pytest.fixture
def db(table):
    return DatabaseService(table=table)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def property_repo(db, clock):
    return PropertyRepository(db, clock=clock)


@pytest.fixture
def guest_repo(db, clock):
    return GuestRepository(db, clock=clock)


@pytest.fixture
def reservation_repo(db, clock):
    return ReservationRepository(db, clock=clock)


@pytest.fixture
def message_repo(db, clock):
    return MessageRepository(db, clock=clock)


@pytest.fixture
def staff_repo(db, clock):
    return StaffRepository(db, clock=clock)


@pytest.fixture
def task_repo(db, clock):
    return TaskRepository(db, clock=clock)


@pytest.fixture
def client(db):
    """FastAPI test client bound to the in-memory table"""
    app.dependency_overrides[get_db_service] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_property():
    return {"room_number": "101", "room_name": "Ocean Suite", "floor": 2, "room_count": 1}


@pytest.fixture
def sample_guest():
    return {"name": "Ada", "surname": "Lovelace", "email": "ada@example.com", "country": "UK"}
