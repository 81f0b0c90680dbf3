"""
Test configuration and fixtures
"""

import json
import os
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# keep tests independent from a developer .env
os.environ["LISTVIEW_API_ENDPOINT"] = "https://example.my.test"
os.environ["LISTVIEW_INSTANCE_URL"] = "https://example.lightning.test"
os.environ["LISTVIEW_LOG_LEVEL"] = "WARNING"


CONTACT_FIELDS = [
    {"label": "Full Name", "value": "Name", "type": "STRING"},
    {"label": "Email", "value": "Email", "type": "EMAIL"},
    {"label": "Phone", "value": "Phone", "type": "PHONE"},
    {"label": "Email Opt Out", "value": "HasOptedOutOfEmail", "type": "BOOLEAN"},
    {"label": "Account ID", "value": "AccountId", "type": "REFERENCE"},
    {"label": "Mailing St. (Line 1)", "value": "MailingStreet", "type": "STRING"},
]

ACCOUNT_FIELDS = [
    {"label": "Account Name", "value": "Name", "type": "STRING"},
    {"label": "Industry", "value": "Industry", "type": "PICKLIST"},
    {"label": "Annual Revenue", "value": "AnnualRevenue", "type": "CURRENCY"},
]

OPPORTUNITY_FIELDS = [
    {"label": "Opportunity Name", "value": "Name", "type": "STRING"},
    {"label": "Stage", "value": "StageName", "type": "PICKLIST"},
    {"label": "Amount", "value": "Amount", "type": "CURRENCY"},
]


def native_catalog() -> str:
    """catalog in the directory's native shape: JSON triples with JSON field lists"""
    return json.dumps(
        [
            ["Opportunity", "Opportunity", json.dumps(OPPORTUNITY_FIELDS)],
            ["Contact", "Contact", json.dumps(CONTACT_FIELDS)],
            ["account", "Account", json.dumps(ACCOUNT_FIELDS)],
        ]
    )


class FakeDirectory:
    def __init__(self, catalog: Any = None, error: Exception | None = None):
        self.catalog = native_catalog() if catalog is None else catalog
        self.error = error
        self.calls = 0

    async def fetch_catalog(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.catalog


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[Any] = []

    def show(self, notification: Any) -> None:
        self.notifications.append(notification)


class RecordingNavigator:
    def __init__(self) -> None:
        self.targets: list[Any] = []

    def open(self, target: Any) -> None:
        self.targets.append(target)


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def endpoint():
    """creation endpoint returning a fixed identifier"""
    mock = AsyncMock()
    mock.create.return_value = "00BXX0000001"
    return mock


@pytest_asyncio.fixture
async def index(directory):
    """loaded schema index with instant debounce windows"""
    from listview.schema_index import SchemaIndex

    idx = SchemaIndex(directory, pause_ms=0, filter_ms=0)
    await idx.load()
    return idx


@pytest_asyncio.fixture
async def builder(directory):
    """builder attached before load, with Contact selected"""
    from listview.builder import ConfigurationBuilder
    from listview.schema_index import SchemaIndex

    idx = SchemaIndex(directory, pause_ms=0, filter_ms=0)
    b = ConfigurationBuilder(idx)
    await idx.load()
    idx.select_entity("Contact")
    return b
