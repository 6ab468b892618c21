import asyncio
import json
import re
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from retail_panel import create_app
from retail_panel.models import Product


class FakeResource:
    """In-memory stand-in for a ResourceClient."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.fail_with = None
        self.gate = None
        self.created = []
        self.deleted = []
        self.list_calls = 0

    async def list(self):
        self.list_calls += 1
        if self.fail_with:
            raise self.fail_with
        return list(self.records)

    async def create(self, payload):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with:
            raise self.fail_with
        self.created.append(payload)
        record = dict(payload, id=len(self.created), status='PENDING',
                      created_at='2026-10-19T10:00:00Z')
        self.records.append(record)
        return record

    async def delete(self, item_id):
        if self.fail_with:
            raise self.fail_with
        self.deleted.append(item_id)
        self.records = [r for r in self.records if r.get('id') != item_id]


class FakeApi:
    """Same shape as PanelApiClient, backed by FakeResource objects."""

    def __init__(self):
        self.products = FakeResource([
            {'id': 1, 'name': 'Coffee Beans', 'price': '10.00'},
            {'id': 2, 'name': 'Paper Filters', 'price': '5.00'},
        ])
        self.stores = FakeResource([
            {'store_id': 7, 'store_location': 'Downtown'},
            {'id': 8},
        ])
        self.users = FakeResource([
            {'user_id': 3, 'username': 'mara'},
            {'id': 4, 'name': 'Jon'},
        ])
        self.orders = FakeResource()


@pytest.fixture
def fake_api():
    """Service-level fake of the backend client."""
    return FakeApi()


@pytest.fixture
def products():
    """Catalog with the two products used across the tests."""
    return (
        Product(id=1, name='Coffee Beans', price=Decimal('10.00')),
        Product(id=2, name='Paper Filters', price=Decimal('5.00')),
    )


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


class InMemoryBackend:
    """Tiny REST backend answering the panel's httpx requests."""

    ITEM_URL = re.compile(r'^/api/(?P<resource>\w+)/(?P<item_id>\d+)/$')
    LIST_URL = re.compile(r'^/api/(?P<resource>\w+)/$')

    def __init__(self):
        self.data = {
            'products': [
                {'id': 1, 'name': 'Coffee Beans', 'price': '10.00'},
                {'id': 2, 'name': 'Paper Filters', 'price': '5.00'},
            ],
            'stores': [{'store_id': 7, 'store_location': 'Downtown'}],
            'users': [{'user_id': 3, 'username': 'mara'}],
            'orders': [],
        }
        self.failing = set()
        self.requests = []
        self._next_id = 100

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        path = request.url.path

        match = self.ITEM_URL.match(path)
        if match:
            resource, item_id = match['resource'], int(match['item_id'])
            if (request.method, resource) in self.failing:
                return httpx.Response(500, json={'detail': 'boom'})
            records = self.data.get(resource, [])
            remaining = [r for r in records if r.get('id') != item_id]
            if len(remaining) == len(records):
                return httpx.Response(404, json={'detail': 'not found'})
            self.data[resource] = remaining
            return httpx.Response(204)

        match = self.LIST_URL.match(path)
        if not match or match['resource'] not in self.data:
            return httpx.Response(404, json={'detail': 'not found'})

        resource = match['resource']
        if (request.method, resource) in self.failing:
            return httpx.Response(500, json={'detail': 'boom'})

        if request.method == 'GET':
            return httpx.Response(200, json=self.data[resource])

        if request.method == 'POST':
            body = json.loads(request.content)
            self._next_id += 1
            record = dict(
                body,
                id=self._next_id,
                status='PENDING',
                created_at=datetime(2026, 10, 19, tzinfo=timezone.utc).isoformat(),
            )
            self.data[resource].append(record)
            return httpx.Response(201, json=record)

        return httpx.Response(405)

    def posted(self, resource):
        return [r for r in self.requests if r == ('POST', f'/api/{resource}/')]


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def app(backend):
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    app.config['API_BASE_URL'] = 'http://backend.test/api'
    app.config['API_TRANSPORT'] = httpx.MockTransport(backend.handle)
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
