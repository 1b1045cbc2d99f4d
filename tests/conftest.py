"""Shared test fixtures: in-memory MongoDB and mocked source APIs."""

from collections.abc import Callable
from datetime import datetime
from itertools import islice

import httpx
import mongomock
import pytest

from lupa.ingestion.client import RateLimitedClient, RateLimiter
from lupa.models.politician import Office, PoliticianObservation

CAMARA = "https://dadosabertos.camara.leg.br/api/v2"
SENADO = "https://legis.senado.leg.br/dadosabertos"


# ============================================================================
# In-memory database
# ============================================================================
# mongomock is synchronous; these wrappers expose the awaitable subset of the
# motor API the sync uses.

class AsyncCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, *args, **kwargs) -> "AsyncCursor":
        self._cursor.sort(*args, **kwargs)
        return self

    async def to_list(self, length=None) -> list:
        if length is None:
            return list(self._cursor)
        return list(islice(self._cursor, length))

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        # Snapshot, so callers may write to the collection while iterating
        for doc in list(self._cursor):
            yield doc


class AsyncCollection:
    def __init__(self, collection):
        self._collection = collection

    def find(self, *args, **kwargs) -> AsyncCursor:
        return AsyncCursor(self._collection.find(*args, **kwargs))

    async def find_one(self, *args, **kwargs):
        return self._collection.find_one(*args, **kwargs)

    async def insert_one(self, *args, **kwargs):
        return self._collection.insert_one(*args, **kwargs)

    async def update_one(self, *args, **kwargs):
        return self._collection.update_one(*args, **kwargs)

    async def count_documents(self, *args, **kwargs):
        return self._collection.count_documents(*args, **kwargs)

    async def create_index(self, *args, **kwargs):
        return self._collection.create_index(*args, **kwargs)

    async def index_information(self):
        return self._collection.index_information()


class AsyncDatabase:
    def __init__(self, database):
        self._database = database

    @property
    def name(self) -> str:
        return self._database.name

    def __getitem__(self, name: str) -> AsyncCollection:
        return AsyncCollection(self._database[name])

    def __getattr__(self, name: str) -> AsyncCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    async def command(self, command: str):
        return {"ok": 1.0}


@pytest.fixture
def db() -> AsyncDatabase:
    """A fresh in-memory database per test."""
    return AsyncDatabase(mongomock.MongoClient()["lupa_test"])


class FakeApi:
    """
    Routes GET requests to canned JSON by path (and optional query).

    Unknown routes answer 404. Every request is recorded.
    """

    def __init__(self):
        self.routes: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, payload: object) -> None:
        """Register a response; `payload` may be a dict, an int status, or a callable(request)."""
        self.routes[url] = payload

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        full = str(request.url)
        path = full.split("?", 1)[0]
        payload = self.routes.get(full, self.routes.get(path))
        if payload is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(payload):
            payload = payload(request)
            if hasattr(payload, "__await__"):
                payload = await payload
        if isinstance(payload, httpx.Response):
            return payload
        if isinstance(payload, int):
            return httpx.Response(payload)
        return httpx.Response(200, json=payload)

    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def make_client(fake_api: FakeApi) -> Callable[..., RateLimitedClient]:
    """Build a RateLimitedClient backed by fake_api (rate limit effectively off)."""
    clients = []

    def factory(rate: float = 1000.0, **kwargs) -> RateLimitedClient:
        client = RateLimitedClient(
            RateLimiter(rate, burst=100),
            transport=httpx.MockTransport(fake_api.handler),
            **kwargs,
        )
        clients.append(client)
        return client

    return factory


def observation(
    office_type: str = "FEDERAL_DEPUTY",
    state: str = "SP",
    start: datetime = datetime(2023, 2, 1),
    in_office: bool = True,
    **fields,
) -> PoliticianObservation:
    """Observation with sensible identity defaults, for sync tests."""
    sphere = "STATE" if office_type == "GOVERNOR" else "FEDERAL"
    fields.setdefault("civil_name", "Maria da Silva")
    fields.setdefault("birth_date", datetime(1970, 5, 17))
    fields.setdefault("name", "Maria")
    return PoliticianObservation(
        office=Office(type=office_type, sphere=sphere, state=state, start_date=start, in_office=in_office),
        **fields,
    )


@pytest.fixture
def make_observation() -> Callable[..., PoliticianObservation]:
    return observation
