import asyncio
from typing import Any, List

import pytest

from assistant_admin.errors import CacheUnavailable, TransportFailure
from assistant_admin.remote.base import RemoteResponse, SettingsAuthority, TestBackend
from assistant_admin.storage import KeyValueStore, LocalCache, MemoryKeyValueStore


def json_response(status_code: int, body: Any = None, reason: str = "") -> RemoteResponse:
    return RemoteResponse(status_code=status_code, reason=reason, body=body, has_body=body is not None)


class FakeAuthority(SettingsAuthority):
    """Scripted authority; each entry is a RemoteResponse or an exception to raise."""

    def __init__(self, fetch=None, persist=None):
        self.fetch_script: List[Any] = list(fetch or [])
        self.persist_script: List[Any] = list(persist or [])
        self.fetch_calls = 0
        self.persisted: List[dict] = []

    @staticmethod
    def _next(script):
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def fetch(self):
        self.fetch_calls += 1
        return self._next(self.fetch_script)

    async def persist(self, record):
        self.persisted.append(record.to_dict())
        return self._next(self.persist_script)


class FakeBackend(TestBackend):
    def __init__(self, response=None):
        self.response = response if response is not None else json_response(200, {"output": "hi there"})
        self.calls: List[tuple] = []

    async def generate(self, prompt, settings):
        self.calls.append((prompt, settings.to_dict()))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class BrokenStore(KeyValueStore):
    """Storage that is switched off, like a browser with storage disabled."""

    def get(self, key):
        raise CacheUnavailable("storage disabled")

    def set(self, key, value):
        raise CacheUnavailable("storage disabled")

    def remove(self, key):
        raise CacheUnavailable("storage disabled")


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def cache(kv):
    return LocalCache(kv)


@pytest.fixture
def offline():
    return FakeAuthority(fetch=[TransportFailure("connection refused")],
                         persist=[TransportFailure("connection refused")])
