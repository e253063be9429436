"""Pytest configuration and fixtures."""

import re

import httpx
import pytest
import pytest_asyncio

from user_graph.backend import RestBackend


class FakeBackend:
    """In-memory REST backend served through httpx.MockTransport."""

    def __init__(self):
        self.users = {
            "23": {"id": "23", "firstName": "Bill", "age": 20, "companyId": "1"},
            "47": {"id": "47", "firstName": "Samantha", "age": 21, "companyId": "1"},
            "40": {"id": "40", "firstName": "Alex", "age": 40, "companyId": "2"},
            "41": {"id": "41", "firstName": "Nick", "age": 40},
        }
        self.companies = {
            "1": {"id": "1", "name": "Apple", "description": "iphone"},
            "2": {"id": "2", "name": "Google", "description": "search"},
        }
        # Backend order deliberately differs from id order
        self.company_users = {
            "1": ["47", "23"],
            "2": ["40"],
        }
        self.calls: list[str] = []
        self.failures: dict[str, int] = {}
        self.unreachable: set[str] = set()

    def fail(self, path: str, status: int = 503) -> None:
        """Answer ``path`` with an error status."""
        self.failures[path] = status

    def count(self, path: str) -> int:
        return self.calls.count(path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)

        if path in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if path in self.failures:
            return httpx.Response(self.failures[path], json={"error": "unavailable"})

        match = re.fullmatch(r"/users/([^/]+)", path)
        if match:
            return self._record(self.users.get(match.group(1)))

        match = re.fullmatch(r"/companies/([^/]+)/users", path)
        if match:
            ids = self.company_users.get(match.group(1), [])
            return httpx.Response(200, json=[self.users[user_id] for user_id in ids])

        match = re.fullmatch(r"/companies/([^/]+)", path)
        if match:
            return self._record(self.companies.get(match.group(1)))

        return httpx.Response(404, json={})

    @staticmethod
    def _record(record):
        if record is None:
            return httpx.Response(404, json={})
        return httpx.Response(200, json=record)


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Fresh in-memory backend data."""
    return FakeBackend()


@pytest_asyncio.fixture
async def backend(fake_backend):
    """REST backend client wired to the fake backend."""
    await RestBackend.connect(transport=httpx.MockTransport(fake_backend.handler))

    yield fake_backend

    await RestBackend.disconnect()
