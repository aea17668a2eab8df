import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, List

import httpx
import pytest

# Ensure repository root is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Default test environment
os.environ.setdefault("API_BASE_URL", "http://api.test/v1")
os.environ.setdefault("LOG_LEVEL", "debug")

from jsend_client.client.base import BaseService  # noqa: E402

BASE_URL = "http://api.test/v1"


class UserService(BaseService):
    """Concrete client used by the tests, shaped like a real API wrapper."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("users", **kwargs)

    async def get_user(self, user_id: int, data_type: Any = None):
        return await self._get(str(user_id), data_type=data_type)

    async def search(self, params: Any = None):
        return await self._get("search", params)

    async def lookup(self, url: str, params: Any = None):
        return await self._get_external(url, params)

    async def create(self, payload: Any = None):
        return await self._post("", payload)

    async def update(self, user_id: int, payload: Any = None):
        return await self._put(str(user_id), payload)

    async def remove(self, user_id: int, params: Any = None):
        return await self._delete(str(user_id), params)


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, json: Any = None, content: bytes | None = None) -> None:
        self.status_code = status_code
        self.json = json
        self.content = content
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        if self.json is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _run(handler: Callable[[httpx.Request], httpx.Response], call: Callable[[UserService], Awaitable[Any]]) -> Any:
    async def _main() -> Any:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = UserService(base_url=BASE_URL, client=client)
            return await call(service)

    return asyncio.run(_main())


@pytest.fixture
def run_service():
    return _run
