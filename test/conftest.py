import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest

from utho_storage import UthoObjectStorage

TEST_TOKEN = "test-bearer-token"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"


class RecordingAPI:
    """Stand-in for the Utho API: records requests and replays queued responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | type[Exception]] = []

    def queue(
        self,
        status_code: int = 200,
        json_body: Any | None = None,
        text: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if json_body is not None:
            response = httpx.Response(status_code, json=json_body, headers=headers)
        elif text is not None:
            response = httpx.Response(status_code, text=text, headers=headers)
        else:
            response = httpx.Response(status_code, headers=headers)
        self._responses.append(response)

    def queue_error(self, exc_type: type[Exception]) -> None:
        self._responses.append(exc_type)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={"status": "success"})
        item = self._responses.pop(0)
        if isinstance(item, type):
            raise item("simulated transport failure", request=request)
        return item

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def api() -> RecordingAPI:
    return RecordingAPI()


@pytest.fixture
def transport(api: RecordingAPI) -> httpx.MockTransport:
    return httpx.MockTransport(api.handler)


@pytest.fixture
def make_client(transport: httpx.MockTransport) -> Callable[..., UthoObjectStorage]:
    def factory(**options: Any) -> UthoObjectStorage:
        return UthoObjectStorage(transport=transport, **options)

    return factory


@pytest.fixture
async def client(make_client: Callable[..., UthoObjectStorage]) -> AsyncGenerator[UthoObjectStorage]:
    storage = make_client(token=TEST_TOKEN)
    yield storage
    await storage.close()


@pytest.fixture
async def key_client(make_client: Callable[..., UthoObjectStorage]) -> AsyncGenerator[UthoObjectStorage]:
    storage = make_client(access_key=TEST_ACCESS_KEY, secret_key=TEST_SECRET_KEY)
    yield storage
    await storage.close()
