"""Catalog repository behaviour against the remote catalog service."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from yama.backend import BackendSelector
from yama.errors import DecodeError, NotConfiguredError, TransportError
from yama.models import CatalogEntry
from yama.services.repository import CatalogRepository
from yama.session import AuthSessionManager
from yama.storage import TOKEN_SLOT

from conftest import MemoryStore

pytestmark = pytest.mark.anyio

BASE = "https://backend.example.com/api"
REMOTE_ID = "65f0c2a9e4b0a1d2c3f4e5a6"

Handler = Callable[[httpx.Request], httpx.Response]


async def _build(
    handler: Handler,
    *,
    token: str | None = "jwt-token",
    read_retry_attempts: int = 0,
    base: str = BASE,
) -> tuple[CatalogRepository, httpx.AsyncClient]:
    store = MemoryStore()
    if token:
        store.slots[TOKEN_SLOT] = token
    selector = BackendSelector(store, base)
    await selector.load()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    session = AuthSessionManager(selector, store, client)
    await session.load()
    repository = CatalogRepository(
        selector,
        session,
        store,
        client,
        read_retry_attempts=read_retry_attempts,
        read_retry_backoff=0,
    )
    return repository, client


async def test_list_all_fetches_movies() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=[
                {"id": REMOTE_ID, "title": "Dune", "type": "movie"},
                {"id": "bad", "type": "podcast"},
            ],
        )

    repository, client = await _build(handler)
    async with client:
        entries = await repository.list_all()

    assert [entry.title for entry in entries] == ["Dune"]
    assert requests[0].method == "GET"
    assert str(requests[0].url) == f"{BASE}/movies"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"error": "unavailable"}),
        httpx.Response(200, json={"movies": []}),
        httpx.Response(200, text="<html>oops</html>"),
    ],
)
async def test_list_all_degrades_to_empty(response: httpx.Response) -> None:
    repository, client = await _build(lambda _: response)
    async with client:
        assert await repository.list_all() == []


async def test_list_all_swallows_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    repository, client = await _build(handler)
    async with client:
        assert await repository.list_all() == []


async def test_list_all_retries_transient_failures_when_enabled() -> None:
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise httpx.ConnectError("blip", request=request)
        return httpx.Response(200, json=[{"id": REMOTE_ID, "title": "Dune"}])

    repository, client = await _build(handler, read_retry_attempts=2)
    async with client:
        entries = await repository.list_all()

    assert attempts == 3
    assert len(entries) == 1


async def test_save_new_entry_posts_with_bearer_token() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json={**body, "id": REMOTE_ID})

    repository, client = await _build(handler)
    async with client:
        saved = await repository.save(CatalogEntry(title="Dune", type="movie"))

    assert saved.id == REMOTE_ID
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE}/movies"
    assert request.headers["Authorization"] == "Bearer jwt-token"
    assert json.loads(request.content)["title"] == "Dune"


async def test_save_short_client_id_is_created() -> None:
    methods: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(201, json={"id": REMOTE_ID, "title": "Draft"})

    repository, client = await _build(handler)
    async with client:
        await repository.save(CatalogEntry(id=12345, title="Draft"))

    assert methods == ["POST"]


async def test_save_existing_entry_puts_full_body() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=json.loads(request.content))

    repository, client = await _build(handler)
    async with client:
        saved = await repository.save(
            CatalogEntry(id=REMOTE_ID, title="Dune", genre="Drama")
        )

    assert saved.genre == "Drama"
    assert requests[0].method == "PUT"
    assert str(requests[0].url) == f"{BASE}/movies/{REMOTE_ID}"
    body = json.loads(requests[0].content)
    assert body["id"] == REMOTE_ID
    assert "seasons" in body


async def test_save_failure_is_raised() -> None:
    repository, client = await _build(lambda _: httpx.Response(500, text="boom"))
    async with client:
        with pytest.raises(TransportError) as excinfo:
            await repository.save(CatalogEntry(title="Dune"))
    assert excinfo.value.status_code == 500


async def test_save_transport_error_is_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    repository, client = await _build(handler)
    async with client:
        with pytest.raises(TransportError):
            await repository.save(CatalogEntry(title="Dune"))


async def test_save_malformed_response_raises_decode_error() -> None:
    repository, client = await _build(lambda _: httpx.Response(200, json=["nope"]))
    async with client:
        with pytest.raises(DecodeError):
            await repository.save(CatalogEntry(title="Dune"))


async def test_save_without_token_is_rejected_before_any_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("No request should be issued without a token")

    repository, client = await _build(handler, token=None)
    async with client:
        with pytest.raises(NotConfiguredError):
            await repository.save(CatalogEntry(title="Dune"))


async def test_remove_sends_authorised_delete() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(204)

    repository, client = await _build(handler)
    async with client:
        await repository.remove(REMOTE_ID)

    assert requests[0].method == "DELETE"
    assert str(requests[0].url) == f"{BASE}/movies/{REMOTE_ID}"
    assert requests[0].headers["Authorization"] == "Bearer jwt-token"


async def test_remove_missing_remote_entry_is_noop() -> None:
    repository, client = await _build(lambda _: httpx.Response(404))
    async with client:
        await repository.remove(REMOTE_ID)


async def test_remove_failure_is_raised() -> None:
    repository, client = await _build(lambda _: httpx.Response(401))
    async with client:
        with pytest.raises(TransportError):
            await repository.remove(REMOTE_ID)


async def test_malformed_endpoint_degrades_reads_and_fails_writes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"No request should reach {request.url}")

    repository, client = await _build(
        handler, base="http://backend.example.com:abc/api"
    )
    async with client:
        assert await repository.list_all() == []
        with pytest.raises(TransportError):
            await repository.save(CatalogEntry(title="Dune"))
        with pytest.raises(TransportError):
            await repository.remove(REMOTE_ID)
