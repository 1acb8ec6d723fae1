"""Entry point for the FastAPI-powered studio API."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .backend import BackendSelector
from .config import settings
from .database import Database
from .errors import (
    AuthenticationError,
    DecodeError,
    NotConfiguredError,
    TransportError,
    ValidationError,
    YamaError,
)
from .models import CatalogEntry
from .services.catalog_service import CatalogService
from .services.gemini import GeminiClient
from .services.repository import CatalogRepository
from .session import AuthSessionManager
from .storage import LocalStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str


class ConnectionSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_url: str | None = Field(default=None, alias="apiUrl")


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    catalog_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0)
        )
    )
    gemini_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0))
    )
    database = Database(settings.database_url)
    await database.create_all()

    store = LocalStore(database.session_factory)
    selector = BackendSelector(store, settings.default_api_url)
    session = AuthSessionManager(selector, store, catalog_http_client)
    repository = CatalogRepository(
        selector,
        session,
        store,
        catalog_http_client,
        read_retry_attempts=settings.read_retry_attempts,
        read_retry_backoff=settings.read_retry_backoff_seconds,
    )
    assistant = GeminiClient(settings, gemini_http_client)
    catalog_service = CatalogService(selector, session, repository, assistant)

    fastapi_app.state.catalog_service = catalog_service
    fastapi_app.state.database = database
    await catalog_service.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Catalog browsing and administration for the YAMA studio",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_service(fastapi_app: FastAPI) -> CatalogService:
    service = getattr(fastapi_app.state, "catalog_service", None)
    if not isinstance(service, CatalogService):
        raise RuntimeError("Catalog service not initialised")
    return service


def _error_status(exc: YamaError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, NotConfiguredError):
        return 403
    if isinstance(exc, (TransportError, DecodeError)):
        return 502
    return 500


def _as_http_error(exc: YamaError) -> HTTPException:
    return HTTPException(status_code=_error_status(exc), detail=str(exc))


def _entries_payload(entries: list[CatalogEntry]) -> list[dict[str, Any]]:
    return [entry.to_payload() for entry in entries]


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/status")
    async def studio_status() -> dict[str, object]:
        return get_catalog_service(fastapi_app).status().to_payload()

    @fastapi_app.get("/api/movies")
    async def list_movies(q: str = "") -> list[dict[str, Any]]:
        service = get_catalog_service(fastapi_app)
        return _entries_payload(service.search(q))

    @fastapi_app.get("/api/home")
    async def home() -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        hero = service.featured()
        return {
            "featured": hero.to_payload() if hero else None,
            "recommended": _entries_payload(service.recommendations()),
            "rows": {
                category: _entries_payload(entries)
                for category, entries in service.rows().items()
            },
        }

    @fastapi_app.get("/api/recommendations")
    async def recommendations() -> list[dict[str, Any]]:
        service = get_catalog_service(fastapi_app)
        return _entries_payload(service.recommendations())

    @fastapi_app.get("/api/list")
    async def saved_list() -> list[dict[str, Any]]:
        service = get_catalog_service(fastapi_app)
        return _entries_payload(list(service.saved))

    @fastapi_app.post("/api/list/{entry_id}")
    async def toggle_saved(entry_id: str) -> dict[str, object]:
        service = get_catalog_service(fastapi_app)
        try:
            saved = service.toggle_saved(entry_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Entry not found") from exc
        return {"id": entry_id, "saved": saved}

    @fastapi_app.get("/api/movies/draft")
    async def draft_movie() -> dict[str, Any]:
        return get_catalog_service(fastapi_app).new_entry().to_payload()

    @fastapi_app.post("/api/movies")
    async def save_movie(payload: dict[str, Any]) -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        try:
            entry = CatalogEntry.model_validate(payload)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        try:
            saved = await service.save(entry)
        except YamaError as exc:
            raise _as_http_error(exc) from exc
        return saved.to_payload()

    @fastapi_app.delete("/api/movies/{entry_id}")
    async def delete_movie(entry_id: str) -> dict[str, str]:
        service = get_catalog_service(fastapi_app)
        try:
            await service.delete(entry_id)
        except YamaError as exc:
            raise _as_http_error(exc) from exc
        return {"status": "deleted"}

    @fastapi_app.post("/api/auth/login")
    async def login(request: LoginRequest) -> dict[str, str]:
        service = get_catalog_service(fastapi_app)
        try:
            token = await service.login(request.email, request.password)
        except YamaError as exc:
            raise _as_http_error(exc) from exc
        return {"token": token}

    @fastapi_app.post("/api/auth/logout")
    async def logout() -> dict[str, str]:
        await get_catalog_service(fastapi_app).logout()
        return {"status": "signed-out"}

    @fastapi_app.put("/api/settings/connection")
    async def update_connection(request: ConnectionSettings) -> dict[str, object]:
        service = get_catalog_service(fastapi_app)
        try:
            status = await service.configure_endpoint(request.api_url)
        except YamaError as exc:
            raise _as_http_error(exc) from exc
        return status.to_payload()

    @fastapi_app.post("/api/synopsis")
    async def suggest_synopsis(payload: dict[str, Any]) -> dict[str, str | None]:
        service = get_catalog_service(fastapi_app)
        try:
            entry = CatalogEntry.model_validate(payload)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if not (entry.title or "").strip():
            raise HTTPException(status_code=400, detail="Enter a title first.")
        return {"synopsis": await service.suggest_synopsis(entry)}


app = create_app()
