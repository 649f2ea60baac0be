"""Entry point for the FastAPI-powered Moodflix service."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import __version__
from .config import settings
from .database import Database
from .models import Movie
from .moods import MOODS, TRENDING_SEARCHES, Mood
from .services.openrouter import OpenRouterClient
from .services.session import LibraryView, MoodflixService, ResultsView
from .storage import UserDataStore
from .views import ALL_GENRES, ResultFilters, SortOption

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class SearchRequest(BaseModel):
    query: str


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    openrouter_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.openrouter_api_url),
            timeout=httpx.Timeout(60.0, connect=10.0),
        )
    )
    database = Database(settings.database_url)
    await database.create_all()

    store = UserDataStore(database.session_factory, settings.storage_key)
    source = OpenRouterClient(settings, openrouter_http)
    service = MoodflixService(settings, source, store)
    await service.start()

    fastapi_app.state.moodflix_service = service
    fastapi_app.state.database = database

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Mood-based movie recommendations powered by OpenRouter",
        version=__version__,
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_moodflix_service(app: FastAPI) -> MoodflixService:
    service = getattr(app.state, "moodflix_service", None)
    if not isinstance(service, MoodflixService):
        raise RuntimeError("Moodflix service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    def _service() -> MoodflixService:
        return get_moodflix_service(fastapi_app)

    def _resolve(service: MoodflixService, movie_id: str) -> Movie:
        movie = service.resolve_movie(movie_id)
        if movie is None:
            raise HTTPException(status_code=404, detail=f"Unknown movie: {movie_id}")
        return movie

    def _profiles_payload(service: MoodflixService) -> dict[str, Any]:
        data = service.data
        return {
            "user": data.user.model_dump() if data.user else None,
            "profiles": [profile.model_dump() for profile in data.profiles],
        }

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/moods")
    async def list_moods() -> list[dict[str, object]]:
        return [definition.to_payload() for definition in MOODS]

    @fastapi_app.get("/api/trending")
    async def trending_searches() -> list[str]:
        return list(TRENDING_SEARCHES)

    @fastapi_app.get("/api/profiles")
    async def list_profiles() -> dict[str, Any]:
        return _profiles_payload(_service())

    @fastapi_app.post("/api/session/guest")
    async def login_as_guest() -> dict[str, Any]:
        service = _service()
        await service.login_as_guest()
        return _profiles_payload(service)

    @fastapi_app.post("/api/session/profiles/{profile_id}")
    async def select_profile(profile_id: str) -> dict[str, Any]:
        service = _service()
        try:
            await service.select_profile(profile_id)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _profiles_payload(service)

    @fastapi_app.post("/api/session/logout")
    async def logout() -> dict[str, Any]:
        service = _service()
        await service.logout()
        return _profiles_payload(service)

    @fastapi_app.post("/api/recommendations/{mood}")
    async def recommend(mood: Mood) -> ResultsView:
        service = _service()
        await service.recommend_for_mood(mood)
        return service.results()

    @fastapi_app.post("/api/search")
    async def search(request: SearchRequest) -> ResultsView:
        service = _service()
        await service.search(request.query)
        return service.results()

    @fastapi_app.get("/api/results")
    async def results(
        genre: str = ALL_GENRES,
        sort: SortOption = "match",
        hide_watched: bool = False,
    ) -> ResultsView:
        filters = ResultFilters(genre=genre, sort_by=sort, hide_watched=hide_watched)
        return _service().results(filters)

    @fastapi_app.get("/api/library")
    async def library(sort: SortOption = "match") -> LibraryView:
        return _service().library_view(sort)

    @fastapi_app.post("/api/watchlist/{movie_id}")
    async def toggle_watchlist(movie_id: str) -> dict[str, Any]:
        service = _service()
        movie = _resolve(service, movie_id)
        in_watchlist = await service.toggle_watchlist(movie)
        return {"movie_id": movie_id, "in_watchlist": in_watchlist}

    @fastapi_app.delete("/api/watchlist/{movie_id}")
    async def remove_from_watchlist(movie_id: str) -> dict[str, Any]:
        removed = await _service().remove_from_watchlist(movie_id)
        return {"movie_id": movie_id, "removed": removed}

    @fastapi_app.post("/api/history/{movie_id}")
    async def toggle_watched(movie_id: str) -> dict[str, Any]:
        service = _service()
        movie = _resolve(service, movie_id)
        watched = await service.toggle_watched(movie)
        return {"movie_id": movie_id, "watched": watched}

    @fastapi_app.delete("/api/history")
    async def clear_history() -> dict[str, Any]:
        service = _service()
        await service.clear_history()
        return {"history": []}


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
