"""Pydantic models describing movies and the durable user state."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from .utils import coerce_number, extract_year, random_token

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_POSTER_SIZE = "w780"
PLACEHOLDER_POSTER_URL = "https://via.placeholder.com/500x750/111111/ffffff?text={text}"
URL_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


class Movie(BaseModel):
    """A normalised movie entry.

    Instances are immutable. Fields the recommendation source supplied beyond
    the known schema are kept as extras and survive serialisation.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    movie_id: str
    title: str = ""
    overview: str = ""
    genres: list[str] = Field(default_factory=list)
    vote_average: float = 0.0
    poster_path: str
    release_year: int
    match_score: float = 0.0
    reasoning: str | None = None

    @classmethod
    def from_candidate(
        cls,
        record: object,
        *,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        poster_size: str = DEFAULT_POSTER_SIZE,
        today: date | None = None,
    ) -> "Movie":
        """Coerce an untrusted candidate record into a valid movie."""

        data: dict[str, Any] = {}
        if isinstance(record, Mapping):
            data = {str(key): value for key, value in record.items()}

        title = _coerce_text(data.get("title"))
        raw_id = data.get("movie_id")
        reasoning = data.get("reasoning")

        data.update(
            movie_id=str(raw_id) if raw_id else random_token(),
            title=title,
            overview=_coerce_text(data.get("overview")),
            genres=_coerce_genres(data.get("genres")),
            vote_average=coerce_number(data.get("vote_average")),
            poster_path=resolve_poster(
                data.get("poster_path"),
                title,
                image_base_url=image_base_url,
                poster_size=poster_size,
            ),
            release_year=extract_year(data.get("release_year"), today=today),
            match_score=coerce_number(data.get("match_score")),
            reasoning=None if reasoning is None else str(reasoning),
        )
        return cls.model_validate(data)

    def with_match_score(self, score: float) -> "Movie":
        return self.model_copy(update={"match_score": score})


def resolve_poster(
    value: object,
    title: str,
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    poster_size: str = DEFAULT_POSTER_SIZE,
) -> str:
    """Return an absolute poster URL or a placeholder showing the title."""

    if isinstance(value, str):
        if value.startswith("/"):
            return f"{image_base_url.rstrip('/')}/{poster_size}{value}"
        if URL_SCHEME_RE.match(value):
            return value
    return PLACEHOLDER_POSTER_URL.format(text=quote(title, safe=""))


def normalize_candidates(
    records: Iterable[object],
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    poster_size: str = DEFAULT_POSTER_SIZE,
    today: date | None = None,
) -> list[Movie]:
    """Normalise a batch of raw candidates, one movie per input record."""

    return [
        Movie.from_candidate(
            record,
            image_base_url=image_base_url,
            poster_size=poster_size,
            today=today,
        )
        for record in records
    ]


def _coerce_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _coerce_genres(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(genre) for genre in value if genre is not None and genre != ""]
    return []


class UserProfile(BaseModel):
    """A selectable viewer profile."""

    id: str
    name: str
    avatar: str
    color: str


DEFAULT_PROFILES: tuple[UserProfile, ...] = (
    UserProfile(
        id="1",
        name="Alex",
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=Alex",
        color="#8b5cf6",
    ),
    UserProfile(
        id="2",
        name="Sarah",
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=Sarah",
        color="#ec4899",
    ),
    UserProfile(
        id="3",
        name="Kids",
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=Felix",
        color="#10b981",
    ),
)


class UserData(BaseModel):
    """The durable per-user aggregate persisted between sessions."""

    user: UserProfile | None = None
    profiles: list[UserProfile] = Field(default_factory=list)
    watchlist: list[Movie] = Field(default_factory=list)
    history: list[Movie] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "UserData":
        return cls(
            user=None,
            profiles=[profile.model_copy() for profile in DEFAULT_PROFILES],
            watchlist=[],
            history=[],
        )

    def find_profile(self, profile_id: str) -> UserProfile | None:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None
