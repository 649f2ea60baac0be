"""Mood definitions used to parameterise recommendation requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Mood = Literal["sad", "excited", "happy", "curious"]


@dataclass(frozen=True)
class MoodDefinition:
    """Describes one of the selectable moods."""

    key: Mood
    label: str
    genres: tuple[str, ...]
    keywords: tuple[str, ...]

    def to_payload(self) -> dict[str, object]:
        return {
            "key": self.key,
            "label": self.label,
            "genres": list(self.genres),
            "keywords": list(self.keywords),
        }


MOODS: tuple[MoodDefinition, ...] = (
    MoodDefinition(
        key="sad",
        label="SAD",
        genres=("Drama", "Romance"),
        keywords=("emotional", "tragic", "heartbreak", "loss", "grief"),
    ),
    MoodDefinition(
        key="excited",
        label="EXCITED",
        genres=("Action", "Thriller", "Adventure"),
        keywords=("chase", "fight", "explosion", "adrenaline", "danger"),
    ),
    MoodDefinition(
        key="happy",
        label="HAPPY",
        genres=("Comedy", "Animation", "Family", "Musical"),
        keywords=("funny", "joy", "upbeat", "cheerful", "heartwarming"),
    ),
    MoodDefinition(
        key="curious",
        label="CURIOUS",
        genres=("Science Fiction", "Mystery", "Documentary", "History"),
        keywords=("mystery", "discovery", "mind-bending", "twist", "unknown"),
    ),
)

MOOD_KEYS: tuple[str, ...] = tuple(definition.key for definition in MOODS)

TRENDING_SEARCHES: tuple[str, ...] = (
    "Mind-bending sci-fi",
    "80s high school comedies",
    "Dark psychological thrillers",
    "Animated movies for adults",
    "Atmospheric horror",
    "Indie coming-of-age",
)


def get_mood(key: str) -> MoodDefinition:
    """Return the definition for ``key`` or raise ``KeyError``."""

    for definition in MOODS:
        if definition.key == key:
            return definition
    raise KeyError(key)
