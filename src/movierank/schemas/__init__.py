"""Pydantic schema definitions for movies, voters and configuration."""

from __future__ import annotations

from .movie import ExternalRating, Movie
from .person import Person, Preference, Preferences, Prompt

__all__ = [
    "ExternalRating",
    "Movie",
    "Person",
    "Preference",
    "Preferences",
    "Prompt",
]
