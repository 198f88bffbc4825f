"""Movie metadata records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExternalRating(BaseModel):
    """A single rating published by an external source."""

    source: str = ""
    value: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Movie(BaseModel):
    """Provider-neutral movie document.

    Every field is kept as the raw string the metadata provider returned; numeric
    comparisons parse lazily so malformed values never fail validation.
    """

    movie_id: str = Field(alias="imdbID")
    title: str = ""
    year: str = ""
    rated: str = ""
    runtime: str = ""
    genre: str = ""
    director: str = ""
    actors: str = ""
    plot: str = ""
    ratings: list[ExternalRating] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    def cast(self, separator: str = ", ") -> list[str]:
        """Return the billed actors in order."""
        if not self.actors:
            return []
        return self.actors.split(separator)
