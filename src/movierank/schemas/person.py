"""Voter and prompt records."""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Preference(BaseModel, Generic[T]):
    """A target value with a signed weight."""

    value: T
    weight: float

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


class Preferences(BaseModel):
    """Sparse set of criteria held by one person.

    ``None`` marks an absent criterion. A present criterion with weight 0 is kept
    as-is and evaluated like any other.
    """

    after_year: Preference[float] | None = Field(default=None, alias="afterYear")
    before_year: Preference[float] | None = Field(default=None, alias="beforeYear")
    maximum_age_rating: Preference[str] | None = Field(default=None, alias="maximumAgeRating")
    shorter_than: Preference[str] | None = Field(default=None, alias="shorterThan")
    favorite_genre: Preference[str] | None = Field(default=None, alias="favoriteGenre")
    least_favorite_director: Preference[str] | None = Field(
        default=None, alias="leastFavoriteDirector"
    )
    favorite_actors: Preference[list[str]] | None = Field(default=None, alias="favoriteActors")
    favorite_plot_elements: Preference[list[str]] | None = Field(
        default=None, alias="favoritePlotElements"
    )
    minimum_rotten_tomatoes_score: Preference[float] | None = Field(
        default=None, alias="minimumRottenTomatoesScore"
    )

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    def present(self) -> Iterator[tuple[str, Preference]]:
        """Yield ``(criterion, preference)`` for every criterion that is set."""
        for name, field in type(self).model_fields.items():
            preference = getattr(self, name)
            if preference is not None:
                yield field.alias or name, preference


class Person(BaseModel):
    """A voter. The name is for display only."""

    name: str = ""
    preferences: Preferences = Field(default_factory=Preferences)

    model_config = ConfigDict(extra="ignore", frozen=True)


class Prompt(BaseModel):
    """Movies to rank and the roster voting on them."""

    movies: list[str] = Field(default_factory=list)
    people: list[Person] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
