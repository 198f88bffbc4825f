"""Per-person preference scoring of a single movie."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..schemas import Movie, Person, Preference
from .parsing import critic_score, parse_year, runtime_to_minutes


@dataclass
class PreferenceConfig:
    """Settings shared by every criterion."""

    rating_source: str = "Rotten Tomatoes"
    actor_separator: str = ", "


def after_year(movie: Movie, preference: Preference[float]) -> float:
    year = parse_year(movie)
    if year is not None and year >= preference.value:
        return preference.weight
    return 0.0


def before_year(movie: Movie, preference: Preference[float]) -> float:
    year = parse_year(movie)
    if year is not None and year < preference.value:
        return preference.weight
    return 0.0


def maximum_age_rating(movie: Movie, preference: Preference[str]) -> float:
    # Plain string order, not an ordinal scale of certificates.
    if movie.rated <= preference.value:
        return preference.weight
    return 0.0


def shorter_than(movie: Movie, preference: Preference[str]) -> float:
    if runtime_to_minutes(movie.runtime) < runtime_to_minutes(preference.value):
        return preference.weight
    return 0.0


def favorite_genre(movie: Movie, preference: Preference[str]) -> float:
    # Only the movie side is lowercased; targets are expected in lowercase.
    if preference.value in movie.genre.lower():
        return preference.weight
    return 0.0


def least_favorite_director(movie: Movie, preference: Preference[str]) -> float:
    if movie.director == preference.value:
        return -preference.weight
    return 0.0


def favorite_actors(
    movie: Movie,
    preference: Preference[list[str]],
    *,
    separator: str = ", ",
) -> float:
    """Split the weight across the matching cast members.

    The weight is divided by the number of matches, so one favourite actor earns
    the full weight and several share it. No match contributes nothing.
    """
    favorites = set(preference.value)
    matches = sum(1 for actor in movie.cast(separator) if actor in favorites)
    if matches == 0:
        return 0.0
    return preference.weight / matches


def favorite_plot_elements(movie: Movie, preference: Preference[list[str]]) -> float:
    plot = movie.plot.lower()
    matches = sum(1 for element in preference.value if element.lower() in plot)
    return matches * preference.weight


def minimum_critic_score(
    movie: Movie,
    preference: Preference[float],
    *,
    source: str = "Rotten Tomatoes",
) -> float:
    score = critic_score(movie, source)
    if score is not None and score >= preference.value:
        return preference.weight
    return 0.0


class PreferenceEvaluator:
    """Score a movie against the criteria of one person."""

    def __init__(self, *, config: PreferenceConfig | None = None) -> None:
        self._config = config or PreferenceConfig()
        self._criteria: dict[str, Callable[[Movie, Preference], float]] = {
            "afterYear": after_year,
            "beforeYear": before_year,
            "maximumAgeRating": maximum_age_rating,
            "shorterThan": shorter_than,
            "favoriteGenre": favorite_genre,
            "leastFavoriteDirector": least_favorite_director,
            "favoriteActors": self._favorite_actors,
            "favoritePlotElements": favorite_plot_elements,
            "minimumRottenTomatoesScore": self._minimum_critic_score,
        }

    @property
    def config(self) -> PreferenceConfig:
        return self._config

    def contributions(self, movie: Movie, person: Person) -> dict[str, float]:
        """Return the contribution of every criterion the person has set.

        Absent criteria are left out entirely; present but unsatisfied criteria
        map to 0.0.
        """
        return {
            name: float(self._criteria[name](movie, preference))
            for name, preference in person.preferences.present()
        }

    def score(self, movie: Movie, person: Person) -> float:
        return sum(self.contributions(movie, person).values(), 0.0)

    def _favorite_actors(self, movie: Movie, preference: Preference[list[str]]) -> float:
        return favorite_actors(movie, preference, separator=self._config.actor_separator)

    def _minimum_critic_score(self, movie: Movie, preference: Preference[float]) -> float:
        return minimum_critic_score(movie, preference, source=self._config.rating_source)


_DEFAULT_EVALUATOR = PreferenceEvaluator()


def score(movie: Movie, person: Person) -> float:
    """Score ``movie`` for ``person`` with the default settings."""
    return _DEFAULT_EVALUATOR.score(movie, person)
