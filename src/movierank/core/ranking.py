"""Ranking of movies by the combined preferences of every person."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import structlog

from ..schemas import Movie, Person
from .preferences import PreferenceEvaluator


@dataclass(slots=True)
class PersonScore:
    """One person's assessment of one movie."""

    name: str
    score: float
    criteria: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class ScoredMovie:
    """Aggregate score of a movie across the whole roster."""

    movie_id: str
    score: float
    title: str = ""
    breakdown: list[PersonScore] = field(default_factory=list)


class RankingEngine:
    """Applies the preference evaluator to every (movie, person) pair."""

    def __init__(self, evaluator: PreferenceEvaluator | None = None) -> None:
        self._evaluator = evaluator or PreferenceEvaluator()
        self._logger = structlog.get_logger(__name__)

    @property
    def evaluator(self) -> PreferenceEvaluator:
        return self._evaluator

    def score_movie(self, movie: Movie, people: Iterable[Person]) -> ScoredMovie:
        """Score one movie for the whole roster.

        The aggregate is a single running total in roster and criterion order,
        not a sum of per-person subtotals.
        """
        total = 0.0
        breakdown: list[PersonScore] = []
        for person in people:
            criteria = self._evaluator.contributions(movie, person)
            for contribution in criteria.values():
                total += contribution
            breakdown.append(
                PersonScore(
                    name=person.name,
                    score=sum(criteria.values(), 0.0),
                    criteria=criteria,
                )
            )
        return ScoredMovie(
            movie_id=movie.movie_id,
            score=total,
            title=movie.title,
            breakdown=breakdown,
        )

    def rank(self, movies: Iterable[Movie], people: Sequence[Person]) -> list[ScoredMovie]:
        """Return one entry per movie, highest score first.

        Movies with equal scores keep their input order.
        """
        scored = [self.score_movie(movie, people) for movie in movies]
        for entry in scored:
            self._logger.debug("ranking.scored", movie_id=entry.movie_id, score=entry.score)
        return sorted(scored, key=lambda entry: -entry.score)


def rank_movies(movies: Iterable[Movie], people: Sequence[Person]) -> list[ScoredMovie]:
    """Rank ``movies`` with the default evaluator."""
    return RankingEngine().rank(movies, people)


def ranking_ids(scored: Iterable[ScoredMovie]) -> list[str]:
    """Strip scores, keeping the ranked movie identifiers."""
    return [entry.movie_id for entry in scored]
