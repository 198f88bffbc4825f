"""Core ranking engine components."""

from __future__ import annotations

from .parsing import critic_score, parse_leading_int, parse_year, runtime_to_minutes
from .preferences import PreferenceConfig, PreferenceEvaluator, score
from .ranking import PersonScore, RankingEngine, ScoredMovie, rank_movies, ranking_ids

__all__ = [
    "PersonScore",
    "PreferenceConfig",
    "PreferenceEvaluator",
    "RankingEngine",
    "ScoredMovie",
    "critic_score",
    "parse_leading_int",
    "parse_year",
    "rank_movies",
    "ranking_ids",
    "runtime_to_minutes",
    "score",
]
