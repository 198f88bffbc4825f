"""Ranking pipeline assembly and execution."""

from __future__ import annotations

import concurrent.futures
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, Protocol, Sequence, runtime_checkable

import pendulum
import structlog

from .adapters import MetadataAdapter, OMDbAdapter
from .clients import MetadataFetchError
from .core import RankingEngine, ScoredMovie, ranking_ids
from .schemas import Movie, Prompt
from . import __version__


@runtime_checkable
class MetadataSource(Protocol):
    """Anything that can resolve a movie identifier to its metadata."""

    def fetch_movie(self, movie_id: str) -> Movie:
        """Return the movie or raise MetadataFetchError."""


@runtime_checkable
class RankingSubmitter(Protocol):
    def submit_ranking(self, ranking: Sequence[str]) -> float:
        """Submit the ordered identifiers and return the achieved score."""


class CatalogLoadError(ValueError):
    """Raised when catalog loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Movie]):
        super().__init__("Catalog loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Catalog loading failed: {self.errors}"


class LocalCatalog:
    """Metadata source backed by movies already held in memory."""

    def __init__(self, movies: Iterable[Movie]):
        self._movies: dict[str, Movie] = {}
        for movie in movies:
            self._movies.setdefault(movie.movie_id, movie)

    def __len__(self) -> int:
        return len(self._movies)

    def fetch_movie(self, movie_id: str) -> Movie:
        try:
            return self._movies[movie_id]
        except KeyError as exc:
            raise MetadataFetchError("Movie not in catalog", movie_id=movie_id) from exc

    @classmethod
    def load(cls, path: Path, adapter: MetadataAdapter | None = None) -> "LocalCatalog":
        """Load a JSONL catalog, one OMDb or normalised movie per line."""
        adapter = adapter or OMDbAdapter()
        movies: list[Movie] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                try:
                    movies.append(adapter.parse_movie(record))
                except ValueError as exc:
                    errors.append(f"line {idx}: {exc}")
        if errors:
            raise CatalogLoadError(errors, movies)
        return cls(movies)


class PromptLoader:
    """Load prompt documents."""

    def load(self, path: Path) -> Prompt:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid prompt JSON: {exc}") from exc
        return Prompt.model_validate(data)


class MetadataFetcher:
    """Resolve every movie of a prompt concurrently.

    Results come back in the order the identifiers were given. The first failure
    cancels whatever has not started yet and is re-raised, so callers never see
    a partial list.
    """

    def __init__(self, source: MetadataSource, *, max_workers: int = 8) -> None:
        self._source = source
        self._max_workers = max(1, max_workers)
        self._logger = structlog.get_logger(__name__)

    def fetch_all(self, movie_ids: Sequence[str]) -> list[Movie]:
        if not movie_ids:
            return []
        results: list[Movie | None] = [None] * len(movie_ids)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            future_to_index = {
                executor.submit(self._source.fetch_movie, movie_id): idx
                for idx, movie_id in enumerate(movie_ids)
            }
            try:
                for future in concurrent.futures.as_completed(future_to_index):
                    results[future_to_index[future]] = future.result()
            except Exception:
                for pending in future_to_index:
                    pending.cancel()
                self._logger.error("metadata.fetch_aborted", movie_count=len(movie_ids))
                raise
        self._logger.info("metadata.fetched_all", movie_count=len(movie_ids))
        return [movie for movie in results if movie is not None]


class OutputWriter:
    """Persist ranking reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


@dataclass(slots=True)
class RankingResult:
    """Outcome of one pipeline run."""

    ranking: list[str]
    scored: list[ScoredMovie] = field(default_factory=list)
    submission_score: float | None = None


class RankingPipeline:
    """End-to-end ranking orchestrator."""

    def __init__(
        self,
        *,
        engine: RankingEngine,
        fetcher: MetadataFetcher,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._fetcher = fetcher
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        prompt: Prompt,
        output_path: Path | None = None,
        audit_logger: AuditLogger | None = None,
        submitter: RankingSubmitter | None = None,
    ) -> RankingResult:
        movies = self._fetcher.fetch_all(prompt.movies)
        scored = self._engine.rank(movies, prompt.people)
        ranking = ranking_ids(scored)

        self._logger.info(
            "ranking.result",
            movie_count=len(movies),
            person_count=len(prompt.people),
            top=ranking[:3],
        )

        submission_score = submitter.submit_ranking(ranking) if submitter else None
        result = RankingResult(
            ranking=ranking,
            scored=scored,
            submission_score=submission_score,
        )

        if output_path:
            self._writer.write(output_path, self._report(prompt, result))

        if audit_logger:
            audit_logger.append(
                {
                    "timestamp": pendulum.now().to_iso8601_string(),
                    "movies": list(prompt.movies),
                    "people": [person.name for person in prompt.people],
                    "ranking": ranking,
                    "scores": {entry.movie_id: entry.score for entry in scored},
                    "submission_score": submission_score,
                }
            )

        return result

    @staticmethod
    def _report(prompt: Prompt, result: RankingResult) -> dict:
        return {
            "metadata": {
                "movie_count": len(result.scored),
                "person_count": len(prompt.people),
                "submission_score": result.submission_score,
                "timestamp": pendulum.now().to_iso8601_string(),
                "app_version": __version__,
            },
            "ranking": result.ranking,
            "results": [asdict(entry) for entry in result.scored],
        }
