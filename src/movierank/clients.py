"""HTTP clients for the metadata provider and the ranking service."""

from __future__ import annotations

import http.client
import json
from typing import Any, Sequence
from urllib import error, parse, request

import structlog

from .adapters import OMDbAdapter
from .schemas import Movie, Prompt


class ServiceError(RuntimeError):
    """Raised when a remote call fails or answers with an unexpected status."""

    def __init__(self, message: str, *, url: str, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status

    def __str__(self) -> str:
        status = self.status if self.status is not None else "no response"
        return f"{self.args[0]} ({status}) [{self.url}]"


class MetadataFetchError(ServiceError):
    """Raised when metadata for a single movie cannot be retrieved."""

    def __init__(self, message: str, *, movie_id: str, url: str = "", status: int | None = None):
        super().__init__(message, url=url, status=status)
        self.movie_id = movie_id


def _redact(url: str, secrets: Sequence[str] = ()) -> str:
    parts = parse.urlsplit(url)
    path = parts.path
    for secret in secrets:
        if secret:
            path = path.replace(secret, "***")
    query = [
        (key, "***" if key == "apikey" else value)
        for key, value in parse.parse_qsl(parts.query, keep_blank_values=True)
    ]
    return parse.urlunsplit(parts._replace(path=path, query=parse.urlencode(query)))


def _request_json(
    url: str,
    *,
    expected_status: int,
    timeout: float,
    payload: Any = None,
    method: str = "GET",
    secrets: Sequence[str] = (),
) -> Any:
    safe_url = _redact(url, secrets)
    data = None
    headers = {"Accept": "application/json"}
    if payload is not None:
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers["Content-Type"] = "application/json"

    req = request.Request(url, data=data, headers=headers, method=method)
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            status = resp.status
            body = resp.read().decode("utf-8")
    except error.HTTPError as exc:
        raise ServiceError("Unexpected response", url=safe_url, status=exc.code) from exc
    except error.URLError as exc:
        raise ServiceError(f"Request failed: {exc.reason}", url=safe_url) from exc
    except (TimeoutError, OSError, http.client.HTTPException, UnicodeDecodeError) as exc:
        raise ServiceError(f"Request failed: {exc!r}", url=safe_url) from exc

    if status != expected_status:
        raise ServiceError("Unexpected response", url=safe_url, status=status)
    try:
        return json.loads(body) if body else None
    except json.JSONDecodeError as exc:
        raise ServiceError("Response is not valid JSON", url=safe_url, status=status) from exc


class OMDbClient:
    """Fetch movie metadata from the OMDb API."""

    def __init__(
        self,
        base_url: str = "https://www.omdbapi.com/",
        api_key: str | None = None,
        *,
        plot: str = "full",
        timeout: float = 10.0,
        adapter: OMDbAdapter | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._plot = plot
        self._timeout = timeout
        self._adapter = adapter or OMDbAdapter()
        self._logger = structlog.get_logger(__name__)

    def movie_url(self, movie_id: str) -> str:
        query = parse.urlencode({"i": movie_id, "apikey": self._api_key or "", "plot": self._plot})
        return f"{self._base_url}?{query}"

    def fetch_movie(self, movie_id: str) -> Movie:
        url = self.movie_url(movie_id)
        try:
            payload = _request_json(url, expected_status=200, timeout=self._timeout)
        except ServiceError as exc:
            self._logger.warning("metadata.fetch_failed", movie_id=movie_id, status=exc.status)
            raise MetadataFetchError(
                exc.args[0], movie_id=movie_id, url=exc.url, status=exc.status
            ) from exc

        try:
            movie = self._adapter.parse_movie(payload if isinstance(payload, dict) else {})
        except ValueError as exc:
            self._logger.warning("metadata.invalid_payload", movie_id=movie_id, error=str(exc))
            raise MetadataFetchError(str(exc), movie_id=movie_id, url=_redact(url), status=200) from exc

        self._logger.debug("metadata.fetched", movie_id=movie_id, title=movie.title)
        return movie


class RankingServiceClient:
    """Client for the service that hands out prompts and grades rankings."""

    def __init__(self, base_url: str, token: str, *, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._secrets = (token,)
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def get_prompt(self) -> Prompt:
        payload = _request_json(
            f"{self._base_url}/{self._token}/prompt",
            expected_status=200,
            timeout=self._timeout,
            secrets=self._secrets,
        )
        prompt = Prompt.model_validate(payload)
        self._logger.info(
            "prompt.received", movie_count=len(prompt.movies), person_count=len(prompt.people)
        )
        return prompt

    def submit_ranking(self, ranking: Sequence[str]) -> float:
        url = f"{self._base_url}/{self._token}/submit"
        payload = _request_json(
            url,
            expected_status=201,
            timeout=self._timeout,
            payload=list(ranking),
            method="POST",
            secrets=self._secrets,
        )
        try:
            achieved = float(payload)
        except (TypeError, ValueError) as exc:
            raise ServiceError(
                "Submission response is not a number",
                url=_redact(url, self._secrets),
                status=201,
            ) from exc
        self._logger.info("ranking.submitted", score=achieved, movie_count=len(ranking))
        return achieved
