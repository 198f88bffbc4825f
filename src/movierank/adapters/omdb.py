"""OMDb metadata adapter."""

from __future__ import annotations

import json
from typing import Any

from ..schemas import ExternalRating, Movie

_OMDB_FIELDS = {
    "imdbID": "movie_id",
    "Title": "title",
    "Year": "year",
    "Rated": "rated",
    "Runtime": "runtime",
    "Genre": "genre",
    "Director": "director",
    "Actors": "actors",
    "Plot": "plot",
}


class OMDbAdapter:
    """Adapter converting OMDb title payloads into Movie records."""

    provider = "omdb"

    def can_handle(self, blob: bytes | str | dict[str, Any]) -> bool:
        try:
            data = self._load(blob)
        except ValueError:
            return False
        return "imdbID" in data or "movie_id" in data

    def parse_movie(self, blob: bytes | str | dict[str, Any]) -> Movie:
        data = self._load(blob)
        if str(data.get("Response", "True")).lower() == "false":
            raise ValueError(f"OMDb error: {data.get('Error', 'unknown error')}")

        if not self._is_omdb_shape(data):
            # Already normalised, e.g. a record written by a previous run.
            return Movie.model_validate(data)

        fields = {
            target: str(data.get(source) or "")
            for source, target in _OMDB_FIELDS.items()
        }
        if not fields["movie_id"]:
            raise ValueError("OMDb payload has no imdbID")

        ratings = [
            ExternalRating(
                source=str(entry.get("Source", "")),
                value=str(entry.get("Value", "")),
            )
            for entry in data.get("Ratings") or []
            if isinstance(entry, dict)
        ]
        return Movie(**fields, ratings=ratings)

    @staticmethod
    def _is_omdb_shape(data: dict[str, Any]) -> bool:
        return "Ratings" in data or any(
            key in data for key in _OMDB_FIELDS if key != "imdbID"
        )

    @staticmethod
    def _load(blob: bytes | str | dict[str, Any]) -> dict[str, Any]:
        if isinstance(blob, dict):
            return blob
        if isinstance(blob, bytes):
            blob = blob.decode("utf-8")
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as exc:
            raise ValueError("Invalid OMDb payload") from exc
        if not isinstance(data, dict):
            raise ValueError("OMDb payload must be a JSON object")
        return data
