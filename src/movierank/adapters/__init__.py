"""Movie metadata adapters."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..schemas import Movie
from .omdb import OMDbAdapter


@runtime_checkable
class MetadataAdapter(Protocol):
    """Provider-specific metadata adapter contract.

    Implementations turn provider-native payloads into provider-neutral Movie
    records.
    """

    provider: str

    def can_handle(self, blob: bytes | str | dict[str, Any]) -> bool:
        """Return True when the adapter can parse the given payload."""

    def parse_movie(self, blob: bytes | str | dict[str, Any]) -> Movie:
        """Parse a payload into a Movie, raising ValueError when it is unusable."""


__all__ = ["MetadataAdapter", "OMDbAdapter"]
