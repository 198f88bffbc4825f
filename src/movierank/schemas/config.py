"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class OMDbSettings(BaseModel):
    base_url: str = "https://www.omdbapi.com/"
    api_key: str | None = None
    plot: str = "full"
    timeout: float = 10.0


class ServiceSettings(BaseModel):
    base_url: str | None = None
    token: str | None = None
    timeout: float = 10.0


class RankingSettings(BaseModel):
    rating_source: str = "Rotten Tomatoes"
    actor_separator: str = ", "
    max_workers: int = Field(default=8, ge=1)


class AppConfig(BaseModel):
    omdb: OMDbSettings = Field(default_factory=OMDbSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump(mode="python")

    def with_overrides(self, overrides: dict[str, dict[str, Any]]) -> "AppConfig":
        """Return a copy with non-``None`` override values applied per section."""
        merged = self.to_settings()
        for section, values in overrides.items():
            merged.setdefault(section, {}).update(
                {key: value for key, value in values.items() if value is not None}
            )
        return AppConfig.model_validate(merged)


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
