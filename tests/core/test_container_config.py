from __future__ import annotations

import pytest
from pydantic import ValidationError

from movierank.container import create_container
from movierank.pipeline import LocalCatalog
from movierank.schemas import Movie
from movierank.schemas.config import AppConfig, load_config


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "omdb": {"api_key": "secret", "plot": "short"},
            "service": {"base_url": "https://example.test/", "token": "abc"},
            "ranking": {"rating_source": "Metacritic", "max_workers": 3},
        }
    )

    omdb = container.omdb_client()
    service = container.service_client()
    evaluator = container.preference_evaluator()
    fetcher = container.metadata_fetcher()

    assert omdb._api_key == "secret"
    assert omdb._plot == "short"
    assert service._base_url == "https://example.test"
    assert evaluator.config.rating_source == "Metacritic"
    assert evaluator.config.actor_separator == ", "
    assert fetcher._max_workers == 3
    assert container.ranking_engine().evaluator is evaluator


def test_create_container_defaults():
    container = create_container()

    assert container.omdb_client()._base_url == "https://www.omdbapi.com/"
    assert container.preference_evaluator().config.rating_source == "Rotten Tomatoes"
    assert container.metadata_fetcher()._max_workers == 8


def test_container_uses_given_metadata_source():
    catalog = LocalCatalog([Movie(movie_id="tt1")])
    container = create_container(metadata_source=catalog)

    assert container.metadata_fetcher()._source is catalog


def test_load_config_validation():
    app_config = load_config({"ranking": {"max_workers": 2}})

    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["ranking"]["max_workers"] == 2
    assert settings["omdb"]["plot"] == "full"


def test_load_config_rejects_invalid_values():
    with pytest.raises(ValidationError):
        load_config({"ranking": {"max_workers": 0}})
    with pytest.raises(ValidationError):
        load_config(["not", "a", "mapping"])


def test_with_overrides_skips_none():
    app_config = load_config({"service": {"token": "from-file"}})

    merged = app_config.with_overrides({"service": {"token": None, "base_url": "https://x.test"}})

    assert merged.service.token == "from-file"
    assert merged.service.base_url == "https://x.test"
