"""Dependency injection container for the ranking system."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .adapters import OMDbAdapter
from .clients import OMDbClient, RankingServiceClient
from .core import PreferenceConfig, PreferenceEvaluator, RankingEngine
from .pipeline import MetadataFetcher, RankingPipeline
from .schemas.config import load_config


class RankingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    omdb_adapter = providers.Singleton(OMDbAdapter)

    omdb_client = providers.Singleton(
        OMDbClient,
        base_url=config.omdb.base_url,
        api_key=config.omdb.api_key,
        plot=config.omdb.plot,
        timeout=config.omdb.timeout,
        adapter=omdb_adapter,
    )

    service_client = providers.Singleton(
        RankingServiceClient,
        base_url=config.service.base_url,
        token=config.service.token,
        timeout=config.service.timeout,
    )

    preference_config = providers.Singleton(
        PreferenceConfig,
        rating_source=config.ranking.rating_source,
        actor_separator=config.ranking.actor_separator,
    )

    preference_evaluator = providers.Singleton(PreferenceEvaluator, config=preference_config)

    ranking_engine = providers.Singleton(RankingEngine, evaluator=preference_evaluator)

    metadata_fetcher = providers.Factory(
        MetadataFetcher,
        source=omdb_client,
        max_workers=config.ranking.max_workers,
    )

    pipeline = providers.Factory(
        RankingPipeline,
        engine=ranking_engine,
        fetcher=metadata_fetcher,
    )


def create_container(
    *,
    settings: dict[str, Any] | None = None,
    metadata_source: Any | None = None,
) -> RankingContainer:
    """Instantiate container with validated settings and optional overrides.

    ``metadata_source`` replaces the OMDb client, e.g. with a local catalog.
    """

    container = RankingContainer()
    container.config.from_dict(load_config(settings).to_settings())

    if metadata_source is not None:
        container.metadata_fetcher.override(
            providers.Factory(
                MetadataFetcher,
                source=providers.Object(metadata_source),
                max_workers=container.config.ranking.max_workers,
            )
        )

    return container
