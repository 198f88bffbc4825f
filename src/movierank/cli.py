"""Typer CLI entrypoint for the ranking pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
import yaml
from pydantic import ValidationError

from .clients import ServiceError
from .container import create_container
from .logging import configure_logging
from .pipeline import AuditLogger, CatalogLoadError, LocalCatalog, PromptLoader
from .schemas.config import load_config

app = typer.Typer(help="Preference-weighted movie ranking CLI.")


def _load_settings(config: Path | None, overrides: dict[str, dict[str, Any]]) -> dict[str, Any]:
    loaded: Any = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
            if not isinstance(loaded, dict):
                raise typer.BadParameter("Config file must be a YAML object", param_name="config")
    try:
        return load_config(loaded).with_overrides(overrides).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


def _abort(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def run(
    service_url: Optional[str] = typer.Option(
        None, envvar="MOVIERANK_SERVICE_URL", help="Base URL of the ranking service."
    ),
    token: Optional[str] = typer.Option(None, envvar="MOVIERANK_TOKEN", help="Ranking service token."),
    omdb_api_key: Optional[str] = typer.Option(None, envvar="OMDB_API_KEY", help="OMDb API key."),
    submit: bool = typer.Option(True, "--submit/--no-submit", help="Submit the ranking for grading."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", help="Log format."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Fetch a prompt, rank its movies and submit the ranking."""
    settings = _load_settings(
        config,
        {
            "service": {"base_url": service_url, "token": token},
            "omdb": {"api_key": omdb_api_key},
        },
    )
    if not settings["service"]["base_url"] or not settings["service"]["token"]:
        raise typer.BadParameter("A service URL and token are required", param_name="service_url")

    configure_logging(log_level, json_output=json_logs)

    container = create_container(settings=settings)
    service = container.service_client()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    try:
        prompt = service.get_prompt()
        result = container.pipeline().run(
            prompt=prompt,
            output_path=output,
            audit_logger=audit_logger,
            submitter=service if submit else None,
        )
    except (ServiceError, ValidationError) as exc:
        _abort(f"Run aborted: {exc}")

    if result.submission_score is not None:
        typer.echo(f"SCORE ACHIEVED: {result.submission_score}")
    typer.echo("\n".join(result.ranking))


@app.command()
def rank(
    prompt: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Prompt JSON path."),
    catalog: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Movie catalog JSONL path."
    ),
    output: Optional[Path] = typer.Option(None, dir_okay=False, resolve_path=True, help="Output JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    json_logs: bool = typer.Option(True, "--json-logs/--console-logs", help="Log format."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Rank a prompt offline against a local movie catalog."""
    settings = _load_settings(config, {})

    configure_logging(log_level, json_output=json_logs)

    try:
        loaded_prompt = PromptLoader().load(prompt)
        local_catalog = LocalCatalog.load(catalog)
    except (CatalogLoadError, ValueError) as exc:
        _abort(f"Could not load inputs: {exc}")

    container = create_container(settings=settings, metadata_source=local_catalog)
    audit_logger = AuditLogger(audit_log) if audit_log else None

    try:
        result = container.pipeline().run(
            prompt=loaded_prompt,
            output_path=output,
            audit_logger=audit_logger,
        )
    except ServiceError as exc:
        _abort(f"Run aborted: {exc}")

    typer.echo("\n".join(result.ranking))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
