"""CLI entrypoints for auslaw."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import typer
from pydantic import ValidationError

from auslaw.config import load_settings
from auslaw.errors import AuslawError
from auslaw.logging import configure_logging, get_logger
from auslaw.models.search import SearchOptions
from auslaw.service import fetch_document_text, search

app = typer.Typer(add_completion=False, help="Australian case law and legislation search")
logger = get_logger(__name__)


def _options(kind: str, jurisdiction: str | None, limit: int, sort: str) -> SearchOptions:
    try:
        return SearchOptions(document_kind=kind, jurisdiction=jurisdiction, limit=limit, sort_mode=sort)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e


def _run_search(query: str, options: SearchOptions) -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        records = asyncio.run(search(query, options, settings=settings))
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    except AuslawError as e:
        typer.secho(f"{type(e).__name__}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    _echo_json([r.model_dump(mode="json") for r in records])


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.command("search-cases")
def search_cases(
    query: str = typer.Argument(..., help="Case name (e.g. 'Mabo v Queensland') or topic."),
    jurisdiction: str | None = typer.Option(None, "--jurisdiction", "-j", help="cth, vic, nsw, ..., federal, other"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum results (1-50)"),
    sort: str = typer.Option("auto", "--sort", help="relevance, date or auto"),
) -> None:
    """Search Australian case law."""

    _run_search(query, _options("case", jurisdiction, limit, sort))


@app.command("search-legislation")
def search_legislation(
    query: str = typer.Argument(..., help="Act name or topic."),
    jurisdiction: str | None = typer.Option(None, "--jurisdiction", "-j", help="cth, vic, nsw, ..., federal, other"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum results (1-50)"),
    sort: str = typer.Option("auto", "--sort", help="relevance, date or auto"),
) -> None:
    """Search Australian legislation."""

    _run_search(query, _options("legislation", jurisdiction, limit, sort))


@app.command()
def fetch(url: str = typer.Argument(..., help="Case or legislation URL (HTML or PDF)")) -> None:
    """Fetch full document text, with OCR for scanned PDFs."""

    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        doc = asyncio.run(fetch_document_text(url, settings=settings))
    except AuslawError as e:
        typer.secho(f"{type(e).__name__}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    _echo_json(doc.model_dump(mode="json"))


if __name__ == "__main__":
    app()
