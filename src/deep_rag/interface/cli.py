from __future__ import annotations

# ruff: noqa: E402, B008

"""Thin CLI over the retrieval-augmentation pipeline.

Commands:
- status: show whether retrieval is enabled/configured and the active limits
- decompose: show the sub-queries generated for a question
- retrieve: run the full pipeline and print the formatted context
- augment: print the augmented prompt for a user message
"""

import json
import logging
import sys

import typer

from deep_rag.application.use_cases import PipelineOrchestrator
from deep_rag.config.composition import get_orchestrator
from deep_rag.domain.events import ProgressEvent
from deep_rag.logging_setup import setup_logging

app = typer.Typer(add_completion=False)


def _build_orchestrator() -> PipelineOrchestrator:
    return get_orchestrator()


def _print_event(event: ProgressEvent) -> None:
    typer.secho(f"[{event.stage}] {event.message}", fg=typer.colors.CYAN, err=True)


@app.callback()
def _main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command("status")
def status_cmd() -> None:
    typer.echo(json.dumps(_build_orchestrator().status(), indent=2))


@app.command("decompose")
def decompose_cmd(
    query: str = typer.Argument(..., help="Question to decompose"),
    expand: bool = typer.Option(False, "--expand", help="Also list alternative phrasings"),
) -> None:
    orch = _build_orchestrator()
    if not orch.enabled:
        typer.secho("RAG is not enabled", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    d = orch.decomposer.decompose(query)
    payload: dict[str, object] = {
        "originalQuery": d.original_query,
        "subQueries": list(d.sub_queries),
        "reasoning": d.rationale,
    }
    if expand:
        payload["expansions"] = orch.decomposer.expand(query)
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.command("retrieve")
def retrieve_cmd(
    query: str = typer.Argument(..., help="Question to retrieve context for"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    events: bool = typer.Option(False, "--events", help="Print progress events to stderr"),
) -> None:
    orch = _build_orchestrator()
    if not orch.enabled:
        typer.secho("RAG is not enabled", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    ctx = orch.retrieve_context(query, _print_event if events else None)
    if as_json:
        typer.echo(json.dumps(ctx.to_dict(), ensure_ascii=False, indent=2))
        return
    if not ctx.context:
        typer.echo("No results.")
        return
    typer.echo(ctx.context)


@app.command("augment")
def augment_cmd(
    message: str = typer.Argument(..., help="User message to augment"),
    events: bool = typer.Option(False, "--events", help="Print progress events to stderr"),
) -> None:
    orch = _build_orchestrator()
    typer.echo(orch.augment_prompt(message, _print_event if events else None))


def main() -> int:
    try:
        app()
        return 0
    except Exception as e:  # noqa: BLE001
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
