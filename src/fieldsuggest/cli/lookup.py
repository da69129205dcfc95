"""One-shot suggestion lookup command."""

from __future__ import annotations

import asyncio

import click

from fieldsuggest.cli.main import SuggestContext, pass_context
from fieldsuggest.core.exceptions import FieldSuggestError


@click.command()
@click.argument("endpoint")
@click.argument("query", nargs=-1, required=True)
@click.option("--max", "max_candidates", type=click.IntRange(min=1), default=None, help="Override the candidate limit.")
@pass_context
def lookup(ctx: SuggestContext, endpoint: str, query: tuple[str, ...], max_candidates: int | None) -> None:
    """Fetch suggestions for QUERY from ENDPOINT.

    Examples:
        fieldsuggest lookup city Lon
        fieldsuggest lookup 'https://api.example/search/${query}' Lon
    """
    text = " ".join(query)
    try:
        options = ctx.get_options(endpoint)
        if max_candidates is not None:
            options = options.model_copy(update={"max_candidates": max_candidates})
        entry = asyncio.run(_lookup(ctx, options, text))
    except FieldSuggestError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    if not entry.candidates:
        if ctx.json_mode:
            ctx.formatter.json(entry.model_dump())
        else:
            ctx.formatter.info(f"No suggestions for '{text}'.")
        return
    ctx.formatter.candidates(entry)


async def _lookup(ctx: SuggestContext, options, text: str):
    svc = ctx.get_service()
    try:
        return await svc.lookup(options, text)
    finally:
        await svc.aclose()
