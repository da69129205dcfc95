"""Textual form command."""

from __future__ import annotations

import click

from fieldsuggest.cli.main import SuggestContext, pass_context
from fieldsuggest.core.exceptions import FieldSuggestError


@click.command()
@click.argument("endpoint")
@pass_context
def form(ctx: SuggestContext, endpoint: str) -> None:
    """Open a form bound to ENDPOINT in the terminal UI."""
    try:
        options = ctx.get_options(endpoint)
    except FieldSuggestError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    from fieldsuggest.tui.app import SuggestFormApp

    app = SuggestFormApp(options, ctx.get_service())
    app.run()
