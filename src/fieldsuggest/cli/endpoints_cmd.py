"""Endpoint configuration CLI commands."""

from __future__ import annotations

import click
from pydantic import ValidationError

from fieldsuggest.cli.main import SuggestContext, pass_context
from fieldsuggest.core.exceptions import ConfigError


@click.group()
@pass_context
def endpoints(ctx: SuggestContext) -> None:
    """Manage named suggestion endpoints."""
    pass


@endpoints.command("list")
@pass_context
def endpoints_list(ctx: SuggestContext) -> None:
    """List configured endpoints."""
    from fieldsuggest.core.config import list_endpoints

    configured = list_endpoints(ctx.get_config())
    if not configured and not ctx.json_mode:
        ctx.formatter.info("No endpoints configured. Add one with `fieldsuggest endpoints add`.")
        return

    rows = [
        [name, raw.get("api", ""), raw.get("display_field", "—"), ", ".join(raw.get("fields", {}))]
        for name, raw in sorted(configured.items())
    ]
    ctx.formatter.table(
        "Endpoints",
        [("Name", "bold"), ("Template", "cyan"), ("Display", ""), ("Fields", "dim")],
        rows,
        data_for_json=configured,
    )


@endpoints.command("show")
@click.argument("name")
@pass_context
def endpoints_show(ctx: SuggestContext, name: str) -> None:
    """Show the resolved options of an endpoint."""
    try:
        options = ctx.get_options(name)
    except ConfigError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    data = options.model_dump()
    data["display_key"] = options.display_key
    ctx.formatter.record(data, title=name)


@endpoints.command("add")
@click.argument("name")
@click.argument("api")
@click.option("--display-field", default=None, help="Record field shown as the suggestion.")
@click.option("--result-field", default=None, help="Envelope key holding the result list.")
@click.option("--valid", "valid", default=None, help="Error message for values not in the suggestions.")
@click.option("--min-length", type=click.IntRange(min=0), default=None, help="Characters before querying.")
@click.option("--max", "max_candidates", type=click.IntRange(min=1), default=None, help="Maximum suggestions.")
@click.option("--field", "fields", multiple=True, help="Dependent field as NAME or NAME=SOURCE.")
@pass_context
def endpoints_add(
    ctx: SuggestContext,
    name: str,
    api: str,
    display_field: str | None,
    result_field: str | None,
    valid: str | None,
    min_length: int | None,
    max_candidates: int | None,
    fields: tuple[str, ...],
) -> None:
    """Store endpoint NAME with URL template API."""
    from fieldsuggest.core.config import add_endpoint
    from fieldsuggest.models.options import EndpointOptions

    raw: dict = {"api": api, "display_field": display_field, "result_field": result_field, "valid": valid}
    if min_length is not None:
        raw["min_query_length"] = min_length
    if max_candidates is not None:
        raw["max_candidates"] = max_candidates
    raw["fields"] = [_parse_field(f) for f in fields]

    try:
        options = EndpointOptions(**raw)
        add_endpoint(name, options)
    except ValidationError as e:
        ctx.formatter.error(f"Invalid endpoint: {e.errors()[0]['msg']}")
        raise SystemExit(1)
    except ConfigError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    if ctx.json_mode:
        ctx.formatter.json({"name": name, **options.to_config()})
    else:
        ctx.formatter.success(f"Saved endpoint '{name}'")


@endpoints.command("remove")
@click.argument("name")
@pass_context
def endpoints_remove(ctx: SuggestContext, name: str) -> None:
    """Delete endpoint NAME."""
    from fieldsuggest.core.config import remove_endpoint

    try:
        remove_endpoint(name)
    except ConfigError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    if ctx.json_mode:
        ctx.formatter.json({"removed": name})
    else:
        ctx.formatter.success(f"Removed endpoint '{name}'")


def _parse_field(spec: str) -> dict[str, str]:
    name, _, source = spec.partition("=")
    return {"name": name.strip(), "source": source.strip()}
