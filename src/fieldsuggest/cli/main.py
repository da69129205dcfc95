"""Root CLI group — entry point for all fieldsuggest commands."""

from __future__ import annotations

from typing import Any

import click

from fieldsuggest import __version__
from fieldsuggest.output.formatter import OutputFormatter


class SuggestContext:
    """Shared context passed through Click commands."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode
        self.formatter = OutputFormatter(json_mode=json_mode)
        self._config: dict[str, Any] | None = None

    def get_config(self) -> dict[str, Any]:
        """Lazy-load and return the configuration."""
        if self._config is None:
            from fieldsuggest.core.config import load_config

            self._config = load_config()
        return self._config

    def get_options(self, endpoint: str):
        """Resolve a configured endpoint name or raw template into options."""
        from fieldsuggest.core.config import get_endpoint_options

        return get_endpoint_options(endpoint, self.get_config())

    def get_service(self):
        """Build a SuggestService with an HTTP requester configured from [suggest]."""
        from fieldsuggest.services.fetcher import HttpRequester, get_user_agent
        from fieldsuggest.services.suggest_service import SuggestService

        suggest = self.get_config().get("suggest", {})
        requester = HttpRequester(
            timeout=float(suggest.get("request_timeout", 10.0)),
            user_agent=get_user_agent(suggest.get("user_agent_contact", "")),
        )
        return SuggestService(requester=requester)


pass_context = click.make_pass_decorator(SuggestContext, ensure=True)


@click.group()
@click.option("--json", "json_mode", is_flag=True, help="Output JSON for agent consumption.")
@click.option("-v", "--verbose", is_flag=True, help="Log cache and network activity.")
@click.version_option(__version__, prog_name="fieldsuggest")
@click.pass_context
def cli(ctx: click.Context, json_mode: bool, verbose: bool) -> None:
    """fieldsuggest — remote autocomplete and validation for form inputs.

    Endpoints are URL templates with one ${name} placeholder, either given
    inline or stored by name with `fieldsuggest endpoints add`.
    """
    from fieldsuggest.core.config import configure_logging

    configure_logging(verbose)
    ctx.obj = SuggestContext(json_mode=json_mode)


# ── Register subcommands ──────────────────────────────────────────

from fieldsuggest.cli.lookup import lookup
cli.add_command(lookup)

from fieldsuggest.cli.endpoints_cmd import endpoints
cli.add_command(endpoints)

from fieldsuggest.cli.pick import pick
cli.add_command(pick)

from fieldsuggest.cli.form import form
cli.add_command(form)
