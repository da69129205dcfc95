"""Interactive pick — prompt_toolkit session with live remote suggestions."""

from __future__ import annotations

import asyncio

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from fieldsuggest.cli.completer import SuggestCompleter
from fieldsuggest.cli.main import SuggestContext, pass_context
from fieldsuggest.core.exceptions import FieldSuggestError


class _PromptPresenter:
    """Feeds candidates to the completer and reopens the completion menu."""

    def __init__(self, session: PromptSession, completer: SuggestCompleter) -> None:
        self.session = session
        self.completer = completer

    def present(self, candidates: list[str]) -> None:
        self.completer.present(candidates)
        if self.session.app.is_running:
            self.session.default_buffer.start_completion(select_first=False)

    def clear(self) -> None:
        self.completer.clear()
        if self.session.app.is_running:
            self.session.default_buffer.cancel_completion()


@click.command()
@click.argument("endpoint")
@pass_context
def pick(ctx: SuggestContext, endpoint: str) -> None:
    """Pick a value from ENDPOINT with live suggestions.

    Suggestions appear as you type. The entry is accepted only if it matches
    a suggested value exactly; its dependent fields are then shown.
    """
    try:
        options = ctx.get_options(endpoint)
    except FieldSuggestError as e:
        ctx.formatter.error(str(e))
        raise SystemExit(1)

    try:
        record, fields = asyncio.run(_pick(ctx, options))
    except (EOFError, KeyboardInterrupt):
        ctx.formatter.info("Cancelled.")
        return

    if ctx.json_mode:
        ctx.formatter.json({"record": record, "fields": fields})
        return
    ctx.formatter.record(record, title=options.query_name)
    if fields:
        ctx.formatter.record(fields, title="Fields")


async def _pick(ctx: SuggestContext, options) -> tuple[dict, dict[str, str]]:
    from fieldsuggest.core.config import get_history_path

    svc = ctx.get_service()
    completer = SuggestCompleter(meta=options.display_key)
    fields: dict[str, str] = {}
    session: PromptSession = PromptSession(
        history=FileHistory(str(get_history_path())),
        completer=completer,
        complete_while_typing=True,
    )
    controller = svc.bind(
        options,
        presenter=_PromptPresenter(session, completer),
        write_field=fields.__setitem__,
    )
    session.default_buffer.on_text_changed += lambda buf: controller.on_input(buf.text)

    message = options.valid or "Pick one of the suggested values."
    try:
        while True:
            text = await session.prompt_async(f"{options.query_name}> ")
            controller.on_input(text)
            await controller.flush()
            if controller.on_blur():
                return controller.valid_value(), dict(fields)
            ctx.formatter.warning(message)
    finally:
        controller.detach()
        await svc.aclose()
