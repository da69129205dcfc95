"""Textual form bound to a query controller."""

from __future__ import annotations

from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Input, Label, OptionList, Static

from fieldsuggest.models.options import EndpointOptions
from fieldsuggest.services.query_controller import QueryController
from fieldsuggest.services.suggest_service import SuggestService


class CandidateList(OptionList):
    """Suggestion list; acts as the controller's presentation sink."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.candidates: list[str] = []

    def present(self, candidates: list[str]) -> None:
        self.candidates = list(candidates)
        self.clear_options()
        self.add_options(self.candidates)

    def clear(self) -> None:
        self.candidates = []
        self.clear_options()


class ValidityLine(Static):
    """Shows the validity message; acts as the controller's validity sink."""

    def report(self, valid: bool, message: str) -> None:
        self.set_class(not valid, "-invalid")
        self.update("" if valid else f"[red]{message}[/red]")


class SuggestFormApp(App):
    """One autocomplete input plus its dependent fields."""

    CSS = """
    #form {
        padding: 1 2;
    }
    CandidateList {
        height: auto;
        max-height: 12;
    }
    .dependent {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+l", "clear_cache", "Clear cache"),
    ]

    def __init__(self, options: EndpointOptions, service: SuggestService, **kwargs) -> None:
        super().__init__(**kwargs)
        self.options = options
        self.service = service
        self.controller: QueryController | None = None
        # widget ids must be identifiers; field names may not be
        self._field_ids = {f.name: f"field-{i}" for i, f in enumerate(options.fields)}

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="form"):
            yield Label(f"[bold]{self.options.query_name}[/bold]")
            yield Input(placeholder=f"Type at least {self.options.min_query_length} characters", id="query")
            yield CandidateList(id="candidates")
            yield ValidityLine(id="validity")
            for field in self.options.fields:
                yield Label(field.name, classes="dependent")
                yield Input(id=self._field_ids[field.name], disabled=True, classes="dependent")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "fieldsuggest"
        self.sub_title = self.options.api
        self.controller = self.service.bind(
            self.options,
            read_text=lambda: self.query_one("#query", Input).value,
            presenter=self.query_one(CandidateList),
            validity=self.query_one(ValidityLine),
            write_field=self._write_field,
        )
        self.query_one("#query", Input).focus()

    async def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.detach()
        await self.service.aclose()

    @on(Input.Changed, "#query")
    def _query_changed(self, event: Input.Changed) -> None:
        if self.controller is not None:
            self.controller.on_input(event.value)

    @on(Input.Submitted, "#query")
    def _query_submitted(self, event: Input.Submitted) -> None:
        if self.controller is not None:
            self.controller.on_blur()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if self.controller is not None and event.widget.id == "query":
            self.controller.on_blur()

    @on(OptionList.OptionSelected, "#candidates")
    def _candidate_selected(self, event: OptionList.OptionSelected) -> None:
        candidates = self.query_one(CandidateList).candidates
        if not 0 <= event.option_index < len(candidates):
            return
        query_input = self.query_one("#query", Input)
        query_input.value = candidates[event.option_index]
        query_input.focus()
        if self.controller is not None:
            self.controller.on_blur()
            self.controller.propagate()

    def action_clear_cache(self) -> None:
        if self.controller is not None:
            self.controller.clear_cache()
            self.notify("Suggestion cache cleared")

    def _write_field(self, name: str, value: str) -> None:
        widget_id = self._field_ids.get(name)
        if widget_id is not None:
            self.query_one(f"#{widget_id}", Input).value = value
