"""prompt_toolkit completer fed by a query controller's presented candidates."""

from __future__ import annotations

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document


class SuggestCompleter(Completer):
    """Presentation sink that offers the latest candidates as completions.

    The controller does not filter a reused exhaustive set; this completer
    narrows it to the candidates starting with the typed text, ignoring case.
    """

    def __init__(self, meta: str = "") -> None:
        self._candidates: list[str] = []
        self._meta = meta

    @property
    def candidates(self) -> list[str]:
        return list(self._candidates)

    # ── PresentationSink ─────────────────────────────────────────

    def present(self, candidates: list[str]) -> None:
        self._candidates = list(candidates)

    def clear(self) -> None:
        self._candidates = []

    # ── Completer ────────────────────────────────────────────────

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> list[Completion]:
        text = document.text_before_cursor
        prefix = text.strip().lower()

        for value in self._candidates:
            if value.lower().startswith(prefix) and value != text.strip():
                yield Completion(
                    value,
                    start_position=-len(text),
                    display_meta=self._meta,
                )
