"""Shared fakes for the suggestion tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from fieldsuggest.core.exceptions import FetchError

API = "https://api.example/search/${query}"


def url(query: str) -> str:
    return f"https://api.example/search/{query}"


class FakeRequester:
    """Network capability returning canned bodies keyed by URL."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failing: set[str] = set()

    def hold(self, target: str) -> asyncio.Event:
        """Block requests for ``target`` until the returned event is set."""
        gate = self.gates[target] = asyncio.Event()
        return gate

    async def __call__(self, target: str) -> Any:
        self.calls.append(target)
        gate = self.gates.get(target)
        if gate is not None:
            await gate.wait()
        if target in self.failing:
            raise FetchError("connection refused", url=target)
        return self.responses.get(target)


class RecordingPresenter:
    def __init__(self) -> None:
        self.presented: list[list[str]] = []
        self.clears = 0

    def present(self, candidates: list[str]) -> None:
        self.presented.append(candidates)

    def clear(self) -> None:
        self.clears += 1


class RecordingValidity:
    def __init__(self) -> None:
        self.reports: list[tuple[bool, str]] = []

    def report(self, valid: bool, message: str) -> None:
        self.reports.append((valid, message))


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config loader at an empty temporary directory."""
    monkeypatch.setenv("FIELDSUGGEST_CONFIG_DIR", str(tmp_path))
    return tmp_path
