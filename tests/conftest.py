"""Shared fixtures and fakes for chips input tests."""

import asyncio
from typing import Any, Callable, Optional

import pytest
import pytest_asyncio

from chips_input import ChipsInputConfig, ChipsInputController, ChipSuggestions


class RecordingFetcher:
    """Fake suggestion collaborator that records every query it receives."""

    def __init__(
        self,
        candidates: Optional[list[Any]] = None,
        *,
        match_prefix: bool = True,
        delay: float = 0.0,
        error: Optional[Exception] = None,
        response_generator: Optional[Callable[[str], ChipSuggestions]] = None,
    ):
        self.candidates = candidates or []
        self.match_prefix = match_prefix
        self.delay = delay
        self.error = error
        self.response_generator = response_generator
        self.calls: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def __call__(self, query: str) -> ChipSuggestions:
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.response_generator is not None:
            return self.response_generator(query)
        if self.match_prefix and query:
            return ChipSuggestions(suggestions=[c for c in self.candidates if str(c).lower().startswith(query.lower())])
        return ChipSuggestions(suggestions=list(self.candidates))


class RecordingHost:
    """Fake render surface host."""

    def __init__(self):
        self.shown: list[Any] = []
        self.inserted = 0
        self.removed = 0

    def insert(self, surface: Any) -> None:
        self.inserted += 1
        self.shown.append(surface)

    def remove(self, surface: Any) -> None:
        self.removed += 1
        self.shown.remove(surface)


FRUITS = ["apple", "apricot", "banana", "blueberry", "cherry"]


@pytest.fixture
def fetcher() -> RecordingFetcher:
    return RecordingFetcher(list(FRUITS))


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def quiet_config() -> ChipsInputConfig:
    """Configuration without the type-ahead pipeline, for deterministic tests."""
    return ChipsInputConfig(suggest_on_type=False, query_debounce=0.01, suggestion_debounce=0.01)


@pytest_asyncio.fixture
async def controller(fetcher, quiet_config):
    ctrl = ChipsInputController(fetcher, config=quiet_config)
    yield ctrl
    await ctrl.dispose()


@pytest.fixture
def open_controller(controller, host):
    """Controller whose overlay is open, so notifications are delivered."""
    controller.initialize(host, "overlay")
    assert controller.open() is True
    return controller
