"""Unit tests for inline matching and the suggestion engine."""

import asyncio
from unittest.mock import Mock

import pytest

from chips_input.application.suggestion_engine import SuggestionEngine, compute_inline_suggestion
from chips_input.core.tokenizer import default_tokenizer
from chips_input.domain.types import ChipSuggestions, Suggestion
from chips_input.errors import DisposedStateError, FetchError

from conftest import RecordingFetcher

CITIES = {
    "nyc": ["NY", "New York"],
    "nola": ["New Orleans", "NOLA"],
    "sf": ["SF", None, "San Francisco"],
}


def city_tokens(key):
    return CITIES[key]


class TestComputeInlineSuggestion:
    def test_first_candidate_wins(self):
        result = compute_inline_suggestion("ap", ["apple", "apricot"], default_tokenizer)
        assert result == Suggestion.highlighted("apple", "apple")

    def test_longest_matching_token_is_highlighted(self):
        result = compute_inline_suggestion("n", ["nyc"], city_tokens)
        assert result.item == "nyc"
        assert result.highlight_text == "New York"

    def test_candidate_order_controls_priority(self):
        assert compute_inline_suggestion("n", ["nola", "nyc"], city_tokens).item == "nola"
        assert compute_inline_suggestion("n", ["nyc", "nola"], city_tokens).item == "nyc"

    def test_equal_length_tokens_keep_token_order(self):
        result = compute_inline_suggestion("a", ["x"], lambda item: ["abc", "ABD"])
        assert result.highlight_text == "abc"

    def test_matching_ignores_case_and_none_tokens(self):
        result = compute_inline_suggestion("SAN", ["sf"], city_tokens)
        assert result.highlight_text == "San Francisco"

    @pytest.mark.parametrize("query", ["", None])
    def test_empty_query_never_suggests(self, query):
        assert compute_inline_suggestion(query, ["apple"], default_tokenizer).is_empty

    def test_no_match_is_empty(self):
        assert compute_inline_suggestion("z", ["apple", "banana"], default_tokenizer).is_empty

    def test_is_deterministic(self):
        candidates = ["nola", "nyc", "sf"]
        results = {compute_inline_suggestion("n", candidates, city_tokens) for _ in range(5)}
        assert len(results) == 1


def make_engine(fetcher, query="", chips=()):
    state = {"query": query, "chips": list(chips)}
    notify = Mock()
    engine = SuggestionEngine(
        fetcher,
        tokenizer=default_tokenizer,
        equality=lambda a, b: a == b,
        query_getter=lambda: state["query"],
        chips_getter=lambda: state["chips"],
        notify=notify,
        debug_label="test",
    )
    return engine, state, notify


class TestSuggestionEngine:
    @pytest.mark.asyncio
    async def test_load_filters_existing_chips_and_computes_inline(self):
        fetcher = RecordingFetcher(["apple", "apricot", "avocado"])
        engine, _, notify = make_engine(fetcher, query="ap", chips=["apple"])

        assert await engine.load_suggestions() is True

        assert fetcher.calls == ["ap"]
        assert engine.current_batch.suggestions == ("apricot",)
        assert engine.current_suggestion == Suggestion.highlighted("apricot", "apricot")
        notify.assert_called_once()

    @pytest.mark.asyncio
    async def test_match_hint_becomes_inline_suggestion(self):
        def respond(query):
            return ChipSuggestions(
                suggestions=["apple", "apricot"],
                match=Suggestion(item="apricot"),
            )

        engine, _, _ = make_engine(RecordingFetcher(response_generator=respond), query="ap")

        await engine.load_suggestions()

        assert engine.current_suggestion == Suggestion.highlighted("apricot", "apricot")

    @pytest.mark.asyncio
    async def test_match_hint_for_existing_chip_is_dropped(self):
        def respond(query):
            return ChipSuggestions(suggestions=["apple", "apricot"], match=Suggestion.highlighted("apple", "apple"))

        engine, _, _ = make_engine(RecordingFetcher(response_generator=respond), query="ap", chips=["apple"])

        await engine.load_suggestions()

        assert engine.current_suggestion.item == "apricot"

    @pytest.mark.asyncio
    async def test_empty_query_publishes_batch_without_inline(self):
        engine, _, _ = make_engine(RecordingFetcher(["apple", "banana"]), query="")

        await engine.load_suggestions()

        assert engine.current_batch.suggestions == ("apple", "banana")
        assert engine.current_suggestion.is_empty

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_previous_state(self):
        fetcher = RecordingFetcher(["apple", "apricot"])
        engine, state, notify = make_engine(fetcher, query="ap")
        await engine.load_suggestions()
        before = (engine.current_batch, engine.current_suggestion)
        notify.reset_mock()

        fetcher.error = RuntimeError("backend down")
        state["query"] = "apr"
        with pytest.raises(FetchError) as exc_info:
            await engine.load_suggestions()

        assert exc_info.value.query == "apr"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert (engine.current_batch, engine.current_suggestion) == before
        notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_error_from_collaborator_propagates_unchanged(self):
        error = FetchError("quota exceeded", query="ap")
        engine, _, _ = make_engine(RecordingFetcher(error=error), query="ap")

        with pytest.raises(FetchError) as exc_info:
            await engine.load_suggestions()

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_result_for_superseded_query_is_discarded(self):
        fetcher = RecordingFetcher(["apple", "apricot", "banana"], delay=0.02)
        engine, state, notify = make_engine(fetcher, query="ap")

        task = asyncio.create_task(engine.load_suggestions())
        await asyncio.sleep(0.005)
        state["query"] = "ban"

        assert await task is False
        assert engine.current_batch.is_empty
        notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_older_request_is_discarded_when_newer_one_exists(self):
        fetcher = RecordingFetcher(["apple"], delay=0.02)
        engine, _, notify = make_engine(fetcher, query="a")

        first = asyncio.create_task(engine.load_suggestions())
        await asyncio.sleep(0.005)
        second = asyncio.create_task(engine.load_suggestions())

        assert await first is False
        assert await second is True
        assert notify.call_count == 1

    @pytest.mark.asyncio
    async def test_reset_invalidates_in_flight_fetch(self):
        fetcher = RecordingFetcher(["apple"], delay=0.02)
        engine, _, _ = make_engine(fetcher, query="a")

        task = asyncio.create_task(engine.load_suggestions())
        await asyncio.sleep(0.005)
        engine.reset()

        assert await task is False
        assert engine.current_suggestion.is_empty

    def test_resolve_fills_missing_highlight(self):
        engine, state, _ = make_engine(RecordingFetcher(), query="ap")

        assert engine.resolve(Suggestion(item="apple")) == Suggestion.highlighted("apple", "apple")
        assert engine.resolve(Suggestion(item="banana")).is_empty
        assert engine.resolve(None).is_empty
        assert engine.resolve(Suggestion.highlighted("x", "custom")).highlight_text == "custom"

        state["query"] = ""
        assert engine.resolve(Suggestion(item="apple")).is_empty

    @pytest.mark.asyncio
    async def test_load_after_dispose_is_rejected(self):
        engine, _, _ = make_engine(RecordingFetcher(["apple"]), query="a")
        engine.dispose()

        with pytest.raises(DisposedStateError):
            await engine.load_suggestions()
