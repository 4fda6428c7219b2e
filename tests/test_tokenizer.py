"""Unit tests for chip tokenization helpers."""

from chips_input.core.tokenizer import default_tokenizer, keyed_tokens, matching_tokens


def cities(item):
    return item["tokens"]


class TestTokenizer:
    def test_default_tokenizer_uses_string_form(self):
        assert default_tokenizer(42) == ["42"]
        assert default_tokenizer("Rust") == ["Rust"]

    def test_keyed_tokens_lowercases_keys_and_drops_none(self):
        item = {"tokens": ["NY", None, "New York"]}
        assert keyed_tokens(item, cities) == {"ny": "NY", "new york": "New York"}

    def test_keyed_tokens_first_duplicate_wins(self):
        item = {"tokens": ["Go", "GO", "golang"]}
        assert keyed_tokens(item, cities) == {"go": "Go", "golang": "golang"}

    def test_matching_tokens_is_case_insensitive(self):
        item = {"tokens": ["NY", "New York", "Big Apple"]}
        assert matching_tokens(item, "n", cities) == ["NY", "New York"]
        assert matching_tokens(item, "BIG", cities) == ["Big Apple"]
        assert matching_tokens(item, "x", cities) == []
