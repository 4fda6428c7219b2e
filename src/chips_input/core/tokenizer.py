"""Chip tokenization for search matching and inline highlighting."""

from collections.abc import Callable, Sequence
from typing import Any

ChipTokenizerFn = Callable[[Any], Sequence[str | None]]


def default_tokenizer(item: Any) -> list[str]:
    """Use the chip's string form as its only token."""
    return [f"{item}"]


def keyed_tokens(item: Any, tokenizer: ChipTokenizerFn) -> dict[str, str]:
    """Tokenize ``item`` and key each token by its lowercase form.

    ``None`` tokens are dropped. When two tokens lowercase to the same key
    the first one wins, which keeps the original token order stable.
    """
    keyed: dict[str, str] = {}
    for token in tokenizer(item) or ():
        if token is None:
            continue
        keyed.setdefault(token.lower(), token)
    return keyed


def matching_tokens(item: Any, query: str, tokenizer: ChipTokenizerFn) -> list[str]:
    """Tokens of ``item`` whose lowercase form starts with the lowercase query."""
    needle = query.lower()
    return [token for key, token in keyed_tokens(item, tokenizer).items() if key.startswith(needle)]
