# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tokenizers: turn one input sequence into an ordered stream of tokens.

A tokenizer works against a TokenCursor. Each call to next_token() returns
the next token and moves the cursor past it; an empty string means the
sequence is exhausted. The encoder builds a fresh cursor for every sequence,
so tokenizers carry no state from one sequence to the next and the same input
always yields the same tokens.

Three variants ship here:
  - SplitByAnyOf: splits on any character from a delimiter set
  - CharExtract: every character is its own token
  - PreTokenizerSplit: wraps a Hugging Face `tokenizers` pre-tokenizer
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional

from tokenizers import pre_tokenizers
from tokenizers.pre_tokenizers import PreTokenizer

from strenc.config.schema import TokenizerConfig


class TokenCursor:
    """Mutable read position over a single input sequence."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.text)

    def remaining(self) -> str:
        return self.text[self.position :]

    def __repr__(self) -> str:
        return f"TokenCursor(position={self.position}, length={len(self.text)})"


class Tokenizer(ABC):
    """
    Base class for all tokenizers.

    Contract:
        next_token(cursor) -> token, advancing cursor past the token.
        Returns "" once the cursor is exhausted; "" is never a real token.
    """

    @abstractmethod
    def next_token(self, cursor: TokenCursor) -> str:
        """Return the next token and advance the cursor, or "" when exhausted."""
        ...

    def tokenize(self, text: str) -> Iterator[str]:
        """Yield every token of `text` in order, starting from a fresh cursor."""
        cursor = TokenCursor(text)
        token = self.next_token(cursor)
        while token:
            yield token
            token = self.next_token(cursor)

    def __call__(self, text: str) -> list[str]:
        return list(self.tokenize(text))


class SplitByAnyOf(Tokenizer):
    """
    Split a sequence on any character from a delimiter set.

    Consecutive delimiters act as a single separator, so no empty tokens come
    out. Matching is case-sensitive. With an empty delimiter set the whole
    remaining sequence is returned as one token.
    """

    def __init__(self, delimiters: str) -> None:
        self.delimiters = frozenset(delimiters)

    def next_token(self, cursor: TokenCursor) -> str:
        text = cursor.text
        end = len(text)
        start = cursor.position

        while start < end and text[start] in self.delimiters:
            start += 1

        stop = start
        while stop < end and text[stop] not in self.delimiters:
            stop += 1

        cursor.position = stop
        return text[start:stop]

    def __repr__(self) -> str:
        return f"SplitByAnyOf(delimiters={''.join(sorted(self.delimiters))!r})"


class CharExtract(Tokenizer):
    """Yield each character of the sequence as its own token."""

    def next_token(self, cursor: TokenCursor) -> str:
        if cursor.exhausted:
            return ""
        token = cursor.text[cursor.position]
        cursor.position += 1
        return token

    def __repr__(self) -> str:
        return "CharExtract()"


class PreTokenizerSplit(Tokenizer):
    """
    Adapt a Hugging Face pre-tokenizer to the cursor contract.

    The pre-tokenizer decides the boundaries; normalization is not applied,
    so tokens are exact substrings of the input. Defaults to the Whitespace
    pre-tokenizer, which splits into word runs and punctuation runs.
    """

    def __init__(self, pre_tokenizer: Optional[PreTokenizer] = None) -> None:
        self.pre_tokenizer = pre_tokenizer if pre_tokenizer is not None else pre_tokenizers.Whitespace()

    def next_token(self, cursor: TokenCursor) -> str:
        for piece, (_, end) in self.pre_tokenizer.pre_tokenize_str(cursor.remaining()):
            if piece:
                cursor.position += end
                return piece
        cursor.position = len(cursor.text)
        return ""

    def tokenize(self, text: str) -> Iterator[str]:
        # One pass over the whole sequence instead of re-splitting the tail
        # on every next_token() call.
        for piece, _ in self.pre_tokenizer.pre_tokenize_str(text):
            if piece:
                yield piece

    def __repr__(self) -> str:
        return f"PreTokenizerSplit({type(self.pre_tokenizer).__name__})"


_TOKENIZER_BUILDERS: dict[str, Callable[[TokenizerConfig], Tokenizer]] = {
    "split": lambda config: SplitByAnyOf(config.delimiters),
    "char": lambda config: CharExtract(),
    "whitespace": lambda config: PreTokenizerSplit(),
}


def list_tokenizer_types() -> list[str]:
    """Return sorted list of all tokenizer type names."""
    return sorted(_TOKENIZER_BUILDERS.keys())


def build_tokenizer(config: TokenizerConfig) -> Tokenizer:
    """
    Build a tokenizer from config.

    Raises:
        KeyError: If config.tokenizer_type is not a known tokenizer.
    """
    if config.tokenizer_type not in _TOKENIZER_BUILDERS:
        raise KeyError(
            f"Unknown tokenizer type '{config.tokenizer_type}'. "
            f"Available: {list_tokenizer_types()}"
        )
    return _TOKENIZER_BUILDERS[config.tokenizer_type](config)
