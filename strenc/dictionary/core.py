# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The token dictionary: a two-way mapping between tokens and integer ids.

Ids start at 1 and are handed out in first-occurrence order. Id 0 is never
bound to a token; it means "absent" in lookups and "padding" or "zero count"
in encoded output. Once a token has an id it keeps it until the dictionary is
cleared, so encoding the same token twice always gives the same number.

The reverse list `_tokens` is indexed by id - 1 and always has exactly as
many entries as the forward mapping.

Not safe for concurrent mutation. The owning encoder is the only writer.
"""

from typing import Iterable

from strenc.exceptions import DictionaryError

PAD_ID = 0


class StringEncodingDictionary:
    """Insertion-ordered token <-> id vocabulary shared by every policy."""

    def __init__(self) -> None:
        self._mapping: dict[str, int] = {}
        self._tokens: list[str] = []

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "StringEncodingDictionary":
        """
        Rebuild a dictionary from tokens listed in ascending id order.

        This is how restored state gets back into a live dictionary: the
        i-th token gets id i + 1, exactly as if it had been seen in that order.

        Raises:
            DictionaryError: If a token is empty or appears more than once.
        """
        dictionary = cls()
        for token in tokens:
            if not token:
                raise DictionaryError("Empty string cannot be a dictionary token")
            if token in dictionary._mapping:
                raise DictionaryError(f"Duplicate token in dictionary: {token!r}")
            dictionary.ensure_token(token)
        return dictionary

    def ensure_token(self, token: str) -> int:
        """Return the id of `token`, assigning the next free id if it's new."""
        token_id = self._mapping.get(token)
        if token_id is None:
            self._tokens.append(token)
            token_id = len(self._tokens)
            self._mapping[token] = token_id
        return token_id

    def value(self, token: str) -> int:
        """Look up `token` without inserting it. Unknown tokens give 0."""
        return self._mapping.get(token, PAD_ID)

    def has_token(self, token: str) -> bool:
        return token in self._mapping

    def token_for(self, token_id: int) -> str:
        """
        Reverse lookup.

        Raises:
            KeyError: For id 0 or any id that was never assigned.
        """
        if token_id < 1 or token_id > len(self._tokens):
            raise KeyError(f"No token has id {token_id}")
        return self._tokens[token_id - 1]

    def tokens(self) -> list[str]:
        """All tokens ordered by ascending id (a copy)."""
        return list(self._tokens)

    def mapping(self) -> dict[str, int]:
        """The full token -> id association (a copy; iteration order is not part of the contract)."""
        return dict(self._mapping)

    @property
    def size(self) -> int:
        return len(self._tokens)

    def clear(self) -> None:
        self._mapping.clear()
        self._tokens.clear()

    def copy(self) -> "StringEncodingDictionary":
        duplicate = StringEncodingDictionary()
        duplicate._mapping = dict(self._mapping)
        duplicate._tokens = list(self._tokens)
        return duplicate

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._mapping

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringEncodingDictionary):
            return NotImplemented
        return self._tokens == other._tokens

    def __repr__(self) -> str:
        return f"StringEncodingDictionary(size={len(self._tokens)})"


class DictionaryView:
    """
    Read-only window onto an encoder's dictionary.

    Reads go straight through to the live dictionary, so the view always
    reflects the latest encode call; there is no way to insert or clear
    through it.
    """

    def __init__(self, dictionary: StringEncodingDictionary) -> None:
        self._dictionary = dictionary

    def value(self, token: str) -> int:
        return self._dictionary.value(token)

    def has_token(self, token: str) -> bool:
        return self._dictionary.has_token(token)

    def token_for(self, token_id: int) -> str:
        return self._dictionary.token_for(token_id)

    def tokens(self) -> list[str]:
        return self._dictionary.tokens()

    def mapping(self) -> dict[str, int]:
        return self._dictionary.mapping()

    @property
    def size(self) -> int:
        return self._dictionary.size

    def __len__(self) -> int:
        return len(self._dictionary)

    def __contains__(self, token: object) -> bool:
        return token in self._dictionary

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DictionaryView):
            return self._dictionary == other._dictionary
        if isinstance(other, StringEncodingDictionary):
            return self._dictionary == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"DictionaryView(size={self._dictionary.size})"
