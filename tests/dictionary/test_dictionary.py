# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the token dictionary.

Ids are dense (1..N), assigned in first-occurrence order, and stable for
the life of the dictionary. Id 0 is never bound to a token.
"""

import pytest

from strenc.dictionary.core import PAD_ID, DictionaryView, StringEncodingDictionary
from strenc.exceptions import DictionaryError


class TestEnsureToken:
    def test_ids_follow_first_occurrence(self) -> None:
        dictionary = StringEncodingDictionary()
        ids = [dictionary.ensure_token(token) for token in ["G", "A", "C", "C", "A"]]
        assert ids == [1, 2, 3, 3, 2]

    def test_insertion_is_idempotent(self) -> None:
        dictionary = StringEncodingDictionary()
        first = dictionary.ensure_token("token")
        second = dictionary.ensure_token("token")

        assert first == second == 1
        assert dictionary.size == 1

    def test_ids_are_dense(self) -> None:
        dictionary = StringEncodingDictionary()
        for token in ["x", "y", "x", "z", "y", "w"]:
            dictionary.ensure_token(token)

        assert sorted(dictionary.mapping().values()) == list(range(1, dictionary.size + 1))
        assert dictionary.tokens() == ["x", "y", "z", "w"]


class TestLookup:
    def test_unknown_token_value_is_zero(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a"])
        assert dictionary.value("missing") == PAD_ID == 0

    def test_value_does_not_insert(self) -> None:
        dictionary = StringEncodingDictionary()
        dictionary.value("ghost")
        assert dictionary.size == 0
        assert not dictionary.has_token("ghost")

    def test_token_for_reverses_value(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a", "b", "c"])
        for token in ["a", "b", "c"]:
            assert dictionary.token_for(dictionary.value(token)) == token

    @pytest.mark.parametrize("bad_id", [0, -1, 4])
    def test_token_for_rejects_unassigned_ids(self, bad_id: int) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a", "b", "c"])
        with pytest.raises(KeyError):
            dictionary.token_for(bad_id)

    def test_contains_and_len(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a", "b"])
        assert "a" in dictionary
        assert "z" not in dictionary
        assert len(dictionary) == 2

    def test_returned_collections_are_copies(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a"])
        dictionary.tokens().append("b")
        dictionary.mapping()["b"] = 2
        assert dictionary.size == 1
        assert not dictionary.has_token("b")


class TestFromTokens:
    def test_restores_ids_in_order(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["G", "A", "C"])
        assert dictionary.mapping() == {"G": 1, "A": 2, "C": 3}

    def test_duplicate_tokens_rejected(self) -> None:
        with pytest.raises(DictionaryError, match="Duplicate"):
            StringEncodingDictionary.from_tokens(["a", "b", "a"])

    def test_empty_token_rejected(self) -> None:
        with pytest.raises(DictionaryError):
            StringEncodingDictionary.from_tokens(["a", ""])


class TestLifecycle:
    def test_clear_empties_and_restarts_ids(self) -> None:
        dictionary = StringEncodingDictionary.from_tokens(["a", "b"])
        dictionary.clear()

        assert dictionary.size == 0
        assert dictionary.ensure_token("b") == 1

    def test_copy_is_independent(self) -> None:
        original = StringEncodingDictionary.from_tokens(["a"])
        duplicate = original.copy()
        duplicate.ensure_token("b")

        assert original.size == 1
        assert duplicate.size == 2
        assert original != duplicate

    def test_equality_compares_id_order(self) -> None:
        assert StringEncodingDictionary.from_tokens(["a", "b"]) == StringEncodingDictionary.from_tokens(["a", "b"])
        assert StringEncodingDictionary.from_tokens(["a", "b"]) != StringEncodingDictionary.from_tokens(["b", "a"])


class TestDictionaryView:
    def test_view_reflects_live_dictionary(self) -> None:
        dictionary = StringEncodingDictionary()
        view = DictionaryView(dictionary)
        dictionary.ensure_token("late")

        assert view.size == 1
        assert view.value("late") == 1
        assert "late" in view
        assert view == dictionary

    def test_view_has_no_mutators(self) -> None:
        view = DictionaryView(StringEncodingDictionary())
        assert not hasattr(view, "ensure_token")
        assert not hasattr(view, "clear")
