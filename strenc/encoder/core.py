# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The string encoder: tokenizer -> dictionary -> policy -> output.

One StringEncoder owns exactly one dictionary and one policy. Every encode
call walks the batch in a fixed order: sequences by ascending index, tokens
left to right. For each token the dictionary assigns (or looks up) its id and
the policy observes it. Ids are handed out on first occurrence, so changing
that order would change the ids and with them every number in the output.

Accumulation is the same no matter which output shape the caller wants. The
policy hands back one unpadded row per sequence, and only then is the result
shaped:
  - dense:  a (sequences x width) tensor, zero-padded
  - ragged: plain Python lists, one per sequence, no padding
  - sparse: a COO tensor with the same shape as dense

Width is the longest row of the batch for the ordinal policy and the
dictionary size for presence / tfidf. Note that 0 pulls double duty: it is
padding in ordinal output and "absent" in presence / tfidf output, because
id 0 is never assigned to a token.

Encoders are single-writer objects. Run independent encoders on separate
threads if you need parallelism; never share one.
"""

import copy
import logging
from typing import Iterable, Optional, Sequence

import torch

from strenc.dictionary.core import DictionaryView, StringEncodingDictionary
from strenc.exceptions import PolicyError
from strenc.logging.logger import get_logger
from strenc.policies.base import EncodingPolicy, Number
from strenc.policies.ordinal import OrdinalPolicy
from strenc.policies.registry import build_policy
from strenc.serialization.state import EncoderState
from strenc.tokenizer.core import Tokenizer

logger: logging.Logger = get_logger(__name__)

STATE_EMPTY = "empty"
STATE_POPULATED = "populated"


class StringEncoder:
    """
    Encode batches of text into numeric rows with a shared, growing dictionary.

    Args:
        policy: The encoding policy. Defaults to OrdinalPolicy().
    """

    def __init__(self, policy: Optional[EncodingPolicy] = None) -> None:
        self._policy = policy if policy is not None else OrdinalPolicy()
        self._dictionary = StringEncodingDictionary()

    @property
    def dictionary(self) -> DictionaryView:
        return DictionaryView(self._dictionary)

    @property
    def policy(self) -> EncodingPolicy:
        return self._policy

    @property
    def is_empty(self) -> bool:
        return self._dictionary.size == 0

    @property
    def state(self) -> str:
        """'empty' until the first token has been seen, 'populated' afterwards."""
        return STATE_EMPTY if self.is_empty else STATE_POPULATED

    def encode(self, sequences: Iterable[str], tokenizer: Tokenizer) -> torch.Tensor:
        """
        Encode a batch into a dense, zero-padded tensor.

        Returns:
            Tensor of shape (len(sequences), width) with the policy's dtype.
            An empty batch gives shape (0, width).
        """
        rows = self._accumulate(sequences, tokenizer)
        width = self._dense_width(rows)

        output = torch.zeros((len(rows), width), dtype=self._policy.dtype)
        for index, row in enumerate(rows):
            if row:
                output[index, : len(row)] = torch.tensor(row, dtype=self._policy.dtype)
        return output

    def encode_ragged(self, sequences: Iterable[str], tokenizer: Tokenizer) -> list[list[Number]]:
        """Encode a batch into one unpadded list per sequence."""
        return self._accumulate(sequences, tokenizer)

    def encode_sparse(self, sequences: Iterable[str], tokenizer: Tokenizer) -> torch.Tensor:
        """
        Encode a batch into a coalesced sparse COO tensor.

        Holds exactly the non-zero entries of the dense result; padding and
        absent tokens are implicit zeros.
        """
        rows = self._accumulate(sequences, tokenizer)
        width = self._dense_width(rows)

        row_indices: list[int] = []
        column_indices: list[int] = []
        values: list[Number] = []
        for row_index, row in enumerate(rows):
            for column_index, value in enumerate(row):
                if value != 0:
                    row_indices.append(row_index)
                    column_indices.append(column_index)
                    values.append(value)

        return torch.sparse_coo_tensor(
            torch.tensor([row_indices, column_indices], dtype=torch.int64),
            torch.tensor(values, dtype=self._policy.dtype),
            size=(len(rows), width),
        ).coalesce()

    def reset(self) -> None:
        """Discard the dictionary and all policy counters, back to the empty state."""
        self._dictionary.clear()
        self._policy.reset()
        logger.debug("Encoder reset", extra={"policy": self._policy.name})

    def copy(self) -> "StringEncoder":
        """Independent copy; dictionary and policy state are duplicated together."""
        duplicate = StringEncoder.__new__(StringEncoder)
        duplicate._dictionary = self._dictionary.copy()
        duplicate._policy = copy.deepcopy(self._policy)
        return duplicate

    def __copy__(self) -> "StringEncoder":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "StringEncoder":
        return self.copy()

    def to_state(self) -> EncoderState:
        """Capture dictionary and policy counters as canonical plain data."""
        tokens = self._dictionary.tokens()
        return EncoderState(
            policy=self._policy.name,
            tokens=tokens,
            ids=[self._dictionary.value(token) for token in tokens],
            **self._policy.params(),
            **self._policy.state_dict(),
        )

    @classmethod
    def from_state(cls, state: EncoderState) -> "StringEncoder":
        """Rebuild an encoder whose dictionary and counters equal `state`."""
        policy = build_policy(state.policy, **state.policy_params())
        policy.load_state_dict(state.policy_state())

        encoder = cls(policy)
        encoder._dictionary = StringEncodingDictionary.from_tokens(state.tokens)
        return encoder

    def _accumulate(self, sequences: Iterable[str], tokenizer: Tokenizer) -> list[list[Number]]:
        if isinstance(sequences, str):
            raise TypeError("Expected an iterable of sequences, got a single str")
        batch: Sequence[str] = list(sequences)
        for index, text in enumerate(batch):
            if not isinstance(text, str):
                raise TypeError(
                    f"Sequence {index} is {type(text).__name__}, expected str"
                )

        # Tokenize the whole batch up front so a tokenizer failure leaves the
        # dictionary and policy untouched.
        tokenized = [list(tokenizer.tokenize(text)) for text in batch]

        size_before = self._dictionary.size
        self._policy.begin(self._dictionary, len(batch))

        token_count = 0
        for sequence_index, tokens in enumerate(tokenized):
            for token in tokens:
                token_id = self._dictionary.ensure_token(token)
                self._policy.observe(sequence_index, token_id)
                token_count += 1

        rows = self._policy.finalize(self._dictionary)
        if len(rows) != len(batch):
            raise PolicyError(
                f"Policy '{self._policy.name}' returned {len(rows)} rows for {len(batch)} sequences"
            )

        logger.debug(
            "Batch encoded",
            extra={
                "policy": self._policy.name,
                "sequences": len(batch),
                "tokens": token_count,
                "new_tokens": self._dictionary.size - size_before,
                "vocab_size": self._dictionary.size,
            },
        )
        return rows

    def _dense_width(self, rows: list[list[Number]]) -> int:
        if self._policy.vocabulary_wide:
            return self._dictionary.size
        return max((len(row) for row in rows), default=0)

    def __repr__(self) -> str:
        return f"StringEncoder(policy={self._policy!r}, vocab_size={self._dictionary.size})"
