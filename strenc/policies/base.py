# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base class for encoding policies.

A policy turns the token ids of a batch into numbers. The encoder drives
every policy through the same three calls:

    begin(dictionary, sequence_count)   once, before the first token
    observe(sequence_index, token_id)   once per token, in input order
    finalize(dictionary) -> rows        once, after the last token

The dictionary is owned by the encoder and handed in, never copied, so all
policies agree on what each id means. finalize() returns one unpadded row per
sequence; padding and tensor construction happen in the encoder.

Counters that must survive between batches (TF-IDF document frequencies) are
exposed through state_dict() / load_state_dict() so the serializer can move
them together with the dictionary.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Union

import torch

from strenc.dictionary.core import StringEncodingDictionary

Number = Union[int, float]


class EncodingPolicy(ABC):
    """
    Base class for all encoding policies.

    Class attributes:
        name: Registry identifier, also written into serialized state.
        vocabulary_wide: True when every row has one column per dictionary id,
            False when rows follow the sequence's own token count.
        dtype: Tensor dtype of dense output.
    """

    name: ClassVar[str]
    vocabulary_wide: ClassVar[bool]
    dtype: ClassVar[torch.dtype]

    def begin(self, dictionary: StringEncodingDictionary, sequence_count: int) -> None:
        """Prepare per-batch accumulators for `sequence_count` sequences."""

    @abstractmethod
    def observe(self, sequence_index: int, token_id: int) -> None:
        """Record one token occurrence for the given sequence."""
        ...

    @abstractmethod
    def finalize(self, dictionary: StringEncodingDictionary) -> list[list[Number]]:
        """Turn the batch accumulators into one row per sequence and drop them."""
        ...

    def params(self) -> dict[str, Any]:
        """Construction parameters, enough to rebuild an equivalent empty policy."""
        return {}

    def state_dict(self) -> dict[str, Any]:
        """Counters that persist across batches. Empty for stateless policies."""
        return {}

    def load_state_dict(self, state: dict[str, Any]) -> None:
        """Restore counters produced by state_dict()."""

    def reset(self) -> None:
        """Drop every accumulator and persistent counter."""

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.params().items())
        return f"{type(self).__name__}({args})"
