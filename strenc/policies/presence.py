# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Presence (bag-of-words) encoding: one 0/1 column per dictionary id.

Column j of a row is 1 when the token with id j + 1 occurs anywhere in that
sequence. Width is the dictionary size at the end of the batch, so tokens
first seen in later sequences still get a (zero) column in earlier rows.
"""

import torch

from strenc.dictionary.core import StringEncodingDictionary
from strenc.policies.base import EncodingPolicy
from strenc.policies.registry import register_policy


class PresencePolicy(EncodingPolicy):
    """Mark which vocabulary entries appear in each sequence."""

    name = "presence"
    vocabulary_wide = True
    dtype = torch.int64

    def __init__(self) -> None:
        self._seen: list[set[int]] = []

    def begin(self, dictionary: StringEncodingDictionary, sequence_count: int) -> None:
        self._seen = [set() for _ in range(sequence_count)]

    def observe(self, sequence_index: int, token_id: int) -> None:
        self._seen[sequence_index].add(token_id)

    def finalize(self, dictionary: StringEncodingDictionary) -> list[list[int]]:
        width = dictionary.size
        rows: list[list[int]] = []
        for seen in self._seen:
            row = [0] * width
            for token_id in seen:
                row[token_id - 1] = 1
            rows.append(row)

        self._seen = []
        return rows

    def reset(self) -> None:
        self._seen = []


register_policy(PresencePolicy.name, PresencePolicy)
