# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Ordinal encoding: every token is replaced by its dictionary id.

Rows keep the sequence's own order and length. In dense output the encoder
pads each row with 0 up to the longest row of the batch, so here 0 means
"no token at this position".
"""

import torch

from strenc.dictionary.core import StringEncodingDictionary
from strenc.policies.base import EncodingPolicy
from strenc.policies.registry import register_policy


class OrdinalPolicy(EncodingPolicy):
    """Emit token ids in the order they occur."""

    name = "ordinal"
    vocabulary_wide = False
    dtype = torch.int64

    def __init__(self) -> None:
        self._rows: list[list[int]] = []

    def begin(self, dictionary: StringEncodingDictionary, sequence_count: int) -> None:
        self._rows = [[] for _ in range(sequence_count)]

    def observe(self, sequence_index: int, token_id: int) -> None:
        self._rows[sequence_index].append(token_id)

    def finalize(self, dictionary: StringEncodingDictionary) -> list[list[int]]:
        rows, self._rows = self._rows, []
        return rows

    def reset(self) -> None:
        self._rows = []


register_policy(OrdinalPolicy.name, OrdinalPolicy)
