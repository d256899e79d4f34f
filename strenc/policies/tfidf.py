# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
TF-IDF encoding: one weighted column per dictionary id.

    value(token, sequence) = tf(token, sequence) * idf(token)

Term frequency comes in four flavours:
    raw_count       number of occurrences
    binary          1 if the token occurs at all
    sublinear       1 + ln(count)
    term_frequency  count / number of tokens in the sequence

Inverse document frequency, with N the number of sequences processed so far
and df the number of those sequences containing the token:
    smoothed        ln((1 + N) / (1 + df)) + 1
    unsmoothed      ln(N / df) + 1

N and df accumulate across encode calls, the same way the dictionary does,
and are only cleared by reset(). Empty sequences count towards N.

idf is only evaluated for tokens present in the row being built, which
implies df >= 1, so the unsmoothed formula never divides by zero. A sequence
that tokenizes to nothing produces an all-zero row under every tf variant,
including term_frequency (its zero length is never used as a divisor).
"""

import math
from collections import Counter
from typing import Any, Callable

import torch

from strenc.dictionary.core import StringEncodingDictionary
from strenc.exceptions import PolicyError
from strenc.policies.base import EncodingPolicy
from strenc.policies.registry import register_policy

_TF_FUNCTIONS: dict[str, Callable[[int, int], float]] = {
    "raw_count": lambda count, length: float(count),
    "binary": lambda count, length: 1.0,
    "sublinear": lambda count, length: 1.0 + math.log(count),
    "term_frequency": lambda count, length: count / length,
}

TF_TYPES = tuple(_TF_FUNCTIONS)


class TfIdfPolicy(EncodingPolicy):
    """
    Weight vocabulary entries by term frequency and inverse document frequency.

    Args:
        tf_type: One of raw_count, binary, sublinear, term_frequency.
        smooth_idf: Use the smoothed idf formula.
    """

    name = "tfidf"
    vocabulary_wide = True
    dtype = torch.float64

    def __init__(self, tf_type: str = "raw_count", smooth_idf: bool = True) -> None:
        if tf_type not in _TF_FUNCTIONS:
            raise PolicyError(f"Unknown tf_type '{tf_type}'. Available: {list(TF_TYPES)}")
        self.tf_type = tf_type
        self.smooth_idf = smooth_idf
        self._tf = _TF_FUNCTIONS[tf_type]

        # Indexed by token id - 1; grows with the dictionary.
        self._document_frequencies: list[int] = []
        self._total_documents = 0

        self._counts: list[Counter[int]] = []
        self._lengths: list[int] = []

    @property
    def total_documents(self) -> int:
        return self._total_documents

    def document_frequency(self, token_id: int) -> int:
        """Number of processed sequences containing the token; 0 for unknown ids."""
        if token_id < 1 or token_id > len(self._document_frequencies):
            return 0
        return self._document_frequencies[token_id - 1]

    def idf(self, token_id: int) -> float:
        """
        Inverse document frequency of one token under the configured smoothing.

        Raises:
            PolicyError: Unsmoothed idf of a token that no sequence contained.
        """
        df = self.document_frequency(token_id)
        n = self._total_documents
        if self.smooth_idf:
            return math.log((1 + n) / (1 + df)) + 1.0
        if df == 0:
            raise PolicyError(f"Token id {token_id} has document frequency 0; idf is undefined")
        return math.log(n / df) + 1.0

    def begin(self, dictionary: StringEncodingDictionary, sequence_count: int) -> None:
        self._counts = [Counter() for _ in range(sequence_count)]
        self._lengths = [0] * sequence_count

    def observe(self, sequence_index: int, token_id: int) -> None:
        self._counts[sequence_index][token_id] += 1
        self._lengths[sequence_index] += 1

    def finalize(self, dictionary: StringEncodingDictionary) -> list[list[float]]:
        width = dictionary.size
        self._extend_frequencies(width)

        # Document frequencies must include the whole batch before any idf
        # is evaluated.
        for counts in self._counts:
            for token_id in counts:
                self._document_frequencies[token_id - 1] += 1
        self._total_documents += len(self._counts)

        idf_cache: dict[int, float] = {}
        rows: list[list[float]] = []
        for counts, length in zip(self._counts, self._lengths):
            row = [0.0] * width
            for token_id, count in counts.items():
                if token_id not in idf_cache:
                    idf_cache[token_id] = self.idf(token_id)
                row[token_id - 1] = self._tf(count, length) * idf_cache[token_id]
            rows.append(row)

        self._counts = []
        self._lengths = []
        return rows

    def params(self) -> dict[str, Any]:
        return {"tf_type": self.tf_type, "smooth_idf": self.smooth_idf}

    def state_dict(self) -> dict[str, Any]:
        return {
            "document_frequencies": list(self._document_frequencies),
            "total_documents": self._total_documents,
        }

    def load_state_dict(self, state: dict[str, Any]) -> None:
        frequencies = [int(df) for df in state["document_frequencies"]]
        total = int(state["total_documents"])
        if total < 0 or any(df < 0 or df > total for df in frequencies):
            raise PolicyError(
                "Document frequencies must lie between 0 and the total document count"
            )
        self._document_frequencies = frequencies
        self._total_documents = total

    def reset(self) -> None:
        self._document_frequencies = []
        self._total_documents = 0
        self._counts = []
        self._lengths = []

    def _extend_frequencies(self, width: int) -> None:
        missing = width - len(self._document_frequencies)
        if missing > 0:
            self._document_frequencies.extend([0] * missing)


register_policy(TfIdfPolicy.name, TfIdfPolicy)
