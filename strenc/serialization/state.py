# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Canonical encoder state: the one shape every serialization format maps to.

An encoder is captured as plain data (policy name and parameters, the token
list in id order, the id list, and for TF-IDF the document-frequency table
and total document count). Codecs only ever translate between bytes and this
model; none of them touches a live encoder. Because all three formats decode
into the same validated model, they can't disagree about what was saved.

The validator enforces the dictionary invariants before anything is rebuilt:
ids are exactly 1..N in token order, tokens are unique and non-empty, and the
TF-IDF counters line up with the token list.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from strenc.config.schema import PolicyType, TfType

STATE_FORMAT_VERSION = 1


class EncoderState(BaseModel):
    """Plain-data snapshot of one encoder's dictionary and policy counters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    format_version: int = Field(default=STATE_FORMAT_VERSION)
    policy: PolicyType
    tf_type: Optional[TfType] = None
    smooth_idf: Optional[bool] = None
    tokens: list[str] = Field(default_factory=list)
    ids: list[int] = Field(default_factory=list)
    document_frequencies: Optional[list[int]] = None
    total_documents: Optional[int] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "EncoderState":
        if self.format_version != STATE_FORMAT_VERSION:
            raise ValueError(
                f"Unsupported state format version {self.format_version}, "
                f"expected {STATE_FORMAT_VERSION}"
            )

        if len(self.ids) != len(self.tokens):
            raise ValueError(
                f"{len(self.tokens)} tokens but {len(self.ids)} ids"
            )
        if self.ids != list(range(1, len(self.tokens) + 1)):
            raise ValueError("ids must be exactly 1..N in token order")
        if any(not token for token in self.tokens):
            raise ValueError("tokens must be non-empty strings")
        if len(set(self.tokens)) != len(self.tokens):
            raise ValueError("tokens must be unique")

        tfidf_fields = (
            self.tf_type,
            self.smooth_idf,
            self.document_frequencies,
            self.total_documents,
        )
        if self.policy == "tfidf":
            frequencies = self.document_frequencies
            total = self.total_documents
            if self.tf_type is None or self.smooth_idf is None or frequencies is None or total is None:
                raise ValueError(
                    "tfidf state needs tf_type, smooth_idf, document_frequencies "
                    "and total_documents"
                )
            if len(frequencies) != len(self.tokens):
                raise ValueError("document_frequencies must have one entry per token")
            if total < 0:
                raise ValueError("total_documents must be non-negative")
            if any(df < 0 or df > total for df in frequencies):
                raise ValueError(
                    "each document frequency must lie between 0 and total_documents"
                )
        elif any(value is not None for value in tfidf_fields):
            raise ValueError(f"{self.policy} state cannot carry tfidf fields")

        return self

    def policy_params(self) -> dict[str, Any]:
        """Keyword arguments that rebuild the policy this state came from."""
        if self.policy == "tfidf":
            return {"tf_type": self.tf_type, "smooth_idf": self.smooth_idf}
        return {}

    def policy_state(self) -> dict[str, Any]:
        """The persistent counters in the form EncodingPolicy.load_state_dict expects."""
        if self.policy == "tfidf":
            return {
                "document_frequencies": list(self.document_frequencies or []),
                "total_documents": self.total_documents,
            }
        return {}
