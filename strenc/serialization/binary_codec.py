# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Compact binary encoding, little-endian throughout.

    magic            4s   b"SENC"
    format_version   H
    policy           B    0 ordinal, 1 presence, 2 tfidf
    [tfidf only]
      tf_type        B    index into TF_TYPES
      smooth_idf     B    0 or 1
      total_docs     Q
    token_count      I
    token_count x:
      id             I
      byte_length    I
      utf-8 bytes
    [tfidf only]
      token_count x Q document frequencies, in id order

The buffer must be consumed exactly; trailing bytes are an error.
"""

import struct

from strenc.exceptions import SerializationError
from strenc.policies.tfidf import TF_TYPES
from strenc.serialization.base import StateCodec
from strenc.serialization.state import EncoderState

MAGIC = b"SENC"
POLICY_CODES = ("ordinal", "presence", "tfidf")

_HEADER = struct.Struct("<4sHB")
_TFIDF_HEADER = struct.Struct("<BBQ")
_COUNT = struct.Struct("<I")
_TOKEN_PREFIX = struct.Struct("<II")


class _Reader:
    """Bounds-checked cursor over the input buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    def unpack(self, layout: struct.Struct) -> tuple:
        if self.offset + layout.size > len(self.data):
            raise SerializationError(
                f"binary state truncated at offset {self.offset}"
            )
        values = layout.unpack_from(self.data, self.offset)
        self.offset += layout.size
        return values

    def take(self, length: int) -> bytes:
        if self.offset + length > len(self.data):
            raise SerializationError(
                f"binary state truncated at offset {self.offset}"
            )
        chunk = self.data[self.offset : self.offset + length]
        self.offset += length
        return chunk


class BinaryCodec(StateCodec):
    name = "binary"
    extension = ".bin"

    def encode(self, state: EncoderState) -> bytes:
        parts = [_HEADER.pack(MAGIC, state.format_version, POLICY_CODES.index(state.policy))]

        if state.policy == "tfidf":
            parts.append(
                _TFIDF_HEADER.pack(
                    TF_TYPES.index(state.tf_type),
                    1 if state.smooth_idf else 0,
                    state.total_documents,
                )
            )

        parts.append(_COUNT.pack(len(state.tokens)))
        for token_id, token in zip(state.ids, state.tokens):
            raw = token.encode("utf-8")
            parts.append(_TOKEN_PREFIX.pack(token_id, len(raw)))
            parts.append(raw)

        if state.document_frequencies is not None:
            count = len(state.document_frequencies)
            parts.append(struct.pack(f"<{count}Q", *state.document_frequencies))

        return b"".join(parts)

    def decode(self, data: bytes) -> EncoderState:
        reader = _Reader(data)

        magic, version, policy_code = reader.unpack(_HEADER)
        if magic != MAGIC:
            raise SerializationError(f"Bad magic {magic!r}, expected {MAGIC!r}")
        if policy_code >= len(POLICY_CODES):
            raise SerializationError(f"Unknown policy code {policy_code}")

        policy = POLICY_CODES[policy_code]
        fields: dict = {"format_version": version, "policy": policy}

        if policy == "tfidf":
            tf_code, smooth, total_documents = reader.unpack(_TFIDF_HEADER)
            if tf_code >= len(TF_TYPES):
                raise SerializationError(f"Unknown tf_type code {tf_code}")
            if smooth not in (0, 1):
                raise SerializationError(f"smooth_idf byte must be 0 or 1, got {smooth}")
            fields["tf_type"] = TF_TYPES[tf_code]
            fields["smooth_idf"] = bool(smooth)
            fields["total_documents"] = total_documents

        (token_count,) = reader.unpack(_COUNT)
        ids: list[int] = []
        tokens: list[str] = []
        for _ in range(token_count):
            token_id, length = reader.unpack(_TOKEN_PREFIX)
            try:
                token = reader.take(length).decode("utf-8")
            except UnicodeDecodeError as err:
                raise SerializationError(f"Token {token_id} is not valid UTF-8") from err
            ids.append(token_id)
            tokens.append(token)

        fields["ids"] = ids
        fields["tokens"] = tokens

        if policy == "tfidf":
            fields["document_frequencies"] = list(
                reader.unpack(struct.Struct(f"<{token_count}Q"))
            )

        if reader.offset != len(data):
            raise SerializationError(
                f"{len(data) - reader.offset} trailing bytes after binary state"
            )

        return self._build_state(fields)
