# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base class for state codecs.

Contract:
    encode(state) -> bytes
    decode(bytes) -> EncoderState

decode() either returns a fully validated EncoderState or raises
SerializationError. It never returns something half-read.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

from pydantic import ValidationError

from strenc.exceptions import SerializationError
from strenc.serialization.state import EncoderState


class StateCodec(ABC):
    """Translate EncoderState to and from one byte format."""

    name: ClassVar[str]
    extension: ClassVar[str]

    @abstractmethod
    def encode(self, state: EncoderState) -> bytes:
        ...

    @abstractmethod
    def decode(self, data: bytes) -> EncoderState:
        ...

    def _build_state(self, fields: dict) -> EncoderState:
        """
        Validate decoded fields, turning schema failures into SerializationError.

        Strict mode: a field of the wrong type is an error, never coerced.
        """
        try:
            return EncoderState.model_validate(fields, strict=True)
        except ValidationError as err:
            raise SerializationError(f"Invalid {self.name} state: {err}") from err
