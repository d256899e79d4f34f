# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Serialize and restore whole encoders.

    encoder --to_state()--> EncoderState --codec.encode()--> bytes
    bytes --codec.decode()--> EncoderState --from_state()--> encoder

Every format goes through the same canonical EncoderState, so the json, text
and binary copies of one encoder restore to identical dictionaries and
counters, and produce identical output when re-run on the same input.
"""

import logging

from strenc.encoder.core import StringEncoder
from strenc.exceptions import DictionaryError, PolicyError, SerializationError
from strenc.logging.logger import get_logger
from strenc.serialization.base import StateCodec
from strenc.serialization.binary_codec import BinaryCodec
from strenc.serialization.json_codec import JsonCodec
from strenc.serialization.state import EncoderState
from strenc.serialization.text_codec import TextCodec

logger: logging.Logger = get_logger(__name__)

_CODECS: dict[str, StateCodec] = {
    codec.name: codec for codec in (JsonCodec(), TextCodec(), BinaryCodec())
}


def list_formats() -> list[str]:
    """Return sorted list of all serialization format names."""
    return sorted(_CODECS.keys())


def get_codec(fmt: str) -> StateCodec:
    """
    Look up the codec for a format name.

    Raises:
        KeyError: If `fmt` is not a known format.
    """
    if fmt not in _CODECS:
        raise KeyError(f"Unknown serialization format '{fmt}'. Available: {list_formats()}")
    return _CODECS[fmt]


def encode_state(state: EncoderState, fmt: str = "json") -> bytes:
    """
    Encode a state in the given format.

    Raises:
        SerializationError: If a token cannot be written as UTF-8 (lone surrogates).
    """
    try:
        return get_codec(fmt).encode(state)
    except UnicodeEncodeError as err:
        raise SerializationError(f"Token cannot be encoded as UTF-8 for {fmt}: {err}") from err


def decode_state(data: bytes, fmt: str = "json") -> EncoderState:
    """
    Decode bytes into a validated EncoderState.

    Raises:
        SerializationError: If the bytes are not a well-formed state in `fmt`.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise SerializationError(f"Expected bytes, got {type(data).__name__}")
    return get_codec(fmt).decode(bytes(data))


def serialize(encoder: StringEncoder, fmt: str = "json") -> bytes:
    """Encode an encoder's dictionary and policy counters in the given format."""
    data = encode_state(encoder.to_state(), fmt)
    logger.debug(
        "Encoder serialized",
        extra={"format": fmt, "bytes": len(data), "vocab_size": encoder.dictionary.size},
    )
    return data


def deserialize(data: bytes, fmt: str = "json") -> StringEncoder:
    """
    Rebuild an encoder from bytes produced by serialize().

    Raises:
        SerializationError: For any malformed or inconsistent input. Nothing
            is returned unless the whole state decoded and validated.
    """
    state = decode_state(data, fmt)
    try:
        encoder = StringEncoder.from_state(state)
    except (DictionaryError, PolicyError) as err:
        raise SerializationError(f"Decoded {fmt} state is inconsistent: {err}") from err

    logger.debug(
        "Encoder deserialized",
        extra={"format": fmt, "policy": state.policy, "vocab_size": len(state.tokens)},
    )
    return encoder
