# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured, self-describing encoding: the state as a JSON object.

Every field is named, so the file is readable on its own and can be diffed.
Tokens are JSON strings, which takes care of any quoting or control
characters inside them.
"""

import json

from strenc.exceptions import SerializationError
from strenc.serialization.base import StateCodec
from strenc.serialization.state import EncoderState


class JsonCodec(StateCodec):
    name = "json"
    extension = ".json"

    def encode(self, state: EncoderState) -> bytes:
        payload = state.model_dump(exclude_none=True)
        return (json.dumps(payload, ensure_ascii=False, indent=2) + "\n").encode("utf-8")

    def decode(self, data: bytes) -> EncoderState:
        try:
            parsed = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as err:
            raise SerializationError(f"Malformed json state: {err}") from err

        if not isinstance(parsed, dict):
            raise SerializationError(
                f"json state must be an object, got {type(parsed).__name__}"
            )
        return self._build_state(parsed)
