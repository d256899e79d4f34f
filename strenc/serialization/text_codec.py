# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Plain delimited-text encoding.

Layout (UTF-8, every line ends in a newline):

    strenc-state 1
    policy=tfidf
    tf_type=raw_count
    smooth_idf=true
    total_documents=3
    tokens=5
    <blank line>
    1<TAB>G<TAB>2
    2<TAB>A<TAB>3
    ...

Header lines are key=value pairs. Body rows are id, token and (tfidf only)
document frequency separated by tabs, one row per token in id order. The
vocab.txt convention of "token<TAB>id" is flipped so the id, which is always
safe, comes first.

Inside a token, backslash, tab, newline and carriage return are written as
\\\\, \\t, \\n and \\r so a row always fits on one line.
"""

import re
from typing import Any

from strenc.exceptions import SerializationError
from strenc.serialization.base import StateCodec
from strenc.serialization.state import EncoderState

MAGIC_LINE = "strenc-state"
_DIGITS = re.compile("[0-9]+")

_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "t": "\t", "n": "\n", "r": "\r"}


def escape_token(token: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in token)


def unescape_token(text: str) -> str:
    """
    Reverse escape_token().

    Raises:
        SerializationError: On a dangling backslash or an unknown escape.
    """
    chars: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            if index + 1 >= len(text):
                raise SerializationError(f"Dangling escape in token {text!r}")
            escaped = text[index + 1]
            if escaped not in _UNESCAPES:
                raise SerializationError(f"Unknown escape '\\{escaped}' in token {text!r}")
            chars.append(_UNESCAPES[escaped])
            index += 2
        else:
            chars.append(char)
            index += 1
    return "".join(chars)


def _parse_int(value: str, what: str) -> int:
    if not _DIGITS.fullmatch(value):
        raise SerializationError(f"Expected an integer for {what}, got {value!r}")
    return int(value)


def _parse_bool(value: str, what: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise SerializationError(f"Expected true or false for {what}, got {value!r}")


class TextCodec(StateCodec):
    name = "text"
    extension = ".txt"

    def encode(self, state: EncoderState) -> bytes:
        lines = [f"{MAGIC_LINE} {state.format_version}", f"policy={state.policy}"]
        if state.policy == "tfidf":
            lines.append(f"tf_type={state.tf_type}")
            lines.append(f"smooth_idf={'true' if state.smooth_idf else 'false'}")
            lines.append(f"total_documents={state.total_documents}")
        lines.append(f"tokens={len(state.tokens)}")
        lines.append("")

        frequencies = state.document_frequencies
        for position, (token_id, token) in enumerate(zip(state.ids, state.tokens)):
            row = f"{token_id}\t{escape_token(token)}"
            if frequencies is not None:
                row += f"\t{frequencies[position]}"
            lines.append(row)

        return ("\n".join(lines) + "\n").encode("utf-8")

    def decode(self, data: bytes) -> EncoderState:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise SerializationError(f"text state is not valid UTF-8: {err}") from err

        lines = text.split("\n")
        if len(lines) < 2 or lines[-1] != "":
            raise SerializationError("text state must end with a newline")
        lines.pop()

        magic, _, version = lines[0].partition(" ")
        if magic != MAGIC_LINE:
            raise SerializationError(f"Not a strenc text state (first line {lines[0]!r})")

        fields: dict[str, Any] = {"format_version": _parse_int(version, "format version")}

        try:
            separator = lines.index("")
        except ValueError as err:
            raise SerializationError("text state has no blank line after the header") from err

        header: dict[str, str] = {}
        for line in lines[1:separator]:
            key, equals, value = line.partition("=")
            if not equals:
                raise SerializationError(f"Malformed header line {line!r}")
            if key in header:
                raise SerializationError(f"Duplicate header key {key!r}")
            header[key] = value

        if "policy" not in header or "tokens" not in header:
            raise SerializationError("text state header needs 'policy' and 'tokens'")

        policy = header.pop("policy")
        fields["policy"] = policy
        token_count = _parse_int(header.pop("tokens"), "tokens")
        is_tfidf = policy == "tfidf"
        if is_tfidf:
            try:
                fields["tf_type"] = header.pop("tf_type")
                fields["smooth_idf"] = _parse_bool(header.pop("smooth_idf"), "smooth_idf")
                fields["total_documents"] = _parse_int(
                    header.pop("total_documents"), "total_documents"
                )
            except KeyError as err:
                raise SerializationError(f"tfidf text state is missing header {err}") from err
        if header:
            raise SerializationError(f"Unexpected header keys: {sorted(header)}")

        rows = lines[separator + 1 :]
        if len(rows) != token_count:
            raise SerializationError(
                f"Header declares {token_count} tokens but {len(rows)} rows follow"
            )

        expected_columns = 3 if is_tfidf else 2
        ids: list[int] = []
        tokens: list[str] = []
        frequencies: list[int] = []
        for row in rows:
            columns = row.split("\t")
            if len(columns) != expected_columns:
                raise SerializationError(
                    f"Row {row!r} has {len(columns)} columns, expected {expected_columns}"
                )
            ids.append(_parse_int(columns[0], "token id"))
            tokens.append(unescape_token(columns[1]))
            if is_tfidf:
                frequencies.append(_parse_int(columns[2], "document frequency"))

        fields["ids"] = ids
        fields["tokens"] = tokens
        if is_tfidf:
            fields["document_frequencies"] = frequencies

        return self._build_state(fields)
