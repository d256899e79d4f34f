# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for strenc.

Each config section gets its own frozen pydantic model. Frozen means once you
create it, you cannot mutate it. An encoder built from a config keeps
behaving the way that config said for its whole life.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Tokenizer and policy selection happens here, at construction time. Nothing
in the encoder negotiates these at runtime.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TokenizerType = Literal["split", "char", "whitespace"]
PolicyType = Literal["ordinal", "presence", "tfidf"]
TfType = Literal["raw_count", "binary", "sublinear", "term_frequency"]
OutputMode = Literal["dense", "ragged", "sparse"]
SerializationFormat = Literal["json", "text", "binary"]


class GlobalConfig(BaseModel):
    """
    Cross-cutting settings that apply to the entire system.

    This is the first section loaded and it controls observability
    (log_level, log_file) and project identity.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="strenc", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class TokenizerConfig(BaseModel):
    """
    Which tokenizer splits each input sequence.

    'split' breaks on any character in `delimiters`, 'char' yields every
    character, and 'whitespace' delegates to the Hugging Face whitespace
    pre-tokenizer (words and punctuation runs).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    tokenizer_type: TokenizerType = Field(
        default="split",
        description="Tokenizer variant: 'split', 'char' or 'whitespace'",
    )
    delimiters: str = Field(
        default=" ",
        description="Delimiter characters for the 'split' tokenizer; empty means no splitting",
    )


class EncoderConfig(BaseModel):
    """
    Encoding policy, output shape, and persistence settings.

    tf_type and smooth_idf only matter for the 'tfidf' policy. They are
    accepted (and ignored) for the other policies so one config file can be
    flipped between policies by editing a single line.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    policy: PolicyType = Field(
        default="ordinal",
        description="Encoding policy: 'ordinal', 'presence' or 'tfidf'",
    )
    tf_type: TfType = Field(
        default="raw_count",
        description="Term-frequency variant for the tfidf policy",
    )
    smooth_idf: bool = Field(
        default=True,
        description="Use ln((1+N)/(1+df)) + 1 instead of ln(N/df) + 1",
    )
    output_mode: OutputMode = Field(
        default="dense",
        description="Shape of the encoded output: 'dense', 'ragged' or 'sparse'",
    )
    serialization_format: SerializationFormat = Field(
        default="json",
        description="Encoding used for the persisted encoder state",
    )
    output_directory: str = Field(
        default="encoded",
        description="Where encoded output and the state bundle get written",
    )


class StrencConfig(BaseModel):
    """
    Top-level config container. Each CLI command loads the relevant section.

    Sections not present in the YAML stay None and commands that need them
    fall back to the section defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    tokenizer: Optional[TokenizerConfig] = Field(default=None)
    encoder: Optional[EncoderConfig] = Field(default=None)
