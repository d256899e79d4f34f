# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for strenc tests.

Fixtures here are available to every test file automatically.
"""

import textwrap
from pathlib import Path

import pytest

from strenc.tokenizer.core import CharExtract, SplitByAnyOf

CHAR_SEQUENCES = ["GACCA", "ABCABCD", "GAB"]

SENTENCES = [
    "mlpack is an intuitive, fast, and flexible C++ machine learning library "
    "with bindings to other languages. ",
    "It is meant to be a machine learning analog to LAPACK, and aims to "
    "implement a wide array of machine learning methods and functions as a "
    '"swiss army knife" for machine learning researchers.',
    "In addition to its powerful C++ interface, mlpack also provides "
    "command-line programs and Python bindings.",
]


@pytest.fixture()
def char_sequences() -> list[str]:
    return list(CHAR_SEQUENCES)


@pytest.fixture()
def sentences() -> list[str]:
    return list(SENTENCES)


@pytest.fixture()
def char_tokenizer() -> CharExtract:
    return CharExtract()


@pytest.fixture()
def word_tokenizer() -> SplitByAnyOf:
    """Splits on space, period, comma and double quote."""
    return SplitByAnyOf(" .,\"")


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    Create a minimal valid config YAML file in a temp directory.

    This is the smallest config that passes schema validation.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "strenc-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def encode_config_file(tmp_path: Path) -> Path:
    """A config with tokenizer and encoder sections, writing into tmp_path."""
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          project_name: "strenc-test"
        tokenizer:
          tokenizer_type: "char"
        encoder:
          config_version: "1.0.0"
          policy: "tfidf"
          tf_type: "raw_count"
          smooth_idf: true
          output_mode: "dense"
          serialization_format: "binary"
          output_directory: "{(tmp_path / 'encoded').as_posix()}"
    """)
    config_file = tmp_path / "encode_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing required field)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "strenc-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
