# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI tests: argument parsing, exit codes, and the encode / info flow end to end.

Handlers are called through main() with an argv list, the same path the
console script takes.
"""

import json
from pathlib import Path

import pytest

from strenc.cli.commands import _read_sequences
from strenc.cli.exit_codes import CONFIG_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from strenc.cli.main import build_parser, main


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture()
def corpus_file(tmp_path: Path) -> Path:
    corpus = tmp_path / "corpus.txt"
    corpus.write_text("GACCA\nABCABCD\nGAB\n", encoding="utf-8")
    return corpus


class TestParser:
    def test_no_subcommand_is_user_error(self) -> None:
        assert _run([]) == USER_ERROR

    def test_global_options_reach_subcommands(self) -> None:
        args = build_parser().parse_args(["encode", "--input", "x.txt", "--dry-run", "--log-level", "DEBUG"])
        assert args.command == "encode"
        assert args.dry_run is True
        assert args.log_level == "DEBUG"

    def test_encode_requires_input(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["encode"])


class TestReadSequences:
    def test_only_line_feed_ends_a_sequence(self, tmp_path: Path) -> None:
        corpus = tmp_path / "breaks.txt"
        corpus.write_bytes("a b\r\nc\x0bd\u2028e\x1cf\n\nlast".encode("utf-8"))

        assert _read_sequences(corpus) == ["a b", "c\x0bd\u2028e\x1cf", "", "last"]

    def test_single_trailing_newline_is_not_a_sequence(self, tmp_path: Path) -> None:
        corpus = tmp_path / "one.txt"
        corpus.write_bytes(b"GAB\n")
        assert _read_sequences(corpus) == ["GAB"]

    def test_empty_file_has_no_sequences(self, tmp_path: Path) -> None:
        corpus = tmp_path / "empty.txt"
        corpus.write_bytes(b"")
        assert _read_sequences(corpus) == []


class TestEncodeCommand:
    def test_defaults_write_output_and_bundle(self, tmp_path: Path, corpus_file: Path) -> None:
        output_dir = tmp_path / "out"
        code = _run(["encode", "--input", str(corpus_file), "--output-dir", str(output_dir)])

        assert code == SUCCESS
        encoded = json.loads((output_dir / "encoded.json").read_text(encoding="utf-8"))
        assert encoded["policy"] == "ordinal"
        assert encoded["output_mode"] == "dense"
        assert encoded["shape"] == [3, 1]
        assert encoded["rows"] == [[1], [2], [3]]
        assert (output_dir / "state.json").is_file()
        assert (output_dir / "checksum.txt").is_file()

    def test_config_drives_policy_and_format(self, encode_config_file: Path, corpus_file: Path, tmp_path: Path) -> None:
        code = _run(["encode", "--config", str(encode_config_file), "--input", str(corpus_file)])

        assert code == SUCCESS
        output_dir = tmp_path / "encoded"
        encoded = json.loads((output_dir / "encoded.json").read_text(encoding="utf-8"))
        assert encoded["policy"] == "tfidf"
        assert encoded["shape"] == [3, 5]
        assert encoded["rows"][2][1] == pytest.approx(1.0)
        assert (output_dir / "state.bin").is_file()

    def test_continue_from_bundle(self, tmp_path: Path, corpus_file: Path) -> None:
        first_dir = tmp_path / "first"
        second_dir = tmp_path / "second"
        assert _run(["encode", "--input", str(corpus_file), "--output-dir", str(first_dir)]) == SUCCESS

        more = tmp_path / "more.txt"
        more.write_text("GACCA IS NEW\n", encoding="utf-8")
        code = _run(
            ["encode", "--input", str(more), "--output-dir", str(second_dir), "--bundle", str(first_dir)]
        )

        assert code == SUCCESS
        encoded = json.loads((second_dir / "encoded.json").read_text(encoding="utf-8"))
        assert encoded["rows"][0][0] == 1

    def test_missing_input_is_user_error(self, tmp_path: Path) -> None:
        assert _run(["encode", "--input", str(tmp_path / "nope.txt")]) == USER_ERROR

    def test_broken_config_is_config_error(self, broken_yaml_file: Path, corpus_file: Path) -> None:
        assert _run(["encode", "--config", str(broken_yaml_file), "--input", str(corpus_file)]) == CONFIG_ERROR

    def test_dry_run_writes_nothing(self, tmp_path: Path, corpus_file: Path) -> None:
        output_dir = tmp_path / "dry"
        code = _run(["encode", "--input", str(corpus_file), "--output-dir", str(output_dir), "--dry-run"])

        assert code == SUCCESS
        assert not output_dir.exists()


class TestInfoCommand:
    def test_info_on_valid_bundle(self, tmp_path: Path, corpus_file: Path) -> None:
        output_dir = tmp_path / "out"
        _run(["encode", "--input", str(corpus_file), "--output-dir", str(output_dir)])

        assert _run(["info", "--bundle", str(output_dir)]) == SUCCESS

    def test_info_on_tampered_bundle(self, tmp_path: Path, corpus_file: Path) -> None:
        output_dir = tmp_path / "out"
        _run(["encode", "--input", str(corpus_file), "--output-dir", str(output_dir)])
        (output_dir / "metadata.json").write_text("{}", encoding="utf-8")

        assert _run(["info", "--bundle", str(output_dir)]) == VALIDATION_ERROR

    def test_info_on_missing_directory(self, tmp_path: Path) -> None:
        assert _run(["info", "--bundle", str(tmp_path / "absent")]) == USER_ERROR
