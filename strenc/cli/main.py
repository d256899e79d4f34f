# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for strenc.

Every operation is a subcommand of `strenc`. The global options (--config,
--log-level, --dry-run) are inherited by every subcommand through argparse's
parent parser mechanism.

Usage:
    strenc encode --config configs/encode.yaml --input corpus.txt
    strenc encode --input corpus.txt --bundle encoded/  (continue a saved vocabulary)
    strenc info --bundle encoded/
"""

import argparse
import sys
from typing import Optional

from strenc.cli.commands import handle_encode, handle_info
from strenc.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False keeps its -h from colliding with the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Validate inputs without encoding or writing anything.",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="strenc",
        description="strenc: encode text sequences into numeric features.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")

    encode_parser = subparsers.add_parser(
        "encode", parents=[parent], help="Encode a text file, one sequence per line."
    )
    encode_parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Text file to encode; every line is one sequence.",
    )
    encode_parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        dest="output_dir",
        help="Where to write encoded.json and the bundle (overrides config).",
    )
    encode_parser.add_argument(
        "--bundle",
        type=str,
        default=None,
        help="Existing bundle to continue from; its vocabulary keeps growing.",
    )
    encode_parser.set_defaults(func=handle_encode)

    info_parser = subparsers.add_parser(
        "info", parents=[parent], help="Verify a bundle and summarise the saved encoder."
    )
    info_parser.add_argument(
        "--bundle",
        type=str,
        required=True,
        help="Bundle directory to inspect.",
    )
    info_parser.set_defaults(func=handle_info)

    return root_parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    Main CLI entrypoint, referenced by [project.scripts] in pyproject.toml.

    With no subcommand, prints help and exits with USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args(argv)

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
