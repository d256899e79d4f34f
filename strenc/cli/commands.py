# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the strenc CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code from strenc.cli.exit_codes. No print() calls. Everything goes through
the structured logger.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from strenc.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from strenc.config.exceptions import ConfigError
from strenc.config.loader import load_config
from strenc.config.schema import EncoderConfig, StrencConfig, TokenizerConfig
from strenc.exceptions import BundleIntegrityError, SerializationError, StrencError
from strenc.logging.logger import get_logger

if TYPE_CHECKING:
    from strenc.encoder.core import StringEncoder
    from strenc.tokenizer.core import Tokenizer

ENCODED_FILE = "encoded.json"
DEFAULT_CONFIG_VERSION = "1.0.0"


def _load_config_and_logger(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[StrencConfig], logging.Logger]:
    """
    The shared setup every command needs: load config, create the logger.

    Returns a tuple of (exit_code, config, logger). If exit_code is not SUCCESS,
    the caller should return it immediately.
    """
    config = None
    config_error: Optional[ConfigError] = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            config_error = err

    log_file = None
    if config is not None and config.global_config.log_file is not None:
        log_file = Path(config.global_config.log_file)
    logger = get_logger(f"strenc.cli.{command_name}", log_level=args.log_level, log_file=log_file)

    if config_error is not None:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(config_error)},
        )
        return CONFIG_ERROR, None, logger

    if config is None:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _read_sequences(input_path: Path) -> list[str]:
    """
    One sequence per line; blank lines are kept.

    Only LF (optionally preceded by CR) ends a line. Other Unicode line
    breaks such as VT or U+2028 stay inside the sequence.
    """
    with open(input_path, encoding="utf-8", newline="") as f:
        text = f.read()
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _encode_payload(
    encoder: "StringEncoder",
    sequences: list[str],
    tokenizer: "Tokenizer",
    output_mode: str,
) -> dict[str, object]:
    if output_mode == "ragged":
        rows = encoder.encode_ragged(sequences, tokenizer)
        return {"output_mode": output_mode, "rows": rows}

    if output_mode == "sparse":
        sparse = encoder.encode_sparse(sequences, tokenizer)
        return {
            "output_mode": output_mode,
            "shape": list(sparse.shape),
            "indices": sparse.indices().tolist(),
            "values": sparse.values().tolist(),
        }

    dense = encoder.encode(sequences, tokenizer)
    return {
        "output_mode": output_mode,
        "shape": list(dense.shape),
        "rows": dense.tolist(),
    }


def handle_encode(args: argparse.Namespace) -> int:
    """Encode a text file and write the output plus an encoder bundle."""
    exit_code, config, logger = _load_config_and_logger(args, "encode")
    if exit_code != SUCCESS:
        return exit_code

    encoder_config = (
        config.encoder
        if config is not None and config.encoder is not None
        else EncoderConfig(config_version=DEFAULT_CONFIG_VERSION)
    )
    tokenizer_config = (
        config.tokenizer
        if config is not None and config.tokenizer is not None
        else TokenizerConfig()
    )

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error("Input file not found", extra={"input": str(input_path)})
        return USER_ERROR

    output_dir = Path(args.output_dir or encoder_config.output_directory)

    try:
        from strenc.artifacts.bundle import load_bundle, save_bundle
        from strenc.encoder.factory import build_encoder
        from strenc.tokenizer.core import build_tokenizer
        from strenc.utils.filesystem import atomic_write

        sequences = _read_sequences(input_path)
        logger.info(
            "Starting encode",
            extra={
                "command": "encode",
                "input": str(input_path),
                "sequences": len(sequences),
                "policy": encoder_config.policy,
                "tokenizer": tokenizer_config.tokenizer_type,
                "dry_run": args.dry_run,
            },
        )

        if args.dry_run:
            logger.info(
                "Dry run, would encode sequences",
                extra={"sequences": len(sequences), "output_dir": str(output_dir)},
            )
            return SUCCESS

        tokenizer = build_tokenizer(tokenizer_config)
        if args.bundle is not None:
            encoder = load_bundle(Path(args.bundle))
            if encoder.policy.name != encoder_config.policy:
                logger.warning(
                    "Bundle policy overrides config policy",
                    extra={"bundle_policy": encoder.policy.name, "config_policy": encoder_config.policy},
                )
            logger.info(
                "Continuing from bundle",
                extra={"bundle": args.bundle, "vocab_size": encoder.dictionary.size},
            )
        else:
            encoder = build_encoder(encoder_config)

        payload = _encode_payload(encoder, sequences, tokenizer, encoder_config.output_mode)
        payload["policy"] = encoder.policy.name

        atomic_write(output_dir / ENCODED_FILE, json.dumps(payload) + "\n")
        result = save_bundle(encoder, encoder_config, output_dir, tokenizer_config)

        logger.info(
            "Encode complete",
            extra={
                "output_dir": result.output_directory,
                "vocab_size": result.vocab_size,
                "version_hash": result.version_hash,
            },
        )
        return SUCCESS

    except (BundleIntegrityError, SerializationError) as err:
        logger.error("Bundle could not be loaded", extra={"error": str(err)})
        return VALIDATION_ERROR
    except (StrencError, OSError, UnicodeDecodeError) as err:
        logger.error(
            "Encode failed",
            extra={"command": "encode", "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Verify a bundle's checksums and report what encoder it holds."""
    exit_code, _config, logger = _load_config_and_logger(args, "info")
    if exit_code != SUCCESS:
        return exit_code

    bundle_dir = Path(args.bundle)
    if not bundle_dir.is_dir():
        logger.error("Bundle directory not found", extra={"bundle": str(bundle_dir)})
        return USER_ERROR

    from strenc.artifacts.bundle import load_bundle, read_metadata

    try:
        encoder = load_bundle(bundle_dir)
        metadata = read_metadata(bundle_dir)
    except (BundleIntegrityError, SerializationError) as err:
        logger.error("Bundle verification failed", extra={"bundle": str(bundle_dir), "error": str(err)})
        return VALIDATION_ERROR

    details: dict[str, object] = {
        "bundle": str(bundle_dir),
        "format": metadata.get("format"),
        "policy": encoder.policy.name,
        "policy_params": encoder.policy.params(),
        "vocab_size": encoder.dictionary.size,
        "version_hash": metadata.get("version_hash"),
    }
    total_documents = encoder.policy.state_dict().get("total_documents")
    if total_documents is not None:
        details["total_documents"] = total_documents

    logger.info("Bundle verified", extra=details)
    return SUCCESS
