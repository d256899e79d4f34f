# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Encoder artifact bundle: a self-contained directory holding one saved encoder.

The bundle contains:
  - state.<ext>           the serialized encoder (json, text or binary)
  - config_snapshot.yaml  frozen copy of the config that built the encoder
  - metadata.json         format, policy, vocab size, version hash, timestamps
  - checksum.txt          SHA256 of every other file

load_bundle() checks every checksum before decoding, so a bundle that was
truncated or edited by hand fails loudly instead of restoring a different
vocabulary.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional

import yaml

from strenc.config.schema import EncoderConfig, TokenizerConfig
from strenc.encoder.core import StringEncoder
from strenc.exceptions import BundleIntegrityError
from strenc.logging.logger import get_logger
from strenc.serialization.core import deserialize, get_codec, serialize
from strenc.utils.filesystem import atomic_write, atomic_write_bytes, safe_read
from strenc.utils.hashing import compute_sha256, compute_sha256_bytes, verify_checksum

STATE_STEM = "state"
CONFIG_SNAPSHOT = "config_snapshot.yaml"
METADATA_FILE = "metadata.json"
CHECKSUM_FILE = "checksum.txt"


class BundleResult(NamedTuple):
    """What you get back after writing an encoder bundle."""

    output_directory: str
    state_file: str
    version_hash: str
    vocab_size: int
    file_count: int


def _write_config_snapshot(
    encoder_config: EncoderConfig,
    tokenizer_config: Optional[TokenizerConfig],
    output_path: Path,
) -> None:
    snapshot: dict[str, object] = {"encoder": encoder_config.model_dump()}
    if tokenizer_config is not None:
        snapshot["tokenizer"] = tokenizer_config.model_dump()
    content = yaml.dump(snapshot, default_flow_style=False, sort_keys=True)
    atomic_write(output_path, content)


def _write_checksums(output_dir: Path, files_to_hash: list[str]) -> None:
    """Write "hash  filename" lines (BSD checksum convention) for every bundle file."""
    lines = [
        f"{compute_sha256(output_dir / filename)}  {filename}"
        for filename in sorted(files_to_hash)
    ]
    atomic_write(output_dir / CHECKSUM_FILE, "\n".join(lines) + "\n")


def save_bundle(
    encoder: StringEncoder,
    encoder_config: EncoderConfig,
    output_dir: Path,
    tokenizer_config: Optional[TokenizerConfig] = None,
) -> BundleResult:
    """
    Write a complete encoder bundle to `output_dir`.

    The state format comes from encoder_config.serialization_format. The
    version hash is the SHA256 of the state bytes, so two bundles with the
    same dictionary, counters and format share a version hash regardless of
    when they were written.
    """
    logger = get_logger("strenc.artifacts")

    fmt = encoder_config.serialization_format
    codec = get_codec(fmt)
    state_file = STATE_STEM + codec.extension

    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Creating encoder bundle", extra={"output_dir": str(output_dir), "format": fmt})

    state_bytes = serialize(encoder, fmt)
    atomic_write_bytes(output_dir / state_file, state_bytes)
    _write_config_snapshot(encoder_config, tokenizer_config, output_dir / CONFIG_SNAPSHOT)

    version_hash = compute_sha256_bytes(state_bytes)
    metadata = {
        "version_hash": version_hash,
        "format": fmt,
        "state_file": state_file,
        "policy": encoder.policy.name,
        "policy_params": encoder.policy.params(),
        "vocab_size": encoder.dictionary.size,
        "created_at": datetime.now(tz=timezone.utc).isoformat(),
    }
    atomic_write(output_dir / METADATA_FILE, json.dumps(metadata, indent=2, sort_keys=True) + "\n")

    hashed_files = [state_file, CONFIG_SNAPSHOT, METADATA_FILE]
    _write_checksums(output_dir, hashed_files)

    result = BundleResult(
        output_directory=str(output_dir),
        state_file=state_file,
        version_hash=version_hash,
        vocab_size=encoder.dictionary.size,
        file_count=len(hashed_files) + 1,
    )
    logger.info(
        "Encoder bundle created",
        extra={
            "version_hash": version_hash,
            "vocab_size": result.vocab_size,
            "file_count": result.file_count,
        },
    )
    return result


def verify_bundle(bundle_dir: Path) -> set[str]:
    """
    Check every entry in checksum.txt against the files on disk.

    Returns:
        The names of all files covered by checksum.txt.

    Raises:
        BundleIntegrityError: Missing checksum file, missing entry, or mismatch.
    """
    checksum_path = bundle_dir / CHECKSUM_FILE
    if not checksum_path.is_file():
        raise BundleIntegrityError(f"No {CHECKSUM_FILE} in {bundle_dir}")

    listed: set[str] = set()
    for line in safe_read(checksum_path).strip().splitlines():
        expected_hash, separator, filename = line.partition("  ")
        if not separator:
            raise BundleIntegrityError(f"Malformed checksum line: {line!r}")
        file_path = bundle_dir / filename
        if not file_path.is_file():
            raise BundleIntegrityError(f"Bundle file missing: {filename}")
        if not verify_checksum(file_path, expected_hash):
            raise BundleIntegrityError(f"Checksum mismatch for {filename}")
        listed.add(filename)

    for required in (METADATA_FILE, CONFIG_SNAPSHOT):
        if required not in listed:
            raise BundleIntegrityError(f"{required} is not covered by {CHECKSUM_FILE}")

    return listed


def read_metadata(bundle_dir: Path) -> dict:
    """Parse metadata.json without verifying checksums."""
    try:
        return json.loads(safe_read(bundle_dir / METADATA_FILE))
    except FileNotFoundError as err:
        raise BundleIntegrityError(f"No {METADATA_FILE} in {bundle_dir}") from err
    except json.JSONDecodeError as err:
        raise BundleIntegrityError(f"Unreadable {METADATA_FILE}: {err}") from err


def load_bundle(bundle_dir: Path) -> StringEncoder:
    """
    Verify and load the encoder stored in a bundle.

    Raises:
        BundleIntegrityError: If any checksum fails or the metadata is unusable.
        SerializationError: If the verified state file still fails to decode.
    """
    listed = verify_bundle(bundle_dir)
    metadata = read_metadata(bundle_dir)

    try:
        fmt = metadata["format"]
        state_file = metadata["state_file"]
    except KeyError as err:
        raise BundleIntegrityError(f"{METADATA_FILE} is missing {err}") from err

    if state_file not in listed:
        raise BundleIntegrityError(f"{state_file} is not covered by {CHECKSUM_FILE}")

    return deserialize((bundle_dir / state_file).read_bytes(), fmt)
