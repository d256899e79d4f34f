# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the encoding engine.

Config failures live in strenc.config.exceptions so the CLI can catch them
without importing the encoder. Everything else that can go wrong while
encoding, persisting or restoring state derives from StrencError.

Lookup misses are not errors: asking the dictionary for an unknown token
returns 0.
"""


class StrencError(Exception):
    """Base for all encoding engine errors."""


class DictionaryError(StrencError):
    """Raised when a dictionary would violate its id invariants (duplicates, gaps)."""


class PolicyError(StrencError):
    """Raised for invalid policy parameters or a policy used out of order."""


class SerializationError(StrencError):
    """
    Raised when encoded state cannot be decoded.

    Decoding is all-or-nothing: if this is raised, no encoder was built and
    no live state was touched.
    """


class BundleIntegrityError(StrencError):
    """Raised when a bundle file is missing or its checksum doesn't match."""
