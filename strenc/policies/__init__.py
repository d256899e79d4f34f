# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Encoding policies.

Importing this package registers the built-in policies (ordinal, presence,
tfidf) with the policy registry.
"""

from strenc.policies.base import EncodingPolicy
from strenc.policies.ordinal import OrdinalPolicy
from strenc.policies.presence import PresencePolicy
from strenc.policies.registry import build_policy, get_policy, list_policy_types
from strenc.policies.tfidf import TF_TYPES, TfIdfPolicy

__all__ = [
    "EncodingPolicy",
    "OrdinalPolicy",
    "PresencePolicy",
    "TfIdfPolicy",
    "TF_TYPES",
    "build_policy",
    "get_policy",
    "list_policy_types",
]
