# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build encoders from config.

The policy is looked up by name in the policy registry; only the tfidf
policy takes parameters, so tf_type and smooth_idf are forwarded to it alone.
"""

import logging

from strenc.config.schema import EncoderConfig
from strenc.encoder.core import StringEncoder
from strenc.policies.registry import build_policy

logger = logging.getLogger(__name__)


def build_encoder(config: EncoderConfig) -> StringEncoder:
    """
    Build an empty encoder with the policy named in config.

    Args:
        config: Encoder config with policy, tf_type and smooth_idf.

    Returns:
        A StringEncoder in the empty state.
    """
    params = {}
    if config.policy == "tfidf":
        params = {"tf_type": config.tf_type, "smooth_idf": config.smooth_idf}

    policy = build_policy(config.policy, **params)
    logger.debug("built_encoder", extra={"policy": config.policy, "params": params})
    return StringEncoder(policy)
