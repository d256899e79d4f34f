# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Policy type registry.

Config selects a policy by name alone; this registry maps that name to the
concrete class. Built-in policies register themselves when strenc.policies is
imported, so the registry is complete before anything can look it up.
"""

import logging
from typing import Any

from strenc.policies.base import EncodingPolicy

logger = logging.getLogger(__name__)

_POLICY_REGISTRY: dict[str, type[EncodingPolicy]] = {}


def register_policy(name: str, cls: type[EncodingPolicy]) -> None:
    """
    Register a policy class under a unique name.

    Raises:
        ValueError: If `name` is already registered.
    """
    if name in _POLICY_REGISTRY:
        raise ValueError(
            f"Policy type '{name}' is already registered to {_POLICY_REGISTRY[name].__name__}"
        )
    _POLICY_REGISTRY[name] = cls
    logger.debug("registered_policy", extra={"name": name, "cls": cls.__name__})


def get_policy(name: str) -> type[EncodingPolicy]:
    """
    Retrieve a registered policy class by name.

    Raises:
        KeyError: If `name` is not registered.
    """
    if name not in _POLICY_REGISTRY:
        available = sorted(_POLICY_REGISTRY.keys())
        raise KeyError(f"Unknown policy type '{name}'. Available: {available}")
    return _POLICY_REGISTRY[name]


def list_policy_types() -> list[str]:
    """Return sorted list of all registered policy names."""
    return sorted(_POLICY_REGISTRY.keys())


def build_policy(name: str, **params: Any) -> EncodingPolicy:
    """Instantiate the policy registered as `name` with the given parameters."""
    return get_policy(name)(**params)
