"""Capability providers: the protocol the engine consumes and an offline implementation."""

from raydoc_context.providers.base import CapabilityProvider
from raydoc_context.providers.local import LocalProvider

__all__ = ["CapabilityProvider", "LocalProvider"]
