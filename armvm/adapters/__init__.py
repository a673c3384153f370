"""Adapters — tool bindings for packer, vagrant and the filesystem.

Public re-exports for convenient access.
"""

from armvm.adapters.base import Adapter, ExecutionContext
from armvm.adapters.mock import MockAdapter
from armvm.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
