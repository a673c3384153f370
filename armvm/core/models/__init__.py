"""
Domain models — Pydantic types for armvm.

All models are re-exported here for convenient access:

    from armvm.core.models import Action, Receipt, GeneratedFile, VMConfig
"""

from armvm.core.models.action import Action, Receipt
from armvm.core.models.template import GeneratedFile
from armvm.core.models.vm import VMConfig

__all__ = [
    "Action",
    "GeneratedFile",
    "Receipt",
    "VMConfig",
]
