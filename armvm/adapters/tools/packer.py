"""
Packer adapter — ``packer init`` / ``build`` / ``validate`` through the CLI.
"""

from __future__ import annotations

import logging
import shutil

from armvm.adapters.base import ExecutionContext
from armvm.adapters.shell.command import ShellCommandAdapter

logger = logging.getLogger(__name__)


class PackerAdapter(ShellCommandAdapter):
    """HashiCorp Packer operations.

    Action params:
        operation (str): One of 'init', 'build', 'validate', 'version'.
        template (str): Template path, relative to the working dir.
        stream (bool): Pass packer output through to the terminal.
    """

    binary = "packer"
    VALID_OPS = frozenset({"init", "build", "validate", "version"})

    @property
    def name(self) -> str:
        return "packer"

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def argv(self, context: ExecutionContext) -> list[str]:
        operation = context.action.params.get("operation", "")
        if operation == "version":
            return [self.binary, "version"]
        return [self.binary, operation, context.action.params.get("template", "")]

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if operation not in self.VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self.VALID_OPS))}"
        if operation != "version" and not context.action.params.get("template"):
            return False, "Missing required param: 'template'"
        return super().validate(context)
