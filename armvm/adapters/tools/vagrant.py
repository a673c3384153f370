"""
Vagrant adapter — plugin, box and machine lifecycle through the CLI.

Besides the action operations it offers two read-only queries,
``plugin_installed`` and ``box_added``, which planners use to decide
which steps a ``vm up`` needs.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from armvm.adapters.base import ExecutionContext
from armvm.adapters.shell.command import ShellCommandAdapter
from armvm.core.models.vm import PROVIDER

logger = logging.getLogger(__name__)


class VagrantAdapter(ShellCommandAdapter):
    """Vagrant operations.

    Action params:
        operation (str): One of 'plugin-install', 'box-add', 'up', 'halt',
                         'destroy', 'status', 'version'.
        plugin (str): Plugin name (for 'plugin-install').
        box (str): Box name (for 'box-add').
        provider (str): Provider name (default: parallels).
        stream (bool): Pass vagrant output through to the terminal.
    """

    binary = "vagrant"
    VALID_OPS = frozenset(
        {"plugin-install", "box-add", "up", "halt", "destroy", "status", "version"}
    )

    @property
    def name(self) -> str:
        return "vagrant"

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def argv(self, context: ExecutionContext) -> list[str]:
        params = context.action.params
        operation = params.get("operation", "")
        provider = params.get("provider", PROVIDER)

        if operation == "plugin-install":
            return [self.binary, "plugin", "install", params.get("plugin", "")]
        if operation == "box-add":
            return [self.binary, "box", "add", params.get("box", ""), "--provider", provider]
        if operation == "up":
            return [self.binary, "up", f"--provider={provider}"]
        if operation == "destroy":
            return [self.binary, "destroy", "--force"]
        if operation == "version":
            return [self.binary, "--version"]
        return [self.binary, operation]

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if operation not in self.VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self.VALID_OPS))}"
        if operation == "plugin-install" and not params.get("plugin"):
            return False, "Missing required param: 'plugin'"
        if operation == "box-add" and not params.get("box"):
            return False, "Missing required param: 'box'"
        return super().validate(context)

    # ── Queries ─────────────────────────────────────────────────

    def plugin_installed(self, plugin: str) -> bool:
        """Whether ``vagrant plugin list`` mentions *plugin*."""
        return plugin in self._list("plugin", "list")

    def box_added(self, box: str) -> bool:
        """Whether ``vagrant box list`` mentions *box*."""
        return box in self._list("box", "list")

    def _list(self, *args: str) -> str:
        try:
            result = subprocess.run(
                [self.binary, *args],
                capture_output=True,
                text=True,
                timeout=60,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("vagrant %s failed: %s", " ".join(args), e)
            return ""
        if result.returncode != 0:
            logger.warning("vagrant %s exited with %d", " ".join(args), result.returncode)
            return ""
        return result.stdout
