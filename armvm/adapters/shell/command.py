"""
Shell command adapter — run external programs.

This is the most fundamental adapter: it runs commands and captures
their output. The packer and vagrant adapters are built on top of it.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from armvm.adapters.base import Adapter, ExecutionContext
from armvm.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Exit status a POSIX shell reports for "command not found"
COMMAND_NOT_FOUND = 127

# 128 + N, as the shell reports a child killed by signal N
SIGNAL_EXIT_BASE = 128


class ShellCommandAdapter(Adapter):
    """Run a command (no shell) and capture its output.

    Action params:
        argv (list[str]): Program and arguments.
        command (str): Alternative to argv, split with shlex.
        stream (bool): Let output go to the terminal instead of
            capturing it (default: False).
        timeout (int): Timeout in seconds (default: none).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def argv(self, context: ExecutionContext) -> list[str]:
        """The full command line for *context*."""
        argv = context.action.params.get("argv")
        if argv:
            return [str(a) for a in argv]
        return shlex.split(context.action.params.get("command", ""))

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        try:
            argv = self.argv(context)
        except ValueError as e:
            return False, str(e)
        if not argv:
            return False, "Missing required param: 'argv' or 'command'"

        if shutil.which(argv[0]) is None:
            return False, f"{argv[0]}: command not found"

        # The directory may come from an earlier step of the same plan
        if not context.dry_run and not Path(context.working_dir).is_dir():
            return False, f"Working directory does not exist: {context.working_dir}"

        return True, ""

    def validation_exit_code(self, context: ExecutionContext) -> int:
        try:
            argv = self.argv(context)
        except ValueError:
            return 1
        if argv and shutil.which(argv[0]) is None:
            return COMMAND_NOT_FOUND
        return 1

    def execute(self, context: ExecutionContext) -> Receipt:
        argv = self.argv(context)
        stream = bool(context.action.params.get("stream", False))
        timeout = context.action.params.get("timeout")
        cwd = context.working_dir
        command = shlex.join(argv)

        logger.debug("Executing: %s (cwd=%s, stream=%s)", command, cwd, stream)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=not stream,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": command, "timeout": timeout, "return_code": 124},
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{argv[0]}: command not found",
                metadata={"command": command, "return_code": COMMAND_NOT_FOUND},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"command": command, "return_code": 126},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={
                    "command": command,
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )

        code = result.returncode
        if code < 0:
            error = f"{command} killed by signal {-code}"
            code = SIGNAL_EXIT_BASE - code
        else:
            error = f"{command} exited with code {code}"

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=stderr or error,
            duration_ms=elapsed_ms,
            metadata={
                "command": command,
                "return_code": code,
                "stdout": output,
            },
        )
