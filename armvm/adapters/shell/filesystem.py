"""
Filesystem adapter — project directories and generated files.

Creating the project directory and writing the Packer template are
plan steps like any other, so they show up in dry runs and reports.
Files are written with ``\\n`` line endings on every platform.
"""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from armvm.adapters.base import Adapter, ExecutionContext
from armvm.core.models.action import Receipt

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class FilesystemAdapter(Adapter):
    """Action params:

        operation (str): 'mkdir', 'write', 'chmod', 'exists' or 'read'.
        path (str): Target, relative to the working dir unless absolute.
        content (str): File body ('write').
        overwrite (bool): Replace an existing file ('write', default True).
        executable (bool): Add execute bits after writing ('write').
    """

    VALID_OPS = frozenset({"mkdir", "write", "chmod", "exists", "read"})

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"
        if operation not in self.VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self.VALID_OPS))}"
        if not params.get("path"):
            return False, "Missing required param: 'path'"
        if operation == "write" and "content" not in params:
            return False, "Missing required param: 'content' for write operation"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]
        target = context.resolve(context.action.params["path"])
        handler = getattr(self, f"_{operation}")
        try:
            return handler(context, target)
        except OSError as e:
            return self._fail(context, f"Filesystem error: {e}", path=str(target))

    # ── Operations ──────────────────────────────────────────────

    def _mkdir(self, ctx: ExecutionContext, target: Path) -> Receipt:
        target.mkdir(parents=True, exist_ok=True)
        return self._ok(ctx, f"Directory created: {target}", path=str(target))

    def _write(self, ctx: ExecutionContext, target: Path) -> Receipt:
        params = ctx.action.params
        content: str = params["content"]

        if target.exists() and not params.get("overwrite", True):
            return self._fail(ctx, f"File already exists: {target}", path=str(target))

        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        if params.get("executable", False):
            target.chmod(target.stat().st_mode | _EXEC_BITS)

        logger.info("Wrote %s (%d bytes)", target, len(content))
        return self._ok(ctx, f"Wrote {target}", path=str(target), size=len(content))

    def _chmod(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if not target.is_file():
            return self._fail(ctx, f"File not found: {target}")
        target.chmod(target.stat().st_mode | _EXEC_BITS)
        mode = oct(target.stat().st_mode & 0o777)
        return self._ok(ctx, f"chmod +x {target}", path=str(target), mode=mode)

    def _exists(self, ctx: ExecutionContext, target: Path) -> Receipt:
        exists = target.exists()
        return self._ok(
            ctx, str(exists), path=str(target), exists=exists, is_dir=target.is_dir()
        )

    def _read(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if not target.is_file():
            return self._fail(ctx, f"File not found: {target}")
        content = target.read_text(encoding="utf-8")
        return self._ok(ctx, content, path=str(target), size=len(content))

    # ── Receipts ────────────────────────────────────────────────

    def _ok(self, ctx: ExecutionContext, output: str, **metadata) -> Receipt:
        return Receipt.success(
            adapter=self.name, action_id=ctx.action.id, output=output, metadata=metadata
        )

    def _fail(self, ctx: ExecutionContext, error: str, **metadata) -> Receipt:
        return Receipt.failure(
            adapter=self.name, action_id=ctx.action.id, error=error, metadata=metadata
        )
