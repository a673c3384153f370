"""
Action and Receipt models.

A plan is a list of Actions; running one through an adapter yields a
Receipt. Failures of packer, vagrant or the filesystem travel back as
failed receipts carrying the exit status, so that the CLI can exit the
way the shell would have.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """One step of a plan, e.g. ``packer init`` in the project dir.

    ``name`` is echoed as ``==> <name>`` right before the step runs.
    """

    id: str                         # "<operation id>:<n>:<adapter>"
    name: str = ""
    adapter: str                    # registry key: filesystem, packer, ...
    params: dict[str, Any] = Field(default_factory=dict)
    cwd: str | None = None          # relative to the plan's base dir


class Receipt(BaseModel):
    """What happened when an action ran (or why it didn't)."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    started_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def return_code(self) -> int | None:
        """Exit status of the command behind this receipt, when known."""
        code = self.metadata.get("return_code")
        return code if isinstance(code, int) else None

    # ── Constructors ────────────────────────────────────────────

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """A step that was deliberately not run; *reason* becomes the output."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
