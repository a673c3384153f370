"""
Engine executor — the sequential step runner.

Takes an ordered plan, executes each action through the adapter
registry, and stops at the first failure the way ``set -e`` does:
every action after a failed one is recorded as skipped, never run.

Flow:
    plan → execute in order → collect receipts → report
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from armvm.adapters.registry import AdapterRegistry
from armvm.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

StepCallback = Callable[[Action], None]


@dataclass
class ExecutionPlan:
    """An ordered set of actions to execute."""

    operation_id: str = ""
    operation: str = ""
    actions: list[Action] = field(default_factory=list)

    @property
    def total_actions(self) -> int:
        return len(self.actions)

    def add(self, name: str, adapter: str, cwd: str | None = None, **params) -> Action:
        """Append a step; its id is ``<operation_id>:<index>:<adapter>``."""
        action = Action(
            id=f"{self.operation_id}:{len(self.actions) + 1}:{adapter}",
            name=name,
            adapter=adapter,
            cwd=cwd,
            params=params,
        )
        self.actions.append(action)
        return action


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    operation_id: str = ""
    operation: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def first_failure(self) -> Receipt | None:
        for receipt in self.receipts:
            if receipt.failed:
                return receipt
        return None

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    @property
    def exit_code(self) -> int:
        """Process exit status: 0, or the failing command's own code."""
        failure = self.first_failure
        if failure is None:
            return 0
        code = failure.return_code
        return code if code else 1

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "operation": self.operation,
            "status": self.status,
            "exit_code": self.exit_code,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def execute_plan(
    plan: ExecutionPlan,
    registry: AdapterRegistry,
    base_dir: str = ".",
    dry_run: bool = False,
    on_step: StepCallback | None = None,
) -> ExecutionReport:
    """Execute the actions of *plan* in order.

    Args:
        plan: The execution plan.
        registry: Adapter registry for dispatch.
        base_dir: Directory relative paths and step cwds resolve against.
        dry_run: If True, validate but don't execute.
        on_step: Called with each action just before it runs.

    Returns:
        ExecutionReport with one receipt per planned action.
    """
    report = ExecutionReport(
        operation_id=plan.operation_id,
        operation=plan.operation,
    )

    aborted_by: Action | None = None
    for action in plan.actions:
        if aborted_by is not None:
            report.receipts.append(
                Receipt.skip(
                    adapter=action.adapter,
                    action_id=action.id,
                    reason=f"Not run: '{aborted_by.name}' failed",
                    metadata={"aborted": True},
                )
            )
            continue

        if on_step is not None:
            on_step(action)

        receipt = registry.execute_action(
            action=action,
            base_dir=base_dir,
            dry_run=dry_run,
        )
        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, action.name or action.id, receipt.status)

        if receipt.failed:
            logger.debug("Aborting %s after: %s", plan.operation, receipt.error)
            aborted_by = action

    return report


def generate_operation_id(prefix: str = "op") -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"{prefix}-{now}-{short}"
