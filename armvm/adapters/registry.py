"""
Adapter registry — maps ``Action.adapter`` names to adapters and runs
actions through them.

In mock mode every adapter not listed in ``live`` is replaced by the
mock adapter (or, without one, by an always-succeeding stub). The CLI
keeps ``filesystem`` live so ``--mock`` still writes the project.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from armvm.adapters.base import Adapter, ExecutionContext
from armvm.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Named adapters plus the validate → (dry-run | execute) dispatch."""

    def __init__(self, mock_mode: bool = False, live: Iterable[str] = ()):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None
        self._live = set(live)

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    # ── Registration ────────────────────────────────────────────

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Registered adapter %r", adapter)

    # ── Dispatch ────────────────────────────────────────────────

    def _mocked(self, action: Action) -> bool:
        return self._mock_mode and action.adapter not in self._live

    def execute_action(
        self,
        action: Action,
        base_dir: str = ".",
        dry_run: bool = False,
    ) -> Receipt:
        """Validate *action*, then execute it unless *dry_run*.

        Never raises. A rejected action yields a failed receipt whose
        ``return_code`` comes from ``Adapter.validation_exit_code``, so a
        missing ``packer`` reports 127 just as the shell does.
        """
        started = time.monotonic()
        context = ExecutionContext(
            action=action,
            base_dir=base_dir,
            dry_run=dry_run,
        )

        if self._mocked(action):
            adapter = self._mock_adapter
            if adapter is None:
                return Receipt.success(
                    adapter=action.adapter,
                    action_id=action.id,
                    output=f"[mock] {action.adapter}:{action.id} executed",
                    metadata={"mock": True, "dry_run": dry_run},
                )
        else:
            adapter = self._adapters.get(action.adapter)
            if adapter is None:
                return Receipt.failure(
                    adapter=action.adapter,
                    action_id=action.id,
                    error=f"No adapter registered for '{action.adapter}'",
                )

        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            logger.error("Validating %s raised: %s", action.id, e)
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )
        if not valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {reason}",
                metadata={"return_code": adapter.validation_exit_code(context)},
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] {action.name or action.id}",
                metadata={"dry_run": True},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt
