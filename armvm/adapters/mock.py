"""
Recording stand-in for packer and vagrant.

``armvm scaffold --mock`` and the tests route tool steps here: every
call is recorded and succeeds unless told otherwise.
"""

from __future__ import annotations

from armvm.adapters.base import Adapter, ExecutionContext
from armvm.core.models.action import Receipt


class MockAdapter(Adapter):
    """Records calls; returns canned receipts per action id."""

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._canned: dict[str, Receipt] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._canned[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Make *action_id* fail as a command exiting with *return_code* would."""
        self.set_response(
            action_id,
            Receipt.failure(
                adapter=self._name,
                action_id=action_id,
                error=error,
                metadata={"return_code": return_code},
            ),
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        canned = self._canned.get(context.action.id)
        if canned is not None:
            return canned
        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True, "params": dict(context.action.params)},
        )
