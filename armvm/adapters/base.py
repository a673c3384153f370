"""
Adapter protocol.

Packer, vagrant and file writes all sit behind the same four methods,
so the executor can run, dry-run or mock a plan without knowing which
tool a step needs. Adapters report failure through receipts and do not
raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

from armvm.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """An action bound to the directory it runs from."""

    action: Action
    base_dir: str = "."
    dry_run: bool = False

    @property
    def working_dir(self) -> str:
        """``base_dir`` joined with the action's ``cwd``, if it has one."""
        if self.action.cwd:
            return str(Path(self.base_dir) / self.action.cwd)
        return self.base_dir

    def resolve(self, path: str) -> Path:
        """*path* made absolute against the working directory."""
        target = Path(path)
        return target if target.is_absolute() else Path(self.working_dir) / target


class Adapter(ABC):
    """Binding for one external tool."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, matched against ``Action.adapter``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the tool can be used on this machine."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check params and prerequisites; ``(False, reason)`` on a problem."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the action. Failures go in the receipt."""

    def validation_exit_code(self, context: ExecutionContext) -> int:
        """Exit status reported when ``validate`` rejects *context*."""
        return 1

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
