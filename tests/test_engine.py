"""
Tests for the engine executor — ordered execution and abort-on-failure.
"""

from armvm.adapters.mock import MockAdapter
from armvm.adapters.registry import AdapterRegistry
from armvm.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    execute_plan,
    generate_operation_id,
)
from armvm.core.models.action import Receipt


def _plan(*names: str) -> ExecutionPlan:
    plan = ExecutionPlan(operation_id="op-test", operation="test")
    for name in names:
        plan.add(name, "mock", step=name)
    return plan


def _registry(mock: MockAdapter) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register(mock)
    return registry


class TestExecutionPlan:
    def test_add_assigns_sequential_ids(self):
        plan = _plan("first", "second")
        assert [a.id for a in plan.actions] == ["op-test:1:mock", "op-test:2:mock"]
        assert plan.total_actions == 2

    def test_add_keeps_params_and_cwd(self):
        plan = ExecutionPlan(operation_id="op")
        action = plan.add("Build", "packer", cwd="proj", operation="build", template="t")
        assert action.cwd == "proj"
        assert action.params == {"operation": "build", "template": "t"}


class TestExecutePlan:
    def test_all_succeed_in_order(self):
        mock = MockAdapter()
        report = execute_plan(_plan("a", "b", "c"), _registry(mock))
        assert report.status == "ok"
        assert report.exit_code == 0
        assert [ctx.action.name for ctx in mock.call_log] == ["a", "b", "c"]

    def test_stops_at_first_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-test:2:mock", error="packer exploded", return_code=2)
        report = execute_plan(_plan("a", "b", "c", "d"), _registry(mock))

        assert mock.call_count == 2
        assert [r.status for r in report.receipts] == ["ok", "failed", "skipped", "skipped"]
        assert report.status == "partial"
        assert report.exit_code == 2
        assert "Not run: 'b' failed" in report.receipts[2].output

    def test_first_step_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-test:1:mock")
        report = execute_plan(_plan("a", "b"), _registry(mock))
        assert report.status == "failed"
        assert report.skipped == 1

    def test_on_step_called_only_for_run_steps(self):
        mock = MockAdapter()
        mock.set_failure("op-test:1:mock")
        seen: list[str] = []
        execute_plan(_plan("a", "b"), _registry(mock), on_step=lambda a: seen.append(a.name))
        assert seen == ["a"]

    def test_dry_run_executes_nothing(self):
        mock = MockAdapter()
        report = execute_plan(_plan("a", "b"), _registry(mock), dry_run=True)
        assert mock.call_count == 0
        assert report.skipped == 2
        assert report.exit_code == 0

    def test_base_dir_passed_through(self, tmp_path):
        mock = MockAdapter()
        execute_plan(_plan("a"), _registry(mock), base_dir=str(tmp_path))
        assert mock.call_log[0].base_dir == str(tmp_path)


class TestExecutionReport:
    def test_exit_code_defaults_to_one(self):
        report = ExecutionReport(
            receipts=[Receipt.failure(adapter="x", action_id="1", error="no code")]
        )
        assert report.exit_code == 1

    def test_to_dict(self):
        report = ExecutionReport(
            operation_id="op",
            operation="scaffold",
            receipts=[Receipt.success(adapter="x", action_id="1")],
        )
        data = report.to_dict()
        assert data["status"] == "ok"
        assert data["exit_code"] == 0
        assert data["total"] == 1
        assert data["receipts"][0]["action_id"] == "1"


def test_generate_operation_id():
    op_id = generate_operation_id("scaffold")
    assert op_id.startswith("scaffold-")
    assert op_id != generate_operation_id("scaffold")
