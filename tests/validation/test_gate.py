"""Tests for ChangeGate."""

import pytest

from repo_steward.models.types import AgentContext, ChangeType, ProposedChange
from repo_steward.validation.gate import ChangeGate, validate_context


@pytest.fixture
def gate():
    return ChangeGate()


class TestReview:
    """Safety classification followed by validation."""

    def test_clean_changes_pass(self, gate, context):
        changes = [
            ProposedChange("src/new.ts", ChangeType.CREATE, new_content="export const a = 1;\n"),
            ProposedChange("docs/guide.md", ChangeType.CREATE, new_content="# Guide\n"),
        ]
        result = gate.review(changes, context)
        assert result.valid is True
        assert result.errors == []

    def test_protected_path_blocks_and_skips_validation(self, gate, context):
        # Would also fail validation (no content), but only the safety finding is reported
        change = ProposedChange(".env", ChangeType.CREATE, new_content="")
        result = gate.review([change], context)
        assert result.errors == [".env: Cannot modify protected file: .env"]

    def test_harmful_content_is_error(self, gate, context):
        change = ProposedChange("src/x.js", ChangeType.CREATE, new_content="eval(input)\n")
        result = gate.review([change], context)
        assert result.valid is False
        assert result.errors == ["src/x.js: eval() can execute arbitrary code in proposed change"]

    def test_warning_verdict_is_advisory(self, gate, context, repo_dir):
        original = "validate(a);\nvalidate(b);\nvalidate(c);\n"
        (repo_dir / "src" / "form.ts").write_text(original)
        change = ProposedChange(
            "src/form.ts",
            ChangeType.MODIFY,
            original_content=original,
            new_content="validate(a);\nvalidate(b);\n",
        )
        result = gate.review([change], context)
        assert result.valid is True
        assert result.warnings == [
            "src/form.ts: Potential security regression: validation code was reduced or removed"
        ]

    def test_validator_findings_prefixed_with_path(self, gate, context):
        change = ProposedChange("package.json", ChangeType.DELETE)
        result = gate.review([change], context)
        assert result.errors == ["package.json: Cannot delete essential configuration file: package.json"]

    def test_findings_keep_change_order(self, gate, context):
        changes = [
            ProposedChange("a.json", ChangeType.CREATE, new_content="{"),
            ProposedChange(".npmrc", ChangeType.MODIFY, new_content="x"),
        ]
        result = gate.review(changes, context)
        assert len(result.errors) == 2
        assert result.errors[0].startswith("a.json: Invalid JSON")
        assert result.errors[1].startswith(".npmrc: Cannot modify protected file")

    def test_empty_batch(self, gate, context):
        result = gate.review([], context)
        assert result.valid is True


class TestValidateContext:
    """Run-context preconditions."""

    def test_complete_context(self, context):
        assert validate_context(context).valid is True

    def test_missing_working_dir(self):
        result = validate_context(AgentContext(working_dir="", repo_owner="a", repo_name="b"))
        assert result.errors == ["Working directory is required"]

    def test_missing_repository(self):
        result = validate_context(AgentContext(working_dir="/repo", repo_owner="", repo_name="b"))
        assert result.errors == ["Repository owner and name are required"]

    def test_gate_method_delegates(self, gate):
        result = gate.validate_context(AgentContext(working_dir="", repo_owner="", repo_name=""))
        assert len(result.errors) == 2
