"""
Root conftest with shared fixtures.

Also ensures the project root is on sys.path before collection so that
`repo_steward` and `tests.helpers` import without an editable install.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from repo_steward.models.types import AgentContext  # noqa: E402
from tests.helpers import SpyCapability  # noqa: E402


@pytest.fixture
def repo_dir(tmp_path):
    """A small scratch repository."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.ts").write_text(
        "export function add(a: number, b: number) {\n  return a + b;\n}\n"
    )
    (tmp_path / "src" / "util.py").write_text("def greet(name):\n    return f'hi {name}'\n")
    (tmp_path / "package.json").write_text('{"name": "demo", "version": "1.0.0"}\n')
    (tmp_path / "README.md").write_text("# Demo\n")
    return tmp_path


@pytest.fixture
def context(repo_dir):
    """AgentContext bound to the scratch repository."""
    return AgentContext(working_dir=str(repo_dir), repo_owner="acme", repo_name="demo")


@pytest.fixture
def spy():
    return SpyCapability()
