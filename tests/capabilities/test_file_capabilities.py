"""Tests for the reference file capabilities and their registration."""

import pytest

from repo_steward.capabilities.catalog import AccessLevel, CapabilityCatalog
from repo_steward.capabilities.file_capabilities import (
    file_exists,
    list_files,
    read_file,
    search_code,
    write_file,
)
from repo_steward.capabilities.paths import (
    normalize_repo_path,
    resolve_in_repo,
    to_repo_relative,
)
from repo_steward.capabilities.registration import register_file_capabilities
from repo_steward.models.types import ChangeProposingResult, ChangeType, PlainResult


class TestReadFile:
    """read_file capability."""

    @pytest.mark.asyncio
    async def test_read_existing(self, repo_dir):
        result = await read_file(str(repo_dir), "src/util.py")
        assert isinstance(result, PlainResult)
        assert result.payload["success"] is True
        assert "def greet" in result.payload["content"]

    @pytest.mark.asyncio
    async def test_read_missing(self, repo_dir):
        result = await read_file(str(repo_dir), "src/missing.py")
        assert result.payload["success"] is False
        assert "does not exist" in result.payload["error"]

    @pytest.mark.asyncio
    async def test_read_outside_repo_refused(self, repo_dir):
        result = await read_file(str(repo_dir), "../../etc/hosts")
        assert result.payload["success"] is False
        assert "outside repository bounds" in result.payload["error"]

    @pytest.mark.asyncio
    async def test_leading_slash_is_repo_relative(self, repo_dir):
        result = await read_file(str(repo_dir), "/src/util.py")
        assert result.payload["success"] is True


class TestWriteFile:
    """write_file proposes changes and never touches disk."""

    @pytest.mark.asyncio
    async def test_new_file_proposes_create(self, repo_dir):
        result = await write_file(str(repo_dir), "src/new.ts", "export {};\n", "add module")

        assert isinstance(result, ChangeProposingResult)
        change = result.proposed_change
        assert change.change_type == ChangeType.CREATE
        assert change.file_path == "src/new.ts"
        assert change.original_content is None
        assert change.new_content == "export {};\n"
        assert change.description == "add module"
        assert not (repo_dir / "src" / "new.ts").exists()

    @pytest.mark.asyncio
    async def test_existing_file_proposes_modify_with_original(self, repo_dir):
        before = (repo_dir / "src" / "app.ts").read_text()
        result = await write_file(str(repo_dir), "./src/app.ts", "export {};\n", "rewrite")

        change = result.proposed_change
        assert change.change_type == ChangeType.MODIFY
        assert change.file_path == "src/app.ts"
        assert change.original_content == before
        assert (repo_dir / "src" / "app.ts").read_text() == before

    @pytest.mark.asyncio
    async def test_payload_includes_serialized_change(self, repo_dir):
        result = await write_file(str(repo_dir), "notes.md", "# Notes\n", "notes")
        payload = result.to_payload()
        assert payload["success"] is True
        assert payload["message"] == "Proposed create for notes.md"
        assert payload["proposed_change"]["file_path"] == "notes.md"
        assert payload["proposed_change"]["change_type"] == "create"

    @pytest.mark.asyncio
    async def test_directory_target_refused(self, repo_dir):
        result = await write_file(str(repo_dir), "src", "x", "x")
        assert isinstance(result, PlainResult)
        assert result.payload["success"] is False

    @pytest.mark.asyncio
    async def test_outside_repo_refused(self, repo_dir):
        result = await write_file(str(repo_dir), "../escape.txt", "x", "x")
        assert isinstance(result, PlainResult)
        assert "outside repository bounds" in result.payload["error"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw, expected", [
        ("src/../.ssh/authorized_keys", ".ssh/authorized_keys"),
        ("/.aws/credentials", ".aws/credentials"),
        ("docs/./guide.md", "docs/guide.md"),
    ])
    async def test_proposal_carries_canonical_path(self, repo_dir, raw, expected):
        result = await write_file(str(repo_dir), raw, "x\n", "x")
        assert result.proposed_change.file_path == expected


class TestListAndSearch:
    """file_exists, list_files and search_code."""

    @pytest.mark.asyncio
    async def test_file_exists(self, repo_dir):
        assert (await file_exists(str(repo_dir), "package.json")).payload["exists"] is True
        assert (await file_exists(str(repo_dir), "nope.txt")).payload["exists"] is False

    @pytest.mark.asyncio
    async def test_list_files_with_pattern(self, repo_dir):
        result = await list_files(str(repo_dir), "src", "*.ts")
        assert result.payload["files"] == ["src/app.ts"]

    @pytest.mark.asyncio
    async def test_list_files_skips_excluded_dirs(self, repo_dir):
        (repo_dir / "node_modules" / "pkg").mkdir(parents=True)
        (repo_dir / "node_modules" / "pkg" / "index.js").write_text("x")
        result = await list_files(str(repo_dir))
        assert all(not f.startswith("node_modules") for f in result.payload["files"])
        assert "package.json" in result.payload["files"]

    @pytest.mark.asyncio
    async def test_list_files_not_a_directory(self, repo_dir):
        result = await list_files(str(repo_dir), "package.json")
        assert result.payload["success"] is False

    @pytest.mark.asyncio
    async def test_search_code(self, repo_dir):
        result = await search_code(str(repo_dir), r"return\s+a", "*.ts")
        assert result.payload["count"] == 1
        assert result.payload["matches"][0] == {
            "file": "src/app.ts",
            "line": 2,
            "content": "  return a + b;",
        }

    @pytest.mark.asyncio
    async def test_search_code_max_results(self, repo_dir):
        result = await search_code(str(repo_dir), "e", max_results=2)
        assert result.payload["count"] == 2

    @pytest.mark.asyncio
    async def test_search_code_invalid_regex(self, repo_dir):
        result = await search_code(str(repo_dir), "(")
        assert result.payload["success"] is False
        assert result.payload["error"].startswith("Invalid search pattern")


class TestRegistration:
    """register_file_capabilities."""

    def test_registers_five_capabilities(self, repo_dir):
        catalog = CapabilityCatalog("files")
        result = register_file_capabilities(catalog, str(repo_dir))

        assert result["count"] == 5
        assert set(result["registered"]) == {
            "read_file", "write_file", "file_exists", "list_files", "search_code",
        }
        assert list(catalog.by_access(AccessLevel.WRITE)) == ["write_file"]

    @pytest.mark.asyncio
    async def test_registered_capability_bound_to_working_dir(self, repo_dir):
        catalog = CapabilityCatalog()
        register_file_capabilities(catalog, str(repo_dir))
        result = await catalog.get("read_file").execute(path="README.md")
        assert result.payload["content"] == "# Demo\n"


class TestPaths:
    """Path helpers."""

    def test_normalize(self):
        assert normalize_repo_path("./a\\b.txt") == "a/b.txt"
        assert normalize_repo_path("././x") == "x"

    @pytest.mark.parametrize("raw, expected", [
        ("src/../package.json", "package.json"),
        ("a/../.ssh/x", ".ssh/x"),
        ("/.aws/credentials", ".aws/credentials"),
        ("//src//./app.ts", "src/app.ts"),
        ("src\\..\\.env", ".env"),
        ("src/..", ""),
        ("", ""),
        ("../outside.ts", "../outside.ts"),
    ])
    def test_normalize_collapses_to_canonical_form(self, raw, expected):
        assert normalize_repo_path(raw) == expected

    def test_resolve_escape_returns_none(self, repo_dir):
        assert resolve_in_repo("../x", str(repo_dir)) is None
        assert resolve_in_repo("src/../../x", str(repo_dir)) is None

    def test_resolve_inside(self, repo_dir):
        assert resolve_in_repo("src/app.ts", str(repo_dir)) == (repo_dir / "src" / "app.ts").resolve()
        assert resolve_in_repo(None, str(repo_dir)) == repo_dir.resolve()

    def test_to_repo_relative(self, repo_dir):
        assert to_repo_relative(str(repo_dir / "src" / "app.ts"), str(repo_dir)) == "src/app.ts"
        assert to_repo_relative("/etc/passwd", str(repo_dir)) == "etc/passwd"
        assert to_repo_relative("./src/app.ts") == "src/app.ts"

    def test_to_repo_relative_matches_resolution(self, repo_dir):
        assert to_repo_relative("/.aws/credentials", str(repo_dir)) == ".aws/credentials"
        assert to_repo_relative("src/../.ssh/id_rsa", str(repo_dir)) == ".ssh/id_rsa"
        assert to_repo_relative("src/..", str(repo_dir)) == ""
        assert to_repo_relative("../../x", str(repo_dir)) == "../../x"
