"""Tests for CapabilityInterceptor."""

import pytest

from repo_steward.capabilities.catalog import AccessLevel, Capability, CapabilityCatalog
from repo_steward.errors import CapabilityDefinitionError
from repo_steward.models.types import (
    ChangeProposingResult,
    ChangeType,
    PlainResult,
    ProposedChange,
)
from repo_steward.orchestration.interceptor import CapabilityInterceptor, SessionRecorder
from repo_steward.safety.classifier import SafetyClassifier
from tests.helpers import SpyCapability

WRITE_PARAMS = {
    "path": {"type": "string", "required": True},
    "content": {"type": "string", "required": True},
}


@pytest.fixture
def recorder():
    return SessionRecorder()


@pytest.fixture
def interceptor(context, recorder):
    return CapabilityInterceptor(SafetyClassifier(), context, recorder)


def _write_capability(body) -> Capability:
    return Capability(
        name="write_file",
        description="Propose a file write",
        execute=body,
        parameters=WRITE_PARAMS,
        access=AccessLevel.WRITE,
    )


class TestSafetyDenial:
    """Denied calls never reach the real capability."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [
        "eval(payload)",
        "cat /etc/passwd",
        "password = 'supersecret123'",
        "<b dangerouslySetInnerHTML={x} />",
    ])
    async def test_harmful_arguments_never_invoke_capability(self, interceptor, recorder, spy, content):
        wrapped = interceptor.wrap(_write_capability(spy))

        output = await wrapped.execute(path="src/a.ts", content=content)

        assert spy.call_count == 0
        assert isinstance(output, PlainResult)
        assert output.payload["error"].startswith("Safety check failed: ")
        assert len(recorder.tool_calls) == 1
        assert recorder.tool_calls[0].denied is True
        assert recorder.tool_calls[0].args == {"path": "src/a.ts", "content": content}
        assert recorder.proposed_changes == []

    @pytest.mark.asyncio
    async def test_protected_path_denied(self, interceptor, spy):
        wrapped = interceptor.wrap(_write_capability(spy))
        output = await wrapped.execute(path=".env", content="A=1")
        assert spy.call_count == 0
        assert output.payload == {
            "error": "Safety check failed: Cannot modify protected file: .env"
        }


class TestContractCheck:
    """Arguments are checked against the declaration before execution."""

    @pytest.mark.asyncio
    async def test_missing_required_argument(self, interceptor, recorder, spy):
        wrapped = interceptor.wrap(_write_capability(spy))
        output = await wrapped.execute(path="src/a.ts")

        assert spy.call_count == 0
        assert output.payload == {"error": "Invalid arguments for write_file: content: is required"}
        assert len(recorder.tool_calls) == 1
        assert recorder.tool_calls[0].denied is False

    @pytest.mark.asyncio
    async def test_wrong_type(self, interceptor, spy):
        wrapped = interceptor.wrap(_write_capability(spy))
        output = await wrapped.execute(path="src/a.ts", content=42)
        assert "content: expected string, got int" in output.payload["error"]
        assert spy.call_count == 0


class TestExecution:
    """Allowed calls run unchanged and are recorded."""

    @pytest.mark.asyncio
    async def test_plain_result_recorded(self, interceptor, recorder):
        spy = SpyCapability(PlainResult({"content": "hello"}))
        cap = Capability(
            name="read_file",
            description="Read",
            execute=spy,
            parameters={"path": {"type": "string", "required": True}},
        )
        output = await interceptor.wrap(cap).execute(path="README.md")

        assert spy.calls == [{"path": "README.md"}]
        assert output.payload == {"content": "hello"}
        assert recorder.tool_calls[0].capability_name == "read_file"
        assert recorder.tool_calls[0].result == {"content": "hello"}
        assert recorder.proposed_changes == []

    @pytest.mark.asyncio
    async def test_change_proposing_result_collects_change(self, interceptor, recorder):
        change = ProposedChange("src/a.ts", ChangeType.CREATE, new_content="export {};\n")
        spy = SpyCapability(ChangeProposingResult(change, {"success": True}))

        output = await interceptor.wrap(_write_capability(spy)).execute(
            path="src/a.ts", content="export {};\n"
        )

        assert spy.call_count == 1
        assert output.proposed_change is change
        assert recorder.proposed_changes == [change]
        assert recorder.tool_calls[0].result["proposed_change"]["file_path"] == "src/a.ts"

    @pytest.mark.asyncio
    async def test_sync_capability_supported(self, interceptor, recorder):
        cap = Capability(name="ping", description="Ping", execute=lambda: PlainResult({"pong": True}))
        output = await interceptor.wrap(cap).execute()
        assert output.payload == {"pong": True}
        assert len(recorder.tool_calls) == 1

    @pytest.mark.asyncio
    async def test_untagged_output_raises(self, interceptor):
        async def raw(**kwargs):
            return {"proposed_change": "sniff me"}

        cap = Capability(name="raw", description="Raw", execute=raw)
        with pytest.raises(CapabilityDefinitionError, match="expected PlainResult or ChangeProposingResult"):
            await interceptor.wrap(cap).execute()

    @pytest.mark.asyncio
    async def test_capability_exception_propagates(self, interceptor, recorder):
        async def boom(**kwargs):
            raise RuntimeError("disk on fire")

        cap = Capability(name="boom", description="Boom", execute=boom)
        with pytest.raises(RuntimeError, match="disk on fire"):
            await interceptor.wrap(cap).execute()
        assert recorder.tool_calls == []

    @pytest.mark.asyncio
    async def test_calls_recorded_in_invocation_order(self, interceptor, recorder):
        first = Capability(name="first", description="1", execute=SpyCapability())
        second = Capability(name="second", description="2", execute=SpyCapability())
        await interceptor.wrap(second).execute()
        await interceptor.wrap(first).execute()
        assert [c.capability_name for c in recorder.tool_calls] == ["second", "first"]


class TestWrapAll:
    """Catalog wrapping."""

    def test_wrap_all_preserves_declarations_and_input(self, interceptor, spy):
        catalog = CapabilityCatalog("c", "desc")
        original = catalog.register(
            name="write_file", execute=spy, description="w",
            parameters=WRITE_PARAMS, access=AccessLevel.WRITE,
        )

        wrapped = interceptor.wrap_all(catalog)

        assert wrapped is not catalog
        assert wrapped.catalog_id == "c"
        assert catalog.get("write_file") is original
        assert wrapped.get("write_file").execute is not spy
        assert wrapped.get("write_file").to_dict() == original.to_dict()
