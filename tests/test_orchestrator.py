"""Tests for the LangGraph tool-calling loop.

Covers:
  - Single-call termination and request contents
  - Concurrent tool rounds combined into one result turn
  - Per-tool failures turned into error results
  - Iteration cap
  - Backend failure handing over to the offline responder
"""

from __future__ import annotations

import asyncio

import pytest

from velocity.backend import BackendResponse, BackendUnavailableError
from velocity.fallback import FallbackResponder
from velocity.models import ConversationTurn, ToolDeclaration, ToolInvocation, ToolParameter
from velocity.orchestrator import (
    EMPTY_REPLY_NOTICE,
    ITERATION_CAP_NOTICE,
    TurnOrchestrator,
    create_orchestrator,
    execute_all,
)
from velocity.registry import ToolRegistry
from velocity.tools.toolset import build_tool_registry

# ── Helpers ──────────────────────────────────────────────────────────


def _call(tool_name: str, call_id: str, **arguments) -> ToolInvocation:
    return ToolInvocation(tool_name=tool_name, arguments=arguments, call_id=call_id)


def _reply(text: str = "", *invocations: ToolInvocation) -> BackendResponse:
    return BackendResponse(text=text, invocations=list(invocations))


@pytest.fixture
def make_orchestrator(crm_data, offline_generator, offline_media):
    """Build an orchestrator over the real tool set and a scripted backend."""

    def _make(backend, registry=None, max_iterations=10):
        if registry is None:
            registry = build_tool_registry(crm_data, offline_generator, offline_media)
        return TurnOrchestrator(
            backend=backend,
            registry=registry,
            fallback=FallbackResponder(crm_data, offline_generator),
            max_iterations=max_iterations,
            data=crm_data,
        )

    return _make


# ── TestSingleCall ───────────────────────────────────────────────────


class TestSingleCall:
    def test_no_invocations_returns_text_unmodified(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(_reply("  Sure, happy to help.\n"))
        result = asyncio.run(make_orchestrator(backend).run("hi"))

        assert len(backend.requests) == 1
        assert result.text == "  Sure, happy to help.\n"
        assert result.iterations == 0
        assert result.offline is False
        assert result.hit_iteration_cap is False
        assert result.artifact_kind is None

    def test_request_carries_catalog_instruction_and_transcript(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(_reply("ok"))
        history = [ConversationTurn.user("earlier"), ConversationTurn(role="assistant", text="reply")]
        asyncio.run(make_orchestrator(backend).run("now", history=history))

        request = backend.requests[0]
        assert len(request.tools) == 13
        assert "Velocity" in request.system_instruction
        assert [t.text for t in request.history] == ["earlier", "reply", "now"]
        assert request.history[-1].role == "user"

    def test_empty_reply_gets_notice(self, scripted_backend, make_orchestrator):
        result = asyncio.run(make_orchestrator(scripted_backend(_reply(""))).run("hi"))
        assert result.text == EMPTY_REPLY_NOTICE


# ── TestToolRounds ───────────────────────────────────────────────────


class TestToolRounds:
    def test_n_invocations_produce_one_result_turn(self, scripted_backend, make_orchestrator):
        calls = [
            _call("getLeadDetails", "c1", companyName="Acme"),
            _call("getCompanyNews", "c2", companyName="Acme"),
            _call("getPricing", "c3", productKeyword="Cloud"),
        ]
        backend = scripted_backend(_reply("", *calls), _reply("Here is the summary."))
        result = asyncio.run(make_orchestrator(backend).run("research acme"))

        assert len(backend.requests) == 2
        assert result.iterations == 1
        assert result.text == "Here is the summary."

        second = backend.requests[1].history
        assert [t.role for t in second] == ["user", "assistant", "user"]
        assert second[1].invocations == calls
        result_turn = second[2]
        assert sorted(r.call_id for r in result_turn.results) == ["c1", "c2", "c3"]
        assert all(not r.is_error for r in result_turn.results)

    def test_get_pricing_cloud_returns_single_item(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(
            _reply("", _call("getPricing", "p1", productKeyword="Cloud")),
            _reply("done"),
        )
        asyncio.run(make_orchestrator(backend).run("price?"))

        result = backend.requests[1].history[-1].results[0]
        assert isinstance(result.payload, list)
        assert len(result.payload) == 1
        assert result.payload[0]["name"] == "Enterprise Cloud Subscription"

    def test_results_are_matched_by_call_id_not_completion_order(self):
        async def slow(args):
            await asyncio.sleep(0.05)
            return "slow"

        async def fast(args):
            return "fast"

        registry = ToolRegistry()
        registry.register(ToolDeclaration(name="slow", description="s"), slow)
        registry.register(ToolDeclaration(name="fast", description="f"), fast)

        turn = asyncio.run(execute_all(registry, [_call("slow", "a"), _call("fast", "b")]))
        by_id = {r.call_id: r.payload for r in turn.results}
        assert by_id == {"a": "slow", "b": "fast"}
        assert turn.role == "user"

    def test_repeated_call_ids_keep_every_result(self, crm_data, offline_generator, offline_media):
        registry = build_tool_registry(crm_data, offline_generator, offline_media)
        calls = [
            _call("getPricing", "x", productKeyword="Cloud"),
            _call("getPricing", "x", productKeyword="Support"),
        ]
        turn = asyncio.run(execute_all(registry, calls))

        names = [r.payload[0]["name"] for r in turn.results]
        assert names == ["Enterprise Cloud Subscription", "Premium 24/7 Support"]

    def test_results_follow_invocation_order_without_call_ids(self):
        async def echo(args):
            await asyncio.sleep(0.05 if args["q"] == "first" else 0)
            return args["q"]

        registry = ToolRegistry()
        registry.register(
            ToolDeclaration(name="echo", description="e", parameters=(ToolParameter(name="q"),)), echo,
        )
        turn = asyncio.run(execute_all(registry, [_call("echo", "", q="first"), _call("echo", "", q="second")]))
        assert [r.payload for r in turn.results] == ["first", "second"]

    def test_generation_tool_sets_artifact_kind(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(
            _reply("", _call("draftProposal", "g1", companyName="acme", instructions="Focus on cloud")),
            _reply("<artifact_payload>{\"documentContent\": \"x\"}</artifact_payload>"),
        )
        result = asyncio.run(make_orchestrator(backend).run("@Velocity draft proposal for Acme Corp"))

        assert result.artifact_kind == "Proposal"
        assert result.company_name == "Acme Corp"
        generated = backend.requests[1].history[-1].results[0].payload["result"]
        assert "<artifact_payload>" in generated
        assert result.decode().artifact is not None


# ── TestToolFailures ─────────────────────────────────────────────────


class TestToolFailures:
    def test_unknown_tool_becomes_error_result(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(_reply("", _call("launchRocket", "x1")), _reply("Sorry."))
        result = asyncio.run(make_orchestrator(backend).run("go"))

        error = backend.requests[1].history[-1].results[0]
        assert error.is_error is True
        assert error.payload == {"error": "Tool 'launchRocket' not found."}
        assert result.text == "Sorry."
        assert result.offline is False

    def test_missing_required_argument_becomes_error_result(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(_reply("", _call("getPricing", "x1")), _reply("ok"))
        asyncio.run(make_orchestrator(backend).run("go"))

        error = backend.requests[1].history[-1].results[0]
        assert error.is_error is True
        assert "productKeyword" in error.payload["error"]

    def test_handler_exception_does_not_abort_the_turn(self, scripted_backend, make_orchestrator):
        async def broken(args):
            raise RuntimeError("CRM timeout")

        async def healthy(args):
            return {"ok": True}

        registry = ToolRegistry()
        param = (ToolParameter(name="q"),)
        registry.register(ToolDeclaration(name="broken", description="b", parameters=param), broken)
        registry.register(ToolDeclaration(name="healthy", description="h", parameters=param), healthy)

        backend = scripted_backend(
            _reply("", _call("broken", "b1", q="1"), _call("healthy", "h1", q="2")),
            _reply("Partial answer."),
        )
        result = asyncio.run(make_orchestrator(backend, registry=registry).run("go"))

        results = {r.call_id: r for r in backend.requests[1].history[-1].results}
        assert results["b1"].is_error is True
        assert results["b1"].payload == {"error": "CRM timeout"}
        assert results["h1"].payload == {"ok": True}
        assert result.text == "Partial answer."


# ── TestIterationCap ─────────────────────────────────────────────────


class TestIterationCap:
    def test_loop_stops_at_cap_without_raising(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(_reply("", _call("getPricing", "loop", productKeyword="Cloud")))
        result = asyncio.run(make_orchestrator(backend, max_iterations=3).run("loop forever"))

        assert result.hit_iteration_cap is True
        assert result.iterations == 3
        assert len(backend.requests) == 4
        assert result.text == ITERATION_CAP_NOTICE
        assert not result.turns[-1].has_invocations

    def test_partial_text_is_returned_at_cap(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(
            _reply("Still checking...", _call("getPricing", "loop", productKeyword="Cloud")),
        )
        result = asyncio.run(make_orchestrator(backend, max_iterations=2).run("go"))
        assert result.hit_iteration_cap is True
        assert result.text == "Still checking..."

    def test_cap_must_be_positive(self, scripted_backend, make_orchestrator):
        with pytest.raises(ValueError):
            make_orchestrator(scripted_backend(_reply("x")), max_iterations=0)


# ── TestBackendFailure ───────────────────────────────────────────────


class TestBackendFailure:
    def test_unreachable_backend_falls_back_offline(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(BackendUnavailableError("no key"))
        result = asyncio.run(make_orchestrator(backend).run("@Velocity draft proposal for Acme Corp"))

        assert result.offline is True
        assert result.text.startswith("(Offline Mode)")
        assert result.artifact_kind == "Proposal"
        assert result.company_name == "Acme Corp"
        artifact = result.decode().artifact
        assert artifact is not None
        assert artifact.document_content
        assert artifact.presentation_content

    def test_failure_after_a_tool_round_still_falls_back(self, scripted_backend, make_orchestrator):
        backend = scripted_backend(
            _reply("", _call("getLeadDetails", "c1", companyName="Acme")),
            ConnectionError("network down"),
        )
        result = asyncio.run(make_orchestrator(backend).run("what's new?"))

        assert len(backend.requests) == 2
        assert result.offline is True
        assert result.text.startswith("(Offline Mode)")
        assert result.artifact_kind is None

    def test_default_orchestrator_without_key_runs_offline(self):
        result = asyncio.run(create_orchestrator().run("prep meeting with Global Bank"))
        assert result.offline is True
        assert result.artifact_kind == "Meeting Brief"
        assert result.company_name == "Global Bank"
