"""Tool-calling loop that runs one user request to completion.

Graph:

    model → (last turn has invocations and under the cap?) → tools → model
          → (otherwise)                                   → END

``model`` sends the whole transcript to the backend and appends the reply.
``tools`` executes every invocation of that reply concurrently and appends
a single user turn holding all results, in invocation order.

Anything that escapes the graph is a backend failure (tool failures are
turned into error results inside ``tools``), and the request is answered by
the ``FallbackResponder`` instead.
"""

from __future__ import annotations

import asyncio
import logging
import operator
from dataclasses import dataclass, field
from typing import Annotated

from langgraph.graph import END, StateGraph
from typing_extensions import TypedDict

from velocity.backend import BackendRequest, ChatBackend, LangChainBackend
from velocity.config import MAX_TOOL_ITERATIONS
from velocity.data.crm import CrmDataSource
from velocity.decoder import decode_response
from velocity.fallback import FallbackResponder
from velocity.models import ConversationTurn, DecodedResponse, ToolInvocation, ToolResult
from velocity.prompts import get_system_instruction
from velocity.registry import ToolNotFoundError, ToolRegistry
from velocity.services.artifact_generator import ArtifactGenerator, build_generation_llm
from velocity.services.media_client import MediaClient
from velocity.services.metrics import metrics
from velocity.tools.declarations import ARTIFACT_LABELS
from velocity.tools.toolset import build_tool_registry

logger = logging.getLogger(__name__)

EMPTY_REPLY_NOTICE = "I processed the request but the model returned no text content."
ITERATION_CAP_NOTICE = (
    "I gathered what I could but hit the limit on tool calls for one request. "
    "Try narrowing the question."
)


# ── State schema ─────────────────────────────────────────────────────


class LoopState(TypedDict):
    """State flowing through the graph.

    ``turns`` is append-only (``operator.add`` reducer) and is the exact
    transcript re-sent to the stateless backend on every model step.
    ``iterations`` counts completed tool rounds.
    """

    turns: Annotated[list[ConversationTurn], operator.add]
    iterations: int


@dataclass
class OrchestrationResult:
    text: str
    turns: list[ConversationTurn] = field(default_factory=list)
    iterations: int = 0
    offline: bool = False
    hit_iteration_cap: bool = False
    artifact_kind: str | None = None
    company_name: str | None = None

    def decode(self) -> DecodedResponse:
        return decode_response(self.text)


# ── Tool execution ───────────────────────────────────────────────────


async def execute_invocation(registry: ToolRegistry, invocation: ToolInvocation) -> ToolResult:
    """Run one invocation; every failure comes back as an error result."""
    try:
        declaration = registry.lookup(invocation.tool_name)
        handler = registry.handler(invocation.tool_name)
    except ToolNotFoundError as exc:
        logger.warning("Model requested unknown tool %r", invocation.tool_name)
        return ToolResult.failure(invocation, str(exc))

    missing = [p for p in declaration.required_parameters if p not in invocation.arguments]
    if missing:
        return ToolResult.failure(invocation, f"Missing required argument(s): {', '.join(missing)}")

    try:
        with metrics.timer("tool", invocation.tool_name):
            payload = await handler(invocation.arguments)
    except Exception as exc:
        logger.exception("Tool %s failed", invocation.tool_name)
        return ToolResult.failure(invocation, str(exc) or type(exc).__name__)

    return ToolResult(call_id=invocation.call_id, tool_name=invocation.tool_name, payload=payload)


async def execute_all(registry: ToolRegistry, invocations: list[ToolInvocation]) -> ConversationTurn:
    """Execute *invocations* concurrently and combine them into one result turn."""
    # gather keeps submission order, so results line up with invocations even
    # when call ids repeat or are empty
    results = await asyncio.gather(*(execute_invocation(registry, inv) for inv in invocations))
    return ConversationTurn(role="user", results=list(results))


# ── Nodes ────────────────────────────────────────────────────────────


def _make_model_node(backend: ChatBackend, registry: ToolRegistry):
    """Create the node that asks the backend for the next assistant turn."""
    tools = registry.all()

    async def model_node(state: LoopState) -> dict:
        request = BackendRequest(
            history=state["turns"],
            tools=tools,
            system_instruction=get_system_instruction(),
        )
        response = await backend.complete(request)
        logger.debug(
            "model node: iteration %d, %d invocation(s)",
            state["iterations"], len(response.invocations),
        )
        return {"turns": [response.to_turn()]}

    return model_node


def _make_tools_node(registry: ToolRegistry):
    async def tools_node(state: LoopState) -> dict:
        invocations = state["turns"][-1].invocations
        logger.info("Executing %d tool call(s): %s", len(invocations), [i.tool_name for i in invocations])
        result_turn = await execute_all(registry, invocations)
        return {"turns": [result_turn], "iterations": state["iterations"] + 1}

    return tools_node


def _make_router(max_iterations: int):
    def should_use_tools(state: LoopState) -> str:
        """Route to tools while the model keeps asking and the cap allows."""
        last = state["turns"][-1]
        if last.has_invocations and state["iterations"] < max_iterations:
            return "tools"
        return END

    return should_use_tools


def build_loop_graph(backend: ChatBackend, registry: ToolRegistry, max_iterations: int):
    graph = StateGraph(LoopState)
    graph.add_node("model", _make_model_node(backend, registry))
    graph.add_node("tools", _make_tools_node(registry))
    graph.set_entry_point("model")
    graph.add_conditional_edges("model", _make_router(max_iterations), {"tools": "tools", END: END})
    graph.add_edge("tools", "model")
    return graph.compile()


# ── Orchestrator ─────────────────────────────────────────────────────


def _last_assistant_text(turns: list[ConversationTurn]) -> str:
    for turn in reversed(turns):
        if turn.role == "assistant" and turn.text.strip():
            return turn.text
    return ""


def _last_generation(turns: list[ConversationTurn]) -> ToolInvocation | None:
    for turn in reversed(turns):
        for invocation in reversed(turn.invocations):
            if invocation.tool_name in ARTIFACT_LABELS:
                return invocation
    return None


class TurnOrchestrator:
    """Runs user requests through the compiled tool-calling graph.

    Holds no per-request state, so one instance serves concurrent
    conversations.
    """

    def __init__(
        self,
        backend: ChatBackend,
        registry: ToolRegistry,
        fallback: FallbackResponder,
        max_iterations: int = MAX_TOOL_ITERATIONS,
        data: CrmDataSource | None = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.registry = registry
        self.max_iterations = max_iterations
        self._data = data or CrmDataSource()
        self._fallback = fallback
        self._graph = build_loop_graph(backend, registry, max_iterations)

    async def run(self, message: str, history: list[ConversationTurn] | None = None) -> OrchestrationResult:
        start = list(history or []) + [ConversationTurn.user(message)]
        config = {"recursion_limit": 2 * self.max_iterations + 5}

        try:
            state = await self._graph.ainvoke({"turns": start, "iterations": 0}, config=config)
        except Exception as exc:
            logger.warning("Backend unavailable (%s: %s); answering offline", type(exc).__name__, exc)
            reply = await self._fallback.respond(message)
            return OrchestrationResult(
                text=reply.text,
                turns=start,
                offline=True,
                artifact_kind=reply.kind.label if reply.kind else None,
                company_name=reply.company_name,
            )

        turns: list[ConversationTurn] = list(state["turns"])
        iterations: int = state["iterations"]
        hit_cap = turns[-1].has_invocations
        if hit_cap:
            logger.warning("Stopped after %d tool iteration(s) with calls still pending", iterations)
            # Unexecuted calls would leave the transcript without a matching result turn
            turns[-1] = turns[-1].model_copy(update={"invocations": []})
        new_turns = turns[len(start) - 1:]

        text = _last_assistant_text(new_turns)
        if not text:
            text = ITERATION_CAP_NOTICE if hit_cap else EMPTY_REPLY_NOTICE

        generation = _last_generation(new_turns)
        return OrchestrationResult(
            text=text,
            turns=turns,
            iterations=iterations,
            hit_iteration_cap=hit_cap,
            artifact_kind=ARTIFACT_LABELS[generation.tool_name] if generation else None,
            company_name=self._resolve_company(generation) if generation else None,
        )

    def _resolve_company(self, invocation: ToolInvocation) -> str | None:
        """CRM name of the lead the generation tool drafted for."""
        requested = invocation.arguments.get("companyName")
        if not isinstance(requested, str):
            return None
        lead = self._data.get_lead(requested)
        return lead.company_name if lead else requested


def create_orchestrator(
    *,
    backend: ChatBackend | None = None,
    data: CrmDataSource | None = None,
    generator: ArtifactGenerator | None = None,
    media: MediaClient | None = None,
    max_iterations: int = MAX_TOOL_ITERATIONS,
) -> TurnOrchestrator:
    """Wire the default collaborators into a ready orchestrator."""
    data = data or CrmDataSource()
    generator = generator or ArtifactGenerator(build_generation_llm())
    media = media or MediaClient()
    registry = build_tool_registry(data, generator, media)

    logger.debug("Orchestrator built: %d tools, cap %d", len(registry), max_iterations)
    return TurnOrchestrator(
        backend=backend or LangChainBackend(),
        registry=registry,
        fallback=FallbackResponder(data, generator),
        max_iterations=max_iterations,
        data=data,
    )
