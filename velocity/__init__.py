"""Velocity — a tool-calling sales copilot for account teams.

Architecture Overview
=====================

One user request runs through a **LangGraph** loop with two nodes:

1. **model** — sends the full transcript, the tool catalog and the system
   instruction to the chat backend (Claude via LangChain) and appends the
   reply.

2. **tools** — executes every tool call of that reply concurrently and
   appends one result turn, matched to the calls by ``call_id``.

Routing: model → (tool calls and under the cap?) → tools → model
(loop until no tool calls or ``MAX_TOOL_ITERATIONS`` → END)

The final text carries optional ``<reasoning>``, ``<references>`` and
``<artifact_payload>`` blocks which ``velocity.decoder`` splits out for the UI.

Key Design Decisions
--------------------
- **Tools**: seven read-only lookups over mock CRM data and six generation
  tools (proposal, handoff, meeting brief, follow-up email, voice-over, demo
  video).  Each name maps to exactly one async handler in a sealed registry.
- **Generation**: a separate tool-less drafting call; on any failure the
  shared offline template for the same artifact kind is returned instead.
- **Offline mode**: when the backend cannot be reached at all the request
  is answered by a keyword-driven fallback that renders a template artifact
  prefixed with "(Offline Mode)".
- **Persistence**: the core stores nothing; API and CLI save artifacts
  through an injected ``ArtifactRepository``.
- **Dual Interface**: FastAPI server (production) + CLI chat loop.

Package Structure
-----------------
- ``velocity/orchestrator.py`` — LangGraph tool-calling loop
- ``velocity/backend.py`` — chat backend contract and Anthropic implementation
- ``velocity/decoder.py`` — tagged response decoder
- ``velocity/fallback.py`` — offline responder
- ``velocity/templates.py`` — offline artifact templates
- ``velocity/registry.py`` — tool registry
- ``velocity/tools/`` — tool declarations and handlers
- ``velocity/services/`` — drafting model, media client, artifact store, metrics
- ``velocity/data/`` — mock CRM data, price list, legal clauses, documents
- ``velocity/api/`` — FastAPI routes and Pydantic schemas
"""
