"""CLI entry point for the Velocity sales copilot.

A terminal chat for development.  For production, use the FastAPI server
(velocity/server.py).

Usage:
    python -m velocity.main            # normal mode (quiet)
    python -m velocity.main --debug    # debug mode (shows backend and tool calls)
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from velocity.models import ConversationTurn
from velocity.orchestrator import OrchestrationResult, TurnOrchestrator, create_orchestrator
from velocity.services.artifact_store import InMemoryArtifactRepository, new_artifact_record
from velocity.services.media_client import MediaClient

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("velocity").setLevel(logging.DEBUG if debug else logging.INFO)


def render_reply(result: OrchestrationResult, artifact_id: str | None = None) -> str:
    """Format a decoded reply for the terminal."""
    decoded = result.decode()
    lines: list[str] = []

    if decoded.reasoning:
        lines.append("Reasoning:")
        lines.extend(f"  • {step}" for step in decoded.reasoning)
        lines.append("")

    lines.append(f"Velocity: {decoded.display_text}")

    if decoded.references:
        lines.append("")
        lines.append("Sources:")
        lines.extend(f"  [{ref.type}] {ref.title} — {ref.key_point}" for ref in decoded.references)

    if decoded.artifact is not None:
        lines.append("")
        lines.append(f"[Artifact saved: {artifact_id}]")
        lines.append(decoded.artifact.document_content)

    return "\n".join(lines)


async def _chat_loop(orchestrator: TurnOrchestrator) -> None:
    artifacts = InMemoryArtifactRepository()
    history: list[ConversationTurn] = []

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not user_input:
            continue

        if user_input.lower() in ("exit", "quit", "q"):
            print("\nGoodbye!")
            break

        if user_input.lower() == "new":
            history = []
            print("\n>> Conversation cleared.\n")
            continue

        try:
            result = await orchestrator.run(user_input, history=history)
        except Exception as e:
            logger.exception("Error processing message")
            print(f"\nVelocity: Something went wrong: {e}\n")
            continue

        artifact_id = None
        decoded = result.decode()
        if decoded.artifact is not None:
            record = new_artifact_record(
                decoded.artifact,
                kind=result.artifact_kind,
                company_name=result.company_name,
            )
            artifacts.save(record)
            artifact_id = record.id

        print(f"\n{render_reply(result, artifact_id)}\n")

        # Only the visible exchange is carried forward
        history.append(ConversationTurn.user(user_input))
        history.append(ConversationTurn(role="assistant", text=decoded.display_text))


async def _run_cli() -> None:
    """Run the chat loop; the media client's HTTP pool is closed on exit."""
    media = MediaClient()
    try:
        await _chat_loop(create_orchestrator(media=media))
    finally:
        await media.aclose()


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="Velocity sales copilot CLI")
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including backend and tool calls",
    )
    args = parser.parse_args()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print("  Velocity Sales Copilot - CLI Chat")
    print("=" * 60)
    print("  Try: '@Velocity draft proposal for Acme Corp'")
    print("  Commands: 'quit' to exit, 'new' to clear the conversation.")
    print("=" * 60 + "\n")

    asyncio.run(_run_cli())


if __name__ == "__main__":
    main()
