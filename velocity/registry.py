"""Tool registry: the fixed catalog of tools and the handler bound to each.

The registry is built once at startup (see ``velocity.tools.toolset``) and
then sealed.  Its declaration order is sent verbatim to the backend on every
call, so it is the insertion order and never changes afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from velocity.models import ToolDeclaration

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolNotFoundError(KeyError):
    """Raised when a tool name is not part of the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Tool '{self.name}' not found."


class ToolRegistry:
    """Ordered mapping of tool name to (declaration, handler)."""

    def __init__(self) -> None:
        self._declarations: dict[str, ToolDeclaration] = {}
        self._handlers: dict[str, ToolHandler] = {}
        self._sealed = False

    def register(self, declaration: ToolDeclaration, handler: ToolHandler) -> None:
        """Add a tool.  Each name gets exactly one callable handler."""
        if self._sealed:
            raise RuntimeError("Tool registry is sealed; register tools at startup only")
        if declaration.name in self._declarations:
            raise ValueError(f"Tool '{declaration.name}' is already registered")
        if not callable(handler):
            raise TypeError(f"Handler for tool '{declaration.name}' is not callable")

        self._declarations[declaration.name] = declaration
        self._handlers[declaration.name] = handler
        logger.debug("Registered tool: %s", declaration.name)

    def seal(self) -> None:
        """Freeze the catalog; later ``register`` calls fail."""
        self._sealed = True

    def lookup(self, name: str) -> ToolDeclaration:
        try:
            return self._declarations[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def handler(self, name: str) -> ToolHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def all(self) -> list[ToolDeclaration]:
        """Every declaration, in registration order."""
        return list(self._declarations.values())

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)
