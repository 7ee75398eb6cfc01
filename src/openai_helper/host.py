"""Editor collaborator interface."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from .models import SourceContext

T = TypeVar("T")


class EditorHost(Protocol):
    def active_source(self) -> Optional[SourceContext]:
        """Returns the active document text and selection, or None without an editor."""
        ...

    async def ask_input(self, prompt: str) -> Optional[str]:
        ...

    async def with_progress(self, title: str, task: Callable[[], Awaitable[T]]) -> T:
        ...

    async def show_document(self, content: str) -> None:
        """Opens a read-only plaintext panel beside the current one with soft wrap enabled."""
        ...

    async def show_information(self, message: str) -> None:
        ...

    async def show_error(self, message: str) -> None:
        ...

    def register_command(self, command_id: str, handler: Callable[[], Awaitable[Any]]) -> None:
        ...
