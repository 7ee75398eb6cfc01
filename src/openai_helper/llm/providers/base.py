"""Completion provider interface."""

from __future__ import annotations

from typing import Protocol

from ..types import CompletionParameters


class CompletionProvider(Protocol):
    name: str

    def complete(self, prompt: str, params: CompletionParameters) -> str:
        ...
