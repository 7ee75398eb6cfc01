"""Transient values passed between the editor, prompt builder and client."""

from __future__ import annotations

from dataclasses import dataclass

from .llm.types import CompletionParameters

TRUNCATION_MARKER = "\n\n...[truncated]"


@dataclass(frozen=True)
class SourceContext:
    full_text: str
    selected_text: str = ""

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_text)


@dataclass(frozen=True)
class PromptRequest:
    text: str
    max_chars: int

    def bounded(self) -> str:
        """Applies the prefix-cut truncation policy."""
        if len(self.text) <= self.max_chars:
            return self.text
        return self.text[: self.max_chars] + TRUNCATION_MARKER


@dataclass(frozen=True)
class ActionSpec:
    name: str
    command_id: str
    title: str
    template: str
    max_chars: int
    parameters: CompletionParameters
    requires_question: bool = False
    input_prompt: str = ""
