"""Prompt templates and builders."""

from __future__ import annotations

from typing import Dict, Optional

from .models import PromptRequest, SourceContext

CODE_SECTION = "I have the following code:\n\n{full_text}\n\n"
SELECTION_SECTION = "I have selected this snippet:\n\n{selected_text}\n\n"

ASK_TEMPLATE = "My question: {question}"

FLOWCHART_TEMPLATE = (
    "Please provide a high-level flowchart that outlines the code structure. "
    "For each function, describe what it does, how it is called, the order of function calls, "
    "and how data flows between them. Provide a clear, concise overview without excessive details."
)

IMPROVEMENTS_TEMPLATE = (
    "Please analyze this code for inefficiencies, mistakes, and possible improvements. "
    "List your suggestions ordered from the easiest and safest to apply to the hardest, "
    "and for each one explain briefly why it helps."
)

TEMPLATES: Dict[str, str] = {
    "ask": ASK_TEMPLATE,
    "flowchart": FLOWCHART_TEMPLATE,
    "improvements": IMPROVEMENTS_TEMPLATE,
}


def limit_prompt(prompt: str, max_chars: int) -> str:
    return PromptRequest(text=prompt, max_chars=max_chars).bounded()


def build_prompt(
    template: str,
    context: SourceContext,
    max_chars: int,
    question: Optional[str] = None,
) -> str:
    """Code first, optional selected snippet, then the action instruction."""
    prompt = CODE_SECTION.replace("{full_text}", context.full_text)
    if context.has_selection:
        prompt += SELECTION_SECTION.replace("{selected_text}", context.selected_text)
    prompt += template.replace("{question}", question or "")
    return limit_prompt(prompt, max_chars)
