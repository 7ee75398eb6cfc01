"""Action table and dispatch for the editor commands."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from .config import load_settings, parse_max_chars, parse_parameters
from .host import EditorHost
from .llm.providers.base import CompletionProvider
from .llm.types import ProviderError
from .models import ActionSpec, SourceContext
from .prompts import TEMPLATES, build_prompt

NO_EDITOR_MESSAGE = "No active editor found."
ASK_INPUT_PROMPT = "Enter your question about the code"

logger = logging.getLogger(__name__)


def build_action_table(settings: Dict[str, Any]) -> Dict[str, ActionSpec]:
    table: Dict[str, ActionSpec] = {}
    for name, cfg in settings.get("actions", {}).items():
        template = cfg.get("template") or TEMPLATES.get(name)
        if not template:
            logger.warning("Skipping action '%s': no template configured", name)
            continue
        requires_question = bool(cfg.get("requires_question", name == "ask"))
        table[name] = ActionSpec(
            name=name,
            command_id=str(cfg.get("command_id", f"openai-helper.{name}")),
            title=str(cfg.get("title", "Querying OpenAI...")),
            template=template,
            max_chars=parse_max_chars(cfg),
            parameters=parse_parameters(cfg),
            requires_question=requires_question,
            input_prompt=str(cfg.get("input_prompt", ASK_INPUT_PROMPT)) if requires_question else "",
        )
    return table


class ActionDispatcher:
    def __init__(
        self,
        host: EditorHost,
        provider: CompletionProvider,
        settings: Dict[str, Any] | None = None,
    ) -> None:
        self.host = host
        self.provider = provider
        self.actions = build_action_table(settings or load_settings())

    def prepare_prompt(self, action: ActionSpec, context: SourceContext, question: str | None = None) -> str:
        return build_prompt(action.template, context, action.max_chars, question=question)

    async def _execute(self, action: ActionSpec) -> str | None:
        context = self.host.active_source()
        if context is None:
            await self.host.show_information(NO_EDITOR_MESSAGE)
            return None

        question = None
        if action.requires_question:
            question = await self.host.ask_input(action.input_prompt)
            if not question:
                return None

        prompt = self.prepare_prompt(action, context, question)

        async def _task() -> str:
            answer = await asyncio.to_thread(self.provider.complete, prompt, action.parameters)
            await self.host.show_document(answer)
            return answer

        return await self.host.with_progress(action.title, _task)

    async def run(self, name: str) -> str | None:
        """Runs one action end to end; returns the displayed text or None."""
        action = self.actions[name]
        try:
            return await self._execute(action)
        except ProviderError as exc:
            logger.debug("Action '%s' failed: %s", name, exc)
            await self.host.show_error(f"Error: {exc}")
            return None

    async def ask_about_code(self) -> str | None:
        return await self.run("ask")

    async def generate_flowchart(self) -> str | None:
        return await self.run("flowchart")

    async def analyze_improvements(self) -> str | None:
        return await self.run("improvements")

    def commands(self) -> Dict[str, Callable[[], Awaitable[str | None]]]:
        handlers: Dict[str, Callable[[], Awaitable[str | None]]] = {}
        for name, action in self.actions.items():
            handlers[action.command_id] = self._handler(name)
        return handlers

    def _handler(self, name: str) -> Callable[[], Awaitable[str | None]]:
        async def _run() -> str | None:
            return await self.run(name)

        return _run
