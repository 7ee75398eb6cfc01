"""Extension lifecycle: wires settings, provider and commands into the host."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from .actions import ActionDispatcher
from .config import load_settings, parse_timeout
from .host import EditorHost
from .llm.providers.base import CompletionProvider
from .llm.providers.openai_provider import OpenAIChatProvider

logger = logging.getLogger(__name__)


def activate(
    host: EditorHost,
    settings_path: str | None = None,
    provider: CompletionProvider | None = None,
) -> ActionDispatcher:
    load_dotenv()
    settings = load_settings(settings_path)
    if provider is None:
        openai_cfg = settings.get("openai", {})
        provider = OpenAIChatProvider(
            endpoint=str(openai_cfg.get("endpoint")),
            timeout_seconds=parse_timeout(openai_cfg),
            api_key_env=str(openai_cfg.get("api_key_env", "OPENAI_API_KEY")),
        )

    dispatcher = ActionDispatcher(host, provider, settings)
    for command_id, handler in dispatcher.commands().items():
        host.register_command(command_id, handler)

    logger.info("OpenAI Helper extension is now active!")
    return dispatcher


def deactivate() -> None:
    pass
