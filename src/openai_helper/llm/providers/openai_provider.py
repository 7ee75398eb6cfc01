"""OpenAI Chat Completions provider."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

import requests

from ..types import CompletionParameters, ConfigurationError, TransportError

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_API_KEY_ENV = "OPENAI_API_KEY"
FALLBACK_TEXT = "No response from OpenAI."

logger = logging.getLogger(__name__)


def env_credentials(var_name: str = DEFAULT_API_KEY_ENV) -> Callable[[], Optional[str]]:
    """Returns a provider that reads the API key from the environment on each call."""

    def _read() -> Optional[str]:
        return os.getenv(var_name)

    return _read


def extract_reply(data: Any) -> str:
    if not isinstance(data, dict):
        return FALLBACK_TEXT
    choices = data.get("choices")
    if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
        return FALLBACK_TEXT
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return FALLBACK_TEXT
    content = message.get("content")
    if not content or not isinstance(content, str):
        return FALLBACK_TEXT
    return content


class OpenAIChatProvider:
    name = "openai"

    def __init__(
        self,
        credentials: Callable[[], Optional[str]] | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_seconds: float | None = None,
        api_key_env: str = DEFAULT_API_KEY_ENV,
    ) -> None:
        self._credentials = credentials or env_credentials(api_key_env)
        self._api_key_env = api_key_env
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def build_payload(prompt: str, params: CompletionParameters) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": params.model,
            "messages": [{"role": "user", "content": prompt}],
            params.token_field: int(params.max_output_tokens),
        }
        if params.reasoning_effort:
            payload["reasoning_effort"] = params.reasoning_effort
        return payload

    def complete(self, prompt: str, params: CompletionParameters) -> str:
        api_key = self._credentials()
        if not api_key:
            raise ConfigurationError(
                f"OpenAI API key not set in environment variable {self._api_key_env}."
            )

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = self.build_payload(prompt, params)

        logger.debug("POST %s model=%s prompt_chars=%d", self.endpoint, params.model, len(prompt))
        try:
            res = requests.post(self.endpoint, headers=headers, json=payload, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise TransportError(f"OpenAI request failed: {exc}") from exc

        if not 200 <= res.status_code < 300:
            raise TransportError(f"OpenAI API error: {res.text}", status_code=res.status_code, body=res.text)

        try:
            data = res.json()
        except ValueError:
            logger.debug("Non-JSON success body from %s", self.endpoint)
            return FALLBACK_TEXT
        return extract_reply(data)
