"""Shared LLM data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

REASONING_EFFORTS = ("low", "medium", "high")
TOKEN_FIELDS = ("max_completion_tokens", "max_tokens")


class ProviderError(RuntimeError):
    """Provider failed to return a generation."""


class ConfigurationError(ProviderError):
    """Required configuration (credential, parameters) is missing or invalid."""


class TransportError(ProviderError):
    """Network failure or non-success HTTP status from the provider."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class CompletionParameters:
    model: str
    max_output_tokens: int
    reasoning_effort: Optional[str] = None
    token_field: str = "max_completion_tokens"

    def __post_init__(self) -> None:
        if self.reasoning_effort is not None and self.reasoning_effort not in REASONING_EFFORTS:
            raise ConfigurationError(
                f"Invalid reasoning_effort '{self.reasoning_effort}', expected one of {', '.join(REASONING_EFFORTS)}"
            )
        if self.token_field not in TOKEN_FIELDS:
            raise ConfigurationError(
                f"Invalid token_field '{self.token_field}', expected one of {', '.join(TOKEN_FIELDS)}"
            )
        if int(self.max_output_tokens) <= 0:
            raise ConfigurationError("max_output_tokens must be positive")
