"""Configuration loading and defaults."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

from .llm.types import CompletionParameters, ConfigurationError

DEFAULT_SETTINGS: Dict[str, Any] = {
    "openai": {
        "endpoint": "https://api.openai.com/v1/chat/completions",
        "api_key_env": "OPENAI_API_KEY",
        "timeout_seconds": None,
    },
    "actions": {
        "ask": {
            "command_id": "openai-helper.askQuestion",
            "title": "Querying OpenAI...",
            "max_chars": 20000,
            "model": "o3-mini",
            "reasoning_effort": "medium",
            "max_output_tokens": 5000,
            "token_field": "max_completion_tokens",
        },
        "flowchart": {
            "command_id": "openai-helper.getFlowchart",
            "title": "Generating flowchart...",
            "max_chars": 100000,
            "model": "o3-mini",
            "reasoning_effort": "medium",
            "max_output_tokens": 5000,
            "token_field": "max_completion_tokens",
        },
        "improvements": {
            "command_id": "openai-helper.analyzeImprovements",
            "title": "Analyzing code for improvements...",
            "max_chars": 250000,
            "model": "o3-mini",
            "reasoning_effort": "high",
            "max_output_tokens": 10000,
            "token_field": "max_completion_tokens",
        },
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path: str | None = None) -> Dict[str, Any]:
    """Loads an optional settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    if not settings_path:
        return merged
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        if not isinstance(user_cfg, dict):
            raise ConfigurationError(f"Settings file {config_path} must contain a mapping")
        merged = _deep_merge(merged, user_cfg)
    return merged


def parse_parameters(action_cfg: Dict[str, Any]) -> CompletionParameters:
    """Builds completion parameters from one action's settings block."""
    try:
        return CompletionParameters(
            model=str(action_cfg["model"]),
            max_output_tokens=int(action_cfg["max_output_tokens"]),
            reasoning_effort=action_cfg.get("reasoning_effort") or None,
            token_field=str(action_cfg.get("token_field", "max_completion_tokens")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid action settings: {exc}") from exc


def parse_max_chars(action_cfg: Dict[str, Any]) -> int:
    """Reads an action's prompt character ceiling."""
    try:
        max_chars = int(action_cfg["max_chars"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid action settings: max_chars {exc}") from exc
    if max_chars <= 0:
        raise ConfigurationError("max_chars must be positive")
    return max_chars


def parse_timeout(openai_cfg: Dict[str, Any]) -> float | None:
    """Reads the request timeout; None means the HTTP client default."""
    timeout = openai_cfg.get("timeout_seconds")
    if timeout is None:
        return None
    if isinstance(timeout, bool):
        raise ConfigurationError(f"Invalid timeout_seconds: {timeout!r}")
    try:
        value = float(timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid timeout_seconds: {timeout!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"timeout_seconds must be positive, got {timeout!r}")
    return value
