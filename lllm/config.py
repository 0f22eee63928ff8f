"""Plugin settings and their atomic replacement."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/"
DEFAULT_MODEL = "gemini-2.5-flash-preview-04-17"
DEFAULT_TRIGGER_KEYWORD = "~"
DEFAULT_SYSTEM_PROMPT = (
    "You're a helpful assistant that provides concise and accurate answers to user queries. "
    "Your answer should be short and to the point. Respond in plain text. "
    "Do not include any code blocks or markdown formatting. Use google search if needed."
)
DEFAULT_CAPTURE_HIDE_APP = "PowerToys"


@dataclass(frozen=True, slots=True)
class PluginConfig:
    """Read-only settings snapshot used for a single query."""

    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    api_key: str = ""
    trigger_keyword: str = DEFAULT_TRIGGER_KEYWORD
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    tools_enabled: bool = True
    capture_hide_app: str = DEFAULT_CAPTURE_HIDE_APP

    @classmethod
    def from_env(cls) -> "PluginConfig":
        return cls(
            endpoint=os.getenv("LLLM_ENDPOINT", DEFAULT_ENDPOINT),
            model=os.getenv("LLLM_MODEL", DEFAULT_MODEL),
            api_key=os.getenv("LLLM_API_KEY", ""),
            trigger_keyword=os.getenv("LLLM_TRIGGER_KEYWORD", DEFAULT_TRIGGER_KEYWORD),
            system_prompt=os.getenv("LLLM_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
            tools_enabled=_parse_bool(os.getenv("LLLM_GOOGLE_SEARCH"), default=True),
            capture_hide_app=os.getenv("LLLM_CAPTURE_HIDE_APP", DEFAULT_CAPTURE_HIDE_APP),
        )

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "PluginConfig":
        """Build a config from the host's additional-option values.

        Missing keys (or a missing mapping) fall back to the defaults. The
        search toggle reads as disabled when the host omits it but supplies
        other options, mirroring how the host reports an untouched checkbox.
        """

        if options is None:
            logger.info("No settings provided, using default values.")
            return cls()

        def text(key: str, default: str) -> str:
            value = options.get(key)
            return default if value is None else str(value)

        config = cls(
            endpoint=text("LLMEndpoint", DEFAULT_ENDPOINT),
            model=text("LLMModel", DEFAULT_MODEL),
            api_key=text("APIKey", ""),
            trigger_keyword=text("SendTriggerKeyword", DEFAULT_TRIGGER_KEYWORD),
            system_prompt=text("SystemPrompt", DEFAULT_SYSTEM_PROMPT),
            tools_enabled=_parse_bool(options.get("GoogleSearch"), default=False),
            capture_hide_app=text("CaptureHideApp", DEFAULT_CAPTURE_HIDE_APP),
        )
        logger.info("Endpoint set to: %s", config.endpoint)
        logger.info("Model set to: %s", config.model)
        logger.info("APIKey is %s", "set" if config.api_key else "not set")
        logger.info("SendTriggerKeyword set to: %s", config.trigger_keyword)
        logger.info("GoogleSearch is %s", "enabled" if config.tools_enabled else "disabled")
        return config


def additional_options() -> List[Dict[str, Any]]:
    """Describe the settings the host should expose for this plugin."""

    return [
        {
            "key": "LLMEndpoint",
            "label": "LLM Endpoint Base URL",
            "description": "Base endpoint for the model; the model name is appended.",
            "type": "textbox",
            "value": DEFAULT_ENDPOINT,
        },
        {
            "key": "LLMModel",
            "label": "LLM Model",
            "description": "Model name appended to the endpoint URL.",
            "type": "textbox",
            "value": DEFAULT_MODEL,
        },
        {
            "key": "APIKey",
            "label": "API Key",
            "description": "Gemini API key.",
            "type": "textbox",
            "value": "",
        },
        {
            "key": "SendTriggerKeyword",
            "label": "Send Trigger Keyword",
            "description": "Suffix that sends the query to the model.",
            "type": "textbox",
            "value": DEFAULT_TRIGGER_KEYWORD,
        },
        {
            "key": "SystemPrompt",
            "label": "System Prompt",
            "description": "System prompt to guide the model's responses. (Optional)",
            "type": "textbox",
            "value": DEFAULT_SYSTEM_PROMPT,
        },
        {
            "key": "GoogleSearch",
            "label": "Google Search",
            "description": "Enable Google Search",
            "type": "checkbox",
            "value": True,
        },
        {
            "key": "CaptureHideApp",
            "label": "Hide While Capturing",
            "description": "Windows whose title or process contains this text are hidden during screenshots.",
            "type": "textbox",
            "value": DEFAULT_CAPTURE_HIDE_APP,
        },
    ]


class ConfigStore:
    """Holds the current config; updates replace it wholesale."""

    def __init__(self, config: PluginConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = config or PluginConfig()

    def current(self) -> PluginConfig:
        with self._lock:
            return self._config

    def replace(self, config: PluginConfig) -> None:
        with self._lock:
            self._config = config
        logger.info("Settings update complete.")


def _parse_bool(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
