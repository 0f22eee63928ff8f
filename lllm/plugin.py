"""Launcher-facing adapter tying classification, capture and completion together."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import client as completion_client
from .classifier import classify, complete_command
from .clipboard import ClipboardCopier
from .config import ConfigStore, PluginConfig, additional_options
from .models import (
    Answer,
    CaptureResult,
    CompletionRequest,
    CompletionResult,
    ContextMenuResult,
    DisplayHint,
    Failure,
    QueryKind,
    QueryState,
    Result,
)
from .screen_capture import ScreenCapturer

logger = logging.getLogger(__name__)

COPY_KEY = "copy"

Completer = Callable[[CompletionRequest, PluginConfig], CompletionResult]


class LLLMPlugin:
    """Answers launcher queries with a remote language model."""

    name = "LLLM"
    description = "Uses LLLM to output answer"

    def __init__(
        self,
        *,
        config: PluginConfig | None = None,
        capturer: ScreenCapturer | None = None,
        copier: ClipboardCopier | None = None,
        completer: Completer | None = None,
        change_query: Callable[[str], None] | None = None,
    ) -> None:
        self.settings = ConfigStore(config)
        self.capturer = capturer or ScreenCapturer()
        self.copier = copier or ClipboardCopier()
        self._complete = completer or completion_client.complete
        self._change_query = change_query

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @staticmethod
    def additional_options() -> List[Dict[str, Any]]:
        return additional_options()

    def update_settings(self, options: Optional[Mapping[str, Any]]) -> PluginConfig:
        logger.info("[%s] Updating settings...", self.name)
        config = PluginConfig.from_options(options)
        self.settings.replace(config)
        return config

    # ------------------------------------------------------------------
    # Query handling
    # ------------------------------------------------------------------

    def classify_preview(self, text: str) -> DisplayHint:
        """Hint shown while the user types; never touches the network."""

        cfg = self.settings.current()
        state = classify(text, cfg)
        if state.kind is QueryKind.COMMAND_PENDING:
            return DisplayHint(
                title=cfg.model,
                subtitle=f"Type '{state.command}' to attach a screenshot of the screen",
            )
        if state.kind is QueryKind.COMPLETE:
            if state.screenshot_requested:
                return DisplayHint(title=cfg.model, subtitle=f"Press Enter to send with a screenshot to {cfg.model}")
            return DisplayHint(title=cfg.model, subtitle=f"Ready to send to {cfg.model}")
        if state.screenshot_requested:
            return DisplayHint(title=cfg.model, subtitle=f"Press Enter to send with a screenshot to {cfg.model}")
        return self._typing_hint(cfg)

    def resolve(self, text: str) -> Union[CompletionResult, DisplayHint]:
        """Finalizing query: send complete input, otherwise explain what is missing."""

        cfg = self.settings.current()
        state = classify(text, cfg, finalizing=True)
        logger.info("[%s] Query received: '%s' (%s)", self.name, text, state.kind.value)
        if state.kind is QueryKind.EMPTY:
            return Failure(completion_client.EMPTY_INPUT_MESSAGE)
        if state.kind is QueryKind.COMMAND_PENDING:
            return DisplayHint(
                title=state.command or "",
                subtitle="Capture the screen and attach it to the query",
                replacement_query=complete_command(state.text, state.command or ""),
            )
        if state.kind is QueryKind.INCOMPLETE:
            return self._typing_hint(cfg)
        return self._send(state, cfg)

    def query(self, text: str, delayed: bool = False, *, action_keyword: str = "") -> List[Result]:
        """Host entry point returning a single result row.

        ``action_keyword`` is the keyword the host used to route the query
        here; it is put back in front of any query the plugin rewrites.
        """

        outcome: Union[CompletionResult, DisplayHint]
        outcome = self.resolve(text) if delayed else self.classify_preview(text)
        cfg = self.settings.current()
        if isinstance(outcome, DisplayHint):
            replacement = outcome.replacement_query
            return [
                Result(
                    title=outcome.title,
                    subtitle=outcome.subtitle,
                    action=lambda: self._replace_query(replacement, action_keyword),
                    context_data={"query": replacement} if replacement else {},
                )
            ]
        response = outcome.text
        logger.info("[%s] Response from LLM: '%s'", self.name, response)
        return [
            Result(
                title=cfg.model,
                subtitle=response,
                action=lambda: self.copier.copy(response),
                context_data={COPY_KEY: response},
            )
        ]

    def load_context_menus(self, result: Result) -> List[ContextMenuResult]:
        value = (result.context_data or {}).get(COPY_KEY)
        if value is None:
            return []
        return [ContextMenuResult(title="Copy (Enter)", action=lambda: self.copier.copy(value))]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _replace_query(self, replacement: Optional[str], action_keyword: str) -> bool:
        # Keeps the launcher open on the rewritten query.
        if replacement and self._change_query is not None:
            query = f"{action_keyword} {replacement}" if action_keyword else replacement
            self._change_query(query)
        return False

    def _send(self, state: QueryState, cfg: PluginConfig) -> CompletionResult:
        capture: CaptureResult | None = None
        if state.screenshot_requested:
            capture = self.capturer.capture_with_app_hidden(cfg.capture_hide_app)
            if not capture.ok:
                logger.warning("[%s] Screenshot unavailable; sending text only", self.name)
        request = CompletionRequest.from_config(state.text, cfg, capture)
        logger.info("[%s] Input for LLM: '%s'", self.name, request.text)
        result = self._complete(request, cfg)
        if isinstance(result, Answer):
            logger.debug("[%s] Answer has %d characters", self.name, len(result.text))
        return result

    @staticmethod
    def _typing_hint(cfg: PluginConfig) -> DisplayHint:
        return DisplayHint(
            title=cfg.model,
            subtitle=f"End input with: '{cfg.trigger_keyword}' or use '/' for special commands.",
        )
