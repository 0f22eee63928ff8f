"""Rule-based classification of launcher input."""

from __future__ import annotations

import re

from .config import PluginConfig
from .models import QueryKind, QueryState

COMMAND_MARKER = "/"
SCREENSHOT_COMMAND = "screenshot"

# "/screenshot" or "[/screenshot]", any case.
_SCREENSHOT_TAG = re.compile(r"\[/screenshot\]|/screenshot\b", re.IGNORECASE)
# The tag plus at most one blank in front of it.
_SCREENSHOT_TAG_WITH_SPACE = re.compile(r"[ \t]?(?:\[/screenshot\]|/screenshot\b)", re.IGNORECASE)


def has_screenshot_tag(text: str) -> bool:
    return _SCREENSHOT_TAG.search(text) is not None


def strip_screenshot_tag(text: str) -> tuple[str, bool]:
    """Remove every screenshot tag and report whether one was present."""

    cleaned, count = _SCREENSHOT_TAG_WITH_SPACE.subn("", text)
    if not count:
        return text, False
    return cleaned.strip(), True


def ends_with_trigger(text: str, trigger: str) -> bool:
    # An empty trigger would match everything.
    return bool(trigger) and text.endswith(trigger)


def classify(raw_input: str | None, cfg: PluginConfig, *, finalizing: bool = False) -> QueryState:
    """Decide whether ``raw_input`` is ready to be sent.

    The trigger suffix is checked before anything else. When ``finalizing``
    (the user pressed Enter), an input that already carries a resolved
    screenshot tag is treated as complete even without the trigger.
    """

    text = raw_input or ""
    if not text.strip():
        return QueryState(kind=QueryKind.EMPTY, text="")

    trigger = cfg.trigger_keyword
    if ends_with_trigger(text, trigger):
        body = text[: -len(trigger)]
        cleaned, screenshot = strip_screenshot_tag(body)
        return QueryState(
            kind=QueryKind.COMPLETE,
            text=cleaned,
            screenshot_requested=screenshot,
        )

    tagged = has_screenshot_tag(text)
    if finalizing and tagged:
        cleaned, _ = strip_screenshot_tag(text)
        return QueryState(kind=QueryKind.COMPLETE, text=cleaned, screenshot_requested=True)

    if COMMAND_MARKER in text and not tagged:
        return QueryState(kind=QueryKind.COMMAND_PENDING, text=text, command=SCREENSHOT_COMMAND)

    return QueryState(kind=QueryKind.INCOMPLETE, text=text, screenshot_requested=tagged)


def complete_command(text: str, command: str = SCREENSHOT_COMMAND) -> str:
    """Return ``text`` with the pending command marker filled in."""

    stripped = text.rstrip()
    if stripped.endswith(COMMAND_MARKER):
        return stripped + command
    return f"{stripped} {COMMAND_MARKER}{command}"
