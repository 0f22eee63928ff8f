"""Clipboard copy with a cooldown against duplicate invocations."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import pyperclip

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 1.0


class CopyRateLimiter:
    """Allows at most one copy per cooldown window."""

    def __init__(
        self,
        cooldown: float = DEFAULT_COOLDOWN_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if cooldown < 0:
            raise ValueError("cooldown must not be negative")
        self.cooldown = cooldown
        self._clock = clock
        self._last: Optional[float] = None

    def ready(self) -> bool:
        if self._last is None:
            return True
        return self._clock() - self._last >= self.cooldown

    def mark(self) -> None:
        self._last = self._clock()


class ClipboardCopier:
    """Copies answers to the system clipboard.

    Pressing Enter on a result fires both the result action and the context
    menu action, so the second call within the cooldown is dropped.
    """

    def __init__(
        self,
        limiter: CopyRateLimiter | None = None,
        *,
        writer: Callable[[str], None] = pyperclip.copy,
    ) -> None:
        self.limiter = limiter or CopyRateLimiter()
        self._writer = writer

    def copy(self, value: Optional[str]) -> bool:
        if not self.limiter.ready():
            logger.info("CopyToClipboard called too frequently. Skipping.")
            return False
        if value is None:
            return True
        try:
            self._writer(value)
        except pyperclip.PyperclipException as exc:
            logger.warning("Clipboard is unavailable: %s", exc)
            return False
        logger.info("Copying to clipboard: '%s'", value)
        self.limiter.mark()
        return True
