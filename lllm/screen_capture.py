"""Screenshots of the primary display with the launcher's own windows hidden."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .models import CaptureResult
from .windows import PNG_MIME_TYPE, WindowBackend, WindowInfo, default_backend, describe

logger = logging.getLogger(__name__)

HIDDEN_SETTLE_SECONDS = 0.2
IDLE_SETTLE_SECONDS = 0.1
RESTORE_DELAY_SECONDS = 0.05


class ScreenCapturer:
    """Hides matching windows, grabs the display and always puts the windows back."""

    def __init__(
        self,
        backend: Optional[WindowBackend] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._backend = backend
        self._sleep = sleep

    @property
    def backend(self) -> WindowBackend:
        if self._backend is None:
            self._backend = default_backend()
        return self._backend

    def capture_with_app_hidden(self, app_name_substring: str) -> CaptureResult:
        """Capture the display while windows matching ``app_name_substring`` are hidden.

        Returns ``CaptureResult.empty()`` when any step fails. Windows that were
        hidden are shown again whether or not the capture succeeded.
        """

        hidden: List[WindowInfo] = []
        try:
            self._hide_matching(app_name_substring, hidden)
            self._sleep(HIDDEN_SETTLE_SECONDS if hidden else IDLE_SETTLE_SECONDS)
            image = self.backend.capture_display()
            if not image:
                logger.warning("Screen capture produced no data")
                return CaptureResult.empty()
            return CaptureResult(image=image, mime_type=PNG_MIME_TYPE)
        except Exception as exc:
            logger.exception("Screen capture failed: %s", exc)
            return CaptureResult.empty()
        finally:
            if hidden:
                self._sleep(RESTORE_DELAY_SECONDS)
                self.restore(hidden)

    def restore(self, windows: List[WindowInfo]) -> None:
        if not windows:
            return
        logger.info("Attempting to restore windows...")
        for window in windows:
            try:
                self.backend.show(window)
                logger.info("Restoring window %s", describe(window))
            except Exception as exc:
                logger.error("Error restoring window %s: %s", window.handle, exc)

    def _hide_matching(self, app_name_substring: str, hidden: List[WindowInfo]) -> None:
        # Appends as it goes so the caller can restore a partially hidden set.
        logger.info("Attempting to hide windows for '%s'...", app_name_substring)
        for window in self.backend.list_visible_windows():
            if not window.matches(app_name_substring):
                continue
            hidden.append(window)
            self.backend.hide(window)
            logger.info("Hiding window %s", describe(window))
        if not hidden:
            logger.info("No visible windows found matching '%s'.", app_name_substring)
