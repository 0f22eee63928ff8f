"""Window enumeration and display capture backends."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Protocol

from .errors import CaptureError

logger = logging.getLogger(__name__)

try:  # pragma: no cover - optional dependency
    import psutil  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    psutil = None  # type: ignore

try:  # pragma: no cover - optional dependency
    import mss  # type: ignore
    from mss import tools as mss_tools  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    mss = None  # type: ignore
    mss_tools = None  # type: ignore

try:  # pragma: no cover - optional dependency
    from PIL import ImageGrab  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    ImageGrab = None  # type: ignore

PNG_MIME_TYPE = "image/png"

_SW_HIDE = 0
_SW_SHOW = 5


@dataclass(frozen=True, slots=True)
class WindowInfo:
    """A visible top-level window."""

    handle: int
    title: str
    process_name: str = ""

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match against title or process name."""

        if not needle:
            return False
        needle = needle.lower()
        return needle in self.title.lower() or needle in self.process_name.lower()


class WindowBackend(Protocol):
    def list_visible_windows(self) -> List[WindowInfo]: ...

    def hide(self, window: WindowInfo) -> None: ...

    def show(self, window: WindowInfo) -> None: ...

    def capture_display(self) -> bytes: ...


def capture_primary_display(monitor_index: int = 1) -> bytes:
    """Grab the primary display and return PNG bytes."""

    if mss is not None and mss_tools is not None:
        with mss.mss() as sct:
            monitors = sct.monitors
            index = min(max(monitor_index, 1), len(monitors) - 1)
            shot = sct.grab(monitors[index])
            return mss_tools.to_png(shot.rgb, shot.size)
    if ImageGrab is not None:
        image = ImageGrab.grab()  # type: ignore[attr-defined]
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
    raise CaptureError("No screen capture backend is available; install mss or Pillow")


class DisplayOnlyBackend:
    """Backend for hosts without window control; only captures the display."""

    def __init__(self, *, monitor_index: int = 1) -> None:
        self.monitor_index = monitor_index

    def list_visible_windows(self) -> List[WindowInfo]:
        return []

    def hide(self, window: WindowInfo) -> None:
        logger.debug("Window hiding is unsupported here; leaving %s visible", window.handle)

    def show(self, window: WindowInfo) -> None:
        logger.debug("Window showing is unsupported here; ignoring %s", window.handle)

    def capture_display(self) -> bytes:
        return capture_primary_display(self.monitor_index)


class Win32WindowBackend:
    """Windows backend built on user32 via ctypes."""

    def __init__(self, *, monitor_index: int = 1) -> None:
        from sys import platform

        if not platform.startswith("win"):
            raise CaptureError("Win32WindowBackend requires Windows")
        import ctypes
        from ctypes import wintypes

        self._ctypes = ctypes
        self._wintypes = wintypes
        self.monitor_index = monitor_index
        user32 = ctypes.windll.user32
        self._enum_windows = user32.EnumWindows
        self._is_window_visible = user32.IsWindowVisible
        self._get_shell_window = user32.GetShellWindow
        self._get_shell_window.restype = wintypes.HWND
        self._get_window_text_length = user32.GetWindowTextLengthW
        self._get_window_text = user32.GetWindowTextW
        self._get_window_thread_process_id = user32.GetWindowThreadProcessId
        self._show_window = user32.ShowWindow
        self._enum_proc_type = ctypes.WINFUNCTYPE(wintypes.BOOL, wintypes.HWND, wintypes.LPARAM)

    def list_visible_windows(self) -> List[WindowInfo]:
        shell = self._get_shell_window()
        windows: List[WindowInfo] = []

        def callback(hwnd, _lparam):
            if not self._is_window_visible(hwnd) or hwnd == shell:
                return True
            title = self._window_title(hwnd)
            if not title:
                return True
            windows.append(
                WindowInfo(
                    handle=int(hwnd),
                    title=title,
                    process_name=self._process_name(self._window_process_id(hwnd)),
                )
            )
            return True

        if not self._enum_windows(self._enum_proc_type(callback), 0):
            raise CaptureError("EnumWindows failed")
        return windows

    def hide(self, window: WindowInfo) -> None:
        self._show_window(window.handle, _SW_HIDE)

    def show(self, window: WindowInfo) -> None:
        self._show_window(window.handle, _SW_SHOW)

    def capture_display(self) -> bytes:
        return capture_primary_display(self.monitor_index)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _window_title(self, hwnd: int) -> str:
        length = self._get_window_text_length(hwnd)
        if length == 0:
            return ""
        buffer = self._ctypes.create_unicode_buffer(length + 1)
        self._get_window_text(hwnd, buffer, length + 1)
        return buffer.value

    def _window_process_id(self, hwnd: int) -> int:
        pid = self._wintypes.DWORD()
        self._get_window_thread_process_id(hwnd, self._ctypes.byref(pid))
        return int(pid.value)

    @staticmethod
    def _process_name(pid: int) -> str:
        if pid <= 0 or psutil is None:
            return ""
        try:
            return psutil.Process(pid).name()
        except (psutil.AccessDenied, psutil.NoSuchProcess, psutil.ZombieProcess):  # type: ignore[attr-defined]
            # Process might have exited.
            return ""


def default_backend(*, monitor_index: int = 1) -> WindowBackend:
    from sys import platform

    if platform.startswith("win"):
        try:
            return Win32WindowBackend(monitor_index=monitor_index)
        except Exception as exc:  # pragma: no cover - runtime safeguard
            logger.warning("Win32 window control unavailable: %s", exc)
    return DisplayOnlyBackend(monitor_index=monitor_index)


def describe(window: WindowInfo) -> str:
    return f"'{window.title}' (HWND: {window.handle})"
