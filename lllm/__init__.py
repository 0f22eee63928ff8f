"""LLLM launcher plugin: sends finished queries to a generative-language API."""

from .classifier import classify
from .client import complete
from .clipboard import ClipboardCopier, CopyRateLimiter
from .config import ConfigStore, PluginConfig
from .models import (
    Answer,
    CaptureResult,
    CompletionRequest,
    DisplayHint,
    Failure,
    QueryKind,
    QueryState,
)
from .plugin import LLLMPlugin
from .screen_capture import ScreenCapturer
from .windows import WindowBackend, WindowInfo

__all__ = [
    "LLLMPlugin",
    "PluginConfig",
    "ConfigStore",
    "classify",
    "complete",
    "ScreenCapturer",
    "WindowBackend",
    "WindowInfo",
    "ClipboardCopier",
    "CopyRateLimiter",
    "QueryKind",
    "QueryState",
    "CompletionRequest",
    "CaptureResult",
    "Answer",
    "Failure",
    "DisplayHint",
]
