"""Data models shared by the classifier, completion client and capture helper."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .config import PluginConfig


class QueryKind(str, Enum):
    EMPTY = "empty"
    INCOMPLETE = "incomplete"
    COMMAND_PENDING = "command_pending"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class QueryState:
    """Classification of a raw launcher query."""

    kind: QueryKind
    text: str
    screenshot_requested: bool = False
    command: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CaptureResult:
    """PNG bytes of the primary display, or nothing when capture failed."""

    image: Optional[bytes] = None
    mime_type: Optional[str] = None

    @classmethod
    def empty(cls) -> "CaptureResult":
        return cls()

    @property
    def ok(self) -> bool:
        return bool(self.image) and bool(self.mime_type)


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """One request to the generative-language API."""

    text: str
    image: Optional[bytes] = None
    mime_type: Optional[str] = None
    system_prompt: Optional[str] = None
    tools_enabled: bool = False

    @classmethod
    def from_config(
        cls,
        text: str,
        cfg: "PluginConfig",
        capture: CaptureResult | None = None,
    ) -> "CompletionRequest":
        image = capture.image if capture is not None and capture.ok else None
        mime_type = capture.mime_type if capture is not None and capture.ok else None
        return cls(
            text=text,
            image=image,
            mime_type=mime_type,
            system_prompt=cfg.system_prompt or None,
            tools_enabled=cfg.tools_enabled,
        )

    @property
    def has_image(self) -> bool:
        return bool(self.image) and bool(self.mime_type)


@dataclass(frozen=True, slots=True)
class Answer:
    text: str


@dataclass(frozen=True, slots=True)
class Failure:
    message: str

    @property
    def text(self) -> str:
        return self.message


CompletionResult = Union[Answer, Failure]


@dataclass(slots=True)
class DisplayHint:
    """Non-terminal message shown while the user is still typing."""

    title: str
    subtitle: str
    replacement_query: Optional[str] = None


@dataclass(slots=True)
class Result:
    """Launcher result row handed back to the host."""

    title: str
    subtitle: str
    action: Callable[[], bool]
    context_data: Dict[str, str]


@dataclass(slots=True)
class ContextMenuResult:
    title: str
    action: Callable[[], bool]
    accelerator_key: str = "Enter"
