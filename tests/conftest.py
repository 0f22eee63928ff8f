import json

import pytest

from lllm.config import PluginConfig
from lllm.windows import WindowInfo


class FakeBackend:
    """Records hide/show calls instead of touching real windows."""

    def __init__(self, windows=None, image=b"\x89PNG fake", capture_error=None, list_error=None):
        self.windows = list(windows or [])
        self.image = image
        self.capture_error = capture_error
        self.list_error = list_error
        self.calls = []

    def list_visible_windows(self):
        self.calls.append(("list",))
        if self.list_error:
            raise self.list_error
        return list(self.windows)

    def hide(self, window):
        self.calls.append(("hide", window.handle))

    def show(self, window):
        self.calls.append(("show", window.handle))

    def capture_display(self):
        self.calls.append(("capture",))
        if self.capture_error:
            raise self.capture_error
        return self.image


class FakeTransport:
    def __init__(self, status=200, payload=None, raw=None, error=None):
        self.status = status
        self.payload = payload
        self.raw = raw
        self.error = error
        self.calls = []

    def __call__(self, url, body, headers):
        self.calls.append({"url": url, "body": json.loads(body.decode("utf-8")), "headers": dict(headers)})
        if self.error:
            raise self.error
        if self.raw is not None:
            return self.status, self.raw
        return self.status, json.dumps(self.payload or {}).encode("utf-8")

    @property
    def called(self):
        return bool(self.calls)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def config():
    return PluginConfig(
        endpoint="https://fake-endpoint.com/v1beta/models/",
        model="test-model",
        api_key="test-api-key",
        trigger_keyword="~",
        system_prompt="You are a test assistant.",
        tools_enabled=False,
        capture_hide_app="PowerToys",
    )


@pytest.fixture
def answer_payload():
    return {"candidates": [{"content": {"parts": [{"text": "bla bla bla"}]}}]}


@pytest.fixture
def launcher_window():
    return WindowInfo(handle=11, title="PowerToys Run", process_name="PowerToys.PowerLauncher.exe")


@pytest.fixture
def editor_window():
    return WindowInfo(handle=22, title="notes.txt - Notepad", process_name="notepad.exe")


@pytest.fixture
def no_sleep():
    delays = []
    return delays.append, delays
