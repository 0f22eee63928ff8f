"""Client for the ``generateContent`` endpoint of a Gemini-style API."""

from __future__ import annotations

import base64
import json
import logging
import re
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import PluginConfig
from .errors import ConfigurationError, InputError, MalformedResponse, TransportError
from .models import Answer, CompletionRequest, CompletionResult, Failure

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Input is empty. Please enter a query."
MISSING_API_KEY_MESSAGE = "API Key is not configured. Please set it in the plugin settings."
ERROR_PREFIX = "Error querying LLM: "

# (url, body, headers) -> (status, body)
Transport = Callable[[str, bytes, Mapping[str, str]], Tuple[int, bytes]]

_KEY_PARAM = re.compile(r"(key=)[^&]+")


def build_url(cfg: PluginConfig) -> str:
    return f"{cfg.endpoint}{cfg.model}:generateContent?key={cfg.api_key}"


def build_request_body(req: CompletionRequest) -> Dict[str, Any]:
    """Assemble the JSON document for ``req``."""

    parts: List[Dict[str, Any]] = []
    if req.text:
        parts.append({"text": req.text})
    if req.has_image:
        encoded = base64.b64encode(req.image).decode("ascii")
        parts.append({"inline_data": {"mime_type": req.mime_type, "data": encoded}})

    body: Dict[str, Any] = {"contents": [{"parts": parts}]}
    if req.system_prompt:
        body["systemInstruction"] = {"parts": [{"text": req.system_prompt}]}
    if req.tools_enabled:
        body["tools"] = [{"google_search": {}}]
    return body


def extract_answer(document: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or ``""`` if any step is missing."""

    try:
        candidate = _first(_field(document, "candidates"))
        part = _first(_field(_field(candidate, "content"), "parts"))
        text = _field(part, "text")
    except MalformedResponse as exc:
        logger.debug("Response did not contain an answer: %s", exc)
        return ""
    if text is None:
        return ""
    return text if isinstance(text, str) else str(text)


def urllib_transport(url: str, body: bytes, headers: Mapping[str, str]) -> Tuple[int, bytes]:
    request = urllib.request.Request(url, data=body, headers=dict(headers), method="POST")
    try:
        with urllib.request.urlopen(request) as response:
            status = getattr(response, "status", 200)
            return status, response.read()
    except urllib.error.HTTPError as exc:
        raise TransportError(str(exc), status=exc.code) from exc


def complete(
    req: CompletionRequest,
    cfg: PluginConfig,
    *,
    transport: Optional[Transport] = None,
) -> CompletionResult:
    """Send ``req`` and return the answer; failures come back as ``Failure``."""

    try:
        _check_preconditions(req, cfg)
    except (InputError, ConfigurationError) as exc:
        logger.warning("%s", exc)
        return Failure(str(exc))

    send = transport or urllib_transport
    url = build_url(cfg)
    body = build_request_body(req)
    if req.system_prompt:
        logger.info("Using system prompt: '%s'", req.system_prompt)
    if req.tools_enabled:
        logger.info("Google Search is enabled.")
    try:
        logger.info("Querying LLM at %s", redact_api_key(url))
        status, raw = send(url, json.dumps(body).encode("utf-8"), {"Content-Type": "application/json"})
        if not 200 <= status < 300:
            raise TransportError(f"Response status code does not indicate success: {status}", status=status)
        document = json.loads(raw.decode("utf-8"))
        answer = extract_answer(document)
    except Exception as exc:
        logger.error("Error querying LLM: %s", exc)
        logger.debug("LLM query exception", exc_info=True)
        return Failure(f"{ERROR_PREFIX}{exc}")
    logger.info("Parsed final response from LLM: %s", answer)
    return Answer(answer)


def redact_api_key(url: str) -> str:
    return _KEY_PARAM.sub(r"\1***", url)


def _check_preconditions(req: CompletionRequest, cfg: PluginConfig) -> None:
    if not req.text:
        raise InputError(EMPTY_INPUT_MESSAGE)
    if not cfg.api_key:
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)


def _field(container: Any, key: str) -> Any:
    if not isinstance(container, dict) or key not in container:
        raise MalformedResponse(f"missing field '{key}'")
    return container[key]


def _first(items: Any) -> Any:
    if not isinstance(items, list) or not items:
        raise MalformedResponse("expected a non-empty array")
    return items[0]
