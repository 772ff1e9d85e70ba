"""
Gateway to a local OpenAI-compatible completion server (llamafile).

The gateway keeps a cached online/offline flag. ``check_status()`` probes the
server and refreshes it; ``complete()`` only consults the cached flag, so an
offline gateway fails fast without touching the network. There are no
retries: one failed call is terminal for that call and callers fall back to
their heuristic result.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Any

import requests

from paperlib.config import (
    LLM_ENDPOINT,
    LLM_HEALTH_TIMEOUT,
    LLM_MODEL,
    LLM_TIMEOUT_SECONDS,
)
from paperlib.llm.json_recovery import ResponseMalformed
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter, log_event, time_block

logger = get_logger(__name__)


class GatewayErrorKind(str, Enum):
    OFFLINE = "offline"
    HTTP_ERROR = "http_error"
    TRANSPORT = "transport"


class GatewayError(RuntimeError):
    """Raised when a completion cannot be obtained from the gateway."""

    def __init__(
        self,
        kind: GatewayErrorKind,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class InferenceGateway:
    """
    Capability-checked client for the local inference server.

    Example:
        >>> gateway = InferenceGateway("http://localhost:8080")
        >>> if gateway.check_status():
        ...     text = gateway.complete("Say hi", max_tokens=20)
    """

    def __init__(
        self,
        endpoint: str = LLM_ENDPOINT,
        model: str = LLM_MODEL,
        health_timeout: float = LLM_HEALTH_TIMEOUT,
        completion_timeout: float = LLM_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.health_timeout = health_timeout
        self.completion_timeout = completion_timeout
        self._session = session or requests.Session()
        self._online = False
        self._last_checked: float | None = None
        self._probe_guard = threading.Lock()

    @property
    def online(self) -> bool:
        """Cached status from the last completed probe."""
        return self._online

    @property
    def last_checked(self) -> float | None:
        return self._last_checked

    def set_endpoint(self, endpoint: str) -> None:
        """Point at a different server; status is unknown until re-probed."""
        self.endpoint = endpoint.rstrip("/")
        self._online = False
        self._last_checked = None

    def _probe(self, path: str) -> bool:
        response = self._session.get(f"{self.endpoint}{path}", timeout=self.health_timeout)
        return response.ok

    def check_status(self) -> bool:
        """
        Probe /health, falling back to /v1/models.

        A call made while another probe is in flight returns the cached flag
        instead of stacking a second probe.

        Side Effects:
            - Issues up to two GET requests (2s timeout each)
            - Updates the cached online flag and last-checked time
        """
        if not self._probe_guard.acquire(blocking=False):
            return self._online

        try:
            try:
                online = self._probe("/health")
            except requests.exceptions.RequestException as e:
                logger.debug("Health probe failed: %s", e)
                online = False

            if not online:
                try:
                    online = self._probe("/v1/models")
                except requests.exceptions.RequestException as e:
                    logger.debug("Models probe failed: %s", e)
                    online = False

            if online != self._online:
                log_event("gateway.status_changed", endpoint=self.endpoint, online=online)
            self._online = online
            self._last_checked = time.monotonic()
            return online
        finally:
            self._probe_guard.release()

    def refresh_status(self, max_age: float) -> bool:
        """Re-probe only when the cached status is older than ``max_age`` seconds."""
        if self._last_checked is None or time.monotonic() - self._last_checked >= max_age:
            return self.check_status()
        return self._online

    def complete(self, prompt: str, max_tokens: int, temperature: float = 0.3) -> str:
        """
        Request a single chat completion and return the first choice's text.

        Raises:
            GatewayError: OFFLINE (cached flag false, no request made),
                TRANSPORT (connection/timeout), HTTP_ERROR (non-2xx status)
            ResponseMalformed: Body lacks choices[0].message.content
        """
        if not self._online:
            counter("gateway.offline_rejections")
            raise GatewayError(GatewayErrorKind.OFFLINE, "Inference server is offline")

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            with time_block("gateway.complete"):
                response = self._session.post(
                    f"{self.endpoint}/v1/chat/completions",
                    json=payload,
                    timeout=self.completion_timeout,
                )
        except requests.exceptions.RequestException as e:
            counter("gateway.transport_errors")
            raise GatewayError(GatewayErrorKind.TRANSPORT, f"Completion request failed: {e}") from e

        if not response.ok:
            counter("gateway.http_errors")
            raise GatewayError(
                GatewayErrorKind.HTTP_ERROR,
                f"API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            counter("gateway.malformed_responses")
            raise ResponseMalformed(f"Unexpected completion payload: {e}") from e

        if not isinstance(content, str):
            counter("gateway.malformed_responses")
            raise ResponseMalformed("Completion content is not text")

        counter("gateway.completions")
        return content
