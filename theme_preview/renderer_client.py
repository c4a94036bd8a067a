r"""Talk to the external Liquid rendering backend.

The backend is an HTTP service exposing ``POST /render-theme``. It is slow
and occasionally drops connections mid-response, so calls go through
:class:`RenderInvocationManager`, which retries the transient failures,
gives up on everything else, and always hands back a page: either the
finished backend HTML or the locally built fallback.

Example
-------
>>> client = RenderBackendClient("http://127.0.0.1:9292")  # doctest: +SKIP
>>> manager = RenderInvocationManager(client)  # doctest: +SKIP
>>> outcome = manager.invoke(request, finish=str, fallback=lambda: "")  # doctest: +SKIP
>>> outcome.used_fallback  # doctest: +SKIP
False
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import json
import logging
import time
import typing as typ
from http import HTTPStatus

import requests

logger = logging.getLogger(__name__)

RENDER_ENDPOINT = "/render-theme"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 0.5
DEFAULT_MIN_HTML_LENGTH = 1000
_TRANSIENT_MARKERS = ("broken pipe", "epipe")


class RendererTransportError(RuntimeError):
    """Raised when the rendering backend cannot be reached."""


class ErrorClass(enum.Enum):
    """Classification of a failed render attempt."""

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


@dc.dataclass(slots=True)
class RenderRequest:
    """Payload for one ``/render-theme`` call."""

    theme_path: str
    sections: list[dict[str, typ.Any]]
    context: dict[str, typ.Any]
    layout: str = "theme"

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the JSON body expected by the backend."""
        return {
            "theme_path": self.theme_path,
            "layout": self.layout,
            "sections": self.sections,
            "context": self.context,
        }


@dc.dataclass(slots=True)
class RenderResponse:
    """Raw status and body returned by the backend."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return HTTPStatus.OK <= self.status_code < HTTPStatus.MULTIPLE_CHOICES


@dc.dataclass(frozen=True, slots=True)
class RenderOutcome:
    """Result of :meth:`RenderInvocationManager.invoke`.

    Attributes
    ----------
    html : str
        Finished backend HTML or the fallback page.
    used_fallback : bool
        ``True`` when ``html`` came from the fallback builder.
    attempts : int
        Number of HTTP attempts made.
    reason : str
        Short description of why the fallback was used; empty on success.
    """

    html: str
    used_fallback: bool
    attempts: int
    reason: str = ""


class RenderTransport(typ.Protocol):
    """Anything that can post a render request and return the raw response."""

    def render(self, request: RenderRequest) -> RenderResponse: ...


def classify_error_body(body: str | None) -> ErrorClass:
    """Classify a non-success response body.

    Examples
    --------
    >>> classify_error_body("Errno::EPIPE: Broken pipe")
    <ErrorClass.TRANSIENT: 'transient'>
    >>> classify_error_body("Liquid syntax error")
    <ErrorClass.PERMANENT: 'permanent'>
    >>> classify_error_body("")
    <ErrorClass.UNKNOWN: 'unknown'>
    """
    text = (body or "").strip().lower()
    if not text:
        return ErrorClass.UNKNOWN
    if any(marker in text for marker in _TRANSIENT_MARKERS):
        return ErrorClass.TRANSIENT
    return ErrorClass.PERMANENT


class RenderBackendClient:
    """Thin ``requests`` wrapper around the ``/render-theme`` endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{RENDER_ENDPOINT}"
        self._session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def render(self, request: RenderRequest) -> RenderResponse:
        """Post ``request`` and return the raw response.

        Raises
        ------
        RendererTransportError
            If the connection fails or times out.
        """
        try:
            response = self._session.post(
                self._url,
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach renderer at {self._url}: {exc}"
            raise RendererTransportError(msg) from exc
        return RenderResponse(status_code=response.status_code, text=response.text)


def _parse_success(text: str, min_length: int) -> str | None:
    """Return the HTML from a success body, or ``None`` when it is unusable."""
    try:
        payload = json.loads(text)
    except ValueError:
        return None
    if not isinstance(payload, dict) or payload.get("success") is not True:
        return None
    html = payload.get("html")
    if not isinstance(html, str) or len(html) <= min_length:
        return None
    return html


class RenderInvocationManager:
    """Bounded-retry wrapper that never lets a render failure escape.

    Parameters
    ----------
    transport : RenderTransport
        Usually a :class:`RenderBackendClient`.
    max_attempts : int, optional
        Upper bound on HTTP attempts. Defaults to ``3``.
    retry_delay : float, optional
        Seconds to wait between retryable attempts. Defaults to ``0.5``.
    min_html_length : int, optional
        Backend HTML must be strictly longer than this to be accepted.
    sleep : Callable[[float], None], optional
        Injected for tests; defaults to :func:`time.sleep`.
    """

    def __init__(
        self,
        transport: RenderTransport,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        min_html_length: int = DEFAULT_MIN_HTML_LENGTH,
        sleep: cabc.Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        self._transport = transport
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.min_html_length = min_html_length
        self._sleep = sleep

    def invoke(
        self,
        request: RenderRequest,
        *,
        finish: cabc.Callable[[str], str],
        fallback: cabc.Callable[[], str],
    ) -> RenderOutcome:
        """Render ``request``, retrying transient failures.

        ``finish`` post-processes accepted backend HTML. ``fallback`` builds
        the replacement page and is only called when the backend result is
        unusable.
        """
        reason = "renderer attempts exhausted"
        attempt = 0
        while attempt < self.max_attempts:
            attempt += 1
            logger.info(
                "render attempt %d/%d: %d sections",
                attempt,
                self.max_attempts,
                len(request.sections),
            )
            try:
                response = self._transport.render(request)
            except RendererTransportError as exc:
                logger.warning("render attempt %d failed: %s", attempt, exc)
                reason = "transport failure"
                if self._retry(attempt):
                    continue
                break

            if not response.ok:
                classification = classify_error_body(response.text)
                logger.warning(
                    "renderer returned %d (%s): %s",
                    response.status_code,
                    classification.value,
                    response.text[:500],
                )
                reason = f"renderer error ({classification.value})"
                if classification is ErrorClass.TRANSIENT and self._retry(attempt):
                    continue
                break

            html = _parse_success(response.text, self.min_html_length)
            if html is None:
                logger.warning(
                    "renderer response unusable: %s", response.text[:500]
                )
                reason = "invalid renderer response"
                break
            return RenderOutcome(html=finish(html), used_fallback=False, attempts=attempt)

        logger.warning("using fallback page after %d attempt(s): %s", attempt, reason)
        return RenderOutcome(
            html=fallback(), used_fallback=True, attempts=attempt, reason=reason
        )

    def _retry(self, attempt: int) -> bool:
        if attempt >= self.max_attempts:
            return False
        self._sleep(self.retry_delay)
        return True


__all__ = [
    "ErrorClass",
    "RenderBackendClient",
    "RenderInvocationManager",
    "RenderOutcome",
    "RenderRequest",
    "RenderResponse",
    "RenderTransport",
    "RendererTransportError",
    "classify_error_body",
]
