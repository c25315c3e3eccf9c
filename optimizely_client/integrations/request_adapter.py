"""
Request adapter for the Optimizely REST API.

Turns one httpx dispatch, which ends in exactly one of the terminal events
success / fail / error / abort / timeout, into a single awaitable result.
The adapter never retries and never looks inside the response body.
"""

import asyncio
from typing import Any, Optional

import httpx
import structlog

from ..core.exceptions import (
    CancelledError,
    ServerError,
    TimedOutError,
    TransportError,
)
from ..core.interfaces import Requester
from ..core.models import ApiRequest, RequestEvent

logger = structlog.get_logger(__name__)


class RequestEvents:
    """
    Single-resolution result fed by terminal request events.

    The first event settles the result; anything emitted afterwards is
    dropped, so a request can never resolve twice.

    Example:
        >>> events = RequestEvents("https://example.com/projects/")
        >>> events.emit("success", "[]")
        True
        >>> body = await events
    """

    def __init__(self, url: str = ""):
        self.url = url
        self.event: Optional[RequestEvent] = None
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def emit(self, event, payload: Any = None) -> bool:
        """
        Settle the result from a terminal event.

        Args:
            event: A RequestEvent (or its string value)
            payload: Body text for success, the httpx.Response for fail,
                the underlying exception for error/timeout

        Returns:
            True if this event settled the result, False if it was ignored
        """
        event = RequestEvent(event)
        if self._future.done():
            logger.debug(
                "Ignoring event on settled request",
                request_event=event.value,
                settled_by=self.event.value if self.event else "caller",
                url=self.url,
            )
            return False

        self.event = event
        logger.debug("Request settled", request_event=event.value, url=self.url)
        if event is RequestEvent.SUCCESS:
            self._future.set_result(payload)
        else:
            self._future.set_exception(self._rejection(event, payload))
        return True

    def _rejection(self, event: RequestEvent, payload: Any) -> Exception:
        if event is RequestEvent.FAIL:
            return ServerError(payload.status_code, payload.text, url=self.url)

        if event is RequestEvent.ABORT:
            return CancelledError(f"Request aborted: {self.url}")

        if event is RequestEvent.TIMEOUT:
            error = TimedOutError(f"Request timed out: {self.url}")
        else:
            error = TransportError(f"Network error on {self.url}: {payload}")
        if isinstance(payload, BaseException):
            error.__cause__ = payload
        return error

    def __await__(self):
        return self._future.__await__()


class HttpxRequestAdapter(Requester):
    """Requester backed by a shared httpx.AsyncClient."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            timeout: Seconds before httpx gives up; None disables the timeout
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), transport=transport
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def request(self, api_request: ApiRequest) -> str:
        """
        Send the request and wait for its one terminal event.

        If the caller is cancelled while waiting, the in-flight dispatch is
        cancelled too and asyncio.CancelledError propagates unchanged.
        """
        events = RequestEvents(api_request.url)
        dispatch = asyncio.ensure_future(self._dispatch(api_request, events))
        dispatch.add_done_callback(lambda task: self._on_dispatch_done(task, events))
        try:
            return await events
        finally:
            if not dispatch.done():
                dispatch.cancel()

    async def _dispatch(self, api_request: ApiRequest, events: RequestEvents) -> None:
        logger.debug(
            "Sending request", method=api_request.method.value, url=api_request.url
        )
        try:
            response = await self._client.request(
                api_request.method.value,
                api_request.url,
                headers=api_request.headers,
                content=api_request.body,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timed out", url=api_request.url, error=str(e))
            events.emit(RequestEvent.TIMEOUT, e)
            return
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning("Request failed", url=api_request.url, error=str(e))
            events.emit(RequestEvent.ERROR, e)
            return

        if response.is_success:
            events.emit(RequestEvent.SUCCESS, response.text)
        else:
            logger.warning(
                "Server rejected request",
                method=api_request.method.value,
                url=api_request.url,
                status_code=response.status_code,
            )
            events.emit(RequestEvent.FAIL, response)

    @staticmethod
    def _on_dispatch_done(task: asyncio.Future, events: RequestEvents) -> None:
        if task.cancelled():
            events.emit(RequestEvent.ABORT)
            return
        error = task.exception()
        if error is not None:
            events.emit(RequestEvent.ERROR, error)

    async def aclose(self) -> None:
        await self._client.aclose()
