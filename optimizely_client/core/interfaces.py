"""
Abstract interfaces for the Optimizely client.

The resource client only talks to a Requester, so the HTTP stack can be
swapped out (or faked in tests) without touching the resource methods.
"""

from abc import ABC, abstractmethod

from .models import ApiRequest


class Requester(ABC):
    """Interface for sending one request and awaiting its single outcome."""

    @abstractmethod
    async def request(self, api_request: ApiRequest) -> str:
        """
        Send the request and return the raw response body.

        Raises:
            ServerError, TransportError, CancelledError, TimedOutError
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release any connections held by the requester."""
        pass
