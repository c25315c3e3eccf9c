"""
Mock requester for testing the Optimizely client without network calls.

This module provides a RecordingRequester that implements the Requester
interface, records every ApiRequest it receives and answers with seeded
bodies or errors.
"""

import json
from typing import Any, Dict, List, Optional

from optimizely_client.core.interfaces import Requester
from optimizely_client.core.models import ApiRequest


class RecordingRequester(Requester):
    """
    Mock Requester for testing.

    Usage:
        requester = RecordingRequester(responses={
            "projects/5": {"id": 5, "project_name": "Demo"},
        })
        client = OptimizelyClient("token", requester=requester)

        body = await client.get_project(5)
        assert requester.last_request.url.endswith("projects/5")
    """

    def __init__(
        self,
        responses: Optional[Dict[str, Any]] = None,
        default: Any = "{}",
        error: Optional[Exception] = None,
    ):
        """
        Initialize mock requester.

        Args:
            responses: Dict mapping a URL suffix to the body to return;
                non-string bodies are JSON-encoded
            default: Body returned when no suffix matches
            error: Exception raised for every request instead of a body
        """
        self.responses = responses or {}
        self.default = default
        self.error = error
        self.requests: List[ApiRequest] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> Optional[ApiRequest]:
        return self.requests[-1] if self.requests else None

    def last_body(self) -> Any:
        """Decoded JSON body of the most recent request."""
        body = self.last_request.body
        return json.loads(body) if body is not None else None

    async def request(self, api_request: ApiRequest) -> str:
        self.requests.append(api_request)
        if self.error is not None:
            raise self.error

        body = self.default
        for suffix, seeded in self.responses.items():
            if api_request.url.endswith(suffix):
                body = seeded
                break
        return body if isinstance(body, str) else json.dumps(body)

    async def aclose(self) -> None:
        self.closed = True


def experiment_list(*descriptions: str) -> List[Dict[str, Any]]:
    """Helper building an experiment list payload with the given descriptions."""
    return [
        {"id": 100 + idx, "description": description, "status": "Not started"}
        for idx, description in enumerate(descriptions)
    ]
