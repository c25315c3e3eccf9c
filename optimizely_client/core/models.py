"""
Shared data models for the Optimizely client.

These are transient request-side structures; resource representations are
returned to the caller as raw response bodies and are not modelled here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    """HTTP verbs used by the REST API."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RequestEvent(str, Enum):
    """Terminal events a dispatched request can emit."""
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"
    ABORT = "abort"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ApiRequest:
    """A fully resolved request, ready for the transport."""
    method: HttpMethod
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


class DimensionFilter(BaseModel):
    """Custom-dimension refinement for results and stats."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    value: str = Field(min_length=1)

    @field_validator("id", "value", mode="before")
    @classmethod
    def _coerce_to_str(cls, v: Union[str, int, None]):
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return v
