"""
optimizely-client: asyncio client for the Optimizely Experiment REST API.

Create, read, update, delete and list projects, experiments, variations,
audiences, dimensions and goals, with every HTTP call wrapped in a single
awaitable result.
"""

__version__ = "0.1.0"

from .core.exceptions import (
    CancelledError,
    ConfigurationError,
    OptimizelyError,
    ServerError,
    TimedOutError,
    TransportError,
    ValidationError,
)
from .integrations.rest_client import OptimizelyClient, decode_body
from .utils.config import ClientConfig

__all__ = [
    "OptimizelyClient",
    "ClientConfig",
    "decode_body",
    "OptimizelyError",
    "ConfigurationError",
    "ValidationError",
    "ServerError",
    "TransportError",
    "CancelledError",
    "TimedOutError",
]
