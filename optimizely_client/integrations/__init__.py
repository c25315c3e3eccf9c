"""Integrations with the Optimizely REST API."""

from .request_adapter import HttpxRequestAdapter, RequestEvents
from .rest_client import OptimizelyClient, decode_body

__all__ = ["OptimizelyClient", "HttpxRequestAdapter", "RequestEvents", "decode_body"]
