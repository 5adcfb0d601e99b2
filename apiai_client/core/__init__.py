"""
Core layer - Configuration, raw types and HTTP client.

This layer provides:
- Client configuration with defaults and session ID
- Typed dataclasses matching the API.AI v1 schema
- Low-level HTTP client with auth and error handling
"""

from apiai_client.core.client import APIClient, decode_json
from apiai_client.core.config import DEFAULTS, ClientConfig, new_session_id
from apiai_client.core.errors import ApiAiError, ConfigError, DecodeError, RequestError, ValidationError
from apiai_client.core.types import Entity, Entry, Event, Fulfillment, QueryResponse, QueryResult, Status

__all__ = [
    "DEFAULTS",
    "APIClient",
    "ApiAiError",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "Entity",
    "Entry",
    "Event",
    "Fulfillment",
    "QueryResponse",
    "QueryResult",
    "RequestError",
    "Status",
    "ValidationError",
    "decode_json",
    "new_session_id",
]
