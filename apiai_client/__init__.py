"""
API.AI client - Three-layer architecture for the API.AI v1 API.

Layers:
- core: Configuration, raw types and HTTP client
- sdk: High-level ApiAiClient with typed operations
- cli: Command-line interface
"""

from apiai_client.core import ClientConfig, Entity, Entry, QueryResponse
from apiai_client.sdk import ApiAiClient

__version__ = "0.1.0"
__all__ = ["ApiAiClient", "ClientConfig", "Entity", "Entry", "QueryResponse"]
