"""
API.AI SDK - High-level client with typed operations.

This layer provides a clean, typed interface for queries and entity
management. Built on top of the core APIClient.
"""

import builtins
import urllib.parse
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from apiai_client.core.client import APIClient
from apiai_client.core.config import ClientConfig
from apiai_client.core.errors import DecodeError, ValidationError
from apiai_client.core.types import Entity, Entry, Event, QueryResponse

T = TypeVar("T")


def _parse(data: Any, parser: Callable[[Any], T]) -> T:
    """Run a response parser, reporting shape mismatches as DecodeError."""
    try:
        return parser(data)
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise DecodeError(f"Unexpected response shape: {e!r}", details={"response": data}) from e


def _parse_entity_list(data: Any) -> list[Entity]:
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array, got {type(data).__name__}")
    return [Entity.from_dict(item) for item in data]


def _status(data: Any) -> QueryResponse:
    return _parse(data, QueryResponse.from_dict)


def _entity_path(entity_id: str, *parts: str) -> str:
    """Build entities/{id}[/...] with the ID percent-encoded as one segment."""
    return "/".join(("entities", urllib.parse.quote(entity_id, safe=""), *parts))


def _entries_body(entries: Iterable[Entry]) -> list[dict[str, Any]]:
    return [entry.to_dict() for entry in entries]


class ApiAiClient:
    """
    High-level API.AI client with typed methods.

    Example:
        client = ApiAiClient("client-access-token")

        response = client.text_query("I want a pizza")
        print(response.result.action, response.speech)

        client.entities.upsert([Entity("pizza_type", [Entry("margherita", ["margherita"])])])

    """

    def __init__(
        self,
        access_token: str | None = None,
        api_lang: str | None = None,
        api_version: str | None = None,
        api_base_url: str | None = None,
        session_id: str | None = None,
        config: ClientConfig | None = None,
    ):
        """
        Initialize the API.AI client.

        Args:
            access_token: API.AI client access token (required unless config is given)
            api_lang: Query language
            api_version: API version sent as the "v" query parameter
            api_base_url: API base URL
            session_id: Dialogue session ID (generated when empty)
            config: Ready-made configuration, used instead of the other arguments

        Raises:
            ConfigError: If no access token is available

        """
        self.config = config or ClientConfig(
            access_token=access_token,
            api_lang=api_lang,
            api_version=api_version,
            api_base_url=api_base_url,
            session_id=session_id,
        )
        self._client = APIClient(self.config)

        self.entities = EntityOperations(self._client)

    @property
    def session_id(self) -> str:
        """Get the current session ID."""
        return self.config.session_id

    @session_id.setter
    def session_id(self, value: str) -> None:
        """Set the session ID."""
        self.config.set_session_id(value)

    def _query(self, body: dict[str, Any]) -> QueryResponse:
        return _status(self._client.post("query", body))

    def text_query(self, query: str) -> QueryResponse:
        """
        Send a text utterance to the agent.

        Args:
            query: Natural language text

        Returns:
            QueryResponse with the matched intent and fulfillment

        Raises:
            ValidationError: If query is empty

        """
        if not query:
            raise ValidationError("Query should not be empty")

        return self._query(
            {
                "query": query,
                "lang": self.config.api_lang,
                "sessionId": self.config.session_id,
            }
        )

    def event_query(self, event_name: str, event_data: dict[str, str] | None = None) -> QueryResponse:
        """
        Trigger an intent by event name.

        Args:
            event_name: Name of the event
            event_data: Event parameters

        Returns:
            QueryResponse with the matched intent and fulfillment

        Raises:
            ValidationError: If event_name is empty

        """
        if not event_name:
            raise ValidationError("Event name can not be empty")

        return self._query(
            {
                "lang": self.config.api_lang,
                "sessionId": self.config.session_id,
                "event": Event(event_name, dict(event_data or {})).to_dict(),
            }
        )


# =============================================================================
# Entity Operations
# =============================================================================


class EntityOperations:
    """Operations for managing the agent's entities."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self) -> builtins.list[Entity]:
        """
        List all entities of the agent.

        Returns:
            Entities with id, name, count and preview (no entries)

        """
        data = self._client.get("entities")
        return _parse(data, _parse_entity_list)

    def get(self, entity_id: str) -> Entity:
        """
        Get an entity by ID or name.

        Args:
            entity_id: The entity ID or name

        Returns:
            Entity with all entries

        """
        data = self._client.get(_entity_path(entity_id))
        return _parse(data, Entity.from_dict)

    def create(self, entity: Entity) -> QueryResponse:
        """
        Create a new entity.

        Args:
            entity: Entity name and entries

        Returns:
            QueryResponse carrying the new entity ID

        """
        config = self._client.config
        data = self._client.post(
            "entities",
            {
                "lang": config.api_lang,
                "sessionId": config.session_id,
                "name": entity.name,
                "entries": _entries_body(entity.entries),
            },
        )
        return _status(data)

    def add_entries(self, entity_id: str, entries: Iterable[Entry]) -> QueryResponse:
        """
        Add entries to an entity.

        Args:
            entity_id: The entity ID or name
            entries: Entries to add

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.post(_entity_path(entity_id, "entries"), _entries_body(entries)))

    def upsert(self, entities: Iterable[Entity]) -> QueryResponse:
        """
        Create or update several entities at once.

        Args:
            entities: Entities to create or update

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.put("entities", [entity.to_dict() for entity in entities]))

    def update(self, entity_id: str, entity: Entity) -> QueryResponse:
        """
        Update an entity.

        Args:
            entity_id: The entity ID or name
            entity: The new entity definition

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.put(_entity_path(entity_id), entity.to_dict()))

    def replace_entries(self, entity_id: str, entries: Iterable[Entry]) -> QueryResponse:
        """
        Update the entries of an entity.

        Args:
            entity_id: The entity ID or name
            entries: Entries to write

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.put(_entity_path(entity_id, "entries"), _entries_body(entries)))

    def delete(self, entity_id: str) -> QueryResponse:
        """
        Delete an entity.

        Args:
            entity_id: The entity ID or name

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.delete(_entity_path(entity_id)))

    def delete_entries(self, entity_id: str, values: Iterable[str]) -> QueryResponse:
        """
        Delete entries of an entity by reference value.

        Args:
            entity_id: The entity ID or name
            values: Reference values of the entries to delete

        Returns:
            QueryResponse with the call status

        """
        return _status(self._client.delete(_entity_path(entity_id, "entries"), list(values)))
