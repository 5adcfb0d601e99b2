"""
Core types mirroring the API.AI v1 REST schema.

These dataclasses provide type safety and IDE support for request bodies
and API responses. Wire names are camelCase; attributes are snake_case.
"""

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Entity Types
# =============================================================================


@dataclass
class Entry:
    """One reference value of an entity, plus its synonyms."""

    value: str
    synonyms: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        """Create from API response dict."""
        synonyms = data.get("synonyms") or []
        if not isinstance(synonyms, list):
            raise TypeError(f"synonyms must be a list, got {type(synonyms).__name__}")
        return cls(value=data["value"], synonyms=list(synonyms))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"value": self.value, "synonyms": list(self.synonyms)}


@dataclass
class Entity:
    """A named group of entries the agent extracts from user text."""

    name: str
    entries: list[Entry] = field(default_factory=list)
    id: str | None = None
    is_enum: bool | None = None
    automated_expansion: bool | None = None
    is_overridable: bool | None = None
    # Only returned by the list endpoint
    count: int | None = None
    preview: str | None = None

    _WIRE_NAMES = {
        "is_enum": "isEnum",
        "automated_expansion": "automatedExpansion",
        "is_overridable": "isOverridable",
        "count": "count",
        "preview": "preview",
    }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entity":
        """Create from API response dict."""
        return cls(
            name=data["name"],
            entries=[Entry.from_dict(e) for e in data.get("entries") or []],
            id=data.get("id"),
            is_enum=data.get("isEnum"),
            automated_expansion=data.get("automatedExpansion"),
            is_overridable=data.get("isOverridable"),
            count=data.get("count"),
            preview=data.get("preview"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request, leaving out unset fields."""
        result: dict[str, Any] = {}
        if self.id is not None:
            result["id"] = self.id
        result["name"] = self.name
        if self.entries:
            result["entries"] = [e.to_dict() for e in self.entries]
        for attr, wire_name in self._WIRE_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                result[wire_name] = value
        return result


# =============================================================================
# Query Types
# =============================================================================


@dataclass
class Event:
    """A named trigger event with structured parameters."""

    name: str
    data: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"name": self.name, "data": dict(self.data)}


@dataclass
class Status:
    """Outcome status attached to every API.AI response."""

    code: int = 200
    error_type: str | None = None
    error_details: str | None = None
    error_id: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if the remote call succeeded."""
        return 200 <= self.code < 300

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Status":
        """Create from API response dict."""
        return cls(
            code=int(data.get("code", 200)),
            error_type=data.get("errorType"),
            error_details=data.get("errorDetails"),
            error_id=data.get("errorID") or data.get("errorId"),
        )


@dataclass
class Fulfillment:
    """Response text and rich messages produced for a query."""

    speech: str = ""
    messages: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fulfillment":
        """Create from API response dict."""
        return cls(
            speech=data.get("speech") or "",
            messages=list(data.get("messages") or []),
        )


@dataclass
class QueryResult:
    """The "result" object of a query response."""

    source: str | None = None
    resolved_query: str | None = None
    action: str | None = None
    action_incomplete: bool = False
    parameters: dict[str, Any] = field(default_factory=dict)
    contexts: list[dict[str, Any]] = field(default_factory=list)
    fulfillment: Fulfillment = field(default_factory=Fulfillment)
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float | None = None

    @property
    def intent_name(self) -> str | None:
        """Get the name of the matched intent, if any."""
        return self.metadata.get("intentName")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QueryResult":
        """Create from API response dict."""
        return cls(
            source=data.get("source"),
            resolved_query=data.get("resolvedQuery"),
            action=data.get("action"),
            action_incomplete=bool(data.get("actionIncomplete", False)),
            parameters=dict(data.get("parameters") or {}),
            contexts=list(data.get("contexts") or []),
            fulfillment=Fulfillment.from_dict(data.get("fulfillment") or {}),
            metadata=dict(data.get("metadata") or {}),
            score=data.get("score"),
        )


@dataclass
class QueryResponse:
    """
    Response of a query or entity write call.

    Entity writes usually carry only "id" and "status". The decoded payload
    is kept in raw for fields not modelled here.
    """

    id: str | None = None
    timestamp: str | None = None
    lang: str | None = None
    session_id: str | None = None
    result: QueryResult | None = None
    status: Status = field(default_factory=Status)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def speech(self) -> str:
        """Get the fulfillment speech, or an empty string."""
        if self.result is None:
            return ""
        return self.result.fulfillment.speech

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QueryResponse":
        """Create from API response dict."""
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        result = data.get("result")
        return cls(
            id=data.get("id"),
            timestamp=data.get("timestamp"),
            lang=data.get("lang"),
            session_id=data.get("sessionId"),
            result=QueryResult.from_dict(result) if result else None,
            status=Status.from_dict(data.get("status") or {}),
            raw=data,
        )
