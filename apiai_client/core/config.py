"""
Client configuration for the API.AI API.

Holds the access token, language, API version, base URL and session ID.
Empty optional fields fall back to the process-wide DEFAULTS table.
"""

import os
import uuid
from types import MappingProxyType

from apiai_client.core.errors import ConfigError

DEFAULTS = MappingProxyType(
    {
        "base_url": "https://api.api.ai/v1/",
        "api_version": "20150910",
        "lang": "en",
    }
)


def new_session_id() -> str:
    """Generate a random session identifier."""
    return str(uuid.uuid4())


class ClientConfig:
    """
    Connection settings and dialogue session for an API.AI agent.

    Example:
        config = ClientConfig("client-access-token", api_lang="de")
        config.session_id  # random UUID unless one was given

    """

    def __init__(
        self,
        access_token: str | None = None,
        api_lang: str | None = None,
        api_version: str | None = None,
        api_base_url: str | None = None,
        session_id: str | None = None,
    ):
        """
        Initialize the configuration.

        Args:
            access_token: API.AI client access token (required)
            api_lang: Query language (default "en")
            api_version: Value of the "v" query parameter
            api_base_url: API base URL
            session_id: Dialogue session ID (generated when empty)

        Raises:
            ConfigError: If access_token is missing or empty

        """
        if not access_token:
            raise ConfigError("Access token is required for a new API.AI client")

        self._access_token = access_token
        self._api_lang = api_lang or DEFAULTS["lang"]
        self._api_version = api_version or DEFAULTS["api_version"]
        self._api_base_url = api_base_url or DEFAULTS["base_url"]
        self._session_id = session_id or new_session_id()

    @classmethod
    def from_env(
        cls,
        access_token: str | None = None,
        api_lang: str | None = None,
        api_version: str | None = None,
        api_base_url: str | None = None,
        session_id: str | None = None,
    ) -> "ClientConfig":
        """Create from APIAI_* environment variables; explicit arguments win."""
        return cls(
            access_token=access_token or os.environ.get("APIAI_ACCESS_TOKEN"),
            api_lang=api_lang or os.environ.get("APIAI_LANG"),
            api_version=api_version or os.environ.get("APIAI_VERSION"),
            api_base_url=api_base_url or os.environ.get("APIAI_BASE_URL"),
            session_id=session_id or os.environ.get("APIAI_SESSION_ID"),
        )

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def api_lang(self) -> str:
        return self._api_lang or DEFAULTS["lang"]

    @property
    def api_version(self) -> str:
        return self._api_version or DEFAULTS["api_version"]

    @property
    def api_base_url(self) -> str:
        return self._api_base_url or DEFAULTS["base_url"]

    @property
    def session_id(self) -> str:
        return self._session_id

    def set_session_id(self, session_id: str) -> None:
        """Replace the session ID used by subsequent requests."""
        self._session_id = session_id

    def __repr__(self) -> str:
        # Token deliberately left out
        return (
            f"ClientConfig(api_lang={self.api_lang!r}, api_version={self.api_version!r}, "
            f"api_base_url={self.api_base_url!r}, session_id={self.session_id!r})"
        )
