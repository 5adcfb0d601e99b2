"""
Core HTTP client for the API.AI API.

Builds request URLs, serializes JSON bodies, authenticates with the client
access token and performs exactly one blocking HTTP round trip per call.
"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from apiai_client.core.config import ClientConfig
from apiai_client.core.errors import DecodeError, RequestError

logger = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "DELETE")


def decode_json(data: bytes) -> Any:
    """
    Decode a raw response payload.

    Raises:
        DecodeError: If the payload is not UTF-8 encoded JSON

    """
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Invalid JSON response: {e}") from e


def _error_message(error_body: str, default: str) -> str:
    """Pull a readable message out of an API.AI error payload."""
    try:
        error_data = json.loads(error_body)
    except json.JSONDecodeError:
        return default
    if not isinstance(error_data, dict):
        return default

    # Handle both {"status": {"errorDetails": "..."}} and {"error": "..."}
    status = error_data.get("status")
    if isinstance(status, dict) and status.get("errorDetails"):
        return str(status["errorDetails"])
    error_field = error_data.get("error")
    if isinstance(error_field, str):
        return error_field
    if isinstance(error_field, dict) and error_field.get("message"):
        return str(error_field["message"])
    return default


class APIClient:
    """
    Low-level HTTP client for the API.AI API.

    Handles:
    - Bearer authentication with the client access token
    - URL composition with the "v" version parameter
    - JSON request bodies
    - Error handling for transport and HTTP failures
    """

    def __init__(self, config: ClientConfig):
        self.config = config

    def build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build the absolute URL for a path relative to the API base URL."""
        query: dict[str, Any] = {"v": self.config.api_version}
        if params:
            query.update({k: v for k, v in params.items() if v is not None})
        base = self.config.api_base_url.rstrip("/")
        return f"{base}/{path.lstrip('/')}?{urllib.parse.urlencode(query)}"

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> urllib.request.Request:
        """
        Build an authenticated request without sending it.

        Raises:
            RequestError: If the method is unsupported or the body cannot be serialized

        """
        method = method.upper()
        if method not in METHODS:
            raise RequestError(f"Unsupported HTTP method: {method}")

        headers = {
            "Authorization": f"Bearer {self.config.access_token}",
            "Accept": "application/json",
        }

        data = None
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise RequestError(f"Could not serialize request body: {e}") from e
            headers["Content-Type"] = "application/json"

        url = self.build_url(path, params)
        return urllib.request.Request(url, data=data, headers=headers, method=method)

    def perform(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Path relative to the base URL (e.g., entities/{id}/entries)
            body: JSON-serializable request body, or None for no body
            params: Extra query parameters (the API version is always sent)

        Returns:
            Raw response payload

        Raises:
            RequestError: On serialization, connection, timeout or HTTP errors

        """
        req = self.build_request(method, path, body, params)
        logger.debug("%s %s", req.get_method(), req.full_url)

        try:
            with urllib.request.urlopen(req) as response:
                payload = response.read()
                status = response.status
        except urllib.error.HTTPError as e:
            try:
                error_body = e.read().decode("utf-8", errors="replace")
            except OSError:
                error_body = ""
            logger.warning("%s %s failed with HTTP %s", req.get_method(), req.full_url, e.code)
            raise RequestError(
                _error_message(error_body, str(e)),
                status=e.code,
                body=error_body,
            ) from e
        except urllib.error.URLError as e:
            logger.warning("%s %s connection error: %s", req.get_method(), req.full_url, e.reason)
            raise RequestError(f"Connection error: {e.reason}") from e
        except TimeoutError as e:
            logger.warning("%s %s timed out", req.get_method(), req.full_url)
            raise RequestError("Request timed out") from e
        except (OSError, http.client.HTTPException) as e:
            logger.warning("%s %s connection error: %s", req.get_method(), req.full_url, e)
            raise RequestError(f"Connection error: {e}") from e
        except ValueError as e:
            # Characters http.client cannot put on the request line or in a header
            raise RequestError(f"Invalid request: {e}") from e

        if not 200 <= status < 300:
            body_text = payload.decode("utf-8", errors="replace")
            raise RequestError(
                _error_message(body_text, f"HTTP {status}"),
                status=status,
                body=body_text,
            )
        return payload

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request and decode the JSON response."""
        return decode_json(self.perform("GET", path, params=params))

    def post(self, path: str, data: Any = None) -> Any:
        """Make a POST request and decode the JSON response."""
        return decode_json(self.perform("POST", path, data))

    def put(self, path: str, data: Any = None) -> Any:
        """Make a PUT request and decode the JSON response."""
        return decode_json(self.perform("PUT", path, data))

    def delete(self, path: str, data: Any = None) -> Any:
        """Make a DELETE request and decode the JSON response."""
        return decode_json(self.perform("DELETE", path, data))
