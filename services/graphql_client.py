"""
GraphQL Client Module

This module executes GraphQL operations against the Nhost (Hasura) data API
over HTTP. It owns no state beyond the endpoint and a way to obtain the
current access token.
"""

from typing import Any, Callable, Dict, Optional

import requests

from config import settings
from utils.exceptions import QueryError, RemoteAPIError
from utils.logger import get_logger

logger = get_logger(__name__)


class GraphQLClient:
    """Thin GraphQL-over-HTTP client for the Nhost data API."""

    def __init__(self, endpoint: Optional[str] = None,
                 token_provider: Optional[Callable[[], Optional[str]]] = None,
                 timeout: Optional[int] = None):
        """
        Initialize the client.

        Args:
            endpoint: GraphQL URL, defaults to settings.NHOST_GRAPHQL_URL
            token_provider: Callable returning the current access token (or None)
            timeout: Seconds per request, defaults to settings.REQUEST_TIMEOUT
        """
        self.endpoint = endpoint or settings.NHOST_GRAPHQL_URL
        self.token_provider = token_provider or (lambda: None)
        self.timeout = timeout or settings.REQUEST_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: The GraphQL document
            variables: Variables for the operation

        Returns:
            Dict: The ``data`` member of the response

        Raises:
            RemoteAPIError: If the HTTP call fails or the body is not JSON
            QueryError: If the response carries GraphQL errors (whatever the
                HTTP status) or no data
        """
        if not self.endpoint:
            raise RemoteAPIError("GraphQL endpoint is not configured")

        try:
            response = requests.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteAPIError(f"GraphQL request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            if not response.ok:
                raise RemoteAPIError(f"GraphQL request failed: {response.status_code} Error") from e
            raise RemoteAPIError(f"GraphQL response was not valid JSON: {e}") from e

        # Hasura reports rejected operations with a 4xx status and an errors body
        if not response.ok and not (isinstance(payload, dict) and payload.get("errors")):
            raise RemoteAPIError(f"GraphQL request failed: {response.status_code} Error")

        if not isinstance(payload, dict):
            raise QueryError("GraphQL response was not an object")

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            logger.debug(f"GraphQL errors: {errors}")
            raise QueryError(message or "GraphQL operation failed")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise QueryError("GraphQL operation returned no data")

        return data
