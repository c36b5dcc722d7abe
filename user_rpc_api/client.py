"""User RPC API client.

This module defines a small client for the procedure endpoint served by
``user_rpc_api.app``.  It uses the ``requests`` library internally and
speaks the same wire format as the server: queries are sent as GET with
a JSON ``input`` query parameter, mutations as POST with a JSON body,
and several calls of the same kind can be combined into one batched
request.

The client exposes high-level methods for the available procedures:

* :meth:`get_users` – return all users.
* :meth:`get_user_by_id` – fetch a single user.
* :meth:`create_user` – register a new user.
* :meth:`delete_user` – remove a user and return the removed record.
* :meth:`batch` – run several calls in one HTTP request.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` and ``error`` is a
:class:`ClientError` describing the issue.  Queries are retried once
by default when the transport fails or the server answers with a 5xx
status; mutations are never retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

QUERIES = frozenset({"getUsers", "getUserById"})
MUTATIONS = frozenset({"createUser", "deleteUser"})


@dataclass
class ClientError:
    """Failure of a single procedure call.

    Attributes:
        message: Human-readable description, suitable for display.
        code: Machine code such as ``NOT_FOUND``; ``None`` for transport
            failures.
        error_code: Display code such as ``RESOURCE_NOT_FOUND``.
        http_status: HTTP status of the response, if any.
        validation: Flattened validation errors for invalid input.
    """

    message: str
    code: Optional[str] = None
    error_code: Optional[str] = None
    http_status: Optional[int] = None
    validation: Optional[Dict[str, Any]] = None


Outcome = Tuple[Optional[Any], Optional[ClientError]]


class UserRpcClient:
    """Client for the user procedures."""

    def __init__(
        self,
        *,
        base_url: str,
        rpc_prefix: str = "/trpc",
        api_key: Optional[str] = None,
        session: Optional[Any] = None,
        timeout: float = 15,
        query_retries: int = 1,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:4000``.
            rpc_prefix: Path under which procedures are served.
            api_key: Optional token.  If set, it is sent verbatim in the
                ``Authorization`` header of every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
            query_retries: Extra attempts for queries after a transport
                failure or a 5xx response.
        """
        self.base_url = base_url.rstrip("/")
        self.rpc_prefix = "/" + rpc_prefix.strip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.query_retries = max(0, query_retries)

    # ------------------------------------------------------------------
    # Procedures
    # ------------------------------------------------------------------
    def get_users(self) -> Outcome:
        return self.call("getUsers")

    def get_user_by_id(self, user_id: str) -> Outcome:
        return self.call("getUserById", user_id)

    def create_user(self, name: str, email: str) -> Outcome:
        return self.call("createUser", {"name": name, "email": email})

    def delete_user(self, user_id: str) -> Outcome:
        return self.call("deleteUser", user_id)

    def call(self, procedure: str, payload: Any = None) -> Outcome:
        """Call a single procedure by name."""
        kind = self._kind_of([procedure])
        path = f"{self.rpc_prefix}/{procedure}"
        if kind == "query":
            params = {"input": json.dumps(payload)} if payload is not None else None
            response, error = self._send("GET", path, params=params, retries=self.query_retries)
        else:
            response, error = self._send("POST", path, json_body=payload, retries=0)
        if error:
            return None, error
        return self._parse_envelope(response.json(), response.status_code)

    def batch(self, calls: Sequence[Tuple[str, Any]]) -> List[Outcome]:
        """Run several calls in one batched request.

        Args:
            calls: ``(procedure, input)`` pairs.  All procedures must be
                queries or all must be mutations.
        Returns:
            One ``(data, error)`` tuple per call, in order.
        """
        if not calls:
            return []
        names = [name for name, _ in calls]
        kind = self._kind_of(names)
        path = f"{self.rpc_prefix}/{','.join(names)}"
        inputs = {str(index): payload for index, (_, payload) in enumerate(calls) if payload is not None}
        if kind == "query":
            params = {"batch": "1", "input": json.dumps(inputs)}
            response, error = self._send("GET", path, params=params, retries=self.query_retries)
        else:
            response, error = self._send(
                "POST", path, params={"batch": "1"}, json_body=inputs, retries=0
            )
        if error:
            return [(None, error) for _ in calls]
        body = response.json()
        if not isinstance(body, list):
            # A non-list answer means the whole batch was rejected.
            return [self._parse_envelope(body, response.status_code) for _ in calls]
        return [self._parse_envelope(envelope, response.status_code) for envelope in body]

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _kind_of(self, names: Sequence[str]) -> str:
        if all(name in QUERIES for name in names):
            return "query"
        if all(name in MUTATIONS for name in names):
            return "mutation"
        raise ValueError(f"Cannot combine procedures {list(names)} in one request")

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        retries: int = 0,
    ) -> Tuple[Optional[Any], Optional[ClientError]]:
        """Perform the HTTP request, retrying transport failures and 5xx."""
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = self.api_key
        attempts = retries + 1
        for attempt in range(1, attempts + 1):
            try:
                logger.debug("Sending %s request to %s (attempt %d)", method, url, attempt)
                response = self.session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_body,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.error("API request failed: %s", exc)
                if attempt < attempts:
                    continue
                return None, ClientError(message=str(exc))
            if response.status_code >= 500 and attempt < attempts:
                logger.warning("Server error %s from %s, retrying", response.status_code, url)
                continue
            try:
                response.json()
            except ValueError:
                message = response.text or f"HTTP {response.status_code}"
                logger.error("API request failed (%s): %s", response.status_code, message)
                return None, ClientError(message=message, http_status=response.status_code)
            return response, None
        # Unreachable: the last attempt always returns.
        return None, ClientError(message="Request failed")

    @staticmethod
    def _parse_envelope(envelope: Any, http_status: Optional[int]) -> Outcome:
        if isinstance(envelope, dict) and "result" in envelope:
            return envelope["result"].get("data"), None
        if isinstance(envelope, dict) and "error" in envelope:
            err = envelope["error"] or {}
            data = err.get("data") or {}
            return None, ClientError(
                message=err.get("message", ""),
                code=data.get("code"),
                error_code=data.get("errorCode"),
                http_status=data.get("httpStatus", http_status),
                validation=data.get("validationError"),
            )
        return None, ClientError(message=f"Unexpected response: {envelope!r}", http_status=http_status)
