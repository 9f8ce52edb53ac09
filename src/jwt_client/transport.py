from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .crypto import canonical_json
from .endpoints import create_endpoint_url
from .errors import ServiceClientError, invalid_payload_error, request_error
from .logging import get_logger
from .tokens import AccessTokenIssuer


ACCESS_TOKEN_HEADER = "x-access-token"

_log = get_logger(__name__)


@dataclass(frozen=True)
class SendArgs:
    """One outgoing request: an unresolved url template plus its context."""

    url: str
    context: Dict[str, str] = field(default_factory=dict)
    payload: Optional[Dict[str, Any]] = None


class Transport(ABC):
    """
    Contract for sending signed requests to a platform microservice.

    Implementations raise on failure; callers propagate whatever is raised.
    `logger` is any object with an `error` method and is used as-is.
    """

    @abstractmethod
    async def send_get(self, args: SendArgs, logger: Any = None) -> Any:
        """Send a GET and return the decoded JSON body."""

    @abstractmethod
    async def send_post(self, args: SendArgs, logger: Any = None) -> Any:
        """Send a POST with `args.payload` as JSON body; return the decoded body or None."""

    async def aclose(self) -> None:
        """Release held connections. Nothing to release by default."""


class HttpTransport(Transport):
    """
    httpx-based transport with JWT request signing.

    Notes
    - Each request carries `x-access-token`, a JWT whose checksum covers the
      request payload (an empty dict when there is none).
    - GET payloads travel base64-encoded in the `payload` query parameter.
    - No retries. Failures are mapped to REQUEST `ServiceClientError`s:
      404 -> ENOTFOUND, JSON error bodies keep their `code`, refused
      connections -> ECONNREFUSED, anything else -> EUNSPECIFIED.
    """

    def __init__(
        self,
        base_url: str,
        token_issuer: AccessTokenIssuer,
        *,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/")
        self._tokens = token_issuer
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --------------- Public API ---------------
    async def send_get(self, args: SendArgs, logger: Any = None) -> Any:
        return await self._send("GET", args, logger)

    async def send_post(self, args: SendArgs, logger: Any = None) -> Any:
        return await self._send("POST", args, logger)

    # --------------- Internal ---------------
    def _build_request(self, method: str, args: SendArgs) -> httpx.Request:
        url = create_endpoint_url(args.url, args.context, self._base_url)
        data = args.payload or {}
        headers = {ACCESS_TOKEN_HEADER: self._tokens.generate_access_token(data)}

        if method == "GET":
            params = None
            if data:
                params = {"payload": base64.b64encode(canonical_json(data)).decode("ascii")}
            return self._client.build_request("GET", url, params=params, headers=headers)
        return self._client.build_request(
            method,
            url,
            content=canonical_json(data),
            headers={**headers, "content-type": "application/json"},
        )

    async def _send(self, method: str, args: SendArgs, logger: Any) -> Any:
        log = logger if logger is not None else _log
        request = self._build_request(method, args)

        try:
            resp = await self._client.send(request)
        except httpx.ConnectError as exc:
            log.error("%s %s failed: connection refused (%s)", method, request.url, exc)
            raise request_error(500, "ECONNREFUSED") from exc
        except httpx.HTTPError as exc:
            log.error("%s %s failed: %s", method, request.url, exc)
            raise request_error(500, "EUNSPECIFIED") from exc

        if resp.is_success:
            if not resp.content.strip():
                return None
            try:
                return resp.json()
            except ValueError as exc:
                log.error("%s %s returned a non-JSON body", method, request.url)
                raise invalid_payload_error() from exc

        error = self._error_from_response(resp)
        log.error(
            "%s %s returned HTTP %s: %s %s",
            method,
            request.url,
            resp.status_code,
            error.code,
            error.message,
        )
        raise error

    @staticmethod
    def _error_from_response(resp: httpx.Response) -> ServiceClientError:
        if resp.status_code == 404:
            return request_error(404, "ENOTFOUND")

        body: Any = None
        try:
            body = resp.json()
        except ValueError:
            pass
        if isinstance(body, dict) and body.get("code"):
            return request_error(body["code"], body.get("name") or body.get("message"))
        return request_error(resp.status_code, resp.reason_phrase or None)


__all__ = ["ACCESS_TOKEN_HEADER", "HttpTransport", "SendArgs", "Transport"]
