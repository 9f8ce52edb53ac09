from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from jwt_client.crypto import PayloadCodec
from jwt_client.endpoints import create_endpoint_url
from jwt_client.errors import configuration_error, invalid_payload_error
from jwt_client.tokens import AccessTokenIssuer
from jwt_client.transport import HttpTransport, SendArgs, Transport

from .models import ClientConfig, RequestContext, StoredData


# Environment variable names for convenience configuration
ENV_SERVICE_SECRET = "SERVICE_SECRET"
ENV_SERVICE_TOKEN = "SERVICE_TOKEN"
ENV_SERVICE_SLUG = "SERVICE_SLUG"
ENV_USER_DATASTORE_URL = "USER_DATASTORE_URL"

ENDPOINT_URL_TEMPLATE = "/service/:serviceSlug/user/:userId"
ENDPOINTS: Dict[str, str] = {
    "get_data": ENDPOINT_URL_TEMPLATE,
    "set_data": ENDPOINT_URL_TEMPLATE,
}


class UserDataStoreClient:
    """
    Client for the per-user datastore.

    Usage
    - Construct with the service credentials and the datastore url, or use
      `from_env()`.
    - `await get_data(user_id, user_token)` returns the user's decrypted data.
    - `await set_data(user_id, user_token, payload)` encrypts and stores it.

    Notes
    - Payloads are encrypted with the user's token before leaving the process;
      the token itself is never sent.
    - Exactly one request per call. Transport errors are not caught or
      rewrapped here.
    - Configuration is read-only after construction, so concurrent calls on
      one instance are independent.

    Environment variables (for `from_env`)
    - `SERVICE_SECRET`, `SERVICE_TOKEN`, `SERVICE_SLUG`, `USER_DATASTORE_URL`
    """

    def __init__(
        self,
        service_secret: Optional[str] = None,
        service_token: Optional[str] = None,
        service_slug: Optional[str] = None,
        user_datastore_url: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        codec: Optional[PayloadCodec] = None,
        token_issuer: Optional[AccessTokenIssuer] = None,
        timeout: float = 15.0,
    ) -> None:
        if not service_token:
            raise configuration_error("ENOSERVICETOKEN", "No service token passed to client")
        if not service_slug:
            raise configuration_error("ENOSERVICESLUG", "No service slug passed to client")
        if not user_datastore_url:
            raise configuration_error("ENOMICROSERVICEURL", "No microservice url passed to client")
        if not service_secret:
            raise configuration_error("ENOSERVICESECRET", "No service secret passed to client")

        self._config = ClientConfig(
            service_secret=service_secret,
            service_token=service_token,
            service_slug=service_slug,
            user_datastore_url=user_datastore_url,
        )
        self._tokens = token_issuer or AccessTokenIssuer(service_token)
        self._codec = codec or PayloadCodec()
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(
            user_datastore_url, self._tokens, timeout=timeout
        )

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls, **kwargs: Any) -> "UserDataStoreClient":
        return cls(
            os.environ.get(ENV_SERVICE_SECRET),
            os.environ.get(ENV_SERVICE_TOKEN),
            os.environ.get(ENV_SERVICE_SLUG),
            os.environ.get(ENV_USER_DATASTORE_URL),
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def service_slug(self) -> str:
        return self._config.service_slug

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "UserDataStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # -------- Building blocks --------
    def create_endpoint_url(self, template: str, context: Dict[str, str]) -> str:
        return create_endpoint_url(template, context, self._config.user_datastore_url)

    def generate_access_token(self, data: Any = None) -> str:
        return self._tokens.generate_access_token(data)

    def encrypt(self, user_token: str, payload: Any) -> str:
        return self._codec.encrypt(user_token, payload)

    def decrypt(self, user_token: str, envelope: str) -> Any:
        return self._codec.decrypt(user_token, envelope)

    def _context(self, user_id: Any) -> Dict[str, str]:
        # Ids may arrive as ints from form submissions; they are path segments either way
        return RequestContext(service_slug=self.service_slug, user_id=str(user_id)).as_url_context()

    # -------- Core operations --------
    async def get_data(self, user_id: str, user_token: str, logger: Any = None) -> Any:
        """Fetch and decrypt the data stored for `user_id`.

        Raises:
        - ServiceClientError (PAYLOAD, 500, EINVALIDPAYLOAD) if the stored
          envelope cannot be decrypted with `user_token`.
        - whatever the transport raises, unchanged.
        """
        body = await self._transport.send_get(
            SendArgs(url=ENDPOINTS["get_data"], context=self._context(user_id)),
            logger,
        )
        try:
            stored = StoredData.model_validate(body)
        except ValidationError as ex:
            raise invalid_payload_error() from ex
        return self.decrypt(user_token, stored.payload)

    async def set_data(self, user_id: str, user_token: str, payload: Any, logger: Any = None) -> None:
        """Encrypt `payload` with `user_token` and store it for `user_id`."""
        envelope = self.encrypt(user_token, payload)
        await self._transport.send_post(
            SendArgs(
                url=ENDPOINTS["set_data"],
                context=self._context(user_id),
                payload={"payload": envelope},
            ),
            logger,
        )


__all__ = ["UserDataStoreClient", "ENDPOINTS", "ENDPOINT_URL_TEMPLATE"]
