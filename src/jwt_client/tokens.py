from __future__ import annotations

import hashlib
import time
from typing import Any, Dict, Optional

import jwt

from .crypto import canonical_json
from .errors import request_error


ALGORITHM = "HS256"


def checksum(data: Any) -> str:
    """sha256 hex digest of the canonical JSON form of `data`."""
    return hashlib.sha256(canonical_json(data)).hexdigest()


class AccessTokenIssuer:
    """
    Issues and checks the short-lived JWTs that authenticate service requests.

    Tokens carry two claims:
    - `checksum`: sha256 of the signed request data, binding token to body
    - `iat`: issue time in whole seconds

    There is no `exp`; receivers decide how old a token may be (see
    `verify_access_token(max_age=...)`).
    """

    def __init__(self, service_token: str, *, clock=time.time) -> None:
        if not service_token:
            raise ValueError("service_token is required")
        self._secret = service_token
        self._clock = clock

    def generate_access_token(self, data: Any = None) -> str:
        claims = {
            "checksum": checksum({} if data is None else data),
            "iat": int(self._clock()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify_access_token(
        self,
        token: str,
        data: Any = None,
        *,
        max_age: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Decode `token` and return its claims.

        - If `data` is given, the token checksum must match it.
        - If `max_age` is given, `iat` must be no older than `max_age` seconds.

        Raises a REQUEST `ServiceClientError` (401, EINVALIDTOKEN) otherwise.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["checksum", "iat"], "verify_iat": False},
            )
        except jwt.PyJWTError as ex:
            raise request_error(401, "EINVALIDTOKEN") from ex

        if data is not None and claims.get("checksum") != checksum(data):
            raise request_error(401, "EINVALIDTOKEN")
        if max_age is not None and self._clock() - claims["iat"] > max_age:
            raise request_error(401, "EINVALIDTOKEN")
        return claims


__all__ = ["AccessTokenIssuer", "checksum", "ALGORITHM"]
