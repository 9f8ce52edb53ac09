from __future__ import annotations

from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    """Where a client-raised error originated."""

    CONFIGURATION = "configuration"
    PAYLOAD = "payload"
    REQUEST = "request"


class ServiceClientError(RuntimeError):
    """
    Single error type raised by service clients.

    Carries a machine-readable `code` (string like "ENOSERVICETOKEN" or an
    HTTP-ish int like 500) and a human-readable `message`. Errors raised by
    an injected transport that is not built on this package keep their own
    type; clients do not rewrap them.
    """

    def __init__(self, kind: ErrorKind, code: Union[int, str], message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"ServiceClientError(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"


def configuration_error(code: str, message: str) -> ServiceClientError:
    return ServiceClientError(ErrorKind.CONFIGURATION, code, message)


def invalid_payload_error() -> ServiceClientError:
    return ServiceClientError(ErrorKind.PAYLOAD, 500, "EINVALIDPAYLOAD")


def request_error(code: Union[int, str], message: str | None = None) -> ServiceClientError:
    # Mirrors the platform convention of falling back to the code as message
    return ServiceClientError(ErrorKind.REQUEST, code, message or str(code))


__all__ = [
    "ErrorKind",
    "ServiceClientError",
    "configuration_error",
    "invalid_payload_error",
    "request_error",
]
