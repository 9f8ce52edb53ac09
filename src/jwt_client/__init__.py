"""
Shared building blocks for platform service clients.

Modules:
- crypto: AES-256-CTR payload codec
- tokens: JWT access tokens with payload checksums
- endpoints: ":name" url template expansion
- errors: the single tagged client error
- transport: transport contract and httpx implementation
- logging: structlog setup
"""

from .crypto import PayloadCodec
from .errors import ErrorKind, ServiceClientError
from .tokens import AccessTokenIssuer
from .transport import HttpTransport, SendArgs, Transport

__all__ = [
    "AccessTokenIssuer",
    "ErrorKind",
    "HttpTransport",
    "PayloadCodec",
    "SendArgs",
    "ServiceClientError",
    "Transport",
]
