from __future__ import annotations

import base64
import hashlib
import json
import os
from typing import Any

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import invalid_payload_error


IV_LENGTH = 16


def canonical_json(data: Any) -> bytes:
    """Serialise `data` the way JavaScript's JSON.stringify does.

    Compact separators, insertion key order, non-ASCII left as UTF-8. Both the
    stored envelopes and the token checksums depend on this exact byte form.
    NaN and Infinity have no JSON form and raise `ValueError`.
    """
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def _derive_key(key: str) -> bytes:
    if not isinstance(key, str) or not key:
        raise ValueError("key is required")
    return hashlib.sha256(key.encode("utf-8")).digest()


def _cipher(key: str, iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(_derive_key(key)), modes.CTR(iv))


class PayloadCodec:
    """
    AES-256-CTR codec for user payloads.

    Envelope format: base64(iv || ciphertext), where iv is 16 random bytes
    generated per call and the AES key is sha256(key). This is the format the
    remote datastore already holds, so it must not change.
    """

    def __init__(self, *, random_bytes=os.urandom) -> None:
        self._random_bytes = random_bytes

    def encrypt(self, key: str, payload: Any) -> str:
        plaintext = canonical_json(payload)
        iv = self._random_bytes(IV_LENGTH)
        encryptor = _cipher(key, iv).encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        return base64.b64encode(iv + ciphertext).decode("ascii")

    def decrypt(self, key: str, envelope: str) -> Any:
        """Decrypt an envelope produced by `encrypt`.

        Raises a PAYLOAD `ServiceClientError` (500, EINVALIDPAYLOAD) for any
        malformed, truncated or undecodable input.
        """
        try:
            raw = base64.b64decode(envelope, validate=True)
            if len(raw) <= IV_LENGTH:
                raise ValueError("envelope too short")
            decryptor = _cipher(key, raw[:IV_LENGTH]).decryptor()
            plaintext = decryptor.update(raw[IV_LENGTH:]) + decryptor.finalize()
            return json.loads(plaintext.decode("utf-8"))
        except (TypeError, ValueError) as ex:
            # binascii.Error, UnicodeDecodeError and JSONDecodeError are ValueErrors
            raise invalid_payload_error() from ex


_default_codec = PayloadCodec()


def encrypt(key: str, payload: Any) -> str:
    return _default_codec.encrypt(key, payload)


def decrypt(key: str, envelope: str) -> Any:
    return _default_codec.decrypt(key, envelope)


__all__ = ["PayloadCodec", "canonical_json", "encrypt", "decrypt", "IV_LENGTH"]
