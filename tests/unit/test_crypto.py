from __future__ import annotations

import base64

import pytest

from jwt_client.crypto import PayloadCodec, canonical_json, decrypt, encrypt
from jwt_client.errors import ErrorKind, ServiceClientError


USER_TOKEN = "testUserToken"
# Envelope written by the existing platform for {"foo": "bar"}
STORED_ENVELOPE = "RRqDeJRQlZULKx1NYql/imRmDsy9AZshKozgLuY="


def _assert_invalid_payload(excinfo):
    err = excinfo.value
    assert type(err).__name__ == "ServiceClientError"
    assert err.kind == ErrorKind.PAYLOAD
    assert err.code == 500
    assert err.message == "EINVALIDPAYLOAD"


def test_decrypts_envelope_written_by_existing_platform():
    assert decrypt(USER_TOKEN, STORED_ENVELOPE) == {"foo": "bar"}


def test_encrypt_roundtrip_and_fresh_iv():
    payload = {"name": "Ada", "answers": [1, 2, {"nested": True}], "note": None}

    first = encrypt(USER_TOKEN, payload)
    second = encrypt(USER_TOKEN, payload)

    # The IV makes every envelope unique, so compare via decryption
    assert first != second
    assert decrypt(USER_TOKEN, first) == payload
    assert decrypt(USER_TOKEN, second) == payload


def test_envelope_is_iv_followed_by_ciphertext():
    codec = PayloadCodec(random_bytes=lambda n: b"\x00" * n)
    envelope = codec.encrypt(USER_TOKEN, {"foo": "bar"})

    raw = base64.b64decode(envelope)
    assert raw[:16] == b"\x00" * 16
    assert len(raw) == 16 + len(b'{"foo":"bar"}')


def test_non_ascii_payload_roundtrip():
    payload = {"town": "Llanfairpwll", "greeting": "héllo wörld ☃"}
    assert decrypt(USER_TOKEN, encrypt(USER_TOKEN, payload)) == payload


def test_decrypt_invalid_string_raises_invalid_payload():
    with pytest.raises(ServiceClientError) as excinfo:
        decrypt(USER_TOKEN, "invalid")
    _assert_invalid_payload(excinfo)


@pytest.mark.parametrize(
    "envelope",
    [
        "",
        base64.b64encode(b"\x01" * 16).decode("ascii"),  # IV only, no ciphertext
        "not base64 at all!",
        None,
    ],
)
def test_decrypt_malformed_envelopes_raise_invalid_payload(envelope):
    with pytest.raises(ServiceClientError) as excinfo:
        decrypt(USER_TOKEN, envelope)
    _assert_invalid_payload(excinfo)


def test_decrypt_with_wrong_key_raises_invalid_payload():
    with pytest.raises(ServiceClientError) as excinfo:
        decrypt("wrongUserToken", STORED_ENVELOPE)
    _assert_invalid_payload(excinfo)
    # Low-level cause is kept for debugging only
    assert excinfo.value.__cause__ is not None


def test_encrypt_requires_key():
    with pytest.raises(ValueError):
        encrypt("", {"foo": "bar"})


def test_canonical_json_matches_javascript_stringify():
    assert canonical_json({"b": 1, "a": "é", "c": [True, None]}) == '{"b":1,"a":"é","c":[true,null]}'.encode(
        "utf-8"
    )


@pytest.mark.parametrize("value", [float("nan"), float("inf"), {"score": float("-inf")}])
def test_non_finite_numbers_are_rejected(value):
    # JSON has no NaN/Infinity; refuse rather than write bytes other platforms can't read
    with pytest.raises(ValueError):
        canonical_json(value)
    with pytest.raises(ValueError):
        encrypt(USER_TOKEN, value)
