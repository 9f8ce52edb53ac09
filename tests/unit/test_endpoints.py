from __future__ import annotations

import pytest

from jwt_client.endpoints import create_endpoint_url, resolve_path
from jwt_client.errors import ErrorKind, ServiceClientError


TEMPLATE = "/service/:serviceSlug/user/:userId"
CONTEXT = {"serviceSlug": "testServiceSlug", "userId": "testUserId"}


def test_resolve_path_substitutes_placeholders():
    assert resolve_path(TEMPLATE, CONTEXT) == "/service/testServiceSlug/user/testUserId"


def test_create_endpoint_url_prefixes_base_url():
    assert (
        create_endpoint_url(TEMPLATE, CONTEXT, "https://userdatastore")
        == "https://userdatastore/service/testServiceSlug/user/testUserId"
    )
    # Trailing slash on the base does not double up
    assert (
        create_endpoint_url(TEMPLATE, CONTEXT, "https://userdatastore/")
        == "https://userdatastore/service/testServiceSlug/user/testUserId"
    )


def test_values_are_inserted_verbatim():
    path = resolve_path(TEMPLATE, {"serviceSlug": "a b", "userId": "x%2Fy"})
    assert path == "/service/a b/user/x%2Fy"


def test_extra_context_keys_are_ignored():
    assert resolve_path("/user/:userId", {**CONTEXT, "unused": "1"}) == "/user/testUserId"


def test_missing_context_value_raises():
    with pytest.raises(ServiceClientError) as excinfo:
        resolve_path(TEMPLATE, {"serviceSlug": "testServiceSlug"})
    assert excinfo.value.kind == ErrorKind.REQUEST
    assert excinfo.value.code == "EMISSINGCONTEXTVALUE"
    assert "userId" in excinfo.value.message
