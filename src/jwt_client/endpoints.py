from __future__ import annotations

import re
from typing import Mapping

from .errors import request_error


# ":name" path segments, e.g. "/service/:serviceSlug/user/:userId"
_PLACEHOLDER = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def resolve_path(template: str, context: Mapping[str, object]) -> str:
    """Replace each `:name` placeholder in `template` with `context[name]`.

    Values are inserted verbatim (no URL encoding); callers pass safe segments.
    """

    def _sub(match: re.Match) -> str:
        name = match.group(1)
        value = context.get(name)
        if value is None or value == "":
            raise request_error("EMISSINGCONTEXTVALUE", f"No value for url parameter: {name}")
        return str(value)

    return _PLACEHOLDER.sub(_sub, template)


def create_endpoint_url(template: str, context: Mapping[str, object], base_url: str = "") -> str:
    return base_url.rstrip("/") + resolve_path(template, context)


__all__ = ["resolve_path", "create_endpoint_url"]
