from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientConfig(BaseModel):
    """
    Immutable configuration of one `UserDataStoreClient`.

    Presence of every field is checked by the client constructor so that each
    missing value maps to its own error code; this model only freezes them.
    """

    model_config = ConfigDict(frozen=True)

    service_secret: str
    service_token: str
    service_slug: str
    user_datastore_url: str


class RequestContext(BaseModel):
    """Substitution values for the datastore url template."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    service_slug: str = Field(..., alias="serviceSlug")
    user_id: str = Field(..., alias="userId")

    def as_url_context(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class StoredData(BaseModel):
    """
    Body returned by the datastore for a user.

    Fields
    - iat: time the record was written (seconds), as reported by the store
    - payload: the encrypted envelope
    """

    iat: Optional[float] = None
    payload: str
