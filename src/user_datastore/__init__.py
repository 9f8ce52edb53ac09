"""
Client for the per-user datastore.

Stores one user's data per service, encrypted with the user's token and
authenticated with a service JWT.
"""

from .client import ENDPOINTS, UserDataStoreClient
from .models import ClientConfig, RequestContext, StoredData

__all__ = ["ENDPOINTS", "ClientConfig", "RequestContext", "StoredData", "UserDataStoreClient"]
