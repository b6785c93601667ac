#Service wiring for the API layer.
#One store client per process, copied per request when the caller brings a user token
#so row-level security applies to admin calls.

from functools import lru_cache
from typing import Optional

from accounts.service import AuthService
from shipments.services import PackageService
from store.client import StoreClient, default_client


@lru_cache(maxsize=1)
def get_store_client() -> StoreClient:
    return default_client()


def get_package_service(access_token: Optional[str] = None) -> PackageService:
    client = get_store_client()
    if access_token:
        client = client.with_access_token(access_token)
    return PackageService(client)


def get_auth_service() -> AuthService:
    return AuthService(get_store_client())
