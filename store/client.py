#Purpose: The hosted data store "adapter/client".
#Sole responsibility: talk to the backend-as-a-service over HTTP and return plain rows.
#Encapsulates the provider-specific details:
#PostgREST query-string filters (col=eq.value, or=(...), order=col.desc)
#headers (apikey, bearer token, single-object Accept, Prefer: return=representation)
#GoTrue auth endpoints (/auth/v1/...)
#error payload -> StoreError translation, retries on network failures
#It should not contain package / customer business rules.

from dotenv import load_dotenv
import logging
import os
from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from .errors import NetworkError, NotFoundError, error_from_payload, retry_request

# Read the project URL and anon key from environment
# Example in .env:
# SUPABASE_URL=https://xyzcompany.supabase.co
# SUPABASE_ANON_KEY=eyJhbGciOi...
load_dotenv()
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
# plain value -> eq, (operator, value) tuple -> any PostgREST operator
FilterValue = Union[Any, Tuple[str, Any]]

SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"
DEFAULT_PAGE_SIZE = 10


class StoreClient:
    """
    Data store Adapter / Client

    Sole responsibility:
    - Talk to the hosted REST + auth endpoints via HTTP
    - Convert keyword filters into PostgREST query params
    - Return rows as plain dicts, raise StoreError subclasses on failure

    """
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = 5,
        access_token: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.base_url = (base_url or SUPABASE_URL or "").rstrip("/")
        self.api_key = api_key or SUPABASE_ANON_KEY
        self.timeout = timeout #seconds to wait for the store before giving up
        self.access_token = access_token #signed-in user's JWT, row-level security applies to it
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        if not self.base_url:
            raise ValueError("Store URL not set. Please set SUPABASE_URL in the .env file.")
        if not self.api_key:
            raise ValueError("Store API key not set. Please set SUPABASE_ANON_KEY in the .env file.")

    #----------------
    # Internal helpers: headers, query params, sending, response handling
    #----------------
    def with_access_token(self, access_token: Optional[str]) -> "StoreClient":
        """Copy of this client acting as the given signed-in user."""
        return StoreClient(
            base_url=self.base_url,
            api_key=self.api_key,
            timeout=self.timeout,
            access_token=access_token,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )

    def _headers(self, access_token: Optional[str] = None, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        token = access_token or self.access_token or self.api_key
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, FilterValue]]) -> List[Tuple[str, str]]:
        params = []
        for column, value in (filters or {}).items():
            if isinstance(value, tuple):
                operator, operand = value
            else:
                operator, operand = "eq", value
            if isinstance(operand, bool):
                operand = "true" if operand else "false"
            params.append((column, f"{operator}.{operand}"))
        return params

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers or self._headers(),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NetworkError("Network error. Please check your connection.", details=str(e)) from e

        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            if response.ok:
                return None
            raise error_from_payload({}, response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            payload = data if isinstance(data, dict) else {"message": response.text}
            raise error_from_payload(payload, response.status_code)

        return data

    def _read(self, method: str, path: str, **kwargs) -> Any:
        #reads are idempotent, so they get retried on network failures
        return retry_request(
            lambda: self._send(method, path, **kwargs),
            max_retries=self.max_retries,
            delay=self.retry_delay,
        )

    #----------------
    # Table operations
    #----------------
    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[Dict[str, FilterValue]] = None,
        or_filter: Optional[str] = None,
        order: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        single: bool = False,
    ) -> Union[List[Row], Row]:
        """
        GET /rest/v1/<table>

        Returns:
            list of rows, or a single row dict when single=True
            (NotFoundError when no row matches).
        """
        params = [("select", "".join(columns.split()))]
        params.extend(self._filter_params(filters))
        if or_filter:
            params.append(("or", f"({or_filter})"))
        if order:
            params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset:
            params.append(("offset", str(offset)))
            if limit is None:
                params.append(("limit", str(DEFAULT_PAGE_SIZE)))

        extra = {"Accept": SINGLE_OBJECT_MEDIA_TYPE} if single else None
        data = self._read("GET", f"/rest/v1/{table}", params=params, headers=self._headers(extra=extra))

        if single:
            if not data:
                raise NotFoundError("Record not found")
            return data
        return data or []

    def insert(self, table: str, rows: Union[Row, List[Row]], *, single: bool = False) -> Union[List[Row], Row]:
        """POST /rest/v1/<table>, returns the inserted row(s)."""
        extra = {"Prefer": "return=representation"}
        if single:
            extra["Accept"] = SINGLE_OBJECT_MEDIA_TYPE
        data = self._send(
            "POST",
            f"/rest/v1/{table}",
            params=[("select", "*")],
            json=rows,
            headers=self._headers(extra=extra),
        )
        return data if single else (data or [])

    def update(
        self,
        table: str,
        values: Row,
        filters: Dict[str, FilterValue],
        *,
        single: bool = False,
    ) -> Union[List[Row], Row]:
        """PATCH /rest/v1/<table>?<filters>, returns the updated row(s)."""
        if not filters:
            raise ValueError("Refusing to update without filters.")

        extra = {"Prefer": "return=representation"}
        if single:
            extra["Accept"] = SINGLE_OBJECT_MEDIA_TYPE
        params = [("select", "*")] + self._filter_params(filters)
        data = self._send(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers=self._headers(extra=extra),
        )
        if single:
            if not data:
                raise NotFoundError("Record not found")
            return data
        return data or []

    def delete(self, table: str, filters: Dict[str, FilterValue]) -> None:
        """DELETE /rest/v1/<table>?<filters>"""
        if not filters:
            raise ValueError("Refusing to delete without filters.")
        self._send("DELETE", f"/rest/v1/{table}", params=self._filter_params(filters))

    #----------------
    # Auth (GoTrue)
    #----------------
    def sign_up(self, email: str, password: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._send(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": data or {}},
        )

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Password grant. Returns the session (access_token, refresh_token, user)."""
        return self._send(
            "POST",
            "/auth/v1/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
        )

    def sign_out(self, access_token: str) -> None:
        self._send("POST", "/auth/v1/logout", headers=self._headers(access_token=access_token))

    def get_user(self, access_token: str) -> Dict[str, Any]:
        return self._read("GET", "/auth/v1/user", headers=self._headers(access_token=access_token))

    def reset_password(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = [("redirect_to", redirect_to)] if redirect_to else None
        self._send("POST", "/auth/v1/recover", params=params, json={"email": email})

    def update_user(self, access_token: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        return self._send(
            "PUT",
            "/auth/v1/user",
            json=attributes,
            headers=self._headers(access_token=access_token),
        )


def default_client() -> StoreClient:
    """
    Client configured from the environment, shared by the API layer and scripts.
    """
    try:
        return StoreClient()
    except ValueError:
        logger.error("Store client is not configured (SUPABASE_URL / SUPABASE_ANON_KEY).")
        raise


