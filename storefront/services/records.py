"""Records Client - async REST client for the hosted records backend.

Speaks the PocketBase-style collection API:
    GET  /api/collections/{collection}/records          (paged list)
    GET  /api/collections/{collection}/records/{id}
    POST /api/collections/{collection}/records
    POST /api/collections/users/auth-with-password
    POST /api/collections/users/request-password-reset
"""

from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx

from storefront.errors import RecordsError
from storefront.logging import get_logger, sanitize_text_for_logging

logger = get_logger(__name__)

AuthListener = Callable[[str, Optional[dict]], None]


class AuthStore:
    """Holds the current auth token and user record; notifies on change."""

    def __init__(self):
        self.token: str = ""
        self.record: Optional[dict] = None
        self._listeners: list[AuthListener] = []

    @property
    def is_valid(self) -> bool:
        return bool(self.token)

    def save(self, token: str, record: Optional[dict]) -> None:
        self.token = token or ""
        self.record = record
        self._trigger()

    def clear(self) -> None:
        self.token = ""
        self.record = None
        self._trigger()

    def on_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register listener(token, record); returns an unregister callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _trigger(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.token, self.record)
            except Exception as e:
                logger.warning(f"Auth listener failed: {e}", exc_info=True)


class RecordsClient:
    """Async client for collection records, auth and file URLs."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        auth_store: AuthStore | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.auth_store = auth_store or AuthStore()
        self._transport = transport
        # HTTP client (lazy init)
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _headers(self) -> dict[str, str]:
        if self.auth_store.is_valid:
            return {"Authorization": self.auth_store.token}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        client = await self._get_http_client()
        try:
            response = await client.request(method, path, params=params, json=json, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _error_from_response(e.response) from e
        except httpx.RequestError as e:
            logger.error(f"Records backend unreachable ({method} {sanitize_text_for_logging(path)}): {e}")
            raise RecordsError(f"Records backend unreachable: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _records_path(collection: str, record_id: str | None = None) -> str:
        path = f"/api/collections/{quote(collection, safe='')}/records"
        if record_id is not None:
            path += f"/{quote(str(record_id), safe='')}"
        return path

    # ==================== RECORDS ====================

    async def get_list(
        self,
        collection: str,
        page: int = 1,
        per_page: int = 30,
        filter: str = "",
        sort: str = "",
    ) -> dict[str, Any]:
        """
        Fetch one page of records.

        Returns:
            Dict with page, perPage, totalItems, totalPages, items
        """
        params: dict[str, Any] = {"page": page, "perPage": per_page}
        if filter:
            params["filter"] = filter
        if sort:
            params["sort"] = sort
        return await self._request("GET", self._records_path(collection), params=params)

    async def get_one(self, collection: str, record_id: str) -> dict[str, Any]:
        return await self._request("GET", self._records_path(collection, record_id))

    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", self._records_path(collection), json=data)

    # ==================== AUTH ====================

    async def auth_with_password(self, identity: str, password: str, collection: str = "users") -> dict[str, Any]:
        """Authenticate and store the session token. Returns {token, record}."""
        data = await self._request(
            "POST",
            f"/api/collections/{quote(collection, safe='')}/auth-with-password",
            json={"identity": identity, "password": password},
        )
        self.auth_store.save(data.get("token", ""), data.get("record"))
        return data

    async def request_password_reset(self, email: str, collection: str = "users") -> None:
        await self._request(
            "POST",
            f"/api/collections/{quote(collection, safe='')}/request-password-reset",
            json={"email": email},
        )

    # ==================== FILES ====================

    def file_url(self, record: dict[str, Any], filename: str) -> str:
        """Public URL of a file attached to a record."""
        collection = record.get("collectionId") or record.get("collectionName") or ""
        return (
            f"{self.base_url}/api/files/{quote(str(collection), safe='')}"
            f"/{quote(str(record.get('id', '')), safe='')}/{quote(filename, safe='')}"
        )


def _error_from_response(response: httpx.Response) -> RecordsError:
    """Build RecordsError from a non-2xx backend response."""
    data: dict[str, Any] = {}
    message = response.reason_phrase or "Request failed"
    try:
        body = response.json()
        if isinstance(body, dict):
            data = body
            message = body.get("message") or message
    except ValueError:
        pass
    logger.warning(f"Records backend error {response.status_code}: {sanitize_text_for_logging(message)}")
    return RecordsError(message, status=response.status_code, data=data)
