"""Record client backed by the Directus REST API.

Directus exposes every collection under `/items/{collection}`; the four
primitives map onto it as:

- filtered read:  GET    /items/{table}?filter={"field":{"_eq":value}}&limit=-1
- bulk null:      PATCH  /items/{table}   {"keys": [...], "data": {field: null}}
- bulk delete:    DELETE /items/{table}   [...]
- single delete:  DELETE /items/{table}/{id}

Access tokens from `/auth/login` are short-lived. After `login()` a 401 is
answered by one `/auth/refresh` (or a fresh login when the refresh token is
rejected) and a single retry of the request.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..core.constants import DEFAULT_DIRECTUS_TIMEOUT
from ..core.enums import table_name
from ..core.exceptions import RecordNotFound, RecordStoreError
from .repository import RecordClient

logger = logging.getLogger(__name__)

# Directus answers deletes of missing items with 403 rather than 404.
_MISSING_STATUSES = {403, 404}


class DirectusRecordClient(RecordClient):
    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_DIRECTUS_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._credentials: Optional[tuple] = None
        self._refresh_token: Optional[str] = None
        if token:
            self._set_token(token)

    def _set_token(self, token: str) -> None:
        self._client.headers["Authorization"] = f"Bearer {token}"

    def close(self) -> None:
        self._client.close()

    def login(self, email: str, password: str) -> None:
        self._client.headers.pop("Authorization", None)
        response = self._request("POST", "/auth/login", json={"email": email, "password": password, "mode": "json"})
        self._accept_tokens(response, "/auth/login")
        self._credentials = (email, password)
        logger.info("Authenticated with Directus as %s", email)

    def refresh(self) -> None:
        if not self._refresh_token:
            raise RecordStoreError("Chưa có refresh_token của Directus")
        response = self._request("POST", "/auth/refresh", json={"refresh_token": self._refresh_token, "mode": "json"})
        self._accept_tokens(response, "/auth/refresh")
        logger.info("Refreshed Directus access token")

    def _accept_tokens(self, response: httpx.Response, url: str) -> None:
        if not response.is_success:
            raise RecordStoreError(f"POST {url} -> {response.status_code}: {_error_message(response)}")
        data = _json_data(response, f"POST {url}")
        if not isinstance(data, dict) or not data.get("access_token"):
            raise RecordStoreError("Directus không trả về access_token")
        self._set_token(str(data["access_token"]))
        self._refresh_token = data.get("refresh_token") or None

    def _reauthenticate(self) -> bool:
        if self._refresh_token:
            try:
                self.refresh()
                return True
            except RecordStoreError as exc:
                logger.warning("Directus token refresh failed: %s", exc)
        if self._credentials:
            self.login(*self._credentials)
            return True
        return False

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"{method} {url} thất bại: {exc}") from exc

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = self._request(method, url, **kwargs)
        if response.status_code == 401 and self._reauthenticate():
            response = self._request(method, url, **kwargs)
        if response.is_success:
            return response

        detail = _error_message(response)
        if method == "DELETE" and response.status_code in _MISSING_STATUSES:
            raise RecordNotFound(f"{method} {url}: {detail}")
        raise RecordStoreError(f"{method} {url} -> {response.status_code}: {detail}")

    def read_by_field(self, table: str, field: str, value: Any) -> List[Dict[str, Any]]:
        url = f"/items/{table_name(table)}"
        params = {
            "filter": json.dumps({field: {"_eq": value}}),
            "limit": "-1",
        }
        response = self._send("GET", url, params=params)
        rows = _json_data(response, f"GET {url}")
        if rows is None:
            return []
        try:
            if not isinstance(rows, list):
                raise TypeError(f"data là {type(rows).__name__}, không phải danh sách")
            return [dict(r, id=str(r["id"])) for r in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise RecordStoreError(f"GET {url}: dữ liệu không hợp lệ ({exc!r})") from exc

    def null_field(self, table: str, ids: Sequence[str], field: str) -> None:
        if not ids:
            return
        self._send(
            "PATCH",
            f"/items/{table_name(table)}",
            json={"keys": list(ids), "data": {field: None}},
        )

    def delete_many(self, table: str, ids: Sequence[str]) -> None:
        if not ids:
            return
        self._send("DELETE", f"/items/{table_name(table)}", json=list(ids))

    def delete_one(self, table: str, record_id: str) -> None:
        self._send("DELETE", f"/items/{table_name(table)}/{record_id}")


def _json_data(response: httpx.Response, what: str) -> Any:
    try:
        body = response.json()
    except ValueError as exc:
        raise RecordStoreError(f"{what}: phản hồi không phải JSON") from exc
    if not isinstance(body, dict):
        raise RecordStoreError(f"{what}: phản hồi thiếu khoá 'data'")
    return body.get("data")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors:
        return str(errors[0].get("message") or errors[0]) if isinstance(errors[0], dict) else str(errors[0])
    return response.text
