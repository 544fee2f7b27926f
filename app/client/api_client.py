# app/client/api_client.py
"""
Async HTTP client for the entry log API (what the web client calls).

    async with EntryLogClient("http://localhost:3001/api") as api:
        await api.login("admin_diario", "admin123")
        entry = await api.create_entry({...})
        await api.register_exit(entry["id"])

A 401 from any call drops the stored token (session expired); every other
non-2xx response raises ApiError with the server's detail message.
"""

from datetime import datetime
from typing import Optional

import httpx

from app.utils.logger import get_logger

logger = get_logger(__name__)


def photo_filename(entry_id: str) -> str:
    return f"photo-{entry_id}.jpg"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _detail(response: httpx.Response, default: str) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        return default
    if not detail:
        return default
    # FastAPI validation errors come back as a list
    return detail if isinstance(detail, str) else str(detail)


class EntryLogClient:
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token = token
        self.user: Optional[dict] = None
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs):
        response = await self._client.request(method, path, headers=self._headers(), **kwargs)

        if response.status_code == 401:
            self.logout()
            raise ApiError(401, "Session expired. Please log in again.")

        if response.is_error:
            message = _detail(response, response.reason_phrase)
            logger.warning(f"[CLIENT] {method} {path} → {response.status_code}: {message}")
            raise ApiError(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ── Auth ─────────────────────────────────────────────────────────────────
    async def login(self, username: str, password: str) -> dict:
        response = await self._client.post("/auth/login", json={"username": username, "password": password})
        if response.is_error:
            raise ApiError(response.status_code, _detail(response, "Authentication error"))
        data = response.json()
        self.token = data["access_token"]
        self.user = data["user"]
        return data["user"]

    def logout(self):
        self.token = None
        self.user = None

    async def profile(self) -> dict:
        return await self._request("GET", "/auth/profile")

    async def register_user(self, username: str, password: str, full_name: str, role: str) -> dict:
        body = {"username": username, "password": password, "fullName": full_name, "role": role}
        return await self._request("POST", "/auth/register", json=body)

    # ── Entries ──────────────────────────────────────────────────────────────
    async def list_entries(self) -> list[dict]:
        return await self._request("GET", "/entries")

    async def get_entry(self, entry_id: str) -> dict:
        return await self._request("GET", f"/entries/{entry_id}")

    async def create_entry(self, entry: dict) -> dict:
        body = {**entry, "fechaSalida": entry.get("fechaSalida") or None}
        return await self._request("POST", "/entries", json=body)

    async def update_entry(self, entry_id: str, changes: dict) -> dict:
        return await self._request("PATCH", f"/entries/{entry_id}", json=changes)

    async def register_exit(self, entry_id: str, when: Optional[datetime] = None) -> dict:
        exit_time = (when or datetime.now()).isoformat(timespec="seconds")
        return await self.update_entry(entry_id, {"fechaSalida": exit_time})

    async def delete_entry(self, entry_id: str):
        await self._request("DELETE", f"/entries/{entry_id}")

    async def delete_entries(self, ids: list[str]) -> dict:
        return await self._request("DELETE", "/entries", json={"ids": ids})

    async def upload_photo(self, entry_id: str, content: bytes, content_type: str = "image/jpeg") -> dict:
        """The server keeps the uploaded name, so each entry gets its own photo-<id>.jpg."""
        files = {"photo": (photo_filename(entry_id), content, content_type)}
        return await self._request("POST", f"/entries/{entry_id}/photo", files=files)

    async def get_photo(self, entry_id: str) -> bytes:
        response = await self._client.get(f"/entries/{entry_id}/photo", headers=self._headers())
        if response.is_error:
            raise ApiError(response.status_code, "Could not fetch the photo")
        return response.content

    async def statistics(self) -> dict:
        return await self._request("GET", "/entries/statistics")

    async def entries_between(self, start: str, end: str) -> list[dict]:
        return await self._request("GET", "/entries/date-range", params={"startDate": start, "endDate": end})

    async def manual_cleanup(self) -> dict:
        return await self._request("POST", "/entries/cleanup")
