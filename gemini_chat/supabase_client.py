from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import Settings
from .errors import SupabaseError

logger = logging.getLogger(__name__)

MESSAGES_TABLE = "chat_messages"


def strip_bucket_prefix(reference: str, bucket: str) -> str:
    """Turn a bucket-prefixed path such as 'chat_images/u1/abc' into the object key 'u1/abc'"""
    return reference.replace(f"{bucket}/", "", 1)


def _error_message(response: httpx.Response) -> str:
    # Storage and PostgREST both answer errors with a JSON object, but not always
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error_description") or body.get("error") or body)
    return str(body)


class SupabaseClient:
    """Thin async REST client for the Supabase Storage, Auth and PostgREST APIs"""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = (settings.supabase_url or "").rstrip("/")
        self.api_key = settings.supabase_api_key
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.base_url:
            raise SupabaseError("Missing Supabase URL")
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def _headers(self, token: str | None) -> dict:
        headers: dict = {}
        if self.api_key:
            headers["apikey"] = self.api_key
        bearer = token or self.api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def download(self, bucket: str, path: str, token: str | None = None) -> bytes:
        async with self._client() as client:
            response = await client.get(
                f"/storage/v1/object/{bucket}/{quote(path)}",
                headers=self._headers(token),
            )
        if response.is_error:
            raise SupabaseError(_error_message(response), response.status_code)
        logger.debug(f"Downloaded {len(response.content)} bytes from {bucket}/{path}")
        return response.content

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str, token: str | None = None) -> str:
        headers = self._headers(token)
        headers["Content-Type"] = content_type
        headers["x-upsert"] = "false"
        async with self._client() as client:
            response = await client.post(
                f"/storage/v1/object/{bucket}/{quote(path)}",
                content=data,
                headers=headers,
            )
        if response.is_error:
            raise SupabaseError(_error_message(response), response.status_code)
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path)}"

    async def get_user(self, token: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get("/auth/v1/user", headers=self._headers(token))
        if response.is_error:
            raise SupabaseError(_error_message(response), response.status_code)
        return response.json()

    async def select_messages(self, user_id: str, token: str | None = None) -> list[dict[str, Any]]:
        params = {
            "select": "*",
            "user_id": f"eq.{user_id}",
            "order": "created_at.asc",
        }
        async with self._client() as client:
            response = await client.get(
                f"/rest/v1/{MESSAGES_TABLE}",
                params=params,
                headers=self._headers(token),
            )
        if response.is_error:
            raise SupabaseError(_error_message(response), response.status_code)
        return response.json()

    async def insert_message(self, row: dict[str, Any], token: str | None = None) -> dict[str, Any]:
        headers = self._headers(token)
        headers["Prefer"] = "return=representation"
        async with self._client() as client:
            response = await client.post(
                f"/rest/v1/{MESSAGES_TABLE}",
                json=row,
                headers=headers,
            )
        if response.is_error:
            raise SupabaseError(_error_message(response), response.status_code)
        rows = response.json()
        # PostgREST returns the inserted rows as a list
        return rows[0] if isinstance(rows, list) and rows else row
