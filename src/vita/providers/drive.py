"""Google Drive v3 remote store over aiohttp.

Uses the drive.file scope model: the app only sees files it created, so a
name lookup is enough to find the document.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

import aiohttp

from vita.errors import NotAuthenticatedError, RemoteReadError, RemoteWriteError

if TYPE_CHECKING:
    from vita.config import DriveConfig
    from vita.providers.base import TokenSource

logger = logging.getLogger(__name__)

# A request that cannot reach the server, or gets no answer in time
_TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def _quote(value: str) -> str:
    """Escape a string literal for a Drive query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DriveStore:
    """RemoteStore backed by the Drive REST API. Performs no retries."""

    def __init__(
        self,
        config: DriveConfig,
        tokens: TokenSource,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._tokens = tokens
        self._session = session
        self._owns_session = session is None

    @property
    def name(self) -> str:
        return "drive"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.timeout)
            )
            self._owns_session = True
        return self._session

    def _headers(self) -> dict[str, str]:
        token = self._tokens.get_token()
        if not token:
            raise NotAuthenticatedError("No valid Drive access token")
        return {"Authorization": f"Bearer {token}"}

    def _multipart(self, metadata: dict, content: bytes) -> aiohttp.MultipartWriter:
        writer = aiohttp.MultipartWriter("related")
        writer.append_json({**metadata, "mimeType": "application/json"})
        writer.append(content, {"Content-Type": "application/json"})
        return writer

    # ── Reads ────────────────────────────────────────────────

    async def find(self, name: str) -> str | None:
        params = {
            "q": f"name='{_quote(name)}' and trashed=false",
            "fields": "files(id)",
            "spaces": "drive",
        }
        url = f"{self._config.api_url}/files"
        try:
            async with self._get_session().get(url, params=params, headers=self._headers()) as resp:
                if resp.status != 200:
                    raise RemoteReadError(f"Drive lookup failed: {resp.status}", status=resp.status)
                body = await resp.json(content_type=None)
        except _TRANSPORT_ERRORS as e:
            raise RemoteReadError(f"Drive lookup failed: {e}") from e
        except json.JSONDecodeError as e:
            raise RemoteReadError(f"Drive lookup returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise RemoteReadError("Drive lookup returned an unexpected body")
        files = body.get("files") or []
        return files[0].get("id") if files else None

    async def get(self, file_id: str) -> bytes:
        url = f"{self._config.api_url}/files/{file_id}"
        try:
            async with self._get_session().get(
                url, params={"alt": "media"}, headers=self._headers()
            ) as resp:
                if resp.status != 200:
                    raise RemoteReadError(f"Drive read failed: {resp.status}", status=resp.status)
                return await resp.read()
        except _TRANSPORT_ERRORS as e:
            raise RemoteReadError(f"Drive read failed: {e}") from e

    # ── Writes ───────────────────────────────────────────────

    async def create(self, name: str, content: bytes) -> str:
        url = f"{self._config.upload_url}/files"
        params = {"uploadType": "multipart", "fields": "id"}
        try:
            async with self._get_session().post(
                url,
                params=params,
                data=self._multipart({"name": name}, content),
                headers=self._headers(),
            ) as resp:
                if resp.status not in (200, 201):
                    raise RemoteWriteError(f"Drive create failed: {resp.status}", status=resp.status)
                body = await resp.json(content_type=None)
        except _TRANSPORT_ERRORS as e:
            raise RemoteWriteError(f"Drive create failed: {e}") from e
        except json.JSONDecodeError as e:
            raise RemoteWriteError(f"Drive create returned invalid JSON: {e}") from e

        file_id = body.get("id") if isinstance(body, dict) else None
        if not file_id:
            raise RemoteWriteError("Drive create returned no file id")
        return file_id

    async def update(self, file_id: str, content: bytes) -> None:
        url = f"{self._config.upload_url}/files/{file_id}"
        try:
            async with self._get_session().patch(
                url,
                params={"uploadType": "multipart"},
                data=self._multipart({}, content),
                headers=self._headers(),
            ) as resp:
                if resp.status != 200:
                    raise RemoteWriteError(f"Drive update failed: {resp.status}", status=resp.status)
        except _TRANSPORT_ERRORS as e:
            raise RemoteWriteError(f"Drive update failed: {e}") from e

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
