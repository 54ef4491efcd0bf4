from __future__ import annotations

"""`requests` based clients for the admin API.

Like the rest of the package we stay on plain `requests`; the blocking call is
pushed to a worker thread with `asyncio.to_thread` so the console's coroutines
only ever suspend at this boundary. Timeouts are a transport concern and come
straight from the caller (None disables them).
"""

import asyncio
import logging
from typing import Any

import requests

from ..errors import TransportFailure
from ..settings import SettingsRecord
from .base import RemoteResponse, SettingsAuthority, TestBackend

logger = logging.getLogger(__name__)


class _HttpClient:
    def __init__(
        self,
        base_url: str,
        timeout: float | None = 60,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # None: every call uses `requests.request` with a throwaway session
        self.session = session

    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, payload: Any = None) -> RemoteResponse:
        url = self._url(path)
        kwargs: dict = {"timeout": self.timeout, "headers": {"Accept": "application/json"}}
        if payload is not None:
            kwargs["json"] = payload
        try:
            resp = (self.session or requests).request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportFailure(str(exc)) from exc

        result = RemoteResponse(status_code=resp.status_code, reason=resp.reason or "", text=resp.text or "")
        if result.text.strip():
            try:
                result.body = resp.json()
                result.has_body = True
            except ValueError:
                logger.debug("%s %s returned a non-JSON body", method, url)
        if not result.ok:
            logger.warning("%s %s -> %s %s", method, url, result.status_code, result.reason)
        return result

    async def _request(self, method: str, path: str, payload: Any = None) -> RemoteResponse:
        return await asyncio.to_thread(self._send, method, path, payload)


class HttpSettingsAuthority(_HttpClient, SettingsAuthority):
    def __init__(self, base_url: str, path: str = "/api/admin/settings", **kwargs: Any):
        super().__init__(base_url, **kwargs)
        self.path = path

    async def fetch(self) -> RemoteResponse:
        return await self._request("GET", self.path)

    async def persist(self, record: SettingsRecord) -> RemoteResponse:
        return await self._request("POST", self.path, record.to_dict())


class HttpTestBackend(_HttpClient, TestBackend):
    def __init__(self, base_url: str, path: str = "/api/admin/test", **kwargs: Any):
        super().__init__(base_url, **kwargs)
        self.path = path

    async def generate(self, prompt: str, settings: SettingsRecord) -> RemoteResponse:
        return await self._request("POST", self.path, {"prompt": prompt, "settings": settings.to_dict()})
