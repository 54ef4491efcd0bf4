from __future__ import annotations

"""Factory helpers for the remote collaborators."""

from typing import Tuple

from ..config import ConsoleConfig
from .base import RemoteResponse, SettingsAuthority, TestBackend
from .http_client import HttpSettingsAuthority, HttpTestBackend

__all__ = [
    "get_remote_clients",
    "RemoteResponse",
    "SettingsAuthority",
    "TestBackend",
    "HttpSettingsAuthority",
    "HttpTestBackend",
]


def get_remote_clients(config: ConsoleConfig) -> Tuple[SettingsAuthority, TestBackend]:
    """Return the settings authority and test backend described by `config`.

    No session is shared: requests run on worker threads and may overlap.
    """
    authority = HttpSettingsAuthority(
        config.api_base_url,
        path=config.settings_path,
        timeout=config.request_timeout,
    )
    backend = HttpTestBackend(
        config.api_base_url,
        path=config.test_path,
        timeout=config.request_timeout,
    )
    return authority, backend
