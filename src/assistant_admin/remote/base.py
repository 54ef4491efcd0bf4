from __future__ import annotations

"""Interfaces for the two remote collaborators.

The settings authority owns the canonical record on the server; the test
backend runs a single generation with an ad-hoc prompt. Both return a
`RemoteResponse` for any HTTP answer (success or not) and raise
`TransportFailure` only when no answer was obtained at all.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..errors import RemoteRejected
from ..settings import SettingsRecord


@dataclass
class RemoteResponse:
    status_code: int
    reason: str = ""
    body: Any = None
    has_body: bool = False  # body holds parsed JSON
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise RemoteRejected(self.status_code, self.reason)


class SettingsAuthority(ABC):
    """Remote system of record for the settings."""

    @abstractmethod
    async def fetch(self) -> RemoteResponse:
        """GET the current settings (a partial record is fine)."""
        ...

    @abstractmethod
    async def persist(self, record: SettingsRecord) -> RemoteResponse:
        """POST the full record; the answer may echo the stored record."""
        ...


class TestBackend(ABC):
    """Generation backend used for one-shot live tests."""

    __test__ = False  # not a pytest test class

    @abstractmethod
    async def generate(self, prompt: str, settings: SettingsRecord) -> RemoteResponse:
        ...
