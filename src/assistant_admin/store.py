from __future__ import annotations

"""Settings store: owns the draft and runs the tiered load/save algorithm.

Load order is remote authority -> local cache -> compiled defaults, first hit
wins, and a load never raises. A save pushes the draft to the authority and
mirrors the accepted record into the cache; when the authority cannot take it
the draft is kept locally instead and the outcome says so.

Concurrent calls are not serialized: whichever save resolves last decides the
draft. Pass ``exclusive_saves=True`` to refuse a save while another one is in
flight.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional

from .errors import RemoteRejected, TransportFailure, ValidationError
from .remote.base import SettingsAuthority
from .settings import (
    DEFAULT_SETTINGS,
    SettingsRecord,
    apply_edits,
    normalize_settings,
    validate_settings,
)
from .storage import LocalCache

logger = logging.getLogger(__name__)

MSG_SAVED = "Settings saved."
MSG_SAVED_LOCAL_SERVER = "Saved to local cache (server error)."
MSG_SAVED_LOCAL_NETWORK = "Saved to local cache (network error)."
MSG_RESET = "Restored defaults (local only until saved)."
ERR_SAVE_NETWORK = "Network error while saving settings."
ERR_SAVE_BUSY = "A save is already in progress."


class SettingsSource(str, Enum):
    REMOTE = "remote"
    CACHE = "cache"
    DEFAULT = "default"
    LOCAL_EDIT = "local"  # edited or reset, not yet saved


class SaveStatus(str, Enum):
    SAVED = "saved"
    LOCAL_SERVER_ERROR = "local_server_error"
    LOCAL_NETWORK_ERROR = "local_network_error"
    BUSY = "busy"


@dataclass
class LoadResult:
    record: SettingsRecord
    source: SettingsSource

    @property
    def from_remote(self) -> bool:
        return self.source is SettingsSource.REMOTE


@dataclass
class SaveOutcome:
    status: SaveStatus
    record: SettingsRecord
    http_status: Optional[int] = None
    message: str = ""
    error: str = ""
    cached: bool = False  # whether the local cache now holds `record`

    @property
    def ok(self) -> bool:
        return self.status is SaveStatus.SAVED

    def to_dict(self):
        return {
            "status": self.status.value,
            "settings": self.record.to_dict(),
            "httpStatus": self.http_status,
            "message": self.message,
            "error": self.error,
            "cached": self.cached,
        }


@dataclass
class _Tier:
    source: SettingsSource
    fetch: Callable[[], Any]  # awaitable returning a record or None
    refresh: bool = False


class SettingsStore:
    def __init__(
        self,
        authority: SettingsAuthority,
        cache: LocalCache,
        exclusive_saves: bool = False,
        validate_before_save: bool = False,
    ):
        self.authority = authority
        self.cache = cache
        self.exclusive_saves = exclusive_saves
        self.validate_before_save = validate_before_save
        self.draft: SettingsRecord = DEFAULT_SETTINGS.copy()
        self.source: SettingsSource = SettingsSource.DEFAULT
        self._pending_saves = 0

    @property
    def dirty(self) -> bool:
        return self.source is SettingsSource.LOCAL_EDIT

    @property
    def saving(self) -> bool:
        return self._pending_saves > 0

    def _adopt(self, record: SettingsRecord, source: SettingsSource) -> SettingsRecord:
        self.draft = record
        self.source = source
        return record

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------
    async def _from_remote(self) -> SettingsRecord | None:
        try:
            resp = await self.authority.fetch()
            resp.raise_for_status()
        except (RemoteRejected, TransportFailure) as exc:
            logger.info("[load] remote unavailable (%s), falling back", exc)
            return None
        if not resp.has_body:
            logger.info("[load] remote body was not JSON, falling back")
            return None
        return normalize_settings(resp.body)

    async def _from_cache(self) -> SettingsRecord | None:
        data = self.cache.read()
        if data is None:
            return None
        return normalize_settings(data)

    async def _from_defaults(self) -> SettingsRecord:
        return DEFAULT_SETTINGS.copy()

    def _tiers(self) -> List[_Tier]:
        return [
            _Tier(SettingsSource.REMOTE, self._from_remote, refresh=True),
            _Tier(SettingsSource.CACHE, self._from_cache),
            _Tier(SettingsSource.DEFAULT, self._from_defaults),
        ]

    async def load(self) -> LoadResult:
        """Resolve the draft from the first tier that yields a record."""
        for tier in self._tiers():
            record = await tier.fetch()
            if record is None:
                continue
            if tier.refresh:
                self.cache.refresh_cache(record)
            self._adopt(record, tier.source)
            logger.info("[load] settings loaded from %s", tier.source.value)
            return LoadResult(record=record, source=tier.source)
        raise AssertionError("default tier always yields a record")  # pragma: no cover

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------
    def _keep_locally(self, sent: SettingsRecord, status: SaveStatus, message: str, error: str,
                      http_status: Optional[int] = None) -> SaveOutcome:
        cached = self.cache.best_effort_persist(sent)
        self._adopt(sent, SettingsSource.CACHE if cached else SettingsSource.LOCAL_EDIT)
        return SaveOutcome(
            status,
            record=sent,
            http_status=http_status,
            message=message if cached else "",
            error=error,
            cached=cached,
        )

    async def save(self, draft: SettingsRecord | None = None) -> SaveOutcome:
        """Push the draft to the authority, falling back to the local cache."""
        sent = (draft if draft is not None else self.draft).copy()

        if self.exclusive_saves and self.saving:
            return SaveOutcome(SaveStatus.BUSY, record=self.draft, error=ERR_SAVE_BUSY)

        problems = validate_settings(sent)
        if problems:
            if self.validate_before_save:
                raise ValidationError("Invalid settings: " + "; ".join(problems))
            # sent as-is; range checks are opt-in
            logger.warning("[save] sending out-of-range settings: %s", "; ".join(problems))

        self._pending_saves += 1
        try:
            resp = await self.authority.persist(sent)
            resp.raise_for_status()
        except RemoteRejected as exc:
            return self._keep_locally(sent, SaveStatus.LOCAL_SERVER_ERROR, MSG_SAVED_LOCAL_SERVER,
                                      f"Save failed: {exc}", http_status=exc.status_code)
        except TransportFailure as exc:
            logger.warning("[save] network failure: %s", exc)
            return self._keep_locally(sent, SaveStatus.LOCAL_NETWORK_ERROR, MSG_SAVED_LOCAL_NETWORK,
                                      ERR_SAVE_NETWORK)
        finally:
            self._pending_saves -= 1

        echoed = resp.body if resp.has_body and isinstance(resp.body, Mapping) else sent
        record = normalize_settings(echoed)
        cached = self.cache.refresh_cache(record)
        self._adopt(record, SettingsSource.REMOTE)
        logger.info("[save] settings saved (model=%s)", record.model)
        return SaveOutcome(SaveStatus.SAVED, record=record, http_status=resp.status_code,
                           message=MSG_SAVED, cached=cached)

    # ------------------------------------------------------------------
    # Local edits
    # ------------------------------------------------------------------
    def reset(self) -> SettingsRecord:
        """Replace the draft with the defaults; nothing is persisted."""
        return self._adopt(DEFAULT_SETTINGS.copy(), SettingsSource.LOCAL_EDIT)

    def edit(self, edits: Mapping[str, Any]) -> SettingsRecord:
        """Apply coerced form edits (wire or attribute names) to the draft."""
        return self._adopt(apply_edits(self.draft, edits), SettingsSource.LOCAL_EDIT)
