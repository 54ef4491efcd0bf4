from __future__ import annotations

"""Admin console: the access gate, settings store and test invoker wired
together with the transient state a front-end displays.

Success messages expire after ``message_ttl`` seconds; errors stay until the
next operation or `dismiss_error`. Logging out drops the store (and with it
the draft) and bumps a session generation so results of calls that were still
in flight are discarded when they resolve.
"""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import AccessDenied, ValidationError
from .gate import AccessGate
from .invoker import TestInvoker, TestOutcome
from .settings import SettingsRecord
from .store import MSG_RESET, LoadResult, SaveOutcome, SettingsStore

logger = logging.getLogger(__name__)

MSG_LOGGED_IN = "Logged in (development only)."
ERR_BAD_LOGIN = "Invalid username or password."


class AdminConsole:
    def __init__(
        self,
        gate: AccessGate,
        store_factory: Callable[[], SettingsStore],
        invoker: TestInvoker,
        message_ttl: float | None = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gate = gate
        self.store_factory = store_factory
        self.invoker = invoker
        self.message_ttl = message_ttl
        self.clock = clock

        self.store: Optional[SettingsStore] = None
        self.error = ""
        self.test_prompt = ""
        self.test_result: Optional[str] = None
        self._message = ""
        self._message_expires: Optional[float] = None
        self._loading = 0
        self._generation = 0

    # ------------------------------------------------------------------
    # Transient state
    # ------------------------------------------------------------------
    @property
    def message(self) -> str:
        if self._message and self._message_expires is not None and self.clock() >= self._message_expires:
            self._message = ""
            self._message_expires = None
        return self._message

    def flash(self, message: str) -> None:
        self._message = message
        self._message_expires = None if self.message_ttl is None else self.clock() + self.message_ttl

    def dismiss_error(self) -> None:
        self.error = ""

    @property
    def loading(self) -> bool:
        return self._loading > 0

    @property
    def draft(self) -> Optional[SettingsRecord]:
        return self.store.draft if self.store else None

    def require_store(self) -> SettingsStore:
        if not self.gate.is_open or self.store is None:
            raise AccessDenied("Login required.")
        return self.store

    # ------------------------------------------------------------------
    # Gate
    # ------------------------------------------------------------------
    async def resume(self) -> Optional[LoadResult]:
        """Pick up a session whose flag is already open (e.g. after a restart)."""
        if self.gate.is_open and self.store is None:
            return await self._start()
        return None

    async def login(self, username: str, password: str) -> bool:
        self.error = ""
        if not self.gate.open(username, password):
            self.error = ERR_BAD_LOGIN
            return False
        self.flash(MSG_LOGGED_IN)
        await self._start()
        return True

    def logout(self) -> None:
        self.gate.close()
        self._generation += 1
        self.store = None
        self.error = ""
        self._message = ""
        self._message_expires = None
        self.test_prompt = ""
        self.test_result = None

    async def _start(self) -> LoadResult:
        self._generation += 1
        self.store = self.store_factory()
        return await self.reload()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    async def reload(self) -> LoadResult:
        store = self.require_store()
        self.error = ""
        self._loading += 1
        try:
            return await store.load()
        finally:
            self._loading -= 1

    def edit(self, edits: Mapping[str, Any]) -> SettingsRecord:
        return self.require_store().edit(edits)

    def reset(self) -> SettingsRecord:
        record = self.require_store().reset()
        self.flash(MSG_RESET)
        return record

    async def save(self) -> SaveOutcome:
        store = self.require_store()
        generation = self._generation
        self.error = ""
        try:
            outcome = await store.save()
        except ValidationError as exc:
            self.error = str(exc)
            raise
        if generation != self._generation:
            logger.debug("[console] save resolved after logout; ignored")
            return outcome
        if outcome.message:
            self.flash(outcome.message)
        if outcome.error:
            self.error = outcome.error
        return outcome

    # ------------------------------------------------------------------
    # Live test
    # ------------------------------------------------------------------
    async def run_test(self, prompt: str | None = None) -> TestOutcome:
        store = self.require_store()
        if prompt is not None:
            self.test_prompt = prompt
        generation = self._generation
        self.error = ""
        try:
            outcome = await self.invoker.run_test(self.test_prompt, store.draft.copy())
        except ValidationError as exc:
            self.error = str(exc)
            raise
        if generation != self._generation:
            logger.debug("[console] test resolved after logout; ignored")
            return outcome
        if outcome.ok:
            self.test_result = outcome.output
        else:
            self.error = outcome.error
        return outcome

    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        store = self.store
        return {
            "authed": self.gate.is_open,
            "loading": self.loading,
            "saving": bool(store and store.saving),
            "testing": self.invoker.running,
            "settings": store.draft.to_dict() if store else None,
            "source": store.source.value if store else None,
            "dirty": bool(store and store.dirty),
            "message": self.message,
            "error": self.error,
            "testPrompt": self.test_prompt,
            "testResult": self.test_result,
        }
