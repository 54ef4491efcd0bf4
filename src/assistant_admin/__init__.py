from __future__ import annotations

"""Client-side settings manager for an AI assistant deployment."""

from .config import ConsoleConfig, load_config
from .console import AdminConsole
from .errors import (
    AccessDenied,
    AdminConsoleError,
    CacheUnavailable,
    RemoteRejected,
    TransportFailure,
    ValidationError,
)
from .gate import AccessGate, CredentialVerifier, DevCredentialVerifier
from .invoker import TestInvoker, TestOutcome, TestStatus
from .remote import SettingsAuthority, TestBackend, get_remote_clients
from .settings import DEFAULT_SETTINGS, SettingsRecord, coerce_field, normalize_settings, validate_settings
from .storage import JsonFileStore, KeyValueStore, LocalCache, MemoryKeyValueStore, SessionFlag
from .store import LoadResult, SaveOutcome, SaveStatus, SettingsSource, SettingsStore

__all__ = [
    "build_console",
    "AdminConsole",
    "ConsoleConfig",
    "load_config",
    "AccessDenied",
    "AdminConsoleError",
    "CacheUnavailable",
    "RemoteRejected",
    "TransportFailure",
    "ValidationError",
    "AccessGate",
    "CredentialVerifier",
    "DevCredentialVerifier",
    "TestInvoker",
    "TestOutcome",
    "TestStatus",
    "SettingsAuthority",
    "TestBackend",
    "get_remote_clients",
    "DEFAULT_SETTINGS",
    "SettingsRecord",
    "coerce_field",
    "normalize_settings",
    "validate_settings",
    "JsonFileStore",
    "KeyValueStore",
    "LocalCache",
    "MemoryKeyValueStore",
    "SessionFlag",
    "LoadResult",
    "SaveOutcome",
    "SaveStatus",
    "SettingsSource",
    "SettingsStore",
]


def build_console(
    config: ConsoleConfig | None = None,
    authority: SettingsAuthority | None = None,
    backend: TestBackend | None = None,
    cache_store: KeyValueStore | None = None,
    session_store: KeyValueStore | None = None,
    verifier: CredentialVerifier | None = None,
) -> AdminConsole:
    """Wire an `AdminConsole` from config, letting callers swap any collaborator."""
    config = config or ConsoleConfig()
    if authority is None or backend is None:
        http_authority, http_backend = get_remote_clients(config)
        authority = authority or http_authority
        backend = backend or http_backend

    cache = LocalCache(cache_store or JsonFileStore(config.cache_file))
    gate = AccessGate(SessionFlag(session_store or MemoryKeyValueStore()), verifier)

    def store_factory() -> SettingsStore:
        return SettingsStore(
            authority,
            cache,
            exclusive_saves=config.exclusive_saves,
            validate_before_save=config.validate_before_save,
        )

    return AdminConsole(
        gate,
        store_factory,
        TestInvoker(backend, exclusive=config.exclusive_tests),
        message_ttl=config.message_ttl,
    )
