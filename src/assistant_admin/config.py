from __future__ import annotations

"""Environment driven configuration for the admin console."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def _env_float(name: str, default: float | None) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    if value.strip().lower() == "none":
        return None
    return float(value)


@dataclass
class ConsoleConfig:
    """Runtime configuration; every field has a development friendly default."""

    api_base_url: str = "http://localhost:3000"
    settings_path: str = "/api/admin/settings"
    test_path: str = "/api/admin/test"
    cache_file: str = "~/.assistant_admin/cache.json"
    request_timeout: float | None = 60.0  # handed to the transport; None = no timeout
    message_ttl: float = 3.0  # seconds a success message stays visible
    exclusive_saves: bool = False
    exclusive_tests: bool = False
    validate_before_save: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        d = cls()
        return cls(
            api_base_url=os.getenv("ADMIN_API_BASE_URL", d.api_base_url),
            settings_path=os.getenv("ADMIN_SETTINGS_PATH", d.settings_path),
            test_path=os.getenv("ADMIN_TEST_PATH", d.test_path),
            cache_file=os.getenv("ADMIN_CACHE_FILE", d.cache_file),
            request_timeout=_env_float("ADMIN_REQUEST_TIMEOUT", d.request_timeout),
            message_ttl=_env_float("ADMIN_MESSAGE_TTL", d.message_ttl),
            exclusive_saves=_env_bool("ADMIN_EXCLUSIVE_SAVES", d.exclusive_saves),
            exclusive_tests=_env_bool("ADMIN_EXCLUSIVE_TESTS", d.exclusive_tests),
            validate_before_save=_env_bool("ADMIN_VALIDATE_BEFORE_SAVE", d.validate_before_save),
            log_level=os.getenv("LOG_LEVEL", d.log_level).upper(),
            host=os.getenv("ADMIN_HOST", d.host),
            port=int(os.getenv("ADMIN_PORT", str(d.port))),
        )


def load_config(env_file: str | None = ".env") -> ConsoleConfig:
    """Load `.env` (without overriding real env vars) and build the config."""
    if env_file:
        load_dotenv(env_file, override=False)
    return ConsoleConfig.from_env()
