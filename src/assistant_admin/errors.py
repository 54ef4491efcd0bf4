from __future__ import annotations

"""Error taxonomy shared by the settings store, test invoker and console."""


class AdminConsoleError(Exception):
    """Base class for all console errors."""


class ValidationError(AdminConsoleError):
    """Malformed or empty user input; raised before any network call."""


class RemoteRejected(AdminConsoleError):
    """The remote side answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{status_code} {reason}".strip())


class TransportFailure(AdminConsoleError):
    """No response was obtained (DNS, connection refused, transport timeout)."""


class CacheUnavailable(AdminConsoleError):
    """The local key-value store cannot be read or written."""


class AccessDenied(AdminConsoleError):
    """The access gate is closed."""
