from __future__ import annotations

"""Access gate in front of the settings store.

DEVELOPMENT PLACEHOLDER, NOT A SECURITY BOUNDARY. The default verifier compares
against a fixed, publicly known credential pair and the "token" is a sentinel
string in a session store. Production deployments must inject a real
`CredentialVerifier`; do not harden this module in place.
"""

import logging
from abc import ABC, abstractmethod

from .storage import SessionFlag

logger = logging.getLogger(__name__)

DEV_USERNAME = "admin"
DEV_PASSWORD = "secret"


class CredentialVerifier(ABC):
    @abstractmethod
    def verify(self, username: str, password: str) -> bool:
        ...


class DevCredentialVerifier(CredentialVerifier):
    """Plain equality check against the development pair."""

    def __init__(self, username: str = DEV_USERNAME, password: str = DEV_PASSWORD):
        self.username = username
        self.password = password

    def verify(self, username: str, password: str) -> bool:
        return username == self.username and password == self.password


class AccessGate:
    """Closed/Open state mirrored into a session flag.

    The flag lets a freshly constructed gate resume an open session; the
    in-process state still opens when the session store refuses the write.
    """

    def __init__(self, flag: SessionFlag, verifier: CredentialVerifier | None = None):
        self.flag = flag
        self.verifier = verifier or DevCredentialVerifier()
        self._open = flag.is_set()

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self, username: str, password: str) -> bool:
        if not self.verifier.verify(username, password):
            logger.info("[gate] login rejected for user=%s", username)
            return False
        self.flag.set()
        self._open = True
        logger.info("[gate] opened (development login)")
        return True

    def close(self) -> None:
        self.flag.clear()
        self._open = False
        logger.info("[gate] closed")
