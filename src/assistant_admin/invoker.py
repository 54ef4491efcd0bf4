from __future__ import annotations

"""One-shot live test of the current settings against the generation backend."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import RemoteRejected, TransportFailure, ValidationError
from .remote.base import TestBackend
from .settings import SettingsRecord
from .utils.formatter import extract_output, response_payload

logger = logging.getLogger(__name__)

ERR_EMPTY_PROMPT = "Test prompt cannot be empty."
ERR_TEST_NETWORK = "Network error while running test."
ERR_TEST_BUSY = "A test is already running."


class TestStatus(str, Enum):
    __test__ = False

    OK = "ok"
    REJECTED = "rejected"
    NETWORK_ERROR = "network_error"
    BUSY = "busy"


@dataclass
class TestOutcome:
    __test__ = False

    status: TestStatus
    output: Optional[str] = None
    http_status: Optional[int] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is TestStatus.OK

    def to_dict(self):
        return {
            "status": self.status.value,
            "output": self.output,
            "httpStatus": self.http_status,
            "error": self.error,
        }


class TestInvoker:
    """Issues a single, unretried test request per call.

    Calls are independent; when several overlap, each resolves on its own and
    the caller decides what to display (last to complete wins in the console).
    With ``exclusive=True`` a call made while another is pending returns a
    BUSY outcome instead.
    """

    __test__ = False

    def __init__(self, backend: TestBackend, exclusive: bool = False):
        self.backend = backend
        self.exclusive = exclusive
        self._pending = 0

    @property
    def running(self) -> bool:
        return self._pending > 0

    async def run_test(self, prompt: str, settings: SettingsRecord) -> TestOutcome:
        if not prompt or not prompt.strip():
            raise ValidationError(ERR_EMPTY_PROMPT)
        if self.exclusive and self.running:
            return TestOutcome(TestStatus.BUSY, error=ERR_TEST_BUSY)

        self._pending += 1
        try:
            resp = await self.backend.generate(prompt, settings)
            resp.raise_for_status()
        except RemoteRejected as exc:
            return TestOutcome(TestStatus.REJECTED, http_status=exc.status_code, error=f"Test failed: {exc}")
        except TransportFailure as exc:
            logger.warning("[test] network failure: %s", exc)
            return TestOutcome(TestStatus.NETWORK_ERROR, error=ERR_TEST_NETWORK)
        finally:
            self._pending -= 1

        output = extract_output(response_payload(resp.has_body, resp.body, resp.text))
        logger.debug("[test] model=%s output_chars=%d", settings.model, len(output))
        return TestOutcome(TestStatus.OK, output=output, http_status=resp.status_code)
