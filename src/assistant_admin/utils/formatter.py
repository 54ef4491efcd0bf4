from __future__ import annotations

"""Turn a test backend response body into display text."""

import json
from typing import Any


def extract_output(body: Any) -> str:
    """Pick the text to display for a successful test call.

    Exactly one rule applies, checked in order: an object with a string
    ``output`` field yields that field, a bare string is shown verbatim, and
    anything else is rendered as indented JSON.
    """
    if isinstance(body, dict) and isinstance(body.get("output"), str):
        return body["output"]
    if isinstance(body, str):
        return body
    return json.dumps(body, indent=2, ensure_ascii=False, default=str)


def response_payload(has_body: bool, body: Any, text: str) -> Any:
    """Parsed JSON when available, otherwise the raw text (None when empty)."""
    if has_body:
        return body
    return text if text.strip() else None
