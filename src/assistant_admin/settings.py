from __future__ import annotations

"""Settings record plus the normalize-on-read and edit coercion rules.

Every record that enters the process from the remote authority or the local
cache passes through `normalize_settings`, so a materialized record is always
fully typed. Form edits go through `coerce_field`, which only coerces types and
performs no range validation (see `validate_settings`).
"""

import math
import re
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Mapping

from .errors import ValidationError


@dataclass
class SettingsRecord:
    """Model behaviour settings controlled from the admin console."""

    model: str = "gpt-4o-mini"
    system_prompt: str = (
        "You are an internal assistant. Answer concisely and follow safety and "
        "privacy policies. Do not reveal secrets."
    )
    temperature: float = 0.2
    max_tokens: int = 1024
    retrieval_depth: int = 5
    rate_limit: int = 60  # requests per minute

    def to_dict(self) -> Dict[str, Any]:
        """Return the record keyed by its JSON wire names."""
        data = asdict(self)
        return {WIRE_NAMES[k]: v for k, v in data.items()}

    def copy(self) -> "SettingsRecord":
        return replace(self)


# attribute name -> JSON wire name
WIRE_NAMES: Dict[str, str] = {
    "model": "model",
    "system_prompt": "systemPrompt",
    "temperature": "temperature",
    "max_tokens": "maxTokens",
    "retrieval_depth": "retrievalDepth",
    "rate_limit": "rateLimit",
}
ATTR_NAMES: Dict[str, str] = {v: k for k, v in WIRE_NAMES.items()}

DEFAULT_SETTINGS = SettingsRecord()


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid numeric setting
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite(value: Any) -> bool:
    # ints too large for a float overflow instead of reporting inf
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _as_text(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _as_float(value: Any, default: float) -> float:
    if _is_number(value) and _finite(value):
        return float(value)
    return default


def _as_int(value: Any, default: int) -> int:
    if not _is_number(value):
        return default
    if isinstance(value, int):
        return value
    if value.is_integer():
        return int(value)
    return default


def normalize_settings(obj: Any) -> SettingsRecord:
    """Coerce any externally supplied value into a fully typed record.

    Fields that are missing or carry the wrong primitive type are taken from
    DEFAULT_SETTINGS. Anything that is not a mapping yields the defaults.
    """
    if isinstance(obj, SettingsRecord):
        obj = obj.to_dict()
    if not isinstance(obj, Mapping):
        return DEFAULT_SETTINGS.copy()

    d = DEFAULT_SETTINGS
    return SettingsRecord(
        model=_as_text(obj.get("model"), d.model),
        system_prompt=_as_text(obj.get("systemPrompt"), d.system_prompt),
        temperature=_as_float(obj.get("temperature"), d.temperature),
        max_tokens=_as_int(obj.get("maxTokens"), d.max_tokens),
        retrieval_depth=_as_int(obj.get("retrievalDepth"), d.retrieval_depth),
        rate_limit=_as_int(obj.get("rateLimit"), d.rate_limit),
    )


# ---------------------------------------------------------------------------
# Edit-time coercion
# ---------------------------------------------------------------------------

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_int_prefix(raw: Any) -> int | None:
    if _is_number(raw):
        if isinstance(raw, int):
            return raw
        return int(raw) if _finite(raw) else None
    match = _INT_PREFIX.match(str(raw))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:  # beyond the interpreter's int digit limit
        return None


def _parse_float_prefix(raw: Any) -> float | None:
    if _is_number(raw):
        return float(raw) if _finite(raw) else None
    match = _FLOAT_PREFIX.match(str(raw))
    if not match:
        return None
    value = float(match.group(1))
    return value if _finite(value) else None


# field -> (parser, fallback used when the parse fails or yields zero)
_NUMERIC_FIELDS = {
    "temperature": (_parse_float_prefix, 0.0),
    "max_tokens": (_parse_int_prefix, 1),
    "retrieval_depth": (_parse_int_prefix, 0),
    "rate_limit": (_parse_int_prefix, 1),
}


def resolve_field_name(name: str) -> str:
    """Map a wire or attribute name to the record attribute name."""
    if name in WIRE_NAMES:
        return name
    if name in ATTR_NAMES:
        return ATTR_NAMES[name]
    raise ValidationError(f"Unknown settings field: {name}")


def coerce_field(name: str, raw: Any) -> tuple[str, Any]:
    """Coerce raw form input for one field; returns (attribute, value)."""
    attr = resolve_field_name(name)
    if attr in ("model", "system_prompt"):
        return attr, "" if raw is None else str(raw)

    parser, fallback = _NUMERIC_FIELDS[attr]
    parsed = parser(raw)
    return attr, parsed if parsed else fallback


def apply_edits(record: SettingsRecord, edits: Mapping[str, Any]) -> SettingsRecord:
    """Return a copy of `record` with coerced edits applied."""
    changes = dict(coerce_field(name, raw) for name, raw in edits.items())
    return replace(record, **changes)


def validate_settings(record: SettingsRecord) -> List[str]:
    """Return human readable range problems; an empty list means in range."""
    problems: List[str] = []
    if not record.model.strip():
        problems.append("model must not be empty")
    if not 0 <= record.temperature <= 2:
        problems.append("temperature must be between 0 and 2")
    if record.max_tokens < 1:
        problems.append("maxTokens must be at least 1")
    if record.retrieval_depth < 0:
        problems.append("retrievalDepth must be at least 0")
    if record.rate_limit < 1:
        problems.append("rateLimit must be at least 1")
    return problems

