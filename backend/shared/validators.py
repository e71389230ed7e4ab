"""Shared validation helpers for identifiers and service settings."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

# Store-assigned ids: 12 bytes rendered as 24 hex characters
_OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")


def is_valid_object_id(value: object) -> bool:
    """Return True when value is a 24-character hex id string."""
    return isinstance(value, str) and _OBJECT_ID_RE.fullmatch(value) is not None


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a string list from an environment variable or config value.

    Accepts a list of strings, a JSON array string ('["a","b"]') or a
    comma-separated string ('a,b'). Raises ValueError for blank values or
    malformed JSON, and for empty lists unless allow_empty is set.
    """
    if isinstance(value, list):
        if not allow_empty and not value:
            raise ValueError("String list value must not be empty")
        return value

    stripped = value.strip()
    if not stripped:
        raise ValueError("String list value must not be empty")

    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
    else:
        parsed = [item.strip() for item in stripped.split(",") if item.strip()]

    if not allow_empty and not parsed:
        raise ValueError("String list value must not be empty")
    return parsed


_STRING_LIST_FIELDS = {"cors_origins"}


class StringListEnvSettingsSource(EnvSettingsSource):
    """Env settings source that hands string-list fields to validators unparsed.

    pydantic-settings JSON-decodes list-typed env vars before validators run,
    which rejects the comma-separated form. parse_string_list handles both.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in _STRING_LIST_FIELDS and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
