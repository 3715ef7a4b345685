"""
Field validation helpers shared by the user and event handlers.
"""

from __future__ import annotations

from typing import Any, Optional

MIN_PASSWORD_LENGTH = 6
UNKNOWN_OWNER_NAME = "Unknown"


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_email(value: Any) -> bool:
    """Deliberately weak check: a non-blank string containing "@"."""
    return is_non_empty_string(value) and "@" in value


def is_valid_password(value: Any) -> bool:
    return isinstance(value, str) and len(value) >= MIN_PASSWORD_LENGTH


def clean_optional_string(value: Any) -> Optional[str]:
    """Return the trimmed string, or None for anything absent, blank or non-textual."""
    if is_non_empty_string(value):
        return value.strip()
    return None


def parse_limit(raw: Any, default: int, maximum: int) -> int:
    """
    Interpret a ``limit`` query parameter.

    Missing, unparseable or non-positive values fall back to ``default``;
    anything larger than ``maximum`` is capped.
    """
    if raw is None:
        return default
    try:
        limit = int(str(raw).strip())
    except ValueError:
        return default
    if limit <= 0:
        return default
    return min(limit, maximum)


def owner_display_name(
    profile_name: Any, identity_name: Any, email: Any
) -> str:
    """
    Pick the name stored on an event for its owner.

    Preference order: stored profile name, identity provider name, the local
    part of the email address, then a fixed placeholder.
    """
    for candidate in (profile_name, identity_name):
        if is_non_empty_string(candidate):
            return candidate.strip()
    if is_non_empty_string(email):
        local_part = email.strip().split("@", 1)[0].strip()
        if local_part:
            return local_part
    return UNKNOWN_OWNER_NAME
