"""Folding field names into a ``Vary`` header value."""
from __future__ import annotations

import re

# RFC 7230 token
_FIELD_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _parse(header: str) -> list[str]:
    return [item.strip() for item in header.split(",") if item.strip()]


def append_vary(current: str | None, field: str) -> str:
    """Return ``current`` with ``field`` appended unless it is already listed.

    Names compare case-insensitively and ``*`` absorbs every other name.
    """
    if not _FIELD_NAME.match(field):
        raise ValueError(f"Invalid Vary field name: {field!r}")

    values = _parse(current or "")
    if "*" in values:
        return "*"
    if field == "*":
        return "*"

    if field.lower() in (value.lower() for value in values):
        return ", ".join(values)
    return ", ".join([*values, field])


def vary(response, field: str) -> None:
    """Augment the ``Vary`` header of ``response`` (anything with get/set_header)."""
    response.set_header("Vary", append_vary(response.get_header("Vary"), field))
