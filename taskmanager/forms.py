"""
Form Decoding — application/x-www-form-urlencoded
===================================================
Decodes form fields from the query string and, for URL-encoded POSTs,
from the request body. Body fields come first, so for a key present in
both places the body value wins.

Unlike ``urllib.parse.parse_qsl`` on its own, malformed input is an
error here rather than being passed through: a stray ``%``, an escape
that is not valid UTF-8, a ``;`` separator, or an oversized body all
raise ``FormError``.
"""

from __future__ import annotations

import re
import urllib.parse
from typing import Optional

FORM_URLENCODED = "application/x-www-form-urlencoded"
DEFAULT_MAX_FORM_BYTES = 10 * 1024 * 1024

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class FormError(ValueError):
    """Raised when form data cannot be decoded."""


class FormData:
    """Decoded form fields, multi-valued, in arrival order."""

    def __init__(self, values: Optional[dict[str, list[str]]] = None):
        self._values: dict[str, list[str]] = values or {}

    def get(self, key: str, default: str = "") -> str:
        """First value for ``key``; ``default`` if the field is absent."""
        found = self._values.get(key)
        return found[0] if found else default

    def get_all(self, key: str) -> list[str]:
        return list(self._values.get(key, []))

    def __repr__(self) -> str:
        return f"FormData({self._values!r})"


def parse_urlencoded(raw: str) -> dict[str, list[str]]:
    """Decode one URL-encoded string into ``{key: [values...]}``.

    Raises:
        FormError: On malformed escapes, invalid UTF-8, or ``;`` separators.
    """
    if not raw:
        return {}
    if ";" in raw:
        raise FormError("invalid semicolon separator")
    bad = _BAD_ESCAPE.search(raw)
    if bad:
        raise FormError(f"invalid URL escape {raw[bad.start():bad.start() + 3]!r}")

    try:
        pairs = urllib.parse.parse_qsl(
            raw, keep_blank_values=True, encoding="utf-8", errors="strict",
        )
    except (UnicodeDecodeError, ValueError) as e:
        raise FormError(str(e)) from e

    values: dict[str, list[str]] = {}
    for key, value in pairs:
        values.setdefault(key, []).append(value)
    return values


def media_type(content_type: Optional[str]) -> str:
    """``"Application/X-WWW-Form-Urlencoded; charset=utf-8"`` -> bare lowercase type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def decode_form(query: str, body: Optional[bytes], content_type: Optional[str],
                max_bytes: int = DEFAULT_MAX_FORM_BYTES) -> FormData:
    """Merge body fields (URL-encoded bodies only) with query-string fields.

    Args:
        query: Raw query string, without the leading "?".
        body: Raw request body, or None when there is none.
        content_type: The request's Content-Type header value.
        max_bytes: Largest URL-encoded body accepted.

    Raises:
        FormError: If either part is malformed or the body is too large.
    """
    merged: dict[str, list[str]] = {}

    if body and media_type(content_type) == FORM_URLENCODED:
        if len(body) > max_bytes:
            raise FormError(f"form body too large ({len(body)} > {max_bytes} bytes)")
        try:
            raw_body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormError("form body is not valid UTF-8") from e
        for key, values in parse_urlencoded(raw_body).items():
            merged.setdefault(key, []).extend(values)

    for key, values in parse_urlencoded(query).items():
        merged.setdefault(key, []).extend(values)

    return FormData(merged)
