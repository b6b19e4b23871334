"""Object key helpers shared by the storage backends."""

from __future__ import annotations

import posixpath


class KeyOutsidePrefixError(ValueError):
    """Raised when a path normalizes to a key outside the configured prefix."""


def clean_prefix(prefix: str | None) -> str:
    """Trim leading and trailing slashes from a configured prefix and normalize it."""
    cleaned = join_path((prefix or "").strip("/"))
    return "" if cleaned == "." else cleaned


def join_path(*parts: str) -> str:
    """Join key segments with ``/`` and normalize the result.

    Empty segments are skipped; joining nothing but empty segments yields an
    empty string rather than ``"."``. A run of leading slashes collapses to one.
    """
    segments = [part for part in parts if part]
    if not segments:
        return ""
    joined = posixpath.normpath("/".join(segments))
    # normpath keeps exactly two leading slashes
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    return joined


def resolve_key(prefix: str, path: str) -> str:
    """Join ``path`` under ``prefix``, rejecting paths that climb out of it.

    The result is either ``prefix`` itself or a key below ``prefix/``. With an
    empty prefix, keys that start with ``..`` are rejected.

    Raises:
        KeyOutsidePrefixError: If the normalized key leaves the prefix.
    """
    key = join_path(prefix, path)
    if prefix:
        inside = key == prefix or key.startswith(f"{prefix}/")
    else:
        inside = key != ".." and not key.startswith("../")
    if not inside:
        raise KeyOutsidePrefixError(
            f"path {path!r} resolves outside the prefix {prefix!r}"
        )
    return key


def listing_prefix(prefix: str, path: str) -> str:
    """Provider prefix used to list ``path`` under ``prefix``.

    A trailing ``/`` on ``path`` is kept, and listing the prefix itself sends
    ``prefix/``. A partial segment such as ``te`` is sent as is.
    """
    key = resolve_key(prefix, path)
    if key and (key == prefix or path.endswith("/")):
        return f"{key.rstrip('/')}/"
    return key


def relative_path(prefix: str, listed: str, key: str) -> str:
    """Path of a listed ``key`` relative to the listing prefix ``listed``.

    Keys that are not below ``listed/`` are made relative to ``prefix``
    instead.
    """
    for base in (listed.rstrip("/"), prefix):
        if base and key.startswith(f"{base}/"):
            return key[len(base) + 1 :]
    return key
