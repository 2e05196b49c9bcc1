"""Logical path to backend object key translation."""

from __future__ import annotations

import posixpath


def full_path(root: str, sub_path: str) -> str:
    """Join ``sub_path`` under ``root`` as an absolute object key.

    Redundant separators collapse and ``..`` segments resolve inside the
    sub path before joining, so the result always stays under ``root``.
    """
    root_key = _absolute(root)
    sub_key = _absolute(sub_path)
    if root_key == "/":
        return sub_key
    if sub_key == "/":
        return root_key
    return root_key + sub_key


def parent_key(key: str) -> str:
    """Return the folder key that holds ``key``."""
    return posixpath.dirname(_absolute(key))


def child_path(parent: str, name: str) -> str:
    """Return the logical path of ``name`` directly under ``parent``."""
    return f"{parent.rstrip('/')}/{name}"


def _absolute(path: str) -> str:
    # normpath keeps a leading "//", so strip before re-rooting.
    return posixpath.normpath("/" + path.lstrip("/"))
