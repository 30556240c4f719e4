"""Small helpers for building text fixtures."""

from __future__ import annotations


def unlines(*args: str) -> bytes:
    """Join lines with newlines, ending with a trailing newline, as UTF-8 bytes."""
    return "".join(f"{line}\n" for line in args).encode("utf-8")