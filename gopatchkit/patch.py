"""Split the unified diff of a change into its before and after versions."""

from __future__ import annotations

from dataclasses import dataclass, field

from .section import Line, LinePos


@dataclass(kw_only=True)
class PatchVersion:
    """One side of a patch: its contents and where each line came from."""

    contents: bytes = b""
    lines: list[LinePos] = field(default_factory=list)


def split_patch(patch: list[Line]) -> tuple[PatchVersion, PatchVersion]:
    """Split a patch section into its before and after versions.

    Lines starting with "-" go only to the before version, lines starting
    with "+" only to the after version, and all others to both.
    """
    minus = bytearray()
    plus = bytearray()
    minus_lines: list[LinePos] = []
    plus_lines: list[LinePos] = []

    for line in patch:
        text = line.text
        start = line.start_pos
        to_minus = to_plus = True
        if text.startswith(b"-"):
            to_plus = False
            text, start = text[1:], start + 1
        elif text.startswith(b"+"):
            to_minus = False
            text, start = text[1:], start + 1

        if to_minus:
            minus_lines.append(LinePos(offset=len(minus), pos=start))
            minus += text + b"\n"
        if to_plus:
            plus_lines.append(LinePos(offset=len(plus), pos=start))
            plus += text + b"\n"

    return (
        PatchVersion(contents=bytes(minus), lines=minus_lines),
        PatchVersion(contents=bytes(plus), lines=plus_lines),
    )