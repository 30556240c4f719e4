"""Go syntax tree helpers: import lookups and in-place position rewriting."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from .fileset import NO_POS, Pos


@dataclass(kw_only=True)
class Ident:
    """An identifier and the position at which it appears."""

    name: str
    name_pos: Pos = NO_POS
    obj: Any = None

    def __post_init__(self) -> None:
        self.name_pos = Pos(self.name_pos)


@dataclass(kw_only=True)
class BasicLit:
    """A literal of a basic type, such as a string."""

    value: str
    kind: str = "STRING"
    value_pos: Pos = NO_POS

    def __post_init__(self) -> None:
        self.value_pos = Pos(self.value_pos)


@dataclass(kw_only=True)
class ImportSpec:
    """A single import inside an import declaration."""

    doc: Any = None
    name: Ident | None = None
    path: BasicLit | None = None
    comment: Any = None
    end_pos: Pos = NO_POS

    def __post_init__(self) -> None:
        self.end_pos = Pos(self.end_pos)


@dataclass(kw_only=True)
class GoFile:
    """A parsed Go source file."""

    doc: Any = None
    package: Pos = NO_POS
    name: Ident | None = None
    decls: list = field(default_factory=list)
    imports: list = field(default_factory=list)
    comments: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.package = Pos(self.package)


_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE_RE = re.compile(
    r"""\\(?:([abfnrtv\\'"])|([0-7]{3})|x([0-9a-fA-F]{2})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8}))"""
)


def _unquote(literal: str) -> str:
    if len(literal) < 2 or literal[0] != literal[-1]:
        raise ValueError("invalid syntax")
    quote, body = literal[0], literal[1:-1]
    if quote == "`":
        if "`" in body:
            raise ValueError("invalid syntax")
        return body.replace("\r", "")
    if quote not in "\"'" or "\n" in body:
        raise ValueError("invalid syntax")

    pieces = []
    pos = 0
    while pos < len(body):
        ch = body[pos]
        if ch == quote:
            raise ValueError("invalid syntax")
        if ch != "\\":
            pieces.append(ch)
            pos += 1
            continue
        match = _ESCAPE_RE.match(body, pos)
        if match is None:
            raise ValueError("invalid syntax")
        simple, octal, hex2, short_u, long_u = match.groups()
        if simple is not None:
            if simple in "'\"" and simple != quote:
                raise ValueError("invalid syntax")
            pieces.append(_SIMPLE_ESCAPES[simple])
        elif octal is not None:
            value = int(octal, 8)
            if value > 0xFF:
                raise ValueError("invalid syntax")
            pieces.append(chr(value))
        elif hex2 is not None:
            pieces.append(chr(int(hex2, 16)))
        else:
            value = int(short_u or long_u, 16)
            if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise ValueError("invalid syntax")
            pieces.append(chr(value))
        pos = match.end()

    result = "".join(pieces)
    if quote == "'" and len(result) != 1:
        raise ValueError("invalid syntax")
    return result


def import_path(spec: ImportSpec | None) -> str:
    """Return the unquoted import path of an import."""
    if spec is None or spec.path is None:
        raise ValueError("ImportSpec and its Path must be non-nil")
    try:
        return _unquote(spec.path.value)
    except ValueError as exc:
        raise ValueError(f"invalid import path {spec.path.value!r}: {exc}") from exc


def import_name(spec: ImportSpec | None) -> str:
    """Return the name of a named import, or an empty string."""
    if spec is None:
        raise ValueError("ImportSpec must be non-nil")
    return spec.name.name if spec.name is not None else ""


def find_import_spec(f: GoFile | None, path: str) -> ImportSpec | None:
    """Return the import of the file with the given path, or None."""
    if f is None:
        raise ValueError("File must be non-nil")
    return next((spec for spec in f.imports if import_path(spec) == path), None)


_FILE_FIELDS = ("doc", "package", "name", "decls")


def transform_pos(node: Any, transform: Callable[[Pos], int]) -> None:
    """Replace, in place, every valid Pos in node and its descendants.

    Free-floating comments of a GoFile are not visited.
    """
    _transform(node, transform)


def offset_pos(node: Any, offset: int) -> None:
    """Shift, in place, every valid Pos in node and its descendants."""
    transform_pos(node, lambda pos: pos + offset)


def _transformed(value: Any, transform: Callable[[Pos], int]) -> Any:
    if isinstance(value, Pos):
        return Pos(transform(value)) if value.is_valid() else value
    _transform(value, transform)
    return value


def _set_field(owner: Any, name: str, transform: Callable[[Pos], int]) -> None:
    old = getattr(owner, name)
    new = _transformed(old, transform)
    if new is not old:
        setattr(owner, name, new)


def _transform(value: Any, transform: Callable[[Pos], int]) -> None:
    if value is None:
        return
    if isinstance(value, GoFile):
        # Imports and comments are shared with the declarations; visit only
        # the fields that hold unique references.
        for name in _FILE_FIELDS:
            _set_field(value, name, transform)
        return
    if isinstance(value, dict):
        raise TypeError("cannot use maps inside an AST node")
    if isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = _transformed(item, transform)
        return
    if isinstance(value, tuple):
        for item in value:
            _transform(item, transform)
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            if f.name == "obj":
                # Object references may be cyclic and carry no own positions.
                continue
            _set_field(value, f.name, transform)