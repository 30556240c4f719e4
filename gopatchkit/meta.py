"""Parse the metavariables section of a change."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fileset import NO_POS, FileSet, Pos, Position
from .goast import Ident
from .goscanner import Scanner, Token
from .section import Change, to_bytes


class MetaError(ValueError):
    """Raised when a metavariables section cannot be parsed."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass(kw_only=True)
class VarDecl:
    """A single declaration such as "var foo, bar identifier"."""

    var_pos: Pos = NO_POS
    names: list[Ident] = field(default_factory=list)
    type: Ident | None = None

    def __post_init__(self) -> None:
        self.var_pos = Pos(self.var_pos)

    def pos(self) -> Pos:
        """Position of the "var" keyword."""
        return self.var_pos

    def end(self) -> Pos:
        """Position just past the declaration, or no position without a type."""
        if self.type is None:
            return NO_POS
        return self.type.name_pos + len(self.type.name.encode("utf-8"))


@dataclass(kw_only=True)
class Meta:
    """The metavariables section of a change."""

    vars: list[VarDecl] = field(default_factory=list)


class _MetaParser:
    def __init__(self, fset: FileSet, file, contents: bytes) -> None:
        self.fset = fset
        self.failed = False
        self.errors: list[str] = []
        self.pos = NO_POS
        self.tok = Token.EOF
        self.text = ""
        self.scanner = Scanner(file, contents, self._on_error)
        self.next()

    def _on_error(self, position: Position, msg: str) -> None:
        self.failed = True
        self.errors.append(f"{position}: {msg}")

    def errf(self, msg: str) -> None:
        self._on_error(self.fset.position(self.pos), msg)

    def next(self) -> None:
        self.pos, self.tok, self.text = self.scanner.scan()

    def parse(self) -> Meta:
        meta = Meta()
        while not self.failed and self.tok is not Token.EOF:
            decl = self.parse_decl()
            if decl is not None:
                meta.vars.append(decl)
        return meta

    def parse_decl(self) -> VarDecl | None:
        try:
            if self.tok is not Token.VAR:
                self.errf(f'unexpected "{self.tok}", expected "var"')
                return None
            decl = VarDecl(var_pos=self.pos)
            while True:
                self.next()  # var or ,
                name = self.parse_ident()
                if name is None:
                    return None
                decl.names.append(name)
                if self.tok is not Token.COMMA:
                    break
            decl.type = self.parse_ident()
            if decl.type is None:
                return None
            # The scanner turns line ends into semicolons.
            if self.tok is not Token.SEMICOLON:
                self.errf(f'unexpected "{self.tok}", expected ";" or a newline')
                return None
            return decl
        finally:
            self.next()

    def parse_ident(self) -> Ident | None:
        try:
            if self.tok is not Token.IDENT:
                self.errf(f'unexpected "{self.tok}", expected an identifier')
                return None
            return Ident(name=self.text, name_pos=self.pos)
        finally:
            self.next()


def parse_meta(fset: FileSet, index: int, change: Change) -> Meta:
    """Parse the metavariables of the change at the given index.

    Raises MetaError, with positions in the patch file, on failure.
    """
    contents, lines = to_bytes(change.meta)

    origin = fset.file(change.pos())
    filename = origin.name if origin is not None else ""
    filename += f"{change.name}.meta" if change.name else f"{index}.meta"

    file = fset.add_file(filename, -1, len(contents))
    for line in lines:
        position = fset.position(line.pos)
        file.add_line_column_info(line.offset, position.filename, position.line, position.column)

    parser = _MetaParser(fset, file, contents)
    meta = parser.parse()
    if parser.errors:
        raise MetaError(parser.errors)
    return meta