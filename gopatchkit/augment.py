"""Rewrite pgo source into valid Go, recording every change made to it.

Invalid syntax such as a bare "..." is replaced with valid code, and the
positions of these replacements are recorded so that the parsed syntax tree
can be transformed afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from .fileset import FileSet, Pos, Position
from .goscanner import Scanner, Token

_FAKE_PACKAGE = b"package _\n"
_FAKE_FUNC = b"func _() "


class AugmentError(ValueError):
    """Raised when pgo source cannot be tokenized."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class Augmentation:
    """An addition to the Go syntax."""

    def start(self) -> int:
        """Offset at which the augmentation was found."""
        raise NotImplementedError

    def end(self) -> int:
        """Offset of the first character after the augmentation."""
        raise NotImplementedError


@dataclass
class Dots(Augmentation):
    """A "..." appearing where Go syntax does not allow it."""

    dots_start: int
    dots_end: int
    # Whether the dots stand for named entities, such as named parameters.
    named: bool = False

    def start(self) -> int:
        """Start offset of the dots."""
        return self.dots_start

    def end(self) -> int:
        """End offset of the dots."""
        return self.dots_end


@dataclass
class FakePackage(Augmentation):
    """A package clause added because the source had none."""

    package_start: int

    def start(self) -> int:
        """Offset of the "package" keyword."""
        return self.package_start

    def end(self) -> int:
        """Meaningless for a fake package; equal to the start."""
        return self.package_start


@dataclass
class FakeFunc(Augmentation):
    """A function wrapper added because the source had no top-level declaration."""

    func_start: int
    # Whether a { ... } pair was added around the source.
    braces: bool = False

    def start(self) -> int:
        """Offset of the "func" keyword."""
        return self.func_start

    def end(self) -> int:
        """Meaningless for a fake function; equal to the start."""
        return self.func_start


@dataclass(frozen=True)
class PosAdjustment:
    """Positions at or after offset must be reduced by reduce_by."""

    offset: int
    reduce_by: int


class _Finder:
    def __init__(self, src: bytes) -> None:
        fset = FileSet()
        self.file = fset.add_file("src.go", -1, len(src))
        self.errors: list[str] = []
        self.scanner = Scanner(self.file, src, self._on_error)
        self.augs: list[Augmentation] = []
        self.tok = Token.EOF
        self.pos = Pos(0)
        self.offset = 0
        self.next()

    def _on_error(self, position: Position, msg: str) -> None:
        self.errors.append(f"{position}: {msg}")

    def next(self) -> None:
        self.pos, self.tok, _ = self.scanner.scan()
        self.offset = self.file.offset(self.pos)

    def line(self, pos: Pos) -> int:
        return self.file.line(pos)

    def find(self) -> list[Augmentation]:
        self.pkg()
        self.imports()
        self.top_level_decl()
        while self.tok is not Token.EOF:
            self.process()
        return self.augs

    def process(self) -> None:
        if self.tok is Token.IDENT:
            self.ident()
        elif self.tok is Token.ELLIPSIS:
            self.ellipsis()
        elif self.tok is Token.FUNC:
            self.function()
        else:
            self.next()

    def pkg(self) -> None:
        if self.tok is not Token.PACKAGE:
            self.augs.append(FakePackage(package_start=self.offset))
            return
        self.next()  # package
        self.next()  # name
        self.next()  # ;

    def imports(self) -> None:
        while self.tok is Token.IMPORT:
            self.next()  # import
            if self.tok is Token.LPAREN:
                while self.tok not in (Token.RPAREN, Token.EOF):
                    self.next()
                self.next()  # )
                self.next()  # ;
                continue
            if self.tok in (Token.PERIOD, Token.IDENT):
                self.next()  # . or name
            elif self.tok is Token.EOF:
                return
            self.next()  # path
            self.next()  # ;

    def top_level_decl(self) -> None:
        if self.tok in (Token.TYPE, Token.CONST, Token.VAR):
            self.next()
        elif self.tok is Token.FUNC:
            self.func_decl()
        elif self.tok is Token.LBRACE:
            self.augs.append(FakeFunc(func_start=self.offset))
            self.next()  # {
        else:
            self.augs.append(FakeFunc(func_start=self.offset, braces=True))

    def ident(self) -> None:
        self.next()  # IDENT
        if self.tok is Token.ELLIPSIS:
            self.next()  # foo... is left unchanged

    def ellipsis(self) -> None:
        pos, off = self.pos, self.offset
        self.next()  # ...
        # No semicolon is inserted after "...", so a following identifier on
        # the next line must be told apart from "...foo" by line numbers.
        same_line = self.line(pos) == self.line(self.pos)
        if self.tok is Token.IDENT and same_line:
            self.next()
            return
        self.augs.append(Dots(dots_start=off, dots_end=off + 3))

    def func_decl(self) -> None:
        self.next()  # func
        if self.tok is Token.LPAREN:
            self.next()  # (
            while self.tok not in (Token.RPAREN, Token.EOF):
                self.process()
            self.next()  # )
        self.next()  # name
        self.field_list()
        self.results()

    def function(self) -> None:
        self.next()  # func
        self.field_list()
        self.results()

    def results(self) -> None:
        if self.tok is Token.LPAREN:
            self.field_list()

    def field_list(self) -> None:
        self.next()  # (
        ellipses: list[int] = []
        named = False
        while self.tok not in (Token.RPAREN, Token.EOF):
            if self.tok is Token.FUNC:
                self.function()
            elif self.tok is Token.IDENT:
                self.next()  # ident
                if self.tok is Token.PERIOD:
                    self.next()  # .
                    self.next()  # ident
                if self.tok not in (Token.COMMA, Token.RPAREN):
                    named = True
            elif self.tok is Token.ELLIPSIS:
                off = self.offset
                self.next()  # ...
                if self.tok is Token.IDENT:
                    continue  # variadic operator
                ellipses.append(off)
            else:
                self.next()
        self.next()  # )
        self.augs.extend(Dots(dots_start=off, dots_end=off + 3, named=named) for off in ellipses)


def find(src: bytes) -> list[Augmentation]:
    """Locate the augmentations needed to turn pgo source into Go."""
    if isinstance(src, str):
        src = src.encode("utf-8")
    finder = _Finder(src)
    augs = finder.find()
    if finder.errors:
        raise AugmentError(finder.errors)
    return augs


def rewrite(src: bytes, augs: list[Augmentation]) -> tuple[bytes, list[PosAdjustment]]:
    """Rewrite src into valid Go syntax.

    The augmentations are sorted in place and their offsets updated to refer
    to the rewritten source.
    """
    if isinstance(src, str):
        src = src.encode("utf-8")
    dst = bytearray()
    tail = bytearray()
    adjustments: list[PosAdjustment] = []
    reduce_by = 0
    pos = 0
    # Stable sort keeps FakePackage before FakeFunc at the same offset.
    augs.sort(key=lambda aug: aug.start())
    for aug in augs:
        start, end = aug.start(), aug.end()
        dst += src[pos:start]
        if isinstance(aug, FakePackage):
            aug.package_start = len(dst)
            dst += _FAKE_PACKAGE
            reduce_by += len(dst) - aug.package_start
            adjustments.append(PosAdjustment(offset=aug.package_start, reduce_by=reduce_by))
        elif isinstance(aug, FakeFunc):
            aug.func_start = len(dst)
            dst += _FAKE_FUNC
            if aug.braces:
                dst += b"{\n"
                tail += b"}\n"
            reduce_by += len(dst) - aug.func_start
            adjustments.append(PosAdjustment(offset=aug.func_start, reduce_by=reduce_by))
        elif isinstance(aug, Dots):
            aug.dots_start = len(dst)
            # Both replacements are as long as "...", so no adjustment.
            dst += b"_ d" if aug.named else b"dts"
            aug.dots_end = len(dst)
        else:
            raise TypeError(f"unknown augmentation type {type(aug).__name__}")
        pos = end
    dst += src[pos:]
    dst += tail
    return bytes(dst), adjustments


def augment(src: bytes) -> tuple[bytes, list[Augmentation], list[PosAdjustment]]:
    """Turn pgo source into valid Go, returning the source, augmentations and adjustments."""
    augs = find(src)
    new_src, adjustments = rewrite(src, augs)
    return new_src, augs, adjustments