"""A tokenizer for Go source text with automatic semicolon insertion."""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from .fileset import File, Pos, Position


class Token(str, Enum):
    """Lexical tokens of Go; the value is the token's conventional spelling."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"
    COMMENT = "COMMENT"
    IDENT = "IDENT"
    INT = "INT"
    FLOAT = "FLOAT"
    IMAG = "IMAG"
    CHAR = "CHAR"
    STRING = "STRING"

    ADD = "+"
    SUB = "-"
    MUL = "*"
    QUO = "/"
    REM = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"
    AND_NOT = "&^"
    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    QUO_ASSIGN = "/="
    REM_ASSIGN = "%="
    AND_ASSIGN = "&="
    OR_ASSIGN = "|="
    XOR_ASSIGN = "^="
    SHL_ASSIGN = "<<="
    SHR_ASSIGN = ">>="
    AND_NOT_ASSIGN = "&^="
    LAND = "&&"
    LOR = "||"
    ARROW = "<-"
    INC = "++"
    DEC = "--"
    EQL = "=="
    LSS = "<"
    GTR = ">"
    ASSIGN = "="
    NOT = "!"
    NEQ = "!="
    LEQ = "<="
    GEQ = ">="
    DEFINE = ":="
    ELLIPSIS = "..."
    LPAREN = "("
    LBRACK = "["
    LBRACE = "{"
    COMMA = ","
    PERIOD = "."
    RPAREN = ")"
    RBRACK = "]"
    RBRACE = "}"
    SEMICOLON = ";"
    COLON = ":"
    TILDE = "~"

    BREAK = "break"
    CASE = "case"
    CHAN = "chan"
    CONST = "const"
    CONTINUE = "continue"
    DEFAULT = "default"
    DEFER = "defer"
    ELSE = "else"
    FALLTHROUGH = "fallthrough"
    FOR = "for"
    FUNC = "func"
    GO = "go"
    GOTO = "goto"
    IF = "if"
    IMPORT = "import"
    INTERFACE = "interface"
    MAP = "map"
    PACKAGE = "package"
    RANGE = "range"
    RETURN = "return"
    SELECT = "select"
    STRUCT = "struct"
    SWITCH = "switch"
    TYPE = "type"
    VAR = "var"

    def __str__(self) -> str:
        return self.value


_KEYWORDS = {tok.value: tok for tok in Token if tok.value.isalpha() and tok.value.islower()}
_OPERATORS = sorted(
    (tok for tok in Token if not tok.value[0].isalpha()),
    key=lambda tok: -len(tok.value),
)
_SEMI_AFTER = {
    Token.IDENT, Token.INT, Token.FLOAT, Token.IMAG, Token.CHAR, Token.STRING,
    Token.BREAK, Token.CONTINUE, Token.FALLTHROUGH, Token.RETURN,
    Token.INC, Token.DEC, Token.RPAREN, Token.RBRACK, Token.RBRACE,
}

_IDENT_RE = re.compile(rb"[A-Za-z_\x80-\xff][A-Za-z0-9_\x80-\xff]*")
_NUMBER_RE = re.compile(
    rb"0[xX][0-9a-fA-F_]*(?:\.[0-9a-fA-F_]*)?(?:[pP][+-]?[0-9_]+)?i?"
    rb"|[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][+-]?[0-9_]+)?i?"
    rb"|\.[0-9][0-9_]*(?:[eE][+-]?[0-9_]+)?i?"
)

ErrorHandler = Callable[[Position, str], None]


class Scanner:
    """Tokenizes Go source registered as a File; comments are skipped."""

    def __init__(self, file: File, src: bytes, on_error: ErrorHandler | None = None) -> None:
        if file.size != len(src):
            raise ValueError(f"file size ({file.size}) does not match src len ({len(src)})")
        file.set_lines_for_content(src)
        self.file = file
        self.src = src
        self.on_error = on_error
        self.error_count = 0
        self._offset = 0
        self._insert_semi = False

    def _error(self, offset: int, msg: str) -> None:
        self.error_count += 1
        if self.on_error is not None:
            self.on_error(self.file.position(self.file.pos(offset)), msg)

    def _skip_whitespace(self) -> None:
        src = self.src
        while self._offset < len(src):
            ch = src[self._offset]
            if ch in b" \t\r" or (ch == 0x0A and not self._insert_semi):
                self._offset += 1
            else:
                return

    def scan(self) -> tuple[Pos, Token, str]:
        """Return the next token as (position, token, literal text)."""
        src = self.src
        while True:
            self._skip_whitespace()
            off = self._offset
            pos = self.file.pos(off)
            if off >= len(src):
                if self._insert_semi:
                    self._insert_semi = False
                    return pos, Token.SEMICOLON, "\n"
                return pos, Token.EOF, ""
            if src[off] == 0x0A:
                self._insert_semi = False
                self._offset += 1
                return pos, Token.SEMICOLON, "\n"
            if src.startswith(b"//", off):
                if self._insert_semi:
                    self._insert_semi = False
                    return pos, Token.SEMICOLON, "\n"
                end = src.find(b"\n", off)
                self._offset = len(src) if end < 0 else end
                continue
            if src.startswith(b"/*", off):
                end = src.find(b"*/", off + 2)
                if end < 0:
                    self._error(off, "comment not terminated")
                    end = len(src)
                else:
                    end += 2
                if self._insert_semi and b"\n" in src[off:end]:
                    self._insert_semi = False
                    return pos, Token.SEMICOLON, "\n"
                self._offset = end
                continue
            tok, lit = self._scan_token(off)
            if tok is not Token.ILLEGAL:
                self._insert_semi = tok in _SEMI_AFTER
            return pos, tok, lit

    def _scan_token(self, off: int) -> tuple[Token, str]:
        src = self.src
        match = _IDENT_RE.match(src, off)
        if match:
            self._offset = match.end()
            word = match.group().decode("utf-8", errors="replace")
            return _KEYWORDS.get(word, Token.IDENT), word
        match = _NUMBER_RE.match(src, off)
        if match:
            self._offset = match.end()
            text = match.group().decode("ascii")
            if text.endswith("i"):
                return Token.IMAG, text
            is_hex = text[:2].lower() == "0x"
            if "." in text or (not is_hex and "e" in text.lower()) or (is_hex and "p" in text.lower()):
                return Token.FLOAT, text
            return Token.INT, text
        ch = src[off]
        if ch == ord('"'):
            return Token.STRING, self._scan_quoted(off, b'"', "string literal not terminated")
        if ch == ord("'"):
            return Token.CHAR, self._scan_quoted(off, b"'", "rune literal not terminated")
        if ch == ord("`"):
            end = src.find(b"`", off + 1)
            if end < 0:
                self._error(off, "raw string literal not terminated")
                end = len(src) - 1
            self._offset = end + 1
            return Token.STRING, src[off:self._offset].decode("utf-8", errors="replace")
        for tok in _OPERATORS:
            if src.startswith(tok.value.encode(), off):
                self._offset = off + len(tok.value)
                return tok, ""
        self._offset = off + 1
        char = chr(ch)
        self._error(off, f"illegal character U+{ch:04X} '{char}'")
        return Token.ILLEGAL, char

    def _scan_quoted(self, off: int, quote: bytes, unterminated: str) -> str:
        src = self.src
        index = off + 1
        while True:
            if index >= len(src) or src[index] == 0x0A:
                self._error(off, unterminated)
                break
            if src[index:index + 1] == b"\\":
                index += 2
                continue
            if src[index:index + 1] == quote:
                index += 1
                break
            index += 1
        self._offset = min(index, len(src))
        return src[off:self._offset].decode("utf-8", errors="replace")