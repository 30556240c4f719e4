import pytest

from gopatchkit.augment import (
    AugmentError,
    Dots,
    FakeFunc,
    FakePackage,
    PosAdjustment,
    augment,
    find,
    rewrite,
)
from gopatchkit.text import unlines

CASES = [
    pytest.param(
        unlines("package foo", "", "foo()"),
        unlines("package foo", "", "func _() {", "foo()", "}"),
        [FakeFunc(func_start=13, braces=True)],
        [PosAdjustment(offset=13, reduce_by=11)],
        id="with package name",
    ),
    pytest.param(
        unlines(
            "import (",
            '  "fmt"',
            '  _ "net/http/pprof"',
            '  goast "go/ast"',
            "",
            '  . "somepackage"',
            ")",
            "",
            "x := 42",
        ),
        unlines(
            "package _",
            "import (",
            '  "fmt"',
            '  _ "net/http/pprof"',
            '  goast "go/ast"',
            "",
            '  . "somepackage"',
            ")",
            "",
            "func _() {",
            "x := 42",
            "}",
        ),
        [FakePackage(package_start=0), FakeFunc(func_start=87, braces=True)],
        [PosAdjustment(offset=0, reduce_by=10), PosAdjustment(offset=87, reduce_by=21)],
        id="imports/group",
    ),
    pytest.param(
        unlines("package foo", "", 'import . "bar"', "", "{", "  x += 1", "}"),
        unlines("package foo", "", 'import . "bar"', "", "func _() {", "  x += 1", "}"),
        [FakeFunc(func_start=29)],
        [PosAdjustment(offset=29, reduce_by=9)],
        id="imports/dot",
    ),
    pytest.param(
        unlines("package foo", "", 'import _ "net/http/pprof"', "", "func foo() {", "  x += 1", "}"),
        unlines("package foo", "", 'import _ "net/http/pprof"', "", "func foo() {", "  x += 1", "}"),
        [],
        [],
        id="imports/underscore",
    ),
    pytest.param(
        unlines('import bar "baz"', "", "type Foo struct{}"),
        unlines("package _", 'import bar "baz"', "", "type Foo struct{}"),
        [FakePackage(package_start=0)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="imports/named",
    ),
    pytest.param(
        unlines("foo()", "...", "bar()"),
        unlines("package _", "func _() {", "foo()", "dts", "bar()", "}"),
        [
            FakePackage(package_start=0),
            FakeFunc(func_start=10, braces=True),
            Dots(dots_start=27, dots_end=30),
        ],
        [PosAdjustment(offset=0, reduce_by=10), PosAdjustment(offset=10, reduce_by=21)],
        id="dots/statements",
    ),
    pytest.param(
        unlines("foo(bar, ..., baz)"),
        unlines("package _", "func _() {", "foo(bar, dts, baz)", "}"),
        [
            FakePackage(package_start=0),
            FakeFunc(func_start=10, braces=True),
            Dots(dots_start=30, dots_end=33),
        ],
        [PosAdjustment(offset=0, reduce_by=10), PosAdjustment(offset=10, reduce_by=21)],
        id="dots/parameters",
    ),
    pytest.param(
        unlines("func foo(bar int, ..., baz bool) {}"),
        unlines("package _", "func foo(bar int, _ d, baz bool) {}"),
        [FakePackage(package_start=0), Dots(dots_start=28, dots_end=31, named=True)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="dots/named arguments",
    ),
    pytest.param(
        unlines("func foo(bar int, baz bool) (string, ...) {}"),
        unlines("package _", "func foo(bar int, baz bool) (string, dts) {}"),
        [FakePackage(package_start=0), Dots(dots_start=47, dots_end=50)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="dots/results",
    ),
    pytest.param(
        unlines("func foo(bar int, baz bool) (..., err error) {}"),
        unlines("package _", "func foo(bar int, baz bool) (_ d, err error) {}"),
        [FakePackage(package_start=0), Dots(dots_start=39, dots_end=42, named=True)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="dots/named results",
    ),
    pytest.param(
        unlines("func foo(bar int, baz bool) ... {}"),
        unlines("package _", "func foo(bar int, baz bool) dts {}"),
        [FakePackage(package_start=0), Dots(dots_start=38, dots_end=41)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="dots/single result",
    ),
    pytest.param(
        unlines("func foo(args ...string) {", "  foo(args...)", "}"),
        unlines("package _", "func foo(args ...string) {", "  foo(args...)", "}"),
        [FakePackage(package_start=0)],
        [PosAdjustment(offset=0, reduce_by=10)],
        id="func with splats",
    ),
    pytest.param(
        unlines("package foo", "", "type Foo func(...string)"),
        unlines("package foo", "", "type Foo func(...string)"),
        [],
        [],
        id="function signature with splat",
    ),
]


@pytest.mark.parametrize("give, want_src, want_augs, want_adjs", CASES)
def test_augment(give, want_src, want_augs, want_adjs):
    got_src, got_augs, got_adjs = augment(give)
    assert got_src.decode() == want_src.decode()
    assert got_augs == want_augs
    assert got_adjs == want_adjs


def test_find_reports_offsets_in_original_source():
    augs = find(unlines("foo()", "...", "bar()"))
    assert augs == [
        FakePackage(package_start=0),
        FakeFunc(func_start=0, braces=True),
        Dots(dots_start=6, dots_end=9),
    ]


def test_find_leaves_dots_followed_by_identifier_on_same_line():
    assert find(unlines("package foo", "", "foo(x...)")) == [FakeFunc(func_start=13, braces=True)]


def test_rewrite_updates_offsets_in_place():
    augs = [Dots(dots_start=4, dots_end=7), FakePackage(package_start=0)]
    src, adjs = rewrite(b"foo(...)\n", augs)
    assert src == b"package _\nfoo(dts)\n"
    assert augs == [FakePackage(package_start=0), Dots(dots_start=14, dots_end=17)]
    assert adjs == [PosAdjustment(offset=0, reduce_by=10)]


def test_rewrite_rejects_unknown_augmentation():
    with pytest.raises(TypeError):
        rewrite(b"foo\n", [object.__new__(type("Other", (FakePackage,), {}))] and [_Unknown()])


class _Unknown:
    def start(self):
        return 0

    def end(self):
        return 0


def test_scanner_errors_raise_augment_error():
    with pytest.raises(AugmentError) as excinfo:
        augment(unlines("foo(#)"))
    assert "src.go:1:5: illegal character U+0023 '#'" in str(excinfo.value)


def test_truncated_parameter_list_terminates():
    src, augs, adjs = augment(b"func foo(")
    assert src == b"package _\nfunc foo("
    assert augs == [FakePackage(package_start=0)]
    assert adjs == [PosAdjustment(offset=0, reduce_by=10)]


@pytest.mark.parametrize(
    "aug, start, end",
    [
        (Dots(dots_start=3, dots_end=6), 3, 6),
        (FakePackage(package_start=5), 5, 5),
        (FakeFunc(func_start=7, braces=True), 7, 7),
    ],
)
def test_start_and_end(aug, start, end):
    assert (aug.start(), aug.end()) == (start, end)