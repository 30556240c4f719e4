import pytest

from gopatchkit.fileset import FileSet
from gopatchkit.patch import split_patch
from gopatchkit.section import Line, split
from gopatchkit.text import unlines


def till_eol(data, offset):
    line = data[offset:]
    index = line.find(b"\n")
    return line if index < 0 else line[:index]


@pytest.fixture
def separated():
    contents = b"@@\n@@\n" + unlines(" foo", "-bar", "+baz", "qux")
    fset = FileSet()
    prog = split(fset, "test.patch", contents)
    assert len(prog) == 1
    before, after = split_patch(prog[0].patch)
    return fset, contents, before, after


def test_separate_patch_contents(separated):
    _, _, before, after = separated
    assert before.contents == unlines(" foo", "bar", "qux")
    assert after.contents == unlines(" foo", "baz", "qux")


@pytest.mark.parametrize("side", ["before", "after"])
def test_separate_patch_lines_match(separated, side):
    fset, contents, before, after = separated
    version = before if side == "before" else after
    assert len(version.lines) == version.contents.count(b"\n")
    for line_pos in version.lines:
        original_offset = fset.file(line_pos.pos).offset(line_pos.pos)
        assert till_eol(contents, original_offset) == till_eol(version.contents, line_pos.offset)


def test_split_patch_empty():
    before, after = split_patch([])
    assert before.contents == b""
    assert after.contents == b""
    assert before.lines == [] and after.lines == []


def test_split_patch_empty_line_goes_to_both():
    before, after = split_patch([Line(start_pos=1, text=b"")])
    assert before.contents == b"\n"
    assert after.contents == b"\n"
    assert before.lines[0].pos == 1
    assert after.lines[0].offset == 0


def test_split_patch_does_not_modify_lines():
    line = Line(start_pos=10, text=b"-x()")
    before, after = split_patch([line])
    assert line.text == b"-x()"
    assert line.start_pos == 10
    assert before.lines[0].pos == 11
    assert after.contents == b""