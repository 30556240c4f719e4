import pytest

from gopatchkit.fileset import NO_POS, File, FileSet, Pos, Position


def test_pos_validity():
    assert not NO_POS.is_valid()
    assert Pos(7).is_valid()


def test_pos_arithmetic_stays_pos():
    p = Pos(10)
    moved = p + 4
    assert isinstance(moved, Pos) and moved.is_valid()
    assert moved - 4 == p


def test_first_file_base_and_bases_do_not_overlap():
    fset = FileSet()
    first = fset.add_file("a.patch", -1, 10)
    second = fset.add_file("b.patch", -1, 5)
    assert first.base == 1
    assert second.base > first.base + first.size
    assert fset.file(first.pos(first.size)) is first
    assert fset.file(second.pos(0)) is second
    assert fset.file(NO_POS) is None


def test_add_file_rejects_smaller_base():
    fset = FileSet()
    fset.add_file("a", -1, 10)
    with pytest.raises(ValueError):
        fset.add_file("b", 1, 3)


def test_pos_offset_round_trip_and_errors():
    fset = FileSet()
    f = fset.add_file("x.go", -1, 20)
    for off in (0, 5, 20):
        assert f.offset(f.pos(off)) == off
    with pytest.raises(ValueError):
        f.pos(21)
    with pytest.raises(ValueError):
        f.offset(Pos(f.base + 21))


def test_positions_from_content():
    content = b"@@\n@@\n"
    fset = FileSet()
    f = fset.add_file("test.patch", -1, len(content))
    f.set_lines_for_content(content)
    for pos, (line, column) in {1: (1, 1), 3: (1, 3), 4: (2, 1)}.items():
        got = fset.position(Pos(pos))
        assert (got.line, got.column) == (line, column)
    assert f.line(Pos(4)) == 2


def test_position_at_eof_after_trailing_newline():
    content = b"@ foo @\nvar x identifier\n"
    fset = FileSet()
    f = fset.add_file("test.patch", -1, len(content))
    f.set_lines_for_content(content)
    assert str(fset.position(f.pos(len(content)))) == "test.patch:2:18"


def test_empty_content_position_has_only_filename():
    fset = FileSet()
    f = fset.add_file("test.patch", -1, 0)
    f.set_lines_for_content(b"")
    assert str(fset.position(f.pos(0))) == "test.patch"


def test_line_column_info_maps_back():
    meta = b"var x identifier\nvar x y z\n"
    fset = FileSet()
    f = fset.add_file("test.patch0.meta", -1, len(meta))
    f.add_line_column_info(0, "test.patch", 2, 1)
    f.add_line_column_info(17, "test.patch", 3, 1)
    assert str(fset.position(f.pos(25))) == "test.patch:3:9"
    assert fset.position(f.pos(0)).filename == "test.patch"


def test_out_of_order_line_info_is_ignored():
    fset = FileSet()
    f = fset.add_file("gen.go", -1, 10)
    f.add_line_column_info(5, "orig.go", 7, 1)
    f.add_line_column_info(3, "other.go", 9, 1)
    assert fset.position(f.pos(3)).filename == "gen.go"
    assert fset.position(f.pos(6)).filename == "orig.go"


def test_position_string_forms():
    assert str(Position(filename="a.go", line=2, column=3)) == "a.go:2:3"
    assert str(Position(filename="a.go", line=2)) == "a.go:2"
    assert str(Position()) == "-"


def test_unknown_pos_gives_empty_position():
    fset = FileSet()
    assert fset.position(Pos(99)) == Position()


def test_file_position_of_no_pos_is_empty():
    f = File("z.go", 1, 4)
    assert f.position(NO_POS) == Position()