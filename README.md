# gopatchkit

Building blocks for reading Go patch files: files that describe a code
transformation as a unified diff over Go code, preceded by a
metavariables header.

A patch file holds one or more changes:

```
# Comments are allowed on their own lines.
@ cleanup @
var x identifier
@@
-x()
+x(42)
```

A change opens with `@@` or `@ name @` (the name must be a valid Go
identifier), lists its metavariables, and closes the header with `@@`.
Everything after that, up to the next line starting with `@`, is the patch.

## Modules

- `gopatchkit.fileset`: `FileSet`, `File`, `Pos` and `Position`.
  A `FileSet` hands out a shared position space; each `File` maps byte
  offsets to positions and to line/column information
  (`set_lines_for_content`, `add_line_column_info`, `position`, `line`).
- `gopatchkit.section`: `split(fset, filename, content)` breaks a patch
  file into `Change` objects (`name`, `meta`, `patch`, `header_pos`,
  `at_pos`), each section being a list of `Line`s.
  `to_bytes(section)` joins a section back into text and returns a
  `LinePos` for each line. Malformed input raises `SplitError`, whose
  `errors` attribute lists messages such as
  `test.patch:1:1: unexpected "@@ foo", expected "@@" or "@ change_name @"`.
- `gopatchkit.meta`: `parse_meta(fset, index, change)` parses the
  metavariables section of a change into a `Meta` holding `VarDecl`
  entries (`names`, `type`, `var_pos`). Positions and error messages refer
  back to the patch file; bad syntax raises `MetaError`.
- `gopatchkit.patch`: `split_patch(patch)` separates a patch section into
  its before and after `PatchVersion`s. Lines starting with `-` go only to
  the before side, lines starting with `+` only to the after side, all
  others to both; each side records a `LinePos` per line.
- `gopatchkit.augment`: `augment(src)` rewrites pgo syntax (optional
  package clause, top-level expressions and statement lists, `...` in
  statements, arguments, parameters and results) into valid Go source.
  It returns the new source, the augmentations made (`Dots`,
  `FakePackage`, `FakeFunc`) and the `PosAdjustment`s needed to map
  positions back. `find(src)` and `rewrite(src, augs)` are the two steps
  separately. Tokenizing errors raise `AugmentError`.
- `gopatchkit.goscanner`: a Go tokenizer. `Scanner(file, src, on_error)`
  yields `(Pos, Token, text)` from `scan()`, skips comments and inserts
  semicolons at line ends as Go does.
- `gopatchkit.goast`: small Go syntax nodes (`Ident`, `BasicLit`,
  `ImportSpec`, `GoFile`) with `import_path`, `import_name` and
  `find_import_spec`, plus `transform_pos` and `offset_pos`, which rewrite
  every valid `Pos` found in a tree of dataclasses in place.
- `gopatchkit.text`: `unlines(*lines)` joins lines into newline-terminated
  UTF-8 bytes.

## Example

```python
from gopatchkit.fileset import FileSet
from gopatchkit.section import split
from gopatchkit.meta import parse_meta
from gopatchkit.patch import split_patch
from gopatchkit.augment import augment

src = b"@@\nvar x identifier\n@@\n-x()\n+x(42)\n"
fset = FileSet()
changes = split(fset, "example.patch", src)

meta = parse_meta(fset, 0, changes[0])
print([name.name for decl in meta.vars for name in decl.names])  # ['x']

before, after = split_patch(changes[0].patch)
print(before.contents)  # b'x()\n'
print(after.contents)   # b'x(42)\n'

go_src, augs, adjustments = augment(b"foo(bar, ..., baz)\n")
print(go_src.decode())
# package _
# func _() {
# foo(bar, dts, baz)
# }
```

## What it does not do

The package stops at reading patch files. It does not parse the before
and after versions of a patch into Go syntax trees, does not match
patches against Go code or apply them to Go files, and has no
command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```