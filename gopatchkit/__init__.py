"""Parsing tools for Go patch files: positions, sections, metavariables, diffs and pgo augmentation."""

__version__ = "0.0.3.dev0"

__all__ = [
    "augment",
    "fileset",
    "goast",
    "goscanner",
    "meta",
    "patch",
    "section",
    "text",
]