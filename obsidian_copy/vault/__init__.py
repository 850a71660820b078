"""Vault traversal, parsing, and selection utilities."""

from .filters import passes
from .frontmatter import decode_front_matter
from .graph import VaultGraph, build_graph
from .parser import extract_references
from .resolver import PathResolver
from .selection import select
from .tags import extract_tags
from .walker import walk_vault

__all__ = [
    "passes",
    "decode_front_matter",
    "VaultGraph",
    "build_graph",
    "extract_references",
    "PathResolver",
    "select",
    "extract_tags",
    "walk_vault",
]
