"""Tag extraction from front matter and inline `#tags`."""

import re
from typing import Any

from .parser import strip_code

# `#tag`, `#nested/tag`, `#multi-word_tag` at start of line or after whitespace
INLINE_TAG_PATTERN = re.compile(r"(?<!\S)#([\w\-/]+)")

TAG_SEPARATOR_PATTERN = re.compile(r"[,\s]+")

TAG_FIELD_ALIASES = {"tags": "tag", "tag": "tags"}


def _frontmatter_values(value: Any) -> list[str]:
    """Flatten a front-matter tag value (string or list) into raw strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return TAG_SEPARATOR_PATTERN.split(value)
    if isinstance(value, (list, tuple, set)):
        result = []
        for item in value:
            if isinstance(item, bool):
                continue
            if isinstance(item, str):
                result.append(item)
            elif isinstance(item, (int, float)):
                result.append(str(item))
        return result
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return [str(value)]
    return []


def frontmatter_tags(front_matter: dict[str, Any], tag_field: str = "tags") -> set[str]:
    """Tags declared in front matter under `tag_field`.

    `tags` and `tag` are accepted interchangeably, as Obsidian does.
    """
    values = _frontmatter_values(front_matter.get(tag_field))
    alias = TAG_FIELD_ALIASES.get(tag_field)
    if alias:
        values += _frontmatter_values(front_matter.get(alias))

    tags = set()
    for value in values:
        tag = value.strip().removeprefix("#").strip()
        if tag:
            tags.add(tag)
    return tags


def inline_tags(body: str) -> set[str]:
    """Tags written inline as `#tag`, ignoring code and purely numeric tokens."""
    tags = set()
    for match in INLINE_TAG_PATTERN.finditer(strip_code(body)):
        tag = match.group(1)
        if tag.isdigit():
            continue
        tags.add(tag)
    return tags


def extract_tags(front_matter: dict[str, Any], body: str, tag_field: str = "tags") -> frozenset[str]:
    """All tags of a document: front-matter tags plus inline tags."""
    return frozenset(frontmatter_tags(front_matter, tag_field) | inline_tags(body))
