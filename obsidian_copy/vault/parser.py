"""Markdown parsing utilities for wiki-links, Markdown links, and embeds."""

import re
from typing import Iterator
from urllib.parse import unquote

from ..models import RawReference, RefKind

# Match [[target]], [[target|display]], [[target#section]], ![[embed]]
WIKILINK_PATTERN = re.compile(r"(!?)\[\[([^\[\]\n]+?)\]\]")

# Match [text](target), [text](<target>), [text](target "title"), ![alt](image)
INLINE_LINK_PATTERN = re.compile(
    r"(!?)\[((?:[^\[\]\n]|\[[^\[\]\n]*\])*)\]"
    r"\(\s*(<[^>\n]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)"
    r"""(?:\s+(?:"[^"\n]*"|'[^'\n]*'|\([^)\n]*\)))?\s*\)"""
)

# Match [label]: target "optional title"; [^label]: is a footnote, not a link
REFERENCE_DEFINITION_PATTERN = re.compile(
    r"^ {0,3}\[(?!\^)([^\[\]\n]+)\]:[ \t]*(<[^>\n]*>|\S+)[^\n]*$", re.MULTILINE
)

# Match [text][label] and [label][]
FULL_REFERENCE_PATTERN = re.compile(r"(!?)\[([^\[\]\n]*)\]\[([^\[\]\n]*)\]")

# Match [label] not followed by ( [ or :
SHORTCUT_REFERENCE_PATTERN = re.compile(r"(!?)\[([^\[\]\n]+)\](?![\[(:])")

URL_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")
INDENTED_PATTERN = re.compile(r"^(?: {4}|\t)")
LIST_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])(?:\s|$)")
# Code spans may wrap lines but never cross a blank line
INLINE_CODE_PATTERN = re.compile(r"(?<!`)(`+)(?!`)((?:(?!\n[ \t]*\n).)+?)(?<!`)\1(?!`)", re.DOTALL)


def strip_code(content: str) -> str:
    """Blank out fenced code blocks, indented code blocks, and code spans.

    Line count is preserved so that offsets of the remaining text stay
    meaningful line by line.
    """
    lines = content.split("\n")
    result = []
    fence: str | None = None
    in_indented = False
    in_list = False
    prev_blank = True

    for line in lines:
        if fence is not None:
            stripped = line.strip()
            if stripped.startswith(fence) and set(stripped) == {fence[0]}:
                fence = None
            result.append("")
            prev_blank = False
            continue

        match = FENCE_PATTERN.match(line)
        if match:
            fence = match.group(1)
            in_indented = False
            result.append("")
            prev_blank = False
            continue

        blank = not line.strip()
        if in_indented:
            if blank or INDENTED_PATTERN.match(line):
                result.append("")
                prev_blank = blank
                continue
            in_indented = False

        if not blank and INDENTED_PATTERN.match(line) and prev_blank and not in_list:
            in_indented = True
            result.append("")
            prev_blank = False
            continue

        if LIST_ITEM_PATTERN.match(line):
            in_list = True
        elif not blank and not line[:1].isspace():
            in_list = False

        result.append(line)
        prev_blank = blank

    text = "\n".join(result)
    return INLINE_CODE_PATTERN.sub(lambda m: " " * len(m.group(0)), text)


def _mask(text: str, start: int, end: int) -> str:
    return text[:start] + " " * (end - start) + text[end:]


def _normalize_label(label: str) -> str:
    return " ".join(label.split()).casefold()


def parse_wikilink(inner: str) -> tuple[str, str | None, str | None]:
    """Split the inside of `[[...]]` into (file, section, label).

    `file` is empty for a reference to a section of the same document.
    """
    label = None
    if "|" in inner:
        inner, label = inner.split("|", 1)
        # Escaped pipe inside a table cell: [[note\|label]]
        inner = inner.removesuffix("\\")
    section = None
    if "#" in inner:
        inner, section = inner.split("#", 1)
        section = section.strip() or None
    return inner.strip(), section, label


def _split_destination(destination: str) -> tuple[str, str | None] | None:
    """Turn a Markdown link destination into (path, anchor), or None if external."""
    if destination.startswith("<") and destination.endswith(">"):
        destination = destination[1:-1]
    destination = destination.strip()
    if not destination or URL_SCHEME_PATTERN.match(destination):
        return None
    anchor = None
    if "#" in destination:
        destination, anchor = destination.split("#", 1)
    return unquote(destination), anchor or None


def extract_references(content: str) -> Iterator[RawReference]:
    """Yield every link and embed in a Markdown body, in document order.

    Handles wiki-links and embeds, inline links and images, and
    reference-style links. Code blocks and code spans are ignored, as are
    external URLs and links to a heading of the same document.
    """
    text = strip_code(content)
    found: list[tuple[int, RawReference]] = []

    def add(pos: int, bang: str, target: str, anchor: str | None, label: str | None) -> None:
        if not target:
            return
        kind = RefKind.EMBED if bang else RefKind.LINK
        found.append((pos, RawReference(target=target, kind=kind, anchor=anchor, label=label)))

    for match in WIKILINK_PATTERN.finditer(text):
        target, section, label = parse_wikilink(match.group(2))
        add(match.start(), match.group(1), target, section, label)
        text = _mask(text, match.start(), match.end())

    for match in INLINE_LINK_PATTERN.finditer(text):
        split = _split_destination(match.group(3))
        if split:
            add(match.start(), match.group(1), split[0], split[1], match.group(2) or None)
        text = _mask(text, match.start(), match.end())

    definitions: dict[str, str] = {}
    for match in REFERENCE_DEFINITION_PATTERN.finditer(text):
        # First definition of a label wins
        definitions.setdefault(_normalize_label(match.group(1)), match.group(2))
        text = _mask(text, match.start(), match.end())

    def lookup(label: str) -> str | None:
        # [^label] is a footnote reference
        if label.startswith("^"):
            return None
        return definitions.get(_normalize_label(label))

    if definitions:
        for match in FULL_REFERENCE_PATTERN.finditer(text):
            destination = lookup(match.group(3) or match.group(2))
            if destination is not None:
                split = _split_destination(destination)
                if split:
                    add(match.start(), match.group(1), split[0], split[1], match.group(2) or None)
            text = _mask(text, match.start(), match.end())

        for match in SHORTCUT_REFERENCE_PATTERN.finditer(text):
            destination = lookup(match.group(2))
            if destination is None:
                continue
            split = _split_destination(destination)
            if split:
                add(match.start(), match.group(1), split[0], split[1], match.group(2))

    found.sort(key=lambda item: item[0])
    for _, reference in found:
        yield reference
