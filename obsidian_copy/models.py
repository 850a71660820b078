"""Data models for vault files, references, and selection results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class RefKind(str, Enum):
    """Whether a reference is a link (`[[note]]`) or an embed (`![[note]]`)."""

    LINK = "link"
    EMBED = "embed"


@dataclass(frozen=True)
class RawReference:
    """A reference as written in Markdown, before resolution."""

    target: str  # file part only, anchor stripped
    kind: RefKind = RefKind.LINK
    anchor: str | None = None  # heading or ^block, informational
    label: str | None = None  # display text

    @property
    def is_embed(self) -> bool:
        return self.kind is RefKind.EMBED


@dataclass(frozen=True)
class Reference:
    """A resolved edge: `source` links to or embeds `target`."""

    source: str
    target: str


@dataclass(frozen=True)
class TagFilter:
    """Include/exclude tag sets. Exclusion always wins."""

    include: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()

    @classmethod
    def from_lists(cls, include=(), exclude=()) -> "TagFilter":
        return cls(include=frozenset(include), exclude=frozenset(exclude))


@dataclass
class VaultFile:
    """A single file discovered in the vault."""

    key: str  # vault-relative POSIX path, NFC-normalized
    path: Path  # absolute path on disk
    is_markdown: bool = False
    tags: frozenset[str] = frozenset()
    seed: bool = False
    included: bool = False  # set during closure


@dataclass(frozen=True)
class UnresolvedReference:
    """A reference whose target does not exist in the vault."""

    source: str
    target: str
    kind: RefKind = RefKind.LINK

    def __str__(self) -> str:
        verb = "embeds" if self.kind is RefKind.EMBED else "links to"
        return f"{self.source} {verb} '{self.target}' - file not found"


@dataclass(frozen=True)
class FrontMatterWarning:
    """Front matter that failed to decode and was treated as empty."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source} - invalid front matter ({self.message})"


@dataclass
class SelectionResult:
    """Output of the selection engine: the copy manifest plus warnings."""

    paths: tuple[str, ...] = ()
    seeds: tuple[str, ...] = ()
    reasons: dict[str, str] = field(default_factory=dict)  # key -> "seed" or referrer key
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    frontmatter_warnings: list[FrontMatterWarning] = field(default_factory=list)

    @property
    def warning_count(self) -> int:
        return len(self.unresolved) + len(self.frontmatter_warnings)

    def __contains__(self, key: str) -> bool:
        return key in self.reasons
