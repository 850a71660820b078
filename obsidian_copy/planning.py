"""
Plan/result types that separate computing a copy from performing it.

Computing a plan reads the vault and never writes; executing a plan is the
only step that touches the destination. A plan can be printed instead of
executed (dry run).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from .models import SelectionResult


@dataclass
class BasePlan(ABC):
    """Base class for operation plans (diagnostic output)."""
    vault_path: Path

    @abstractmethod
    def summary(self) -> str:
        """Human-readable summary of what would be done."""
        ...


@dataclass
class BaseResult:
    """Base class for operation results (action output)."""
    success: bool = True
    error: str | None = None


@dataclass
class CopyPlan(BasePlan):
    """Plan for copying the selected part of a vault."""
    destination: Path
    selection: SelectionResult = field(default_factory=SelectionResult)
    sources: dict[str, Path] = field(default_factory=dict)  # key -> path on disk
    total_files: int = 0
    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    prune_excluded: bool = False

    @property
    def manifest(self) -> tuple[str, ...]:
        return self.selection.paths

    def targets(self) -> list[tuple[Path, Path]]:
        """(source, destination) pairs, in manifest order."""
        return [
            (self.sources.get(key, self.vault_path / key), self.destination / key)
            for key in self.manifest
        ]

    def summary(self) -> str:
        selection = self.selection
        lines = [
            "Copy Plan",
            f"  Vault: {self.vault_path}",
            f"  Destination: {self.destination}",
            f"  Include tags: {', '.join(self.include_tags) or '(any)'}",
            f"  Exclude tags: {', '.join(self.exclude_tags) or '(none)'}",
            f"  Files to copy: {len(selection.paths)} of {self.total_files} ({len(selection.seeds)} tagged notes)",
        ]
        if self.prune_excluded:
            lines.append("  Excluded notes are pruned from link traversal")
        if selection.unresolved:
            lines.append(f"  Unresolved references (skipped): {len(selection.unresolved)}")
        if selection.frontmatter_warnings:
            lines.append(f"  Invalid front matter (treated as empty): {len(selection.frontmatter_warnings)}")
        return "\n".join(lines)


@dataclass
class CopyResult(BaseResult):
    """Result of copy execution."""
    files_copied: int = 0
    bytes_written: int = 0
    copied: list[Path] = field(default_factory=list)
