"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from obsidian_copy.models import TagFilter
from obsidian_copy.vault.graph import VaultGraph
from obsidian_copy.vault.walker import walk_vault


def write_note(path: Path, body: str = "", *, tags: list[str] | None = None) -> Path:
    """Write a Markdown note, with a `tags` front matter block when given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    if tags is not None:
        lines += ["---", f"tags: [{', '.join(tags)}]", "---", ""]
    lines.append(body)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_asset(path: Path, data: bytes = b"\x89PNG\r\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """An empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def build(vault: Path) -> Callable[..., VaultGraph]:
    """Walk the vault fixture and build its graph for a filter."""

    def _build(include=(), exclude=()) -> VaultGraph:
        return VaultGraph.build(vault, walk_vault(vault), TagFilter.from_lists(include, exclude))

    return _build


@pytest.fixture
def sample_vault(vault: Path) -> Path:
    """a.md (public) embeds img.png; b.md (private) links to a.md."""
    write_note(vault / "a.md", "Intro.\n\n![[img.png]]", tags=["public"])
    write_note(vault / "b.md", "See [[a]].", tags=["private"])
    write_asset(vault / "img.png")
    return vault
