"""
Vault traversal that honors `.gitignore` and `.ignore` files.

Patterns in an ignore file apply to the directory that holds it and
everything below, with gitignore semantics. Hidden files are not skipped,
so `.obsidian/` content can still be copied when a note references it.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from pathspec.gitignore import GitIgnoreSpec

from ..errors import PathDoesNotExist, VaultReadError

log = logging.getLogger(__name__)

IGNORE_FILE_NAMES = (".gitignore", ".ignore")

# Never descended into, regardless of ignore files
ALWAYS_SKIPPED_DIRS = frozenset({".git"})


def _load_ignore_spec(directory: Path) -> GitIgnoreSpec | None:
    lines: list[str] = []
    for name in IGNORE_FILE_NAMES:
        ignore_file = directory / name
        if not ignore_file.is_file():
            continue
        try:
            lines.extend(ignore_file.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as e:
            raise VaultReadError(ignore_file) from e
        log.debug("Loaded ignore file: %s", ignore_file)
    if not lines:
        return None
    return GitIgnoreSpec.from_lines(lines)


class IgnoreRules:
    """Stack of ignore specs, each scoped to a directory relative to the root."""

    def __init__(self, extra_patterns: Iterable[str] = ()):
        extra = [p for p in extra_patterns if p.strip()]
        self._specs: list[tuple[str, GitIgnoreSpec]] = []
        if extra:
            self._specs.append(("", GitIgnoreSpec.from_lines(extra)))

    def add(self, rel_dir: str, spec: GitIgnoreSpec) -> None:
        self._specs.append((rel_dir, spec))

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        for base, spec in self._specs:
            if base:
                if not rel_path.startswith(base + "/"):
                    continue
                local = rel_path[len(base) + 1 :]
            else:
                local = rel_path
            if is_dir:
                local += "/"
            if spec.match_file(local):
                return True
        return False


def walk_vault(root: Path, extra_ignores: Iterable[str] = ()) -> Iterator[Path]:
    """Yield every non-ignored file under `root`, in sorted order.

    Directory symlinks are not followed.

    Raises:
        PathDoesNotExist: if `root` does not exist
        VaultReadError: if a directory or ignore file cannot be read
    """
    root = Path(root)
    if not root.exists():
        raise PathDoesNotExist(root)
    if not root.is_dir():
        raise VaultReadError(root, "not a directory")

    rules = IgnoreRules(extra_ignores)

    def on_error(error: OSError) -> None:
        raise VaultReadError(Path(error.filename or root)) from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
        current = Path(dirpath)
        rel_dir = "" if current == root else current.relative_to(root).as_posix()

        spec = _load_ignore_spec(current)
        if spec is not None:
            rules.add(rel_dir, spec)

        def rel(name: str) -> str:
            return f"{rel_dir}/{name}" if rel_dir else name

        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in ALWAYS_SKIPPED_DIRS and not rules.is_ignored(rel(d), is_dir=True)
        )

        for name in sorted(filenames):
            if not rules.is_ignored(rel(name)):
                yield current / name
