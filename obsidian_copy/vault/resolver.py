"""Resolution of link and embed targets to vault files."""

import os
import posixpath
import unicodedata
from collections import defaultdict
from pathlib import Path
from typing import Iterable

MARKDOWN_SUFFIX = ".md"


def normalize_text(text: str) -> str:
    """NFC-normalize text so composed and decomposed spellings compare equal."""
    return unicodedata.normalize("NFC", text)


def canonical_root(vault_root: Path) -> Path:
    """Absolute, symlink-free form of the vault root."""
    return Path(os.path.realpath(vault_root))


def to_key(path: Path, vault_root: Path) -> str:
    """Identity of a vault file: its root-relative POSIX path, NFC-normalized.

    Raises:
        ValueError: if `path` is not inside `vault_root`
    """
    try:
        rel = Path(os.path.abspath(path)).relative_to(os.path.abspath(vault_root))
    except ValueError:
        # Root given through a symlink, or files listed by their real path
        rel = Path(os.path.realpath(path)).relative_to(canonical_root(vault_root))
    return normalize_text(rel.as_posix())


def is_markdown(key: str) -> bool:
    return key.lower().endswith(MARKDOWN_SUFFIX)


def _has_extension(target: str) -> bool:
    return bool(posixpath.splitext(posixpath.basename(target))[1])


class PathResolver:
    """Resolve raw link targets against the set of files known to exist.

    Only the discovered file list is consulted, so resolution never touches
    the filesystem and files hidden by ignore rules never resolve.
    """

    def __init__(self, keys: Iterable[str]):
        self._keys = {normalize_text(k) for k in keys}
        names: dict[str, list[str]] = defaultdict(list)
        for key in self._keys:
            names[posixpath.basename(key)].append(key)
        self._by_name = {name: sorted(found) for name, found in names.items()}

    @staticmethod
    def _normalize(candidate: str) -> str | None:
        """Collapse `.` and `..` segments; None if the path leaves the vault."""
        path = posixpath.normpath(candidate)
        if path == "." or path == ".." or path.startswith("../"):
            return None
        return path

    def _lookup(self, candidate: str) -> str | None:
        key = self._normalize(candidate)
        if key is not None and key in self._keys:
            return key
        return None

    def _by_suffix(self, target: str) -> str | None:
        """Match a bare name or partial path anywhere in the vault.

        The lexicographically smallest match wins when several files share
        the name.
        """
        normalized = self._normalize(target)
        if normalized is None:
            return None
        name = posixpath.basename(normalized)
        for key in self._by_name.get(name, ()):
            if key == normalized or key.endswith("/" + normalized):
                return key
        return None

    def resolve(self, raw_target: str, source: str) -> str | None:
        """Resolve `raw_target` as written in `source` to a file key.

        Tried in order:
        1. relative to the directory of `source`
        2. relative to the vault root, with `.md` appended when the target
           has no extension
        3. relative to the vault root, literally
        4. by file name (or trailing partial path) anywhere in the vault

        Returns None when nothing matches.
        """
        target = normalize_text(raw_target.strip()).replace("\\", "/")
        if not target:
            return None
        has_extension = _has_extension(target)

        candidates = []
        if target.startswith("/"):
            target = target.lstrip("/")
        else:
            relative = posixpath.join(posixpath.dirname(source), target)
            candidates.append(relative)
            if not has_extension:
                candidates.append(relative + MARKDOWN_SUFFIX)
        if not has_extension:
            candidates.append(target + MARKDOWN_SUFFIX)
        candidates.append(target)

        for candidate in candidates:
            key = self._lookup(candidate)
            if key is not None:
                return key

        if not has_extension:
            key = self._by_suffix(target + MARKDOWN_SUFFIX)
            if key is not None:
                return key
        return self._by_suffix(target)
