"""
Error types raised by obsidian-copy.

Fatal errors abort a run before anything is written to the destination.
Front-matter problems are recovered by the graph builder and surface as
warnings instead.
"""

from pathlib import Path


class ObsidianCopyError(RuntimeError):
    """Base class for obsidian-copy errors."""

    pass


class VaultReadError(ObsidianCopyError):
    """Raised when enumerating or reading vault files fails."""

    def __init__(self, path: Path, reason: str = "failed to read"):
        self.path = path
        super().__init__(f"{reason}: `{path}`")


class PathDoesNotExist(VaultReadError):
    """Raised when the vault root does not exist."""

    def __init__(self, path: Path):
        super().__init__(path, "No such file or directory")


class FrontMatterDecodeError(ObsidianCopyError):
    """Raised by the front-matter decoder on malformed YAML."""

    pass


class CopyError(ObsidianCopyError):
    """Raised when copying a file to the destination fails."""

    def __init__(self, source: Path, destination: Path, reason: str = ""):
        self.source = source
        self.destination = destination
        message = f"failed to copy `{source}` to `{destination}`"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidDestination(ObsidianCopyError):
    """Raised when the destination would overlap the vault."""

    pass


class ConfigError(ObsidianCopyError):
    """Raised when a config file is malformed."""

    pass
