"""obsidian-copy - copy part of an Obsidian vault according to tag filters."""

__version__ = "0.1.0"
