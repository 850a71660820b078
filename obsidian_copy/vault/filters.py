"""Tag filter predicate."""

from collections.abc import Set

from ..models import TagFilter


def passes(tags: Set[str], tag_filter: TagFilter) -> bool:
    """Return True if a document with `tags` passes the filter.

    An empty include set admits everything that is not excluded. Exclusion
    always takes precedence over inclusion.
    """
    if tags & tag_filter.exclude:
        return False
    if not tag_filter.include:
        return True
    return bool(tags & tag_filter.include)


def is_excluded(tags: Set[str], tag_filter: TagFilter) -> bool:
    """Return True if any of `tags` is in the exclude set."""
    return bool(tags & tag_filter.exclude)
