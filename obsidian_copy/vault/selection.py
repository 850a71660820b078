"""Selection of the files to copy: seeds plus everything they reach."""

import logging
from collections import deque

from ..models import SelectionResult
from .filters import is_excluded
from .graph import VaultGraph

log = logging.getLogger(__name__)

SEED_REASON = "seed"


def select(graph: VaultGraph, prune_excluded: bool = False) -> SelectionResult:
    """Compute the inclusion set of a graph.

    Breadth-first traversal from every seed, in key order. A node is visited
    at most once however many paths lead to it, so cycles terminate.

    By default exclusion only decides seed status: a note with an excluded
    tag is still copied when an included note links to it. With
    `prune_excluded`, notes carrying an excluded tag are neither
    copied nor traversed.

    Returns:
        SelectionResult whose `reasons` maps each included key to "seed" or
        to the key of the note that first reached it
    """
    reasons: dict[str, str] = {}
    queue: deque[str] = deque()

    def blocked(key: str) -> bool:
        return prune_excluded and is_excluded(graph.nodes[key].tags, graph.tag_filter)

    for key in graph.seeds:
        reasons[key] = SEED_REASON
        queue.append(key)

    while queue:
        current = queue.popleft()
        for target in sorted(graph.get_references(current)):
            if target in reasons or blocked(target):
                continue
            reasons[target] = current
            queue.append(target)

    for key, node in graph.nodes.items():
        node.included = key in reasons

    paths = tuple(sorted(reasons))
    log.info("Selected %d of %d files (%d seeds)", len(paths), len(graph.nodes), len(graph.seeds))

    return SelectionResult(
        paths=paths,
        seeds=tuple(graph.seeds),
        reasons=reasons,
        unresolved=[u for u in graph.unresolved if u.source in reasons],
        frontmatter_warnings=list(graph.frontmatter_warnings),
    )
