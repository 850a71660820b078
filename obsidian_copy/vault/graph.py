"""Reference graph construction over vault files."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..errors import FrontMatterDecodeError, VaultReadError
from ..models import FrontMatterWarning, Reference, TagFilter, UnresolvedReference, VaultFile
from .filters import passes
from .frontmatter import FrontMatterDecoder, decode_front_matter
from .parser import extract_references
from .resolver import PathResolver, is_markdown, to_key
from .tags import extract_tags

log = logging.getLogger(__name__)


@dataclass
class VaultGraph:
    """Directed graph of vault files; edges point from a note to what it references."""

    root: Path
    tag_filter: TagFilter = field(default_factory=TagFilter)
    nodes: dict[str, VaultFile] = field(default_factory=dict)  # key -> VaultFile
    edges: dict[str, set[str]] = field(
        default_factory=lambda: defaultdict(set)
    )  # note -> referenced files
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    frontmatter_warnings: list[FrontMatterWarning] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        vault_root: Path,
        discovered_files: Iterable[Path],
        tag_filter: TagFilter,
        decoder: FrontMatterDecoder = decode_front_matter,
        tag_field: str = "tags",
    ) -> "VaultGraph":
        """Build the graph from the files a traversal discovered.

        Files are processed in key order so that the graph, and everything
        computed from it, is the same on every run over the same vault.

        Raises:
            VaultReadError: if a file is outside the vault or a note can't be read
        """
        graph = cls(root=Path(vault_root), tag_filter=tag_filter)

        # Add all nodes first
        for path in discovered_files:
            try:
                key = to_key(path, vault_root)
            except ValueError as e:
                raise VaultReadError(Path(path), "file is outside the vault") from e
            if key in graph.nodes:
                continue
            graph.nodes[key] = VaultFile(key=key, path=Path(path), is_markdown=is_markdown(key))

        graph.nodes = dict(sorted(graph.nodes.items()))
        resolver = PathResolver(graph.nodes)

        # Build edges
        for node in graph.nodes.values():
            if not node.is_markdown:
                continue
            graph._load_note(node, resolver, decoder, tag_field)

        log.info(
            "Built vault graph: %d files, %d references, %d unresolved",
            len(graph.nodes),
            graph.edge_count,
            len(graph.unresolved),
        )
        return graph

    def _load_note(
        self,
        node: VaultFile,
        resolver: PathResolver,
        decoder: FrontMatterDecoder,
        tag_field: str,
    ) -> None:
        try:
            text = node.path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise VaultReadError(node.path) from e

        try:
            front_matter, body = decoder(text)
        except FrontMatterDecodeError as e:
            log.warning("Invalid front matter in %s, treating as empty: %s", node.key, e)
            self.frontmatter_warnings.append(FrontMatterWarning(source=node.key, message=str(e)))
            front_matter, body = {}, _strip_front_matter_block(text)

        node.tags = extract_tags(front_matter, body, tag_field)
        node.seed = passes(node.tags, self.tag_filter)

        missing: set[str] = set()
        for ref in extract_references(body):
            target = resolver.resolve(ref.target, node.key)
            if target is None:
                if ref.target in missing:
                    continue
                missing.add(ref.target)
                log.debug("Unresolved reference in %s: %s", node.key, ref.target)
                self.unresolved.append(
                    UnresolvedReference(source=node.key, target=ref.target, kind=ref.kind)
                )
                continue
            self.add_edge(Reference(source=node.key, target=target))

    def add_edge(self, reference: Reference) -> None:
        """Add a resolved reference; self-references and duplicates collapse."""
        if reference.source == reference.target:
            return
        self.edges[reference.source].add(reference.target)

    def get_references(self, key: str) -> set[str]:
        """Files directly referenced by a note."""
        return self.edges.get(key, set())

    @property
    def seeds(self) -> list[str]:
        """Keys of notes that pass the tag filter on their own, in key order."""
        return [key for key, node in self.nodes.items() if node.seed]

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())


def _strip_front_matter_block(text: str) -> str:
    """Drop a leading `---` block without decoding it."""
    lines = text.split("\n")
    if not lines or lines[0].strip() != "---":
        return text
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() in ("---", "..."):
            return "\n".join(lines[i + 1 :])
    return text


def build_graph(
    vault_root: Path,
    discovered_files: Iterable[Path],
    tag_filter: TagFilter,
    decoder: FrontMatterDecoder = decode_front_matter,
    tag_field: str = "tags",
) -> VaultGraph:
    """Build a `VaultGraph`; see `VaultGraph.build`."""
    return VaultGraph.build(vault_root, discovered_files, tag_filter, decoder, tag_field)
