from pathlib import Path

import pytest

from conftest import write_asset, write_note
from obsidian_copy.errors import FrontMatterDecodeError, VaultReadError
from obsidian_copy.models import RefKind, TagFilter
from obsidian_copy.vault.graph import VaultGraph, build_graph


def test_nodes_edges_and_seeds(sample_vault: Path, build):
    graph = build(include=["public"], exclude=["private"])

    assert list(graph.nodes) == ["a.md", "b.md", "img.png"]
    assert graph.nodes["a.md"].tags == frozenset({"public"})
    assert graph.nodes["a.md"].seed
    assert not graph.nodes["b.md"].seed
    assert not graph.nodes["img.png"].is_markdown
    assert graph.get_references("a.md") == {"img.png"}
    assert graph.get_references("b.md") == {"a.md"}
    assert graph.get_references("img.png") == set()
    assert graph.seeds == ["a.md"]


def test_duplicate_references_collapse(vault: Path, build):
    write_note(vault / "a.md", "[[b]] [[b|again]] [b](b.md) ![[b#Part]] [[a]]", tags=["public"])
    write_note(vault / "b.md", "")

    graph = build(include=["public"])

    assert graph.get_references("a.md") == {"b.md"}
    assert graph.edge_count == 1


def test_unresolved_references_are_recorded(vault: Path, build):
    write_note(vault / "a.md", "![[missing.png]] and [[ghost]]", tags=["public"])

    graph = build(include=["public"])

    assert [(u.source, u.target, u.kind) for u in graph.unresolved] == [
        ("a.md", "missing.png", RefKind.EMBED),
        ("a.md", "ghost", RefKind.LINK),
    ]
    assert graph.get_references("a.md") == set()


def test_malformed_front_matter_is_a_warning(vault: Path, build):
    (vault / "bad.md").write_text("---\ntags: [public\n---\n#inline [[b]]\n", encoding="utf-8")
    write_note(vault / "b.md", "")

    graph = build(include=["inline"])

    assert [w.source for w in graph.frontmatter_warnings] == ["bad.md"]
    assert graph.nodes["bad.md"].tags == frozenset({"inline"})
    assert graph.nodes["bad.md"].seed
    assert graph.get_references("bad.md") == {"b.md"}


def test_injected_decoder(vault: Path):
    write_note(vault / "a.md", "body")

    def decoder(text: str):
        return {"tags": ["from-decoder"]}, text

    graph = VaultGraph.build(vault, [vault / "a.md"], TagFilter.from_lists(["from-decoder"]), decoder=decoder)

    assert graph.nodes["a.md"].seed


def test_injected_decoder_failure_is_recovered(vault: Path):
    write_note(vault / "a.md", "body")

    def decoder(text: str):
        raise FrontMatterDecodeError("nope")

    graph = build_graph(vault, [vault / "a.md"], TagFilter())

    assert graph.nodes["a.md"].seed
    graph = build_graph(vault, [vault / "a.md"], TagFilter(), decoder=decoder)
    assert graph.frontmatter_warnings[0].message == "nope"


def test_discovered_order_does_not_matter(sample_vault: Path):
    files = sorted(sample_vault.iterdir())
    tag_filter = TagFilter.from_lists(["public"])

    forward = VaultGraph.build(sample_vault, files, tag_filter)
    backward = VaultGraph.build(sample_vault, list(reversed(files)), tag_filter)

    assert list(forward.nodes) == list(backward.nodes)
    assert dict(forward.edges) == dict(backward.edges)


def test_only_discovered_files_resolve(sample_vault: Path):
    files = [sample_vault / "a.md", sample_vault / "b.md"]

    graph = VaultGraph.build(sample_vault, files, TagFilter.from_lists(["public"]))

    assert "img.png" not in graph.nodes
    assert [u.target for u in graph.unresolved] == ["img.png"]


def test_custom_tag_field(vault: Path):
    (vault / "a.md").write_text("---\npublish: [web]\ntags: [other]\n---\nbody\n", encoding="utf-8")

    graph = VaultGraph.build(vault, [vault / "a.md"], TagFilter.from_lists(["web"]), tag_field="publish")

    assert graph.nodes["a.md"].seed


def test_file_outside_vault_is_an_error(vault: Path, tmp_path: Path):
    outside = write_asset(tmp_path / "elsewhere.png")

    with pytest.raises(VaultReadError):
        VaultGraph.build(vault, [outside], TagFilter())


def test_unreadable_note_is_an_error(vault: Path):
    (vault / "binary.md").write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(VaultReadError):
        VaultGraph.build(vault, [vault / "binary.md"], TagFilter())


def test_byte_order_mark_does_not_hide_front_matter(vault: Path, build):
    (vault / "a.md").write_text("\ufeff---\ntags: [public]\n---\nbody\n", encoding="utf-8")

    graph = build(include=["public"])

    assert graph.nodes["a.md"].tags == frozenset({"public"})
    assert graph.seeds == ["a.md"]
    assert graph.frontmatter_warnings == []


def test_brace_header_is_not_decoded_as_json(vault: Path, build):
    (vault / "a.md").write_text("{\nnot json\n}\n#public [[b]]\n", encoding="utf-8")
    write_note(vault / "b.md", "")

    graph = build(include=["public"])

    assert graph.seeds == ["a.md"]
    assert graph.get_references("a.md") == {"b.md"}
    assert graph.frontmatter_warnings == []


def test_repeated_missing_target_is_reported_once(vault: Path, build):
    write_note(vault / "a.md", "[[ghost]] again [[ghost|Ghost]] and ![[ghost]]", tags=["public"])

    graph = build(include=["public"])

    assert [(u.source, u.target) for u in graph.unresolved] == [("a.md", "ghost")]
