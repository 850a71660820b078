"""Tests for closure over the reference graph."""

from pathlib import Path

from conftest import write_asset, write_note
from obsidian_copy.vault.selection import SEED_REASON, select


def test_public_note_and_embedded_asset(sample_vault: Path, build):
    result = select(build(include=["public"], exclude=["private"]))

    assert result.paths == ("a.md", "img.png")
    assert result.seeds == ("a.md",)
    assert result.reasons == {"a.md": SEED_REASON, "img.png": "a.md"}


def test_untagged_note_linking_to_included_content_is_excluded(sample_vault: Path, build):
    write_note(sample_vault / "c.md", "Points at [[a]].")

    result = select(build(include=["public"]))

    assert "c.md" not in result.paths
    assert "a.md" in result


def test_included_note_is_selected_even_when_unreferenced(vault: Path, build):
    write_note(vault / "lonely.md", "Nobody links here.", tags=["public"])
    write_note(vault / "other.md", "", tags=["draft"])

    assert select(build(include=["public"])).paths == ("lonely.md",)


def test_orphan_asset_is_excluded(sample_vault: Path, build):
    write_asset(sample_vault / "unused.png")

    assert "unused.png" not in select(build(include=["public"])).paths


def test_transitive_reachability(vault: Path, build):
    write_note(vault / "start.md", "[[middle]]", tags=["public"])
    write_note(vault / "middle.md", "![[diagram.svg]] [[end]]")
    write_note(vault / "end.md", "[doc](files/paper.pdf)")
    write_asset(vault / "diagram.svg", b"<svg/>")
    write_asset(vault / "files" / "paper.pdf", b"%PDF")

    result = select(build(include=["public"]))

    assert result.paths == ("diagram.svg", "end.md", "files/paper.pdf", "middle.md", "start.md")
    assert result.reasons["files/paper.pdf"] == "end.md"


def test_cycles_terminate_and_include_both(vault: Path, build):
    write_note(vault / "a.md", "[[b]]", tags=["public"])
    write_note(vault / "b.md", "[[a]]")

    assert select(build(include=["public"])).paths == ("a.md", "b.md")


def test_cycle_without_seed_is_excluded(vault: Path, build):
    write_note(vault / "a.md", "[[b]]")
    write_note(vault / "b.md", "[[a]]")

    assert select(build(include=["public"])).paths == ()


def test_excluded_note_reached_by_link_is_still_included(vault: Path, build):
    write_note(vault / "pub.md", "[[priv]]", tags=["public"])
    write_note(vault / "priv.md", "![[secret.png]]", tags=["public", "private"])
    write_asset(vault / "secret.png")

    result = select(build(include=["public"], exclude=["private"]))

    assert result.seeds == ("pub.md",)
    assert result.paths == ("priv.md", "pub.md", "secret.png")


def test_prune_excluded_stops_traversal(vault: Path, build):
    write_note(vault / "pub.md", "[[priv]] ![[shared.png]]", tags=["public"])
    write_note(vault / "priv.md", "![[secret.png]] ![[shared.png]]", tags=["private"])
    write_asset(vault / "secret.png")
    write_asset(vault / "shared.png")

    graph = build(include=["public"], exclude=["private"])
    result = select(graph, prune_excluded=True)

    assert result.paths == ("pub.md", "shared.png")
    assert not graph.nodes["priv.md"].included


def test_empty_include_selects_every_note_not_excluded(vault: Path, build):
    write_note(vault / "plain.md", "No tags.")
    write_note(vault / "hidden.md", "", tags=["private"])
    write_asset(vault / "loose.png")

    assert select(build(exclude=["private"])).paths == ("plain.md",)


def test_overlapping_filter_selects_nothing(sample_vault: Path, build):
    assert select(build(include=["public"], exclude=["public"])).paths == ()


def test_unresolved_reference_does_not_affect_selection(vault: Path, build):
    write_note(vault / "a.md", "![[missing.png]] ![[here.png]]", tags=["public"])
    write_asset(vault / "here.png")

    result = select(build(include=["public"]))

    assert result.paths == ("a.md", "here.png")
    assert [(u.source, u.target) for u in result.unresolved] == [("a.md", "missing.png")]
    assert result.warning_count == 1


def test_unresolved_in_unselected_notes_are_not_reported(vault: Path, build):
    write_note(vault / "a.md", "", tags=["public"])
    write_note(vault / "b.md", "[[ghost]]")

    graph = build(include=["public"])

    assert len(graph.unresolved) == 1
    assert select(graph).unresolved == []


def test_selection_is_deterministic(sample_vault: Path, build):
    write_note(sample_vault / "c.md", "[[a]] [[b]]", tags=["public"])
    graph = build(include=["public"])

    first = select(graph)
    second = select(graph)

    assert first.paths == second.paths
    assert first.reasons == second.reasons
    assert select(build(include=["public"])).paths == first.paths


def test_included_flag_is_set_on_nodes(sample_vault: Path, build):
    graph = build(include=["public"])
    select(graph)

    assert {key for key, node in graph.nodes.items() if node.included} == {"a.md", "img.png"}


def test_footnote_text_does_not_pull_in_notes(vault: Path, build):
    write_note(vault / "a.md", "A claim.[^1]\n\n[^1]: secret notes were consulted", tags=["public"])
    write_note(vault / "secret.md", "", tags=["private"])

    graph = build(include=["public"], exclude=["private"])
    result = select(graph)

    assert result.paths == ("a.md",)
    assert result.unresolved == []
