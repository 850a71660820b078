"""Copy command implementation - select part of a vault and copy it."""

import json
import logging
import os
import shutil
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import CopyConfig
from ..errors import CopyError, InvalidDestination, ObsidianCopyError
from ..planning import CopyPlan, CopyResult
from ..vault.frontmatter import FrontMatterDecoder, decode_front_matter
from ..vault.graph import VaultGraph
from ..vault.selection import SEED_REASON, select
from ..vault.walker import walk_vault

log = logging.getLogger(__name__)


def _check_destination(vault_path: Path, destination: Path) -> None:
    vault_real = Path(os.path.realpath(vault_path))
    dest_real = Path(os.path.realpath(destination))
    if dest_real == vault_real or vault_real in dest_real.parents:
        raise InvalidDestination(f"destination `{destination}` is inside the vault `{vault_path}`")


# -----------------------------------------------------------------------------
# Compute (reads the vault) / execute (writes the destination)
# -----------------------------------------------------------------------------


def compute_copy_plan(config: CopyConfig, decoder: FrontMatterDecoder = decode_front_matter) -> CopyPlan:
    """
    Work out which files would be copied, without writing anything.

    Raises:
        InvalidDestination: if the destination is the vault or inside it
        VaultReadError: if the vault can't be walked or a note can't be read
    """
    _check_destination(config.vault, config.destination)

    files = list(walk_vault(config.vault, config.ignore))
    graph = VaultGraph.build(
        config.vault,
        files,
        config.tag_filter,
        decoder=decoder,
        tag_field=config.tag_field,
    )
    selection = select(graph, prune_excluded=config.prune_excluded)

    return CopyPlan(
        vault_path=config.vault,
        destination=config.destination,
        selection=selection,
        sources={key: node.path for key, node in graph.nodes.items()},
        total_files=len(graph.nodes),
        include_tags=list(config.include_tags),
        exclude_tags=list(config.exclude_tags),
        prune_excluded=config.prune_excluded,
    )


def execute_copy_plan(plan: CopyPlan) -> CopyResult:
    """
    Copy every file in the plan, keeping its vault-relative path.

    Raises:
        CopyError: on the first file that fails to copy
    """
    result = CopyResult()

    for source, destination in plan.targets():
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        except OSError as e:
            raise CopyError(source, destination, e.strerror or str(e)) from e
        log.debug("Copied %s -> %s", source, destination)
        result.files_copied += 1
        result.bytes_written += destination.stat().st_size
        result.copied.append(destination)

    log.info("Copied %d files (%d bytes) to %s", result.files_copied, result.bytes_written, plan.destination)
    return result


def run_copy(
    config: CopyConfig,
    dry_run: bool = False,
    output_json: bool = False,
    explain: bool = False,
    strict: bool = False,
) -> int:
    """Select and copy part of a vault.

    Args:
        config: Resolved run configuration
        dry_run: Print the plan without copying
        output_json: Print the manifest and warnings as JSON on stdout
        explain: Show why each file is included
        strict: Fail without copying if there are any warnings

    Returns:
        Exit code (0 = success, 1 = error or strict-mode warnings)
    """
    console = Console(stderr=True)

    console.print(f"Indexing vault {config.vault}...", style="dim")
    try:
        plan = compute_copy_plan(config)
    except ObsidianCopyError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    selection = plan.selection

    if output_json:
        _output_json(plan)
    else:
        console.print(plan.summary())
        if explain:
            _print_explanations(console, plan)

    if selection.warning_count:
        _print_warnings(console, plan)

    if strict and selection.warning_count:
        console.print("\n✗ Strict mode: warnings found, nothing copied.", style="bold red")
        return 1

    if dry_run:
        console.print("\n[dim]Dry run - no files copied[/]")
        return 0

    try:
        result = execute_copy_plan(plan)
    except ObsidianCopyError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    console.print(f"\n✓ Copied {result.files_copied} files to {plan.destination}", style="bold green")
    return 0


def _output_json(plan: CopyPlan) -> None:
    selection = plan.selection
    output = {
        "vault": str(plan.vault_path),
        "destination": str(plan.destination),
        "files": list(selection.paths),
        "seeds": list(selection.seeds),
        "reasons": selection.reasons,
        "unresolved": [
            {"source": u.source, "target": u.target, "kind": u.kind.value}
            for u in selection.unresolved
        ],
        "frontmatter_warnings": [
            {"source": w.source, "message": w.message}
            for w in selection.frontmatter_warnings
        ],
        "summary": {
            "total_files": plan.total_files,
            "selected": len(selection.paths),
            "seeds": len(selection.seeds),
        },
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))


def _print_explanations(console: Console, plan: CopyPlan) -> None:
    table = Table(title="Included files")
    table.add_column("File")
    table.add_column("Reason", style="dim")
    for key in plan.selection.paths:
        reason = plan.selection.reasons[key]
        table.add_row(key, "tagged" if reason == SEED_REASON else f"referenced by {reason}")
    console.print(table)


def _print_warnings(console: Console, plan: CopyPlan) -> None:
    console.print()
    for warning in plan.selection.frontmatter_warnings:
        console.print(f"WARN: {warning}", style="yellow")
    for unresolved in plan.selection.unresolved:
        console.print(f"WARN: {unresolved}", style="yellow")
