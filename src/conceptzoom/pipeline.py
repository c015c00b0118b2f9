"""Orchestrator: load snapshot → build tree → render."""

from __future__ import annotations

import logging
from pathlib import Path

from conceptzoom.builder import TreeBuilder
from conceptzoom.concepts import Category, select_catalog
from conceptzoom.config import read_config
from conceptzoom.explorer import ConceptExplorer
from conceptzoom.renderer.data import render_json
from conceptzoom.renderer.labels import node_text, status_message
from conceptzoom.renderer.text import render_text
from conceptzoom.snapshot import load_snapshot

logger = logging.getLogger(__name__)

FORMATS = ("text", "json")


def run(
    snapshot_path: Path,
    *,
    output: Path | None = None,
    fmt: str = "text",
    select: str | None = None,
    strict: bool | None = None,
    categories: list[Category] | None = None,
) -> str:
    """Run the full conceptzoom pipeline and return the rendered report.

    Settings not given explicitly come from the config next to the snapshot.
    Raises :class:`~conceptzoom.errors.SnapshotError` for unreadable input.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format {fmt!r}")

    snapshot_path = snapshot_path.resolve()
    config = read_config(snapshot_path.parent)
    on_error = config.on_error if strict is None else ("raise" if strict else "skip")
    wanted = categories if categories is not None else config.categories

    oracle = load_snapshot(snapshot_path)
    builder = TreeBuilder(oracle, select_catalog(wanted), on_error=on_error)
    explorer = ConceptExplorer(builder)

    selected = oracle.element(select) if select is not None else None
    if select is not None and selected is None:
        logger.warning("No element with handle %r in %s", select, snapshot_path.name)

    node = explorer.update(selected if selected is not None else oracle.project)
    tree = explorer.tree

    if fmt == "json":
        report = render_json(tree)
    else:
        report = render_text(tree, oracle) + "\n\n" + status_message(tree)
        if select is not None:
            if selected is None:
                report += f"\nSelected: {select} (not found)"
            elif node is None:
                report += f"\nSelected: {select} (no concepts)"
            else:
                report += f"\nSelected: {node_text(node, oracle)}"

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report + "\n")
        logger.info("Generated %s", output)

    return report
