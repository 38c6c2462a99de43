"""CLI for the gallery engine (filter, facets, validate, export)."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from gallery_engine.catalog.snapshot import SnapshotCatalog
from gallery_engine.config import (
    FOOTER_MASK_PATH,
    HEADER_MASK_PATH,
    PAGE_SIZE,
    resolve_output_directory,
)
from gallery_engine.core.filtering.cascade import GallerySession, visible_ids
from gallery_engine.core.filtering.requirements import (
    describe_missing_groups,
    find_order_collisions,
    missing_required_groups,
    sort_categories,
    sort_tags,
)
from gallery_engine.core.report.job import run_report_job
from gallery_engine.core.text import simplify_text
from gallery_engine.images import HttpImageLoader
from gallery_engine.logging_config import configure_logging
from gallery_engine.models.catalog import Alert, FilterState, Tag

app = typer.Typer(help="Gallery engine: filter a tagged catalog and export PDF reports.")

SnapshotArg = Annotated[Path, typer.Argument(help="JSON snapshot of the catalog")]
QueryOpt = Annotated[str, typer.Option("--query", "-q", help="Free-text search")]
TagOpt = Annotated[
    list[str] | None, typer.Option("--tag", "-t", help="Select a tag (id or name), repeatable")
]
AuthorOpt = Annotated[str | None, typer.Option("--author", "-a", help="Only items by this author id")]
SeedOpt = Annotated[int | None, typer.Option("--seed", help="Shuffle seed (random if omitted)")]
RecentOpt = Annotated[bool, typer.Option("--recent", "-r", help="Sort newest first")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_snapshot(snapshot: Path) -> SnapshotCatalog:
    """Load the snapshot, exiting if it does not exist."""
    if not snapshot.exists():
        logger.error("Snapshot not found: {}", snapshot)
        raise typer.Exit(1)
    return SnapshotCatalog.from_file(snapshot)


def _resolve_tag_ids(tags: list[Tag], values: list[str]) -> tuple[str, ...]:
    """Resolve tag ids or names to ids, exiting on an unknown value."""
    by_id = {t.id: t for t in tags}
    by_name = {simplify_text(t.name): t for t in tags}
    resolved: list[str] = []
    for value in values:
        tag = by_id.get(value) or by_name.get(simplify_text(value))
        if tag is None:
            typer.echo(f"Tag '{value}' not found.")
            raise typer.Exit(1)
        if tag.id not in resolved:
            resolved.append(tag.id)
    return tuple(resolved)


def _session_and_state(
    catalog: SnapshotCatalog,
    *,
    query: str,
    tag: list[str] | None,
    author: str | None,
    recent: bool,
    seed: int | None,
) -> tuple[GallerySession, FilterState]:
    tags = catalog.get_tags()
    session = GallerySession(catalog.get_item_index(), tags, catalog.get_categories(), seed=seed)
    state = FilterState(
        search_text=query,
        selected_tag_ids=_resolve_tag_ids(tags, tag or []),
        author_id=author,
        sort_by_recency=recent,
    )
    return session, state


@app.command(name="filter")
def filter_cmd(
    snapshot: SnapshotArg,
    query: QueryOpt = "",
    tag: TagOpt = None,
    author: AuthorOpt = None,
    recent: RecentOpt = False,
    seed: SeedOpt = None,
    limit: int = typer.Option(PAGE_SIZE, "--limit", "-n", help="Max items to show"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List items matching the filters, in session order."""
    catalog = _open_snapshot(snapshot)
    session, state = _session_and_state(
        catalog, query=query, tag=tag, author=author, recent=recent, seed=seed
    )
    result = session.compute(state)
    shown = visible_ids(result, limit)
    names = {item.id: item.name for item in session.shuffled_index}

    if output_json:
        data = {
            "seed": session.seed,
            "total": len(result.ordered_ids),
            "ids": list(shown),
            "available_tags_by_level": {
                str(level): sorted(ids) for level, ids in sorted(result.available_tags_by_level.items())
            },
            "lineage_tags": sorted(result.lineage_tags),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"Found {len(result.ordered_ids)} items (showing {len(shown)}, seed {session.seed}):\n")
    for item_id in shown:
        typer.echo(f"  {names.get(item_id, '')}  [id={item_id}]")


@app.command()
def facets(
    snapshot: SnapshotArg,
    query: QueryOpt = "",
    tag: TagOpt = None,
    author: AuthorOpt = None,
) -> None:
    """Show each level's tags: selected (*), available (+) or unreachable (-)."""
    catalog = _open_snapshot(snapshot)
    session, state = _session_and_state(
        catalog, query=query, tag=tag, author=author, recent=False, seed=0
    )
    result = session.compute(state)
    tags = sort_tags(catalog.get_tags())

    for category in sort_categories(catalog.get_categories()):
        available = result.available_tags_by_level.get(category.order, frozenset())
        marker = " (required)" if category.is_required else ""
        typer.echo(f"{category.order}. {category.name}{marker}")
        level_tags = [t for t in tags if t.category_id == category.id]
        if not level_tags:
            typer.echo("    (no tags)")
        for t in level_tags:
            if t.id in state.selected_tag_ids:
                flag = "*"
            elif t.id in available:
                flag = "+"
            else:
                flag = "-"
            emphasis = " !" if t.id in result.lineage_tags else ""
            typer.echo(f"    {flag} {t.name}{emphasis}")


@app.command()
def validate(snapshot: SnapshotArg) -> None:
    """Check items against required categories and report tag order collisions."""
    catalog = _open_snapshot(snapshot)
    tags = catalog.get_tags()
    categories = catalog.get_categories()

    collisions = find_order_collisions(tags)
    for c in collisions:
        typer.echo(f"Order collision in category {c.category_id}: order {c.order} -> {list(c.tag_ids)}")

    failing = 0
    for item in catalog.get_item_index():
        missing = missing_required_groups(item.tag_ids, tags, categories)
        if missing:
            failing += 1
            typer.echo(f"{item.name} [id={item.id}] is missing:")
            for line in describe_missing_groups(missing).splitlines():
                typer.echo(f"  - {line}")

    typer.echo(f"{failing} items missing required tags, {len(collisions)} order collisions")
    if failing:
        raise typer.Exit(1)


def _echo_alert(alert: Alert) -> None:
    typer.echo(f"[{alert.severity}] {alert.title}: {alert.message}", err=True)


@app.command()
def export(
    snapshot: SnapshotArg,
    select: Annotated[
        list[str] | None, typer.Option("--select", "-s", help="Item id to export, repeatable")
    ] = None,
    all_visible: bool = typer.Option(False, "--all", help="Export every item matching the filters"),
    query: QueryOpt = "",
    tag: TagOpt = None,
    author: AuthorOpt = None,
    recent: RecentOpt = False,
    seed: SeedOpt = None,
    out_dir: Annotated[
        Path | None, typer.Option("--out-dir", "-o", help="Directory for the PDF")
    ] = None,
    header_mask: Annotated[
        Path | None, typer.Option("--header-mask", help="Header artwork image")
    ] = None,
    footer_mask: Annotated[
        Path | None, typer.Option("--footer-mask", help="Footer artwork image")
    ] = None,
    item_limit: Annotated[
        int | None, typer.Option("--item-limit", help="Override the configured item ceiling")
    ] = None,
) -> None:
    """Compose the selected, filtered items into a PDF report."""
    catalog = _open_snapshot(snapshot)
    session, state = _session_and_state(
        catalog, query=query, tag=tag, author=author, recent=recent, seed=seed
    )
    result = session.compute(state)
    selected = result.ordered_ids if all_visible else (select or [])

    header = header_mask or (HEADER_MASK_PATH if HEADER_MASK_PATH.exists() else None)
    footer = footer_mask or (FOOTER_MASK_PATH if FOOTER_MASK_PATH.exists() else None)

    with typer.progressbar(length=100, label="Generating PDF") as bar:
        shown = 0

        def on_progress(value: int) -> None:
            nonlocal shown
            if value > shown:
                bar.update(value - shown)
                shown = value

        output = asyncio.run(
            run_report_job(
                result.ordered_ids,
                selected,
                catalog=catalog,
                image_loader=HttpImageLoader(),
                reporter=_echo_alert,
                item_limit=item_limit,
                tags=catalog.get_tags(),
                header_mask=str(header) if header else None,
                footer_mask=str(footer) if footer else None,
                on_progress=on_progress,
            )
        )

    if output is None:
        raise typer.Exit(1)

    target_dir = out_dir or resolve_output_directory()
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / output.filename
    target.write_bytes(output.document)
    typer.echo(f"Wrote {output.page_count} pages to {target}")
