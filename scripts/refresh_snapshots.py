#!/usr/bin/env python3
"""Refresh or inspect the directory feed snapshots out of process.

Fetches each configured feed once through the same fallback loader the web
server uses, so a successful run leaves fresh snapshots in the snapshot
directory and the next server start (or cache expiry) can use them even if the
directory service goes down.

Usage::

    python scripts/refresh_snapshots.py              # fetch both feeds, save snapshots
    python scripts/refresh_snapshots.py --check      # only report snapshot ages
    python scripts/refresh_snapshots.py --aggregate  # also print the office directory
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

# Ensure the project is importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from member_portal import config as cfg  # noqa: E402
from member_portal.aggregator import aggregate  # noqa: E402
from member_portal.errors import PortalError, SnapshotIOError  # noqa: E402
from member_portal.pipeline import PageBuilder, create_page_builder  # noqa: E402

console = Console()


def _format_age(age_s: float | None) -> str:
    if age_s is None:
        return "[red]missing[/red]"
    if age_s < 3600:
        return f"{age_s / 60:.0f} min"
    return f"{age_s / 3600:.1f} h"


def _check(builder: PageBuilder) -> int:
    table = Table(title=f"Snapshots in {builder.store.root}")
    table.add_column("Feed", justify="right")
    table.add_column("Path")
    table.add_column("Age", justify="right")
    missing = 0
    for feed_id in (builder.primary_feed_id, builder.secondary_feed_id):
        path = builder.store.path_for(feed_id)
        age = builder.store.age_seconds(path)
        if age is None:
            missing += 1
        table.add_row(str(feed_id), str(path), _format_age(age))
    console.print(table)
    return 1 if missing else 0


def _refresh(builder: PageBuilder, *, show_directory: bool) -> int:
    table = Table(title="Feed refresh")
    table.add_column("Feed", justify="right")
    table.add_column("Source")
    table.add_column("Bytes", justify="right")
    table.add_column("Snapshot age", justify="right")

    payloads: dict[int, str] = {}
    failed = 0
    for feed_id in (builder.primary_feed_id, builder.secondary_feed_id):
        path = builder.store.path_for(feed_id)
        try:
            payloads[feed_id] = builder.loader.load(feed_id, path)
        except SnapshotIOError as exc:
            failed += 1
            table.add_row(str(feed_id), "[red]unavailable[/red]", "-", _format_age(None))
            logging.getLogger("refresh").error("Feed %d: %s", feed_id, exc)
            continue
        source = builder.loader.last_source.get(feed_id, "?")
        colour = "green" if source == "remote" else "yellow"
        table.add_row(
            str(feed_id),
            f"[{colour}]{source}[/{colour}]",
            str(len(payloads[feed_id])),
            _format_age(builder.store.age_seconds(path)),
        )
    console.print(table)

    if failed:
        return 1
    if show_directory:
        try:
            directory = aggregate(
                payloads[builder.primary_feed_id],
                payloads[builder.secondary_feed_id],
            )
        except PortalError as exc:
            console.print(f"[red]Aggregation failed:[/red] {exc}")
            return 1
        dir_table = Table(title=f"Office directory ({len(directory)} entries)")
        for column in ("Office", "Given name", "Surname", "Nickname", "E-mail", "Re-election"):
            dir_table.add_column(column)
        for h in directory:
            dir_table.add_row(
                h.office_title,
                h.given_name,
                h.surname,
                h.nickname,
                h.email,
                h.reelection_label,
            )
        console.print(dir_table)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Refresh or inspect member portal feed snapshots.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report snapshot ages; make no remote calls.",
    )
    parser.add_argument(
        "--aggregate",
        action="store_true",
        help="After refreshing, aggregate the feeds and print the directory.",
    )
    parser.add_argument(
        "--snapshot-dir",
        type=Path,
        default=None,
        help=f"Snapshot directory (default: {cfg.SNAPSHOT_DIR}).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    builder = create_page_builder()
    if args.snapshot_dir is not None:
        builder.store.root = args.snapshot_dir

    if args.check:
        sys.exit(_check(builder))
    sys.exit(_refresh(builder, show_directory=args.aggregate))


if __name__ == "__main__":
    main()
