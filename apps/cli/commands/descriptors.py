#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Descriptor status / scaffolding."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

PROJECT_ROOT = Path(__file__).resolve().parents[3]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from apps.cli.cli_common import file_info, human_mtime  # noqa: E402
from core.config import ConfigLoader  # noqa: E402
from core.gtypes.descriptors import DESCRIPTOR_SUFFIX, DescriptorStore  # noqa: E402
from core.gtypes.errors import GeneratorError  # noqa: E402
from core.gtypes.gdata import fetch_raw_data  # noqa: E402

console = Console()


def _status(disabled: bool) -> str:
    if disabled:
        return "[yellow]disabled[/yellow]"
    return "[green]enabled[/green]"


def cmd_list(store: DescriptorStore) -> int:
    table = Table(title=f"Descriptors ({store.directory})", box=None, show_header=True, header_style="bold cyan")
    table.add_column("GKey", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("groupKey", style="white")
    table.add_column("Overrides", justify="right")
    table.add_column("Extracted", justify="right")
    table.add_column("Docs", justify="right")
    table.add_column("Modified", style="dim")

    for config in store:
        info = file_info(store.directory / f"{config.GKey}{DESCRIPTOR_SUFFIX}")
        table.add_row(
            config.GKey,
            _status(config.disabled),
            config.groupKey or "-",
            str(len(config.overrides)),
            str(len(config.extractedTypes)),
            str(len(config.description)),
            human_mtime(info.get("mtime")),
        )
    console.print(table)
    enabled = len(store.enabled())
    console.print(f"{len(store)} descriptors, [green]{enabled}[/green] enabled")
    return 0


def cmd_scaffold(store: DescriptorStore, source: str, timeout: float) -> int:
    data = asyncio.run(fetch_raw_data(source, timeout=timeout))
    created = store.reconcile(data)
    if not created:
        console.print("✅ Every category already has a descriptor")
        return 0
    for path in created:
        console.print(f"[yellow]📝 {path}[/yellow]")
    console.print(f"✅ Scaffolded {len(created)} disabled descriptor(s)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="gtypegen descriptor management")
    p.add_argument("action", nargs="?", choices=["list", "scaffold"], default="list")
    p.add_argument("--config", default=None, help="settings.ini path")
    p.add_argument("--descriptors", default=None, help="Descriptor directory")
    p.add_argument("--source", default=None, help="Raw data file or http(s) URL (scaffold)")
    args = p.parse_args(argv)

    cfg = ConfigLoader(Path(args.config) if args.config else None)
    directory = Path(args.descriptors).expanduser() if args.descriptors else cfg.path("DESCRIPTOR_DIR")
    if directory is None:
        raise SystemExit("DESCRIPTOR_DIR missing. Set conf/settings.ini or pass --descriptors.")
    directory.mkdir(parents=True, exist_ok=True)

    console.print(Panel("[bold cyan]gtypegen descriptors[/bold cyan]", border_style="cyan"))
    try:
        store = DescriptorStore.load(directory)
        if args.action == "scaffold":
            source = args.source or cfg.source()
            if not source:
                raise SystemExit("DATA_SOURCE missing. Set conf/settings.ini or pass --source.")
            return cmd_scaffold(store, source, cfg.getfloat("GENERATOR", "HTTP_TIMEOUT", 30.0))
        return cmd_list(store)
    except GeneratorError as exc:
        console.print(f"[red]❌ {exc}[/red]")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
