#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Build the GTypes declaration tree from raw game data."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import ConfigLoader  # noqa: E402
from core.gtypes.analysis import DiagnosticPolicy  # noqa: E402
from core.gtypes.errors import GeneratorError  # noqa: E402
from core.gtypes.formatter import get_formatter  # noqa: E402
from core.gtypes.pipeline import Generator, RunReport  # noqa: E402
from core.gtypes.snapshots import now_iso  # noqa: E402

console = Console()


def setup_logging(silent: bool = False, verbose: bool = False) -> None:
    level = logging.WARNING if silent else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=False)],
        force=True,
    )


def _resolve(arg: Optional[str], cfg: ConfigLoader, key: str) -> Optional[Path]:
    if arg:
        p = Path(arg).expanduser()
        return p if p.is_absolute() else (PROJECT_ROOT / p).resolve()
    return cfg.path(key)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate TypeScript declarations for game data categories")
    p.add_argument("--config", default=None, help="settings.ini path (default conf/settings.ini)")
    p.add_argument("--source", default=None, help="Raw data file or http(s) URL")
    p.add_argument("--descriptors", default=None, help="Descriptor directory")
    p.add_argument("--out", default=None, help="Output directory of the declaration tree")
    p.add_argument("--tmp", default=None, help="Debug snapshot directory")
    p.add_argument("--no-snapshots", action="store_true", help="Skip debug snapshots")
    p.add_argument("--summary", default=None, help="Output summary Markdown")
    p.add_argument("--formatter", choices=["builtin", "prettier"], default=None)
    p.add_argument("--strict", action="store_true", help="Treat configuration diagnostics as errors")
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    p.add_argument("--silent", action="store_true")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(silent=args.silent, verbose=args.verbose)

    cfg = ConfigLoader(Path(args.config) if args.config else None)
    source = args.source or cfg.source()
    if not source:
        raise SystemExit("DATA_SOURCE missing. Set conf/settings.ini or pass --source.")

    descriptor_dir = _resolve(args.descriptors, cfg, "DESCRIPTOR_DIR")
    out_dir = _resolve(args.out, cfg, "OUT_DIR")
    tmp_dir = None if args.no_snapshots else _resolve(args.tmp, cfg, "TMP_DIR")
    summary_path = _resolve(args.summary, cfg, "SUMMARY")
    if descriptor_dir is None or out_dir is None:
        raise SystemExit("DESCRIPTOR_DIR / OUT_DIR missing. Set conf/settings.ini or pass --descriptors/--out.")

    severity = "error" if args.strict else (cfg.get("GENERATOR", "DIAGNOSTICS") or "warn")
    descriptor_dir.mkdir(parents=True, exist_ok=True)

    try:
        timeout = args.timeout if args.timeout is not None else cfg.getfloat("GENERATOR", "HTTP_TIMEOUT", 30.0)
        generator = Generator(
            out_dir,
            descriptor_dir=descriptor_dir,
            tmp_dir=tmp_dir,
            formatter=get_formatter(args.formatter or cfg.get("GENERATOR", "FORMATTER") or "builtin"),
            policy=DiagnosticPolicy(severity),
        )
        report = asyncio.run(generator.generate(source, timeout=timeout))
    except GeneratorError as exc:
        console.print(f"[red]❌ Generation failed: {exc}[/red]")
        return 1

    if not args.silent:
        console.print(_render_table(report))

    if summary_path is not None:
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        summary_path.write_text(_render_summary(report, source=str(source)), encoding="utf-8")
        console.print(f"✅ Summary written: {summary_path}")

    for path in report.created_descriptors:
        console.print(f"[yellow]📝 New disabled descriptor: {path}[/yellow]")
    console.print(f"✅ GTypes written: {out_dir} ({len(report.categories)} categories)")
    return 0


def _render_table(report: RunReport) -> Table:
    table = Table(title="Generated categories", border_style="blue")
    table.add_column("GKey", style="cyan")
    table.add_column("Grouped", justify="center")
    table.add_column("Groups", style="white")
    table.add_column("Keys", justify="right")
    for cat in report.categories:
        table.add_row(
            cat.gkey,
            "yes" if cat.grouped else "-",
            ", ".join(cat.groups),
            str(cat.keys),
        )
    return table


def _render_summary(report: RunReport, *, source: str) -> str:
    lines = []
    lines.append("# GTypes Generation Summary")
    lines.append("")
    lines.append("## Meta")
    lines.append("```yaml")
    lines.append(f"generated: {now_iso()}")
    lines.append(f"source: {source}")
    lines.append(f"files_written: {len(report.written)}")
    lines.append(f"stale_removed: {len(report.removed)}")
    lines.append("```")
    lines.append("")
    lines.append("## Categories")
    lines.append("| GKey | Groups | Keys |")
    lines.append("|------|--------|------|")
    for cat in report.categories:
        lines.append(f"| {cat.gkey} | {', '.join(cat.groups)} | {cat.keys} |")
    lines.append("")
    lines.append("## Descriptors")
    lines.append("```yaml")
    lines.append(f"disabled: {len(report.disabled)}")
    lines.append(f"scaffolded: {len(report.created_descriptors)}")
    lines.append(f"inert: {', '.join(report.inert) or '-'}")
    lines.append("```")
    if report.diagnostics:
        lines.append("")
        lines.append("## Diagnostics")
        for diag in report.diagnostics:
            lines.append(f"- {diag}")
    return "\n".join(lines) + "\n"


if __name__ == "__main__":
    raise SystemExit(main())
