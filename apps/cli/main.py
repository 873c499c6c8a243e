#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unified CLI dispatcher for gtypegen."""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import List, Optional, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _tool_path(tool: dict) -> Path:
    folder = tool.get("folder") or "apps/cli"
    return PROJECT_ROOT / folder / str(tool.get("file"))


def _print_tools(tools: List[dict]) -> None:
    from rich.console import Console
    from rich.table import Table

    table = Table(title="gtypegen tools", border_style="blue")
    table.add_column("Alias", style="cyan")
    table.add_column("Type", style="dim")
    table.add_column("Description", style="white")
    table.add_column("Usage", style="green")
    for t in tools:
        table.add_row(t.get("alias", ""), t.get("type", ""), t.get("desc", ""), t.get("usage", ""))
    Console().print(table)


def _resolve_tool(alias: Optional[str]) -> Tuple[Optional[Path], List[str]]:
    from apps.cli.registry import DEFAULT_ALIAS, get_tools

    tools = get_tools()
    key = str(alias or "").strip() or DEFAULT_ALIAS

    if key in ("-h", "--help", "help", "tools"):
        _print_tools(tools)
        return None, []

    for tool in tools:
        if tool.get("alias") == key or tool.get("file") == key:
            return _tool_path(tool), []

    # unknown alias: treat as arguments of the default tool
    default = next(t for t in tools if t.get("alias") == DEFAULT_ALIAS)
    return _tool_path(default), [key]


def main(argv: Optional[List[str]] = None) -> None:
    argv = list(argv) if argv is not None else list(sys.argv[1:])
    alias = argv[0] if argv else None
    path, injected = _resolve_tool(alias)
    if path is None:
        return

    if argv and alias:
        argv = argv[1:]
    argv = injected + argv

    sys.argv = [str(path)] + argv
    runpy.run_path(str(path), run_name="__main__")


if __name__ == "__main__":
    main()
