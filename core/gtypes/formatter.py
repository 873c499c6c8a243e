# -*- coding: utf-8 -*-
"""Deterministic formatting of generated TypeScript.

The built-in formatter re-indents by bracket depth, trims whitespace, collapses
blank runs and checks that brackets, strings and block comments are balanced.
It is not a parser; it catches the templating defects that produce unbalanced
output. `PrettierFormatter` shells out to prettier for full formatting.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import List, Optional, Sequence

from core.gtypes.errors import FormattingError

INDENT = "  "
_OPEN = {"{": "}", "[": "]", "(": ")", "<": ">"}
_CLOSE = {v: k for k, v in _OPEN.items()}


def _scan_line(line: str, stack: List[str], *, source: str, lineno: int, in_comment: bool) -> bool:
    """Update the bracket stack for one line; returns block-comment state."""
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if in_comment:
            if line.startswith("*/", i):
                in_comment = False
                i += 2
                continue
            i += 1
            continue
        if line.startswith("//", i):
            break
        if line.startswith("/*", i):
            in_comment = True
            i += 2
            continue
        if ch in ("'", '"', "`"):
            j = i + 1
            while j < n and line[j] != ch:
                j += 2 if line[j] == "\\" else 1
            if j >= n:
                raise FormattingError(f"line {lineno}: unterminated string literal", source=source)
            i = j + 1
            continue
        if ch == "=" and line.startswith("=>", i):
            i += 2
            continue
        if ch in _OPEN:
            stack.append(ch)
        elif ch in _CLOSE:
            if not stack or stack[-1] != _CLOSE[ch]:
                raise FormattingError(f"line {lineno}: unbalanced '{ch}'", source=source)
            stack.pop()
        i += 1
    return in_comment


def _leading_closers(line: str) -> int:
    count = 0
    for ch in line:
        if ch in _CLOSE:
            count += 1
        elif ch == " ":
            continue
        else:
            break
    return count


class BuiltinFormatter:
    name = "builtin"

    def format(self, text: str, *, source: str) -> str:
        stack: List[str] = []
        in_comment = False
        out: List[str] = []
        blank = False
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                if out and not blank:
                    out.append("")
                blank = True
                continue
            blank = False
            if in_comment:
                depth = len(stack)
                prefix = " " if line.startswith("*") else ""
                out.append(INDENT * depth + prefix + line)
            else:
                depth = max(len(stack) - _leading_closers(line), 0)
                # union continuation lines hang one level deeper
                if line.startswith("| ") or line.startswith("& "):
                    depth += 1
                out.append(INDENT * depth + line)
            in_comment = _scan_line(line, stack, source=source, lineno=lineno, in_comment=in_comment)

        if in_comment:
            raise FormattingError("unterminated block comment", source=source)
        if stack:
            raise FormattingError(f"unclosed '{stack[-1]}'", source=source)
        while out and not out[-1]:
            out.pop()
        return "\n".join(out) + "\n"


class PrettierFormatter:
    name = "prettier"

    def __init__(self, command: Optional[Sequence[str]] = None, timeout: float = 60.0):
        self.command = list(command) if command else self._default_command()
        self.timeout = timeout

    @staticmethod
    def _default_command() -> List[str]:
        if shutil.which("prettier"):
            return ["prettier", "--parser", "typescript"]
        return ["npx", "--yes", "prettier", "--parser", "typescript"]

    def format(self, text: str, *, source: str) -> str:
        try:
            proc = subprocess.run(
                self.command,
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise FormattingError(f"prettier failed to run: {exc}", source=source) from exc
        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip().splitlines()
            raise FormattingError(f"prettier rejected output: {detail[0] if detail else proc.returncode}", source=source)
        return proc.stdout


def get_formatter(name: str = "builtin"):
    key = str(name or "builtin").strip().lower()
    if key == "builtin":
        return BuiltinFormatter()
    if key == "prettier":
        return PrettierFormatter()
    raise ValueError(f"unknown formatter: {name}")
