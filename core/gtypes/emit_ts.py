# -*- coding: utf-8 -*-
"""Render one analysis result as a TypeScript declaration module."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.gtypes.analysis import AnalysisResult
from core.gtypes.descriptors import GeneratorConfig
from core.gtypes.inference import (
    NEVER,
    ArrayOf,
    Field,
    LiteralUnion,
    Ref,
    Scalar,
    Shape,
    TypeNode,
    UnionOf,
    Verbatim,
)
from core.gtypes.naming import property_name

HEADER = "// Generated by gtypegen. Do not edit by hand."


def literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def key_type_name(base: str) -> str:
    return f"{base}Key"


def shape_type_name(base: str) -> str:
    return f"G{base}"


def render_type(t: TypeNode) -> str:
    if isinstance(t, Scalar):
        return "unknown" if t == NEVER else t.kind
    if isinstance(t, ArrayOf):
        item = render_type(t.item)
        if isinstance(t.item, (UnionOf, Verbatim)) or (isinstance(t.item, LiteralUnion) and len(t.item.values) > 1):
            return f"Array<{item}>"
        return f"{item}[]"
    if isinstance(t, Shape):
        if not t.fields:
            return "{}"
        return "{\n" + "\n".join(render_field(name, f) for name, f in t.fields) + "\n}"
    if isinstance(t, UnionOf):
        return " | ".join(render_type(m) for m in t.members)
    if isinstance(t, LiteralUnion):
        return " | ".join(literal(v) for v in t.values) or "never"
    if isinstance(t, Ref):
        return t.name
    if isinstance(t, Verbatim):
        return t.expr.strip()
    raise TypeError(f"unknown type node: {t!r}")


def doc_comment(text: str) -> List[str]:
    lines = [ln.strip().replace("*/", "*\\/") for ln in str(text).strip().splitlines()]
    lines = [ln for ln in lines if ln]
    if not lines:
        return []
    if len(lines) == 1:
        return [f"/** {lines[0]} */"]
    return ["/**"] + [f" * {ln}" for ln in lines] + [" */"]


def render_field(name: str, f: Field) -> str:
    parts = doc_comment(f.description) if f.description else []
    opt = "?" if f.optional else ""
    parts.append(f"{property_name(name)}{opt}: {render_type(f.type)};")
    return "\n".join(parts)


def union_declaration(name: str, members: Sequence[Tuple[str, Optional[str]]]) -> str:
    """`export type Name = ...;` with one member per line and optional trailing comments."""
    if not members:
        return f"export type {name} = never;"
    if len(members) == 1:
        text, comment = members[0]
        tail = f" // {comment}" if comment else ""
        return f"export type {name} = {text};{tail}"
    lines = [f"export type {name} ="]
    last = len(members) - 1
    for i, (text, comment) in enumerate(members):
        end = ";" if i == last else ""
        tail = f" // {comment}" if comment else ""
        lines.append(f"| {text}{end}{tail}")
    return "\n".join(lines)


def _discriminated(shape: Shape, group_key: Optional[str], value: Any) -> Shape:
    if not group_key or value is None:
        return shape
    fld = shape.get(group_key)
    if fld is None or isinstance(fld.type, (Verbatim, Ref)):
        return shape
    return shape.with_field(group_key, replace(fld, type=LiteralUnion((value,)), optional=False))


def emit(result: AnalysisResult, group_key: Optional[str], config: GeneratorConfig) -> str:
    """Declaration module text (unformatted) for one group."""
    base = result.category
    blocks: List[str] = [f"{HEADER}\n// Source: {config.GKey}/{result.group}"]

    blocks.append(
        union_declaration(
            key_type_name(base),
            [(literal(k), result.key_labels.get(k)) for k in result.keys],
        )
    )

    for ext in result.extracted:
        blocks.append(union_declaration(ext.name, [(literal(v), None) for v in ext.values]))

    shape = result.shape
    if config.discriminate:
        shape = _discriminated(shape, group_key, result.group_value)
    body = "\n".join(render_field(name, f) for name, f in shape.fields)
    blocks.append(f"export interface {shape_type_name(base)} {{\n{body}\n}}" if body else f"export interface {shape_type_name(base)} {{}}")

    return "\n\n".join(blocks) + "\n"


def snapshot(result: AnalysisResult) -> Dict[str, Any]:
    """Structured debug view of one analysis result."""
    return result.to_dict()
