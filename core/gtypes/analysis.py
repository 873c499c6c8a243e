# -*- coding: utf-8 -*-
"""Per-group analysis: key union, inferred shape, configured refinements.

Order of refinement for a group:

1. key union (distinct member keys, first-seen order)
2. inferred shape (fold over every record of the group)
3. `overrides` replace a field's type verbatim
4. `extractedTypes` turn a field into a reference to a named literal union
5. `description` attaches doc text

Configuration paths that never resolve in a category are not errors; they are
returned as `Diagnostic`s and `DiagnosticPolicy` decides what to do with them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.gtypes.descriptors import GeneratorConfig
from core.gtypes.errors import ConfigurationError
from core.gtypes.grouping import Entry, Grouped
from core.gtypes.inference import (
    ArrayOf,
    Ref,
    Shape,
    Verbatim,
    dedup_literals,
    get_field,
    infer_records,
    to_jsonable,
    update_field,
    values_at,
)
from core.gtypes.naming import RESERVED_TYPE_NAMES, is_identifier, pascal_identifier

logger = logging.getLogger(__name__)


@dataclass
class ExtractedUnion:
    name: str
    path: str
    values: Tuple[Any, ...]
    is_array: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "path": self.path, "values": list(self.values), "array": self.is_array}


@dataclass
class AnalysisResult:
    gkey: str
    group: str
    category: str
    keys: List[Union[str, int]]
    shape: Shape
    key_labels: Dict[Union[str, int], str] = field(default_factory=dict)
    extracted: List[ExtractedUnion] = field(default_factory=list)
    group_value: Any = None
    sample_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gkey": self.gkey,
            "group": self.group,
            "category": self.category,
            "group_value": self.group_value,
            "sample_count": self.sample_count,
            "keys": list(self.keys),
            "key_labels": {str(k): v for k, v in self.key_labels.items()},
            "schema": to_jsonable(self.shape),
            "extracted": [e.to_dict() for e in self.extracted],
        }


@dataclass(frozen=True)
class Diagnostic:
    gkey: str
    kind: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.gkey}: {self.kind} '{self.path}': {self.message}"


class DiagnosticPolicy:
    WARN = "warn"
    ERROR = "error"

    def __init__(self, severity: str = WARN):
        severity = str(severity or self.WARN).strip().lower()
        if severity not in (self.WARN, self.ERROR):
            raise ConfigurationError(f"unknown diagnostic severity '{severity}' (expected warn|error)")
        self.severity = severity

    def apply(self, diagnostics: Sequence[Diagnostic]) -> None:
        for diag in diagnostics:
            logger.warning("%s", diag)
        if diagnostics and self.severity == self.ERROR:
            raise ConfigurationError(
                f"{len(diagnostics)} configuration diagnostic(s) with severity 'error': "
                + "; ".join(str(d) for d in diagnostics)
            )


def category_name(group: str, config: GeneratorConfig) -> str:
    """Identifier base of a group, honouring `nameOverride`."""
    return pascal_identifier(config.nameOverride.get(group, group))


def _key_labels(entries: Sequence[Entry], name_key: Optional[str]) -> Dict[Union[str, int], str]:
    if not name_key:
        return {}
    out: Dict[Union[str, int], str] = {}
    for key, record in entries:
        label = record.get(name_key)
        if isinstance(label, str) and label.strip() and key not in out:
            out[key] = " ".join(label.split())
    return out


def _extract(records: Sequence[Dict[str, Any]], path: str) -> Tuple[Tuple[Any, ...], bool]:
    found: List[Any] = []
    is_array = False
    for record in records:
        for v in values_at(record, path):
            if isinstance(v, list):
                is_array = True
                found.extend(x for x in v if not isinstance(x, (dict, list)))
            elif not isinstance(v, dict):
                found.append(v)
    return dedup_literals(found), is_array


def analyse_group(
    gkey: str,
    group: str,
    entries: Sequence[Entry],
    config: GeneratorConfig,
    *,
    grouped: bool = False,
) -> AnalysisResult:
    records = [record for _, record in entries]
    keys: List[Union[str, int]] = []
    seen = set()
    for key, _ in entries:
        if key in seen:
            continue
        seen.add(key)
        keys.append(key)

    base = category_name(group, config)
    shape = infer_records(records)

    for path, expr in config.overrides.items():
        if get_field(shape, path) is None:
            continue
        shape = update_field(shape, path, lambda f, expr=expr: replace(f, type=Verbatim(expr)))

    extracted: List[ExtractedUnion] = []
    for path, name in config.extractedTypes.items():
        if not is_identifier(name) or name in RESERVED_TYPE_NAMES:
            raise ConfigurationError(f"extractedTypes '{path}' of '{gkey}': {name!r} is not a usable TypeScript type name")
        if get_field(shape, path) is None or path in config.overrides:
            continue
        values, is_array = _extract(records, path)
        if not values:
            continue
        union_name = f"{base}{name}" if grouped else name
        extracted.append(ExtractedUnion(union_name, path, values, is_array))
        ref = Ref(union_name)
        shape = update_field(
            shape, path, lambda f, ref=ref, arr=is_array: replace(f, type=ArrayOf(ref) if arr else ref)
        )

    for path, text in config.description.items():
        if get_field(shape, path) is None:
            continue
        shape = update_field(shape, path, lambda f, text=text: replace(f, description=text))

    group_value = None
    if grouped and config.groupKey and records:
        group_value = records[0].get(config.groupKey)

    return AnalysisResult(
        gkey=gkey,
        group=group,
        category=base,
        keys=keys,
        shape=shape,
        key_labels=_key_labels(entries, config.nameKey),
        extracted=extracted,
        group_value=group_value,
        sample_count=len(records),
    )


def analyse_all(grouped: Grouped, config: GeneratorConfig) -> List[AnalysisResult]:
    """One result per group, in first-seen group order."""
    is_grouped = bool(config.groupKey)
    return [
        analyse_group(config.GKey, group, entries, config, grouped=is_grouped)
        for group, entries in grouped.items()
    ]


def collect_diagnostics(grouped: Grouped, results: Sequence[AnalysisResult], config: GeneratorConfig) -> List[Diagnostic]:
    """Configuration entries that matched nothing anywhere in the category."""
    out: List[Diagnostic] = []
    shapes = [r.shape for r in results]

    def _unused(path: str) -> bool:
        return all(get_field(s, path) is None for s in shapes)

    for kind, mapping in (
        ("overrides", config.overrides),
        ("extractedTypes", config.extractedTypes),
        ("description", config.description),
    ):
        for path in mapping:
            if _unused(path):
                out.append(Diagnostic(config.GKey, kind, path, "no sampled record has this field"))

    for path in config.extractedTypes:
        if path in config.overrides and not _unused(path):
            out.append(Diagnostic(config.GKey, "extractedTypes", path, "ignored because the field is overridden"))
        elif not _unused(path) and not any(e.path == path for r in results for e in r.extracted):
            out.append(Diagnostic(config.GKey, "extractedTypes", path, "no scalar values observed"))

    for group in config.nameOverride:
        if group not in grouped:
            out.append(Diagnostic(config.GKey, "nameOverride", group, "no such group"))
    return out


def merged_extractions(results: Sequence[AnalysisResult], config: GeneratorConfig) -> Dict[str, List[str]]:
    """Category-level union name -> group-level union names (grouped categories)."""
    out: Dict[str, List[str]] = {}
    if not config.groupKey:
        return out
    for path, name in config.extractedTypes.items():
        members = [e.name for r in results for e in r.extracted if e.path == path]
        if members:
            out[name] = members
    return out


__all__ = [
    "AnalysisResult",
    "Diagnostic",
    "DiagnosticPolicy",
    "ExtractedUnion",
    "analyse_all",
    "analyse_group",
    "category_name",
    "collect_diagnostics",
    "merged_extractions",
]
