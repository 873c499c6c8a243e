# -*- coding: utf-8 -*-
"""Assemble analysed categories into a declaration tree and render the indexes.

The tree (`DataModel` -> `CategoryDecl` -> `GroupDecl`) is built and every
generated identifier registered before anything is rendered. Registries:

- global index scope: `<Cat>Key`, `<Cat>Map`, `GData`
- category directories (case-insensitive, `index` reserved)
- per category index scope: group key/shape types, extracted unions, the
  category key union, merged extracted unions and `<Cat>Map`
- per category module files (case-insensitive, `index` reserved)

Any second registration of a name raises `NamingCollisionError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from core.gtypes.analysis import AnalysisResult, merged_extractions
from core.gtypes.descriptors import GeneratorConfig
from core.gtypes.emit_ts import HEADER, key_type_name, literal, shape_type_name, union_declaration
from core.gtypes.errors import InferenceError
from core.gtypes.naming import RESERVED_TYPE_NAMES, IdentifierRegistry, pascal_identifier, property_name

AGGREGATE_TYPE = "GData"


@dataclass
class GroupDecl:
    result: AnalysisResult

    @property
    def base(self) -> str:
        return self.result.category

    @property
    def module(self) -> str:
        return self.result.category

    @property
    def key_type(self) -> str:
        return key_type_name(self.base)

    @property
    def shape_type(self) -> str:
        return shape_type_name(self.base)


@dataclass
class CategoryDecl:
    gkey: str
    ident: str
    config: GeneratorConfig
    groups: List[GroupDecl] = field(default_factory=list)
    merged_unions: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def grouped(self) -> bool:
        return bool(self.config.groupKey)

    @property
    def key_type(self) -> str:
        return key_type_name(self.ident)

    @property
    def map_type(self) -> str:
        return f"{self.ident}Map"

    @property
    def declares_key(self) -> bool:
        """False when the single group module already declares `<Cat>Key`."""
        return not (len(self.groups) == 1 and self.groups[0].key_type == self.key_type)

    def keys(self) -> List[Union[str, int]]:
        out: List[Union[str, int]] = []
        for g in self.groups:
            out.extend(g.result.keys)
        return out


@dataclass
class DataModel:
    categories: List[CategoryDecl] = field(default_factory=list)

    def get(self, gkey: str) -> CategoryDecl:
        for cat in self.categories:
            if cat.gkey == gkey:
                return cat
        raise KeyError(gkey)


def _check_key_overlap(cat: CategoryDecl) -> None:
    owner: Dict[Tuple[str, Any], str] = {}
    for g in cat.groups:
        for key in g.result.keys:
            marker = (type(key).__name__, key)
            prev = owner.get(marker)
            if prev is not None:
                raise InferenceError(
                    f"key {literal(key)} belongs to both group '{prev}' and group '{g.result.group}'",
                    category=cat.gkey,
                )
            owner[marker] = g.result.group


def build_category(gkey: str, config: GeneratorConfig, results: Sequence[AnalysisResult]) -> CategoryDecl:
    cat = CategoryDecl(
        gkey=gkey,
        ident=pascal_identifier(gkey),
        config=config,
        groups=[GroupDecl(r) for r in results],
        merged_unions=merged_extractions(results, config),
    )

    scope = IdentifierRegistry(f"{gkey}/index.ts", reserved=RESERVED_TYPE_NAMES)
    modules = IdentifierRegistry(f"{gkey}/", casefold=True, reserved=("index",))
    for g in cat.groups:
        source = f"group '{g.result.group}' of '{gkey}'"
        modules.register(g.module, source)
        scope.register(g.key_type, source)
        scope.register(g.shape_type, source)
        for ext in g.result.extracted:
            scope.register(ext.name, f"{source} (extracted '{ext.path}')")

    if cat.declares_key:
        scope.register(cat.key_type, f"key union of category '{gkey}'")
    for name in cat.merged_unions:
        scope.register(name, f"merged extracted union of category '{gkey}'")
    scope.register(cat.map_type, f"key map of category '{gkey}'")

    _check_key_overlap(cat)
    return cat


def assemble(categories: Mapping[str, Tuple[GeneratorConfig, Sequence[AnalysisResult]]]) -> DataModel:
    """Build the declaration tree for every enabled category."""
    model = DataModel()
    scope = IdentifierRegistry("index.ts", reserved=tuple(RESERVED_TYPE_NAMES) + (AGGREGATE_TYPE,))
    dirs = IdentifierRegistry("output directory", casefold=True, reserved=("index",))
    for gkey, (config, results) in categories.items():
        cat = build_category(gkey, config, results)
        source = f"category '{gkey}'"
        dirs.register(gkey, source)
        scope.register(cat.key_type, source)
        scope.register(cat.map_type, source)
        model.categories.append(cat)
    return model


def _module_path(name: str) -> str:
    return json.dumps(f"./{name}", ensure_ascii=False)


def render_category_index(cat: CategoryDecl) -> str:
    lines: List[str] = [HEADER, ""]
    for g in cat.groups:
        lines.append(f"export * from {_module_path(g.module)};")
    lines.append("")

    for g in cat.groups:
        names = [g.key_type, g.shape_type]
        if cat.merged_unions:
            names.extend(e.name for e in g.result.extracted if any(e.name in m for m in cat.merged_unions.values()))
        lines.append(f"import type {{ {', '.join(names)} }} from {_module_path(g.module)};")
    lines.append("")

    if cat.declares_key:
        lines.append(union_declaration(cat.key_type, [(g.key_type, None) for g in cat.groups]))
        lines.append("")

    for name, members in cat.merged_unions.items():
        lines.append(union_declaration(name, [(m, None) for m in members]))
        lines.append("")

    parts = [f"{{ [K in {g.key_type}]: {g.shape_type} }}" for g in cat.groups]
    body = " & ".join(parts) or "{}"
    lines.append(f"export type {cat.map_type} = {body};")
    return "\n".join(lines) + "\n"


def render_global_index(model: DataModel) -> str:
    lines: List[str] = [HEADER, ""]
    for cat in model.categories:
        lines.append(f"export type {{ {cat.key_type}, {cat.map_type} }} from {_module_path(cat.gkey)};")
    lines.append("")
    for cat in model.categories:
        lines.append(f"import type {{ {cat.map_type} }} from {_module_path(cat.gkey)};")
    lines.append("")
    if model.categories:
        lines.append(f"export type {AGGREGATE_TYPE} = {{")
        for cat in model.categories:
            lines.append(f"{property_name(cat.gkey)}: {cat.map_type};")
        lines.append("};")
    else:
        lines.append(f"export type {AGGREGATE_TYPE} = {{}};")
    return "\n".join(lines) + "\n"
