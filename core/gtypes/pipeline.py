# -*- coding: utf-8 -*-
"""Generator: raw data + descriptors -> TypeScript declaration tree.

Run order
- load descriptors, scaffold disabled ones for unknown categories
- per enabled category: normalize, group, analyse (all in memory)
- apply the diagnostic policy
- assemble the declaration tree (identifier registration)
- render + format every module
- only then write: debug snapshots, modules, indexes; prune stale generated files

Any error before the write phase leaves the previous output tree untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.gtypes.analysis import AnalysisResult, Diagnostic, DiagnosticPolicy, analyse_all, collect_diagnostics
from core.gtypes.assembler import DataModel, assemble, render_category_index, render_global_index
from core.gtypes.descriptors import RESERVED_KEYS, DescriptorStore, GeneratorConfig
from core.gtypes.emit_ts import HEADER, emit, snapshot
from core.gtypes.errors import ConfigurationError
from core.gtypes.formatter import BuiltinFormatter
from core.gtypes.gdata import RawData, fetch_raw_data
from core.gtypes.grouping import Grouped, group_records, normalize_entries
from core.gtypes.snapshots import write_snapshot

logger = logging.getLogger(__name__)


@dataclass
class CategorySummary:
    gkey: str
    grouped: bool
    groups: List[str]
    keys: int

    def to_dict(self) -> Dict[str, Any]:
        return {"gkey": self.gkey, "grouped": self.grouped, "groups": list(self.groups), "keys": self.keys}


@dataclass
class RunReport:
    created_descriptors: List[Path] = field(default_factory=list)
    categories: List[CategorySummary] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)
    inert: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    removed: List[Path] = field(default_factory=list)


@dataclass
class _Analysed:
    config: GeneratorConfig
    grouped: Grouped
    results: List[AnalysisResult]


class Generator:
    """End-to-end run over one raw dataset.

    Parameters
    - target_dir: root of the generated declaration tree (`<GKey>/...`, `index.ts`).
    - descriptor_dir: directory of `<GKey>.json` descriptors (must exist).
    - tmp_dir: debug snapshot root; None disables snapshots.
    - formatter: object with `format(text, *, source) -> str`.
    - policy: diagnostic policy (default warn).
    """

    def __init__(
        self,
        target_dir: Union[str, Path],
        *,
        descriptor_dir: Union[str, Path],
        tmp_dir: Optional[Union[str, Path]] = None,
        formatter: Any = None,
        policy: Optional[DiagnosticPolicy] = None,
    ):
        self.target_dir = Path(target_dir)
        self.descriptor_dir = Path(descriptor_dir)
        self.tmp_dir = Path(tmp_dir) if tmp_dir else None
        self.formatter = formatter or BuiltinFormatter()
        self.policy = policy or DiagnosticPolicy()
        self.store: Optional[DescriptorStore] = None

    # --- descriptors -------------------------------------------------------

    def load_config(self) -> DescriptorStore:
        if not self.descriptor_dir.is_dir():
            raise ConfigurationError("descriptor directory does not exist", self.descriptor_dir)
        self.store = DescriptorStore.load(self.descriptor_dir)
        return self.store

    def generate_default_configs(self, data: RawData) -> List[Path]:
        store = self.store or self.load_config()
        return store.reconcile(data)

    # --- run ---------------------------------------------------------------

    async def generate(self, source: Union[str, Path], *, timeout: float = 30.0) -> RunReport:
        data = await fetch_raw_data(source, timeout=timeout)
        return self.run(data)

    def run(self, data: RawData) -> RunReport:
        report = RunReport()
        store = self.load_config()
        report.created_descriptors = store.reconcile(data)
        report.inert = store.unmatched(data)
        for gkey in report.inert:
            logger.warning("Descriptor '%s' matches no category in the raw data", gkey)

        analysed: Dict[str, _Analysed] = {}
        for config in store:
            gkey = config.GKey
            if config.disabled:
                report.disabled.append(gkey)
                continue
            if gkey in RESERVED_KEYS or gkey not in data:
                continue
            analysed[gkey] = self._analyse(gkey, data[gkey], config)
            report.diagnostics.extend(collect_diagnostics(analysed[gkey].grouped, analysed[gkey].results, config))

        self.policy.apply(report.diagnostics)

        model = assemble({k: (a.config, a.results) for k, a in analysed.items()})
        files = self._render(model)

        if self.tmp_dir is not None:
            for gkey, a in analysed.items():
                report.written.extend(self._write_snapshots(gkey, a))

        for path, text in files:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            report.written.append(path)
        report.removed = self._prune_stale({p for p, _ in files})

        for cat in model.categories:
            report.categories.append(
                CategorySummary(
                    gkey=cat.gkey,
                    grouped=cat.grouped,
                    groups=[g.base for g in cat.groups],
                    keys=len(cat.keys()),
                )
            )
        logger.info(
            "Generated %d categories (%d files) into %s",
            len(report.categories),
            len(files),
            self.target_dir,
        )
        return report

    def _analyse(self, gkey: str, raw: Any, config: GeneratorConfig) -> _Analysed:
        entries = normalize_entries(raw, category=gkey, id_key=config.idKey)
        grouped = group_records(entries, config.groupKey, category=gkey)
        results = analyse_all(grouped, config)
        logger.debug("%s: %d records in %d group(s)", gkey, len(entries), len(grouped))
        return _Analysed(config=config, grouped=grouped, results=results)

    def _format(self, text: str, source: str) -> str:
        return self.formatter.format(text, source=source)

    def _render(self, model: DataModel) -> List[Tuple[Path, str]]:
        files: List[Tuple[Path, str]] = []
        for cat in model.categories:
            out_dir = self.target_dir / cat.gkey
            for g in cat.groups:
                source = f"{cat.gkey}/{g.module}.ts"
                text = emit(g.result, cat.config.groupKey, cat.config)
                files.append((out_dir / f"{g.module}.ts", self._format(text, source)))
            files.append((out_dir / "index.ts", self._format(render_category_index(cat), f"{cat.gkey}/index.ts")))
        files.append((self.target_dir / "index.ts", self._format(render_global_index(model), "index.ts")))
        return files

    def _write_snapshots(self, gkey: str, analysed: _Analysed) -> List[Path]:
        assert self.tmp_dir is not None
        out_dir = self.tmp_dir / gkey
        groups = {name: [record for _, record in entries] for name, entries in analysed.grouped.items()}
        written = [write_snapshot(out_dir / "grouped.json", {"groups": groups}, gkey=gkey, groupKey=analysed.config.groupKey)]
        for result in analysed.results:
            path = out_dir / f"{result.category}_analysis.json"
            written.append(write_snapshot(path, {"analysis": snapshot(result)}, gkey=gkey))
        return written

    def _prune_stale(self, keep: Sequence[Path]) -> List[Path]:
        """Delete generated modules from earlier runs that this run did not produce."""
        keep_set = {p.resolve() for p in keep}
        removed: List[Path] = []
        if not self.target_dir.is_dir():
            return removed
        for path in sorted(self.target_dir.rglob("*.ts")):
            if path.resolve() in keep_set:
                continue
            with path.open("r", encoding="utf-8") as f:
                first = f.readline().rstrip("\n")
            if first != HEADER:
                continue
            path.unlink()
            removed.append(path)
            logger.info("Removed stale generated module: %s", path)
        return removed
