# -*- coding: utf-8 -*-
"""Schema inference + TypeScript declaration generator (core)."""

from core.gtypes.analysis import AnalysisResult, Diagnostic, DiagnosticPolicy, analyse_all, analyse_group
from core.gtypes.assembler import assemble, render_category_index, render_global_index
from core.gtypes.descriptors import DescriptorStore, GeneratorConfig
from core.gtypes.emit_ts import emit, snapshot
from core.gtypes.errors import (
    ConfigurationError,
    DataSourceError,
    FormattingError,
    GeneratorError,
    InferenceError,
    NamingCollisionError,
)
from core.gtypes.grouping import group_records, normalize_entries
from core.gtypes.pipeline import Generator, RunReport

__all__ = [
    "AnalysisResult",
    "ConfigurationError",
    "DataSourceError",
    "DescriptorStore",
    "Diagnostic",
    "DiagnosticPolicy",
    "FormattingError",
    "Generator",
    "GeneratorConfig",
    "GeneratorError",
    "InferenceError",
    "NamingCollisionError",
    "RunReport",
    "analyse_all",
    "analyse_group",
    "assemble",
    "emit",
    "group_records",
    "normalize_entries",
    "render_category_index",
    "render_global_index",
    "snapshot",
]
