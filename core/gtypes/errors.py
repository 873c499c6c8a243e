# -*- coding: utf-8 -*-
"""Error taxonomy for the generator."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class GeneratorError(Exception):
    """Base class for every fatal generator error."""


class ConfigurationError(GeneratorError):
    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        if self.path:
            message = f"{self.path}: {message}"
        super().__init__(message)


class InferenceError(GeneratorError):
    def __init__(
        self,
        message: str,
        *,
        category: str,
        group: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.category = category
        self.group = group
        self.field = field
        where = category
        if group is not None:
            where += f"/{group}"
        if field is not None:
            where += f" [{field}]"
        super().__init__(f"{where}: {message}")


class NamingCollisionError(GeneratorError):
    def __init__(self, identifier: str, first: str, second: str, *, scope: str = ""):
        self.identifier = identifier
        self.first = first
        self.second = second
        self.scope = scope
        prefix = f"{scope}: " if scope else ""
        super().__init__(
            f"{prefix}identifier '{identifier}' is produced by both {first} and {second}"
        )


class FormattingError(GeneratorError):
    def __init__(self, message: str, *, source: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class DataSourceError(GeneratorError):
    def __init__(self, message: str, *, source: str):
        self.source = source
        super().__init__(f"{source}: {message}")
