# -*- coding: utf-8 -*-
"""Descriptor store (per-category generator configuration).

One JSON descriptor per category lives in the descriptor directory, named
after the category (`items.json` declares `"GKey": "items"`). Categories found
in the raw data without a descriptor get a disabled default written back, so
every category is opt-in and re-running never touches existing files.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from core.gtypes.errors import ConfigurationError
from core.gtypes.naming import RESERVED_TYPE_NAMES, is_identifier

logger = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX = ".json"

# Top-level key of the raw data that carries metadata, not a category.
RESERVED_KEYS = frozenset({"version"})

_MAP_FIELDS = ("overrides", "extractedTypes", "description", "nameOverride")


@dataclass
class GeneratorConfig:
    GKey: str
    disabled: bool = False
    groupKey: Optional[str] = None
    overrides: Dict[str, str] = field(default_factory=dict)
    extractedTypes: Dict[str, str] = field(default_factory=dict)
    description: Dict[str, str] = field(default_factory=dict)
    nameOverride: Dict[str, str] = field(default_factory=dict)
    idKey: str = "id"
    nameKey: Optional[str] = "name"
    # narrow the grouping field of each group interface to its literal value
    discriminate: bool = False

    @classmethod
    def default_for(cls, gkey: str) -> "GeneratorConfig":
        return cls(GKey=gkey, disabled=True)

    @classmethod
    def from_dict(cls, doc: Any, *, path: Optional[Path] = None) -> "GeneratorConfig":
        if not isinstance(doc, dict):
            raise ConfigurationError("descriptor must be a JSON object", path)

        gkey = doc.get("GKey")
        if not isinstance(gkey, str) or not gkey.strip():
            raise ConfigurationError("missing required field 'GKey'", path)

        disabled = doc.get("disabled", False)
        if not isinstance(disabled, bool):
            raise ConfigurationError("'disabled' must be a boolean", path)

        group_key = doc.get("groupKey")
        if group_key is not None and (not isinstance(group_key, str) or not group_key):
            raise ConfigurationError("'groupKey' must be a non-empty string or null", path)

        id_key = doc.get("idKey", "id")
        if not isinstance(id_key, str) or not id_key:
            raise ConfigurationError("'idKey' must be a non-empty string", path)

        name_key = doc.get("nameKey", "name")
        if name_key is not None and not isinstance(name_key, str):
            raise ConfigurationError("'nameKey' must be a string or null", path)

        discriminate = doc.get("discriminate", False)
        if not isinstance(discriminate, bool):
            raise ConfigurationError("'discriminate' must be a boolean", path)

        maps: Dict[str, Dict[str, str]] = {}
        for key in _MAP_FIELDS:
            maps[key] = _string_map(doc.get(key), key, path)
        for field_path, name in maps["extractedTypes"].items():
            if not is_identifier(name) or name in RESERVED_TYPE_NAMES:
                raise ConfigurationError(
                    f"'extractedTypes.{field_path}': {name!r} is not a usable TypeScript type name", path
                )

        return cls(
            GKey=gkey,
            disabled=disabled,
            groupKey=group_key,
            idKey=id_key,
            nameKey=name_key,
            discriminate=discriminate,
            **maps,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "disabled": self.disabled,
            "GKey": self.GKey,
            "groupKey": self.groupKey,
            "nameOverride": dict(self.nameOverride),
            "overrides": dict(self.overrides),
            "extractedTypes": dict(self.extractedTypes),
            "description": dict(self.description),
        }
        if self.idKey != "id":
            out["idKey"] = self.idKey
        if self.nameKey != "name":
            out["nameKey"] = self.nameKey
        if self.discriminate:
            out["discriminate"] = True
        return out


def _string_map(val: Any, key: str, path: Optional[Path]) -> Dict[str, str]:
    if val is None:
        return {}
    if not isinstance(val, dict):
        raise ConfigurationError(f"'{key}' must be an object", path)
    out: Dict[str, str] = {}
    for k, v in val.items():
        if not isinstance(v, str):
            raise ConfigurationError(f"'{key}.{k}' must be a string", path)
        out[str(k)] = v
    return out


def is_safe_file_stem(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class DescriptorStore:
    """Descriptors of one directory, indexed by file stem and by `GKey`."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._by_file: Dict[str, GeneratorConfig] = {}
        self._by_gkey: Dict[str, GeneratorConfig] = {}

    @classmethod
    def load(cls, directory: Path) -> "DescriptorStore":
        store = cls(directory)
        for path in sorted(store.directory.glob(f"*{DESCRIPTOR_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                doc = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"unparsable descriptor ({exc})", path) from exc
            store._add(path, GeneratorConfig.from_dict(doc, path=path))
        logger.debug("Loaded %d descriptors from %s", len(store), store.directory)
        return store

    def _add(self, path: Path, config: GeneratorConfig) -> None:
        stem = path.stem
        if config.GKey != stem:
            raise ConfigurationError(
                f"declares GKey '{config.GKey}' but is named after '{stem}'", path
            )
        if config.GKey in self._by_gkey:
            raise ConfigurationError(f"GKey '{config.GKey}' is declared twice", path)
        self._by_file[stem] = config
        self._by_gkey[config.GKey] = config

    def get(self, gkey: str) -> Optional[GeneratorConfig]:
        return self._by_gkey.get(gkey)

    def __contains__(self, gkey: str) -> bool:
        return gkey in self._by_gkey

    def __iter__(self) -> Iterator[GeneratorConfig]:
        return iter(self._by_file.values())

    def __len__(self) -> int:
        return len(self._by_file)

    def enabled(self) -> List[GeneratorConfig]:
        return [c for c in self if not c.disabled]

    def unmatched(self, categories: Mapping[str, Any]) -> List[str]:
        """GKeys with a descriptor but no category in the raw data (inert)."""
        return [c.GKey for c in self if c.GKey not in categories]

    def reconcile(self, raw_data: Mapping[str, Any]) -> List[Path]:
        """Scaffold disabled descriptors for categories that lack one.

        Returns the paths written. Existing files are never replaced: creation
        is exclusive and a file already present under the target name is left
        alone.
        """
        created: List[Path] = []
        for gkey in raw_data.keys():
            if gkey in RESERVED_KEYS or gkey in self._by_gkey:
                continue
            if not is_safe_file_stem(gkey):
                raise ConfigurationError(f"category '{gkey}' cannot be used as a descriptor file name", self.directory)
            config = GeneratorConfig.default_for(gkey)
            path = self.directory / f"{gkey}{DESCRIPTOR_SUFFIX}"
            text = json.dumps(config.to_dict(), ensure_ascii=False, indent=2) + "\n"
            try:
                with path.open("x", encoding="utf-8") as f:
                    f.write(text)
            except FileExistsError:
                logger.warning("Descriptor %s exists but was not loaded; leaving it untouched", path)
                continue
            self._by_file[gkey] = config
            self._by_gkey[gkey] = config
            created.append(path)
            logger.info("Scaffolded disabled descriptor: %s", path)
        return created
