# -*- coding: utf-8 -*-
"""Identifier normalization + collision registry."""

from __future__ import annotations

import json
import re
from typing import Dict, Iterable, Optional

from core.gtypes.errors import NamingCollisionError

_CHUNK_RE = re.compile(r"[A-Za-z0-9]+")
_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Words that cannot name a type alias / interface in TypeScript.
RESERVED_TYPE_NAMES = frozenset(
    {
        "any", "boolean", "never", "null", "number", "object", "string",
        "symbol", "undefined", "unknown", "void", "bigint",
    }
)


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


def pascal_identifier(name: str) -> str:
    """Turn a free-form category/group name into a PascalCase identifier.

    `weapon` -> `Weapon`, `cx-hat_2` -> `CxHat2`, `3shot` -> `_3shot`.
    """
    chunks = _CHUNK_RE.findall(str(name))
    if not chunks:
        raise ValueError(f"cannot derive an identifier from {name!r}")
    ident = "".join(capitalize(c) for c in chunks)
    if ident[0].isdigit():
        ident = "_" + ident
    return ident


def is_identifier(name: str) -> bool:
    return bool(_IDENT_RE.match(name))


def property_name(name: str) -> str:
    """Object property key, quoted when it is not a bare identifier."""
    if is_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)


class IdentifierRegistry:
    """Registers generated names within one scope.

    A second registration of the same name from a different source raises
    `NamingCollisionError` naming both sources.
    """

    def __init__(self, scope: str, *, casefold: bool = False, reserved: Iterable[str] = ()):
        self.scope = scope
        self.casefold = casefold
        self._owners: Dict[str, str] = {}
        for word in reserved:
            self._owners[self._key(word)] = f"reserved name '{word}'"

    def _key(self, name: str) -> str:
        return name.casefold() if self.casefold else name

    def register(self, name: str, source: str) -> str:
        key = self._key(name)
        owner = self._owners.get(key)
        if owner is not None and owner != source:
            raise NamingCollisionError(name, owner, source, scope=self.scope)
        self._owners[key] = source
        return name

    def owner(self, name: str) -> Optional[str]:
        return self._owners.get(self._key(name))

    def __contains__(self, name: str) -> bool:
        return self._key(name) in self._owners

    def __len__(self) -> int:
        return len(self._owners)
