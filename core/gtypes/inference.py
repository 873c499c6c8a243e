# -*- coding: utf-8 -*-
"""Structural type inference over untyped records.

Types are small immutable variants:

- `Scalar`       boolean | number | string | null (+ `never` for "no sample yet")
- `ArrayOf`      homogeneous array of an inferred item type
- `Shape`        ordered object fields (`Field` carries the optional flag)
- `UnionOf`      alternatives that could not be merged
- `LiteralUnion` closed set of observed literal values
- `Ref`          reference to a named declaration (extracted unions)
- `Verbatim`     literal type expression supplied by configuration

`infer_records()` folds `merge()` over every sampled record, so a field missing
from some records ends up optional rather than dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    kind: str


@dataclass(frozen=True)
class ArrayOf:
    item: "TypeNode"


@dataclass(frozen=True)
class Field:
    type: "TypeNode"
    optional: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class Shape:
    fields: Tuple[Tuple[str, Field], ...] = ()

    def get(self, name: str) -> Optional[Field]:
        for key, fld in self.fields:
            if key == name:
                return fld
        return None

    def names(self) -> List[str]:
        return [key for key, _ in self.fields]

    def with_field(self, name: str, fld: Field) -> "Shape":
        out = []
        found = False
        for key, cur in self.fields:
            if key == name:
                out.append((key, fld))
                found = True
            else:
                out.append((key, cur))
        if not found:
            out.append((name, fld))
        return Shape(tuple(out))


@dataclass(frozen=True)
class UnionOf:
    members: Tuple["TypeNode", ...]


@dataclass(frozen=True)
class LiteralUnion:
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Ref:
    name: str


@dataclass(frozen=True)
class Verbatim:
    expr: str


TypeNode = Union[Scalar, ArrayOf, Shape, UnionOf, LiteralUnion, Ref, Verbatim]

NEVER = Scalar("never")
NULL = Scalar("null")
BOOLEAN = Scalar("boolean")
NUMBER = Scalar("number")
STRING = Scalar("string")

_RANK = {"boolean": 0, "number": 1, "string": 2, "never": 9, "null": 10}


def infer_value(value: Any) -> TypeNode:
    if value is None:
        return NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, (list, tuple)):
        item: TypeNode = NEVER
        for v in value:
            item = merge(item, infer_value(v))
        return ArrayOf(item)
    if isinstance(value, dict):
        return Shape(tuple((str(k), Field(infer_value(v))) for k, v in value.items()))
    raise TypeError(f"unsupported value type: {type(value).__name__}")


def infer_records(records: Iterable[Dict[str, Any]]) -> Shape:
    """Fold every record into a single shape."""
    shape: Optional[Shape] = None
    for record in records:
        if not isinstance(record, dict):
            raise TypeError(f"record must be an object, got {type(record).__name__}")
        cur = infer_value(record)
        shape = cur if shape is None else merge_shapes(shape, cur)
    return shape or Shape()


def merge(a: TypeNode, b: TypeNode) -> TypeNode:
    if a == b:
        return a
    if a == NEVER:
        return b
    if b == NEVER:
        return a
    if isinstance(a, Shape) and isinstance(b, Shape):
        return merge_shapes(a, b)
    if isinstance(a, ArrayOf) and isinstance(b, ArrayOf):
        return ArrayOf(merge(a.item, b.item))

    members: List[TypeNode] = []
    for t in _flatten(a) + _flatten(b):
        _add_member(members, t)
    if len(members) == 1:
        return members[0]
    return UnionOf(tuple(sorted(members, key=_member_rank)))


def merge_shapes(a: Shape, b: Shape) -> Shape:
    out: List[Tuple[str, Field]] = []
    for name, fa in a.fields:
        fb = b.get(name)
        if fb is None:
            out.append((name, replace(fa, optional=True)))
        else:
            out.append((name, Field(merge(fa.type, fb.type), fa.optional or fb.optional, fa.description)))
    seen = set(a.names())
    for name, fb in b.fields:
        if name not in seen:
            out.append((name, replace(fb, optional=True)))
    return Shape(tuple(out))


def _flatten(t: TypeNode) -> List[TypeNode]:
    if isinstance(t, UnionOf):
        return list(t.members)
    return [t]


def _add_member(members: List[TypeNode], t: TypeNode) -> None:
    for i, m in enumerate(members):
        if m == t:
            return
        if isinstance(m, Shape) and isinstance(t, Shape):
            members[i] = merge_shapes(m, t)
            return
        if isinstance(m, ArrayOf) and isinstance(t, ArrayOf):
            members[i] = ArrayOf(merge(m.item, t.item))
            return
    members.append(t)


def _member_rank(t: TypeNode) -> Tuple[int, str]:
    if isinstance(t, Scalar):
        return _RANK.get(t.kind, 5), t.kind
    if isinstance(t, ArrayOf):
        return 3, ""
    if isinstance(t, Shape):
        return 4, ""
    return 6, repr(t)


# --- field paths ---------------------------------------------------------

def split_path(path: str) -> List[str]:
    return [p for p in str(path).split(".") if p]


def _as_shape(t: TypeNode) -> Optional[Shape]:
    """The object shape a path step descends into (through arrays and single-shape unions)."""
    if isinstance(t, Shape):
        return t
    if isinstance(t, ArrayOf):
        return _as_shape(t.item)
    if isinstance(t, UnionOf):
        shapes = [s for s in (_as_shape(m) for m in t.members) if s is not None]
        if len(shapes) == 1:
            return shapes[0]
    return None


def _with_shape(t: TypeNode, new: Shape) -> TypeNode:
    """Rebuild `t` with the shape found by `_as_shape` replaced by `new`."""
    if isinstance(t, Shape):
        return new
    if isinstance(t, ArrayOf):
        return ArrayOf(_with_shape(t.item, new))
    if isinstance(t, UnionOf):
        return UnionOf(tuple(_with_shape(m, new) if _as_shape(m) is not None else m for m in t.members))
    raise TypeError(f"no shape inside {t!r}")


def get_field(shape: Shape, path: str) -> Optional[Field]:
    parts = split_path(path)
    cur: Optional[Shape] = shape
    fld: Optional[Field] = None
    for i, part in enumerate(parts):
        if cur is None:
            return None
        fld = cur.get(part)
        if fld is None:
            return None
        if i < len(parts) - 1:
            cur = _as_shape(fld.type)
    return fld


def update_field(shape: Shape, path: str, fn: Callable[[Field], Field]) -> Shape:
    """Return a copy of `shape` with the field at `path` replaced by `fn(field)`.

    Raises KeyError when the path does not resolve.
    """
    parts = split_path(path)
    if not parts:
        raise KeyError(path)
    head, rest = parts[0], parts[1:]
    fld = shape.get(head)
    if fld is None:
        raise KeyError(path)
    if not rest:
        return shape.with_field(head, fn(fld))

    inner = _as_shape(fld.type)
    if inner is None:
        raise KeyError(path)
    new_inner = update_field(inner, ".".join(rest), fn)
    return shape.with_field(head, replace(fld, type=_with_shape(fld.type, new_inner)))


def values_at(record: Dict[str, Any], path: str) -> List[Any]:
    """Values found at `path` in one record; arrays of objects are walked element-wise."""
    found: List[Any] = [record]
    for part in split_path(path):
        nxt: List[Any] = []
        for cur in found:
            for obj in cur if isinstance(cur, list) else [cur]:
                if isinstance(obj, dict) and part in obj:
                    nxt.append(obj[part])
        found = nxt
    return found


def dedup_literals(values: Sequence[Any]) -> Tuple[Any, ...]:
    """Distinct scalar literals, first-seen order (`1` and `True` stay distinct)."""
    seen = set()
    out: List[Any] = []
    for v in values:
        marker = (type(v).__name__, v)
        if marker in seen:
            continue
        seen.add(marker)
        out.append(v)
    return tuple(out)


def to_jsonable(t: TypeNode) -> Any:
    """Plain structure for debug snapshots."""
    if isinstance(t, Scalar):
        return t.kind
    if isinstance(t, ArrayOf):
        return {"array": to_jsonable(t.item)}
    if isinstance(t, Shape):
        return {
            "shape": {
                name: {
                    "type": to_jsonable(f.type),
                    **({"optional": True} if f.optional else {}),
                    **({"description": f.description} if f.description else {}),
                }
                for name, f in t.fields
            }
        }
    if isinstance(t, UnionOf):
        return {"union": [to_jsonable(m) for m in t.members]}
    if isinstance(t, LiteralUnion):
        return {"literals": list(t.values)}
    if isinstance(t, Ref):
        return {"ref": t.name}
    if isinstance(t, Verbatim):
        return {"verbatim": t.expr}
    raise TypeError(f"unknown type node: {t!r}")
