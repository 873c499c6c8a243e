import pytest

from core.gtypes.inference import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    ArrayOf,
    Field,
    Shape,
    UnionOf,
    get_field,
    infer_records,
    infer_value,
    update_field,
    values_at,
)


def test_scalars_are_inferred_with_bool_before_number() -> None:
    assert infer_value(True) == BOOLEAN
    assert infer_value(3) == NUMBER
    assert infer_value(2.5) == NUMBER
    assert infer_value("x") == STRING
    assert infer_value(None) == NULL


def test_every_field_of_every_record_is_represented() -> None:
    records = [{"a": 1}, {"b": "x"}, {"a": 2, "c": True}]
    shape = infer_records(records)
    assert shape.names() == ["a", "b", "c"]
    assert shape.get("a") == Field(NUMBER, optional=True)
    assert shape.get("b") == Field(STRING, optional=True)
    assert shape.get("c") == Field(BOOLEAN, optional=True)


def test_fields_present_everywhere_are_required() -> None:
    shape = infer_records([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}])
    assert shape.get("a").optional is False
    assert shape.get("b").optional is False


def test_conflicting_scalars_become_a_union() -> None:
    shape = infer_records([{"a": "x"}, {"a": 1}, {"a": None}])
    assert shape.get("a").type == UnionOf((NUMBER, STRING, NULL))


def test_arrays_merge_item_types_and_ignore_empty_samples() -> None:
    shape = infer_records([{"t": [1, 2]}, {"t": []}, {"t": [3]}])
    assert shape.get("t").type == ArrayOf(NUMBER)

    mixed = infer_value([1, "x"])
    assert mixed == ArrayOf(UnionOf((NUMBER, STRING)))


def test_nested_shapes_merge_and_mark_missing_fields_optional() -> None:
    shape = infer_records([{"s": {"hp": 1}}, {"s": {"hp": 2, "mp": 3}}])
    inner = shape.get("s").type
    assert isinstance(inner, Shape)
    assert inner.get("hp") == Field(NUMBER)
    assert inner.get("mp") == Field(NUMBER, optional=True)


def test_shape_and_null_union_keeps_nested_shape_addressable() -> None:
    shape = infer_records([{"s": {"hp": 1}}, {"s": None}])
    assert isinstance(shape.get("s").type, UnionOf)
    assert get_field(shape, "s.hp") == Field(NUMBER)

    updated = update_field(shape, "s.hp", lambda f: Field(STRING))
    assert get_field(updated, "s.hp") == Field(STRING)
    assert get_field(shape, "s.hp") == Field(NUMBER)


def test_dotted_paths() -> None:
    shape = infer_records([{"stats": {"hp": 1}}])
    assert get_field(shape, "stats.hp") is not None
    assert get_field(shape, "stats.mp") is None
    assert get_field(shape, "nope.hp") is None
    assert values_at({"stats": {"hp": 1}}, "stats.hp") == [1]
    assert values_at({"stats": 5}, "stats.hp") == []


def test_paths_descend_into_arrays_of_objects() -> None:
    shape = infer_records([{"drops": [{"item": "gem0"}, {"item": "gem1", "n": 2}]}, {"drops": []}])
    assert get_field(shape, "drops.item") == Field(STRING)
    assert get_field(shape, "drops.n") == Field(NUMBER, optional=True)

    updated = update_field(shape, "drops.item", lambda f: Field(BOOLEAN))
    assert isinstance(updated.get("drops").type, ArrayOf)
    assert get_field(updated, "drops.item") == Field(BOOLEAN)

    assert values_at({"drops": [{"item": "gem0"}, {"n": 1}, 5]}, "drops.item") == ["gem0"]
    assert values_at({"tags": ["a", "b"]}, "tags") == [["a", "b"]]


def test_infer_records_rejects_non_object_records() -> None:
    with pytest.raises(TypeError):
        infer_records([{"a": 1}, ["not", "a", "record"]])
