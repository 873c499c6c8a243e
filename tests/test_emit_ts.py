from core.gtypes.analysis import analyse_all
from core.gtypes.descriptors import GeneratorConfig
from core.gtypes.emit_ts import HEADER, emit, render_type, snapshot, union_declaration
from core.gtypes.formatter import BuiltinFormatter
from core.gtypes.grouping import group_records, normalize_entries
from core.gtypes.inference import NULL, NUMBER, STRING, ArrayOf, LiteralUnion, Ref, UnionOf, Verbatim


def _results(data, config):
    entries = normalize_entries(data, category=config.GKey, id_key=config.idKey)
    return analyse_all(group_records(entries, config.groupKey, category=config.GKey), config)


def _formatted(result, config):
    return BuiltinFormatter().format(emit(result, config.groupKey, config), source="test.ts")


def test_grouped_module_declares_key_union_and_inferred_shape(items_data) -> None:
    config = GeneratorConfig(GKey="items", groupKey="type")
    weapon, _ = _results(items_data["items"], config)
    assert _formatted(weapon, config) == (
        f"{HEADER}\n"
        "// Source: items/weapon\n"
        "\n"
        'export type WeaponKey = "a";\n'
        "\n"
        "export interface GWeapon {\n"
        "  id: string;\n"
        "  type: string;\n"
        "  g: number;\n"
        "}\n"
    )


def test_override_text_is_emitted_exactly() -> None:
    config = GeneratorConfig(GKey="monsters", overrides={"drops": "Array<[number, string]>"})
    (result,) = _results({"goo": {"drops": [[0.1, "gem0"]]}}, config)
    assert "  drops: Array<[number, string]>;\n" in _formatted(result, config)


def test_extracted_union_labels_optional_fields_and_docs() -> None:
    config = GeneratorConfig(
        GKey="items",
        extractedTypes={"type": "ItemType"},
        description={"name": "The full display name of an item.", "s": "Stack size.\nSet if stackable."},
    )
    data = {
        "qubics": {"name": "Qubics", "type": "qubics", "s": 9999},
        "blade": {"name": "Blade", "type": "weapon"},
    }
    (result,) = _results(data, config)
    text = _formatted(result, config)

    assert 'export type ItemsKey =\n  | "qubics" // Qubics\n  | "blade"; // Blade\n' in text
    assert 'export type ItemType =\n  | "qubics"\n  | "weapon";\n' in text
    assert "  /** The full display name of an item. */\n  name: string;\n" in text
    assert "  /**\n   * Stack size.\n   * Set if stackable.\n   */\n  s?: number;\n" in text
    assert "  type: ItemType;\n" in text


def test_single_member_union_keeps_comment_after_semicolon() -> None:
    assert union_declaration("QubicsKey", [('"qubics"', "Qubics")]) == 'export type QubicsKey = "qubics"; // Qubics'
    assert union_declaration("Empty", []) == "export type Empty = never;"


def test_render_type_variants() -> None:
    assert render_type(UnionOf((STRING, NULL))) == "string | null"
    assert render_type(ArrayOf(NUMBER)) == "number[]"
    assert render_type(ArrayOf(UnionOf((NUMBER, STRING)))) == "Array<number | string>"
    assert render_type(ArrayOf(Ref("Tag"))) == "Tag[]"
    assert render_type(LiteralUnion(("a", 1, True, None))) == '"a" | 1 | true | null'
    assert render_type(Verbatim(" Record<string, number> ")) == "Record<string, number>"
    assert render_type(ArrayOf(Verbatim("A | B"))) == "Array<A | B>"


def test_nested_and_odd_field_names() -> None:
    config = GeneratorConfig(GKey="maps")
    (result,) = _results({"main": {"spawn-point": {"x": 1, "y": 2}, "npcs": []}}, config)
    text = _formatted(result, config)
    assert '  "spawn-point": {\n    x: number;\n    y: number;\n  };\n' in text
    assert "  npcs: unknown[];\n" in text


def test_description_cannot_close_doc_comment_early() -> None:
    config = GeneratorConfig(GKey="items", description={"g": "weird */ text"})
    (result,) = _results({"a": {"g": 1}}, config)
    assert "/** weird *\\/ text */" in _formatted(result, config)


def test_snapshot_is_plain_data(items_data) -> None:
    config = GeneratorConfig(GKey="items", groupKey="type")
    weapon, _ = _results(items_data["items"], config)
    doc = snapshot(weapon)
    assert doc["group"] == "weapon"
    assert doc["keys"] == ["a"]
    assert doc["schema"] == {"shape": {"id": {"type": "string"}, "type": {"type": "string"}, "g": {"type": "number"}}}


def test_discriminate_narrows_grouping_field_when_enabled(items_data) -> None:
    config = GeneratorConfig(GKey="items", groupKey="type", discriminate=True)
    weapon, shield = _results(items_data["items"], config)
    assert '  type: "weapon";\n' in _formatted(weapon, config)
    assert '  type: "shield";\n' in _formatted(shield, config)


def test_discriminate_leaves_extracted_grouping_field_alone(items_data) -> None:
    config = GeneratorConfig(GKey="items", groupKey="type", discriminate=True, extractedTypes={"type": "Kind"})
    weapon, _ = _results(items_data["items"], config)
    assert "  type: WeaponKind;\n" in _formatted(weapon, config)


def test_array_of_objects_field_refers_to_extracted_union() -> None:
    config = GeneratorConfig(GKey="monsters", extractedTypes={"drops.item": "DropItem"})
    (result,) = _results({"goo": {"drops": [{"item": "gem0"}, {"item": "gem1"}]}}, config)
    text = _formatted(result, config)
    assert 'export type DropItem =\n  | "gem0"\n  | "gem1";\n' in text
    assert "  drops: {\n    item: DropItem;\n  }[];\n" in text
