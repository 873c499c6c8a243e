import json

from apps.cli.commands import descriptors as descriptors_cmd
from devtools import build_gtypes


def _raw(tmp_path, data):
    path = tmp_path / "G.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_build_writes_tree_and_summary(tmp_path, descriptor_dir, write_descriptor, items_data) -> None:
    write_descriptor("items", disabled=False, groupKey="type")
    source = _raw(tmp_path, {**items_data, "maps": {"main": {}}})
    summary = tmp_path / "summary.md"

    rc = build_gtypes.main(
        [
            "--source", str(source),
            "--descriptors", str(descriptor_dir),
            "--out", str(tmp_path / "out"),
            "--no-snapshots",
            "--summary", str(summary),
            "--silent",
        ]
    )

    assert rc == 0
    assert (tmp_path / "out" / "items" / "Weapon.ts").exists()
    assert not (tmp_path / "tmp").exists()
    text = summary.read_text(encoding="utf-8")
    assert "| items | Weapon, Shield | 2 |" in text
    assert "scaffolded: 1" in text
    assert (descriptor_dir / "maps.json").exists()


def test_build_reports_failures_with_exit_code(tmp_path, descriptor_dir, write_descriptor) -> None:
    write_descriptor("items", disabled=False, groupKey="type")
    source = _raw(tmp_path, {"items": [{"id": "a"}]})

    rc = build_gtypes.main(
        ["--source", str(source), "--descriptors", str(descriptor_dir), "--out", str(tmp_path / "out"), "--silent"]
    )

    assert rc == 1
    assert not (tmp_path / "out").exists()


def test_descriptors_scaffold_and_list(tmp_path, descriptor_dir) -> None:
    source = _raw(tmp_path, {"version": 3, "items": {"a": {}}, "npcs": {}})

    assert descriptors_cmd.main(["scaffold", "--descriptors", str(descriptor_dir), "--source", str(source)]) == 0
    assert sorted(p.name for p in descriptor_dir.glob("*.json")) == ["items.json", "npcs.json"]
    assert json.loads((descriptor_dir / "items.json").read_text(encoding="utf-8"))["disabled"] is True

    assert descriptors_cmd.main(["list", "--descriptors", str(descriptor_dir)]) == 0


def test_build_rejects_malformed_timeout_setting(tmp_path, descriptor_dir) -> None:
    settings = tmp_path / "settings.ini"
    settings.write_text("[GENERATOR]\nHTTP_TIMEOUT = soon\n", encoding="utf-8")
    source = _raw(tmp_path, {})

    rc = build_gtypes.main(
        [
            "--config", str(settings),
            "--source", str(source),
            "--descriptors", str(descriptor_dir),
            "--out", str(tmp_path / "out"),
            "--silent",
        ]
    )

    assert rc == 1
    assert not (tmp_path / "out").exists()
