import pytest

from core.gtypes.errors import FormattingError
from core.gtypes.formatter import BuiltinFormatter, get_formatter


def test_reindents_by_bracket_depth() -> None:
    text = "export interface G {\nstats: {\nhp: number;\n};\n\n\n\nname: string;\n}\n"
    out = BuiltinFormatter().format(text, source="items/G.ts")
    assert out == (
        "export interface G {\n"
        "  stats: {\n"
        "    hp: number;\n"
        "  };\n"
        "\n"
        "  name: string;\n"
        "}\n"
    )


def test_union_lines_and_doc_comments() -> None:
    text = 'export type K =\n| "a" // A\n| "b";\n\nexport interface G {\n/**\n* one\n* two\n*/\nx: K;\n}'
    out = BuiltinFormatter().format(text, source="x.ts")
    assert '  | "a" // A\n' in out
    assert "  /**\n   * one\n   * two\n   */\n  x: K;\n" in out


def test_brackets_inside_strings_and_comments_are_ignored() -> None:
    text = 'export type K = "{" | "}"; // {\n/** } */\n'
    assert BuiltinFormatter().format(text, source="x.ts") == 'export type K = "{" | "}"; // {\n/** } */\n'


def test_is_deterministic() -> None:
    text = "export interface G {\n    a: number;\n}\n"
    fmt = BuiltinFormatter()
    once = fmt.format(text, source="x.ts")
    assert fmt.format(once, source="x.ts") == once


@pytest.mark.parametrize(
    "text, message",
    [
        ("export interface G {\na: string;\n", "unclosed"),
        ("}\n", "unbalanced"),
        ("export type X = Array<string;\n}\n", "unbalanced"),
        ('export type X = "abc;\n', "unterminated string"),
        ("/** open\n", "unterminated block comment"),
    ],
)
def test_malformed_output_is_surfaced(text, message) -> None:
    with pytest.raises(FormattingError) as exc:
        BuiltinFormatter().format(text, source="items/Weapon.ts")
    assert message in str(exc.value)
    assert exc.value.source == "items/Weapon.ts"


def test_get_formatter() -> None:
    assert get_formatter("builtin").name == "builtin"
    with pytest.raises(ValueError):
        get_formatter("black")
