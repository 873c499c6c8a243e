import pytest

from core.gtypes.errors import NamingCollisionError
from core.gtypes.naming import IdentifierRegistry, is_identifier, pascal_identifier, property_name


def test_pascal_identifier_normalizes_free_form_names() -> None:
    assert pascal_identifier("weapon") == "Weapon"
    assert pascal_identifier("cx-hat_2") == "CxHat2"
    assert pascal_identifier("3shot") == "_3shot"
    assert pascal_identifier("pvpMap") == "PvpMap"


def test_pascal_identifier_rejects_names_without_alphanumerics() -> None:
    with pytest.raises(ValueError):
        pascal_identifier("--")


def test_property_name_quotes_only_when_needed() -> None:
    assert property_name("hp") == "hp"
    assert property_name("my-cat") == '"my-cat"'
    assert is_identifier("_x$1")
    assert not is_identifier("1x")


def test_registry_reports_both_sources_on_collision() -> None:
    reg = IdentifierRegistry("items/index.ts")
    reg.register("WeaponKey", "group 'weapon'")
    reg.register("WeaponKey", "group 'weapon'")
    with pytest.raises(NamingCollisionError) as exc:
        reg.register("WeaponKey", "group 'Weapon'")
    msg = str(exc.value)
    assert "group 'weapon'" in msg
    assert "group 'Weapon'" in msg
    assert exc.value.identifier == "WeaponKey"


def test_casefold_registry_and_reserved_names() -> None:
    reg = IdentifierRegistry("out", casefold=True, reserved=("index",))
    reg.register("Items", "category 'Items'")
    with pytest.raises(NamingCollisionError):
        reg.register("items", "category 'items'")
    with pytest.raises(NamingCollisionError):
        reg.register("Index", "group 'index'")
    assert "ITEMS" in reg
