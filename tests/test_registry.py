from jewel_erp.models import Material
from jewel_erp.registry import MaterialRegistry


def _registry():
    return MaterialRegistry([
        Material(id="silver", name="Silver", price=70, unit="gram"),
        Material(id="ruby", name="Ruby", price=20000, unit="carat"),
    ])


def test_lookup_hit_and_miss():
    reg = _registry()
    assert reg.lookup("silver").price == 70
    assert reg.lookup("deleted-id") is None
    assert reg.lookup(None) is None
    assert reg.lookup("") is None


def test_registry_is_callable_and_sized():
    reg = _registry()
    assert reg("ruby").unit == "carat"
    assert "ruby" in reg
    assert "gold-22k" not in reg
    assert len(reg) == 2


def test_name_for_falls_back_to_snapshot():
    reg = _registry()
    assert reg.name_for("silver", "Silver Chain") == "Silver"
    assert reg.name_for("gone", "Old Alloy") == "Old Alloy"
