# tests/packforge/modifiers/test_modifier_registry.py
import pytest

from packforge.bundling import BundleIgnore
from packforge.modifiers import (
    GlyphsModifier,
    Modifier,
    ModifierRegistration,
    ModifierRegistry,
    defaultModifierRegistry,
)


class _Recorder(Modifier):
    id = "recorder"

    def claims(self, path):
        return path.startswith("recorded")


def test_default_registry_order():
    registry = defaultModifierRegistry()
    assert registry.ids() == ("glyphs", "models", "multisprites")
    assert "models" in registry
    assert len(registry) == 3


def test_default_registry_is_a_new_instance_each_time():
    first = defaultModifierRegistry()
    first.register("recorder", _Recorder)
    assert "recorder" not in defaultModifierRegistry()


def test_duplicate_ids_rejected_at_construction():
    with pytest.raises(ValueError):
        ModifierRegistry([GlyphsModifier, GlyphsModifier])
    with pytest.raises(ValueError):
        ModifierRegistry([ModifierRegistration("x", _Recorder), ModifierRegistration(" x ", _Recorder)])
    with pytest.raises(ValueError):
        ModifierRegistry([ModifierRegistration("  ", _Recorder)])


def test_createActive_skips_ignored_and_returns_fresh_instances():
    registry = ModifierRegistry([GlyphsModifier, _Recorder])

    first = registry.createActive()
    second = registry.createActive([BundleIgnore.GLYPHS])

    assert [m.id for m in first] == ["glyphs", "recorder"]
    assert [m.id for m in second] == ["recorder"]
    assert first[1] is not second[0]
    assert [m.id for m in registry.createActive(["recorder"])] == ["glyphs"]


def test_factory_must_produce_registered_id():
    registry = ModifierRegistry([ModifierRegistration("other", _Recorder)])
    with pytest.raises(ValueError):
        registry.createActive()


def test_modifier_logger_is_named_after_id():
    assert _Recorder().logger.name == "packforge.modifiers.recorder"
