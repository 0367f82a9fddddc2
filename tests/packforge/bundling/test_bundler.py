# tests/packforge/bundling/test_bundler.py
import json

import pytest

from packforge.bundling import BundleIgnore, Bundler, bundle
from packforge.core.errors import DuplicateOutputPath, MissingDependency
from packforge.modifiers import Modifier, ModifierRegistry, defaultModifierRegistry
from packforge.packs import PackIdentifier, ResourcePath
from packforge.repositories import MemoryRepository
from packforge.versioning import parseVersion

SHARED = ResourcePath("sample", "shared.json")


class _EmitterA(Modifier):
    id = "emitter-a"

    def claims(self, path):
        return False

    def finalize(self, context):
        context.emit(SHARED, b"a")


class _EmitterB(_EmitterA):
    id = "emitter-b"

    def finalize(self, context):
        context.emit(SHARED, b"b")


def test_root_shadows_dependencies(make_pack):
    lib = make_pack("sample/lib", "1.0.0", assets={"sample:lang/en_us.json": "lib", "sample:lib_only.json": "x"})
    root = make_pack("sample/root", "1.0.0", ["sample/lib"], {"sample:lang/en_us.json": "root"})

    result = bundle(root, "1.20.4", [MemoryRepository([lib])])

    assert result.mergedAssets[ResourcePath("sample", "lang/en_us.json")] == b"root"
    assert result.mergedAssets[ResourcePath("sample", "lib_only.json")] == b"x"
    assert result.buildOrder == (PackIdentifier("sample", "lib"), PackIdentifier("sample", "root"))
    assert result.targetVersion == parseVersion("1.20.4")
    assert result.rootVersion == parseVersion("1.0.0")


def test_result_is_read_only(make_pack):
    result = bundle(make_pack("sample/root", assets={"sample:a.json": "{}"}), "1.21")
    with pytest.raises(TypeError):
        result.mergedAssets[SHARED] = b""  # type: ignore[index]
    with pytest.raises(TypeError):
        result.modifiers["x"] = None  # type: ignore[index]


def test_ignored_modifier_is_isolated(make_pack, make_png):
    image = make_png(8, 8)
    root = make_pack("sample/root", assets={
        "sample:glyphs/star.png": image,
        "sample:custom_items/wand.json": '{item: "stick", model: "item/wand"}',
    })

    full = bundle(root, "1.20.4")
    partial = bundle(root, "1.20.4", ignore=[BundleIgnore.GLYPHS])

    assert set(full.modifiers) == {"glyphs", "models", "multisprites"}
    assert set(partial.modifiers) == {"models", "multisprites"}
    assert ResourcePath("minecraft", "font/default.json") in full.mergedAssets
    assert ResourcePath("minecraft", "font/default.json") not in partial.mergedAssets
    # Glyph inputs pass through untouched when the glyphs modifier is ignored
    assert partial.mergedAssets[ResourcePath("sample", "glyphs/star.png")] == image
    # Other modifiers are unaffected
    wand = ResourcePath("minecraft", "models/item/stick.json")
    assert partial.mergedAssets[wand] == full.mergedAssets[wand]


def test_ignore_by_name_and_icon(make_pack, make_png):
    icon = make_png(16, 16)
    root = make_pack("sample/root", icon=icon, description="Demo")

    assert bundle(root, "1.20.4").icon == icon
    assert bundle(root, "1.20.4", ignore=["icon"]).icon is None
    assert bundle(root, "1.20.4").description == "Demo"


def test_duplicate_output_path(make_pack):
    registry = ModifierRegistry([_EmitterA, _EmitterB])
    root = make_pack("sample/root")

    with pytest.raises(DuplicateOutputPath) as excinfo:
        bundle(root, "1.20.4", registry=registry)
    assert (excinfo.value.path, excinfo.value.modifierA, excinfo.value.modifierB) == (SHARED, "emitter-a", "emitter-b")

    result = bundle(root, "1.20.4", ignoreErrors=True, registry=registry)
    assert result.mergedAssets[SHARED] == b"b"
    assert [w.kind for w in result.warnings] == ["DuplicateOutputPath"]


def test_modifier_output_replaces_raw_asset(make_pack):
    root = make_pack("sample/root", assets={"sample:shared.json": "raw"})
    result = bundle(root, "1.20.4", registry=ModifierRegistry([_EmitterA]))
    assert result.mergedAssets[SHARED] == b"a"


def test_warnings_from_resolution_and_pipeline_are_collected(make_pack):
    root = make_pack("sample/root", "1.0.0", ["sample/ghost"], {"sample:custom_items/bad.json": "{}"})

    with pytest.raises(MissingDependency):
        bundle(root, "1.20.4")

    result = bundle(root, "1.20.4", ignoreErrors=True)
    assert [w.kind for w in result.warnings] == ["MissingDependency", "InvalidModifierInput"]
    assert result.buildOrder == (PackIdentifier("sample", "root"),)


def test_version_dependent_output_through_bundler(make_pack):
    root = make_pack("sample/root", assets={"sample:custom_items/wand.json": '{item: "stick", model: "item/wand"}'})
    bundler = Bundler(defaultModifierRegistry())

    old = bundler.bundle(root, "1.21.3")
    new = bundler.bundle(root, parseVersion("1.21.4"))

    assert ResourcePath("minecraft", "models/item/stick.json") in old.mergedAssets
    definition = json.loads(new.mergedAssets[ResourcePath("minecraft", "items/stick.json")])
    assert definition["model"]["entries"][0]["threshold"] == 1


def test_bundler_uses_its_repositories_unless_overridden(make_pack):
    lib = make_pack("sample/lib", assets={"sample:lib.json": "{}"})
    root = make_pack("sample/root", "1.0.0", ["sample/lib"])
    bundler = Bundler(repositories=[MemoryRepository([lib])])

    assert ResourcePath("sample", "lib.json") in bundler.bundle(root, "1.20.4").mergedAssets
    with pytest.raises(MissingDependency):
        bundler.bundle(root, "1.20.4", repositories=[])


def test_invalid_target_version(make_pack):
    with pytest.raises(ValueError):
        bundle(make_pack("sample/root"), "latest")
