# tests/packforge/modifiers/test_multisprites_modifier.py
from io import BytesIO

import pytest
from PIL import Image

from packforge.bundling.pipeline import ModifierPipeline
from packforge.core.errors import InvalidModifierInput
from packforge.modifiers import MultiSpritesModifier
from packforge.packs import ResourcePath
from packforge.versioning import parseVersion


def _run(packs, *, ignoreErrors=False):
    modifier = MultiSpritesModifier()
    output = ModifierPipeline([modifier], parseVersion("1.20.4"), ignoreErrors=ignoreErrors).run(packs)
    return modifier, output


def _sheet(width: int = 128, height: int = 128) -> Image.Image:
    """Every pixel is distinct so any offset mistake shows up."""
    image = Image.new("RGBA", (width, height))
    image.putdata([(x * 2 % 256, y * 2 % 256, (x + y) % 256, 255) for y in range(height) for x in range(width)])
    return image


def _encode(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, "PNG")
    return buffer.getvalue()


def test_slice_one_icon_pixel_identical(make_pack):
    sheet = _sheet()
    pack = make_pack("sample/icons", assets={
        "sample:textures/item/sheet.png": _encode(sheet),
        "sample:multisprites/sheet.json": '{source: "sample:textures/item/sheet.png", sprites: {icon: {x: 32, y: 48, width: 16, height: 16}}}',
    })

    modifier, output = _run([pack])

    outputPath = ResourcePath("sample", "textures/item/sheet_icon.png")
    assert modifier.sprites[ResourcePath("sample", "sheet")].outputs == (outputPath,)
    with Image.open(BytesIO(output.mergedAssets[outputPath])) as sliced:
        assert sliced.size == (16, 16)
        assert sliced.convert("RGBA").tobytes() == sheet.crop((32, 48, 48, 64)).tobytes()
    # The source image stays, the declaration is consumed
    assert ResourcePath("sample", "textures/item/sheet.png") in output.mergedAssets
    assert ResourcePath("sample", "multisprites/sheet.json") not in output.mergedAssets


def test_output_folder_and_source_from_other_pack(make_pack):
    base = make_pack("sample/base", assets={"sample:textures/gui/sheet.png": _encode(_sheet(32, 16))})
    root = make_pack("sample/root", assets={
        "sample:multisprites/gui.json": (
            '{source: "textures/gui/sheet.png", output: "textures/gui/icons/",'
            ' sprites: {left: {x: 0, y: 0, width: 16, height: 16}, right: {x: 16, y: 0, width: 16, height: 16}}}'
        ),
    })

    _modifier, output = _run([base, root])

    assert ResourcePath("sample", "textures/gui/icons/sheet_left.png") in output.mergedAssets
    assert ResourcePath("sample", "textures/gui/icons/sheet_right.png") in output.mergedAssets
    assert output.owners[ResourcePath("sample", "textures/gui/icons/sheet_left.png")] == "multisprites"


def test_out_of_bounds_sprite(make_pack):
    pack = make_pack("sample/icons", assets={
        "sample:textures/sheet.png": _encode(_sheet(16, 16)),
        "sample:multisprites/sheet.json": (
            '{source: "sample:textures/sheet.png",'
            ' sprites: {ok: {x: 0, y: 0, width: 8, height: 8}, bad: {x: 8, y: 8, width: 16, height: 16}}}'
        ),
    })

    with pytest.raises(InvalidModifierInput) as excinfo:
        _run([pack])
    assert "bad" in excinfo.value.reason

    _modifier, output = _run([pack], ignoreErrors=True)
    assert ResourcePath("sample", "textures/sheet_ok.png") in output.mergedAssets
    assert ResourcePath("sample", "textures/sheet_bad.png") not in output.mergedAssets
    assert len(output.warnings) == 1


def test_missing_and_undecodable_sources(make_pack):
    missing = make_pack("sample/a", assets={
        "sample:multisprites/a.json": '{source: "sample:textures/nope.png", sprites: {x: {x: 0, y: 0, width: 1, height: 1}}}',
    })
    broken = make_pack("sample/b", assets={
        "sample:textures/broken.png": b"definitely not a png",
        "sample:multisprites/b.json": '{source: "sample:textures/broken.png", sprites: {x: {x: 0, y: 0, width: 1, height: 1}}}',
    })

    with pytest.raises(InvalidModifierInput, match="not found"):
        _run([missing])
    with pytest.raises(InvalidModifierInput, match="cannot decode"):
        _run([broken])


@pytest.mark.parametrize(
    "content",
    [
        '{sprites: {a: {x: 0, y: 0, width: 1, height: 1}}}',
        '{source: "sample:textures/s.png", sprites: {}}',
        '{source: "sample:textures/s.png", sprites: {a: {x: -1, y: 0, width: 1, height: 1}}}',
        '{source: "sample:textures/s.png", sprites: {a: {x: 0, y: 0, width: 0, height: 1}}}',
        '{source: "sample:textures/s.png", sprites: {"Bad Suffix": {x: 0, y: 0, width: 1, height: 1}}}',
        '{source: "sample:s.png", sprites: {a: {x: 0, y: 0, width: 1, height: 1}}}',
    ],
)
def test_invalid_declarations(make_pack, content):
    pack = make_pack("sample/a", assets={"sample:multisprites/a.json": content})

    with pytest.raises(InvalidModifierInput) as excinfo:
        _run([pack])
    assert excinfo.value.modifierId == "multisprites"

    modifier, _output = _run([pack], ignoreErrors=True)
    assert modifier.sprites == {}
