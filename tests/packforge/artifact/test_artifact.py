# tests/packforge/artifact/test_artifact.py
import os
import zipfile

import pytest

from packforge.artifact import packFormatFor, readArtifact, readArtifactMetadata, writeArtifact
from packforge.bundling import bundle
from packforge.core.errors import ArtifactWriteFailure
from packforge.packs import ResourcePath


@pytest.fixture()
def result(make_pack, make_png):
    root = make_pack(
        "sample/root",
        "1.0.0",
        assets={
            "sample:lang/en_us.json": '{"item.sample.ruby": "Ruby"}',
            "sample:glyphs/star.png": make_png(8, 8),
            "minecraft:textures/block/stone.png": make_png(16, 16, (10, 20, 30, 255)),
        },
        icon=make_png(16, 16),
        description="Round trip",
    )
    return bundle(root, "1.20.4")


@pytest.mark.parametrize(
    "version, expected",
    [
        ("1.13", 4),
        ("1.14.4", 4),
        ("1.16.1", 5),
        ("1.16.2", 6),
        ("1.19.3", 12),
        ("1.20.4", 22),
        ("1.21", 34),
        ("1.21.3", 42),
        ("1.21.4", 46),
        ("1.22", 46),
    ],
)
def test_packFormatFor(version, expected):
    assert packFormatFor(version) == expected


def test_packFormatFor_too_old():
    with pytest.raises(ValueError):
        packFormatFor("1.12.2")


@pytest.mark.parametrize("name", ["out.zip", "out"])
def test_round_trip(tmp_path, result, name):
    destination = writeArtifact(result, tmp_path / name)

    assert destination == tmp_path / name
    assert readArtifact(destination) == dict(result.mergedAssets)
    assert readArtifactMetadata(destination) == {"pack": {"pack_format": 22, "description": "Round trip"}}


def test_zip_layout_is_deterministic(tmp_path, result):
    first = writeArtifact(result, tmp_path / "a.zip")
    second = writeArtifact(result, tmp_path / "b.zip")

    assert first.read_bytes() == second.read_bytes()
    with zipfile.ZipFile(first) as archive:
        names = archive.namelist()
        assert names == sorted(names)
        assert "pack.mcmeta" in names
        assert "pack.png" in names
        assert "assets/sample/lang/en_us.json" in names
        assert {info.date_time for info in archive.infolist()} == {(1980, 1, 1, 0, 0, 0)}


def test_directory_layout(tmp_path, result):
    destination = writeArtifact(result, tmp_path / "pack")

    assert (destination / "pack.mcmeta").is_file()
    assert (destination / "pack.png").read_bytes() == result.icon
    assert (destination / "assets" / "sample" / "lang" / "en_us.json").is_file()


def test_overwrite_existing_directory(tmp_path, result):
    destination = tmp_path / "pack"
    (destination / "assets" / "stale").mkdir(parents=True)
    (destination / "assets" / "stale" / "old.json").write_text("{}", encoding="utf-8")

    writeArtifact(result, destination)

    assert not (destination / "assets" / "stale").exists()
    assert readArtifact(destination) == dict(result.mergedAssets)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["pack"]


def test_no_icon_without_icon(tmp_path, make_pack):
    result = bundle(make_pack("sample/root", assets={"sample:a.json": "{}"}), "1.21.4", ignore=["icon"])
    destination = writeArtifact(result, tmp_path / "out.zip", compressionLevel=0)
    with zipfile.ZipFile(destination) as archive:
        assert "pack.png" not in archive.namelist()
    assert readArtifact(destination) == {ResourcePath("sample", "a.json"): b"{}"}


@pytest.mark.parametrize("name", ["out.zip", "out"])
def test_failed_write_leaves_nothing_behind(tmp_path, result, monkeypatch, name):
    def _failingReplace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", _failingReplace)

    with pytest.raises(ArtifactWriteFailure) as excinfo:
        writeArtifact(result, tmp_path / name)

    assert excinfo.value.path == tmp_path / name
    assert isinstance(excinfo.value.cause, OSError)
    assert list(tmp_path.iterdir()) == []


def test_failed_write_keeps_previous_artifact(tmp_path, result, monkeypatch):
    destination = tmp_path / "out.zip"
    destination.write_bytes(b"previous")

    def _failingZip(*args, **kwargs):
        raise OSError("boom")

    monkeypatch.setattr("packforge.artifact.writer._writeZip", _failingZip)

    with pytest.raises(ArtifactWriteFailure):
        writeArtifact(result, destination)

    assert destination.read_bytes() == b"previous"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.zip"]


def test_unsupported_target_version_fails_write(tmp_path, make_pack):
    result = bundle(make_pack("sample/root"), "1.12.2")
    with pytest.raises(ArtifactWriteFailure):
        writeArtifact(result, tmp_path / "old.zip")
    assert list(tmp_path.iterdir()) == []
