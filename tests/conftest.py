import json
import sys
from io import BytesIO
from pathlib import Path
from typing import Callable, Iterable, Mapping

import json5
import pytest

from packforge.app.settings import SETTINGS_ENV_VAR, loadSettings
from packforge.packs import Pack, parseDependencyFilter, parsePackIdentifier, parseResourcePath
from packforge.versioning import parseVersion



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from the built-in defaults."""
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    loadSettings.cache_clear()
    yield
    loadSettings.cache_clear()



def build_pack(
    packId: str,
    version: str = "1.0.0",
    dependencies: Iterable[str] = (),
    assets: Mapping[str, bytes | str] | None = None,
    *,
    icon: bytes | None = None,
    description: str = "",
) -> Pack:
    """Pack from plain strings: asset keys are "namespace:path", str content is utf-8 encoded."""
    return Pack(
        identifier=parsePackIdentifier(packId),
        version=parseVersion(version),
        description=description,
        dependencies=tuple(parseDependencyFilter(dep) for dep in dependencies),
        assets={
            parseResourcePath(key): value.encode("utf-8") if isinstance(value, str) else value
            for key, value in (assets or {}).items()
        },
        icon=icon,
    )



@pytest.fixture()
def make_pack() -> Callable[..., Pack]:
    return build_pack



def png_bytes(width: int, height: int, color: tuple[int, int, int, int] = (255, 0, 0, 255)) -> bytes:
    from PIL import Image

    buffer = BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, "PNG")
    return buffer.getvalue()



@pytest.fixture()
def make_png() -> Callable[..., bytes]:
    return png_bytes



def write_pack_dir(
    root: Path,
    manifest: dict,
    assets: Mapping[str, bytes | str] | None = None,
    *,
    icon: bytes | None = None,
    manifestName: str = "manifest.json5",
) -> Path:
    """Pack directory layout: manifest, assets/<namespace>/<path>, optional pack.png."""
    root.mkdir(parents=True, exist_ok=True)
    dumps = json.dumps if manifestName.endswith(".json") else json5.dumps
    (root / manifestName).write_text(dumps(manifest, indent=2), encoding="utf-8")
    for key, content in (assets or {}).items():
        namespace, _, path = key.partition(":")
        file = root / "assets" / namespace / path
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(content.encode("utf-8") if isinstance(content, str) else content)
    if icon is not None:
        (root / "pack.png").write_bytes(icon)
    return root



@pytest.fixture()
def make_pack_dir() -> Callable[..., Path]:
    return write_pack_dir
