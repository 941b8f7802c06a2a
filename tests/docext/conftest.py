from pathlib import Path

import pytest

from docext.config import Settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory with a small PNG and SVG next to each other."""
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "dot.png").write_bytes(PNG_BYTES)
    (tmp_path / "logo.svg").write_text('<svg xmlns="http://www.w3.org/2000/svg"/>')
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)
