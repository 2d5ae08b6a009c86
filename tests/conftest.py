from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def pnm_file(tmp_path: Path) -> Callable[..., Path]:
    """Пишет байты во временный файл и возвращает путь."""
    def _write(data: bytes, name: str = "image.pnm") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
