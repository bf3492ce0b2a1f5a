import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture()
def write_config(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a JSON anonymization document into tmp_path and return its path."""

    def _write(name: str, document: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
