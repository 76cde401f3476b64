import os
from pathlib import Path

import pytest

MB = 1048576


def write_file(path: Path, content: bytes = b"", mode: int = 0o644) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    os.chmod(path, mode)
    return path


@pytest.fixture
def app_tree(tmp_path):
    """A built application with a nested file, an empty directory and the runtime binary."""
    app = tmp_path / "app"
    write_file(app / "vendor" / "file1", b"x" * (10 * MB), 0o644)
    (app / "public" / "emptydir").mkdir(parents=True)
    write_file(app / "php", b"#!runtime", 0o755)
    return app
