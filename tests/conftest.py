import pytest
from pathlib import Path


@pytest.fixture
def write_trace(tmp_path: Path):
    """Returns a helper that writes trace lines to a temporary file and returns its path."""
    def _write(lines, name="test.trace"):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines))
        return str(path)
    return _write
