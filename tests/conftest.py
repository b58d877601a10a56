"""The pytest configuration for Notebook MCP testing."""

import json
import os
import tempfile

import pytest

# Log files and metrics are configured at import time; point them away from the package first.
os.environ.setdefault("NOTEBOOK_MCP_LOG_DIR", tempfile.mkdtemp(prefix="notebook-mcp-logs-"))
os.environ.setdefault("MCP_METRICS_ENABLED", "false")

from notebook_mcp.config import reset_settings  # noqa: E402
from notebook_mcp.storage import reset_storage  # noqa: E402

from .shared import code_cell  # noqa: E402
from .shared import make_notebook  # noqa: E402
from .shared import markdown_cell  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons():
    """Give every test fresh settings and storage singletons."""
    reset_settings()
    reset_storage()
    yield
    reset_settings()
    reset_storage()


@pytest.fixture
def notebook_factory(tmp_path):
    """Factory writing notebook documents to temporary ``.ipynb`` files."""

    def _create_notebook(cells=None, name: str = "test.ipynb", nbformat_minor: int = 4, metadata=None) -> str:
        if cells is None:
            cells = [markdown_cell("# Title"), code_cell("x = 1")]
        path = tmp_path / name
        document = make_notebook(cells, nbformat_minor=nbformat_minor, metadata=metadata)
        path.write_text(json.dumps(document, indent=1), encoding="utf-8")
        return str(path)

    return _create_notebook


@pytest.fixture
def five_cell_notebook(notebook_factory):
    """A notebook with five code cells whose sources are ``cell 0`` .. ``cell 4``."""
    return notebook_factory([code_cell(f"cell {i}") for i in range(5)])


@pytest.fixture
def read_notebook_json():
    """Read a notebook file back as raw JSON."""

    def _read(path: str) -> dict:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    return _read


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "kernel: tests that talk to a mocked Jupyter kernel manager")
