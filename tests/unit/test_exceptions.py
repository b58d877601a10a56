"""Unit tests for the Notebook MCP exception hierarchy."""

import pytest

from notebook_mcp.exceptions import BackendUnavailableError
from notebook_mcp.exceptions import CellIndexError
from notebook_mcp.exceptions import CellNotFoundError
from notebook_mcp.exceptions import InvalidCellTypeError
from notebook_mcp.exceptions import LastCellError
from notebook_mcp.exceptions import NotebookFormatError
from notebook_mcp.exceptions import NotebookIOError
from notebook_mcp.exceptions import NotebookMCPError
from notebook_mcp.exceptions import NotExecutableError
from notebook_mcp.exceptions import UnknownOperationError
from notebook_mcp.exceptions import ValidationError


class TestNotebookMCPError:
    def test_defaults(self):
        error = NotebookMCPError("Something broke")
        assert str(error) == "Something broke"
        assert error.error_code == "UNKNOWN_ERROR"
        assert error.details == {}
        assert error.user_message == "Something broke"

    def test_to_dict(self):
        error = NotebookMCPError("internal", error_code="X", details={"k": 1}, user_message="friendly")
        assert error.to_dict() == {
            "error_type": "NotebookMCPError",
            "error_code": "X",
            "message": "internal",
            "user_message": "friendly",
            "details": {"k": 1},
        }


class TestSpecificErrors:
    @pytest.mark.parametrize(
        "error, code",
        [
            (ValidationError("bad"), "VALIDATION_ERROR"),
            (NotebookIOError("/nb.ipynb", "read", "missing"), "NOTEBOOK_IO_ERROR"),
            (NotebookFormatError("/nb.ipynb", "not json"), "NOTEBOOK_FORMAT_ERROR"),
            (CellIndexError(7, 3), "INDEX_OUT_OF_RANGE"),
            (CellNotFoundError("abc"), "CELL_NOT_FOUND"),
            (InvalidCellTypeError("sql", ["code", "markdown", "raw"]), "INVALID_CELL_TYPE"),
            (LastCellError(), "LAST_CELL"),
            (NotExecutableError(0, "markdown"), "NOT_EXECUTABLE"),
            (BackendUnavailableError("/nb.ipynb", "no kernel"), "BACKEND_UNAVAILABLE"),
            (UnknownOperationError("insert"), "UNKNOWN_OPERATION"),
        ],
    )
    def test_error_codes(self, error, code):
        assert isinstance(error, NotebookMCPError)
        assert error.error_code == code

    def test_cell_index_error_message(self):
        error = CellIndexError(7, 3)
        assert str(error) == "Invalid cell index 7. Notebook has 3 cells (valid range 0-2)"
        assert error.details == {"given": 7, "length": 3}

    def test_cell_index_error_custom_range(self):
        error = CellIndexError(9, 3, upper=3, label="position")
        assert str(error) == "Invalid position 9. Notebook has 3 cells (valid range 0-3)"

    def test_io_error_message(self):
        error = NotebookIOError("/nb.ipynb", "write", "disk full")
        assert str(error) == "Failed to write notebook '/nb.ipynb': disk full"

    def test_validation_error_details(self):
        error = ValidationError("bad index", field="cell_index", value="x")
        assert error.details == {"field": "cell_index", "invalid_value": "x"}

    def test_cell_not_found_has_user_message(self):
        error = CellNotFoundError("abc")
        assert str(error) == "Cell with id 'abc' not found"
        assert "abc" in error.user_message
