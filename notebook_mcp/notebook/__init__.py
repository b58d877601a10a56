"""Notebook document mutation engine.

Loads ``.ipynb`` JSON documents, applies structural edits to their cell list
and writes them back without disturbing fields it does not manage.
"""

from .document import Notebook
from .document import cell_source
from .document import cell_type
from .locator import find_duplicate_ids
from .locator import resolve_cell
from .operations import convert_cell_type
from .operations import delete_cell
from .operations import edit_cell_source
from .operations import insert_cell
from .operations import move_cell
from .operations import validate_cell_type
from .source import decode_source
from .source import encode_source
from .store import load_notebook
from .store import parse_notebook
from .store import save_notebook
from .store import serialize_notebook

__all__ = [
    "Notebook",
    "cell_source",
    "cell_type",
    "convert_cell_type",
    "decode_source",
    "delete_cell",
    "edit_cell_source",
    "encode_source",
    "find_duplicate_ids",
    "insert_cell",
    "load_notebook",
    "move_cell",
    "parse_notebook",
    "resolve_cell",
    "save_notebook",
    "serialize_notebook",
    "validate_cell_type",
]
