"""Records streamed back by an execution backend.

A backend yields any number of ``StreamRecord``, ``RichDataRecord`` and
``ErrorRecord`` items followed by exactly one ``ExecutionStatus``. Each output
record knows how to render itself as an nbformat output dict.
"""

from typing import Any
from typing import Literal
from typing import Union

from pydantic import BaseModel
from pydantic import Field


class StreamRecord(BaseModel):
    """Text written to stdout or stderr."""

    kind: Literal["stream-text"] = "stream-text"
    name: str = "stdout"
    text: str = ""

    def to_output(self) -> dict[str, Any]:
        return {"output_type": "stream", "name": self.name, "text": self.text}


class RichDataRecord(BaseModel):
    """A mime bundle from ``display_data`` or ``execute_result``."""

    kind: Literal["rich-data"] = "rich-data"
    output_type: Literal["display_data", "execute_result"] = "display_data"
    data: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    execution_count: int | None = None

    def to_output(self) -> dict[str, Any]:
        output: dict[str, Any] = {"output_type": self.output_type, "data": self.data, "metadata": self.metadata}
        if self.output_type == "execute_result":
            output["execution_count"] = self.execution_count
        return output


class ErrorRecord(BaseModel):
    """An exception raised by the executed code."""

    kind: Literal["error"] = "error"
    ename: str = ""
    evalue: str = ""
    traceback: list[str] = Field(default_factory=list)

    def to_output(self) -> dict[str, Any]:
        return {"output_type": "error", "ename": self.ename, "evalue": self.evalue, "traceback": self.traceback}


class ExecutionStatus(BaseModel):
    """Terminal record of one execution request."""

    status: Literal["ok", "error"]
    execution_count: int | None = None
    ename: str = ""
    evalue: str = ""
    traceback: list[str] = Field(default_factory=list)

    def to_error_record(self) -> ErrorRecord:
        return ErrorRecord(ename=self.ename, evalue=self.evalue, traceback=self.traceback)


OutputRecord = Union[StreamRecord, RichDataRecord, ErrorRecord]
ExecutionEvent = Union[StreamRecord, RichDataRecord, ErrorRecord, ExecutionStatus]
