"""Schemas for the values exchanged with the Core.

Every operation that can fail on the Core side answers with a Result
envelope, serialized as an object holding either an ``Ok`` or an ``Err``
member:

    {"Ok": [{"path": "/a", "name": "a", "is_file": false}]}
    {"Err": {"Fs": "FilesystemNotFound"}}

The ``Err`` payload is opaque to the client and travels upward uninterpreted.
"""

from typing import Any, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from graviton_client.exceptions import CoreOperationError

T = TypeVar("T")


class CoreResponse(BaseModel, Generic[T]):
    """Result envelope returned by fallible Core operations."""

    model_config = ConfigDict(populate_by_name=True)

    ok: Optional[T] = Field(default=None, alias="Ok")
    err: Any = Field(default=None, alias="Err")

    @property
    def is_ok(self) -> bool:
        # Unit results arrive as {"Ok": null}, so presence matters, not truthiness
        return "ok" in self.model_fields_set

    def unwrap(self) -> T:
        """Return the Ok value or raise CoreOperationError with the Err payload."""
        if not self.is_ok:
            raise CoreOperationError(self.err)
        return self.ok  # pyright: ignore [reportReturnType]


class DirItemInfo(BaseModel):
    """One entry of a directory listing."""

    path: str
    name: str
    is_file: bool


class FileFormatText(BaseModel):
    """Text content, tagged with its encoding."""

    Text: str


FileFormat = Union[Literal["Unknown", "Binary"], FileFormatText]


class FileInfo(BaseModel):
    """Content of a file read through a Core filesystem."""

    content: str
    format: FileFormat

    @property
    def is_binary(self) -> bool:
        return self.format == "Binary"


class ExtensionInfo(BaseModel):
    """Manifest information of an extension loaded in the Core."""

    name: str
    id: str


class StateData(BaseModel):
    """Persisted session state.

    Only ``id`` is interpreted by the client; the remaining members (opened
    tabs, views) are kept as sent by the Core so a get/set round trip does
    not drop anything.
    """

    model_config = ConfigDict(extra="allow")

    id: int = 0
    opened_tabs: List[Any] = Field(default_factory=list)
