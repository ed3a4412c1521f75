"""
Object storage models

Pydantic models for values crossing the backend capability seam:
- ObjectHead: Metadata and size of an object, without its body
- ObjectHandle: Result of get_object, body not yet drained
- ListPage: One page of a paginated key listing
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class ByteStream(Protocol):
    """Readable body stream (aiobotocore StreamingBody or a test double)"""

    async def read(self) -> bytes: ...

    def close(self) -> None: ...


class ObjectHead(BaseModel):
    """
    Object metadata from a HEAD request

    Optional fields stay None when the backend omits them; callers decide
    on defaults (ObjectStorage maps a missing size to 0 and missing metadata to {}).
    """

    content_length: int | None = Field(default=None, description="Body size in bytes")
    content_type: str | None = Field(default=None, description="MIME type")
    etag: str | None = Field(default=None, description="Entity tag")
    last_modified: datetime | None = Field(default=None, description="Last write (UTC)")
    metadata: dict[str, str] | None = Field(
        default=None, description="User metadata attached at write time"
    )


class ObjectHandle(BaseModel):
    """
    Result of get_object

    The body is a live stream; read() drains it and releases the connection.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    body: Any = Field(description="Undrained body stream (ByteStream)")
    content_length: int | None = Field(default=None, description="Body size in bytes")
    content_type: str | None = Field(default=None, description="MIME type")
    metadata: dict[str, str] | None = Field(default=None, description="User metadata")

    async def read(self) -> bytes:
        """Drain the body and close the stream"""
        try:
            return await self.body.read()
        finally:
            self.body.close()


class ListPage(BaseModel):
    """
    One page of a key listing

    next_continuation_token is opaque and only meaningful to the backend
    that produced it.
    """

    keys: list[str] = Field(default_factory=list, description="Keys in backend order")
    is_truncated: bool = Field(default=False, description="Backend reports more data")
    next_continuation_token: str | None = Field(
        default=None, description="Cursor for the next page"
    )

    @property
    def has_next_page(self) -> bool:
        """True only when the backend says there is more AND says where it is"""
        return self.is_truncated and bool(self.next_continuation_token)
