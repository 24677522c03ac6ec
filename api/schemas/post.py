"""
Post request and response schemas.

These Pydantic models define the API contract and provide
automatic validation and documentation.

The author name is asymmetric on the wire: requests carry the
structured ``{"firstName", "lastName"}`` object while responses carry a
single flattened string. ``flatten_author_name`` and ``serialize_post``
are the only places that conversion happens.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.storage.base import AuthorName, PostRecord, utcnow


class AuthorNameIn(BaseModel):
    """Structured author name as sent by clients."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(
        ...,
        alias="firstName",
        min_length=1,
        examples=["Ada"],
    )
    last_name: str = Field(
        ...,
        alias="lastName",
        min_length=1,
        examples=["Lovelace"],
    )

    @classmethod
    def from_flat(cls, value: str) -> "AuthorNameIn":
        """Split "First Last" at the first whitespace run."""
        parts = value.strip().split(None, 1)
        if len(parts) != 2:
            raise ValueError("author must be 'First Last' or {firstName, lastName}")
        return cls(first_name=parts[0], last_name=parts[1])

    def to_record(self) -> AuthorName:
        return AuthorName(first_name=self.first_name, last_name=self.last_name)


class PostCreateRequest(BaseModel):
    """Request body for creating a post."""

    title: str = Field(
        ...,
        min_length=1,
        description="Post title",
    )
    author: AuthorNameIn = Field(
        ...,
        description="Author name as {firstName, lastName}",
    )
    content: str = Field(
        ...,
        description="Post body",
    )
    created: Optional[datetime] = Field(
        default=None,
        description="Creation timestamp; defaults to now",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Notes on the Analytical Engine",
                    "author": {"firstName": "Ada", "lastName": "Lovelace"},
                    "content": "The Analytical Engine weaves algebraic patterns...",
                }
            ]
        }
    }

    def to_record(self) -> PostRecord:
        return PostRecord(
            author=self.author.to_record(),
            title=self.title,
            content=self.content,
            created=self.created or utcnow(),
        )


class PostUpdateRequest(BaseModel):
    """
    Request body for updating a post.

    Every field is optional; only the fields sent are replaced.
    Unknown fields (including ``id``) are ignored, the path id wins.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    author: Optional[AuthorNameIn] = Field(
        default=None,
        description="Author name as {firstName, lastName} or 'First Last'",
    )

    @field_validator("author", mode="before")
    @classmethod
    def _accept_flat_author(cls, value: Any) -> Any:
        if isinstance(value, str):
            return AuthorNameIn.from_flat(value)
        return value

    def to_fields(self) -> dict[str, Any]:
        """Fields to $set, in stored document shape."""
        fields: dict[str, Any] = {}
        if self.title is not None:
            fields["title"] = self.title
        if self.content is not None:
            fields["content"] = self.content
        if self.author is not None:
            fields["author"] = self.author.to_record().to_dict()
        return fields


class PostResponse(BaseModel):
    """A post as returned by the API."""

    id: str = Field(..., description="Post identifier")
    author: str = Field(..., description="Author as 'First Last'")
    title: str
    content: str
    created: datetime


def flatten_author_name(author: AuthorName) -> str:
    """
    Render a stored author for the wire.

    {"firstName": "Ada", "lastName": "Lovelace"} -> "Ada Lovelace".
    The result is trimmed, so a missing half yields no stray space.
    """
    return f"{author.first_name} {author.last_name}".strip()


def serialize_post(record: PostRecord) -> PostResponse:
    """
    Project a stored post to its response shape.

    The output has exactly the keys id, author, title, content, created.
    """
    return PostResponse(
        id=record.id or "",
        author=flatten_author_name(record.author),
        title=record.title,
        content=record.content,
        created=record.created,
    )
