"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.post import (
    AuthorNameIn,
    PostCreateRequest,
    PostUpdateRequest,
    PostResponse,
    flatten_author_name,
    serialize_post,
)

__all__ = [
    "AuthorNameIn",
    "PostCreateRequest",
    "PostUpdateRequest",
    "PostResponse",
    "flatten_author_name",
    "serialize_post",
]
