"""
Post endpoints.

Provides CRUD operations for blog posts:
- GET /posts - List posts
- GET /posts/{post_id} - Get one post
- POST /posts - Create a post
- PUT /posts/{post_id} - Update a post
- DELETE /posts/{post_id} - Delete a post
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_post_repository
from api.schemas.post import (
    PostCreateRequest,
    PostResponse,
    PostUpdateRequest,
    serialize_post,
)
from core.logging import get_logger
from core.storage import BasePostRepository


logger = get_logger(__name__)
router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("", response_model=list[PostResponse])
async def list_posts(
    repository: BasePostRepository = Depends(get_post_repository),
) -> list[PostResponse]:
    """List every post."""
    posts = await repository.find_all()
    return [serialize_post(post) for post in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    repository: BasePostRepository = Depends(get_post_repository),
) -> PostResponse:
    post = await repository.find_by_id(post_id)

    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post {post_id} not found",
        )

    return serialize_post(post)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    request: PostCreateRequest,
    repository: BasePostRepository = Depends(get_post_repository),
) -> PostResponse:
    """
    Create a new post.

    The response carries the assigned id and the flattened author name.
    """
    post = await repository.create(request.to_record())

    logger.info(
        "Post created",
        post_id=post.id,
        title=post.title,
    )

    return serialize_post(post)


@router.put("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_post(
    post_id: str,
    request: PostUpdateRequest,
    repository: BasePostRepository = Depends(get_post_repository),
) -> Response:
    """
    Update a post.

    Only the fields present in the body are replaced. The path id is
    authoritative; any id in the body is ignored.
    """
    fields = request.to_fields()
    found = await repository.update_by_id(post_id, fields)

    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post {post_id} not found",
        )

    logger.info(
        "Post updated",
        post_id=post_id,
        fields=sorted(fields),
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    repository: BasePostRepository = Depends(get_post_repository),
) -> Response:
    """
    Delete a post.

    Deleting a post that does not exist is a no-op and still returns 204.
    """
    deleted = await repository.delete_by_id(post_id)

    if deleted:
        logger.info("Post deleted", post_id=post_id)
    else:
        logger.info("Post already absent", post_id=post_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
