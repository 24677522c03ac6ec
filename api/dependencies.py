"""
FastAPI dependencies for dependency injection.

The post repository is attached to ``app.state`` by the application
factory, so route handlers receive it without any module-level globals.
"""

from fastapi import Request

from core.storage import BasePostRepository


async def get_post_repository(request: Request) -> BasePostRepository:
    """
    Dependency that provides the post repository.

    Usage:
        @router.get("/posts")
        async def list_posts(
            repository: BasePostRepository = Depends(get_post_repository)
        ):
            ...
    """
    repository = getattr(request.app.state, "post_repository", None)
    if repository is None:
        raise RuntimeError("Post repository not initialized")
    return repository
