"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (store setup/teardown)
- Route registration
- Middleware configuration
- Error handling
- An in-process server runner (run_server / close_server)
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import health_router, posts_router
from core.config import settings
from core.logging import configure_logging, get_logger
from core.storage import BasePostRepository, StorageError, create_post_repository


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: connect the post repository and create indexes.
    Shutdown: release the repository's connections.
    """
    repository: BasePostRepository = app.state.post_repository

    logger.info(
        "Starting blog posts service...",
        storage_backend=settings.storage_backend,
    )

    await repository.setup()

    logger.info(
        "Blog posts service started",
        storage_backend=settings.storage_backend,
    )

    yield

    logger.info("Shutting down blog posts service...")

    await repository.close()

    logger.info("Blog posts service stopped")


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"

    location = ".".join(
        str(part) for part in first.get("loc", ()) if part != "body"
    ) or "body"
    if first.get("type") == "missing":
        return f"Missing `{location}` in request body"
    return f"Invalid `{location}`: {first.get('msg', 'invalid value')}"


def create_app(repository: Optional[BasePostRepository] = None) -> FastAPI:
    """
    Application factory.

    Args:
        repository: Post repository to serve from. Built from settings
            when omitted. The app's lifespan calls setup() and close()
            on it.
    """
    configure_logging()

    app = FastAPI(
        title="Blog Posts Service",
        description="CRUD API for blog posts backed by MongoDB.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.post_repository = repository or create_post_repository(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(posts_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.info(
            "Rejected invalid request",
            path=request.url.path,
            method=request.method,
            reason=message,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message},
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error(
            "Storage error",
            path=request.url.path,
            method=request.method,
            operation=exc.operation,
            error=str(exc.__cause__ or exc),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": str(exc) if settings.debug else "Internal server error",
            },
        )

    return app


@dataclass
class RunningServer:
    """Handle for a server started by run_server()."""
    server: uvicorn.Server
    task: "asyncio.Task[None]"
    host: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


async def run_server(
    app: FastAPI,
    host: str = "127.0.0.1",
    port: int = 0,
) -> RunningServer:
    """
    Serve ``app`` on the running event loop.

    Returns once the server is accepting connections. Port 0 binds a
    free port; the handle carries the one actually bound.
    """
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        lifespan="on",
        log_config=None,
        access_log=False,
    )
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve())

    while not server.started:
        if task.done():
            # serve() returns early when startup fails
            task.result()
            raise RuntimeError("Server exited during startup")
        await asyncio.sleep(0.01)

    bound_host, bound_port = server.servers[0].sockets[0].getsockname()[:2]
    logger.info("Server accepting connections", host=bound_host, port=bound_port)
    return RunningServer(server=server, task=task, host=bound_host, port=bound_port)


async def close_server(running: RunningServer) -> None:
    """
    Stop a server started by run_server().

    Returns once connections are closed and lifespan shutdown has run.
    """
    running.server.should_exit = True
    await running.task
    logger.info("Server closed", port=running.port)


if __name__ == "__main__":
    uvicorn.run(
        "api.server:create_app",
        factory=True,
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
