"""BalanceTalk API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.auth.security import TokenProvider
from src.bookmarks.repository import BookmarkRepository
from src.bookmarks.router import router as bookmarks_router
from src.bookmarks.service import BookmarkService
from src.comments.repository import CommentRepository
from src.comments.router import my_page_router
from src.comments.router import router as comments_router
from src.comments.service import CommentService
from src.config import get_settings
from src.core.context import get_request_id
from src.core.database import init_async_cassandra, shutdown_async_cassandra
from src.core.errors import BalanceTalkError
from src.core.logging import configure_structlog, get_logger
from src.core.middleware import RequestContextMiddleware
from src.core.redis import init_redis, shutdown_redis
from src.files.repository import FileRepository
from src.health import router as health_router
from src.members.repository import MemberRepository
from src.members.router import router as members_router
from src.members.service import MemberService
from src.notices.repository import NoticeRepository
from src.notices.router import router as notices_router
from src.notices.service import NoticeService
from src.posts.repository import PostRepository
from src.posts.router import router as posts_router
from src.posts.service import PostService
from src.reports.repository import ReportRepository
from src.reports.service import ReportService
from src.votes.repository import VoteRepository
from src.votes.router import router as votes_router
from src.votes.service import VoteService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


def init_services(app: FastAPI, session, redis_client=None) -> None:
    """Build repositories and services and publish them on ``app.state``."""
    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    member_repository = MemberRepository(session, keyspace)
    post_repository = PostRepository(session, keyspace)
    vote_repository = VoteRepository(session, keyspace)
    comment_repository = CommentRepository(session, keyspace)
    bookmark_repository = BookmarkRepository(session, keyspace)
    file_repository = FileRepository(session, keyspace)

    report_service = ReportService(
        ReportRepository(session, keyspace),
        forbid_self_report=settings.report_forbid_self_report,
    )

    app.state.member_service = MemberService(
        member_repository,
        app.state.token_provider,
        allow_admin_join=settings.member_allow_admin_join,
    )
    app.state.post_service = PostService(
        post_repository=post_repository,
        vote_repository=vote_repository,
        bookmark_repository=bookmark_repository,
        comment_repository=comment_repository,
        member_repository=member_repository,
        file_repository=file_repository,
        report_service=report_service,
        redis_client=redis_client,
        permission_ttl=settings.post_permission_ttl_seconds,
        scan_limit=settings.posts_scan_limit,
        best_size=settings.best_posts_size,
    )
    app.state.vote_service = VoteService(vote_repository, post_repository)
    app.state.comment_service = CommentService(
        comment_repository=comment_repository,
        post_repository=post_repository,
        vote_repository=vote_repository,
        member_repository=member_repository,
        report_service=report_service,
        max_depth=settings.comments_max_depth,
        best_size=settings.best_comments_size,
        best_min_count=settings.best_comments_min_count,
    )
    app.state.bookmark_service = BookmarkService(bookmark_repository, post_repository)
    app.state.notice_service = NoticeService(NoticeRepository(session, keyspace))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Initialize Redis (non-critical - without it nobody can create posts)
    redis_client = None
    try:
        redis_client = await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - post creation disabled",
        )

    # Initialize Cassandra (async)
    try:
        session = await init_async_cassandra()
        logger.info("cassandra_initialized")

        init_services(app, session, redis_client)
        logger.info("services_initialized", redis_enabled=redis_client is not None)
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Keep debug off so Starlette never renders stack traces; the handlers
    # below log details and return safe messages.
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="BalanceTalk - two-option balance game community API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.state.token_provider = TokenProvider.from_settings(settings)

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id()

    @app.exception_handler(BalanceTalkError)
    async def balancetalk_error_handler(
        request: Request, exc: BalanceTalkError
    ) -> ORJSONResponse:
        """Render domain errors with their code."""
        logger.info(
            "domain_error",
            code=exc.code.name,
            status_code=exc.status_code,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "code": exc.code.name,
                "message": exc.message,
                "status_code": exc.status_code,
                "request_id": _get_request_id_safe(request),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": str(exc.detail)
                if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
                else "Internal server error",
                "status_code": exc.status_code,
                "request_id": _get_request_id_safe(request),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle validation errors; field details are safe to expose."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "message": "Validation error",
                "status_code": 422,
                "request_id": _get_request_id_safe(request),
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg", "Invalid value"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Stack traces are logged, never returned.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "message": "An unexpected error occurred. Please try again later.",
                "status_code": 500,
                "request_id": _get_request_id_safe(request),
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(members_router)
    app.include_router(posts_router)
    app.include_router(votes_router)
    app.include_router(comments_router)
    app.include_router(my_page_router)
    app.include_router(bookmarks_router)
    app.include_router(notices_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "BalanceTalk API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=1 if settings.api_reload else settings.api_workers,
        reload=settings.api_reload,
        log_config=None,
    )
