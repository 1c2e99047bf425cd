import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from chirpy.auth.session import SessionAuthenticator
from chirpy.core.config import require_jwt_secret, settings
from chirpy.core.context import ApiContext
from chirpy.core.rate_limit import limiter
from chirpy.middleware.metrics import FILESERVER_PREFIX, install_metrics_middleware
from chirpy.routes.admin import router as admin_router
from chirpy.routes.auth import router as auth_router
from chirpy.routes.chirps import router as chirps_router
from chirpy.routes.users import router as users_router
from chirpy.routes.webhooks import router as webhooks_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": _error_code(exc.status_code), "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def database_exception_handler(request: Request, exc: SQLAlchemyError):
    # Store failures are fatal for the request and are not retried here.
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    )


def create_app() -> FastAPI:
    require_jwt_secret()

    app = FastAPI(title="Chirpy")
    app.state.context = ApiContext.from_settings(settings)
    app.state.authenticator = SessionAuthenticator(settings.JWT_SECRET)
    logger.info(
        "Startup config: ENV=%s PLATFORM=%s RATE_LIMITING=%s FILESERVER_ROOT=%s",
        settings.ENV,
        settings.PLATFORM or "-",
        settings.ENABLE_RATE_LIMITING,
        settings.FILESERVER_ROOT,
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    if settings.ENABLE_RATE_LIMITING:
        app.state.limiter = limiter
        # Provide our standard error shape for rate limits, instead of slowapi's default.
        app.add_exception_handler(
            RateLimitExceeded,
            lambda request, exc: JSONResponse(  # noqa: ARG005
                status_code=429,
                content={"error": "RATE_LIMITED", "message": "Too many requests"},
            ),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_metrics_middleware(app)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(chirps_router)
    app.include_router(webhooks_router)
    app.include_router(admin_router)

    @app.get("/api/healthz", response_class=PlainTextResponse)
    def healthz() -> str:
        return "OK"

    app.mount(
        FILESERVER_PREFIX,
        StaticFiles(directory=settings.FILESERVER_ROOT, html=True, check_dir=False),
        name="app",
    )
    return app


app = create_app()
