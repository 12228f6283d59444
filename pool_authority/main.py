import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .domain.payments.router import router as payments_router
from .domain.payments.stripe_service import StripeService
from .email_service import EmailService
from .errors import ProviderError, ProviderNotConfiguredError
from .routes.email import router as email_router

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /create-checkout-session - Create Stripe payment",
    "GET  /payment-status/{session_id} - Check Stripe payment",
    "POST /send-weekly-update - Send weekly service email",
    "POST /send-invoice - Send monthly invoice email",
    "POST /send-quote - Send quote email",
    "POST /send-email - Send a custom email",
    "POST /test-email - Test email configuration",
]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Reduce verbosity of third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)


def _status_label(configured: bool) -> str:
    return "configured" if configured else "not configured"


def _log_startup_banner(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    stripe_ok = app.state.stripe_service.is_available()
    email_ok = app.state.email_service.is_available()

    logger.info("🏊 Pool Authority Server Running")
    logger.info(f"Port: {settings.port}")
    logger.info(
        f"Stripe: {'✅ Configured' if stripe_ok else '❌ Missing STRIPE_SECRET_KEY'}"
    )
    logger.info(
        "Email: "
        + (
            f"✅ Configured ({settings.resolved_email_provider})"
            if email_ok
            else "❌ Missing RESEND_API_KEY or SMTP_USER/SMTP_PASSWORD"
        )
    )
    for endpoint in ENDPOINTS:
        logger.info(f"- {endpoint}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    _log_startup_banner(app)

    # Credential check runs in the background; a bad mailbox must not block start-up
    verify_task = None
    if app.state.email_service.is_available():
        verify_task = asyncio.create_task(app.state.email_service.verify_connection())

    yield

    if verify_task is not None:
        await verify_task
    logger.info("Application shutting down...")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the server as {"error": message}"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.detail}")
        else:
            logger.warning(f"{request.method} {request.url.path} - {exc.detail}")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.warning(f"Validation error for {request.url.path}: {errors}")
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            message = "Invalid request body"
        return _error_response(400, message)

    @app.exception_handler(ProviderNotConfiguredError)
    async def not_configured_handler(request: Request, exc: ProviderNotConfiguredError):
        logger.warning(f"{request.method} {request.url.path} - {exc}")
        return _error_response(400, str(exc))

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        logger.error(f"{request.method} {request.url.path} - Provider error: {exc}")
        return _error_response(500, str(exc))


def create_app(
    settings: Optional[Settings] = None,
    email_service: Optional[EmailService] = None,
    stripe_service: Optional[StripeService] = None,
) -> FastAPI:
    """
    Build the API with its providers wired from one Settings object.
    Services can be passed in directly (tests use fakes this way).
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Pool Authority API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.email_service = email_service or EmailService(settings)
    app.state.stripe_service = stripe_service or StripeService(settings)

    register_exception_handlers(app)

    logger.info(f"CORS allowed origins: {settings.allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(payments_router)
    app.include_router(email_router)

    @app.get("/")
    def root(request: Request):
        return {
            "status": "Pool Authority Server Running",
            "email": _status_label(request.app.state.email_service.is_available()),
            "stripe": _status_label(request.app.state.stripe_service.is_available()),
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app
