import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.database import connect_to_mongo, close_mongo_connection
from .core.logging_config import clear_request_context, get_logger, set_request_context, setup_logging
from .api.api import api_router
from .api.responses import register_exception_handlers
from .services.theme_service import theme_service

logger = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    set_request_context(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "version": settings.VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION
    }


@app.on_event("startup")
async def startup_event():
    setup_logging(settings.LOG_LEVEL, settings.GRAYLOG_HOST, settings.GRAYLOG_PORT)
    await connect_to_mongo()

    if settings.SEED_DEFAULT_THEMES:
        await theme_service.seed_default_themes()

    logger.info("%s backend ready", settings.PROJECT_NAME)


@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()


# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)
