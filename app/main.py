from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.routers import applications, properties
from app.core.logging import setup_logging
from app.exceptions import ServiceError, Unauthenticated
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from app.config import settings
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.database import AsyncSessionFactory
from structlog import get_logger

logger = get_logger()

app = FastAPI(title="Rental Applications Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(applications.router)
app.include_router(properties.router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "code": "VALIDATION_ERROR",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Full detail stays in the logs
    logger.exception("Database error", path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL_ERROR"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL_ERROR"})


@app.on_event("startup")
async def startup_event():
    setup_logging()
    # Initialize rate limiter only if Redis is available; skip gracefully on failure
    try:
        if settings.REDIS_URL:
            redis = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
            await FastAPILimiter.init(redis)
    except Exception as e:
        logger.warning("Running without rate limiter", error=str(e))


@app.on_event("shutdown")
async def shutdown_event():
    if FastAPILimiter.redis is not None:
        await FastAPILimiter.close()


@app.get("/health", tags=["health"])
async def health():
    details = {"status": "ok"}
    # Check DB connectivity
    try:
        async with AsyncSessionFactory() as session:
            await session.execute(text("SELECT 1"))
        details["database"] = "up"
    except Exception:
        logger.exception("Health check database probe failed")
        details["status"] = "degraded"
        details["database"] = "down"
    # Config presence checks (no secrets exposed)
    details["config"] = {
        "db_url_set": bool(settings.DATABASE_URL),
        "redis_url_set": bool(settings.REDIS_URL),
        "user_management_url_set": bool(settings.USER_MANAGEMENT_URL),
    }
    details["rate_limiter"] = "on" if FastAPILimiter.redis is not None else "off"
    # Pending applications count
    try:
        async with AsyncSessionFactory() as session:
            result = await session.execute(text("SELECT COUNT(1) FROM applications WHERE status = 'Pending'"))
            count = result.scalar() or 0
        details["pending_applications_count"] = int(count)
    except Exception:
        logger.exception("Health check pending count failed")
        details["pending_applications_count"] = "unavailable"
    return details


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
