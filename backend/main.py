"""
Certification enrollment service - FastAPI application
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from domain.exceptions import DomainError
from api.schemas.common import ErrorResponse
from infrastructure.persistence.database import init_db
from api.routers import auth, payment, webhooks, notifications, centers, referrals, health

from loguru import logger

# logging
os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
logger.add(
    settings.LOG_FILE,
    rotation="10 MB",
    retention="30 days",
    level=settings.LOG_LEVEL
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Service starting...")
    await init_db()
    logger.info("Database initialised")

    yield

    logger.info("Service stopping...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Certification enrollment - Razorpay payments, referrals, centers and notifications",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    body = ErrorResponse(detail=exc.message).model_dump(exclude_none=True)
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), listed by field"""
    errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    fields = [".".join(str(part) for part in e["loc"] if part != "body") for e in errors]
    fields = [f for f in fields if f]
    detail = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    body = ErrorResponse(detail=detail, errors=errors).model_dump(exclude_none=True)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


app.include_router(auth.router)
app.include_router(payment.router)
app.include_router(webhooks.router)
app.include_router(notifications.router)
app.include_router(centers.router)
app.include_router(referrals.router)
app.include_router(health.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
