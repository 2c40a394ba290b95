import os
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api.api import api_router
from app.api import deps
from app.core.config import settings, log_settings
from app.core.exceptions import BlogSpotError
from app.db.base import Base
from app.db.session import engine
from app.services import Services, build_services

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application is starting up")
    log_settings(settings)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)
    yield
    logger.info("Application is shutting down")
    app.state.services.shutdown()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan
)

app.include_router(api_router, prefix=settings.API_PREFIX)
logger.info("API router included")

# CORS middleware
if settings.BACKEND_CORS_ORIGINS:
    try:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )
        logger.info(f"CORS middleware added with origins: {settings.BACKEND_CORS_ORIGINS}")
    except Exception as e:
        logger.error(f"Failed to add CORS middleware: {str(e)}")
else:
    logger.warning("No CORS origins specified. CORS middleware not added.")


@app.get("/health")
def health_check(
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    push_channel = type(services.push.channel).__name__
    try:
        db.execute(text("SELECT 1"))
        logger.info("Health check passed")
        return {"status": "healthy", "database": "connected", "push_channel": push_channel}
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "database": "disconnected", "push_channel": push_channel}
        )


@app.exception_handler(BlogSpotError)
async def blogspot_error_handler(request: Request, exc: BlogSpotError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred."}
    )


@app.middleware("http")
async def add_request_id_header(request: Request, call_next):
    request_id = str(uuid.uuid4())
    logger.info(f"Request {request_id}: {request.method} {request.url}")
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    logger.info(f"Response {request_id}: Status {response.status_code}")
    return response


def run_server():
    environment = os.getenv("ENVIRONMENT", "development")
    logger.info(f"Running server in {environment} environment")

    port = int(os.getenv("PORT", 8080))
    if environment == "development":
        uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=True)
    else:
        uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run_server()
