"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from college_tracker.config import get_settings
from college_tracker.database import engine, init_models
from college_tracker.services.task_store import DataStoreError
from college_tracker.api import colleges, essays, tasks, schedule, dashboard
from college_tracker.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("Database tables created")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DataStoreError)
async def data_store_error_handler(request: Request, exc: DataStoreError):
    logger.error(f"Data store failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": "Data store unavailable"})


# Include routers
app.include_router(colleges.router, prefix="/api/colleges", tags=["Colleges"])
app.include_router(essays.router, prefix="/api/essays", tags=["Essays"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(schedule.router, prefix="/api/schedule", tags=["Schedule"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "college_tracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
