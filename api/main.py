"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import workout_router
from api.auth_routes import router as auth_router
from api.challenge_routes import router as challenge_router
from api.goal_routes import router as goal_router
from api.meal_routes import router as meal_router
from config.settings import settings
from models.database import (
    init_mongo,
    close_mongo_connection,
    ping_database,
)
from utils.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting application...")
    await init_mongo()  # Connect to MongoDB and create indexes
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_mongo_connection()
    logger.info("Application shut down")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Fitness tracking API: meals, workouts, goals and community challenges",
    lifespan=lifespan
)

# Remove duplicates while preserving order
unique_origins = list(dict.fromkeys(settings.cors_origins))
logger.info(f"CORS configured with origins: {unique_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=unique_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures as 400 with the offending fields."""
    logger.info(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({
            "success": False,
            "message": "Validation error",
            "errors": [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in exc.errors()
            ],
        }),
    )


# Include API routes
app.include_router(auth_router)
app.include_router(meal_router)
app.include_router(workout_router.router)
app.include_router(goal_router)
app.include_router(challenge_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FitFusion API",
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    database_up = await ping_database()
    return {
        "status": "healthy" if database_up else "degraded",
        "service": settings.app_name,
        "database": "connected" if database_up else "disconnected",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
