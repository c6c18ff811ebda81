from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import HTTPException
from dotenv import load_dotenv
import logging
import time
import uvicorn

from routexplore.core.logging import setup_logging
from routexplore.core.settings import get_settings

# Load environment variables from .env file
load_dotenv()

settings = get_settings()

# Setup logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

from routexplore.api.v1 import itinerary, places
from routexplore.api.v1.models import HealthResponse

app = FastAPI(title="RouteXplore API", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests_middleware(request: Request, call_next):
    """Log incoming requests, their processing time, and unexpected errors."""
    start_time = time.time()
    method = request.method
    path = request.url.path

    logger.info(f"Request: {method} {path}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f"Response: {method} {path} - Status: {response.status_code} - Duration: {process_time:.4f}s"
        )
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Error: {method} {path} - Exception: {str(e)} - Duration: {process_time:.4f}s",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error. Please check logs for more details."},
        )


# Include routers
app.include_router(itinerary.router, prefix="/api", tags=["itinerary"])
app.include_router(places.router, prefix="/api", tags=["places"])


@app.get("/health", response_model=HealthResponse, tags=["General"])
async def health():
    return HealthResponse()


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


if __name__ == "__main__":
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}, environment: {settings.ENVIRONMENT}")

    uvicorn.run(
        "routexplore.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=logging.getLevelName(logger.getEffectiveLevel()).lower(),  # Sync uvicorn log level
        reload=settings.ENVIRONMENT == "development",
    )
