# salonbook/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .db import create_db_and_tables
from .errors import BookingError, ClosedError
from .routers import appointments_routes, public_routes, salons_routes, staff_routes

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    create_db_and_tables()
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Salonbook API", version="0.1.0", lifespan=lifespan)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    content = {"detail": exc.message}
    if isinstance(exc, ClosedError) and exc.reason:
        content["reason"] = exc.reason
    if exc.status_code >= 500:
        logger.error("Request to %s failed: %s", request.url.path, exc.message)
    else:
        logger.info("Request to %s rejected (%s): %s", request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(public_routes.router)
app.include_router(salons_routes.router)
app.include_router(staff_routes.router)
app.include_router(appointments_routes.router)
