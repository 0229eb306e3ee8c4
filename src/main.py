import logging
import math
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from database import Base, engine
from health_api import router as health_router
from routines_api import router as routines_router
from sessions_api import router as sessions_router
from tools_api import router as tools_router

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables for a fresh local database; migrations live in alembic/
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="FitForge Server", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def log_internal_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except HTTPException as e:
        if e.status_code == 500:
            logger.error(
                "Unhandled exception during request: %s %s. Error: %s",
                request.method,
                request.url,
                e.detail,
            )
        raise
    except Exception:
        logger.exception(
            "Unhandled exception during request: %s %s", request.method, request.url
        )
        raise


def _json_float(value: float):
    # inf and nan are not valid JSON
    return value if math.isfinite(value) else str(value)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "detail": jsonable_encoder(
                exc.errors(), custom_encoder={float: _json_float}
            )
        },
    )


# Include routers
app.include_router(routines_router)
app.include_router(sessions_router)
app.include_router(health_router)
app.include_router(tools_router)


@app.get("/")
async def root():
    return {"message": "Welcome to FitForge Server"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("HOST", "127.0.0.1"), port=8000)
