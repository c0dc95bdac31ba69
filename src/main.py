from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.api import api_router
from core.config import configs
from core.geocoding import get_geocoder
from core.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🔧 Initializing Trip Scan Engine...")
    app.state.geocoder = get_geocoder()
    logger.info(f"✅ Geocoder ready: {configs.GEOCODER_TYPE}")
    yield
    # Shutdown
    logger.info("🛑 Shutting down Trip Scan Engine...")
    await app.state.geocoder.aclose()

app = FastAPI(
    title=configs.PROJECT_NAME,
    description="Trip detection over geotagged photo libraries",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS (Allow all for development env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")

@app.get("/")
async def root():
    return {"message": "Trip Scan Engine Running"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=configs.ENVIRONMENT == "development",
    )
