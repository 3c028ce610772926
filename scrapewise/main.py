from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scrapewise.api.routes import scraping
from scrapewise.config import settings
from scrapewise.models.schemas import HealthResponse
from scrapewise.services.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Hugging Face AI: %s",
        "Enabled" if settings.ai_enabled else "Disabled (using fallback)",
    )
    yield


app = FastAPI(
    title="Scrapewise",
    description="Selector inference for structured web extraction",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(scraping.router)


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        service="scrapewise",
        ai=settings.ai_enabled,
        timestamp=datetime.now(timezone.utc),
    )
