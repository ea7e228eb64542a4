import insight_engine.silence_logs  # isort:skip  # noqa
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insight_engine.config import settings
from insight_engine.routers import analyze, health, runs

# Configure root logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
# Create logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Serving {len(settings.ticker_urls)} tickers, run logs in {settings.logs_dir}/"
    )
    yield
    logger.info("Shutting down")


app = FastAPI(title="Insight Engine API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(runs.router)


@app.get("/")
async def root():
    return {"message": "Insight Engine API running"}
