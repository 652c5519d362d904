import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .ingest import available_kinds
from .logging_config import configure_logging
from .routes.health import router as health_router
from .routes.webhook import router as webhook_router
from .settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    flags = settings.feature_flags()
    app.state.settings = settings
    app.state.flags = flags
    logger.info("Loaded configuration: %s", flags.model_dump())
    logger.info("Accepting report kinds: %s", ", ".join(available_kinds()))
    yield


app = FastAPI(title="Trivy Security Hub Webhook", version="0.1.0", lifespan=lifespan)
app.include_router(health_router)
app.include_router(webhook_router)
