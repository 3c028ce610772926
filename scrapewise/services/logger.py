"""Centralized logging service for debugging and monitoring."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from scrapewise.config import settings

# Create logs directory
LOG_DIR = Path(settings.log_dir)
LOG_DIR.mkdir(parents=True, exist_ok=True)

APP_LOG_LEVEL = getattr(logging, settings.app_log_level.upper(), logging.INFO)
NOISY_LOG_LEVEL = getattr(logging, settings.noisy_log_level.upper(), logging.WARNING)

# Configure logging
logging.basicConfig(
    level=APP_LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(LOG_DIR / "scrapewise.log"),
        logging.StreamHandler(),  # Also print to console
    ],
)

# Reduce noise from framework/network libraries unless explicitly overridden.
for logger_name in (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
    "asyncio",
):
    logging.getLogger(logger_name).setLevel(NOISY_LOG_LEVEL)

logger = logging.getLogger("scrapewise")


def log_inference_call(
    model: str,
    caller: str,
    duration_ms: int = 0,
    status: str = "success",
    status_code: Optional[int] = None,
    error: Optional[str] = None,
) -> None:
    """Log a call to the external inference service."""
    call_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "model": model,
        "caller": caller,
        "duration_ms": duration_ms,
        "status": status,
        "status_code": status_code,
        "error": error,
    }
    logger.info(f"INFERENCE_CALL: {json.dumps(call_data)}")


def log_analysis(
    source: str,
    confidence: str,
    fields: list[str],
    data_types: list[str],
    duration_ms: int = 0,
) -> None:
    """Log the outcome of one structure analysis."""
    analysis_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": source,
        "confidence": confidence,
        "fields": fields,
        "data_types": data_types,
        "duration_ms": duration_ms,
    }
    logger.info(f"ANALYSIS: {json.dumps(analysis_data)}")


def log_event(
    event_type: str,
    message: str,
    **kwargs,
) -> None:
    """Log a generic event."""
    event_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "message": message,
        **kwargs,
    }
    logger.info(f"EVENT: {json.dumps(event_data, default=str)}")
