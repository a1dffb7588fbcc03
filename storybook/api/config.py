"""API configuration constants.

Single source of truth for paths and settings used across the API layer.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base directories
API_DIR = Path(__file__).parent
PACKAGE_DIR = API_DIR.parent
PROJECT_DIR = PACKAGE_DIR.parent
DATA_DIR = Path(os.getenv("STORYBOOK_DATA_DIR") or PROJECT_DIR / "data")

# Story file storage
STORIES_DIR = DATA_DIR / "stories"


# Database (asyncpg DSN)
DATABASE_URL = os.getenv("DATABASE_URL", "")

# Job queue
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")


# Structured JSON logging
class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for key in ("story_id", "stage", "duration", "page_number", "error_type", "failed_at_stage"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


# Story generation logger with helper methods
class StoryLogger:
    """Logger for story generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("story_generation")

    def generation_started(self, story_id: str, page_count: int) -> None:
        self.logger.info(
            f"Story generation started ({page_count} pages)",
            extra={"story_id": story_id, "stage": "started"},
        )

    def stage_completed(self, story_id: str, stage: str, duration: float = None) -> None:
        extra = {"story_id": story_id, "stage": stage}
        if duration:
            extra["duration"] = round(duration, 2)
        self.logger.info(f"Stage completed: {stage}", extra=extra)

    def page_illustrated(self, story_id: str, page_number: int, total: int) -> None:
        self.logger.info(
            f"Illustrated page {page_number} of {total}",
            extra={"story_id": story_id, "stage": "illustrations", "page_number": page_number},
        )

    def generation_skipped(self, story_id: str) -> None:
        self.logger.warning(
            "Story is no longer pending, skipping generation",
            extra={"story_id": story_id, "stage": "skipped"},
        )

    def generation_completed(self, story_id: str, duration: float) -> None:
        self.logger.info(
            "Story generation completed",
            extra={"story_id": story_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def generation_failed(self, story_id: str, error: Exception, stage: str = None) -> None:
        extra = {"story_id": story_id, "stage": "failed", "error_type": type(error).__name__}
        if stage:
            extra["failed_at_stage"] = stage
        self.logger.error(f"Story generation failed: {error}", extra=extra, exc_info=True)


# Global story logger instance
story_logger = StoryLogger()
