"""Unit tests for structured logging helpers."""

import json
import logging

from storybook.api.config import JSONFormatter, StoryLogger


def _record(msg="hello", **extra):
    record = logging.LogRecord("story_generation", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "story_generation"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        data = json.loads(JSONFormatter().format(_record(story_id="s1", page_number=2, unrelated="x")))

        assert data["story_id"] == "s1"
        assert data["page_number"] == 2
        assert "unrelated" not in data


class TestStoryLogger:
    """Tests for StoryLogger events."""

    def test_page_illustrated(self, caplog):
        with caplog.at_level(logging.INFO, logger="story_generation"):
            StoryLogger().page_illustrated("s1", 2, 5)

        record = caplog.records[-1]
        assert record.getMessage() == "Illustrated page 2 of 5"
        assert record.story_id == "s1"
        assert record.page_number == 2

    def test_generation_failed(self, caplog):
        with caplog.at_level(logging.ERROR, logger="story_generation"):
            StoryLogger().generation_failed("s1", ValueError("bad"), stage="illustrations")

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.failed_at_stage == "illustrations"

    def test_generation_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="story_generation"):
            StoryLogger().generation_skipped("s1")

        record = caplog.records[-1]
        assert record.levelname == "WARNING"
        assert record.story_id == "s1"
        assert record.stage == "skipped"
