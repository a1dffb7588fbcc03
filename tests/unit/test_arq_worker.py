"""Unit tests for ARQ worker and story generation task."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from storybook.core.types import StoryBrief, StoryConfig


class TestGenerateStoryTask:
    """Tests for the generate_story_task ARQ task."""

    @pytest.mark.asyncio
    async def test_task_calls_generate_story_with_brief_and_config(self):
        """Task should build the brief and config from its parameters."""
        with patch("storybook.worker.generate_story", new_callable=AsyncMock) as mock_gen:
            mock_gen.return_value = MagicMock(page_count=3)
            from storybook.worker import generate_story_task

            ctx = {"job_id": "test-job-123"}
            result = await generate_story_task(
                ctx,
                story_id="story-uuid-456",
                title="The Kind Fox",
                description="A fox helps a lost owl",
                story_type="moral_lesson",
                age_range="3-5",
                page_count=3,
                art_style="line_art",
                color_mode="monochrome",
                layout_type="picture_top",
            )

            mock_gen.assert_called_once_with(
                story_id="story-uuid-456",
                brief=StoryBrief(
                    title="The Kind Fox",
                    description="A fox helps a lost owl",
                    story_type="moral_lesson",
                    age_range="3-5",
                    page_count=3,
                ),
                config=StoryConfig(
                    age_range="3-5",
                    art_style="line_art",
                    color_mode="monochrome",
                    layout_type="picture_top",
                    story_type="moral_lesson",
                ),
            )
            assert result == {"story_id": "story-uuid-456", "status": "completed", "page_count": 3}

    @pytest.mark.asyncio
    async def test_task_uses_default_params_when_not_provided(self):
        """Task should use default parameters when not explicitly provided."""
        with patch("storybook.worker.generate_story", new_callable=AsyncMock) as mock_gen:
            mock_gen.return_value = MagicMock(page_count=5)
            from storybook.worker import generate_story_task

            await generate_story_task(
                {"job_id": "test-job"},
                story_id="story-123",
                title="A Title",
                description="A story about something",
            )

            call_kwargs = mock_gen.call_args.kwargs
            assert call_kwargs["brief"].page_count == 5
            assert call_kwargs["brief"].age_range == "6-8"
            assert call_kwargs["config"].art_style == "watercolor"
            assert call_kwargs["config"].color_mode == "color"

    @pytest.mark.asyncio
    async def test_task_reraises_exceptions(self):
        """Task should re-raise exceptions so ARQ marks job as failed."""
        with patch("storybook.worker.generate_story", new_callable=AsyncMock) as mock_gen:
            mock_gen.side_effect = ValueError("Generation failed")

            from storybook.worker import generate_story_task

            with pytest.raises(ValueError, match="Generation failed"):
                await generate_story_task(
                    {"job_id": "test-job"},
                    story_id="story-123",
                    title="A Title",
                    description="A story about something",
                )


    @pytest.mark.asyncio
    async def test_task_reports_skip_for_story_no_longer_pending(self):
        """Task should finish quietly when the story was already failed or deleted."""
        with patch("storybook.worker.generate_story", new_callable=AsyncMock) as mock_gen:
            mock_gen.return_value = None
            from storybook.worker import generate_story_task

            result = await generate_story_task(
                {"job_id": "job-1"},
                story_id="story-1",
                title="The Kind Fox",
                description="A fox helps a lost owl",
            )

        assert result == {"story_id": "story-1", "status": "skipped", "page_count": 0}


class TestCleanupStaleJobsTask:
    """Tests for the stale job cron task."""

    @pytest.mark.asyncio
    async def test_skips_without_database(self):
        with patch("storybook.worker.get_dsn", return_value=""):
            from storybook.worker import cleanup_stale_jobs_task

            result = await cleanup_stale_jobs_task({})

        assert result == {"cleaned_stories": 0}

    @pytest.mark.asyncio
    async def test_marks_stale_stories_failed(self):
        conn = AsyncMock()
        conn.execute.return_value = "UPDATE 2"

        with patch("storybook.worker.get_dsn", return_value="postgresql://localhost/test"), \
                patch("storybook.worker.asyncpg.connect", new=AsyncMock(return_value=conn)):
            from storybook.worker import cleanup_stale_jobs_task

            result = await cleanup_stale_jobs_task({})

        assert result == {"cleaned_stories": 2}
        conn.close.assert_awaited_once()


class TestWorkerSettings:
    """Tests for WorkerSettings configuration."""

    def test_worker_settings_has_generate_story_task(self):
        """WorkerSettings should register generate_story_task."""
        from storybook.worker import WorkerSettings, generate_story_task

        assert generate_story_task in WorkerSettings.functions

    def test_failed_stories_are_not_retried(self):
        from storybook.worker import WorkerSettings

        assert WorkerSettings.max_tries == 1

    def test_job_timeout_covers_serial_illustration(self):
        from storybook.worker import WorkerSettings

        assert WorkerSettings.job_timeout >= 1800
        assert WorkerSettings.max_jobs == 2

    def test_stale_cleanup_is_scheduled(self):
        from storybook.worker import WorkerSettings

        assert len(WorkerSettings.cron_jobs) == 1
