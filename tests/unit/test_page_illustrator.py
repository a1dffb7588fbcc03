"""Unit tests for serial page illustration and reference propagation."""

import pytest

from storybook.core.errors import ImageGenerationFailure
from storybook.core.modules.consistency_tracker import analyze
from storybook.core.modules.page_illustrator import (
    GenerationStatus,
    IllustrationState,
    PageIllustrator,
)
from storybook.core.modules.illustration_styles import MONOCHROME_DIRECTIVE
from storybook.core.modules.prompt_composer import REFERENCE_PREAMBLE
from storybook.core.types import ReferenceImage, StoryConfig


def _ref(locator, generation_id=None):
    return ReferenceImage(locator=locator, image_bytes=b"x", page_number=1, generation_id=generation_id)


class TestIllustrationState:
    """Tests for the immutable state transitions."""

    def test_initial_state(self):
        state = IllustrationState()

        assert state.status is GenerationStatus.PENDING
        assert state.completed_pages == ()
        assert state.references == {}

    def test_start_and_complete(self):
        state = IllustrationState().start().begin_page(0)

        assert state.status is GenerationStatus.IN_PROGRESS
        assert state.current_page_index == 0
        assert state.complete().status is GenerationStatus.COMPLETED
        assert state.complete().current_page_index is None

    def test_record_page_returns_new_state(self):
        before = IllustrationState().start()

        after = before.record_page(1, _ref("p1", "gen-1"), ["fox"])

        assert before.references == {}
        assert before.completed_pages == ()
        assert after.references["fox"].locator == "p1"
        assert after.completed_pages == (1,)
        assert after.generation_ids == {"fox": "gen-1"}

    def test_reference_is_never_replaced(self):
        state = IllustrationState().start()
        state = state.record_page(1, _ref("p1"), ["fox"])
        state = state.record_page(2, _ref("p2"), ["fox", "owl"])

        assert state.references["fox"].locator == "p1"
        assert state.references["owl"].locator == "p2"
        assert state.completed_pages == (1, 2)

    def test_generation_ids_are_kept_per_entity(self):
        state = IllustrationState().start()
        state = state.record_page(1, _ref("p1", "gen-1"), ["fox"])
        state = state.record_page(2, _ref("p2", "gen-2"), ["fox", "owl"])
        state = state.record_page(3, _ref("p3"), ["lantern"])

        assert state.generation_ids == {"fox": "gen-1", "owl": "gen-2"}

    def test_fail(self):
        state = IllustrationState().start().begin_page(2).fail(2, "blocked")

        assert state.status is GenerationStatus.FAILED
        assert state.failed_page_index == 2
        assert state.error == "blocked"


class TestPageIllustrator:
    """Tests for PageIllustrator.illustrate_story."""

    def _illustrate(self, story, config, provider, store, story_key="forest", on_progress=None):
        illustrator = PageIllustrator(provider, store)
        return illustrator.illustrate_story(
            story=story,
            report=analyze(story.pages),
            config=config,
            story_key=story_key,
            on_progress=on_progress,
        )

    def test_pages_illustrated_in_order(self, forest_story, story_config, fake_provider, memory_store):
        result = self._illustrate(forest_story, story_config, fake_provider, memory_store)

        assert len(fake_provider.calls) == 4
        assert [p.image_url for p in result.pages] == [
            f"memory://forest/page_{n:02d}.png" for n in (1, 2, 3, 4)
        ]
        assert memory_store.saved["memory://forest/page_03.png"] == b"image-3"
        assert result.state.status is GenerationStatus.COMPLETED
        assert result.state.completed_pages == (1, 2, 3, 4)

    def test_prompts_are_recorded_on_pages(self, forest_story, story_config, fake_provider, memory_store):
        result = self._illustrate(forest_story, story_config, fake_provider, memory_store)

        for page, call in zip(result.pages, fake_provider.calls):
            assert page.image_prompt == call["prompt"]

    def test_source_pages_are_not_mutated(self, forest_story, story_config, fake_provider, memory_store):
        self._illustrate(forest_story, story_config, fake_provider, memory_store)

        assert all(page.image_url is None for page in forest_story.pages)

    def test_first_page_has_no_references(self, forest_story, story_config, fake_provider, memory_store):
        self._illustrate(forest_story, story_config, fake_provider, memory_store)

        assert fake_provider.calls[0]["reference_images"] == ()

    def test_later_pages_reuse_first_appearance_images(
        self, forest_story, story_config, fake_provider, memory_store
    ):
        self._illustrate(forest_story, story_config, fake_provider, memory_store)

        def locators(call_index):
            return [r.locator for r in fake_provider.calls[call_index]["reference_images"]]

        # Page 3 shows fox (page 1) and owl (page 2); lantern is new
        assert locators(2) == ["memory://forest/page_01.png", "memory://forest/page_02.png"]
        # Page 4: fox and forest share page 1's image, owl comes from page 2
        assert locators(3) == ["memory://forest/page_01.png", "memory://forest/page_02.png"]
        assert fake_provider.calls[2]["prompt"].startswith(REFERENCE_PREAMBLE)
        assert fake_provider.calls[2]["reference_images"][0].image_bytes == b"image-1"

    def test_entities_get_their_first_appearance_reference(
        self, forest_story, story_config, fake_provider, memory_store
    ):
        result = self._illustrate(forest_story, story_config, fake_provider, memory_store)
        entities = {e.id: e for e in result.entities}

        assert entities["fox"].reference_image == "memory://forest/page_01.png"
        assert entities["forest"].reference_image == "memory://forest/page_01.png"
        assert entities["owl"].reference_image == "memory://forest/page_02.png"
        assert entities["lantern"].reference_image == "memory://forest/page_03.png"
        assert entities["owl"].generation_id == "gen-2"
        assert entities["owl"].appears_in_pages == [2, 3, 4]

    def test_unreferenced_entity_keeps_none(self, forest_story, story_config, fake_provider, memory_store):
        forest_story.pages[1].entity_ids = []
        forest_story.pages[2].entity_ids = ["fox"]
        forest_story.pages[3].entity_ids = ["fox"]

        result = self._illustrate(forest_story, story_config, fake_provider, memory_store)
        entities = {e.id: e for e in result.entities}

        assert entities["owl"].reference_image is None
        assert entities["owl"].appears_in_pages == []

    def test_failure_stops_remaining_pages(self, forest_story, story_config, memory_store, failing_provider):
        provider = failing_provider(2)

        with pytest.raises(ImageGenerationFailure) as exc_info:
            self._illustrate(forest_story, story_config, provider, memory_store)

        assert exc_info.value.page_number == 2
        assert len(provider.calls) == 2
        assert list(memory_store.saved) == ["memory://forest/page_01.png"]

    def test_storage_error_becomes_image_failure(self, forest_story, story_config, fake_provider):
        class BrokenStore:
            def save(self, story_key, page_number, image_bytes):
                raise OSError("disk full")

        with pytest.raises(ImageGenerationFailure) as exc_info:
            self._illustrate(forest_story, story_config, fake_provider, BrokenStore())

        assert exc_info.value.page_number == 1
        assert "disk full" in str(exc_info.value)
        assert len(fake_provider.calls) == 1

    def test_progress_reports(self, kind_fox_story, story_config, fake_provider, memory_store):
        events = []

        self._illustrate(
            kind_fox_story,
            story_config,
            fake_provider,
            memory_store,
            on_progress=lambda *args: events.append(args),
        )

        assert events[0] == ("illustrations", "Generating 3 page illustrations...", 0, 3)
        assert events[1] == ("illustrations", "Illustrated page 1", 1, 3)
        assert events[-1] == ("illustrations", "All illustrations complete", 3, 3)
        assert len(events) == 5

    def test_progress_on_failure(self, kind_fox_story, story_config, memory_store, failing_provider):
        events = []

        with pytest.raises(ImageGenerationFailure):
            self._illustrate(
                kind_fox_story,
                story_config,
                failing_provider(1),
                memory_store,
                on_progress=lambda *args: events.append(args),
            )

        assert events[-1] == ("failed", "Page 1 failed", 0, 3)

    def test_monochrome_request_for_color_only_style(self, kind_fox_story, fake_provider, memory_store):
        config = StoryConfig(age_range="3-5", art_style="watercolor", color_mode="monochrome")

        self._illustrate(kind_fox_story, config, fake_provider, memory_store)

        assert all(MONOCHROME_DIRECTIVE not in call["prompt"] for call in fake_provider.calls)
