"""Unit tests for entity consistency analysis."""

from storybook.core.modules.consistency_tracker import analyze, annotate_appearances
from storybook.core.types import StoryPage


def _pages(*entity_lists):
    return [
        StoryPage(page_number=i + 1, text=f"Page {i + 1}", entity_ids=list(ids))
        for i, ids in enumerate(entity_lists)
    ]


class TestAnalyze:
    """Tests for analyze()."""

    def test_frequency_and_first_appearance(self, forest_story):
        report = analyze(forest_story.pages)

        assert report.frequency == {"fox": 3, "forest": 2, "owl": 3, "lantern": 1}
        assert report.first_appearance == {"fox": 0, "forest": 0, "owl": 1, "lantern": 2}

    def test_recurring_means_more_than_one_page(self, forest_story):
        report = analyze(forest_story.pages)

        assert report.recurring == frozenset({"fox", "owl", "forest"})
        assert not report.is_recurring("lantern")

    def test_appearances_use_page_numbers(self, forest_story):
        report = analyze(forest_story.pages)

        assert report.appearances["fox"] == [1, 3, 4]
        assert report.appearances["lantern"] == [3]

    def test_duplicate_within_a_page_counts_once(self):
        report = analyze(_pages(["fox", "fox"], ["owl"]))

        assert report.frequency["fox"] == 1
        assert "fox" not in report.recurring
        assert report.appearances["fox"] == [1]

    def test_entity_on_every_page(self):
        report = analyze(_pages(["fox"], ["fox"], ["fox"]))

        assert report.frequency["fox"] == 3
        assert report.first_appearance["fox"] == 0
        assert report.recurring == frozenset({"fox"})

    def test_empty_pages(self):
        report = analyze(_pages([], []))

        assert report.frequency == {}
        assert report.first_appearance == {}
        assert report.recurring == frozenset()

    def test_no_pages(self):
        report = analyze([])
        assert report.recurring == frozenset()

    def test_same_input_same_report(self, forest_story):
        assert analyze(forest_story.pages) == analyze(forest_story.pages)

    def test_first_appears_on(self, forest_story):
        report = analyze(forest_story.pages)

        assert sorted(report.first_appears_on(0)) == ["forest", "fox"]
        assert report.first_appears_on(1) == ["owl"]
        assert report.first_appears_on(3) == []


class TestAnnotateAppearances:
    """Tests for annotate_appearances()."""

    def test_copies_page_numbers(self, forest_story):
        report = analyze(forest_story.pages)

        annotate_appearances(forest_story.entities, report)

        entity_map = forest_story.entity_map()
        assert entity_map["owl"].appears_in_pages == [2, 3, 4]
        assert entity_map["forest"].appears_in_pages == [1, 4]

    def test_entity_never_on_a_page(self, fox, owl):
        report = analyze(_pages(["fox"]))

        annotate_appearances([fox, owl], report)

        assert fox.appears_in_pages == [1]
        assert owl.appears_in_pages == []

    def test_annotation_is_a_copy(self, fox):
        report = analyze(_pages(["fox"]))

        annotate_appearances([fox], report)
        fox.appears_in_pages.append(99)

        assert report.appearances["fox"] == [1]
