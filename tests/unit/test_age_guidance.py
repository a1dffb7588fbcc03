"""Unit tests for age-bracket guidance."""

import logging

import pytest

from storybook.core.modules.age_guidance import (
    AGE_GUIDANCE,
    AgeRange,
    get_age_guidance,
)


class TestGetAgeGuidance:
    """Tests for get_age_guidance lookups."""

    @pytest.mark.parametrize("age_range", ["0-2", "3-5", "6-8", "9-12"])
    def test_known_brackets(self, age_range):
        guidance = get_age_guidance(age_range)
        assert guidance.age_range == age_range

    def test_whitespace_is_ignored(self):
        assert get_age_guidance(" 3 - 5 ").age_range == "3-5"

    def test_unknown_bracket_falls_back_to_early_reader(self, caplog):
        with caplog.at_level(logging.WARNING):
            guidance = get_age_guidance("13-16")

        assert guidance is AGE_GUIDANCE[AgeRange.EARLY_READER]
        assert "Unknown age range" in caplog.text

    def test_empty_bracket_falls_back(self):
        assert get_age_guidance("").age_range == "6-8"

    def test_every_bracket_is_defined(self):
        assert set(AGE_GUIDANCE) == set(AgeRange)


class TestAgeGuidanceBlocks:
    """Tests for the rendered guidance blocks."""

    def test_writing_guidelines(self):
        text = get_age_guidance("0-2").to_writing_guidelines()

        assert text.startswith("VOCABULARY:")
        assert "STORY COMPLEXITY:" in text
        assert "THEMES:" in text
        assert "Maximum 6 words per sentence" in text

    def test_illustration_guidelines(self):
        text = get_age_guidance("3-5").to_illustration_guidelines()

        assert text.splitlines()[0].startswith("VISUAL STYLE: Cute, rounded characters")
        assert "SCENE COMPLEXITY:" in text
        assert "COLOR PALETTE:" in text
        assert "VOCABULARY" not in text
