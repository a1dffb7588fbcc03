"""Unit tests for DSPy signatures."""

from storybook.core.signatures import StoryEntitiesSignature


def get_field_desc(signature_class, field_name: str) -> str:
    """Extract the desc from a DSPy signature field."""
    field_info = signature_class.model_fields[field_name]
    extra = field_info.json_schema_extra or {}
    return extra.get("desc", "")


class TestStoryEntitiesSignature:
    """Tests for StoryEntitiesSignature."""

    def test_has_required_input_fields(self):
        """Should take the brief, age guidance and the character cap as inputs."""
        assert set(StoryEntitiesSignature.input_fields) == {
            "title",
            "description",
            "story_type",
            "age_range",
            "page_count",
            "writing_guidelines",
            "max_main_characters",
        }

    def test_has_single_json_output(self):
        """Should produce one JSON string."""
        assert list(StoryEntitiesSignature.output_fields) == ["story_json"]

    def test_docstring_describes_output_format(self):
        """Docstring should carry the JSON shape and entity rules."""
        docstring = StoryEntitiesSignature.__doc__
        assert "OUTPUT FORMAT" in docstring
        assert '"entitiesPresent"' in docstring
        assert "CHARACTER DESIGN CARD" in docstring
        assert '"character", "location", "object"' in docstring

    def test_output_field_is_concise(self):
        """Output field desc should not duplicate the full docstring format."""
        desc = get_field_desc(StoryEntitiesSignature, "story_json")
        assert 0 < len(desc) < 200
