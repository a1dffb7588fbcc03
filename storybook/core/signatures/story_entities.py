"""
DSPy Signature for generating a page-by-page story plus its visual cast.

One call produces both the narrative and the canonical entity list, with
every page tagged by the ids of the entities that appear on it.
"""

import dspy


class StoryEntitiesSignature(dspy.Signature):
    """
    Create a children's storybook and its cast of visual entities.

    First, identify the main characters, locations, and important objects
    that will appear in the story. Then write a coherent page-by-page
    narrative with exactly page_count pages using these elements. Follow the
    writing_guidelines for the reader's age.

    CHARACTER DESIGN CARD (description format for every character):
    SPECIES/TYPE: [human/animal/robot etc.]
    PRIMARY COLOR SCHEME: [3 main colors max - very specific, like "bright red", "golden yellow"]
    KEY VISUAL MARKERS: [3-4 most distinctive features that make the character instantly recognizable]
    BODY SHAPE: [specific proportions - "round and short", "tall and thin", "medium build"]
    FACE FEATURES: [most distinctive facial characteristics]
    SIGNATURE CLOTHING/ACCESSORIES: [1-2 key items the character always wears]
    Keep design cards short but extremely specific. Focus on features that
    make the character recognizable even in silhouette.

    LOCATIONS: architectural style, color schemes and materials, size and
    scale, distinctive features, lighting and atmosphere.

    OBJECTS: exact colors and materials, size and proportions, unique
    features or embellishments, how they are positioned or used.

    RULES:
    - At most max_main_characters main characters, for visual consistency
    - Every entity id must be unique; pages reference entities only by id
    - entitiesPresent lists ONLY entities actually present on that page
    - The story must be engaging, age-appropriate and have a clear arc

    OUTPUT FORMAT (a single JSON object, no commentary):
    {
      "entities": [
        {"id": "fox", "name": "Fox", "type": "character", "description": "..."}
      ],
      "pages": [
        {"text": "The narrative text for this page...", "entitiesPresent": ["fox"]}
      ]
    }
    type is one of "character", "location", "object".
    """

    title: str = dspy.InputField(desc="The title of the storybook")

    description: str = dspy.InputField(desc="What the story should be about")

    story_type: str = dspy.InputField(
        desc="Kind of story, e.g. adventure, moral_lesson, fun_story. Sets the tone."
    )

    age_range: str = dspy.InputField(desc="Reader age range in years, e.g. 3-5")

    page_count: int = dspy.InputField(desc="Exact number of pages to write")

    writing_guidelines: str = dspy.InputField(
        desc="Age-appropriate vocabulary, complexity, themes and sentence length rules"
    )

    max_main_characters: int = dspy.InputField(
        desc="Hard cap on the number of main characters"
    )

    story_json: str = dspy.OutputField(
        desc="The JSON object with entities[] and pages[] exactly as specified. JSON only."
    )
