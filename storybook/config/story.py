"""
Story generation constants for the Consistent Storybook Generator.
"""

# Story generation constants
STORY_CONSTANTS = {
    "default_page_count": 5,
    "max_page_count": 20,
    "max_main_characters": 3,  # Fewer characters keeps illustrations consistent
    "default_age_range": "6-8",
    "default_art_style": "watercolor",
    "default_color_mode": "color",
    "default_layout_type": "side_by_side",
}
