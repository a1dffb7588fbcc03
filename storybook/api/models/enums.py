"""Enumerations shared by API requests, responses and the repository."""

from enum import Enum


class JobStatus(str, Enum):
    """Lifecycle of a story generation job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StoryType(str, Enum):
    ADVENTURE = "adventure"
    MORAL_LESSON = "moral_lesson"
    FUN_STORY = "fun_story"


class AgeRangeOption(str, Enum):
    TODDLER = "0-2"
    PRESCHOOL = "3-5"
    EARLY_READER = "6-8"
    MIDDLE_GRADE = "9-12"


class ArtStyle(str, Enum):
    ANIME = "anime"
    WATERCOLOR = "watercolor"
    CARTOON_3D = "3d_cartoon"
    PIXEL_ART = "pixel_art"
    COMIC_BOOK = "comic_book"
    MINIMALIST_CARICATURE = "minimalist_caricature"
    LINE_ART = "line_art"
    STICK_MAN = "stick_man"
    GOUACHE_TEXTURE = "gouache_texture"


class ColorModeOption(str, Enum):
    COLOR = "color"
    MONOCHROME = "monochrome"


class LayoutType(str, Enum):
    SIDE_BY_SIDE = "side_by_side"
    PICTURE_TOP = "picture_top"
