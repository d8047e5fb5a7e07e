"""Parsers turning design-system sources into tokens and components."""

from .stories import StoryParser, find_story_files
from .tokens import TokenParser, categorize_token, describe_token, to_custom_property

__all__ = [
    "StoryParser",
    "TokenParser",
    "categorize_token",
    "describe_token",
    "find_story_files",
    "to_custom_property",
]
