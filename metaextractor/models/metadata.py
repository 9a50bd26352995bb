"""
Metadata model for representing the preview extracted from a web page.

This module defines the immutable Metadata value returned by every
extraction entry point.
"""
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Metadata(BaseModel):
    """
    Normalized preview of a single HTML page.

    Instances are frozen; every field defaults to an empty value so that an
    empty or unparseable document still produces a valid record.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    # (key, value) pairs in document order, duplicates preserved
    open_graph_tags: List[Tuple[str, str]] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    content: str = ""  # Sanitized HTML fragment
    raw: str = ""  # Original HTML input
    url: str = ""
    language: str = ""

    @field_validator("title", "description", "content")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Text fields never carry surrounding whitespace."""
        return v.strip()

    @field_validator("keywords", "images")
    @classmethod
    def drop_empty_entries(cls, v: List[str]) -> List[str]:
        """Drop empty strings while keeping order and duplicates."""
        return [item for item in v if item]

    @property
    def image(self) -> str:
        """The preferred preview image, or an empty string."""
        return self.images[0] if self.images else ""

    def open_graph(self, key: str) -> str:
        """Return the first Open Graph value for ``key`` (e.g. ``"og:type"``)."""
        for tag_key, value in self.open_graph_tags:
            if tag_key == key:
                return value
        return ""

    def open_graph_all(self, key: str) -> List[str]:
        """Return every Open Graph value for ``key`` in document order."""
        return [value for tag_key, value in self.open_graph_tags if tag_key == key]
