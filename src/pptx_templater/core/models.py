"""
Fill payload models for pptx_templater.

This module defines the Pydantic models describing what to put in a
template: tag values, pictures and table rows, per slide.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

import logging

from pptx_templater.ppt.images import CONTENT_TYPE_MAP, guess_content_type
from pptx_templater.ppt.slide import ReplacementType

logger = logging.getLogger(__name__)


def _resolve_content_type(path: Path, content_type: Optional[str]) -> str:
    if content_type is None:
        content_type = guess_content_type(path)
        if content_type is None:
            raise ValueError(f"Cannot guess the content type of {path}, set content_type")
    if content_type not in CONTENT_TYPE_MAP:
        raise ValueError(
            f"Unsupported content type {content_type!r}, expected one of {', '.join(CONTENT_TYPE_MAP)}"
        )
    return content_type


class BackgroundPictureData(BaseModel):
    """A picture used as the background of a table cell."""

    path: Path = Field(..., description="Path to the picture file")
    content_type: Optional[str] = Field(
        default=None, description="Picture content type, guessed from the extension if omitted"
    )
    top: int = Field(default=0, description="Top inset of the picture")
    right: int = Field(default=0, description="Right inset of the picture")
    bottom: int = Field(default=0, description="Bottom inset of the picture")
    left: int = Field(default=0, description="Left inset of the picture")

    @model_validator(mode="after")
    def validate_content_type(self) -> "BackgroundPictureData":
        self.content_type = _resolve_content_type(self.path, self.content_type)
        return self


class CellData(BaseModel):
    """A value of a table row."""

    tag: str = Field(..., description="Tag to replace in the template row, e.g. {{name}}")
    text: Optional[str] = Field(default="", description="Replacement text")
    background: Optional[BackgroundPictureData] = Field(
        default=None, description="Picture to use as the cell background"
    )


class PictureData(BaseModel):
    """A picture replacing the template pictures whose title contains the tag."""

    tag: str = Field(..., description="Tag to look for in the picture titles")
    path: Path = Field(..., description="Path to the new picture file")
    content_type: Optional[str] = Field(
        default=None, description="Picture content type, guessed from the extension if omitted"
    )

    @model_validator(mode="after")
    def validate_content_type(self) -> "PictureData":
        self.content_type = _resolve_content_type(self.path, self.content_type)
        return self


class TableData(BaseModel):
    """Rows of a template table, spread over as many slides as needed."""

    tag: str = Field(..., description="Tag found in the table title")
    rows: List[List[CellData]] = Field(default_factory=list, description="Data rows, in order")

    @field_validator("rows", mode="before")
    @classmethod
    def adapt_rows(cls, value: Any) -> Any:
        """
        Accept rows written as a mapping of tag to text.

        ``{"{{name}}": "Bill"}`` is the same as ``[{"tag": "{{name}}", "text": "Bill"}]``.
        """
        if not isinstance(value, list):
            return value
        return [
            [{"tag": tag, "text": text} for tag, text in row.items()] if isinstance(row, dict) else row
            for row in value
        ]


class SlideData(BaseModel):
    """What to replace on one slide of the template."""

    index: int = Field(..., ge=0, description="0-based position of the slide in the template")
    tags: Dict[str, Optional[str]] = Field(default_factory=dict, description="Tag to replacement text")
    mode: ReplacementType = Field(
        default=ReplacementType.GLOBAL, description="Whether tags inside tables are replaced"
    )
    pictures: List[PictureData] = Field(default_factory=list, description="Pictures to replace")
    tables: List[TableData] = Field(
        default_factory=list, description="Tables to paginate, the first one drives the slide count"
    )


class TemplateData(BaseModel):
    """Complete fill payload of a template."""

    slides: List[SlideData] = Field(default_factory=list, description="Slides to fill")

    @model_validator(mode="after")
    def validate_unique_slides(self) -> "TemplateData":
        """Ensure that every slide is described only once."""
        seen = set()
        for slide in self.slides:
            if slide.index in seen:
                raise ValueError(f"Slide {slide.index} is described more than once")
            seen.add(slide.index)
        return self

    def iter_pictures(self):
        """Yield every picture or cell background of the payload."""
        for slide in self.slides:
            yield from slide.pictures
            for table in slide.tables:
                for row in table.rows:
                    for cell in row:
                        if cell.background is not None:
                            yield cell.background
