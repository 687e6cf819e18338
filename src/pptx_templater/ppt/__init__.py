# src/pptx_templater/ppt/__init__.py
"""
PowerPoint components for pptx_templater.

This package opens presentations and expands their slides: tag and picture
replacement, slide cloning and table pagination.
"""
from pptx_templater.ppt.document import MIME_TYPE, Access, TemplateDocument
from pptx_templater.ppt.pagination import replace_table_multiple, replace_table_one
from pptx_templater.ppt.slide import ReplacementType, TemplateSlide
from pptx_templater.ppt.table import BackgroundPicture, SetRowsResult, TableCell, TagBinding, TemplateTable
from pptx_templater.ppt.tags import TAG_PATTERN, find_tags

__all__ = [
    "Access",
    "BackgroundPicture",
    "MIME_TYPE",
    "ReplacementType",
    "SetRowsResult",
    "TAG_PATTERN",
    "TableCell",
    "TagBinding",
    "TemplateDocument",
    "TemplateSlide",
    "TemplateTable",
    "find_tags",
    "replace_table_multiple",
    "replace_table_one",
]
