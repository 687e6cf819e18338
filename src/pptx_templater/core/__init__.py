# src/pptx_templater/core/__init__.py
"""
Core components for pptx_templater.

This package contains the errors and settings used throughout the
application. The fill payload models live in core.models.
"""

from pptx_templater.core.errors import (
    FileFormatError,
    InvalidOperationError,
    NotFoundError,
    PptxTemplaterError,
    SlideNotFoundError,
    StaleTableError,
    TableCapacityError,
    TableNotFoundError,
    UnsupportedImageFormatError,
)
from pptx_templater.core.settings import Settings, settings

__all__ = [
    "FileFormatError",
    "InvalidOperationError",
    "NotFoundError",
    "PptxTemplaterError",
    "Settings",
    "SlideNotFoundError",
    "StaleTableError",
    "TableCapacityError",
    "TableNotFoundError",
    "UnsupportedImageFormatError",
    "settings",
]
