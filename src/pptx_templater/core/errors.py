"""
Exceptions raised by pptx_templater.

Every error derives from PptxTemplaterError and from the closest built-in
exception, so callers can catch either the library's taxonomy or the usual
Python categories (ValueError, LookupError, RuntimeError).
"""


class PptxTemplaterError(Exception):
    """Base class for all pptx_templater errors."""


class FileFormatError(PptxTemplaterError, ValueError):
    """The file or stream is not a valid PowerPoint package."""


class UnsupportedImageFormatError(PptxTemplaterError, ValueError):
    """The picture content type is not one of the supported image formats."""

    def __init__(self, content_type):
        self.content_type = content_type
        super().__init__(f"Unsupported image content type: {content_type!r}")


class NotFoundError(PptxTemplaterError, LookupError):
    """A slide, table or relationship could not be found."""


class SlideNotFoundError(NotFoundError):
    """No slide exists at the requested index."""


class InvalidOperationError(PptxTemplaterError, RuntimeError):
    """The operation is structurally invalid for the objects it was given."""


class TableNotFoundError(NotFoundError, InvalidOperationError):
    """A slide expected to hold a tagged table does not contain it."""

    def __init__(self, tag: str, message: str = ""):
        self.tag = tag
        super().__init__(message or f"No table tagged {tag!r} on the slide")


class StaleTableError(InvalidOperationError):
    """A table handle was used after a structural change to its slide."""


class TableCapacityError(InvalidOperationError):
    """A table template offers no row to fill while rows are still pending."""
