"""
PowerPoint document facade for pptx_templater.

Opens a presentation from a path or a binary stream, gives access to its
slides and saves it back exactly once when closed.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, List, Mapping, Sequence, Tuple, Union

from pptx import Presentation as PptxPresentation

from pptx_templater.core.errors import (
    FileFormatError,
    InvalidOperationError,
    SlideNotFoundError,
    TableNotFoundError,
)
from pptx_templater.ppt.pagination import replace_table_multiple
from pptx_templater.ppt.slide import TemplateSlide
from pptx_templater.ppt.table import TableCell

logger = logging.getLogger(__name__)

MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

Rows = Sequence[Sequence[TableCell]]


class Access(Enum):
    """How a TemplateDocument is opened."""

    READ = "read"
    READ_WRITE = "read_write"


class TemplateDocument:
    """
    A PowerPoint document being filled.

    Use it as a context manager: the document is saved when the block
    exits, even if an error occurred inside it.

    Example:
        with TemplateDocument("report.pptx") as document:
            slide = document.get_slide(0)
            slide.replace_tag("{{title}}", "Quarterly report")
    """

    def __init__(self, source: Union[str, Path, BinaryIO], access: Access = Access.READ_WRITE):
        """
        Open a document.

        Args:
            source: Path of a .pptx file or a seekable binary stream.
            access: READ_WRITE saves the document back to its source on
                close, READ never saves.

        Raises:
            FileNotFoundError: If the file does not exist.
            FileFormatError: If the source is not a valid PowerPoint package.
        """
        self.access = access
        self._closed = False
        self._slide_generations: Dict[object, int] = {}
        self._removed_parts = set()

        if isinstance(source, (str, Path)):
            source = Path(source)
            if not source.exists():
                raise FileNotFoundError(f"Template file not found: {source}")
            pptx_source = str(source)
        else:
            if source.seekable():
                source.seek(0)
            pptx_source = source
        self._source = source

        try:
            self.presentation = PptxPresentation(pptx_source)
        except Exception as e:
            raise FileFormatError(f"Invalid PowerPoint document: {e}") from e

        # Name the slide parts after their position before any slide is cloned
        self.presentation.slides
        logger.debug(f"Opened {self._describe_source()} ({self.slides_count()} slides, {access.name})")

    def __enter__(self) -> "TemplateDocument":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _describe_source(self) -> str:
        if isinstance(self._source, Path):
            return str(self._source)
        return "stream"

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Save the document if it was opened for writing. Only the first call has an effect."""
        if self._closed:
            return
        try:
            if self.access is Access.READ_WRITE:
                self.save()
        finally:
            self._closed = True

    def save(self, target: Union[str, Path, BinaryIO, None] = None) -> None:
        """
        Save the document.

        Args:
            target: Where to write the document. Defaults to the source, a
                source stream is rewound and truncated first.

        Raises:
            InvalidOperationError: If the document is read-only or closed.
        """
        if self.access is not Access.READ_WRITE:
            raise InvalidOperationError("Cannot save a document opened as read-only")
        if self._closed:
            raise InvalidOperationError("Cannot save a closed document")

        if target is None:
            target = self._source
            if not isinstance(target, Path):
                target.seek(0)
                target.truncate()

        if isinstance(target, (str, Path)):
            self.presentation.save(str(target))
            logger.info(f"Saved presentation to {target}")
        else:
            self.presentation.save(target)
            logger.info("Saved presentation to stream")

    def slides_count(self) -> int:
        """Number of slides in the slide list."""
        sldIdLst = self.presentation.element.sldIdLst
        return 0 if sldIdLst is None else len(sldIdLst.sldId_lst)

    def get_slide(self, index: int) -> TemplateSlide:
        """
        Get a slide by its position.

        Args:
            index: 0-based position in the slide list.

        Returns:
            The slide.

        Raises:
            SlideNotFoundError: If there is no slide at this position.
        """
        count = self.slides_count()
        if not 0 <= index < count:
            raise SlideNotFoundError(f"No slide at index {index}, the document has {count} slides")
        sldId = self.presentation.element.sldIdLst.sldId_lst[index]
        return TemplateSlide(self, self.presentation.part.related_part(sldId.rId))

    def get_slides(self) -> List[TemplateSlide]:
        return [self.get_slide(i) for i in range(self.slides_count())]

    def find_slides_by_note(self, note: str) -> List[TemplateSlide]:
        """Get the slides having a notes paragraph that contains the given text."""
        return [
            slide for slide in self.get_slides()
            if any(note in text for text in slide.get_notes())
        ]

    def replace_tables(self, slide_template: TemplateSlide,
                       tables: Union[Mapping[str, Rows], Sequence[Tuple[str, Rows]]],
                       remove_template: bool = True,
                       prune_unused: bool = True) -> List[TemplateSlide]:
        """
        Paginate every table of a template slide.

        The tables are processed in the given order. The first one decides
        how many slides are created, the next ones re-use these slides and
        add more when they need them.

        Args:
            slide_template: The slide holding the tables.
            tables: (tag, rows) pairs, or a mapping of tag to rows. The tag
                selects the first table whose title contains it.
            remove_template: Remove slide_template once done.
            prune_unused: Remove the template rows left without data.

        Returns:
            The slides produced, in slide order.

        Raises:
            TableNotFoundError: If slide_template has no table for a tag.
        """
        pairs = list(tables.items()) if isinstance(tables, Mapping) else list(tables)

        # Every tag is resolved before the first slide is produced
        templates = []
        for tag, rows in pairs:
            found = slide_template.find_tables(tag)
            if not found:
                raise TableNotFoundError(tag, f"No table titled {tag!r} on {slide_template!r}")
            templates.append((found[0], rows))

        slides: List[TemplateSlide] = []
        for table_template, rows in templates:
            slides.extend(
                replace_table_multiple(slide_template, table_template, rows, slides, prune_unused=prune_unused)
            )

        if remove_template:
            slide_template.remove()

        logger.info(f"{len(pairs)} table(s) of {slide_template!r} paginated over {len(slides)} slide(s)")
        return slides
