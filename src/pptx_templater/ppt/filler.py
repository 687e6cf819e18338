"""
Template filler for pptx_templater.

Applies a validated TemplateData payload to a template file and writes the
result to a new file.
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pptx_templater.core.models import CellData, SlideData, TemplateData
from pptx_templater.core.settings import settings
from pptx_templater.ppt.document import TemplateDocument
from pptx_templater.ppt.slide import TemplateSlide
from pptx_templater.ppt.table import BackgroundPicture, TableCell

logger = logging.getLogger(__name__)


class TemplateFiller:
    """
    Fill a PowerPoint template with a TemplateData payload.

    For each described slide, the tags are replaced first, then the
    pictures, then the tables are paginated. Paginating a table replaces
    its slide by the produced slides, so the slide indices of the payload
    always refer to the template order.
    """

    def __init__(self, prune_unused_rows: Optional[bool] = None):
        """
        Initialize a template filler.

        Args:
            prune_unused_rows: Remove the template rows left without data.
                Defaults to the prune_unused_rows setting.
        """
        if prune_unused_rows is None:
            prune_unused_rows = settings.prune_unused_rows
        self.prune_unused_rows = prune_unused_rows
        self._picture_cache: Dict[Path, bytes] = {}

    def fill(self, template_path: Union[str, Path], data: TemplateData,
             output_path: Union[str, Path]) -> Path:
        """
        Fill a template.

        Args:
            template_path: Path to the template, left untouched.
            data: The fill payload.
            output_path: Path of the file to write.

        Returns:
            Path to the filled presentation.

        Raises:
            FileNotFoundError: If the template or a picture does not exist.
            SlideNotFoundError: If the payload describes a slide the
                template does not have.
        """
        template_path = Path(template_path)
        output_path = Path(output_path)
        if not template_path.exists():
            raise FileNotFoundError(f"Template file not found: {template_path}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if template_path.resolve() != output_path.resolve():
            shutil.copyfile(template_path, output_path)

        with TemplateDocument(output_path) as document:
            targets: List[Tuple[TemplateSlide, SlideData]] = [
                (document.get_slide(slide_data.index), slide_data) for slide_data in data.slides
            ]
            for slide, slide_data in targets:
                self._fill_slide(document, slide, slide_data)

            logger.info(f"Filled {len(targets)} slide(s), the presentation now has {document.slides_count()} slides")

        return output_path

    def _fill_slide(self, document: TemplateDocument, slide: TemplateSlide, slide_data: SlideData) -> None:
        logger.debug(f"Filling template slide {slide_data.index}")

        for tag, text in slide_data.tags.items():
            slide.replace_tag(tag, text, slide_data.mode)

        for picture in slide_data.pictures:
            slide.replace_picture(picture.tag, self._read_picture(picture.path), picture.content_type)

        if slide_data.tables:
            tables = [
                (table.tag, [[self._to_cell(cell) for cell in row] for row in table.rows])
                for table in slide_data.tables
            ]
            document.replace_tables(slide, tables, prune_unused=self.prune_unused_rows)

    def _to_cell(self, cell: CellData) -> TableCell:
        background = None
        if cell.background is not None:
            picture = cell.background
            background = BackgroundPicture(
                content=self._read_picture(picture.path),
                content_type=picture.content_type,
                top=picture.top,
                right=picture.right,
                bottom=picture.bottom,
                left=picture.left,
            )
        return TableCell(tag=cell.tag, new_text=cell.text, background=background)

    def _read_picture(self, path: Path) -> bytes:
        if path not in self._picture_cache:
            if not path.exists():
                raise FileNotFoundError(f"Picture file not found: {path}")
            self._picture_cache[path] = path.read_bytes()
        return self._picture_cache[path]
