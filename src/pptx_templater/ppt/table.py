"""
Table model for pptx_templater.

A template table is a ``p:graphicFrame`` holding an ``a:tbl`` whose
alternative-text title contains a tag. Row 0 is the header row, the other
rows are template rows: each one carries its own ``{{tags}}`` and is filled
in place by one data row.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from pptx.oxml import parse_xml
from pptx.oxml.ns import nsdecls

from pptx_templater.core.errors import StaleTableError
from pptx_templater.ppt import images, paragraph
from pptx_templater.ppt.tags import find_tags

logger = logging.getLogger(__name__)

# Fill properties a table cell can carry, replaced by a background picture
_CELL_FILL_TAGS = ("a:noFill", "a:solidFill", "a:gradFill", "a:blipFill", "a:pattFill", "a:grpFill")


@dataclass
class BackgroundPicture:
    """
    A picture used as a table cell background.

    The offsets are the ``a:fillRect`` insets, in thousandths of a percent
    of the cell size.
    """
    content: bytes
    content_type: str
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


@dataclass
class TableCell:
    """One value of a data row: the tag to replace and its new text."""
    tag: str
    new_text: Optional[str] = ""
    background: Optional[BackgroundPicture] = None


@dataclass
class SetRowsResult:
    """Outcome of TemplateTable.set_rows()."""
    consumed: int
    remainder: List[List[TableCell]] = field(default_factory=list)


class TagBinding:
    """
    Tags of a template row and the columns they appear in.

    Built once from the row cells before any replacement happens, so a
    replaced value that looks like a tag is never matched again.
    """

    def __init__(self, columns: Optional[Dict[str, List[int]]] = None):
        self.columns: Dict[str, List[int]] = columns or {}

    @classmethod
    def from_row(cls, tr) -> "TagBinding":
        """
        Build the binding of an ``a:tr`` element.

        Args:
            tr: The template row.

        Returns:
            A TagBinding mapping every tag of the row to its column indices.
        """
        columns: Dict[str, List[int]] = {}
        for col, tc in enumerate(tr.tc_lst):
            for p in tc.xpath("./a:txBody/a:p"):
                for tag in find_tags(paragraph.get_text(p)):
                    indices = columns.setdefault(tag, [])
                    if col not in indices:
                        indices.append(col)
        return cls(columns)

    def __contains__(self, tag: str) -> bool:
        return tag in self.columns

    def __getitem__(self, tag: str) -> List[int]:
        return self.columns[tag]

    def __len__(self) -> int:
        return len(self.columns)

    def __repr__(self) -> str:
        return f"TagBinding({self.columns!r})"


class TemplateTable:
    """
    Handle on a table of a slide.

    The handle is bound to its graphic frame when the slide tables are
    enumerated. Removing columns or tables through any handle makes the
    handles of earlier enumerations of the same slide stale.
    """

    def __init__(self, slide, graphic_frame, index: int, title: str):
        """
        Args:
            slide: The TemplateSlide owning the table.
            graphic_frame: The ``p:graphicFrame`` element.
            index: Position of the table among the titled tables of the slide.
            title: The alternative-text title of the graphic frame.
        """
        self.slide = slide
        self.index = index
        self.title = title
        self._frame = graphic_frame
        self._generation = slide.generation

    def __repr__(self) -> str:
        return f"TemplateTable(index={self.index}, title={self.title!r})"

    def _check(self) -> None:
        if self._frame is None or self.slide.is_removed or self._generation != self.slide.generation:
            raise StaleTableError(
                f"Table {self.title!r} no longer matches its slide, look it up again"
            )

    @property
    def _tbl(self):
        self._check()
        return self._frame.xpath("./a:graphic/a:graphicData/a:tbl")[0]

    def column_titles(self) -> List[str]:
        """
        Get the titles of the columns.

        Returns:
            One string per header cell, the paragraphs of a cell joined with
            a space. Empty if the table has no rows.
        """
        texts = self.get_texts()
        return texts[0] if texts else []

    def get_texts(self) -> List[List[str]]:
        """Get the text of every cell, row by row, header included."""
        return [
            [" ".join(paragraph.get_text(p) for p in tc.xpath("./a:txBody/a:p")) for tc in tr.tc_lst]
            for tr in self._tbl.tr_lst
        ]

    def columns_count(self) -> int:
        tbl = self._tbl
        if tbl.tr_lst:
            return len(tbl.tr_lst[0].tc_lst)
        return len(tbl.tblGrid.gridCol_lst)

    def rows_count(self) -> int:
        """Number of rows, header included."""
        return len(self._tbl.tr_lst)

    def capacity(self) -> int:
        """Number of template rows that can receive data."""
        return max(self.rows_count() - 1, 0)

    def cells_count(self) -> int:
        """Number of cells over all the rows, header included."""
        return sum(len(tr.tc_lst) for tr in self._tbl.tr_lst)

    def remove_columns(self, column_indices: Sequence[int]) -> None:
        """
        Remove columns from the table.

        The frame gets narrower by the width of the removed columns. Indices
        that do not exist are ignored. Other handles on the tables of the
        same slide become stale.

        Args:
            column_indices: 0-based indices of the columns to remove.
        """
        tbl = self._tbl
        count = self.columns_count()
        grid_cols = tbl.tblGrid.gridCol_lst
        removed_width = 0

        for col in sorted(set(column_indices), reverse=True):
            if col < 0 or col >= count:
                logger.debug(f"Ignoring column {col}, table {self.title!r} has {count} columns")
                continue
            for tr in tbl.tr_lst:
                tcs = tr.tc_lst
                if col < len(tcs):
                    tr.remove(tcs[col])
            if col < len(grid_cols):
                removed_width += int(grid_cols[col].get("w", "0"))
                grid_cols[col].getparent().remove(grid_cols[col])

        if removed_width:
            ext = self._frame.xpath("./p:xfrm/a:ext")
            if ext:
                ext[0].set("cx", str(max(int(ext[0].get("cx", "0")) - removed_width, 0)))

        self._generation = self.slide._bump_generation()

    def set_rows(self, rows: Sequence[Sequence[TableCell]], prune_unused: bool = True) -> SetRowsResult:
        """
        Fill the template rows with data rows, in order.

        Each data row is bound to the next template row: every cell replaces
        its tag in the columns where the row carries it, and sets the cell
        background when a picture is given. Cells whose tag is not in the
        row are ignored. Filling stops when the template rows run out.

        Args:
            rows: The data rows, left untouched.
            prune_unused: Remove the template rows that received no data.

        Returns:
            SetRowsResult with the number of data rows used and the rows
            still to place.
        """
        tbl = self._tbl
        template_rows = tbl.tr_lst[1:]

        consumed = 0
        for tr in template_rows:
            if consumed >= len(rows):
                break
            self._fill_row(tr, rows[consumed])
            consumed += 1

        if prune_unused:
            for tr in template_rows[consumed:]:
                tbl.remove(tr)

        logger.debug(
            f"Table {self.title!r}: {consumed} row(s) filled, "
            f"{len(template_rows) - consumed} template row(s) {'removed' if prune_unused else 'left'}"
        )
        return SetRowsResult(consumed=consumed, remainder=[list(row) for row in rows[consumed:]])

    def remove(self) -> None:
        """Remove the table from its slide."""
        self._check()
        frame = self._frame
        frame.getparent().remove(frame)
        self._frame = None
        self.slide._bump_generation()

    def _fill_row(self, tr, row: Sequence[TableCell]) -> None:
        binding = TagBinding.from_row(tr)
        tcs = tr.tc_lst
        for cell in row:
            if not cell.tag or cell.tag not in binding:
                continue
            for col in binding[cell.tag]:
                tc = tcs[col]
                for p in tc.xpath("./a:txBody/a:p"):
                    paragraph.replace_tag(p, cell.tag, cell.new_text)
                if cell.background is not None:
                    self._set_background(tc, cell.background)

    def _set_background(self, tc, background: BackgroundPicture) -> None:
        rId = images.add_image(self.slide.part, background.content, background.content_type)

        tcPr = tc.get_or_add_tcPr()
        for fill in tcPr.xpath("|".join(f"./{tag}" for tag in _CELL_FILL_TAGS)):
            tcPr.remove(fill)

        blip_fill = parse_xml(
            f'<a:blipFill {nsdecls("a", "r")} dpi="0" rotWithShape="1">'
            f'<a:blip r:embed="{rId}"/>'
            f"<a:srcRect/>"
            f"<a:stretch>"
            f'<a:fillRect t="{background.top}" r="{background.right}" '
            f'b="{background.bottom}" l="{background.left}"/>'
            f"</a:stretch>"
            f"</a:blipFill>"
        )
        tcPr.insert_element_before(blip_fill, "a:headers", "a:extLst")
