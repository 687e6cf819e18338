"""
Table pagination for pptx_templater.

Spreads the rows of a table over as many copies of a template slide as
needed. A template slide can hold several tables: each table is paginated
in turn, re-using the slides produced for the previous tables before
creating new ones.
"""
import logging
from typing import List, Optional, Sequence

from pptx_templater.core.errors import InvalidOperationError, TableCapacityError, TableNotFoundError
from pptx_templater.ppt.slide import TemplateSlide
from pptx_templater.ppt.table import TableCell, TemplateTable

logger = logging.getLogger(__name__)


def _find_table(slide: TemplateSlide, tag: str) -> TemplateTable:
    tables = slide.find_tables(tag)
    if not tables:
        raise TableNotFoundError(tag, f"No table titled {tag!r} on {slide!r}")
    return tables[0]


def replace_table_one(slide_template: TemplateSlide, table_template: TemplateTable,
                      rows: Sequence[Sequence[TableCell]], prune_unused: bool = True) -> List[TemplateSlide]:
    """
    Paginate the rows of the only table of a template slide.

    At least one slide is produced, even without rows.

    Args:
        slide_template: The slide holding the table, left untouched.
        table_template: The table of slide_template to fill.
        rows: The data rows.
        prune_unused: Remove the template rows left without data.

    Returns:
        The new slides, inserted after slide_template in order.
    """
    return replace_table_multiple(slide_template, table_template, rows, [], prune_unused=prune_unused)


def replace_table_multiple(slide_template: TemplateSlide, table_template: TemplateTable,
                           rows: Sequence[Sequence[TableCell]],
                           existing_slides: Optional[List[TemplateSlide]] = None,
                           prune_unused: bool = True) -> List[TemplateSlide]:
    """
    Paginate the rows of one table of a template slide holding several tables.

    The table matching table_template is first filled on each of
    existing_slides, in order. The remaining rows go to new slides copied
    from the last existing slide (or from slide_template when there is
    none) before any of them was filled, and inserted after it.

    Args:
        slide_template: The slide holding the tables.
        table_template: The table of slide_template to fill, found on the
            other slides by its title.
        rows: The data rows, left untouched.
        existing_slides: Slides produced for the previous tables of the
            template, in order.
        prune_unused: Remove the template rows left without data.

    Returns:
        The slides created by this call, which can be empty when the
        existing slides were enough. When existing_slides is empty one
        slide is always created.

    Raises:
        InvalidOperationError: If table_template is not on slide_template.
        TableNotFoundError: If a slide lacks the table.
        TableCapacityError: If the table has no template row while rows
            remain to be placed.
    """
    existing_slides = list(existing_slides or [])
    if table_template.slide.part is not slide_template.part:
        raise InvalidOperationError(f"Table {table_template.title!r} is not on {slide_template!r}")

    tag = table_template.title
    total = len(rows)
    created: List[TemplateSlide] = []

    last_slide = existing_slides[-1] if existing_slides else slide_template
    last_slide_template = last_slide.clone()
    try:
        for slide in existing_slides:
            result = _find_table(slide, tag).set_rows(rows, prune_unused=prune_unused)
            rows = result.remainder
            logger.debug(f"Table {tag!r}: {result.consumed} row(s) on existing {slide!r}")

        # A single-table template always gets one slide, even without rows
        loop_once = not existing_slides

        while loop_once or rows:
            new_slide = last_slide_template.clone()
            result = _find_table(new_slide, tag).set_rows(rows, prune_unused=prune_unused)
            if rows and not result.consumed:
                new_slide.remove()
                raise TableCapacityError(f"Table {tag!r} has no template row to receive {len(rows)} row(s)")
            rows = result.remainder

            TemplateSlide.insert_after(new_slide, last_slide)
            last_slide = new_slide
            created.append(new_slide)
            loop_once = False
            logger.debug(f"Table {tag!r}: {result.consumed} row(s) on new {new_slide!r}")
    finally:
        last_slide_template.remove()

    logger.info(
        f"Table {tag!r}: {total} row(s) over {len(existing_slides)} existing and {len(created)} new slide(s)"
    )
    return created
