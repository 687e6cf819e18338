"""
Paragraph text engine for pptx_templater.

Works directly on ``a:p`` elements so the same code serves text boxes,
placeholders, table cells and notes.
"""
import logging
from typing import List, Optional

from pptx.text.text import _Paragraph

logger = logging.getLogger(__name__)


def get_text(p) -> str:
    """
    Get the text of a paragraph.

    Args:
        p: The ``a:p`` element.

    Returns:
        The concatenated text of the paragraph runs and fields, which can be
        empty. Line breaks are not rendered.
    """
    return "".join(p.xpath(".//a:t/text()"))


def get_run_texts(p) -> List[str]:
    """Return the text of each ``a:r`` run of the paragraph, in order."""
    return [run.text for run in _Paragraph(p, None).runs]


def replace_tag(p, tag: Optional[str], new_text: Optional[str]) -> bool:
    """
    Replace every occurrence of a tag inside a paragraph.

    The runs are concatenated, the tag is replaced literally (it is not a
    regular expression) and, if anything changed, the whole result goes to
    the first run: its formatting is kept and the other runs are removed.
    Paragraphs that do not contain the tag are left untouched.

    Args:
        p: The ``a:p`` element.
        tag: The literal text to replace, e.g. ``"{{hello}}"``. If None or
            empty nothing is done.
        new_text: The replacement, None is treated as an empty string.

    Returns:
        True if the paragraph was modified.
    """
    if not tag:
        return False
    if new_text is None:
        new_text = ""

    runs = _Paragraph(p, None).runs
    if not runs:
        return False

    run_texts = [run.text for run in runs]
    text = "".join(run_texts)
    if tag not in text:
        return False

    if len(runs) > 1 and not any(tag in run_text for run_text in run_texts):
        # Known limitation: a tag split over several runs is matched on the
        # concatenated text and the runs are flattened into the first one
        logger.debug(f"Tag {tag!r} spans a run boundary in {run_texts!r}, flattening {len(runs)} runs")

    runs[0].text = text.replace(tag, new_text)
    for run in runs[1:]:
        run._r.getparent().remove(run._r)

    return True
