"""
Slide model for pptx_templater.

Wraps a python-pptx SlidePart and provides the operations needed to expand
a template: tag and picture replacement, table lookup, cloning, insertion
and removal.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.parts.slide import SlidePart

from pptx_templater.core.errors import InvalidOperationError
from pptx_templater.ppt import images, paragraph
from pptx_templater.ppt.table import TableCell, TemplateTable
from pptx_templater.ppt.tags import find_tags

logger = logging.getLogger(__name__)

_R_NAMESPACE = "{http://schemas.openxmlformats.org/officeDocument/2006/relationships}"


class ReplacementType(str, Enum):
    """Where a tag is replaced inside a slide."""

    GLOBAL = "global"
    """Every paragraph of the slide, table cells included."""

    NO_TABLE = "no_table"
    """Every paragraph except the ones inside a table."""

    # case-insensitive parsing
    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value_lower = value.lower()
            for member in cls:
                if member.value == value_lower:
                    return member
        return None


class TemplateSlide:
    """
    A slide of a TemplateDocument.

    Several TemplateSlide objects can wrap the same slide part, they compare
    equal and share the state used to detect stale table handles.
    """

    def __init__(self, document, slide_part: SlidePart):
        """
        Args:
            document: The TemplateDocument the slide belongs to.
            slide_part: The python-pptx slide part.
        """
        self.document = document
        self.part = slide_part

    def __eq__(self, other) -> bool:
        return isinstance(other, TemplateSlide) and other.part is self.part

    def __hash__(self) -> int:
        return id(self.part)

    def __repr__(self) -> str:
        return f"TemplateSlide({self.part.partname})"

    @property
    def element(self):
        """The ``p:sld`` element of the slide."""
        return self.part.slide.element

    @property
    def presentation_part(self):
        return self.document.presentation.part

    @property
    def generation(self) -> int:
        """Counter increased by every structural change of the slide tables."""
        return self.document._slide_generations.get(self.part, 0)

    @property
    def is_removed(self) -> bool:
        return self.part in self.document._removed_parts

    def _bump_generation(self) -> int:
        generation = self.generation + 1
        self.document._slide_generations[self.part] = generation
        return generation

    def _presentation_rId(self) -> Optional[str]:
        for rId, rel in self.presentation_part.rels.items():
            if not rel.is_external and rel.reltype == RT.SLIDE and rel.target_part is self.part:
                return rId
        return None

    def get_texts(self) -> List[str]:
        """
        Get all the texts of the slide.

        Returns:
            One string per paragraph, in document order. Paragraphs without
            text give an empty string.
        """
        return [paragraph.get_text(p) for p in self.element.iter(qn("a:p"))]

    def get_title(self) -> str:
        """
        Get the slide title.

        Returns:
            The paragraphs of the title placeholder joined with a space, or an
            empty string if the slide has no title.
        """
        shapes = self.element.xpath(
            ".//p:sp[p:nvSpPr/p:nvPr/p:ph[@type='title' or @type='ctrTitle']]"
        )
        if not shapes:
            return ""
        return " ".join(paragraph.get_text(p) for p in shapes[0].iter(qn("a:p")))

    def get_notes(self) -> List[str]:
        """Get the paragraphs of the notes slide, empty if there is none."""
        if not self.part.has_notes_slide:
            return []
        notes_part = self.part.part_related_by(RT.NOTES_SLIDE)
        return [paragraph.get_text(p) for p in notes_part._element.iter(qn("a:p"))]

    def get_picture_titles(self) -> List[str]:
        """Get the alternative-text titles of the slide pictures, in order."""
        return [str(title) for title in self.element.xpath(".//p:pic/p:nvPicPr/p:cNvPr/@title")]

    def find_tags(self) -> List[str]:
        """Get the distinct tags found in the slide paragraphs, in order."""
        tags: List[str] = []
        for text in self.get_texts():
            for tag in find_tags(text):
                if tag not in tags:
                    tags.append(tag)
        return tags

    def get_tables(self) -> List[TemplateTable]:
        """
        Get the tables of the slide.

        Only graphic frames holding a table and carrying an alternative-text
        title are returned. The handles become stale when a table or a
        column of this slide is removed.

        Returns:
            The tables, in document order.
        """
        tables: List[TemplateTable] = []
        for frame in self.element.iter(qn("p:graphicFrame")):
            if not frame.xpath("./a:graphic/a:graphicData/a:tbl"):
                continue
            title = frame.xpath("./p:nvGraphicFramePr/p:cNvPr/@title")
            if not title:
                continue
            tables.append(TemplateTable(self, frame, len(tables), str(title[0])))
        return tables

    def find_tables(self, tag: str) -> List[TemplateTable]:
        """Get the tables whose title contains the tag."""
        return [table for table in self.get_tables() if tag in table.title]

    def replace_tag(self, tag: Optional[str], new_text: Optional[str],
                    mode: ReplacementType = ReplacementType.GLOBAL) -> int:
        """
        Replace a tag by a text inside the slide.

        Args:
            tag: The literal text to replace, if None or empty nothing is done.
            new_text: The new text, None is replaced by an empty string.
            mode: GLOBAL replaces everywhere, NO_TABLE skips table cells. The
                member value, in any case, is accepted too.

        Returns:
            The number of paragraphs modified.
        """
        if not tag:
            return 0

        mode = ReplacementType(mode)
        changed = 0
        for p in list(self.element.iter(qn("a:p"))):
            if mode is ReplacementType.NO_TABLE and p.xpath("ancestor::a:tbl"):
                continue
            if paragraph.replace_tag(p, tag, new_text):
                changed += 1

        logger.debug(f"{self!r}: {tag!r} replaced in {changed} paragraph(s)")
        return changed

    def replace_tag_cell(self, cell: TableCell, mode: ReplacementType = ReplacementType.GLOBAL) -> int:
        """Replace a tag using a TableCell, its background picture is ignored."""
        return self.replace_tag(cell.tag, cell.new_text, mode)

    def replace_picture(self, tag: Optional[str], new_picture: Union[bytes, bytearray, str, Path, None],
                        content_type: str) -> int:
        """
        Replace the pictures whose title contains a tag.

        Args:
            tag: The tag to look for in the picture titles, if None or empty
                nothing is done.
            new_picture: The new picture content or the path of a picture
                file, if None nothing is done.
            content_type: The picture content type: image/png, image/jpeg...

        Returns:
            The number of pictures replaced.

        Raises:
            UnsupportedImageFormatError: If the content type is not supported.
        """
        if not tag or new_picture is None:
            return 0

        images.image_format_for(content_type)
        if isinstance(new_picture, (str, Path)):
            new_picture = Path(new_picture).read_bytes()

        blips = []
        for pic in self.element.iter(qn("p:pic")):
            title = pic.xpath("./p:nvPicPr/p:cNvPr/@title")
            if title and tag in title[0]:
                blips.extend(pic.xpath("./p:blipFill/a:blip"))

        if not blips:
            logger.debug(f"{self!r}: no picture titled with {tag!r}")
            return 0

        rId = images.add_image(self.part, new_picture, content_type)
        for blip in blips:
            blip.set(qn("r:embed"), rId)

        logger.debug(f"{self!r}: {len(blips)} picture(s) titled with {tag!r} now use {rId}")
        return len(blips)

    def clone(self) -> "TemplateSlide":
        """
        Clone the slide.

        The copy shares the slide layout, images, charts and media of this
        slide, the notes slide is not copied. The clone belongs to the
        presentation but is not in the slide list, see insert_after().

        Returns:
            The new slide.
        """
        source = self.part
        package = source.package
        clone_part = SlidePart.load(
            partname=package.next_partname("/ppt/slides/slide%d.xml"),
            content_type=CT.PML_SLIDE,
            package=package,
            blob=source.blob,
        )

        rIds = {}
        for rId, rel in source.rels.items():
            if rel.reltype == RT.NOTES_SLIDE:
                continue
            if rel.is_external:
                rIds[rId] = clone_part.relate_to(rel.target_ref, rel.reltype, is_external=True)
            else:
                rIds[rId] = clone_part.relate_to(rel.target_part, rel.reltype)

        for el in clone_part.slide.element.iter():
            for name, value in el.attrib.items():
                if name.startswith(_R_NAMESPACE) and value in rIds:
                    el.set(name, rIds[value])

        self.presentation_part.relate_to(clone_part, RT.SLIDE)
        clone = TemplateSlide(self.document, clone_part)
        logger.debug(f"Cloned {self!r} to {clone!r}")
        return clone

    @staticmethod
    def insert_after(new_slide: "TemplateSlide", after_slide: "TemplateSlide") -> None:
        """
        Insert a slide in the slide list, right after another one.

        Args:
            new_slide: The slide to insert, usually a clone.
            after_slide: A slide of the same document, in the slide list.

        Raises:
            InvalidOperationError: If the slides belong to different
                documents, if after_slide is not in the slide list or if
                new_slide already is.
        """
        if new_slide.document is not after_slide.document:
            raise InvalidOperationError("Cannot insert a slide after a slide of another document")

        sldIdLst = after_slide.document.presentation.element.get_or_add_sldIdLst()
        in_list = {sldId.rId: sldId for sldId in sldIdLst.sldId_lst}

        after_rId = after_slide._presentation_rId()
        if after_rId is None or after_rId not in in_list:
            raise InvalidOperationError(f"{after_slide!r} is not in the slide list")

        new_rId = new_slide._presentation_rId()
        if new_rId in in_list:
            raise InvalidOperationError(f"{new_slide!r} is already in the slide list")
        if new_rId is None:
            new_rId = new_slide.presentation_part.relate_to(new_slide.part, RT.SLIDE)

        sldId = OxmlElement("p:sldId")
        sldId.set("id", str(max((sldId.id for sldId in sldIdLst.sldId_lst), default=255) + 1))
        sldId.set(qn("r:id"), new_rId)
        in_list[after_rId].addnext(sldId)

        new_slide.document._removed_parts.discard(new_slide.part)
        logger.debug(f"Inserted {new_slide!r} after {after_slide!r}")

    def remove(self) -> None:
        """
        Remove the slide from the presentation.

        The slide is no longer saved and its table handles become stale.
        Removing a slide twice does nothing.
        """
        if self.is_removed:
            return

        rId = self._presentation_rId()
        if rId is not None:
            sldIdLst = self.document.presentation.element.sldIdLst
            if sldIdLst is not None:
                for sldId in sldIdLst.sldId_lst:
                    if sldId.rId == rId:
                        sldIdLst.remove(sldId)
                        break
            self.presentation_part.drop_rel(rId)

        self.document._removed_parts.add(self.part)
        self._bump_generation()
        logger.debug(f"Removed {self!r}")
