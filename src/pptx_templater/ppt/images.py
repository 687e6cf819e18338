"""
Image registration for pptx_templater.

Maps the supported picture content types to the image parts stored in the
package and adds images to a slide, re-using an identical image already
related to that slide.
"""
import hashlib
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.parts.image import ImagePart

from pptx_templater.core.errors import UnsupportedImageFormatError

logger = logging.getLogger(__name__)


class ImageFormat(Enum):
    """Image formats a picture can be replaced with."""

    BMP = ("image/bmp", "bmp")
    EMF = ("image/x-emf", "emf")
    GIF = ("image/gif", "gif")
    ICON = ("image/x-icon", "ico")
    JPEG = ("image/jpeg", "jpeg")
    PCX = ("image/x-pcx", "pcx")
    PNG = ("image/png", "png")
    TIFF = ("image/tiff", "tiff")
    WMF = ("image/x-wmf", "wmf")

    def __init__(self, part_content_type: str, extension: str):
        self.part_content_type = part_content_type
        self.extension = extension


# Content types accepted from callers, anything else is rejected
CONTENT_TYPE_MAP = {
    "image/bmp": ImageFormat.BMP,
    "image/emf": ImageFormat.EMF,
    "image/gif": ImageFormat.GIF,
    "image/ico": ImageFormat.ICON,
    "image/jpeg": ImageFormat.JPEG,
    "image/pcx": ImageFormat.PCX,
    "image/png": ImageFormat.PNG,
    "image/tiff": ImageFormat.TIFF,
    "image/wmf": ImageFormat.WMF,
}

# File extensions of the supported pictures
EXTENSION_MAP = {
    ".bmp": "image/bmp",
    ".emf": "image/emf",
    ".gif": "image/gif",
    ".ico": "image/ico",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".pcx": "image/pcx",
    ".png": "image/png",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".wmf": "image/wmf",
}


def guess_content_type(path: Union[str, Path]) -> Optional[str]:
    """Guess the picture content type from a file extension, None if unknown."""
    return EXTENSION_MAP.get(Path(path).suffix.lower())


def image_format_for(content_type: Optional[str]) -> ImageFormat:
    """
    Get the image format of a content type.

    Args:
        content_type: The picture content type: image/png, image/jpeg...

    Returns:
        The matching ImageFormat.

    Raises:
        UnsupportedImageFormatError: If the content type is not in the table.
    """
    try:
        return CONTENT_TYPE_MAP[content_type]
    except KeyError:
        raise UnsupportedImageFormatError(content_type) from None


def add_image(slide_part, picture: Union[bytes, bytearray], content_type: str) -> str:
    """
    Add a picture to a slide so it can be referenced by relationship id.

    The bytes are copied. If the slide is already related to an image with
    the same content, that relationship is returned instead of adding a new
    part.

    Args:
        slide_part: The python-pptx SlidePart receiving the image.
        picture: The picture content.
        content_type: The picture content type: image/png, image/jpeg...

    Returns:
        The relationship id of the image, e.g. "rId4".

    Raises:
        UnsupportedImageFormatError: If the content type is not supported.
    """
    image_format = image_format_for(content_type)
    blob = bytes(picture)
    sha1 = hashlib.sha1(blob).hexdigest()

    for rId, rel in slide_part.rels.items():
        if rel.is_external or rel.reltype != RT.IMAGE:
            continue
        target = rel.target_part
        if (isinstance(target, ImagePart)
                and target.content_type == image_format.part_content_type
                and target.sha1 == sha1):
            logger.debug(f"Re-using image {target.partname} ({rId})")
            return rId

    package = slide_part.package
    partname = package.next_image_partname(image_format.extension)
    image_part = ImagePart.load(
        partname=partname,
        content_type=image_format.part_content_type,
        package=package,
        blob=blob,
    )
    rId = slide_part.relate_to(image_part, RT.IMAGE)
    logger.debug(f"Added image {partname} ({len(blob)} bytes) as {rId}")
    return rId
