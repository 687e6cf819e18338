"""
Unit tests for image registration in pptx_templater.
"""
import pytest
from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from deck_factory import TEAM, make_png
from pptx_templater.core.errors import UnsupportedImageFormatError
from pptx_templater.ppt.images import CONTENT_TYPE_MAP, ImageFormat, add_image, guess_content_type, image_format_for


class TestContentTypes:

    @pytest.mark.parametrize("content_type", [
        "image/bmp", "image/emf", "image/gif", "image/ico", "image/jpeg",
        "image/pcx", "image/png", "image/tiff", "image/wmf",
    ])
    def test_supported(self, content_type):
        assert isinstance(image_format_for(content_type), ImageFormat)

    @pytest.mark.parametrize("content_type", ["image/svg+xml", "image/jpg", "text/plain", "", None])
    def test_unsupported(self, content_type):
        with pytest.raises(UnsupportedImageFormatError):
            image_format_for(content_type)

    def test_table_is_fixed(self):
        assert len(CONTENT_TYPE_MAP) == 9

    @pytest.mark.parametrize("name, expected", [
        ("logo.png", "image/png"),
        ("photo.JPG", "image/jpeg"),
        ("scan.tif", "image/tiff"),
        ("drawing.svg", None),
        ("no_extension", None),
    ])
    def test_guess_content_type(self, name, expected):
        assert guess_content_type(name) == expected


class TestAddImage:

    def test_add_image(self, document):
        slide_part = document.get_slide(TEAM).part
        picture = make_png((1, 2, 3))

        rId = add_image(slide_part, picture, "image/png")

        rel = slide_part.rels[rId]
        assert rel.reltype == RT.IMAGE
        assert rel.target_part.content_type == "image/png"
        assert rel.target_part.partname.ext == "png"
        assert rel.target_part.blob == picture

    def test_identical_image_is_reused(self, document):
        slide_part = document.get_slide(TEAM).part
        picture = make_png((1, 2, 3))
        assert add_image(slide_part, picture, "image/png") == add_image(slide_part, bytearray(picture), "image/png")

    def test_different_images_get_different_parts(self, document):
        slide_part = document.get_slide(TEAM).part
        first = add_image(slide_part, make_png((1, 2, 3)), "image/png")
        second = add_image(slide_part, make_png((3, 2, 1)), "image/png")
        assert first != second
        assert slide_part.rels[first].target_part.partname != slide_part.rels[second].target_part.partname

    def test_jpeg_part_extension(self, document):
        slide_part = document.get_slide(TEAM).part
        rId = add_image(slide_part, b"not checked", "image/jpeg")
        assert slide_part.rels[rId].target_part.partname.ext == "jpeg"
