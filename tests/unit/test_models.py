"""
Unit tests for the fill payload models in pptx_templater.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from pptx_templater.core.models import (
    BackgroundPictureData,
    CellData,
    PictureData,
    SlideData,
    TableData,
    TemplateData,
)
from pptx_templater.ppt.slide import ReplacementType


class TestPictureData:

    def test_content_type_guessed(self):
        picture = PictureData(tag="{{logo}}", path="images/logo.PNG")
        assert picture.content_type == "image/png"
        assert picture.path == Path("images/logo.PNG")

    def test_explicit_content_type(self):
        picture = PictureData(tag="{{logo}}", path="logo.bin", content_type="image/gif")
        assert picture.content_type == "image/gif"

    def test_unknown_extension(self):
        with pytest.raises(ValidationError):
            PictureData(tag="{{logo}}", path="logo.svg")

    def test_unsupported_content_type(self):
        with pytest.raises(ValidationError):
            PictureData(tag="{{logo}}", path="logo.png", content_type="image/svg+xml")


class TestBackgroundPictureData:

    def test_defaults(self):
        background = BackgroundPictureData(path="cell.jpg")
        assert background.content_type == "image/jpeg"
        assert (background.top, background.right, background.bottom, background.left) == (0, 0, 0, 0)


class TestTableData:

    def test_rows_of_cells(self):
        table = TableData(tag="{{people}}", rows=[[{"tag": "{{name}}", "text": "Bill"}]])
        assert table.rows == [[CellData(tag="{{name}}", text="Bill")]]

    def test_rows_as_mappings(self):
        table = TableData(tag="{{people}}", rows=[{"{{name}}": "Bill", "{{role}}": None}])
        assert table.rows == [[CellData(tag="{{name}}", text="Bill"), CellData(tag="{{role}}", text=None)]]

    def test_no_rows(self):
        assert TableData(tag="{{people}}").rows == []


class TestSlideData:

    def test_defaults(self):
        slide = SlideData(index=0)
        assert slide.tags == {}
        assert slide.mode is ReplacementType.GLOBAL
        assert slide.pictures == []
        assert slide.tables == []

    def test_mode_is_case_insensitive(self):
        assert SlideData(index=0, mode="NO_TABLE").mode is ReplacementType.NO_TABLE

    def test_negative_index(self):
        with pytest.raises(ValidationError):
            SlideData(index=-1)

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            SlideData(index=0, mode="everywhere")


class TestTemplateData:

    def test_duplicate_slides(self):
        with pytest.raises(ValidationError):
            TemplateData(slides=[{"index": 1}, {"index": 1}])

    def test_iter_pictures(self):
        data = TemplateData.model_validate({
            "slides": [{
                "index": 0,
                "pictures": [{"tag": "{{logo}}", "path": "logo.png"}],
                "tables": [{
                    "tag": "{{people}}",
                    "rows": [[{"tag": "{{name}}", "text": "Bill", "background": {"path": "bill.jpg"}}]],
                }],
            }]
        })
        assert [p.path for p in data.iter_pictures()] == [Path("logo.png"), Path("bill.jpg")]
