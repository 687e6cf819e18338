"""
Unit tests for the table model in pptx_templater.
"""
import pytest
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.oxml.ns import qn
from pptx.table import _Cell

from deck_factory import (
    MULTI,
    PEOPLE_CAPACITY,
    PEOPLE_HEADER,
    PEOPLE_TAGS,
    TEAM,
    data_rows,
    make_png,
    people_rows,
)
from pptx_templater.core.errors import StaleTableError, UnsupportedImageFormatError
from pptx_templater.ppt.table import BackgroundPicture, TableCell, TagBinding


@pytest.fixture
def people(document):
    return document.get_slide(TEAM).find_tables("{{people}}")[0]


def _cell_tcs(table, row):
    return table._tbl.tr_lst[row].tc_lst


def _set_cell_text(tc, text):
    _Cell(tc, None).text = text


class TestTableStructure:

    def test_column_titles(self, people):
        assert people.column_titles() == PEOPLE_HEADER

    def test_column_titles_join_paragraphs_with_a_space(self, people):
        tc = _cell_tcs(people, 0)[0]
        _Cell(tc, None).text_frame.add_paragraph().text = "(full)"
        assert people.column_titles()[0] == "Name (full)"

    def test_counts(self, people):
        assert people.columns_count() == 5
        assert people.rows_count() == PEOPLE_CAPACITY + 1
        assert people.capacity() == PEOPLE_CAPACITY
        assert people.cells_count() == 30

    def test_title_and_index(self, document):
        tables = document.get_slide(MULTI).get_tables()
        assert [(t.index, t.title) for t in tables] == [(0, "{{table1}}"), (1, "{{table2}}"), (2, "{{table3}}")]


class TestRemoveColumns:

    def test_remove_columns(self, people):
        width = int(people._frame.xpath("./p:xfrm/a:ext")[0].get("cx"))
        column_width = int(people._tbl.tblGrid.gridCol_lst[0].get("w"))

        people.remove_columns([1, 3])

        assert people.column_titles() == ["Name", "City", "Phone"]
        assert people.columns_count() == 3
        assert people.cells_count() == 18
        assert len(people._tbl.tblGrid.gridCol_lst) == 3
        assert all(len(tr.tc_lst) == 3 for tr in people._tbl.tr_lst)
        assert int(people._frame.xpath("./p:xfrm/a:ext")[0].get("cx")) == width - 2 * column_width

    def test_order_and_duplicates_do_not_matter(self, people):
        people.remove_columns([3, 1, 3])
        assert people.column_titles() == ["Name", "City", "Phone"]

    def test_out_of_range_indices_are_ignored(self, people):
        people.remove_columns([-1, 5, 42])
        assert people.columns_count() == 5

    def test_remove_every_column(self, document, people):
        people.remove_columns(range(5))
        assert people.columns_count() == 0
        assert people.cells_count() == 0
        assert document.get_slide(TEAM).find_tables("{{people}}")

    def test_other_handles_become_stale(self, document):
        slide = document.get_slide(MULTI)
        first = slide.get_tables()
        second = slide.get_tables()

        first[0].remove_columns([0])

        assert first[0].columns_count() == 1
        with pytest.raises(StaleTableError):
            second[0].columns_count()
        with pytest.raises(StaleTableError):
            first[1].column_titles()
        assert slide.get_tables()[1].columns_count() == 2


class TestSetRows:

    def test_fills_template_rows_in_order(self, people):
        result = people.set_rows(people_rows(2), prune_unused=False)

        assert result.consumed == 2
        assert result.remainder == []
        rows = data_rows(people)
        assert rows[0] == ["name 0", "role 0", "city 0", "country 0", "phone 0"]
        assert rows[1] == ["name 1", "role 1", "city 1", "country 1", "phone 1"]
        assert rows[2] == PEOPLE_TAGS

    def test_prunes_unused_template_rows(self, people):
        people.set_rows(people_rows(2))
        assert people.rows_count() == 3
        assert people.column_titles() == PEOPLE_HEADER

    def test_remainder_when_capacity_exhausted(self, people):
        rows = people_rows(7)
        result = people.set_rows(rows)

        assert result.consumed == PEOPLE_CAPACITY
        assert result.remainder == rows[PEOPLE_CAPACITY:]
        assert len(rows) == 7
        assert data_rows(people)[-1][0] == "name 4"

    def test_no_rows(self, people):
        result = people.set_rows([])
        assert result.consumed == 0
        assert people.rows_count() == 1

    def test_unbound_and_missing_tags(self, people):
        row = [TableCell("{{name}}", "Bill"), TableCell("{{unknown}}", "ignored")]
        people.set_rows([row], prune_unused=False)
        assert data_rows(people)[0] == ["Bill", "{{role}}", "{{city}}", "{{country}}", "{{phone}}"]

    def test_none_text_empties_the_cell(self, people):
        people.set_rows([[TableCell("{{name}}", None)]])
        assert data_rows(people)[0][0] == ""

    def test_background_picture(self, document, people):
        picture = make_png((0, 255, 0))
        background = BackgroundPicture(picture, "image/png", top=1, right=2, bottom=3, left=4)
        rows = [[TableCell("{{name}}", "a", background)], [TableCell("{{name}}", "b", background)]]

        people.set_rows(rows)

        slide_part = document.get_slide(TEAM).part
        embeds = []
        for row in (1, 2):
            tcPr = _cell_tcs(people, row)[0].tcPr
            blip_fill = tcPr.find(qn("a:blipFill"))
            embeds.append(blip_fill.find(qn("a:blip")).get(qn("r:embed")))
            fill_rect = blip_fill.find(qn("a:stretch")).find(qn("a:fillRect"))
            assert [fill_rect.get(side) for side in "trbl"] == ["1", "2", "3", "4"]
        assert embeds[0] == embeds[1]
        rel = slide_part.rels[embeds[0]]
        assert rel.reltype == RT.IMAGE
        assert rel.target_part.blob == picture

    def test_background_picture_replaces_existing_fill(self, people, png_bytes):
        tc = _cell_tcs(people, 1)[0]
        tcPr = tc.get_or_add_tcPr()
        tcPr.append(tcPr.makeelement(qn("a:solidFill"), {}))

        people.set_rows([[TableCell("{{name}}", "a", BackgroundPicture(png_bytes, "image/png"))]])

        assert tcPr.find(qn("a:solidFill")) is None
        assert len(tcPr.findall(qn("a:blipFill"))) == 1

    def test_background_picture_with_unsupported_type(self, people, png_bytes):
        with pytest.raises(UnsupportedImageFormatError):
            people.set_rows([[TableCell("{{name}}", "a", BackgroundPicture(png_bytes, "image/svg+xml"))]])


class TestTagBinding:

    def test_binds_every_column_of_a_tag(self, people):
        tr = people._tbl.tr_lst[1]
        _set_cell_text(tr.tc_lst[2], "{{name}} again")

        binding = TagBinding.from_row(tr)

        assert binding["{{name}}"] == [0, 2]
        assert binding["{{role}}"] == [1]
        assert "{{city}}" not in binding
        assert len(binding) == 4

    def test_tag_repeated_in_a_row_is_replaced_everywhere(self, people):
        _set_cell_text(_cell_tcs(people, 1)[2], "{{name}} again")
        people.set_rows([[TableCell("{{name}}", "Bill")]], prune_unused=False)
        assert data_rows(people)[0][:3] == ["Bill", "{{role}}", "Bill again"]

    def test_bound_before_replacement(self, people):
        row = [TableCell("{{name}}", "{{role}}"), TableCell("{{role}}", "Boss")]
        people.set_rows([row], prune_unused=False)
        assert data_rows(people)[0][:2] == ["{{role}}", "Boss"]


class TestRemoveTable:

    def test_remove(self, document):
        slide = document.get_slide(MULTI)
        tables = slide.get_tables()

        tables[1].remove()

        assert [t.title for t in slide.get_tables()] == ["{{table1}}", "{{table3}}"]
        with pytest.raises(StaleTableError):
            tables[1].column_titles()
        with pytest.raises(StaleTableError):
            tables[2].column_titles()
