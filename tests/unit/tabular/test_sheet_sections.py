"""Unit tests for walldash.tabular.sheet_sections."""

from datetime import date

import pytest
from pydantic import ValidationError

from walldash.models import SheetSection
from walldash.tabular.sheet_sections import (
    extract_sections,
    find_header,
    is_section_header,
    is_service_overdue,
    latest_entry,
    recent_history,
    service_status,
    sort_rows_newest_first,
)

pytestmark = pytest.mark.unit


class TestExtractSections:
    """Tests for extract_sections."""

    def test_two_sections_with_one_row_each(self):
        text = "Car A,Oil,Tires\n1/1/24,Done,\nCar B,Oil\n2/2/24,Done\n"

        sections = extract_sections(text)

        assert [section.title for section in sections] == ["Car A", "Car B"]
        assert sections[0].headers == ("Oil", "Tires")
        assert sections[0].rows == (("1/1/24", "Done", ""),)
        assert sections[1].headers == ("Oil",)
        assert sections[1].rows == (("2/2/24", "Done"),)

    def test_rows_sorted_newest_first(self):
        text = "Car A,Oil\n1/1/24,Done\n3/1/24,Done\n2/1/24,Done\n"

        sections = extract_sections(text)

        assert [row[0] for row in sections[0].rows] == ["3/1/24", "2/1/24", "1/1/24"]

    def test_maintenance_sheet(self, maintenance_csv):
        subaru, honda = extract_sections(maintenance_csv)

        assert subaru.title == "Subaru Outback"
        assert subaru.headers == ("Oil Change", "Tire Rotation", "Notes")
        assert [row[0] for row in subaru.rows] == ["7/20/24", "3/2/24", "1/15/24"]
        assert subaru.rows[1] == ("3/2/24", "", "Done", "Costco, Folsom")
        assert honda.title == "Honda Fit"

    def test_undated_rows_sort_last(self, maintenance_csv):
        honda = extract_sections(maintenance_csv)[1]

        assert [row[0] for row in honda.rows] == ["2/14/2024", "11/3/2023", "TBD"]

    def test_partial_dates_sort_with_undated_rows(self):
        text = "Car A,Oil,Tires\n1/1/20,Done,\nOct,,Done\n3/5/21,Done,\n"

        section = extract_sections(text)[0]

        assert [row[0] for row in section.rows] == ["3/5/21", "1/1/20", "Oct"]

    def test_cells_are_trimmed(self):
        text = " Car A , Oil \n 1/1/24 , Done \n"

        section = extract_sections(text)[0]

        assert section.title == "Car A"
        assert section.headers == ("Oil",)
        assert section.rows == (("1/1/24", "Done"),)

    def test_empty_header_cells_are_dropped(self):
        section = extract_sections("Car A,Oil,,Tires,,\n")[0]

        assert section.headers == ("Oil", "Tires")

    def test_rows_before_first_header_are_discarded(self):
        sections = extract_sections("1/1/24,Done\n5/5/24,\nCar A,Oil\n")

        assert len(sections) == 1
        assert sections[0].rows == ()

    def test_blank_rows_are_ignored(self):
        sections = extract_sections("Car A,Oil\n\n , \n1/1/24,Done\n")

        assert sections[0].rows == (("1/1/24", "Done"),)

    def test_single_cell_row_is_data(self):
        sections = extract_sections("Car A,Oil\nNotes\n")

        assert sections[0].rows == (("Notes",),)

    @pytest.mark.parametrize("text", ["", "\n\n", '"unterminated', "just,\n,some\n"])
    def test_never_raises_on_malformed_input(self, text):
        assert isinstance(extract_sections(text), list)

    def test_sections_are_immutable(self):
        section = extract_sections("Car A,Oil\n1/1/24,Done\n")[0]

        with pytest.raises(ValidationError):
            section.title = "Other"


class TestRowClassification:
    """Tests for is_section_header and sort_rows_newest_first."""

    @pytest.mark.parametrize(
        "row",
        [["Car A", "Oil"], ["Car A", "Oil", ""], ["", "Oil"]],
    )
    def test_header_rows(self, row):
        assert is_section_header(row)

    @pytest.mark.parametrize(
        "row",
        [["1/1/24", "Done"], ["12/31/2024", "Done"], ["Car A"], ["Car A", " "], []],
    )
    def test_non_header_rows(self, row):
        assert not is_section_header(row)

    def test_equal_dates_keep_source_order(self):
        rows = [["1/1/24", "first"], ["1/1/24", "second"], ["2/1/24", "newest"]]

        assert [row[1] for row in sort_rows_newest_first(rows)] == ["newest", "first", "second"]


class TestMaintenanceHelpers:
    """Tests for the service tracking helpers."""

    @pytest.fixture
    def sections(self, maintenance_csv) -> list[SheetSection]:
        return extract_sections(maintenance_csv)

    def test_find_header_is_case_insensitive(self, sections):
        assert find_header(sections[0], "OIL") == 0
        assert find_header(sections[0], "tire") == 1
        assert find_header(sections[0], "wipers") is None

    def test_latest_entry_uses_newest_filled_cell(self, sections):
        assert latest_entry(sections[0], "oil")[0] == "7/20/24"
        assert latest_entry(sections[1], "oil")[0] == "11/3/2023"
        assert latest_entry(sections[1], "brakes")[0] == "2/14/2024"

    def test_latest_entry_without_matching_header(self, sections):
        assert latest_entry(sections[1], "wipers") is None

    def test_service_overdue_after_interval(self):
        assert is_service_overdue("7/20/24", today=date(2025, 2, 1))

    def test_service_not_overdue_within_interval(self):
        assert not is_service_overdue("7/20/24", today=date(2024, 12, 1))

    def test_custom_interval(self):
        assert is_service_overdue("7/20/24", today=date(2024, 12, 1), months=3)

    def test_unparseable_date_is_never_overdue(self):
        assert not is_service_overdue("TBD", today=date(2030, 1, 1))

    def test_partial_date_is_never_overdue(self):
        assert not is_service_overdue("Oct", today=date(2030, 1, 1))

    def test_recent_history(self, sections):
        history = recent_history(sections[0], limit=2)

        assert history == [
            {"date": "7/20/24", "details": ["Done", "Done", ""]},
            {"date": "3/2/24", "details": ["", "Done", "Costco, Folsom"]},
        ]

    def test_service_status_flags_overdue_oil_change(self, sections):
        status = service_status(sections[1], "oil", today=date(2024, 6, 1))

        assert status.title == "Honda Fit"
        assert status.tracked is True
        assert status.last_service == "11/3/2023"
        assert status.overdue is True
        assert status.history[0].date == "2/14/2024"
        assert status.history[0].details == ("", "Pads")

    def test_service_status_honours_interval(self, sections):
        status = service_status(sections[1], "oil", today=date(2024, 6, 1), months=12)

        assert status.overdue is False

    def test_service_status_for_untracked_service(self, sections):
        status = service_status(sections[1], "tire", today=date(2030, 1, 1))

        assert status.tracked is False
        assert status.last_service is None
        assert status.overdue is False
