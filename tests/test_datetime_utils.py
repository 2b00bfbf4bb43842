"""Tests for date cell parsing and weekday names."""

from datetime import date

import pytest

from utils.datetime_utils import (
    IsoString,
    SerialNumber,
    Unparseable,
    cell_to_date,
    cell_to_date_key,
    classify_date_cell,
    date_to_serial,
    weekday_name,
)


def test_classify_date_cell_variants():
    assert classify_date_cell("2024-03-01") == IsoString("2024-03-01")
    assert classify_date_cell(45352) == SerialNumber(45352.0)
    assert classify_date_cell("45352") == SerialNumber(45352.0)
    assert isinstance(classify_date_cell("1 marca"), Unparseable)
    assert isinstance(classify_date_cell(None), Unparseable)
    assert isinstance(classify_date_cell(True), Unparseable)


def test_serial_numbers_use_the_spreadsheet_epoch():
    assert cell_to_date(25569) == date(1970, 1, 1)
    assert cell_to_date(45352) == date(2024, 3, 1)
    assert cell_to_date(45352.75) == date(2024, 3, 1)
    assert date_to_serial(date(2024, 3, 1)) == 45352


def test_iso_and_serial_give_the_same_key():
    assert cell_to_date_key("2024-03-01") == cell_to_date_key(45352) == "2024-03-01"


@pytest.mark.parametrize("raw", ["", "abc", "2024-13-45", float("nan"), 0, -5, 1e20, [], None])
def test_unusable_cells_give_none(raw):
    assert cell_to_date_key(raw) is None


def test_weekday_names_are_polish():
    assert weekday_name("2024-03-01") == "piątek"
    assert weekday_name(date(2024, 3, 4)) == "poniedziałek"
    assert weekday_name("2024-03-03") == "niedziela"
