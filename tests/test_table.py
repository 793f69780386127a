import pytest

from dsv_normalizer.errors import InvalidColumnError
from dsv_normalizer.export import export_filename, to_csv
from dsv_normalizer.models import ParsedData
from dsv_normalizer.parser import parse
from dsv_normalizer.table import copy_cells, search_rows, sort_rows


@pytest.fixture
def people():
    return parse("Name,City\nJohn,London\nalice,Paris\nBob,Berlin\nAnna,london", ",", True)


def test_search_is_case_insensitive_by_default(people):
    assert search_rows(people, "LONDON") == [0, 3]


def test_search_case_sensitive(people):
    assert search_rows(people, "London", case_sensitive=True) == [0]


def test_search_blank_query(people):
    assert search_rows(people, "") == []
    assert search_rows(people, "   ") == []


def test_sort_ascending_returns_new_instance(people):
    ordered = sort_rows(people, 0)

    assert [row[0] for row in ordered.rows] == ["Anna", "Bob", "John", "alice"]
    assert [row[0] for row in people.rows] == ["John", "alice", "Bob", "Anna"]
    assert ordered.headers == people.headers
    assert ordered.row_count == people.row_count


def test_sort_descending(people):
    ordered = sort_rows(people, 1, ascending=False)
    assert [row[1] for row in ordered.rows] == ["london", "Paris", "London", "Berlin"]


def test_sort_is_stable():
    data = parse("k,v\nb,1\na,2\nb,3\na,4", ",", True)
    assert [row[1] for row in sort_rows(data, 0).rows] == ["2", "4", "1", "3"]


def test_sort_column_out_of_range(people):
    with pytest.raises(InvalidColumnError):
        sort_rows(people, 2)
    with pytest.raises(InvalidColumnError):
        sort_rows(people, -1)


def test_copy_cells(people):
    assert copy_cells(people, [0, 2], [1, 0]) == "London\tJohn\nBerlin\tBob"


def test_copy_cells_empty_selection(people):
    assert copy_cells(people, [], [0]) == ""
    assert copy_cells(people, [0], []) == ""


def test_to_csv_quotes_when_needed():
    data = parse('a;b\n"x, y";"say ""hi"""\n"multi\nline";plain', ";", True)

    assert to_csv(data) == (
        "a,b\n"
        '"x, y","say ""hi"""\n'
        '"multi\nline",plain\n'
    )


def test_to_csv_without_header_uses_synthesized_names():
    data = parse("1,2", ",", False)
    assert to_csv(data) == "Column 1,Column 2\n1,2\n"


def test_to_csv_empty():
    assert to_csv(ParsedData.empty()) == ""


def test_exported_csv_parses_back_to_same_table():
    data = parse('Name\tNote\nJohn\t"a, b"\nJane\t"He said ""hi"""', "\t", True)
    assert parse(to_csv(data), ",", True) == data


@pytest.mark.parametrize(
    "name, expected",
    [
        ("people.tsv", "people_export.csv"),
        ("dir/report.data.dsv", "report.data_export.csv"),
        (None, "data_export.csv"),
    ],
)
def test_export_filename(name, expected):
    assert export_filename(name) == expected
