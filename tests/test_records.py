from datetime import datetime, timezone

import pytest

from sp_inventory.core.models import NOBODY
from sp_inventory.core.records import (build_file_record, build_file_records, is_file_item,
                                       parse_timestamp)

from fakes import make_item


def test_missing_checkout_and_sharing_become_nobody():
    record = build_file_record(make_item())

    assert record.checkout_user == NOBODY
    assert record.shared_with == NOBODY


def test_empty_checkout_and_sharing_become_nobody():
    record = build_file_record(make_item(CheckoutUser=None, SharedWithUsers=[]))

    assert record.checkout_user == NOBODY
    assert record.shared_with == NOBODY


def test_provided_checkout_and_sharing_are_kept():
    record = build_file_record(make_item(CheckoutUser="Jane Doe", SharedWithUsers="Ops Team"))

    assert record.checkout_user == "Jane Doe"
    assert record.shared_with == "Ops Team"


def test_user_fields_from_expanded_lookups():
    record = build_file_record(make_item(
        CheckoutUser={"Title": "Jane Doe"},
        SharedWithUsers=[{"Title": "Ana Lopez"}, {"Title": "Sam Reed"}],
    ))

    assert record.checkout_user == "Jane Doe"
    assert record.shared_with == "Ana Lopez; Sam Reed"


def test_shared_users_in_verbose_payload():
    record = build_file_record(make_item(SharedWithUsers={"results": [{"Title": "Ana Lopez"}]}))

    assert record.shared_with == "Ana Lopez"


def test_record_fields():
    record = build_file_record(make_item("Budget 2024.xlsx", File_x0020_Size="1536"),
                               site_url="https://contoso.sharepoint.com/sites/team")

    assert record.leaf_name == "Budget 2024.xlsx"
    assert record.name == "Budget 2024"
    assert record.file_type == "xlsx"
    assert record.size_kb == 1.5
    assert record.created == datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc)
    assert record.created_by == "ana@contoso.com"
    assert record.modified_by == "sam@contoso.com"
    assert record.is_current_version is True
    assert record.checked_out_locally is False
    assert record.url == "/sites/team/Shared Documents/Budget 2024.xlsx"
    assert record.site_url == "https://contoso.sharepoint.com/sites/team"


def test_title_is_used_as_display_name():
    assert build_file_record(make_item(Title="Quarterly budget")).name == "Quarterly budget"


@pytest.mark.parametrize("size_bytes, expected", [(2048, 2.0), (1536, 1.5), (1000, 0.98)])
def test_size_from_file_size_field(size_bytes, expected):
    item = make_item(File_x0020_Size=size_bytes)
    assert build_file_record(item).size_kb == expected


def test_size_from_expanded_file():
    item = make_item(File_x0020_Size=None, File={"Length": "3072"})
    assert build_file_record(item).size_kb == 3.0


def test_missing_size_is_zero():
    assert build_file_record(make_item(File_x0020_Size=None)).size_kb == 0.0


def test_flags_given_as_strings():
    record = build_file_record(make_item(_IsCurrentVersion="false", IsCheckedoutToLocal="true"))

    assert record.is_current_version is False
    assert record.checked_out_locally is True


@pytest.mark.parametrize("leaf_name, expected", [
    ("Report.docx", True),
    ("archive.tar.gz", True),
    (".hidden", True),
    ("Forms", False),
    ("", False),
    (None, False),
])
def test_is_file_item(leaf_name, expected):
    assert is_file_item({"FileLeafRef": leaf_name}) is expected


def test_build_file_records_keeps_only_dotted_names():
    items = [make_item("a.txt"), make_item("Folder"), make_item("b.pdf"), make_item("Forms")]

    records = build_file_records(items, "https://contoso.sharepoint.com")

    assert [r.leaf_name for r in records] == ["a.txt", "b.pdf"]


def test_to_row_formats_values():
    row = build_file_record(make_item()).to_row()

    assert row["FileSize_KB"] == "2.00"
    assert row["CheckoutUser"] == NOBODY
    assert row["Created"] == "2024-01-05 10:00:00"


def test_parse_timestamp():
    assert parse_timestamp("2024-02-01T08:30:00Z") == datetime(2024, 2, 1, 8, 30, tzinfo=timezone.utc)
    assert parse_timestamp(None) is None
    assert parse_timestamp("yesterday") is None
