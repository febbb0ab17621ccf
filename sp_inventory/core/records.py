"""Turns listed library items into FileRecords."""

import logging
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from .models import FileRecord, NOBODY
from ..utils.formatters import bytes_to_kb

logger = logging.getLogger(__name__)


def is_file_item(item: Mapping[str, Any]) -> bool:
    """Folders and plain list entries have no dot in their leaf name."""
    leaf_name = item.get("FileLeafRef")
    return isinstance(leaf_name, str) and "." in leaf_name


def iter_file_items(items: Iterable[Mapping[str, Any]]) -> Iterator[Mapping[str, Any]]:
    """Yield only the items that look like files."""
    for item in items:
        if is_file_item(item):
            yield item
        else:
            logger.debug(f"Skipping non-file item {item.get('FileLeafRef')!r}")


def build_file_record(item: Mapping[str, Any], site_url: str = "") -> FileRecord:
    """Normalize one listed item's field values into a FileRecord.

    Args:
        item: Field values of a document library item, keyed by internal
            field name. User fields may be plain strings or user mappings
            with ``Title``/``EMail`` keys.
        site_url: URL of the site the item was listed from.

    Returns:
        A fully populated FileRecord. Checkout and sharing fields fall back
        to "Nobody" when the item does not carry them.
    """
    leaf_name = item.get("FileLeafRef") or ""

    return FileRecord(
        unique_id=str(item.get("UniqueId") or ""),
        name=item.get("Title") or PurePosixPath(leaf_name).stem,
        leaf_name=leaf_name,
        file_type=item.get("File_x0020_Type") or PurePosixPath(leaf_name).suffix.lstrip("."),
        size_kb=bytes_to_kb(_file_size(item)),
        created=parse_timestamp(item.get("Created")),
        created_by=_user_email(item.get("Author")),
        modified=parse_timestamp(item.get("Modified")),
        modified_by=_user_email(item.get("Editor")),
        checkout_user=_user_display(item.get("CheckoutUser")),
        shared_with=_users_display(item.get("SharedWithUsers")),
        is_current_version=_as_bool(item.get("_IsCurrentVersion", True)),
        checked_out_locally=_as_bool(item.get("IsCheckedoutToLocal", False)),
        url=item.get("FileRef") or "",
        site_url=site_url,
    )


def build_file_records(items: Iterable[Mapping[str, Any]], site_url: str = "") -> List[FileRecord]:
    """Shape every file-like item from one site's listing."""
    return [build_file_record(item, site_url) for item in iter_file_items(items)]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as returned by the REST API."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparsable timestamp {value!r}")
        return None


def _file_size(item: Mapping[str, Any]) -> Any:
    if item.get("File_x0020_Size") is not None:
        return item["File_x0020_Size"]
    file_props = item.get("File")
    if isinstance(file_props, Mapping):
        return file_props.get("Length")
    return item.get("SMTotalFileStreamSize")


def _user_email(user: Any) -> str:
    if isinstance(user, Mapping):
        return user.get("EMail") or user.get("Email") or user.get("Title") or ""
    return str(user) if user else ""


def _user_display(user: Any) -> str:
    if isinstance(user, Mapping):
        return user.get("Title") or user.get("LookupValue") or NOBODY
    return str(user) if user else NOBODY


def _users_display(users: Any) -> str:
    if isinstance(users, Mapping):
        # verbose OData wraps multi-value fields
        users = users.get("results")
    if not users:
        return NOBODY
    if isinstance(users, str):
        return users
    names = [_user_display(u) for u in users]
    names = [n for n in names if n != NOBODY]
    return "; ".join(names) if names else NOBODY


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)
