"""Core secrets management functionality.

Every operation reads the whole store; set and delete write the whole
store back.
"""

import logging
import time
from pathlib import Path
from typing import Iterable, Optional, Union

from . import store
from .errors import (
    DecodeError,
    EmptyValueError,
    FormatError,
    SecretsError,
    StoreIOError,
)
from .records import Record

__all__ = [
    "DecodeError",
    "EmptyValueError",
    "FormatError",
    "SecretsError",
    "StoreIOError",
    "to_bytes",
    "set_secret",
    "delete_secret",
    "get_secret",
    "list_secrets",
    "dump_secrets",
    "format_date",
    "format_listing",
]

logger = logging.getLogger(__name__)

BytesLike = Union[str, bytes]


def to_bytes(data: BytesLike) -> bytes:
    """
    Coerce a key or value to bytes.

    str is encoded as UTF-8 with surrogateescape, so command-line
    arguments that weren't valid UTF-8 come back as their original bytes.
    """
    if isinstance(data, str):
        return data.encode("utf-8", "surrogateescape")
    return bytes(data)


def set_secret(
    secrets_file: Path,
    key: BytesLike,
    value: BytesLike,
    now: Optional[int] = None,
    interactive: bool = False,
) -> Record:
    """
    Store ``value`` under ``key``, replacing any previous entry.

    The new record always goes to the end of the file. ``interactive``
    marks a value typed at the prompt, which must not be empty.
    """
    key, value = to_bytes(key), to_bytes(value)
    if interactive and not value:
        raise EmptyValueError("cowardly refusing to set an empty value")

    stamp = int(time.time()) if now is None else int(now)
    record = Record(key=key, timestamp=stamp, value=value)

    lines = store.read_lines(secrets_file)
    records = store.exclude(store.iter_records(lines), key)
    records.append(record)
    store.write_all(secrets_file, records)

    logger.info("Stored secret in %s (%d records)", secrets_file, len(records))
    return record


def delete_secret(secrets_file: Path, key: BytesLike) -> None:
    """Delete a secret. Deleting a key that isn't stored is not an error."""
    lines = store.read_lines(secrets_file)
    records = store.exclude(store.iter_records(lines), to_bytes(key))
    store.write_all(secrets_file, records)

    logger.info("Rewrote %s (%d records)", secrets_file, len(records))


def get_secret(secrets_file: Path, key: BytesLike) -> Optional[bytes]:
    """Get a secret value, or None if the key isn't stored."""
    lines = store.read_lines(secrets_file)
    match = store.find(store.iter_records(lines), to_bytes(key))
    return match.value if match else None


def list_secrets(secrets_file: Path) -> list[Record]:
    """All records sorted by key."""
    return store.sort_by_key(store.read_all(secrets_file))


def dump_secrets(secrets_file: Path) -> bytes:
    """Raw store file contents."""
    return store.read_raw(secrets_file)


def format_date(timestamp: int, date_format: str) -> str:
    """Render a timestamp in local time."""
    return time.strftime(date_format, time.localtime(timestamp))


def format_listing(
    records: Iterable[Record], list_format: str, date_format: str
) -> list[str]:
    """
    Render one row per record through the printf-style ``list_format``.

    The template receives the decoded key and the formatted date.
    """
    rows = []
    for record in records:
        key = record.key.decode("utf-8", "replace")
        date = format_date(record.timestamp, date_format)
        try:
            rows.append(list_format % (key, date))
        except (TypeError, ValueError) as e:
            raise FormatError(f"Invalid list format {list_format!r}: {e}") from e
    return rows
