"""Reading, filtering and rewriting the store file."""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .errors import DecodeError, StoreIOError
from .records import Record, format_line, parse_line

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


def _ensure_exists(path: Path) -> None:
    """Create an empty store file if there isn't one yet."""
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(mode=FILE_MODE)
    logger.debug("Created empty store %s", path)


def read_raw(path: Path) -> bytes:
    """Return the store file contents exactly as they are on disk."""
    try:
        _ensure_exists(path)
        return path.read_bytes()
    except OSError as e:
        raise StoreIOError(f"Cannot read {path}: {e.strerror or e}") from e


def read_lines(path: Path) -> list[str]:
    """Return the store's lines without their terminators."""
    try:
        text = read_raw(path).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Store {path} is not valid UTF-8: {e}") from e

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def iter_records(lines: Iterable[str]) -> Iterator[Optional[Record]]:
    """Parse lines lazily. Blank lines come out as None."""
    for lineno, line in enumerate(lines, start=1):
        yield parse_line(line, lineno)


def read_all(path: Path) -> list[Record]:
    """Load every record in file order. A missing store is empty."""
    records = [r for r in iter_records(read_lines(path)) if r is not None]
    logger.debug("Read %d records from %s", len(records), path)
    return records


def write_all(path: Path, records: Iterable[Record]) -> None:
    """
    Replace the store contents with ``records``.

    The new contents go to a sibling temp file which is then renamed
    over the store, so readers see either the old or the new store.
    A symlinked store is rewritten at its target; the link stays.
    """
    temp_file = None
    count = 0
    try:
        target = path.resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        temp_file = target.with_name(target.name + ".tmp")
        fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with open(fd, "w", encoding="utf-8", newline="\n") as f:
            # A leftover temp file keeps its old mode through O_CREAT
            os.fchmod(f.fileno(), FILE_MODE)
            for record in records:
                f.write(format_line(record))
                count += 1
            f.flush()
            os.fsync(f.fileno())

        # Move to final location
        temp_file.replace(target)

    except OSError as e:
        raise StoreIOError(f"Cannot write {path}: {e.strerror or e}") from e

    finally:
        # Clean up temp file if it still exists
        if temp_file is not None and temp_file.exists():
            temp_file.unlink()

    logger.debug("Wrote %d records to %s", count, path)


def find(records: Iterable[Optional[Record]], key: bytes) -> Optional[Record]:
    """First record whose key equals ``key``, or None."""
    for record in records:
        if record is not None and record.key == key:
            return record
    return None


def exclude(records: Iterable[Optional[Record]], key: bytes) -> list[Record]:
    """
    All records whose key differs from ``key``, in their original order.

    Stops at the first blank-line sentinel; anything after it is dropped.
    """
    kept = []
    for record in records:
        if record is None:
            break
        if record.key != key:
            kept.append(record)
    return kept


def sort_by_key(records: Iterable[Record]) -> list[Record]:
    """Records ordered by key, bytewise."""
    return sorted(records, key=lambda record: record.key)
