"""Store line format: one record per line."""

from dataclasses import dataclass
from typing import Optional

from .codec import decode, encode, shell_quote, shell_split
from .errors import DecodeError


@dataclass(frozen=True)
class Record:
    """One secret entry."""

    key: bytes
    timestamp: int
    value: bytes


def format_line(record: Record) -> str:
    """Serialize a record as ``<key> <timestamp> <value>\\n``."""
    fields = (encode(record.key), str(record.timestamp), encode(record.value))
    return " ".join(shell_quote(field) for field in fields) + "\n"


def parse_line(line: str, lineno: Optional[int] = None) -> Optional[Record]:
    """
    Parse one store line.

    Returns None for a blank line, which marks the end of the record
    stream. Anything else that isn't a well-formed record raises
    DecodeError.
    """
    if not line.strip():
        return None

    where = f"line {lineno}" if lineno is not None else "line"
    try:
        fields = shell_split(line)
        if len(fields) != 3:
            raise DecodeError(f"expected 3 fields, found {len(fields)}")
        key, timestamp, value = fields
        try:
            stamp = int(timestamp)
        except ValueError:
            raise DecodeError(f"bad timestamp {timestamp!r}") from None
        return Record(key=decode(key), timestamp=stamp, value=decode(value))
    except DecodeError as e:
        raise DecodeError(f"Corrupt store {where}: {e}") from e
