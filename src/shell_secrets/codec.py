"""Token codec for store fields.

Two independent layers:

- percent-encoding turns arbitrary bytes into a token drawn from
  ``[A-Za-z0-9._~-]`` plus ``%XX`` escapes
- shell quoting wraps a token so a whole line can be split back into
  fields the way a POSIX shell would split it
"""

import re
import shlex
from urllib.parse import quote_from_bytes, unquote_to_bytes

from .errors import DecodeError

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode(data: bytes) -> str:
    """Percent-encode every byte outside the unreserved set."""
    # safe="" so '/' is escaped too; '~' is unreserved since Python 3.7
    return quote_from_bytes(data, safe="")


def decode(token: str) -> bytes:
    """
    Reverse encode().

    '+' decodes to a space for compatibility with form-encoded input.
    encode() never emits a literal '+', so its own output is unaffected.
    """
    match = _BAD_ESCAPE.search(token)
    if match:
        raise DecodeError(f"Malformed escape at offset {match.start()}: {token!r}")
    return unquote_to_bytes(token.replace("+", " "))


def shell_quote(token: str) -> str:
    """Quote a token as one shell word. Empty tokens become ''."""
    return shlex.quote(token)


def shell_split(line: str) -> list[str]:
    """Split a line into words, removing one layer of shell quoting."""
    try:
        return shlex.split(line)
    except ValueError as e:
        raise DecodeError(f"Unbalanced quoting: {e}") from e
