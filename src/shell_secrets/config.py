"""Configuration for shell-secrets."""

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_COLUMNS = 72
DEFAULT_DATE_FORMAT = "%F %I:%M%p %Z"


def get_default_secrets_file(environ: Mapping[str, str] = None) -> Path:
    """Get default secrets file path."""
    environ = os.environ if environ is None else environ

    env_file = environ.get("SECRETS_PATH")
    if env_file:
        return Path(env_file).expanduser()

    return Path.home() / ".secrets"


def get_columns(environ: Mapping[str, str] = None) -> int:
    """Terminal width: $COLUMNS, then the attached terminal, then 72."""
    environ = os.environ if environ is None else environ

    columns = environ.get("COLUMNS")
    if columns:
        try:
            return int(columns)
        except ValueError:
            pass

    if sys.stdout.isatty():
        return shutil.get_terminal_size((DEFAULT_COLUMNS, 24)).columns

    return DEFAULT_COLUMNS


def get_list_format(columns: int, environ: Mapping[str, str] = None) -> str:
    """Row template for 'list': key padded to fill the line, then the date."""
    environ = os.environ if environ is None else environ
    return environ.get("SECRETS_LIST_FORMAT") or f"%-{max(columns - 26, 0)}s | %s"


@dataclass(frozen=True)
class Config:
    """Settings handed to the store operations."""

    secrets_path: Path
    list_format: str
    date_format: str = DEFAULT_DATE_FORMAT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        environ = os.environ if environ is None else environ
        return cls(
            secrets_path=get_default_secrets_file(environ),
            list_format=get_list_format(get_columns(environ), environ),
            date_format=environ.get("SECRETS_DATE_FORMAT") or DEFAULT_DATE_FORMAT,
        )
