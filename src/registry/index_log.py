"""Append-only index log.

This module owns raw line IO for one package index file.
Records are appended with a single write and never rewritten in place.
Concurrent appenders from separate processes are only as atomic as the
filesystem makes one append-mode write; no locking is performed.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import PackageNotFoundError, RegistryIOError

_LINE_TERMINATOR = b"\n"


class IndexLog:
    """Newline-delimited record log backed by one file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def append(self, record: bytes) -> None:
        """Append one record followed by a newline.

        Args:
            record: Encoded record; must not contain a newline.

        Raises:
            ValueError: If the record spans more than one line.
            RegistryIOError: If the file cannot be opened or written.
        """
        if _LINE_TERMINATOR in record:
            raise ValueError("Index records must not contain newline bytes.")
        try:
            with self._path.open("ab") as handle:
                handle.write(record + _LINE_TERMINATOR)
        except OSError as error:
            raise RegistryIOError("append to index", self._path, error) from error

    def read_all(self) -> list[bytes]:
        """Read every non-blank record in append order.

        Returns:
            Records without line terminators.

        Raises:
            PackageNotFoundError: If the log file does not exist.
            RegistryIOError: If the file cannot be read.
        """
        try:
            with self._path.open("rb") as handle:
                return [line.rstrip(b"\r\n") for line in handle if line.strip()]
        except FileNotFoundError as error:
            raise PackageNotFoundError("Package index", self._path) from error
        except OSError as error:
            raise RegistryIOError("read index", self._path, error) from error
