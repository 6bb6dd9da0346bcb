from __future__ import annotations

import csv
import logging
import pathlib
from typing import Iterable, Iterator, Optional

from .errors import InvalidSelection, RecordFormatError, StoreNotFoundError
from .record import FIELD_NAMES, BatchRecord

logger = logging.getLogger(__name__)


def select_store(
    name: str,
    directory: str | pathlib.Path = "logs",
    extension: str = ".csv",
    must_exist: bool = True,
) -> pathlib.Path:
    """Resolve a log name typed by the user to a file under *directory*.

    The extension is appended when the name lacks it. With *must_exist* a
    missing file raises StoreNotFoundError.
    """
    name = (name or "").strip()
    if not name or name in (".", "..") or pathlib.PurePath(name).name != name or "\\" in name:
        raise InvalidSelection(f"Invalid log name: {name!r}")
    if extension and not name.endswith(extension):
        name += extension

    path = pathlib.Path(directory) / name
    if must_exist and not path.is_file():
        raise StoreNotFoundError(path)
    return path


# Rows carry the statistics formula after the record fields; one log holds one formula.
STORE_FIELDS = FIELD_NAMES + ("formula",)


def check_store(path: str | pathlib.Path, formula: str = "population") -> None:
    """Raise RecordFormatError unless rows written with *formula* can be appended to *path*."""
    path = pathlib.Path(path)
    if not path.is_file() or path.stat().st_size == 0:
        return
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        header = reader.fieldnames
        if header is None or tuple(header) != STORE_FIELDS:
            raise RecordFormatError(f"{path}: unexpected header {header}, expected {list(STORE_FIELDS)}")
        other = {row.get("formula") for row in reader} - {formula}
    if other:
        raise RecordFormatError(
            f"{path}: holds {', '.join(sorted(map(str, other)))} statistics, refusing to append {formula} rows"
        )


class BatchLog:
    """Append-only CSV log of batch records, one row per batch."""

    def __init__(self, path: str | pathlib.Path, formula: str = "population"):
        self.path = pathlib.Path(path)
        self.formula = formula
        self._file = None
        self._writer: Optional[csv.DictWriter] = None

    def __enter__(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        check_store(self.path, self.formula)
        self._file = self.path.open("a", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._file, fieldnames=STORE_FIELDS)
        if self._file.tell() == 0:
            self._writer.writeheader()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None

    def append(self, record: BatchRecord) -> None:
        if not self._writer:
            raise RuntimeError("BatchLog must be used as a context manager")
        self._writer.writerow({**record.to_row(), "formula": self.formula})
        self._file.flush()
        logger.info("Appended %s %s to %s", record.company, record.date, self.path)


def append_record(path: str | pathlib.Path, record: BatchRecord, formula: str = "population") -> None:
    with BatchLog(path, formula=formula) as log:
        log.append(record)


def read_records(path: str | pathlib.Path) -> Iterator[BatchRecord]:
    path = pathlib.Path(path)
    if not path.is_file():
        raise StoreNotFoundError(path)
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return
        if tuple(reader.fieldnames) != STORE_FIELDS:
            raise RecordFormatError(
                f"{path}: unexpected header {reader.fieldnames}, expected {list(STORE_FIELDS)}"
            )
        for row in reader:
            if None in row:
                raise RecordFormatError(f"{path}:{reader.line_num}: too many fields")
            try:
                yield BatchRecord.from_row(row)
            except RecordFormatError as e:
                raise RecordFormatError(f"{path}:{reader.line_num}: {e}") from None


def filter_by_supplier(records: Iterable[BatchRecord], company: str) -> Iterator[BatchRecord]:
    return (r for r in records if r.company == company)
