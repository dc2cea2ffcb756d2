"""
writers.py

Physical output of the flattened table. A writer only needs ``write(rows, dest)``;
the CLI picks one by its format token.
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from .errors import UnknownFormatError

logger = logging.getLogger(__name__)

Table = Sequence[Sequence[Optional[str]]]


class TableWriter(Protocol):
    def write(self, rows: Table, destination: Path) -> None: ...


class CsvTableWriter:
    def write(self, rows: Table, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(rows)
        logger.info("Wrote %d rows to %s", max(len(rows) - 1, 0), destination)


class XlsxTableWriter:
    def __init__(self, sheet_title: str = "assumptions") -> None:
        self.sheet_title = sheet_title

    def write(self, rows: Table, destination: Path) -> None:
        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_title
        for row in rows:
            ws.append(list(row))
        if rows:
            for cell in ws[1]:
                cell.font = Font(bold=True)
            ws.freeze_panes = "A2"
        destination.parent.mkdir(parents=True, exist_ok=True)
        wb.save(destination)
        logger.info("Wrote %d rows to %s", max(len(rows) - 1, 0), destination)


WRITERS: dict[str, type] = {
    "csv": CsvTableWriter,
    "xlsx": XlsxTableWriter,
}


def get_writer(fmt: str) -> TableWriter:
    cls = WRITERS.get(fmt.lower())
    if cls is None:
        raise UnknownFormatError(fmt, list(WRITERS))
    return cls()
