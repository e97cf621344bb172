"""
Excel Workbook Backend.
Serves the catalog sheets from an .xlsx file through openpyxl.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook as OpenpyxlWorkbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from app.services.workbook import Sheet, Workbook, cell_matches, is_blank

logger = logging.getLogger(__name__)


class ExcelSheet(Sheet):
    """One worksheet of an ExcelWorkbook"""

    def __init__(self, owner: "ExcelWorkbook", worksheet: Worksheet):
        self._owner = owner
        self._ws = worksheet
        self.name = worksheet.title

    def last_row(self) -> int:
        # openpyxl keeps max_row at 1 for an empty sheet and counts
        # rows whose cells were cleared, so scan back for real content
        for row in range(self._ws.max_row, 0, -1):
            values = next(self._ws.iter_rows(min_row=row, max_row=row, values_only=True), ())
            if any(not is_blank(v) for v in values):
                return row
        return 0

    def last_column(self) -> int:
        width = 0
        for values in self._ws.iter_rows(values_only=True):
            for index in range(len(values), 0, -1):
                if not is_blank(values[index - 1]):
                    width = max(width, index)
                    break
        return width

    def get_values(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[Any]]:
        if num_rows <= 0 or num_columns <= 0:
            return []
        return [
            list(values)
            for values in self._ws.iter_rows(
                min_row=row,
                max_row=row + num_rows - 1,
                min_col=column,
                max_col=column + num_columns - 1,
                values_only=True,
            )
        ]

    def set_value(self, row: int, column: int, value: Any) -> None:
        self._ws.cell(row=row, column=column, value=value)
        self._owner.mark_dirty()

    def set_values(self, row: int, cells: Dict[int, Any]) -> None:
        previous = {column: self._ws.cell(row=row, column=column).value for column in cells}
        try:
            for column, value in cells.items():
                self._ws.cell(row=row, column=column, value=value)
        except ValueError:
            for column, value in previous.items():
                self._ws.cell(row=row, column=column, value=value)
            raise
        self._owner.mark_dirty()

    def append_row(self, values: Sequence[Any]) -> int:
        row = self.last_row() + 1
        try:
            for column, value in enumerate(values, start=1):
                self._ws.cell(row=row, column=column, value=value)
        except ValueError:
            # openpyxl rejects values it cannot store; drop the partial row
            self._ws.delete_rows(row, 1)
            raise
        self._owner.mark_dirty()
        return row

    def delete_row(self, row: int) -> None:
        self._ws.delete_rows(row, 1)
        self._owner.mark_dirty()

    def find_in_column(self, column: int, value: Any, start_row: int = 1) -> Optional[int]:
        last = self.last_row()
        if last < start_row:
            return None
        for offset, (cell,) in enumerate(
            self._ws.iter_rows(min_row=start_row, max_row=last, min_col=column, max_col=column, values_only=True)
        ):
            if cell_matches(cell, value):
                return start_row + offset
        return None


class ExcelWorkbook(Workbook):
    """Loads and caches an .xlsx workbook; writes are saved back to the file"""

    def __init__(self, file_path: str, autosave: bool = True):
        self.file_path = file_path
        self.autosave = autosave
        self._book: Optional[OpenpyxlWorkbook] = None
        self._sheets: Dict[str, ExcelSheet] = {}

    def load(self) -> OpenpyxlWorkbook:
        """
        Open the workbook file on first use.

        Returns:
            The openpyxl workbook
        """
        if self._book is None:
            if not os.path.exists(self.file_path):
                raise FileNotFoundError(f"Workbook file not found at: {self.file_path}")
            self._book = load_workbook(self.file_path)
            logger.info(f"Loaded workbook {self.file_path} with sheets {self._book.sheetnames}")
        return self._book

    def get_sheet(self, name: str) -> Optional[Sheet]:
        book = self.load()
        if name not in book.sheetnames:
            return None
        if name not in self._sheets:
            self._sheets[name] = ExcelSheet(self, book[name])
        return self._sheets[name]

    def mark_dirty(self) -> None:
        if self.autosave:
            self.save()

    def save(self) -> None:
        if self._book is not None:
            self._book.save(self.file_path)

    def reload(self):
        """Drop the cached workbook so the next access re-reads the file"""
        self._book = None
        self._sheets = {}

    @staticmethod
    def create(file_path: str, headers: Dict[str, Sequence[str]], autosave: bool = True) -> "ExcelWorkbook":
        """Write a new workbook holding one sheet per entry of headers"""
        book = OpenpyxlWorkbook()
        book.remove(book.active)
        for sheet_name, columns in headers.items():
            ws = book.create_sheet(sheet_name)
            ws.append(list(columns))
        book.save(file_path)
        return ExcelWorkbook(file_path, autosave=autosave)
