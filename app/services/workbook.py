"""
Backing tabular store interface.

A workbook is a set of named sheets. Each sheet is an addressable 2-D cell
range whose first row is the header. Row and column numbers are 1-based,
matching spreadsheet addressing.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence


def is_blank(value: Any) -> bool:
    """True for empty cells (None or whitespace-only strings)"""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def cell_matches(cell: Any, value: Any) -> bool:
    """Equality used by column searches: compare cells by their text form"""
    if is_blank(cell) or is_blank(value):
        return False
    return cell_text(cell) == cell_text(value)


def cell_text(value: Any) -> str:
    """Text form of a cell; integral floats lose their trailing .0"""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class Sheet(ABC):
    """Primitive cell operations the row stores depend on"""

    name: str

    @abstractmethod
    def last_row(self) -> int:
        """Number of the last row holding any content (0 for an empty sheet)"""

    @abstractmethod
    def last_column(self) -> int:
        """Number of the last column holding any content (0 for an empty sheet)"""

    @abstractmethod
    def get_values(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[Any]]:
        """Read a rectangular block of cells"""

    @abstractmethod
    def set_value(self, row: int, column: int, value: Any) -> None:
        """Write a single cell"""

    def set_values(self, row: int, cells: Dict[int, Any]) -> None:
        """Write several cells of one row (column number -> value) as one operation"""
        for column, value in cells.items():
            self.set_value(row, column, value)

    @abstractmethod
    def append_row(self, values: Sequence[Any]) -> int:
        """Write values into the row after the last row; returns its number"""

    @abstractmethod
    def delete_row(self, row: int) -> None:
        """Remove a row, shifting every row below it up by one"""

    def find_in_column(self, column: int, value: Any, start_row: int = 1) -> Optional[int]:
        """
        Equality search down one column.

        Returns the first row number at or after start_row whose cell matches
        value, or None. Backends with a native search should override this.
        """
        last = self.last_row()
        if last < start_row:
            return None
        cells = self.get_values(start_row, column, last - start_row + 1, 1)
        for offset, (cell,) in enumerate(cells):
            if cell_matches(cell, value):
                return start_row + offset
        return None


class Workbook(ABC):
    """A collection of named sheets"""

    @abstractmethod
    def get_sheet(self, name: str) -> Optional[Sheet]:
        """Return the named sheet, or None if the workbook has no such sheet"""


class InMemorySheet(Sheet):
    """Sheet kept as a list of row lists"""

    def __init__(self, name: str, rows: Optional[Iterable[Sequence[Any]]] = None):
        self.name = name
        self._rows: List[List[Any]] = [list(r) for r in (rows or [])]

    def _trim(self) -> None:
        while self._rows and all(is_blank(c) for c in self._rows[-1]):
            self._rows.pop()

    def last_row(self) -> int:
        self._trim()
        return len(self._rows)

    def last_column(self) -> int:
        width = 0
        for row in self._rows:
            for index in range(len(row), 0, -1):
                if not is_blank(row[index - 1]):
                    width = max(width, index)
                    break
        return width

    def get_values(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[Any]]:
        block = []
        for r in range(row - 1, row - 1 + num_rows):
            source = self._rows[r] if r < len(self._rows) else []
            block.append([
                source[c] if c < len(source) else None
                for c in range(column - 1, column - 1 + num_columns)
            ])
        return block

    def set_value(self, row: int, column: int, value: Any) -> None:
        while len(self._rows) < row:
            self._rows.append([])
        target = self._rows[row - 1]
        while len(target) < column:
            target.append(None)
        target[column - 1] = value

    def append_row(self, values: Sequence[Any]) -> int:
        self._trim()
        self._rows.append(list(values))
        return len(self._rows)

    def delete_row(self, row: int) -> None:
        if 1 <= row <= len(self._rows):
            del self._rows[row - 1]

    def rows(self) -> List[List[Any]]:
        """Copy of every stored row, header included"""
        self._trim()
        return [list(r) for r in self._rows]


class InMemoryWorkbook(Workbook):
    """Workbook held entirely in memory; used for tests and demo mode"""

    def __init__(self, sheets: Optional[Dict[str, Iterable[Sequence[Any]]]] = None):
        self._sheets: Dict[str, InMemorySheet] = {}
        for name, rows in (sheets or {}).items():
            self.add_sheet(name, rows)

    def add_sheet(self, name: str, rows: Optional[Iterable[Sequence[Any]]] = None) -> InMemorySheet:
        sheet = InMemorySheet(name, rows)
        self._sheets[name] = sheet
        return sheet

    def get_sheet(self, name: str) -> Optional[Sheet]:
        return self._sheets.get(name)
