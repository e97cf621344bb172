"""
Generic CRUD over one header-defined sheet.

A RowStore is parameterized by a TableDefinition (key columns, defaults, key
generation, lookup strategy) and an injected Workbook handle. The header row
is read once at construction; every later read and write projects through
that fixed field list.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.core.exceptions import ConflictError, SchemaError, ValidationError
from app.services.id_policy import now_iso
from app.services.table_schema import (
    CREATED_AT,
    UPDATED_AT,
    TableDefinition,
    TableSchema,
    schema_from_header,
)
from app.services.workbook import Sheet, Workbook, cell_matches, is_blank

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2

Located = Tuple[int, Dict[str, Any]]

CELL_TYPES = (str, int, float, bool, date, datetime, type(None))


class LinearScanLookup:
    """Find a record by deserializing every data row in order"""

    def locate(self, store: "RowStore", key: Any) -> Optional[Located]:
        pk_index = store.schema.primary_key_index
        for offset, row in enumerate(store.read_rows()):
            if pk_index < len(row) and cell_matches(row[pk_index], key):
                return FIRST_DATA_ROW + offset, store.schema.row_to_record(row)
        return None


class ColumnSearchLookup:
    """Find a record with the backend's equality search on the key column"""

    def locate(self, store: "RowStore", key: Any) -> Optional[Located]:
        row_number = store.sheet.find_in_column(
            store.schema.primary_key_index + 1, key, start_row=FIRST_DATA_ROW
        )
        if row_number is None:
            return None
        return row_number, store.read_record(row_number)


class RowStore:
    """CRUD operations for one table"""

    def __init__(self, workbook: Workbook, definition: TableDefinition):
        self.definition = definition
        self.sheet = self._open_sheet(workbook, definition)
        self.schema = self._read_schema(self.sheet, definition)
        self.lookup = ColumnSearchLookup() if definition.use_column_search else LinearScanLookup()

    @staticmethod
    def _open_sheet(workbook: Workbook, definition: TableDefinition) -> Sheet:
        try:
            sheet = workbook.get_sheet(definition.sheet_name)
        except FileNotFoundError as e:
            logger.error(f"Workbook for table {definition.name} not found: {e}")
            raise SchemaError(f"Workbook not found for sheet '{definition.sheet_name}'") from e
        if sheet is None:
            logger.error(f"Sheet '{definition.sheet_name}' not found for table {definition.name}")
            raise SchemaError(f"Sheet '{definition.sheet_name}' not found")
        return sheet

    @staticmethod
    def _read_schema(sheet: Sheet, definition: TableDefinition) -> TableSchema:
        width = sheet.last_column()
        header = sheet.get_values(1, 1, 1, width)[0] if width else []
        try:
            return schema_from_header(definition, header)
        except SchemaError as e:
            logger.error(f"Invalid schema for table {definition.name}: {e.message}")
            raise

    @property
    def name(self) -> str:
        return self.definition.name

    # ------------------------------------------------------------------
    # Raw row access
    # ------------------------------------------------------------------

    def read_rows(self) -> List[List[Any]]:
        """Every data row as raw cell values, header excluded"""
        last = self.sheet.last_row()
        if last < FIRST_DATA_ROW:
            return []
        return self.sheet.get_values(FIRST_DATA_ROW, 1, last - FIRST_DATA_ROW + 1, self.schema.width)

    def read_record(self, row_number: int) -> Dict[str, Any]:
        return self.schema.row_to_record(self.sheet.get_values(row_number, 1, 1, self.schema.width)[0])

    def _locate(self, key: Any) -> Optional[Located]:
        if is_blank(key):
            return None
        return self.lookup.locate(self, key)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self) -> List[Dict[str, Any]]:
        return [self.schema.row_to_record(row) for row in self.read_rows()]

    def count(self) -> int:
        return max(self.sheet.last_row() - 1, 0)

    def get_by_id(self, key: Any) -> Optional[Dict[str, Any]]:
        located = self._locate(key)
        return located[1] if located else None

    def get_by_foreign_key(self, value: Any) -> List[Dict[str, Any]]:
        """All records whose foreign-key column equals value, in row order"""
        fk_index = self.schema.foreign_key_index
        if fk_index is None:
            raise SchemaError(f"Table {self.name} has no foreign key")
        return [
            self.schema.row_to_record(row)
            for row in self.read_rows()
            if fk_index < len(row) and cell_matches(row[fk_index], value)
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Append a new record.

        Generates the primary key when the table has a key generator and the
        caller left it out, applies column defaults, and stamps created_at
        and updated_at.

        Returns:
            The record as written (no re-read from the sheet)

        Raises:
            ValidationError: a required field is missing or empty, or a value
                is not a single cell value
            ConflictError: the primary key already exists
        """
        if not isinstance(record, Mapping):
            raise ValidationError(f"{self.name} record must be a mapping")

        data = dict(record)
        for field_name in self.definition.required_fields:
            if is_blank(data.get(field_name)):
                raise ValidationError(f"Missing required field: {field_name}", field=field_name)
        self._check_cell_values(data)

        pk = self.definition.primary_key
        if is_blank(data.get(pk)):
            data[pk] = self._generate_key()
        elif self._locate(data[pk]) is not None:
            raise ConflictError(f"{self.name} with {pk} {data[pk]} already exists", key=str(data[pk]))

        for column, default in self.definition.defaults.items():
            if is_blank(data.get(column)):
                data[column] = default

        timestamp = now_iso()
        data[CREATED_AT] = timestamp
        data[UPDATED_AT] = timestamp

        row = self.schema.record_to_row(data)
        self.sheet.append_row(row)
        logger.info(f"Created {self.name} {data[pk]}")
        return self.schema.row_to_record(row)

    def _generate_key(self) -> str:
        generator = self.definition.key_generator
        for _ in range(max(self.definition.key_attempts, 1)):
            key = generator()
            if self._locate(key) is None:
                return key
            logger.warning(f"Generated {self.name} key {key} already exists, regenerating")
        raise ConflictError(
            f"Could not generate a unique {self.definition.primary_key} "
            f"after {self.definition.key_attempts} attempts"
        )

    def _check_cell_values(self, data: Mapping[str, Any]) -> None:
        """Reject values for header columns that a single cell cannot hold"""
        for name in self.schema.fields:
            if name and name in data and not isinstance(data[name], CELL_TYPES):
                raise ValidationError(
                    f"Field {name} must be a text, number, boolean or date value",
                    field=name,
                )

    def update(self, key: Any, partial: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Overwrite the cells named in partial on the row with this key.

        The primary-key column is never written. Columns absent from partial
        keep their values.

        Returns:
            The re-read record, or None if no row has this key
        """
        if not isinstance(partial, Mapping):
            raise ValidationError(f"{self.name} update must be a mapping")

        located = self._locate(key)
        if located is None:
            return None
        row_number = located[0]

        fk = self.definition.foreign_key
        if fk and fk in partial and is_blank(partial[fk]):
            raise ValidationError(f"Required field cannot be empty: {fk}", field=fk)

        changes = dict(partial)
        changes.pop(self.definition.primary_key, None)
        self._check_cell_values(changes)
        changes[UPDATED_AT] = now_iso()

        cells = {
            index + 1: "" if changes[name] is None else changes[name]
            for index, name in enumerate(self.schema.fields)
            if name and index != self.schema.primary_key_index and name in changes
        }
        self.sheet.set_values(row_number, cells)

        logger.info(f"Updated {self.name} {key}")
        return self.read_record(row_number)

    def delete(self, key: Any) -> bool:
        """Remove the row with this key; False if there is none"""
        located = self._locate(key)
        if located is None:
            return False
        self.sheet.delete_row(located[0])
        logger.info(f"Deleted {self.name} {key}")
        return True
